"""Relevance boost policy.

Every boost the query translator emits comes from one of the tables below,
so the ranking policy can be read and tested without building queries.
Ordering per field: exact > substring ~ fuzzy ~ autocomplete > prefix.
"""

from __future__ import annotations

from collections.abc import Mapping

from subnetsearch.core.types import MatchTier

RankingTable = Mapping[str, Mapping[MatchTier, float]]

# Unscoped multi-field search
RANKING_POLICY: RankingTable = {
    "CLUSTERID": {
        MatchTier.EXACT: 3.0,
        MatchTier.SUBSTRING: 2.5,
        MatchTier.AUTOCOMPLETE: 2.0,
        MatchTier.PREFIX: 1.5,
    },
    "SITE": {
        MatchTier.EXACT: 3.0,
        MatchTier.SUBSTRING: 2.5,
        MatchTier.AUTOCOMPLETE: 2.0,
        MatchTier.PREFIX: 1.5,
    },
    "USERNAME": {
        MatchTier.EXACT: 2.0,
        MatchTier.SUBSTRING: 1.5,
        MatchTier.PREFIX: 1.0,
    },
    "DESCRIPTION": {
        MatchTier.SUBSTRING: 2.0,
        MatchTier.FUZZY: 2.0,
    },
}

# Search scoped to one exact-kind field
FIELD_SCOPED_WEIGHTS: Mapping[MatchTier, float] = {
    MatchTier.EXACT: 3.0,
    MatchTier.SUBSTRING: 2.0,
    MatchTier.PREFIX: 1.5,
}

# Autocomplete without a named field
AUTOCOMPLETE_POLICY: RankingTable = {
    "CLUSTERID": {MatchTier.PREFIX: 3.0, MatchTier.AUTOCOMPLETE: 2.5},
    "SITE": {MatchTier.PREFIX: 3.0, MatchTier.AUTOCOMPLETE: 2.5},
    "USERNAME": {MatchTier.PREFIX: 2.0},
    "DESCRIPTION": {MatchTier.SUBSTRING: 1.0},
}


def fields_for(table: RankingTable, tier: MatchTier) -> list[tuple[str, float]]:
    """Return ``(field, weight)`` pairs that participate in ``tier``, in table order."""
    return [(field, weights[tier]) for field, weights in table.items() if tier in weights]
