"""Index layout: field names, searchable field allow-list, settings and mappings."""

from __future__ import annotations

from typing import Any

from subnetsearch.core.types import FieldKind

# Record attribute -> index field, in projection order
INDEX_FIELDS: dict[str, str] = {
    "cluster_id": "CLUSTERID",
    "cidr": "CIDR",
    "cidr_ipv4": "CIDRIPV4",
    "ipv4": "IPV4",
    "ip": "IP",
    "site": "SITE",
    "description": "DESCRIPTION",
    "timestamp": "TIMESTAMP",
    "username": "USERNAME",
}

# Fields a search request may target with ``field=``
SEARCHABLE_FIELDS: dict[str, FieldKind] = {
    "CLUSTERID": FieldKind.EXACT,
    "SITE": FieldKind.EXACT,
    "DESCRIPTION": FieldKind.TEXT,
    "USERNAME": FieldKind.EXACT,
    "CIDR": FieldKind.EXACT,
    "CIDRIPV4": FieldKind.EXACT,
}

# Fields carrying an edge-ngram ``.autocomplete`` subfield
AUTOCOMPLETE_SUBFIELDS: frozenset[str] = frozenset({"CLUSTERID", "SITE", "DESCRIPTION"})

IDENTIFIER_FIELDS: tuple[str, ...] = ("CLUSTERID", "SITE", "USERNAME")
PRIMARY_TEXT_FIELD = "DESCRIPTION"
TIMESTAMP_FIELD = "TIMESTAMP"

# Suggestion inputs, in priority order
SUGGEST_FIELDS: tuple[str, ...] = ("CLUSTERID", "SITE", "DESCRIPTION")

# Fields scanned for autocomplete suggestions when no field is named
AUTOCOMPLETE_FIELDS: tuple[str, ...] = ("CLUSTERID", "SITE", "USERNAME", "DESCRIPTION")

RELEVANCE = "_score"
SORTABLE_FIELDS: frozenset[str] = frozenset({RELEVANCE, "TIMESTAMP", "CLUSTERID", "SITE", "USERNAME"})

HIGHLIGHT_FIELDS: tuple[str, ...] = (
    "CLUSTERID",
    "SITE",
    "DESCRIPTION",
    "USERNAME",
    "CLUSTERID.autocomplete",
    "SITE.autocomplete",
)

# Advanced search facets: response key -> index field
FACETS: dict[str, str] = {
    "sites": "SITE",
    "clusters": "CLUSTERID",
    "usernames": "USERNAME",
}
FACET_SIZE = 10

MATCH_ALL_TOKEN = "*"

INDEX_SETTINGS: dict[str, Any] = {
    "analysis": {
        "analyzer": {
            "autocomplete_analyzer": {
                "type": "custom",
                "tokenizer": "standard",
                "filter": ["lowercase", "autocomplete_filter"],
            }
        },
        "filter": {
            "autocomplete_filter": {
                "type": "edge_ngram",
                "min_gram": 1,
                "max_gram": 20,
            }
        },
    }
}

_AUTOCOMPLETE_SUBFIELD = {
    "autocomplete": {
        "type": "text",
        "analyzer": "autocomplete_analyzer",
        "search_analyzer": "standard",
    }
}

INDEX_MAPPINGS: dict[str, Any] = {
    "properties": {
        "CLUSTERID": {"type": "keyword", "fields": _AUTOCOMPLETE_SUBFIELD},
        "CIDR": {"type": "keyword"},
        "CIDRIPV4": {"type": "keyword"},
        "IPV4": {"type": "ip"},
        "IP": {"type": "ip"},
        "SITE": {"type": "keyword", "fields": _AUTOCOMPLETE_SUBFIELD},
        "DESCRIPTION": {"type": "text", "fields": _AUTOCOMPLETE_SUBFIELD},
        "TIMESTAMP": {"type": "date"},
        "USERNAME": {"type": "keyword"},
        "suggest": {"type": "completion"},
    }
}


def resolve_field(name: str) -> str | None:
    """Return the canonical searchable field for ``name`` (case-insensitive), if any."""
    candidate = name.strip().upper()
    return candidate if candidate in SEARCHABLE_FIELDS else None
