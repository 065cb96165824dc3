"""Search request and result types shared by the translator, formatter and searcher."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from subnetsearch.core.types import TotalRelation


@dataclass(frozen=True)
class SearchLimits:
    """Configured bounds for pagination and autocomplete."""

    max_size: int = 100
    max_autocomplete_size: int = 20
    max_result_window: int = 10000
    max_suggestions: int = 10


@dataclass
class SearchRequest:
    """Free-text or field-scoped search."""

    q: str
    field: str | None = None
    fuzzy: bool = False
    fuzziness: str = "AUTO"
    size: int = 10
    offset: int = 0
    sort_by: str | None = None
    sort_order: str | None = None


@dataclass
class AdvancedSearchRequest:
    """Search combining an optional text clause with membership and date filters."""

    q: str | None = None
    sites: list[str] = field(default_factory=list)
    clusters: list[str] = field(default_factory=list)
    usernames: list[str] = field(default_factory=list)
    date_from: str | None = None
    date_to: str | None = None
    size: int = 10
    offset: int = 0
    sort_by: str | None = None
    sort_order: str | None = None


@dataclass
class AutocompleteRequest:
    """Prefix/substring suggestion lookup."""

    q: str
    size: int = 5
    field: str | None = None


@dataclass
class TranslatedQuery:
    """Native query pieces ready to send to the index engine."""

    query: dict[str, Any]
    sort: list[dict[str, Any]] | None = None
    size: int = 10
    offset: int = 0
    highlight: dict[str, Any] | None = None
    aggregations: dict[str, Any] | None = None
    source_includes: list[str] | None = None

    def to_search_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``AsyncElasticsearch.search``."""
        kwargs: dict[str, Any] = {
            "query": self.query,
            "size": self.size,
            "from_": self.offset,
        }
        if self.sort is not None:
            kwargs["sort"] = self.sort
        if self.highlight is not None:
            kwargs["highlight"] = self.highlight
        if self.aggregations is not None:
            kwargs["aggs"] = self.aggregations
        if self.source_includes is not None:
            kwargs["source_includes"] = self.source_includes
        return kwargs


@dataclass
class SearchTotal:
    """Hit count with its exactness flag."""

    value: int = 0
    relation: TotalRelation = TotalRelation.EQ


@dataclass
class SearchHit:
    """A single scored match."""

    id: str
    score: float | None
    source: dict[str, Any]
    highlight: dict[str, list[str]] = field(default_factory=dict)


@dataclass
class AggregationBucket:
    """Document count for one distinct facet value."""

    key: str
    count: int


@dataclass
class SearchResult:
    """Normalized response of a search call."""

    total: SearchTotal = field(default_factory=SearchTotal)
    hits: list[SearchHit] = field(default_factory=list)
    aggregations: dict[str, list[AggregationBucket]] | None = None


@dataclass(frozen=True)
class Suggestion:
    """An autocomplete suggestion and the field it came from."""

    text: str
    type: str


@dataclass(frozen=True)
class IndexDocument:
    """A record's projection: index identifier plus document body."""

    id: str
    body: dict[str, Any]


@dataclass(frozen=True)
class BulkItemError:
    """A document the index engine rejected during a bulk write."""

    id: str
    status: int
    error_type: str | None = None
    reason: str | None = None


@dataclass
class BulkWriteResult:
    """Outcome of one bulk write call."""

    indexed: int = 0
    errors: list[BulkItemError] = field(default_factory=list)
