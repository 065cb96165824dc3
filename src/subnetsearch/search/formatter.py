"""Normalization of raw Elasticsearch responses into API result types."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from subnetsearch.core.types import TotalRelation
from subnetsearch.search.models import (
    AggregationBucket,
    SearchHit,
    SearchResult,
    SearchTotal,
    Suggestion,
)
from subnetsearch.search.schema import AUTOCOMPLETE_FIELDS

MAX_SUGGESTIONS = 10


def response_payload(raw: Any) -> Mapping[str, Any]:
    """
    Unwrap a raw search response into its payload mapping.

    Client versions differ in how the payload is nested: the 8.x client returns
    an ``ObjectApiResponse`` exposing ``.body``, older clients return
    ``{"body": {...}}``. The unnested shape is tried first, then the nested one.
    """
    if raw is None:
        return {}
    body = getattr(raw, "body", raw)
    if not isinstance(body, Mapping):
        return {}
    if "hits" in body or "aggregations" in body:
        return body
    nested = body.get("body")
    if isinstance(nested, Mapping):
        return nested
    return body


def format_total(raw_total: Any) -> SearchTotal:
    """Read a total as ``{value, relation}``; bare integers are exact counts."""
    if isinstance(raw_total, Mapping):
        try:
            relation = TotalRelation(raw_total.get("relation", TotalRelation.EQ))
        except ValueError:
            relation = TotalRelation.EQ
        return SearchTotal(value=int(raw_total.get("value") or 0), relation=relation)
    if isinstance(raw_total, int):
        return SearchTotal(value=raw_total, relation=TotalRelation.EQ)
    return SearchTotal()


def format_hit(raw_hit: Mapping[str, Any]) -> SearchHit:
    return SearchHit(
        id=str(raw_hit.get("_id", "")),
        score=raw_hit.get("_score"),
        source=dict(raw_hit.get("_source") or {}),
        highlight=dict(raw_hit.get("highlight") or {}),
    )


def format_aggregations(raw_aggs: Mapping[str, Any] | None) -> dict[str, list[AggregationBucket]]:
    """Flatten terms aggregations into ``name -> [bucket]``."""
    result: dict[str, list[AggregationBucket]] = {}
    for name, agg in (raw_aggs or {}).items():
        buckets = agg.get("buckets", []) if isinstance(agg, Mapping) else []
        result[name] = [
            AggregationBucket(key=str(bucket.get("key")), count=int(bucket.get("doc_count", 0)))
            for bucket in buckets
        ]
    return result


def format_search_result(raw: Any, include_aggregations: bool = False) -> SearchResult:
    """
    Build a SearchResult from a raw response.

    Missing hits, totals or aggregations default to empty values rather than
    raising.
    """
    payload = response_payload(raw)
    hits_section = payload.get("hits") or {}

    result = SearchResult(
        total=format_total(hits_section.get("total")),
        hits=[format_hit(hit) for hit in hits_section.get("hits") or []],
    )
    if include_aggregations:
        result.aggregations = format_aggregations(payload.get("aggregations"))
    return result


def format_suggestions(
    hits: Iterable[SearchHit],
    query: str,
    field: str | None = None,
    limit: int = MAX_SUGGESTIONS,
) -> list[Suggestion]:
    """
    Collect distinct field values containing ``query`` (case-insensitive).

    With ``field`` only that field is considered; otherwise fields are scanned
    in priority order. Each suggestion records the field it came from.
    """
    needle = query.strip().lower()
    fields = (field,) if field else AUTOCOMPLETE_FIELDS
    seen: set[str] = set()
    suggestions: list[Suggestion] = []

    for hit in hits:
        for name in fields:
            value = hit.source.get(name)
            if not isinstance(value, str) or needle not in value.lower():
                continue
            if value in seen:
                continue
            seen.add(value)
            suggestions.append(Suggestion(text=value, type=name))
            if len(suggestions) >= limit:
                return suggestions
    return suggestions
