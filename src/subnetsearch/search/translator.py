"""Translation of search requests into Elasticsearch query DSL.

Validation of request parameters happens here so that every entry point,
HTTP or programmatic, sees the same rules.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from subnetsearch.core.exceptions import ValidationError
from subnetsearch.core.types import FieldKind, Fuzziness, MatchTier, SortOrder
from subnetsearch.search.models import (
    AdvancedSearchRequest,
    AutocompleteRequest,
    SearchLimits,
    SearchRequest,
    TranslatedQuery,
)
from subnetsearch.search.ranking import (
    AUTOCOMPLETE_POLICY,
    FIELD_SCOPED_WEIGHTS,
    RANKING_POLICY,
    RankingTable,
    fields_for,
)
from subnetsearch.search.schema import (
    AUTOCOMPLETE_FIELDS,
    FACET_SIZE,
    FACETS,
    HIGHLIGHT_FIELDS,
    MATCH_ALL_TOKEN,
    RELEVANCE,
    SEARCHABLE_FIELDS,
    SORTABLE_FIELDS,
    TIMESTAMP_FIELD,
    resolve_field,
)

logger = logging.getLogger(__name__)

_SORT_ALIASES = {"relevance": RELEVANCE, "score": RELEVANCE}
_WILDCARD_SPECIALS = ("\\", "*", "?")


def escape_wildcard(value: str) -> str:
    """Escape characters that carry meaning inside a wildcard pattern."""
    for char in _WILDCARD_SPECIALS:
        value = value.replace(char, f"\\{char}")
    return value


def match_all() -> dict[str, Any]:
    return {"match_all": {}}


def _term(field: str, value: str, boost: float) -> dict[str, Any]:
    return {"term": {field: {"value": value, "case_insensitive": True, "boost": boost}}}


def _contains(field: str, value: str, boost: float | None = None) -> dict[str, Any]:
    clause: dict[str, Any] = {"value": f"*{escape_wildcard(value)}*", "case_insensitive": True}
    if boost is not None:
        clause["boost"] = boost
    return {"wildcard": {field: clause}}


def _prefix(field: str, value: str, boost: float | None = None) -> dict[str, Any]:
    clause: dict[str, Any] = {"value": value, "case_insensitive": True}
    if boost is not None:
        clause["boost"] = boost
    return {"prefix": {field: clause}}


def _match(field: str, value: str, boost: float | None = None, fuzziness: str | None = None) -> dict[str, Any]:
    clause: dict[str, Any] = {"query": value}
    if fuzziness is not None:
        clause["fuzziness"] = fuzziness
    if boost is not None:
        clause["boost"] = boost
    return {"match": {field: clause}}


def _any_of(clauses: list[dict[str, Any]]) -> dict[str, Any]:
    return {"bool": {"should": clauses, "minimum_should_match": 1}}


class QueryTranslator:
    """
    Builds native queries for free-text, field-scoped, advanced and
    autocomplete searches.

    Args:
        limits: Pagination and autocomplete bounds
        ranking: Boost table for unscoped multi-field search
        strict_sort: Reject unknown sort fields and directions instead of
            falling back to relevance descending
    """

    def __init__(
        self,
        limits: SearchLimits | None = None,
        ranking: RankingTable = RANKING_POLICY,
        strict_sort: bool = False,
    ) -> None:
        self.limits = limits or SearchLimits()
        self.ranking = ranking
        self.strict_sort = strict_sort

    # =========================================================================
    # Entry points
    # =========================================================================

    def translate(self, request: SearchRequest) -> TranslatedQuery:
        """
        Translate a free-text or field-scoped search.

        Raises:
            ValidationError: If a parameter is missing or out of range
        """
        q = self._require_query(request.q)
        self._validate_page(request.size, request.offset)
        fuzziness = self._validate_fuzziness(request.fuzziness)

        if q == MATCH_ALL_TOKEN:
            query = match_all()
        elif request.field:
            query = self.field_query(q, self._validate_field(request.field), request.fuzzy, fuzziness)
        else:
            query = self.multi_field_query(q, request.fuzzy, fuzziness)

        return TranslatedQuery(
            query=query,
            sort=self.build_sort(request.sort_by, request.sort_order),
            size=request.size,
            offset=request.offset,
            highlight=self.highlight(),
        )

    def translate_advanced(self, request: AdvancedSearchRequest) -> TranslatedQuery:
        """Translate a filtered search with facet aggregations."""
        self._validate_page(request.size, request.offset)

        must: list[dict[str, Any]] = []
        filters: list[dict[str, Any]] = []

        q = (request.q or "").strip()
        if q and q != MATCH_ALL_TOKEN:
            must.append(self.multi_field_query(q, False, Fuzziness.AUTO.value))

        for values, field in (
            (request.sites, FACETS["sites"]),
            (request.clusters, FACETS["clusters"]),
            (request.usernames, FACETS["usernames"]),
        ):
            members = [value.strip() for value in values if value and value.strip()]
            if members:
                filters.append({"terms": {field: members}})

        date_range: dict[str, str] = {}
        if request.date_from:
            date_range["gte"] = self._validate_date(request.date_from, "dateFrom")
        if request.date_to:
            date_range["lte"] = self._validate_date(request.date_to, "dateTo")
        if date_range:
            filters.append({"range": {TIMESTAMP_FIELD: date_range}})

        if must or filters:
            query: dict[str, Any] = {"bool": {"must": must, "filter": filters}}
        else:
            query = match_all()

        return TranslatedQuery(
            query=query,
            sort=self.build_sort(request.sort_by, request.sort_order),
            size=request.size,
            offset=request.offset,
            aggregations={
                name: {"terms": {"field": field, "size": FACET_SIZE}} for name, field in FACETS.items()
            },
        )

    def translate_autocomplete(self, request: AutocompleteRequest) -> TranslatedQuery:
        """Translate an autocomplete lookup; the source is limited to suggestion fields."""
        q = self._require_query(request.q)
        if not 1 <= request.size <= self.limits.max_autocomplete_size:
            raise ValidationError(
                f"Size must be between 1 and {self.limits.max_autocomplete_size}",
                field="size",
            )

        if request.field:
            field = self._validate_field(request.field)
            query = _any_of([_prefix(field, q), _contains(field, q)])
            source = [field]
        else:
            clauses: list[dict[str, Any]] = []
            for name, weight in fields_for(AUTOCOMPLETE_POLICY, MatchTier.PREFIX):
                clauses.append(_prefix(name, q, weight))
            for name, weight in fields_for(AUTOCOMPLETE_POLICY, MatchTier.AUTOCOMPLETE):
                clauses.append(_match(f"{name}.autocomplete", q, weight))
            for name, weight in fields_for(AUTOCOMPLETE_POLICY, MatchTier.SUBSTRING):
                clauses.append(_contains(name, q, weight))
            query = _any_of(clauses)
            source = list(AUTOCOMPLETE_FIELDS)

        return TranslatedQuery(query=query, size=request.size, offset=0, source_includes=source)

    # =========================================================================
    # Query builders
    # =========================================================================

    def multi_field_query(self, q: str, fuzzy: bool, fuzziness: str) -> dict[str, Any]:
        """Weighted disjunction across identifier and free-text fields."""
        clauses: list[dict[str, Any]] = []
        for field, weight in fields_for(self.ranking, MatchTier.EXACT):
            clauses.append(_term(field, q, weight))
        for field, weight in fields_for(self.ranking, MatchTier.SUBSTRING):
            clauses.append(_contains(field, q, weight))
        for field, weight in fields_for(self.ranking, MatchTier.FUZZY):
            clauses.append(_match(field, q, weight, fuzziness if fuzzy else "0"))
        for field, weight in fields_for(self.ranking, MatchTier.AUTOCOMPLETE):
            clauses.append(_match(f"{field}.autocomplete", q, weight))
        for field, weight in fields_for(self.ranking, MatchTier.PREFIX):
            clauses.append(_prefix(field, q, weight))
        return _any_of(clauses)

    def field_query(self, q: str, field: str, fuzzy: bool, fuzziness: str) -> dict[str, Any]:
        """Query restricted to one allow-listed field."""
        if SEARCHABLE_FIELDS[field] is FieldKind.TEXT:
            return _match(field, q, fuzziness=fuzziness if fuzzy else "0")

        return _any_of(
            [
                _term(field, q, FIELD_SCOPED_WEIGHTS[MatchTier.EXACT]),
                _contains(field, q, FIELD_SCOPED_WEIGHTS[MatchTier.SUBSTRING]),
                _prefix(field, q, FIELD_SCOPED_WEIGHTS[MatchTier.PREFIX]),
            ]
        )

    def build_sort(self, sort_by: str | None, sort_order: str | None) -> list[dict[str, Any]]:
        """
        Build the sort specification.

        Unknown fields fall back to relevance and unknown directions to
        descending, unless strict sort validation is enabled. Non-relevance
        sorts get relevance descending as a tie-break.
        """
        field = RELEVANCE
        if sort_by:
            candidate = _SORT_ALIASES.get(sort_by.lower(), sort_by)
            if candidate not in SORTABLE_FIELDS:
                candidate = candidate.upper()
            if candidate in SORTABLE_FIELDS:
                field = candidate
            elif self.strict_sort:
                raise ValidationError(f"Invalid sort field: {sort_by}", field="sortBy")
            else:
                logger.debug(f"Unknown sort field '{sort_by}', using relevance")

        order = SortOrder.DESC
        if sort_order:
            try:
                order = SortOrder(sort_order.lower())
            except ValueError:
                if self.strict_sort:
                    raise ValidationError("Sort order must be one of: asc, desc", field="sortOrder")

        if field == RELEVANCE:
            return [{RELEVANCE: {"order": order.value}}]
        return [{field: {"order": order.value}}, {RELEVANCE: {"order": SortOrder.DESC.value}}]

    @staticmethod
    def highlight() -> dict[str, Any]:
        return {
            "fields": {field: {"type": "unified"} for field in HIGHLIGHT_FIELDS},
            "pre_tags": ["<mark>"],
            "post_tags": ["</mark>"],
        }

    # =========================================================================
    # Validation
    # =========================================================================

    @staticmethod
    def _require_query(q: str | None) -> str:
        q = (q or "").strip()
        if not q:
            raise ValidationError('Query parameter "q" is required', field="q")
        return q

    def _validate_page(self, size: int, offset: int) -> None:
        if not 1 <= size <= self.limits.max_size:
            raise ValidationError(f"Size must be between 1 and {self.limits.max_size}", field="size")
        if offset < 0:
            raise ValidationError("From must be a non-negative integer", field="from")
        if offset + size > self.limits.max_result_window:
            raise ValidationError(
                f"From + size must not exceed {self.limits.max_result_window}",
                field="from",
            )

    @staticmethod
    def _validate_field(name: str) -> str:
        field = resolve_field(name)
        if field is None:
            allowed = ", ".join(SEARCHABLE_FIELDS)
            raise ValidationError(f"Invalid field: {name}. Must be one of: {allowed}", field="field")
        return field

    @staticmethod
    def _validate_fuzziness(value: str | None) -> str:
        if value is None:
            return Fuzziness.AUTO.value
        try:
            return Fuzziness(value.strip().upper()).value
        except ValueError:
            raise ValidationError("Fuzziness must be AUTO, 0, 1, or 2", field="fuzziness") from None

    @staticmethod
    def _validate_date(value: str, name: str) -> str:
        """Accept an ISO-8601 date or datetime; the original text is passed through."""
        value = value.strip()
        try:
            datetime.fromisoformat(value)
        except ValueError:
            raise ValidationError(
                f"{name} must be an ISO-8601 date or datetime, got {value!r}",
                field=name,
            ) from None
        return value
