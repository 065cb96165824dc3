"""Search endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from subnetsearch.api.dependencies import SearchSvc
from subnetsearch.api.schemas import (
    AdvancedSearchResponse,
    AutocompleteResponse,
    DocumentResponse,
    SearchResponse,
)
from subnetsearch.search.models import AdvancedSearchRequest, SearchRequest

router = APIRouter(prefix="/search", tags=["search"])


def split_list(value: str | None) -> list[str]:
    """Split a comma-separated parameter, dropping blank entries."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@router.get(
    "",
    response_model=SearchResponse,
    operation_id="search",
    summary="Search subnets",
    description="Free-text search across identifier and description fields, or within one field.",
)
async def search(
    search_service: SearchSvc,
    q: str | None = Query(None, description='Search text; "*" matches everything'),
    field: str | None = Query(None, description="Restrict matching to one field"),
    fuzzy: bool = Query(False, description="Allow approximate free-text matches"),
    fuzziness: str = Query("AUTO", description="Edit distance: AUTO, 0, 1 or 2"),
    size: int = Query(10, description="Results per page"),
    from_: int = Query(0, alias="from", description="Offset of the first result"),
    sort_by: str | None = Query(None, alias="sortBy", description="Sort field or 'relevance'"),
    sort_order: str | None = Query(None, alias="sortOrder", description="asc or desc"),
) -> SearchResponse:
    """Search subnet documents."""
    return await search_service.search(
        SearchRequest(
            q=q or "",
            field=field,
            fuzzy=fuzzy,
            fuzziness=fuzziness,
            size=size,
            offset=from_,
            sort_by=sort_by,
            sort_order=sort_order,
        )
    )


@router.get(
    "/autocomplete",
    response_model=AutocompleteResponse,
    operation_id="autocomplete",
    summary="Autocomplete",
    description="Distinct field values matching a prefix or substring.",
)
async def autocomplete(
    search_service: SearchSvc,
    q: str | None = Query(None, description="Partial input"),
    size: int = Query(5, description="Number of documents scanned for suggestions"),
    field: str | None = Query(None, description="Draw suggestions from this field only"),
) -> AutocompleteResponse:
    """Suggest completions for partial input."""
    payload = await search_service.autocomplete(q or "", size=size, field=field)
    return AutocompleteResponse.model_validate(payload)


@router.get(
    "/advanced",
    response_model=AdvancedSearchResponse,
    operation_id="advancedSearch",
    summary="Advanced search",
    description="Text search combined with site, cluster, username and date filters, with facet counts.",
)
async def advanced_search(
    search_service: SearchSvc,
    q: str | None = Query(None, description="Optional search text"),
    sites: str | None = Query(None, description="Comma-separated sites"),
    clusters: str | None = Query(None, description="Comma-separated cluster ids"),
    usernames: str | None = Query(None, description="Comma-separated usernames"),
    date_from: str | None = Query(None, alias="dateFrom", description="Inclusive lower TIMESTAMP bound"),
    date_to: str | None = Query(None, alias="dateTo", description="Inclusive upper TIMESTAMP bound"),
    size: int = Query(10, description="Results per page"),
    from_: int = Query(0, alias="from", description="Offset of the first result"),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_order: str | None = Query(None, alias="sortOrder"),
) -> AdvancedSearchResponse:
    """Filtered search with aggregations."""
    return await search_service.search_advanced(
        AdvancedSearchRequest(
            q=q,
            sites=split_list(sites),
            clusters=split_list(clusters),
            usernames=split_list(usernames),
            date_from=date_from,
            date_to=date_to,
            size=size,
            offset=from_,
            sort_by=sort_by,
            sort_order=sort_order,
        )
    )


@router.get(
    "/document/{document_id}",
    response_model=DocumentResponse,
    operation_id="getDocument",
    summary="Get document",
    description="Fetch a single index document by its record id.",
    responses={404: {"description": "Document or index not found"}},
)
async def get_document(document_id: str, search_service: SearchSvc) -> DocumentResponse:
    """Get a document by id."""
    return await search_service.get_document(document_id)
