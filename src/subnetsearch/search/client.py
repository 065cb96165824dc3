"""Async Elasticsearch client wrapper."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterable, Iterator, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from elasticsearch import (
    ApiError,
    AsyncElasticsearch,
    ConnectionError as ESConnectionError,
    ConnectionTimeout,
    NotFoundError as ESNotFoundError,
    TransportError,
)
from elasticsearch.helpers import async_scan

from subnetsearch.core.exceptions import (
    BackingStoreUnavailableError,
    DocumentNotFoundError,
    IndexNotFoundError,
    SearchError,
)
from subnetsearch.search.models import (
    BulkItemError,
    BulkWriteResult,
    IndexDocument,
    TranslatedQuery,
)
from subnetsearch.search.schema import INDEX_MAPPINGS, INDEX_SETTINGS

if TYPE_CHECKING:
    from subnetsearch.config import SubnetSearchSettings

logger = logging.getLogger(__name__)

STORE_NAME = "elasticsearch"


def _error_type(exc: ApiError) -> str | None:
    body = exc.body
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return error.get("type")
    return None


def is_index_missing(exc: ApiError) -> bool:
    """True when a 404 was caused by a missing index rather than a missing document."""
    return isinstance(exc, ESNotFoundError) and _error_type(exc) == "index_not_found_exception"


class AsyncIndexClient:
    """
    Async wrapper for the subnet search index.

    Every call is bound to a single index. Engine exceptions are translated
    into the subnetsearch hierarchy here so that nothing above this layer
    depends on the Elasticsearch client.
    """

    def __init__(
        self,
        url: str,
        index_name: str,
        *,
        api_key: str | None = None,
        username: str | None = None,
        password: str | None = None,
        request_timeout: float = 10.0,
        status_timeout: float = 3.0,
        bulk_timeout: float = 120.0,
        refresh_on_write: bool = False,
        client: AsyncElasticsearch | None = None,
    ) -> None:
        """
        Initialize the index client.

        Args:
            url: Elasticsearch node URL
            index_name: Index that holds the subnet documents
            api_key: Optional API key for authentication
            username: Optional basic-auth username
            password: Optional basic-auth password
            request_timeout: Timeout in seconds for reads and single writes
            status_timeout: Timeout in seconds for health and count calls
            bulk_timeout: Timeout in seconds for bulk writes
            refresh_on_write: Refresh after single-document writes
            client: Pre-built client, mainly for tests
        """
        self._url = url
        self._api_key = api_key
        self._basic_auth = (username, password) if username and password else None
        self.index_name = index_name
        self.request_timeout = request_timeout
        self.status_timeout = status_timeout
        self.bulk_timeout = bulk_timeout
        self.refresh_on_write = refresh_on_write
        self._client = client

    @classmethod
    def from_settings(cls, settings: SubnetSearchSettings) -> AsyncIndexClient:
        return cls(
            settings.elasticsearch_url,
            settings.index_name,
            api_key=settings.elasticsearch_api_key,
            username=settings.elasticsearch_username,
            password=settings.elasticsearch_password,
            request_timeout=settings.index_request_timeout,
            status_timeout=settings.index_status_timeout,
            bulk_timeout=settings.index_bulk_timeout,
            refresh_on_write=settings.refresh_on_write,
        )

    def _get_client(self) -> AsyncElasticsearch:
        """Get or create the async client."""
        if self._client is None:
            self._client = AsyncElasticsearch(
                self._url,
                api_key=self._api_key,
                basic_auth=self._basic_auth,
            )
        return self._client

    def _with_timeout(self, timeout: float) -> AsyncElasticsearch:
        return self._get_client().options(request_timeout=timeout)

    async def close(self) -> None:
        """Close the client connection."""
        if self._client is not None:
            await self._client.close()
            self._client = None

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except (ESConnectionError, ConnectionTimeout) as e:
            logger.error(f"Index engine unreachable during {operation}: {e}")
            raise BackingStoreUnavailableError(
                f"Search engine unavailable: {e}",
                store=STORE_NAME,
                details={"operation": operation},
            ) from e
        except ApiError as e:
            if is_index_missing(e):
                raise IndexNotFoundError(self.index_name) from e
            logger.error(f"Index engine error during {operation}: {e}")
            raise SearchError(
                f"Search operation '{operation}' failed: {e}",
                details={"operation": operation, "status": e.meta.status},
            ) from e
        except TransportError as e:
            logger.error(f"Index engine transport error during {operation}: {e}")
            raise SearchError(f"Search operation '{operation}' failed: {e}") from e

    # =========================================================================
    # Index management
    # =========================================================================

    async def health(self) -> bool:
        """Check if the cluster answers a ping."""
        try:
            return bool(await self._with_timeout(self.status_timeout).ping())
        except (TransportError, ApiError) as e:
            logger.warning(f"Elasticsearch health check failed: {e}")
            return False

    async def setup_index(self) -> bool:
        """
        Create the index with its settings and mappings if it does not exist.

        Returns:
            True if the index was created, False if it already existed
        """
        with self._translate_errors("setup_index"):
            client = self._with_timeout(self.request_timeout)
            if await client.indices.exists(index=self.index_name):
                logger.debug(f"Index already exists: {self.index_name}")
                return False
            logger.info(f"Creating index: {self.index_name}")
            await client.indices.create(
                index=self.index_name,
                settings=INDEX_SETTINGS,
                mappings=INDEX_MAPPINGS,
            )
            return True

    async def count(self) -> int:
        """Number of documents in the index; a missing index counts as zero."""
        try:
            with self._translate_errors("count"):
                response = await self._with_timeout(self.status_timeout).count(index=self.index_name)
        except IndexNotFoundError:
            return 0
        return int(response["count"])

    # =========================================================================
    # Writes
    # =========================================================================

    async def index_document(self, document: IndexDocument) -> None:
        """Write a document, overwriting any previous version under the same id."""
        with self._translate_errors("index_document"):
            await self._with_timeout(self.request_timeout).index(
                index=self.index_name,
                id=document.id,
                document=document.body,
                refresh=self.refresh_on_write,
            )

    async def delete_document(self, document_id: str) -> bool:
        """
        Delete a document.

        Returns:
            True if a document was removed, False if none existed
        """
        with self._translate_errors("delete_document"):
            try:
                await self._with_timeout(self.request_timeout).delete(
                    index=self.index_name,
                    id=document_id,
                    refresh=self.refresh_on_write,
                )
            except ESNotFoundError:
                logger.debug(f"Document {document_id} already absent from index")
                return False
        return True

    async def bulk_index(
        self,
        documents: Sequence[IndexDocument],
        refresh: bool = True,
    ) -> BulkWriteResult:
        """
        Index documents in a single bulk request.

        Per-document rejections are collected into the result instead of
        failing the call.

        Args:
            documents: Documents to write
            refresh: Make the writes visible to search before returning

        Returns:
            Count of indexed documents and the per-document errors
        """
        if not documents:
            return BulkWriteResult()

        operations: list[dict[str, Any]] = []
        for document in documents:
            operations.append({"index": {"_index": self.index_name, "_id": document.id}})
            operations.append(document.body)

        with self._translate_errors("bulk_index"):
            response = await self._with_timeout(self.bulk_timeout).bulk(
                operations=operations,
                refresh=refresh,
            )

        return parse_bulk_response(response, [document.id for document in documents])

    async def delete_documents(self, document_ids: Iterable[str], refresh: bool = True) -> int:
        """
        Delete several documents in one bulk request.

        Returns:
            Number of documents actually removed
        """
        operations = [{"delete": {"_index": self.index_name, "_id": doc_id}} for doc_id in document_ids]
        if not operations:
            return 0

        with self._translate_errors("delete_documents"):
            response = await self._with_timeout(self.bulk_timeout).bulk(
                operations=operations,
                refresh=refresh,
            )

        removed = 0
        for item in response.get("items", []):
            result = item.get("delete", {})
            if result.get("result") == "deleted":
                removed += 1
            elif result.get("status") != 404:
                logger.warning(f"Failed to delete document {result.get('_id')}: {result.get('error')}")
        return removed

    # =========================================================================
    # Reads
    # =========================================================================

    async def get_document(self, document_id: str) -> dict[str, Any]:
        """
        Fetch a document source by id.

        Raises:
            DocumentNotFoundError: If no document exists under the id
            IndexNotFoundError: If the index has not been created
        """
        with self._translate_errors("get_document"):
            try:
                response = await self._with_timeout(self.request_timeout).get(
                    index=self.index_name,
                    id=document_id,
                )
            except ESNotFoundError as e:
                if is_index_missing(e):
                    raise IndexNotFoundError(self.index_name) from e
                raise DocumentNotFoundError(document_id) from e
        return dict(response["_source"])

    async def search(self, query: TranslatedQuery) -> Any:
        """
        Run a translated query.

        Returns:
            The raw engine response, to be normalized by the formatter
        """
        with self._translate_errors("search"):
            return await self._with_timeout(self.request_timeout).search(
                index=self.index_name,
                **query.to_search_kwargs(),
            )

    async def iter_ids(self, page_size: int = 1000) -> AsyncIterator[str]:
        """Yield every document id in the index; a missing index yields nothing."""
        try:
            with self._translate_errors("iter_ids"):
                async for hit in async_scan(
                    self._get_client(),
                    index=self.index_name,
                    query={"query": {"match_all": {}}, "_source": False},
                    size=page_size,
                    request_timeout=self.bulk_timeout,
                ):
                    yield hit["_id"]
        except IndexNotFoundError:
            return

    async def __aenter__(self) -> AsyncIndexClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def parse_bulk_response(response: Any, document_ids: Sequence[str]) -> BulkWriteResult:
    """Split a bulk index response into an indexed count and per-document errors."""
    items = response.get("items", [])
    result = BulkWriteResult()

    for position, item in enumerate(items):
        outcome = item.get("index") or item.get("create") or {}
        error = outcome.get("error")
        if error is None:
            result.indexed += 1
            continue
        doc_id = outcome.get("_id") or (document_ids[position] if position < len(document_ids) else "")
        if isinstance(error, dict):
            error_type, reason = error.get("type"), error.get("reason")
        else:
            error_type, reason = None, str(error)
        result.errors.append(
            BulkItemError(
                id=str(doc_id),
                status=int(outcome.get("status", 0)),
                error_type=error_type,
                reason=reason,
            )
        )

    if result.errors:
        logger.warning(f"Bulk write rejected {len(result.errors)} of {len(items)} documents")
    return result
