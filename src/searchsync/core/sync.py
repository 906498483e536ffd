"""Search sync — keeps a collection mirrored into the search engine and queries it.

The surrounding document-model layer calls :meth:`SearchSync.on_persisted`
after a record is saved and :meth:`SearchSync.on_removed` after it is
deleted.  Completion is reported through the optional ``on_indexed``,
``on_unindexed`` and ``on_error`` callbacks (plain functions or
coroutines).

Usage::

    sync = SearchSync({"url": "http://localhost:9200", "prefix": "app"}).for_collection("Cats")
    await sync.on_persisted(cat)
    result = await sync.search({"mustMatch": {"breed": "siamese"}, "pageSize": 10})
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import httpx

from searchsync.config.connection import merge_options
from searchsync.config.settings import Settings
from searchsync.endpoints.uris import make_collections_search_uri, make_document_uri, make_search_uri
from searchsync.exceptions import ConfigurationError, SearchSyncError, UnexpectedReplyError, UpstreamError
from searchsync.models.connection import ConnectionOptions
from searchsync.models.options import AggOptionSet, SearchOptionSet
from searchsync.models.result import AggResult, SearchResult
from searchsync.query.aggregation import build_agg_body
from searchsync.query.builder import build_search_body
from searchsync.results.normalizer import normalize_agg_reply, normalize_search_reply, reply_ok
from searchsync.serialization.serializer import IDENTIFIER_TYPES, serialize_model
from searchsync.transport.http import EngineReply, RequestSpec, execute

logger = logging.getLogger(__name__)

SEARCH_TYPE_SEARCH = "dfs_query_then_fetch"
SEARCH_TYPE_COUNT = "count"

Callback = Callable[..., Any]


async def _notify(callback: Callback | None, *args: Any) -> None:
    if callback is None:
        return
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


class SearchSync:
    """Search-sync component for one search engine target.

    Args:
        connection: Connection options (mapping or resolved
            ``ConnectionOptions``).  Defaults to ``settings.connection``.
        settings: Retry, HTTP and logging settings.  Defaults to ``Settings()``.
        id_field: Field of the serialized document holding its identifier.
        identifier_types: Types serialized as identifiers.
        on_indexed: Called with ``(doc_id, reply_body)`` after indexing.
        on_unindexed: Called with ``(doc_id, reply_body)`` after unindexing.
        on_error: Called with ``(error, doc_id)`` when a lifecycle hook fails.
        transport: Optional ``httpx`` transport for every request.
    """

    def __init__(
        self,
        connection: Mapping[str, Any] | ConnectionOptions | None = None,
        *,
        settings: Settings | None = None,
        id_field: str = "_id",
        identifier_types: tuple[type, ...] = IDENTIFIER_TYPES,
        on_indexed: Callback | None = None,
        on_unindexed: Callback | None = None,
        on_error: Callback | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.connection = merge_options(connection if connection is not None else self.settings.connection)
        self.id_field = id_field
        self.identifier_types = identifier_types
        self.on_indexed = on_indexed
        self.on_unindexed = on_unindexed
        self.on_error = on_error
        self._transport = transport

    def for_collection(self, collection: str) -> SearchSync:
        """Return a copy bound to ``collection`` (its lower-cased name is the type)."""
        return SearchSync(
            self.connection.for_collection(collection),
            settings=self.settings,
            id_field=self.id_field,
            identifier_types=self.identifier_types,
            on_indexed=self.on_indexed,
            on_unindexed=self.on_unindexed,
            on_error=self.on_error,
            transport=self._transport,
        )

    async def _execute(self, method: str, url: str, payload: Any = None) -> EngineReply:
        spec = RequestSpec.with_json(method, url, payload, auth=self.connection.auth)
        return await execute(
            spec,
            retry=self.settings.retry,
            timeout=self.settings.http.timeout,
            transport=self._transport,
        )

    # ── Indexing ─────────────────────────────────────────────────────────

    async def index(self, doc: Any) -> dict[str, Any]:
        """Index ``doc`` (create or replace).

        Returns:
            The engine's reply body.

        Raises:
            SearchSyncError: If serialization, delivery or the engine fails.
        """
        payload = serialize_model(doc, self.connection, self.identifier_types)
        doc_id = payload.get(self.id_field)
        if doc_id is None:
            raise ConfigurationError(f"Document has no '{self.id_field}' field")

        reply = await self._execute("PUT", make_document_uri(self.connection, doc_id), payload)
        if not reply_ok(reply.body):
            raise UnexpectedReplyError(f"Document indexing was not acknowledged: {reply.body!r}", reply=reply.body)

        logger.debug("Indexed %s/%s in %d attempt(s)", self.connection.type, doc_id, reply.attempts)
        await _notify(self.on_indexed, str(doc_id), reply.body)
        return reply.body

    async def unindex(self, doc_id: Any) -> dict[str, Any]:
        """Remove the document ``doc_id`` from the index.

        Returns:
            The engine's reply body.
        """
        doc_id = str(doc_id)
        reply = await self._execute("DELETE", make_document_uri(self.connection, doc_id))
        if not reply_ok(reply.body):
            raise UnexpectedReplyError(f"Document deletion was not acknowledged: {reply.body!r}", reply=reply.body)

        logger.debug("Unindexed %s/%s in %d attempt(s)", self.connection.type, doc_id, reply.attempts)
        await _notify(self.on_unindexed, doc_id, reply.body)
        return reply.body

    async def on_persisted(self, doc: Any) -> None:
        """Lifecycle hook: a document was saved."""
        try:
            await self.index(doc)
        except SearchSyncError as e:
            doc_id = _doc_id(doc, self.id_field)
            logger.error("Search engine document indexing error for %s/%s: %s", self.connection.type, doc_id, e)
            await _notify(self.on_error, e, doc_id)

    async def on_removed(self, doc_id: Any) -> None:
        """Lifecycle hook: a document was deleted."""
        try:
            await self.unindex(doc_id)
        except SearchSyncError as e:
            logger.error("Search engine document deletion error for %s/%s: %s", self.connection.type, doc_id, e)
            await _notify(self.on_error, e, str(doc_id))

    # ── Querying ─────────────────────────────────────────────────────────

    async def _query(self, url: str, body: dict[str, Any]) -> Any:
        try:
            reply = await self._execute("POST", url, body)
        except SearchSyncError as e:
            raise UpstreamError(f"Search engine search error: {e}") from e
        return reply.body

    async def search(self, options: Mapping[str, Any] | SearchOptionSet | None = None) -> SearchResult:
        """Search the bound collection.

        Raises:
            ConfigurationError: Invalid options, raised before any request.
            UpstreamError: The request or the engine failed.
            UnexpectedReplyError: The reply has no ``hits``.
        """
        body = build_search_body(options)
        reply = await self._query(make_search_uri(self.connection, SEARCH_TYPE_SEARCH), body)
        return normalize_search_reply(reply)

    async def search_collections(
        self,
        options: Mapping[str, Any] | SearchOptionSet | None = None,
        collections: Sequence[str] | None = None,
    ) -> SearchResult:
        """Search several collections at once (all of them when none are named)."""
        body = build_search_body(options)
        url = make_collections_search_uri(self.connection, collections, SEARCH_TYPE_SEARCH)
        return normalize_search_reply(await self._query(url, body))

    async def aggregate(self, options: Mapping[str, Any] | AggOptionSet | None = None) -> AggResult:
        """Count the bound collection's documents grouped by ``group_by``."""
        body = build_agg_body(options)
        reply = await self._query(make_search_uri(self.connection, SEARCH_TYPE_COUNT), body)
        return normalize_agg_reply(reply)


def _doc_id(doc: Any, id_field: str) -> str | None:
    if isinstance(doc, Mapping):
        value = doc.get(id_field)
    else:
        value = getattr(doc, id_field, None)
    return None if value is None else str(value)


# ── One-shot helpers ─────────────────────────────────────────────────────


async def index(doc: Any, connection: Mapping[str, Any] | ConnectionOptions, **kwargs: Any) -> dict[str, Any]:
    """Index ``doc`` at the target described by ``connection``."""
    return await SearchSync(connection, **kwargs).index(doc)


async def unindex(doc_id: Any, connection: Mapping[str, Any] | ConnectionOptions, **kwargs: Any) -> dict[str, Any]:
    """Remove ``doc_id`` from the target described by ``connection``."""
    return await SearchSync(connection, **kwargs).unindex(doc_id)


async def search(
    options: Mapping[str, Any] | SearchOptionSet | None,
    connection: Mapping[str, Any] | ConnectionOptions,
    **kwargs: Any,
) -> SearchResult:
    """Search the collection bound in ``connection``."""
    return await SearchSync(connection, **kwargs).search(options)


async def aggregate(
    options: Mapping[str, Any] | AggOptionSet | None,
    connection: Mapping[str, Any] | ConnectionOptions,
    **kwargs: Any,
) -> AggResult:
    """Group-by count on the collection bound in ``connection``."""
    return await SearchSync(connection, **kwargs).aggregate(options)
