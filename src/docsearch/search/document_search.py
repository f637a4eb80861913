"""Search across several document collections in one language.

Typical use::

    backend = WhooshBackend.from_config(settings.backend)
    searcher = DocumentSearch.from_settings(settings, backend)
    results = searcher.search(["agency_blogs"], "en", "common")
    results.total, results.results
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple

from docsearch.config import RelevanceConfig, Settings
from docsearch.exceptions import InvalidQuery, InvalidRequest
from docsearch.search.base_search import BaseSearchBackend
from docsearch.search.composer import QueryComposer
from docsearch.search.executor import SearchExecutor
from docsearch.search.resolver import IndexResolver, normalize_handles
from docsearch.search.results import SearchResultSet
from docsearch.search.schema import Language

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchRequest:
    handles: Tuple[str, ...]
    language: Language
    query: str
    size: int
    offset: int = 0

    @classmethod
    def create(
        cls,
        handles: Iterable[Any],
        language: Any,
        query: Any,
        *,
        size: Optional[int] = None,
        offset: int = 0,
        relevance: Optional[RelevanceConfig] = None,
    ) -> "SearchRequest":
        """Validate inputs and build a request. Duplicate handles keep their first position.

        `size` defaults to `relevance.default_size` and may not exceed `relevance.max_size`.
        """
        relevance = relevance or RelevanceConfig()
        max_size = relevance.max_size
        if size is None:
            size = relevance.default_size
        ordered = tuple(dict.fromkeys(normalize_handles(handles)))
        if not isinstance(query, str):
            raise InvalidQuery(f"Query must be a string, got {type(query).__name__}")
        if isinstance(size, bool) or not isinstance(size, int) or not 1 <= size <= max_size:
            raise InvalidRequest(f"size must be between 1 and {max_size}")
        if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
            raise InvalidRequest("offset must be a non-negative integer")
        return cls(
            handles=ordered,
            language=Language.parse(language),
            query=query,
            size=size,
            offset=offset,
        )


class DocumentSearch:
    """Resolve handles, compose the query and execute it with fail-open semantics."""

    def __init__(
        self,
        backend: Optional[BaseSearchBackend],
        *,
        namespace: str,
        relevance: Optional[RelevanceConfig] = None,
    ) -> None:
        self.relevance = relevance or RelevanceConfig()
        self.resolver = IndexResolver(namespace)
        self.composer = QueryComposer(self.relevance)
        self.executor = SearchExecutor(backend)

    @classmethod
    def from_settings(cls, settings: Settings, backend: Optional[BaseSearchBackend]) -> "DocumentSearch":
        return cls(backend, namespace=settings.backend.namespace, relevance=settings.relevance)

    def search(
        self,
        handles: Iterable[Any],
        language: Any,
        query: Any,
        *,
        size: Optional[int] = None,
        offset: int = 0,
    ) -> SearchResultSet:
        request = SearchRequest.create(
            handles,
            language,
            query,
            size=size,
            offset=offset,
            relevance=self.relevance,
        )
        return self.run(request)

    def run(self, request: SearchRequest) -> SearchResultSet:
        # Handles and language were validated when the request was built
        indexes = tuple(self.resolver.alias(handle) for handle in request.handles)
        query_doc = self.composer.compose(request.query, request.language)
        logger.debug(
            "Searching %s (%s) for %r, %d/%d terms required",
            ",".join(indexes),
            request.language.value,
            request.query,
            query_doc.minimum_should_match,
            len(query_doc.recall),
        )
        return self.executor.execute(indexes, query_doc, size=request.size, offset=request.offset)
