"""Run a composed query against the backend and fail open on backend errors.

`SearchExecutor.attempt()` returns an `ExecutionOutcome` carrying either the
result set or the backend error. `SearchExecutor.execute()` collapses an error
into `SearchResultSet.empty()`: a search outage yields zero results for the
caller, never an exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from docsearch.exceptions import BackendUnavailable, SearchBackendError
from docsearch.search.base_search import BackendResponse, BaseSearchBackend
from docsearch.search.composer import QueryDocument
from docsearch.search.results import SearchResult, SearchResultSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionOutcome:
    result_set: Optional[SearchResultSet] = None
    error: Optional[SearchBackendError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap_or_empty(self) -> SearchResultSet:
        if self.error is not None or self.result_set is None:
            return SearchResultSet.empty()
        return self.result_set


def to_result_set(response: BackendResponse) -> SearchResultSet:
    """Merge backend hits into one ranked, read-only result set."""
    hits = sorted(response.hits, key=lambda h: -h.score)
    return SearchResultSet(
        total=max(0, int(response.total)),
        results=tuple(SearchResult.from_source(h.source, score=h.score, index=h.index) for h in hits),
    )


class SearchExecutor:
    def __init__(self, backend: Optional[BaseSearchBackend]) -> None:
        self.backend = backend

    def attempt(
        self,
        indexes: Sequence[str],
        query_doc: QueryDocument,
        *,
        size: Optional[int] = None,
        offset: int = 0,
    ) -> ExecutionOutcome:
        if self.backend is None:
            return ExecutionOutcome(error=BackendUnavailable("No search backend configured"))
        try:
            response = self.backend.search(list(indexes), query_doc, limit=size, offset=offset)
        except SearchBackendError as exc:
            return ExecutionOutcome(error=exc)
        except OSError as exc:
            # Transport failures (connection refused, timeouts) from network backends
            error = BackendUnavailable(f"Transport failure: {exc}")
            error.__cause__ = exc
            return ExecutionOutcome(error=error)
        return ExecutionOutcome(result_set=to_result_set(response))

    def execute(
        self,
        indexes: Sequence[str],
        query_doc: QueryDocument,
        *,
        size: Optional[int] = None,
        offset: int = 0,
    ) -> SearchResultSet:
        outcome = self.attempt(indexes, query_doc, size=size, offset=offset)
        if not outcome.ok:
            logger.warning(
                "Search on %s for %r failed, returning no results: %s",
                ",".join(indexes),
                query_doc.text,
                outcome.error,
            )
        return outcome.unwrap_or_empty()
