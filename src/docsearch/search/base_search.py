"""Abstract search backend interface.

Defines the narrow surface the orchestrator consumes from a full-text backend
(multi-index search and alias resolution) plus the admin calls an indexing
pipeline uses to populate it. Keeping the contract abstract lets tests swap in
failing or fake backends.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Sequence

if TYPE_CHECKING:
    from docsearch.search.composer import QueryDocument


@dataclass(slots=True)
class IndexDocument:
    """A document as handed to the backend by the indexing pipeline."""

    id: str
    title: str
    path: str
    language: str
    description: str = ""
    created: Optional[datetime] = None
    changed: Optional[datetime] = None
    tags: List[str] = field(default_factory=list)


@dataclass(slots=True)
class RawHit:
    """One backend hit before it is wrapped into a `SearchResult`."""

    index: str
    score: float
    source: Dict[str, Any]


@dataclass(slots=True)
class BackendResponse:
    """Ranked hits for one page plus the total number of matches."""

    total: int
    hits: List[RawHit] = field(default_factory=list)


class BaseSearchBackend(ABC):
    """Abstract interface for search backend implementations."""

    @abstractmethod
    def create_index(self, name: str) -> None:
        """Create (or recreate empty) the physical index `name`."""

    @abstractmethod
    def put_alias(self, index: str, alias: str) -> None:
        """Point `alias` at the physical index `index`."""

    @abstractmethod
    def resolve_alias(self, name: str) -> str:
        """Return the physical index behind `name` (an alias or an index name)."""

    @abstractmethod
    def index_documents(self, index: str, items: Iterable[IndexDocument]) -> None:
        """Index or reindex a batch of documents."""

    @abstractmethod
    def delete_documents(self, index: str, ids: Iterable[str]) -> None:
        """Remove documents from the index by their IDs."""

    @abstractmethod
    def search(
        self,
        indexes: Sequence[str],
        query_doc: "QueryDocument",
        *,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> BackendResponse:
        """Execute one search across `indexes` and return ranked hits.

        Implementations raise `docsearch.exceptions.SearchBackendError` (or a
        subclass) when the search cannot be served.
        """
        raise NotImplementedError
