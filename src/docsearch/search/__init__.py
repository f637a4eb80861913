"""Multi-index document search: composer, resolver, executor and result view."""

from .document_search import DocumentSearch, SearchRequest
from .results import SearchResult, SearchResultSet
from .schema import Language
from .whoosh_backend import WhooshBackend

__all__ = [
    "DocumentSearch",
    "Language",
    "SearchRequest",
    "SearchResult",
    "SearchResultSet",
    "WhooshBackend",
]
