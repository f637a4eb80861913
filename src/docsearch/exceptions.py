"""Custom exception hierarchy for docsearch.

Validation errors (`InvalidRequest`, `InvalidQuery`) are raised to callers.
Backend errors (`SearchBackendError` and subclasses) are raised by backend
adapters and converted into an empty result set by the search executor.
"""

from __future__ import annotations


class DocSearchError(Exception):
    """Base class for all docsearch exceptions."""


class ConfigError(DocSearchError):
    """Raised when configuration loading or validation fails."""


class InvalidRequest(DocSearchError):
    """Raised when a search request is malformed (no handles, bad language, bad paging)."""


class InvalidQuery(DocSearchError):
    """Raised when the query text is not a string."""


class IndexingError(DocSearchError):
    """Raised when documents cannot be written to or removed from an index."""


class SearchBackendError(DocSearchError):
    """Base class for failures reported by a search backend."""


class BackendUnavailable(SearchBackendError):
    """Raised when the backend cannot serve a search (storage, transport, no client)."""


class IndexNotFoundError(BackendUnavailable):
    """Raised when an alias or physical index does not exist."""


class BackendTimeout(BackendUnavailable):
    """Raised when a search exceeds the configured time limit."""
