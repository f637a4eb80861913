"""Map collection handles to the index aliases maintained by the indexing pipeline.

Physical indexes are named ``<namespace>-<handle>-v<n>`` and aliased to
``<namespace>-<handle>``. Searches always go through the alias.
"""

from __future__ import annotations

from typing import Any, Iterable, Tuple

from docsearch.exceptions import InvalidRequest
from docsearch.search.schema import Language


def normalize_handles(handles: Iterable[Any]) -> Tuple[str, ...]:
    """Strip each handle, rejecting strings, blanks and non-string entries."""
    if isinstance(handles, str):
        raise InvalidRequest("handles must be a sequence of handle names, not a string")
    cleaned = []
    for handle in handles or ():
        if not isinstance(handle, str) or not handle.strip():
            raise InvalidRequest(f"Invalid handle: {handle!r}")
        cleaned.append(handle.strip())
    if not cleaned:
        raise InvalidRequest("At least one handle is required")
    return tuple(cleaned)


class IndexResolver:
    def __init__(self, namespace: str) -> None:
        if not namespace or not namespace.strip():
            raise ValueError("namespace is required")
        self.namespace = namespace.strip()

    def alias(self, handle: str) -> str:
        return f"{self.namespace}-{handle}"

    def physical_name(self, handle: str, version: int = 1) -> str:
        return f"{self.alias(handle)}-v{int(version)}"

    def resolve(self, handles: Iterable[Any], language: Any = None) -> Tuple[str, ...]:
        """Return one alias per handle, in order.

        `language` is accepted for symmetry with the request but does not take
        part in index selection; it is applied as a query filter instead.
        """
        if language is not None:
            Language.parse(language)
        return tuple(self.alias(handle) for handle in normalize_handles(handles))
