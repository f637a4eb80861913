"""Document search tools for FastMCP.

Thin adapters: validate tool arguments through `DocumentSearch` and return
the `{total, results}` shape. Backend outages already come back as zero
results; validation errors are reported to the client.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from fastmcp import FastMCP

from docsearch.exceptions import InvalidQuery, InvalidRequest


def register_search_tools(mcp: FastMCP, get_state: Callable[[], Any]) -> None:
    """Register search tools on the given FastMCP instance.

    The `get_state` callable should return an object with attribute
    `document_search` that provides `search(handles, language, query, ...)`.
    """

    @mcp.tool
    async def document_search(
        handles: List[str],
        language: str,
        query: str,
        size: Optional[int] = None,
        offset: int = 0,
    ) -> Dict[str, Any]:
        """Search one or more document collections in a single language.

        Parameters
        ----------
        handles: list[str]
            Collection handles, e.g. ["agency_blogs", "other_agency_blogs"].
        language: str
            Language code of the documents to return, e.g. "en" or "fr".
        query: str
            Free-text query. An empty query returns no results.
        size: int | None
            Maximum number of results to return (defaults to configuration).
        offset: int
            Number of ranked results to skip.
        """
        state = get_state()
        if state is None or getattr(state, "document_search", None) is None:
            raise RuntimeError("Document search is not configured. Check backend settings.")
        try:
            result_set = state.document_search.search(
                handles, language, query, size=size, offset=offset
            )
        except (InvalidRequest, InvalidQuery) as exc:
            raise ValueError(str(exc)) from exc
        return result_set.to_dict()
