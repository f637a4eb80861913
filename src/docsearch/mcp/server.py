"""docsearch MCP server entrypoint using FastMCP.

Exposes the document search orchestrator as MCP tools.
Run with:
  - docsearch-mcp
  - or: python -m docsearch.mcp.server (ensure PYTHONPATH includes ./src)
"""
from __future__ import annotations

from typing import Optional

from fastmcp import FastMCP

from docsearch.config import Settings, load_settings
from docsearch.logging_utils import setup_logging
from docsearch.search.base_search import BaseSearchBackend
from docsearch.search.document_search import DocumentSearch
from docsearch.search.whoosh_backend import WhooshBackend
from docsearch.mcp.tools import register_search_tools


class AppState:
    """Application state shared by MCP tools."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.backend: Optional[BaseSearchBackend] = None
        self.document_search: Optional[DocumentSearch] = None

    def init_backend(self) -> None:
        """Open the search backend and build the orchestrator from configuration."""
        self.backend = WhooshBackend.from_config(self.settings.backend)
        self.document_search = DocumentSearch.from_settings(self.settings, self.backend)


# Global state and server instance
_state: Optional[AppState] = None
mcp = FastMCP("docsearch MCP Server")


# ----- Tools -----

@mcp.tool
def health() -> str:
    """Simple health check tool."""
    return "ok"


# ----- Entrypoint -----

def main() -> None:
    """Initialize state and run the MCP server."""
    global _state
    settings = load_settings()
    setup_logging("docsearch", settings.app.log_level)
    _state = AppState(settings)
    _state.init_backend()
    register_search_tools(mcp, get_state=lambda: _state)
    # Choose transport based on configuration: stdio (default), http, or sse
    transport = settings.app.transport
    if transport in ("http", "sse"):
        mcp.run(transport=transport, host=settings.app.host, port=settings.app.port)
    else:
        mcp.run()


if __name__ == "__main__":  # pragma: no cover
    main()
