import itertools
from datetime import datetime
from typing import Any, Callable

import pytest
from whoosh.filedb.filestore import RamStorage

from docsearch.search.base_search import IndexDocument
from docsearch.search.document_search import DocumentSearch
from docsearch.search.resolver import IndexResolver
from docsearch.search.whoosh_backend import WhooshBackend

NAMESPACE = "test-documents"

_ids = itertools.count(1)


def make_document(**fields: Any) -> IndexDocument:
    defaults: dict = {
        "id": str(next(_ids)),
        "language": "en",
        "title": "",
        "description": "",
        "path": "http://www.agency.gov/page1.html",
        "created": datetime(2015, 3, 1, 12, 0, 0),
    }
    defaults.update(fields)
    return IndexDocument(**defaults)


@pytest.fixture
def backend() -> WhooshBackend:
    return WhooshBackend(RamStorage())


@pytest.fixture
def resolver() -> IndexResolver:
    return IndexResolver(NAMESPACE)


@pytest.fixture
def create_collection(backend: WhooshBackend, resolver: IndexResolver) -> Callable[..., str]:
    """Create "<ns>-<handle>-v1", alias it to "<ns>-<handle>" and return the alias."""

    def _create(handle: str, *docs: IndexDocument, version: int = 1) -> str:
        physical = resolver.physical_name(handle, version)
        backend.create_index(physical)
        alias = resolver.alias(handle)
        backend.put_alias(physical, alias)
        if docs:
            backend.index_documents(alias, docs)
        return alias

    return _create


@pytest.fixture
def document_search(backend: WhooshBackend) -> DocumentSearch:
    return DocumentSearch(backend, namespace=NAMESPACE)


@pytest.fixture
def doc() -> Callable[..., IndexDocument]:
    return make_document
