from dataclasses import FrozenInstanceError
from datetime import datetime

import pytest

from docsearch.search.results import SearchResult, SearchResultSet


def test_from_source_surfaces_missing_fields_as_empty() -> None:
    result = SearchResult.from_source({"title": "only a title"}, score=1.5)

    assert result.title == "only a title"
    assert result.description == ""
    assert result.language == ""
    assert result.path == ""
    assert result.score == 1.5
    assert dict(result.extra) == {}


def test_extra_fields_are_passed_through() -> None:
    created = datetime(2015, 3, 1, 12, 0, 0)
    result = SearchResult.from_source(
        {"title": "t", "language": "en", "id": "42", "created": created},
        score=0.3,
        index="ns-blog",
    )

    assert result["id"] == "42"
    assert result["created"] == created
    assert result["title"] == "t"
    assert result["index"] == "ns-blog"
    assert result.get("tags") is None
    assert result.get("tags", []) == []
    with pytest.raises(KeyError):
        result["tags"]


def test_results_are_read_only() -> None:
    result = SearchResult.from_source({"title": "t", "id": "1"}, score=1.0)
    result_set = SearchResultSet(total=1, results=[result])

    with pytest.raises(FrozenInstanceError):
        result.title = "changed"  # type: ignore[misc]
    with pytest.raises(TypeError):
        result.extra["id"] = "2"  # type: ignore[index]
    with pytest.raises(FrozenInstanceError):
        result_set.total = 5  # type: ignore[misc]
    assert isinstance(result_set.results, tuple)


def test_empty_result_set() -> None:
    empty = SearchResultSet.empty()

    assert empty.total == 0
    assert empty.results == ()
    assert list(empty) == []
    assert empty.to_dict() == {"total": 0, "results": []}


def test_total_must_not_be_negative() -> None:
    with pytest.raises(ValueError):
        SearchResultSet(total=-1)


def test_to_dict_renders_records() -> None:
    created = datetime(2015, 3, 1, 12, 0, 0)
    result = SearchResult.from_source(
        {"title": "t", "description": "d", "language": "en", "path": "/p", "created": created},
        score=2.0,
        index="ns-blog",
    )

    out = SearchResultSet(total=3, results=(result,)).to_dict()

    assert out["total"] == 3
    assert out["results"] == [
        {
            "title": "t",
            "description": "d",
            "language": "en",
            "path": "/p",
            "score": 2.0,
            "index": "ns-blog",
            "created": "2015-03-01T12:00:00",
        }
    ]
