"""Read-only result records returned by a document search."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Tuple

from docsearch.search.schema import CORE_STORED_FIELDS

_RECORD_ATTRS = CORE_STORED_FIELDS | {"score", "index"}


def _jsonable(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


@dataclass(frozen=True, slots=True)
class SearchResult:
    """A single search hit.

    The four core fields are always present (missing values surface as ``""``);
    any other stored field of the document is exposed through ``extra``.
    """

    title: str
    description: str
    language: str
    path: str
    score: float
    index: str = ""
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @classmethod
    def from_source(cls, source: Mapping[str, Any], *, score: float, index: str = "") -> "SearchResult":
        return cls(
            title=str(source.get("title") or ""),
            description=str(source.get("description") or ""),
            language=str(source.get("language") or ""),
            path=str(source.get("path") or ""),
            score=float(score),
            index=index,
            extra={k: v for k, v in source.items() if k not in CORE_STORED_FIELDS},
        )

    def __getitem__(self, key: str) -> Any:
        if key in _RECORD_ATTRS:
            return getattr(self, key)
        return self.extra[key]

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self[key]
        except KeyError:
            return default

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {k: _jsonable(v) for k, v in self.extra.items()}
        out.update(
            {
                "title": self.title,
                "description": self.description,
                "language": self.language,
                "path": self.path,
                "score": self.score,
                "index": self.index,
            }
        )
        return out


@dataclass(frozen=True, slots=True)
class SearchResultSet:
    """Total hit count plus the ranked page of results for one search."""

    total: int = 0
    results: Tuple[SearchResult, ...] = ()

    def __post_init__(self) -> None:
        if self.total < 0:
            raise ValueError("total must be non-negative")
        object.__setattr__(self, "results", tuple(self.results))

    @classmethod
    def empty(cls) -> "SearchResultSet":
        return cls(total=0, results=())

    def __iter__(self) -> Iterator[SearchResult]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {"total": self.total, "results": [r.to_dict() for r in self.results]}
