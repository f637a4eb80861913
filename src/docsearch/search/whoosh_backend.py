"""Whoosh-backed search backend holding one index per collection.

All physical indexes live side by side in one Whoosh storage (RAM or a
directory). An alias table, persisted in the same storage as ``aliases.json``,
maps stable collection aliases to versioned physical indexes. A search spanning
several aliases runs once over a `MultiReader` built from every segment of
every target index, so BM25F statistics and ranking are shared across them.
"""

from __future__ import annotations

import bisect
import json
import logging
import threading
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from whoosh import scoring
from whoosh.collectors import TimeLimitCollector
from whoosh.filedb.filestore import FileStorage, RamStorage, Storage
from whoosh.index import IndexError as WhooshIndexError
from whoosh.reading import IndexReader, MultiReader
from whoosh.searching import Searcher, TimeLimit

from docsearch.config import BackendConfig
from docsearch.exceptions import (
    BackendTimeout,
    BackendUnavailable,
    ConfigError,
    IndexingError,
    IndexNotFoundError,
    InvalidRequest,
)
from docsearch.search.base_search import BackendResponse, BaseSearchBackend, IndexDocument, RawHit
from docsearch.search.composer import QueryDocument
from docsearch.search.schema import (
    TEXT_FIELDS,
    Language,
    build_schema,
    language_field,
    path_basename_text,
)

logger = logging.getLogger(__name__)

ALIASES_FILE = "aliases.json"


def _to_index_row(doc: IndexDocument) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "id": doc.id,
        "language": (doc.language or "").strip().lower(),
        "path": doc.path or "",
        "title": doc.title or "",
        "description": doc.description or "",
        "basename": path_basename_text(doc.path or ""),
    }
    if doc.created is not None:
        row["created"] = doc.created
    if doc.changed is not None:
        row["changed"] = doc.changed
    if doc.tags:
        row["tags"] = ",".join(doc.tags)
    try:
        lang = Language.parse(row["language"])
    except InvalidRequest:
        # Still searchable by literal form, just not stemmed
        logger.warning("Document %s has unsupported language %r", doc.id, doc.language)
        return row
    for base in TEXT_FIELDS:
        row[language_field(base, lang)] = row[base]
    return row


class WhooshBackend(BaseSearchBackend):
    """Search backend over named Whoosh indexes sharing one storage."""

    def __init__(self, storage: Optional[Storage] = None, *, timeout: Optional[float] = None) -> None:
        self._storage = storage if storage is not None else RamStorage()
        self._schema = build_schema()
        self.timeout = timeout
        self._lock = threading.Lock()
        self._aliases: Dict[str, str] = self._load_aliases()

    @classmethod
    def from_config(cls, cfg: BackendConfig) -> "WhooshBackend":
        if cfg.storage == "file":
            if not cfg.path:
                raise ConfigError("backend.path is required when backend.storage is 'file'")
            storage: Storage = FileStorage(cfg.path).create()
        else:
            storage = RamStorage()
        return cls(storage, timeout=cfg.timeout)

    # ----- Aliases -----

    def _load_aliases(self) -> Dict[str, str]:
        if not self._storage.file_exists(ALIASES_FILE):
            return {}
        f = self._storage.open_file(ALIASES_FILE)
        try:
            data = json.loads(f.read().decode("utf-8") or "{}")
        finally:
            f.close()
        return {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}

    def _save_aliases(self) -> None:
        f = self._storage.create_file(ALIASES_FILE)
        try:
            f.write(json.dumps(self._aliases, sort_keys=True).encode("utf-8"))
        finally:
            f.close()

    def aliases(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._aliases)

    def put_alias(self, index: str, alias: str) -> None:
        if not self._storage.index_exists(index):
            raise IndexNotFoundError(f"Index '{index}' does not exist")
        with self._lock:
            self._aliases[alias] = index
            self._save_aliases()
        logger.info("Alias %s -> %s", alias, index)

    def resolve_alias(self, name: str) -> str:
        with self._lock:
            target = self._aliases.get(name)
        if target is None and self._storage.index_exists(name):
            target = name
        if target is None or not self._storage.index_exists(target):
            raise IndexNotFoundError(f"No index or alias named '{name}'")
        return target

    # ----- Indexing -----

    def create_index(self, name: str) -> None:
        try:
            self._storage.create_index(self._schema, indexname=name)
        except (OSError, WhooshIndexError) as exc:
            raise IndexingError(f"Cannot create index '{name}'") from exc
        logger.info("Created index %s", name)

    def index_documents(self, index: str, items: Iterable[IndexDocument]) -> None:
        physical = self.resolve_alias(index)
        try:
            ix = self._storage.open_index(indexname=physical)
            writer = ix.writer()
            try:
                for doc in items:
                    writer.update_document(**_to_index_row(doc))
            except BaseException:
                writer.cancel()
                raise
            writer.commit()
        except (OSError, WhooshIndexError) as exc:
            raise IndexingError(f"Cannot index documents into '{physical}'") from exc

    def delete_documents(self, index: str, ids: Iterable[str]) -> None:
        physical = self.resolve_alias(index)
        try:
            ix = self._storage.open_index(indexname=physical)
            writer = ix.writer()
            for doc_id in ids:
                writer.delete_by_term("id", doc_id)
            writer.commit()
        except (OSError, WhooshIndexError) as exc:
            raise IndexingError(f"Cannot delete documents from '{physical}'") from exc

    # ----- Search -----

    def _open_leaf_readers(self, targets: Sequence[Tuple[str, str]]) -> List[Tuple[str, IndexReader]]:
        """Open every non-empty segment of each target as (alias, reader) pairs."""
        leaves: List[Tuple[str, IndexReader]] = []
        try:
            for alias, physical in targets:
                reader = self._storage.open_index(indexname=physical).reader()
                subreaders = [reader] if reader.is_atomic() else [r for r, _ in reader.leaf_readers()]
                for sub in subreaders:
                    if sub.doc_count() > 0:
                        leaves.append((alias, sub))
                    else:
                        sub.close()
        except BaseException:
            for _, r in leaves:
                r.close()
            raise
        return leaves

    def _matching_docs(self, searcher: Searcher, query_doc: QueryDocument) -> Set[int]:
        """Docnums satisfying the minimum-should-match rule and the filter."""
        counts: Counter[int] = Counter()
        for clause in query_doc.recall:
            counts.update(set(searcher.docs_for_query(clause)))
        allowed = {d for d, n in counts.items() if n >= query_doc.minimum_should_match}
        if allowed:
            allowed &= set(searcher.docs_for_query(query_doc.filter))
        return allowed

    def _collect(
        self, searcher: Searcher, query_doc: QueryDocument, allowed: Set[int]
    ) -> List[Tuple[float, int, Dict[str, Any]]]:
        collector: Any = searcher.collector(limit=None, filter=allowed)
        if self.timeout:
            collector = TimeLimitCollector(collector, timelimit=self.timeout, use_alarm=False)
        searcher.search_with_collector(query_doc.scoring, collector)
        results = collector.results()
        hits = [(float(hit.score or 0.0), hit.docnum, hit.fields()) for hit in results]
        # Score descending; equal scores keep index order, then document order
        hits.sort(key=lambda item: (-item[0], item[1]))
        return hits

    def search(
        self,
        indexes: Sequence[str],
        query_doc: QueryDocument,
        *,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> BackendResponse:
        targets = [(alias, self.resolve_alias(alias)) for alias in indexes]
        if query_doc.matches_nothing:
            return BackendResponse(total=0, hits=[])

        try:
            leaves = self._open_leaf_readers(targets)
        except (OSError, WhooshIndexError) as exc:
            raise BackendUnavailable(f"Cannot open indexes {list(indexes)}") from exc
        if not leaves:
            return BackendResponse(total=0, hits=[])

        readers = [r for _, r in leaves]
        starts: List[int] = []
        position = 0
        for r in readers:
            starts.append(position)
            position += r.doc_count_all()
        reader = readers[0] if len(readers) == 1 else MultiReader(readers)

        try:
            with Searcher(reader, weighting=scoring.BM25F()) as searcher:
                allowed = self._matching_docs(searcher, query_doc)
                hits = self._collect(searcher, query_doc, allowed) if allowed else []
        except TimeLimit as exc:
            raise BackendTimeout(f"Search exceeded {self.timeout}s") from exc
        except (OSError, WhooshIndexError) as exc:
            raise BackendUnavailable(f"Search failed on {list(indexes)}") from exc

        page = hits[offset:] if limit is None else hits[offset : offset + limit]
        return BackendResponse(
            total=len(hits),
            hits=[
                RawHit(index=leaves[bisect.bisect_right(starts, docnum) - 1][0], score=score, source=source)
                for score, docnum, source in page
            ],
        )
