# boundless/data_client/document_store.py
"""
JSON document store.

Responsibilities:
- Keep named collections of JSON documents (dicts with a string "_id")
- Equality lookups (plus an optional predicate) over top-level keys
- Atomic find-and-upsert guarded by a single store lock
- Unique indexes over one or more fields (violations raise ConflictError)

Storage layout (when a data root is configured):
    <data_root>/<collection>.json   -> list of documents

Without a data root everything lives in memory, which is what tests use.

IMPORTANT:
- Documents are stored JSON-ready (datetimes already serialized); callers
  dump their pydantic models with mode="json" before writing.
- Returned documents are deep copies; mutating them never changes the store.
- The lock covers one process only. Several API instances sharing data need
  a database with a real unique index.
"""

from __future__ import annotations

import copy
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from boundless.errors import ConflictError
from boundless.utils import load_json_file, new_object_id, save_json_file

logger = logging.getLogger("boundless-api.store")

Document = Dict[str, Any]
Predicate = Callable[[Document], bool]


def _matches(doc: Document, filters: Dict[str, Any], where: Optional[Predicate]) -> bool:
    for key, expected in filters.items():
        if doc.get(key) != expected:
            return False
    return where(doc) if where is not None else True


class DocumentStore:
    def __init__(self, root: Optional[Path] = None) -> None:
        self.root = root
        self._lock = threading.RLock()
        self._collections: Dict[str, List[Document]] = {}
        self._unique: Dict[str, List[Tuple[str, ...]]] = {}

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def collection_file(self, name: str) -> Optional[Path]:
        return self.root / f"{name}.json" if self.root is not None else None

    def _docs(self, name: str) -> List[Document]:
        docs = self._collections.get(name)
        if docs is not None:
            return docs

        docs = []
        path = self.collection_file(name)
        if path is not None and path.exists():
            raw = load_json_file(path)
            docs = [d for d in raw if isinstance(d, dict)] if isinstance(raw, list) else []
            logger.info("Loaded %d documents from %s", len(docs), path)
        self._collections[name] = docs
        return docs

    def _flush(self, name: str) -> None:
        path = self.collection_file(name)
        if path is not None:
            save_json_file(path, self._collections.get(name, []))

    def _check_unique(self, name: str, candidate: Document) -> None:
        for fields in self._unique.get(name, []):
            key = tuple(candidate.get(f) for f in fields)
            if any(v is None for v in key):
                continue
            for doc in self._docs(name):
                if doc.get("_id") == candidate.get("_id"):
                    continue
                if tuple(doc.get(f) for f in fields) == key:
                    raise ConflictError(
                        f"Duplicate key in '{name}' for ({', '.join(fields)}) = {key}"
                    )

    # ------------------------------------------------------------------
    # Indexes
    # ------------------------------------------------------------------
    def ensure_unique_index(self, name: str, fields: Sequence[str]) -> None:
        with self._lock:
            key = tuple(fields)
            indexes = self._unique.setdefault(name, [])
            if key not in indexes:
                indexes.append(key)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def find_one(
        self, name: str, filters: Optional[Dict[str, Any]] = None, where: Optional[Predicate] = None
    ) -> Optional[Document]:
        with self._lock:
            for doc in self._docs(name):
                if _matches(doc, filters or {}, where):
                    return copy.deepcopy(doc)
        return None

    def find(
        self,
        name: str,
        filters: Optional[Dict[str, Any]] = None,
        where: Optional[Predicate] = None,
        sort_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Document]:
        with self._lock:
            out = [copy.deepcopy(d) for d in self._docs(name) if _matches(d, filters or {}, where)]
        if sort_by:
            # Documents without the sort key always go last
            present = [d for d in out if d.get(sort_by) is not None]
            present.sort(key=lambda d: d[sort_by], reverse=descending)
            out = present + [d for d in out if d.get(sort_by) is None]
        return out

    def count(self, name: str, filters: Optional[Dict[str, Any]] = None, where: Optional[Predicate] = None) -> int:
        with self._lock:
            return sum(1 for d in self._docs(name) if _matches(d, filters or {}, where))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def insert_one(self, name: str, doc: Document) -> Document:
        with self._lock:
            stored = copy.deepcopy(doc)
            if not stored.get("_id"):
                stored["_id"] = new_object_id()
            if self.find_one(name, {"_id": stored["_id"]}) is not None:
                raise ConflictError(f"Duplicate _id in '{name}': {stored['_id']}")
            self._check_unique(name, stored)
            self._docs(name).append(stored)
            self._flush(name)
            return copy.deepcopy(stored)

    def update_one(self, name: str, filters: Dict[str, Any], values: Dict[str, Any]) -> Optional[Document]:
        """
        Shallow-merge `values` into the first matching document.
        Returns the updated document, or None when nothing matched.
        """
        with self._lock:
            for idx, doc in enumerate(self._docs(name)):
                if not _matches(doc, filters, None):
                    continue
                updated = copy.deepcopy(doc)
                updated.update(copy.deepcopy(values))
                updated["_id"] = doc["_id"]
                self._check_unique(name, updated)
                self._docs(name)[idx] = updated
                self._flush(name)
                return copy.deepcopy(updated)
        return None

    def upsert_one(
        self,
        name: str,
        filters: Dict[str, Any],
        values: Dict[str, Any],
        on_insert: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Document, bool]:
        """
        Atomic find-and-upsert.

        - Match -> `values` overwrite the matching document in place (same _id)
        - No match -> a new document is built from filters + on_insert + values

        Returns (document, created).
        """
        with self._lock:
            updated = self.update_one(name, filters, values)
            if updated is not None:
                return updated, False

            doc: Document = {}
            doc.update(filters)
            doc.update(on_insert or {})
            doc.update(values)
            return self.insert_one(name, doc), True

    def delete_one(self, name: str, filters: Dict[str, Any]) -> bool:
        with self._lock:
            docs = self._docs(name)
            for idx, doc in enumerate(docs):
                if _matches(doc, filters, None):
                    del docs[idx]
                    self._flush(name)
                    return True
        return False

    def delete_many(self, name: str, filters: Dict[str, Any]) -> int:
        with self._lock:
            docs = self._docs(name)
            kept = [d for d in docs if not _matches(d, filters, None)]
            removed = len(docs) - len(kept)
            if removed:
                docs[:] = kept
                self._flush(name)
            return removed


# ----------------------------------------------------------------------
# Collections used by the API
# ----------------------------------------------------------------------
ORGANIZATIONS = "organizations"
HACKATHONS = "hackathons"
SUBMISSIONS = "submissions"
JUDGING_SCORES = "judging_scores"
REGISTRATIONS = "registrations"

COLLECTIONS = (ORGANIZATIONS, HACKATHONS, REGISTRATIONS, SUBMISSIONS, JUDGING_SCORES)


def create_store(root: Optional[Path] = None) -> DocumentStore:
    """
    Build the store with the indexes every deployment relies on:
    - one score per judge per submission
    - one registration and one submission per participant per hackathon
    - unique hackathon slugs
    """
    store = DocumentStore(root)
    store.ensure_unique_index(JUDGING_SCORES, ("submissionId", "judgeId"))
    store.ensure_unique_index(SUBMISSIONS, ("hackathonId", "participantId"))
    store.ensure_unique_index(REGISTRATIONS, ("hackathonId", "userId"))
    store.ensure_unique_index(HACKATHONS, ("slug",))
    return store
