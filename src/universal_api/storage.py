"""Document stores.

Two implementations share the same three operations (``save``, ``get``,
``list_all``):

* :class:`MemoryStorage` -- a lock-guarded dict, for tests and one-shot runs.
* :class:`FileStorage` -- one ``<id>.json`` file per document in a
  directory, written atomically (temp file + rename).
"""

import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from universal_api.exceptions import DocumentNotFound, StorageError
from universal_api.parser.base import CanonicalDocument

logger = logging.getLogger(__name__)


class Storage(Protocol):
    def save(self, doc: CanonicalDocument) -> None: ...

    def get(self, doc_id: str) -> CanonicalDocument: ...

    def list_all(self) -> list[CanonicalDocument]: ...


class MemoryStorage:
    """Keeps documents in memory, in insertion order."""

    def __init__(self):
        self._docs: dict[str, CanonicalDocument] = {}
        self._lock = threading.Lock()

    def save(self, doc: CanonicalDocument) -> None:
        if not doc.id:
            raise StorageError("API doc ID cannot be empty")
        with self._lock:
            self._docs[doc.id] = doc

    def get(self, doc_id: str) -> CanonicalDocument:
        with self._lock:
            try:
                return self._docs[doc_id]
            except KeyError:
                raise DocumentNotFound(doc_id) from None

    def list_all(self) -> list[CanonicalDocument]:
        with self._lock:
            return list(self._docs.values())


class FileStorage:
    """Stores each document as ``<directory>/<id>.json``."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, doc_id: str) -> Path:
        if not doc_id or "/" in doc_id or "\\" in doc_id or doc_id.startswith("."):
            raise StorageError(f"Invalid API doc ID: {doc_id!r}")
        return self.directory / f"{doc_id}.json"

    def save(self, doc: CanonicalDocument) -> None:
        if not doc.id:
            raise StorageError("API doc ID cannot be empty")
        path = self._path(doc.id)
        try:
            _atomic_write(path, doc.to_json() + "\n")
        except OSError as exc:
            raise StorageError(f"Failed to write {path}: {exc}") from exc
        logger.debug("Saved %s to %s", doc.id, path)

    def get(self, doc_id: str) -> CanonicalDocument:
        path = self._path(doc_id)
        if not path.is_file():
            raise DocumentNotFound(doc_id)
        return _load(path)

    def list_all(self) -> list[CanonicalDocument]:
        if not self.directory.is_dir():
            return []
        docs = [_load(path) for path in self.directory.glob("*.json")]
        return sorted(docs, key=lambda d: (d.created_at, d.id))


def _load(path: Path) -> CanonicalDocument:
    try:
        return CanonicalDocument.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as exc:
        raise StorageError(f"Failed to read {path}: {exc}") from exc


def _atomic_write(path: Path, data: str) -> None:
    """Write ``data`` to a temp file next to ``path`` and rename it into place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
        encoding="utf-8",
    )
    try:
        with fd:
            fd.write(data)
            fd.flush()
            os.fsync(fd.fileno())
        os.replace(fd.name, path)
    except BaseException:
        Path(fd.name).unlink(missing_ok=True)
        raise
