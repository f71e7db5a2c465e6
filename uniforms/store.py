"""
Document store interface and an in-memory implementation.

Paths are slash-separated, alternating collection and document ids, e.g.
``users/{uid}/forms/{formId}``. A collection path has an odd number of
segments, a document path an even number.

``SERVER_TIMESTAMP`` is the Firestore client's own sentinel; both stores
resolve it to the commit time.
"""

import copy
import secrets
import string
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Generator, Optional, Protocol

from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from uniforms.exceptions import NotFoundError

AUTO_ID_ALPHABET = string.ascii_letters + string.digits
AUTO_ID_LENGTH = 20


def new_document_id() -> str:
    return "".join(secrets.choice(AUTO_ID_ALPHABET) for _ in range(AUTO_ID_LENGTH))


def parent_of(path: str) -> str:
    return path.rsplit("/", 1)[0]


@dataclass
class Document:
    id: str
    path: str
    data: dict = field(default_factory=dict)


class DocumentStore(Protocol):
    """Operations the app needs from the document database."""

    def get(self, path: str) -> Optional[Document]:
        ...

    def add(self, collection: str, data: dict) -> Document:
        ...

    def set(self, path: str, data: dict) -> None:
        ...

    def update(self, path: str, fields: dict) -> None:
        ...

    def delete(self, path: str) -> None:
        ...

    def query(
        self, collection: str, order_by: str | None = None, descending: bool = False
    ) -> list[Document]:
        ...

    def watch(
        self,
        collection: str,
        order_by: str | None = None,
        descending: bool = False,
        stop: threading.Event | None = None,
    ) -> Generator[list[Document], None, None]:
        """Yield snapshots until ``stop`` is set; the generator then returns."""
        ...


def _sort_documents(
    docs: list[Document], order_by: str | None, descending: bool
) -> list[Document]:
    if not order_by:
        return sorted(docs, key=lambda d: d.id)
    # Firestore drops documents that lack the ordering field.
    docs = [d for d in docs if d.data.get(order_by) is not None]
    return sorted(docs, key=lambda d: d.data[order_by], reverse=descending)


class InMemoryDocumentStore:
    """Process-local store for development and tests.

    ``poll_seconds`` bounds how long a ``watch`` waits before rechecking its
    stop event.
    """

    def __init__(self, poll_seconds: float = 1.0):
        self.poll_seconds = poll_seconds
        self.docs: dict[str, dict] = {}
        self._version = 0
        self._changed = threading.Condition(threading.RLock())

    def _resolve(self, data: dict) -> dict:
        now = datetime.now(timezone.utc)
        return {
            key: now if value is SERVER_TIMESTAMP else copy.deepcopy(value)
            for key, value in data.items()
        }

    def _touch(self) -> None:
        self._version += 1
        self._changed.notify_all()

    def get(self, path: str) -> Optional[Document]:
        with self._changed:
            data = self.docs.get(path)
            if data is None:
                return None
            return Document(id=path.rsplit("/", 1)[1], path=path, data=copy.deepcopy(data))

    def add(self, collection: str, data: dict) -> Document:
        doc_id = new_document_id()
        path = f"{collection}/{doc_id}"
        with self._changed:
            self.docs[path] = self._resolve(data)
            self._touch()
            return Document(id=doc_id, path=path, data=copy.deepcopy(self.docs[path]))

    def set(self, path: str, data: dict) -> None:
        with self._changed:
            self.docs[path] = self._resolve(data)
            self._touch()

    def update(self, path: str, fields: dict) -> None:
        with self._changed:
            existing = self.docs.get(path)
            if existing is None:
                raise NotFoundError(f"No document to update: {path}")
            existing.update(self._resolve(fields))
            self._touch()

    def delete(self, path: str) -> None:
        with self._changed:
            self.docs.pop(path, None)
            self._touch()

    def query(
        self, collection: str, order_by: str | None = None, descending: bool = False
    ) -> list[Document]:
        with self._changed:
            docs = [
                Document(id=path.rsplit("/", 1)[1], path=path, data=copy.deepcopy(data))
                for path, data in self.docs.items()
                if parent_of(path) == collection
            ]
        return _sort_documents(docs, order_by, descending)

    def watch(
        self,
        collection: str,
        order_by: str | None = None,
        descending: bool = False,
        stop: threading.Event | None = None,
    ) -> Generator[list[Document], None, None]:
        """Yield the collection now, then again whenever it changes."""
        stop = stop or threading.Event()
        previous: list[Document] | None = None
        seen_version = -1
        while not stop.is_set():
            with self._changed:
                while self._version == seen_version and not stop.is_set():
                    self._changed.wait(timeout=self.poll_seconds)
                seen_version = self._version
            if stop.is_set():
                return
            snapshot = self.query(collection, order_by, descending)
            if snapshot != previous:
                previous = snapshot
                yield snapshot

    def reset(self) -> None:
        """Clear all stored documents (useful in tests)."""
        with self._changed:
            self.docs.clear()
            self._touch()
