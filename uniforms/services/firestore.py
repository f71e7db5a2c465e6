"""Cloud Firestore document store on the google-cloud-firestore client.

``watch`` registers an ``on_snapshot`` listener and hands its snapshots to the
consuming thread through a queue. The listener is unsubscribed when the
generator finishes, which happens once its stop event is set.
"""

import logging
import queue
import threading
from typing import Generator, Optional

from firebase_admin import firestore
from google.api_core import exceptions
from google.cloud.firestore_v1 import Query

from uniforms.exceptions import AuthenticationError, IntegrationError, NotFoundError, RateLimitError
from uniforms.services.firebase_app import get_app
from uniforms.store import SERVER_TIMESTAMP, Document

logger = logging.getLogger(__name__)


def _get_firestore_client(project_id: str, credentials_file, database: str):
    app = get_app(credentials_file, project_id)
    return firestore.client(app=app, database_id=database)


def _handle_api_error(e: exceptions.GoogleAPICallError):
    if isinstance(e, (exceptions.TooManyRequests, exceptions.ResourceExhausted)):
        raise RateLimitError("Firestore quota exceeded. Try again shortly.") from e
    if isinstance(e, (exceptions.Unauthenticated, exceptions.PermissionDenied)):
        raise AuthenticationError("Firestore rejected the request: permission denied.") from e
    if isinstance(e, exceptions.NotFound):
        raise NotFoundError("Document not found") from e
    logger.warning("Firestore API error: %s", e)
    raise IntegrationError(f"Firestore API error: {e}") from e


def _to_document(snapshot) -> Document:
    return Document(id=snapshot.id, path=snapshot.reference.path, data=snapshot.to_dict() or {})


class FirestoreDocumentStore:
    """DocumentStore backed by a Firebase project's Firestore database."""

    def __init__(
        self,
        project_id: str,
        credentials_file,
        database: str = "(default)",
        poll_seconds: float = 2.0,
    ):
        if not project_id:
            raise ValueError("FIREBASE_PROJECT_ID is required for FirestoreDocumentStore")
        self.project_id = project_id
        self.credentials_file = credentials_file
        self.database = database
        self.poll_seconds = poll_seconds
        self._client = None

    @property
    def client(self):
        if self._client is None:
            self._client = _get_firestore_client(self.project_id, self.credentials_file, self.database)
        return self._client

    def _query(self, collection: str, order_by: str | None, descending: bool):
        query = self.client.collection(collection)
        if order_by:
            direction = Query.DESCENDING if descending else Query.ASCENDING
            query = query.order_by(order_by, direction=direction)
        return query

    def get(self, path: str) -> Optional[Document]:
        try:
            snapshot = self.client.document(path).get()
        except exceptions.GoogleAPICallError as e:
            _handle_api_error(e)
        if not snapshot.exists:
            return None
        return _to_document(snapshot)

    def add(self, collection: str, data: dict) -> Document:
        try:
            _, ref = self.client.collection(collection).add(data)
        except exceptions.GoogleAPICallError as e:
            _handle_api_error(e)
        written = {k: v for k, v in data.items() if v is not SERVER_TIMESTAMP}
        return Document(id=ref.id, path=ref.path, data=written)

    def set(self, path: str, data: dict) -> None:
        try:
            self.client.document(path).set(data)
        except exceptions.GoogleAPICallError as e:
            _handle_api_error(e)

    def update(self, path: str, fields: dict) -> None:
        try:
            self.client.document(path).update(fields)
        except exceptions.GoogleAPICallError as e:
            _handle_api_error(e)

    def delete(self, path: str) -> None:
        try:
            self.client.document(path).delete()
        except exceptions.GoogleAPICallError as e:
            _handle_api_error(e)

    def query(
        self, collection: str, order_by: str | None = None, descending: bool = False
    ) -> list[Document]:
        try:
            return [_to_document(s) for s in self._query(collection, order_by, descending).stream()]
        except exceptions.GoogleAPICallError as e:
            _handle_api_error(e)

    def watch(
        self,
        collection: str,
        order_by: str | None = None,
        descending: bool = False,
        stop: threading.Event | None = None,
    ) -> Generator[list[Document], None, None]:
        stop = stop or threading.Event()
        snapshots: queue.Queue = queue.Queue()

        def on_snapshot(docs, changes, read_time):
            snapshots.put([_to_document(d) for d in docs])

        listener = self._query(collection, order_by, descending).on_snapshot(on_snapshot)
        try:
            while not stop.is_set():
                try:
                    snapshot = snapshots.get(timeout=self.poll_seconds)
                except queue.Empty:
                    continue
                yield snapshot
        finally:
            listener.unsubscribe()
            logger.debug("Stopped watching %s", collection)
