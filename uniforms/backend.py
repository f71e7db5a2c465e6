"""Backend client facade: the document store and auth provider for one app instance."""

import logging
from dataclasses import dataclass

from fastapi import Request

from uniforms.config import Settings
from uniforms.identity import AuthProvider, InMemoryAuthProvider
from uniforms.store import DocumentStore, InMemoryDocumentStore

logger = logging.getLogger(__name__)


@dataclass
class BackendClient:
    store: DocumentStore
    auth: AuthProvider
    settings: Settings
    kind: str = "memory"


def build_backend(settings: Settings) -> BackendClient:
    """Construct the Firebase-backed client, or in-memory doubles when no project is set."""
    if not settings.uses_firebase:
        logger.info("Using in-memory document store and auth provider")
        return BackendClient(
            store=InMemoryDocumentStore(poll_seconds=settings.subscription_poll_seconds),
            auth=InMemoryAuthProvider(),
            settings=settings,
            kind="memory",
        )

    from uniforms.services.firebase_auth import FirebaseAuthProvider
    from uniforms.services.firestore import FirestoreDocumentStore

    logger.info("Using Firebase project %s", settings.firebase_project_id)
    return BackendClient(
        store=FirestoreDocumentStore(
            project_id=settings.firebase_project_id,
            credentials_file=settings.service_account_file,
            database=settings.firestore_database,
            poll_seconds=settings.subscription_poll_seconds,
        ),
        auth=FirebaseAuthProvider(
            api_key=settings.firebase_api_key,
            project_id=settings.firebase_project_id,
            credentials_file=settings.service_account_file,
        ),
        settings=settings,
        kind="firebase",
    )


def get_backend(request: Request) -> BackendClient:
    return request.app.state.backend
