"""Form directory: formDirectory/{formId} -> {userId}."""

import logging

from uniforms.backend import BackendClient
from uniforms.exceptions import NotFoundError

logger = logging.getLogger(__name__)

DIRECTORY_COLLECTION = "formDirectory"
NOT_IN_DIRECTORY = "Form not found in directory"


def register(backend: BackendClient, form_id: str, user_id: str) -> None:
    backend.store.set(f"{DIRECTORY_COLLECTION}/{form_id}", {"userId": user_id})
    logger.info("Directory entry written for form %s", form_id)


def resolve_owner(backend: BackendClient, form_id: str, missing_message: str = NOT_IN_DIRECTORY) -> str:
    """Return the owning user id, or raise NotFoundError with ``missing_message``."""
    entry = backend.store.get(f"{DIRECTORY_COLLECTION}/{form_id}")
    if entry is None or not entry.data.get("userId"):
        raise NotFoundError(missing_message)
    return str(entry.data["userId"])
