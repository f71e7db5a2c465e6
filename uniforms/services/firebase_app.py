"""The firebase_admin App shared by the Firestore store and token verification."""

import logging

import firebase_admin
from firebase_admin import credentials

from uniforms.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


def get_app(credentials_file, project_id: str) -> firebase_admin.App:
    """Return the default App, initializing it from the service account on first use."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass
    try:
        cred = credentials.Certificate(str(credentials_file))
    except FileNotFoundError as e:
        raise AuthenticationError(
            f"Service account file not found at {credentials_file}. "
            "Download a key from the Firebase console and set SERVICE_ACCOUNT_FILE."
        ) from e
    except ValueError as e:
        raise AuthenticationError(f"Invalid service account file: {e}") from e
    logger.info("Initializing Firebase app for project %s", project_id)
    return firebase_admin.initialize_app(cred, {"projectId": project_id})
