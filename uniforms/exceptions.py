class AuthenticationError(Exception):
    """Raised when credentials are rejected or a session token is missing or invalid."""


class IntegrationError(Exception):
    """Raised when a backend read or write fails."""


class RateLimitError(Exception):
    """Raised when a backend quota is hit."""


class NotFoundError(Exception):
    """Raised when a form or directory document does not exist."""


class FormValidationError(Exception):
    """Raised when user input is rejected before any backend call."""
