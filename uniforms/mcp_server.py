from fastmcp import FastMCP

from uniforms.backend import BackendClient
from uniforms.exceptions import (
    AuthenticationError,
    FormValidationError,
    IntegrationError,
    NotFoundError,
    RateLimitError,
)
from uniforms.services import forms as forms_service
from uniforms.services import responses as responses_service

TOOL_ERRORS = (AuthenticationError, FormValidationError, IntegrationError, NotFoundError, RateLimitError)


def _handle_mcp_error(e: Exception) -> dict:
    """Convert exceptions to agent-friendly error dicts."""
    if isinstance(e, AuthenticationError):
        return {"error": "auth_error", "message": str(e), "action": "Check the Firebase credentials in .env"}
    if isinstance(e, RateLimitError):
        return {"error": "rate_limit", "message": str(e), "action": "Wait a moment and retry"}
    if isinstance(e, NotFoundError):
        return {"error": "not_found", "message": str(e), "action": "Use forms_list to find a valid form id"}
    if isinstance(e, FormValidationError):
        return {"error": "validation_error", "message": str(e)}
    if isinstance(e, IntegrationError):
        return {"error": "integration_error", "message": str(e)}
    return {"error": "unknown_error", "message": str(e)}


def forms_list(backend: BackendClient, user_id: str) -> dict:
    try:
        forms = forms_service.list_forms(backend, user_id)
        return {"forms": [f.model_dump() for f in forms], "count": len(forms)}
    except TOOL_ERRORS as e:
        return _handle_mcp_error(e)


def form_get(backend: BackendClient, user_id: str, form_id: str) -> dict:
    try:
        return forms_service.get_form(backend, user_id, form_id).model_dump()
    except TOOL_ERRORS as e:
        return _handle_mcp_error(e)


def form_responses(backend: BackendClient, user_id: str, form_id: str) -> dict:
    try:
        return responses_service.view_responses(backend, user_id, form_id).model_dump(mode="json")
    except TOOL_ERRORS as e:
        return _handle_mcp_error(e)


def form_share_link(backend: BackendClient, user_id: str, form_id: str) -> dict:
    try:
        return forms_service.generate_link(backend, user_id, form_id).model_dump()
    except TOOL_ERRORS as e:
        return _handle_mcp_error(e)


def uniforms_status(backend: BackendClient) -> dict:
    settings = backend.settings
    return {
        "backend": backend.kind,
        "project_id": settings.firebase_project_id or None,
        "message": (
            f"Connected to Firebase project {settings.firebase_project_id}"
            if backend.kind == "firebase"
            else "In-memory backend: data is lost when the server stops"
        ),
    }


def build_mcp(backend: BackendClient) -> FastMCP:
    """MCP tools bound to one backend client."""
    mcp = FastMCP("UniForms")

    @mcp.tool(name="forms_list")
    def _forms_list(user_id: str) -> dict:
        """List a user's forms, newest first. Returns id, title and description for each."""
        return forms_list(backend, user_id)

    @mcp.tool(name="form_get")
    def _form_get(user_id: str, form_id: str) -> dict:
        """Get one form with its questions. Use forms_list first to find the form id."""
        return form_get(backend, user_id, form_id)

    @mcp.tool(name="form_responses")
    def _form_responses(user_id: str, form_id: str) -> dict:
        """Get every submitted response of a form, each answer labelled with its question text."""
        return form_responses(backend, user_id, form_id)

    @mcp.tool(name="form_share_link")
    def _form_share_link(user_id: str, form_id: str) -> dict:
        """Publish a form for public filling and return its share link."""
        return form_share_link(backend, user_id, form_id)

    @mcp.tool(name="uniforms_status")
    def _uniforms_status() -> dict:
        """Report which backend the server is using."""
        return uniforms_status(backend)

    return mcp
