from fastapi import APIRouter, Depends

from uniforms.auth import current_user
from uniforms.backend import BackendClient, get_backend
from uniforms.models.auth import AuthUser
from uniforms.models.responses import ResponsesView
from uniforms.services import responses as responses_service

router = APIRouter(prefix="/api", tags=["responses"])


@router.get("/responses/{form_id}")
def own_responses(form_id: str, user: AuthUser = Depends(current_user), backend: BackendClient = Depends(get_backend)) -> ResponsesView:
    return responses_service.view_responses(backend, user.user_id, form_id)


@router.get("/view-responses/{user_id}/{form_id}")
def owner_responses(user_id: str, form_id: str, backend: BackendClient = Depends(get_backend)) -> ResponsesView:
    """Responses for an explicit owner; unauthenticated, the ids act as the secret."""
    return responses_service.view_responses(backend, user_id, form_id)
