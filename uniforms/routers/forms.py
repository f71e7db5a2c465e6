import threading

from anyio import to_thread
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from uniforms.auth import current_user
from uniforms.backend import BackendClient, get_backend
from uniforms.models.auth import AuthUser
from uniforms.models.forms import (
    AddQuestionRequest,
    CreateFormRequest,
    EditorForm,
    EditQuestionRequest,
    FormCreated,
    FormList,
    ReplaceQuestionsRequest,
    ShareLink,
    UpdateChoiceRequest,
    UpdateFormRequest,
)
from uniforms.services import forms as forms_service

router = APIRouter(prefix="/api/forms", tags=["forms"])


# --- Form list ---


@router.get("")
def list_forms(user: AuthUser = Depends(current_user), backend: BackendClient = Depends(get_backend)) -> FormList:
    forms = forms_service.list_forms(backend, user.user_id)
    return FormList(forms=forms, count=len(forms))


async def _sse(snapshots, stop: threading.Event):
    """Encode snapshots as events. Leaving the loop sets ``stop``, which ends the watch."""
    try:
        while True:
            # A disconnect cancels this await without waiting for the worker;
            # the worker returns once it sees ``stop``.
            forms = await to_thread.run_sync(next, snapshots, None, abandon_on_cancel=True)
            if forms is None:
                return
            payload = FormList(forms=forms, count=len(forms)).model_dump_json()
            yield f"event: forms\ndata: {payload}\n\n"
    finally:
        stop.set()
        # A worker abandoned mid-read still owns the generator and finishes it.
        if not snapshots.gi_running:
            snapshots.close()


@router.get("/stream")
def stream_forms(user: AuthUser = Depends(current_user), backend: BackendClient = Depends(get_backend)):
    """Server-Sent Events: the full form list now and after every change."""
    stop = threading.Event()
    snapshots = forms_service.watch_forms(backend, user.user_id, stop)
    return StreamingResponse(_sse(snapshots, stop), media_type="text/event-stream")


@router.post("", status_code=201)
def create_form(
    request: CreateFormRequest,
    user: AuthUser = Depends(current_user),
    backend: BackendClient = Depends(get_backend),
) -> FormCreated:
    return forms_service.create_form(backend, user.user_id, request.title, request.description)


@router.post("/provision", status_code=201)
def provision_form(user: AuthUser = Depends(current_user), backend: BackendClient = Depends(get_backend)) -> EditorForm:
    return forms_service.provision_form(backend, user.user_id)


@router.delete("/{form_id}", status_code=204)
def delete_form(form_id: str, user: AuthUser = Depends(current_user), backend: BackendClient = Depends(get_backend)):
    forms_service.delete_form(backend, user.user_id, form_id)


# --- Editor ---


@router.get("/{form_id}")
def open_form(form_id: str, user: AuthUser = Depends(current_user), backend: BackendClient = Depends(get_backend)) -> EditorForm:
    return forms_service.open_form(backend, user.user_id, form_id)


@router.patch("/{form_id}")
def update_form(
    form_id: str,
    request: UpdateFormRequest,
    user: AuthUser = Depends(current_user),
    backend: BackendClient = Depends(get_backend),
) -> EditorForm:
    return forms_service.update_form(backend, user.user_id, form_id, request.title, request.description)


@router.put("/{form_id}/questions")
def replace_questions(
    form_id: str,
    request: ReplaceQuestionsRequest,
    user: AuthUser = Depends(current_user),
    backend: BackendClient = Depends(get_backend),
) -> EditorForm:
    return forms_service.replace_questions(backend, user.user_id, form_id, request.questions)


@router.post("/{form_id}/questions")
def add_question(
    form_id: str,
    request: AddQuestionRequest,
    user: AuthUser = Depends(current_user),
    backend: BackendClient = Depends(get_backend),
) -> EditorForm:
    return forms_service.add_question(
        backend, user.user_id, form_id, request.text, request.kind, request.choices,
    )


@router.patch("/{form_id}/questions/{question_id}")
def edit_question(
    form_id: str,
    question_id: str,
    request: EditQuestionRequest,
    user: AuthUser = Depends(current_user),
    backend: BackendClient = Depends(get_backend),
) -> EditorForm:
    return forms_service.edit_question_text(backend, user.user_id, form_id, question_id, request.text)


@router.delete("/{form_id}/questions/{question_id}")
def remove_question(
    form_id: str,
    question_id: str,
    user: AuthUser = Depends(current_user),
    backend: BackendClient = Depends(get_backend),
) -> EditorForm:
    return forms_service.remove_question(backend, user.user_id, form_id, question_id)


@router.post("/{form_id}/questions/{question_id}/choices")
def add_choice(
    form_id: str,
    question_id: str,
    user: AuthUser = Depends(current_user),
    backend: BackendClient = Depends(get_backend),
) -> EditorForm:
    return forms_service.add_choice(backend, user.user_id, form_id, question_id)


@router.put("/{form_id}/questions/{question_id}/choices/{index}")
def update_choice(
    form_id: str,
    question_id: str,
    index: int,
    request: UpdateChoiceRequest,
    user: AuthUser = Depends(current_user),
    backend: BackendClient = Depends(get_backend),
) -> EditorForm:
    return forms_service.update_choice(backend, user.user_id, form_id, question_id, index, request.value)


@router.delete("/{form_id}/questions/{question_id}/choices/{index}")
def remove_choice(
    form_id: str,
    question_id: str,
    index: int,
    user: AuthUser = Depends(current_user),
    backend: BackendClient = Depends(get_backend),
) -> EditorForm:
    return forms_service.remove_choice(backend, user.user_id, form_id, question_id, index)


@router.post("/{form_id}/link")
def generate_link(form_id: str, user: AuthUser = Depends(current_user), backend: BackendClient = Depends(get_backend)) -> ShareLink:
    return forms_service.generate_link(backend, user.user_id, form_id)
