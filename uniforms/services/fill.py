"""Public form filling: resolve the owner through the directory, then read or append."""

import logging

from uniforms.backend import BackendClient
from uniforms.exceptions import NotFoundError
from uniforms.models.fill import FillForm, FillQuestion, SubmissionReceipt
from uniforms.models.forms import MultipleChoiceQuestion, TextQuestion
from uniforms.services import directory
from uniforms.services.forms import form_path
from uniforms.services.questions import questions_from_doc
from uniforms.store import SERVER_TIMESTAMP

logger = logging.getLogger(__name__)


def responses_collection(user_id: str, form_id: str) -> str:
    return f"{form_path(user_id, form_id)}/responses"


def _render(question: TextQuestion | MultipleChoiceQuestion) -> FillQuestion:
    if isinstance(question, MultipleChoiceQuestion):
        return FillQuestion(id=question.id, text=question.text, input="radio", options=list(question.choices))
    if isinstance(question, TextQuestion):
        return FillQuestion(id=question.id, text=question.text, input="text")
    raise TypeError(f"Unknown question variant: {type(question).__name__}")


def _load_owned_form(
    backend: BackendClient, form_id: str, missing_message: str = directory.NOT_IN_DIRECTORY
) -> tuple[str, dict]:
    owner_id = directory.resolve_owner(backend, form_id, missing_message)
    doc = backend.store.get(form_path(owner_id, form_id))
    if doc is None:
        raise NotFoundError("Form not found for user")
    return owner_id, doc.data


def load_fill(backend: BackendClient, form_id: str) -> FillForm:
    """Form contents for a respondent, with one empty answer slot per question."""
    _, data = _load_owned_form(backend, form_id)
    questions = questions_from_doc(data)
    return FillForm(
        form_id=form_id,
        title=data.get("title") or "Untitled Form",
        description=data.get("description") or "",
        questions=[_render(q) for q in questions],
        answers={q.id: "" for q in questions},
    )


def submit(backend: BackendClient, form_id: str, answers: dict[str, str]) -> SubmissionReceipt:
    """Append one response holding an entry for every current question.

    The directory is read again rather than trusted from the earlier load.
    Question text is frozen onto each entry at submission time.
    """
    owner_id, data = _load_owned_form(backend, form_id, missing_message="Form directory entry not found")
    entries = [
        {"questionId": q.id, "questionText": q.text, "answer": answers.get(q.id, "")}
        for q in questions_from_doc(data)
    ]
    doc = backend.store.add(responses_collection(owner_id, form_id), {
        "formId": form_id,
        "responses": entries,
        "submittedAt": SERVER_TIMESTAMP,
    })
    logger.info("Response %s submitted for form %s", doc.id, form_id)
    return SubmissionReceipt(form_id=form_id, response_id=doc.id, answer_count=len(entries))
