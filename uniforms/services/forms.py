"""Form list and form editor operations on users/{uid}/forms.

Every editor mutation is written straight through as a field-scoped update
plus an ``updatedAt`` stamp. Question edits rewrite the whole array; two
concurrent writers race and the last write wins.
"""

import logging
import threading
from typing import Generator

from uniforms.backend import BackendClient
from uniforms.exceptions import FormValidationError, IntegrationError, NotFoundError, RateLimitError
from uniforms.models.forms import (
    MAX_CHOICES,
    EditorForm,
    FormCreated,
    FormSummary,
    MultipleChoiceQuestion,
    ShareLink,
    TextQuestion,
)
from uniforms.services import directory
from uniforms.services.questions import new_question_id, question_to_doc, questions_from_doc
from uniforms.store import SERVER_TIMESTAMP, Document

logger = logging.getLogger(__name__)

UNTITLED = "Untitled Form"
NO_DESCRIPTION = "No description"


def forms_collection(user_id: str) -> str:
    return f"users/{user_id}/forms"


def form_path(user_id: str, form_id: str) -> str:
    return f"{forms_collection(user_id)}/{form_id}"


def editor_path(form_id: str) -> str:
    return f"/form/{form_id}"


def fill_path(form_id: str) -> str:
    return f"/fill/{form_id}"


def responses_path(form_id: str) -> str:
    return f"/responses/{form_id}"


def _summary(doc: Document) -> FormSummary:
    return FormSummary(
        id=doc.id,
        title=doc.data.get("title") or UNTITLED,
        description=doc.data.get("description") or NO_DESCRIPTION,
    )


def _editor(form_id: str, data: dict) -> EditorForm:
    title = data.get("title")
    return EditorForm(
        form_id=form_id,
        title=UNTITLED if title is None else title,
        description=data.get("description") or "",
        questions=questions_from_doc(data),
        editor_path=editor_path(form_id),
        fill_path=fill_path(form_id),
        responses_path=responses_path(form_id),
    )


# --- Form list ---


def list_forms(backend: BackendClient, user_id: str) -> list[FormSummary]:
    """The user's forms, newest first."""
    docs = backend.store.query(forms_collection(user_id), order_by="createdAt", descending=True)
    return [_summary(d) for d in docs]


def watch_forms(
    backend: BackendClient, user_id: str, stop: threading.Event | None = None
) -> Generator[list[FormSummary], None, None]:
    """Yield the form list now and after every change, until ``stop`` is set."""
    snapshots = backend.store.watch(
        forms_collection(user_id), order_by="createdAt", descending=True, stop=stop
    )
    try:
        for docs in snapshots:
            yield [_summary(d) for d in docs]
    finally:
        snapshots.close()


def create_form(
    backend: BackendClient, user_id: str, title: str, description: str | None = None
) -> FormCreated:
    if not title.strip():
        raise FormValidationError("Please enter a form title")
    doc = backend.store.add(forms_collection(user_id), {
        "title": title,
        "description": description or NO_DESCRIPTION,
        "createdAt": SERVER_TIMESTAMP,
        "questions": [],
    })
    logger.info("Created form %s for user %s", doc.id, user_id)
    return FormCreated(form=_summary(doc), editor_path=editor_path(doc.id))


def delete_form(backend: BackendClient, user_id: str, form_id: str) -> None:
    backend.store.delete(form_path(user_id, form_id))
    logger.info("Deleted form %s for user %s", form_id, user_id)


# --- Editor ---


def get_form(backend: BackendClient, user_id: str, form_id: str) -> EditorForm:
    doc = backend.store.get(form_path(user_id, form_id))
    if doc is None:
        raise NotFoundError(f"Form {form_id} not found")
    return _editor(form_id, doc.data)


def open_form(backend: BackendClient, user_id: str, form_id: str) -> EditorForm:
    """Load a form for editing; a missing form resets to a blank, unsaved state."""
    try:
        return get_form(backend, user_id, form_id)
    except NotFoundError:
        logger.warning("Form %s not found for user %s, opening a blank form", form_id, user_id)
        return EditorForm()


def provision_form(backend: BackendClient, user_id: str) -> EditorForm:
    """Create a blank form for an editor opened without an id."""
    doc = backend.store.add(forms_collection(user_id), {
        "title": UNTITLED,
        "description": "",
        "questions": [],
        "createdAt": SERVER_TIMESTAMP,
    })
    logger.info("Provisioned form %s for user %s", doc.id, user_id)
    return _editor(doc.id, doc.data)


def _save(backend: BackendClient, user_id: str, form_id: str, field: str, value) -> None:
    try:
        backend.store.update(form_path(user_id, form_id), {field: value, "updatedAt": SERVER_TIMESTAMP})
    except (IntegrationError, RateLimitError) as e:
        logger.warning("Saving %s on form %s failed: %s", field, form_id, e)
        raise


def _save_questions(backend: BackendClient, user_id: str, form_id: str, questions: list) -> EditorForm:
    _save(backend, user_id, form_id, "questions", [question_to_doc(q) for q in questions])
    return get_form(backend, user_id, form_id)


def _load_questions(backend: BackendClient, user_id: str, form_id: str) -> list:
    return list(get_form(backend, user_id, form_id).questions)


def update_form(
    backend: BackendClient,
    user_id: str,
    form_id: str,
    title: str | None = None,
    description: str | None = None,
) -> EditorForm:
    """Persist title and/or description, one field-scoped write each."""
    if title is not None:
        _save(backend, user_id, form_id, "title", title)
    if description is not None:
        _save(backend, user_id, form_id, "description", description)
    return get_form(backend, user_id, form_id)


def replace_questions(backend: BackendClient, user_id: str, form_id: str, questions: list) -> EditorForm:
    ids = [q.id for q in questions]
    if len(ids) != len(set(ids)):
        raise FormValidationError("Question ids must be unique within a form")
    get_form(backend, user_id, form_id)
    return _save_questions(backend, user_id, form_id, questions)


def add_question(
    backend: BackendClient,
    user_id: str,
    form_id: str,
    text: str,
    kind: str = "text",
    choices: list[str] | None = None,
) -> EditorForm:
    if not text.strip():
        raise FormValidationError("Please enter a question")
    questions = _load_questions(backend, user_id, form_id)
    question_id = new_question_id({q.id for q in questions})
    if kind == "multiple-choice":
        choices = choices or [""]
        if len(choices) > MAX_CHOICES:
            raise FormValidationError(f"Maximum {MAX_CHOICES} choices allowed")
        if any(not c.strip() for c in choices):
            raise FormValidationError("Please fill in all choices")
        question = MultipleChoiceQuestion(id=question_id, text=text, choices=choices)
    elif kind == "text":
        question = TextQuestion(id=question_id, text=text)
    else:
        raise FormValidationError(f"Unknown question kind: {kind}")
    return _save_questions(backend, user_id, form_id, [*questions, question])


def remove_question(backend: BackendClient, user_id: str, form_id: str, question_id: str) -> EditorForm:
    questions = _load_questions(backend, user_id, form_id)
    return _save_questions(backend, user_id, form_id, [q for q in questions if q.id != question_id])


def _find_question(questions: list, question_id: str) -> int:
    for index, question in enumerate(questions):
        if question.id == question_id:
            return index
    raise NotFoundError(f"Question {question_id} not found")


def _find_choice_question(questions: list, question_id: str) -> tuple[int, MultipleChoiceQuestion]:
    index = _find_question(questions, question_id)
    question = questions[index]
    if not isinstance(question, MultipleChoiceQuestion):
        raise FormValidationError("Only multiple-choice questions have choices")
    return index, question


def edit_question_text(
    backend: BackendClient, user_id: str, form_id: str, question_id: str, text: str
) -> EditorForm:
    questions = _load_questions(backend, user_id, form_id)
    index = _find_question(questions, question_id)
    questions[index] = questions[index].model_copy(update={"text": text})
    return _save_questions(backend, user_id, form_id, questions)


def add_choice(backend: BackendClient, user_id: str, form_id: str, question_id: str) -> EditorForm:
    questions = _load_questions(backend, user_id, form_id)
    index, question = _find_choice_question(questions, question_id)
    if len(question.choices) >= MAX_CHOICES:
        raise FormValidationError(f"Maximum {MAX_CHOICES} choices allowed")
    questions[index] = question.model_copy(update={"choices": [*question.choices, ""]})
    return _save_questions(backend, user_id, form_id, questions)


def update_choice(
    backend: BackendClient, user_id: str, form_id: str, question_id: str, choice_index: int, value: str
) -> EditorForm:
    questions = _load_questions(backend, user_id, form_id)
    index, question = _find_choice_question(questions, question_id)
    if not 0 <= choice_index < len(question.choices):
        raise NotFoundError(f"Choice {choice_index} not found")
    choices = list(question.choices)
    choices[choice_index] = value
    questions[index] = question.model_copy(update={"choices": choices})
    return _save_questions(backend, user_id, form_id, questions)


def remove_choice(
    backend: BackendClient, user_id: str, form_id: str, question_id: str, choice_index: int
) -> EditorForm:
    """Drop one choice; removing the last remaining choice does nothing."""
    form = get_form(backend, user_id, form_id)
    questions = list(form.questions)
    index, question = _find_choice_question(questions, question_id)
    if not 0 <= choice_index < len(question.choices):
        raise NotFoundError(f"Choice {choice_index} not found")
    if len(question.choices) == 1:
        return form
    choices = [c for i, c in enumerate(question.choices) if i != choice_index]
    questions[index] = question.model_copy(update={"choices": choices})
    return _save_questions(backend, user_id, form_id, questions)


def generate_link(backend: BackendClient, user_id: str, form_id: str) -> ShareLink:
    """Build the share link and publish the form in the directory."""
    get_form(backend, user_id, form_id)
    directory.register(backend, form_id, user_id)
    link = f"{backend.settings.share_link_base}/{user_id}/{form_id}"
    return ShareLink(form_id=form_id, owner_id=user_id, link=link)
