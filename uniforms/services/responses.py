"""Responses viewer: every response of a form, answers labelled by question text."""

from uniforms.backend import BackendClient
from uniforms.models.responses import AnswerView, ResponsesView, ResponseView
from uniforms.services.fill import responses_collection
from uniforms.services.forms import get_form


def _label(entry: dict, current_text: dict[str, str]) -> str:
    question_id = str(entry.get("questionId", ""))
    return entry.get("questionText") or current_text.get(question_id) or question_id


def view_responses(backend: BackendClient, owner_id: str, form_id: str) -> ResponsesView:
    form = get_form(backend, owner_id, form_id)
    current_text = {q.id: q.text for q in form.questions}
    docs = backend.store.query(responses_collection(owner_id, form_id))
    docs.sort(key=lambda d: (d.data.get("submittedAt") is None, d.data.get("submittedAt") or 0, d.id))
    responses = []
    for doc in docs:
        entries = [e for e in doc.data.get("responses") or [] if isinstance(e, dict)]
        responses.append(ResponseView(
            response_id=doc.id,
            submitted_at=doc.data.get("submittedAt"),
            answers=[
                AnswerView(
                    question_id=str(e.get("questionId", "")),
                    label=_label(e, current_text),
                    answer=str(e.get("answer", "")),
                )
                for e in entries
            ],
        ))
    return ResponsesView(
        form_id=form_id,
        form_title=form.title,
        count=len(responses),
        responses=responses,
    )
