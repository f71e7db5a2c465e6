from datetime import datetime

import pytest

from uniforms.exceptions import NotFoundError
from uniforms.models.forms import MultipleChoiceQuestion, TextQuestion
from uniforms.services import fill as fill_service
from uniforms.services import forms as forms_service


@pytest.fixture
def published(backend, owner):
    """A linked form with one text and one multiple-choice question."""
    uid = owner.user_id
    form_id = forms_service.create_form(backend, uid, "Survey", "About you").form.id
    forms_service.replace_questions(backend, uid, form_id, [
        TextQuestion(id="q1", text="Name?"),
        MultipleChoiceQuestion(id="q2", text="Pick one", choices=["A", "B"]),
        TextQuestion(id="q3", text="Comments?"),
    ])
    forms_service.generate_link(backend, uid, form_id)
    return uid, form_id


def _stored_responses(backend, uid, form_id):
    return backend.store.query(fill_service.responses_collection(uid, form_id))


class TestLoadFill:
    def test_directory_miss_reads_no_form(self, backend, mocker):
        spy = mocker.spy(backend.store, "get")
        with pytest.raises(NotFoundError, match="Form not found in directory"):
            fill_service.load_fill(backend, "unknown")
        spy.assert_called_once_with("formDirectory/unknown")

    def test_unlinked_form_cannot_be_filled(self, backend, owner):
        form_id = forms_service.create_form(backend, owner.user_id, "Draft").form.id
        with pytest.raises(NotFoundError):
            fill_service.load_fill(backend, form_id)

    def test_deleted_form(self, backend, published):
        uid, form_id = published
        forms_service.delete_form(backend, uid, form_id)
        with pytest.raises(NotFoundError, match="Form not found for user"):
            fill_service.load_fill(backend, form_id)

    def test_renders_questions(self, backend, published):
        _, form_id = published
        form = fill_service.load_fill(backend, form_id)
        assert form.title == "Survey"
        assert [q.input for q in form.questions] == ["text", "radio", "text"]
        assert form.questions[1].options == ["A", "B"]
        assert form.answers == {"q1": "", "q2": "", "q3": ""}


class TestSubmit:
    def test_one_entry_per_question(self, backend, published):
        uid, form_id = published
        receipt = fill_service.submit(backend, form_id, {"q1": "Ada"})
        assert receipt.answer_count == 3
        (doc,) = _stored_responses(backend, uid, form_id)
        assert doc.id == receipt.response_id
        assert doc.data["formId"] == form_id
        assert isinstance(doc.data["submittedAt"], datetime)
        assert doc.data["responses"] == [
            {"questionId": "q1", "questionText": "Name?", "answer": "Ada"},
            {"questionId": "q2", "questionText": "Pick one", "answer": ""},
            {"questionId": "q3", "questionText": "Comments?", "answer": ""},
        ]

    def test_selected_choice_is_persisted(self, backend, published):
        uid, form_id = published
        fill_service.submit(backend, form_id, {"q2": "B"})
        (doc,) = _stored_responses(backend, uid, form_id)
        assert doc.data["responses"][1]["answer"] == "B"

    def test_answers_for_unknown_questions_are_dropped(self, backend, published):
        uid, form_id = published
        fill_service.submit(backend, form_id, {"stale": "x"})
        (doc,) = _stored_responses(backend, uid, form_id)
        assert [e["questionId"] for e in doc.data["responses"]] == ["q1", "q2", "q3"]

    def test_unknown_form(self, backend):
        with pytest.raises(NotFoundError, match="Form directory entry not found"):
            fill_service.submit(backend, "unknown", {})


def test_every_stored_choice_is_offered(backend, owner):
    uid = owner.user_id
    form_id = forms_service.create_form(backend, uid, "Survey").form.id
    backend.store.update(forms_service.form_path(uid, form_id), {"questions": [
        {"id": "q1", "text": "Pick", "type": "multiple-choice", "choices": list("ABCDEF")},
    ]})
    forms_service.generate_link(backend, uid, form_id)
    form = fill_service.load_fill(backend, form_id)
    assert form.questions[0].options == list("ABCDEF")
