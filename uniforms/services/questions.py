"""Question documents <-> the Question union, and question id generation.

Stored shape: ``{id, text, type, choices?}`` with ``type`` either ``"text"``
or ``"multiple-choice"``. Earlier drafts of the app wrote
``type: "multipleChoice"`` and ``options``; those are read but never written.
"""

import logging
import secrets

from uniforms.models.forms import MultipleChoiceQuestion, TextQuestion

logger = logging.getLogger(__name__)

BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"
QUESTION_ID_LENGTH = 8

_MULTIPLE_CHOICE_TYPES = ("multiple-choice", "multipleChoice")


def new_question_id(existing: set[str] | frozenset[str] = frozenset()) -> str:
    """Random base-36 token, re-rolled until it is unused within the form."""
    while True:
        token = "".join(secrets.choice(BASE36) for _ in range(QUESTION_ID_LENGTH))
        if token not in existing:
            return token


def question_from_doc(data: dict) -> TextQuestion | MultipleChoiceQuestion:
    kind = data.get("type", "text")
    question_id = str(data.get("id", ""))
    text = str(data.get("text", ""))
    if kind in _MULTIPLE_CHOICE_TYPES:
        choices = data.get("choices")
        if choices is None:
            choices = data.get("options")
        choices = [str(c) for c in choices or []]
        return MultipleChoiceQuestion(id=question_id, text=text, choices=choices)
    if kind != "text":
        logger.warning("Question %s has unknown type %r, treating it as text", question_id, kind)
    return TextQuestion(id=question_id, text=text)


def question_to_doc(question: TextQuestion | MultipleChoiceQuestion) -> dict:
    if isinstance(question, MultipleChoiceQuestion):
        return {
            "id": question.id,
            "text": question.text,
            "type": "multiple-choice",
            "choices": list(question.choices),
        }
    if isinstance(question, TextQuestion):
        return {"id": question.id, "text": question.text, "type": "text"}
    raise TypeError(f"Unknown question variant: {type(question).__name__}")


def questions_from_doc(data: dict) -> list[TextQuestion | MultipleChoiceQuestion]:
    return [question_from_doc(q) for q in data.get("questions") or [] if isinstance(q, dict)]
