from typing import Annotated, Literal

from pydantic import BaseModel, Field

MAX_CHOICES = 5


class TextQuestion(BaseModel):
    id: str
    text: str
    kind: Literal["text"] = "text"


class MultipleChoiceQuestion(BaseModel):
    """A stored multiple-choice question. Choices are kept exactly as stored."""

    id: str
    text: str
    kind: Literal["multiple-choice"] = "multiple-choice"
    choices: list[str] = []


class MultipleChoiceInput(MultipleChoiceQuestion):
    """A multiple-choice question submitted by the editor."""

    choices: list[str] = Field(min_length=1, max_length=MAX_CHOICES)


Question = Annotated[TextQuestion | MultipleChoiceQuestion, Field(discriminator="kind")]
QuestionInput = Annotated[TextQuestion | MultipleChoiceInput, Field(discriminator="kind")]


class FormSummary(BaseModel):
    id: str
    title: str
    description: str


class FormList(BaseModel):
    forms: list[FormSummary]
    count: int


class FormCreated(BaseModel):
    form: FormSummary
    editor_path: str


class EditorForm(BaseModel):
    """Editor state. ``form_id`` is None for a blank, unsaved form."""

    form_id: str | None = None
    title: str = "Untitled Form"
    description: str = ""
    questions: list[Question] = []
    editor_path: str | None = None
    fill_path: str | None = None
    responses_path: str | None = None


class ShareLink(BaseModel):
    form_id: str
    owner_id: str
    link: str


class CreateFormRequest(BaseModel):
    title: str = ""
    description: str | None = None


class UpdateFormRequest(BaseModel):
    title: str | None = None
    description: str | None = None


class ReplaceQuestionsRequest(BaseModel):
    questions: list[QuestionInput]


class AddQuestionRequest(BaseModel):
    text: str = ""
    kind: Literal["text", "multiple-choice"] = "text"
    choices: list[str] = []


class EditQuestionRequest(BaseModel):
    text: str


class UpdateChoiceRequest(BaseModel):
    value: str
