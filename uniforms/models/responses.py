from datetime import datetime

from pydantic import BaseModel


class AnswerView(BaseModel):
    question_id: str
    label: str
    answer: str


class ResponseView(BaseModel):
    response_id: str
    submitted_at: datetime | None = None
    answers: list[AnswerView]


class ResponsesView(BaseModel):
    form_id: str
    form_title: str
    count: int
    responses: list[ResponseView]
