from typing import Literal

from pydantic import BaseModel


class FillQuestion(BaseModel):
    id: str
    text: str
    input: Literal["text", "radio"]
    options: list[str] = []


class FillForm(BaseModel):
    form_id: str
    title: str
    description: str
    questions: list[FillQuestion]
    answers: dict[str, str]


class SubmitRequest(BaseModel):
    answers: dict[str, str] = {}


class SubmissionReceipt(BaseModel):
    form_id: str
    response_id: str
    answer_count: int
