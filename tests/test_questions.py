import pytest

from uniforms.models.forms import MultipleChoiceQuestion, TextQuestion
from uniforms.services import questions


class TestQuestionFromDoc:
    def test_text(self):
        q = questions.question_from_doc({"id": "q1", "text": "Name?", "type": "text"})
        assert q == TextQuestion(id="q1", text="Name?")

    def test_multiple_choice(self):
        q = questions.question_from_doc(
            {"id": "q1", "text": "Pick", "type": "multiple-choice", "choices": ["A", "B"]}
        )
        assert isinstance(q, MultipleChoiceQuestion)
        assert q.choices == ["A", "B"]

    def test_legacy_spelling_with_options(self):
        q = questions.question_from_doc(
            {"id": "q1", "text": "Pick", "type": "multipleChoice", "options": ["A"]}
        )
        assert isinstance(q, MultipleChoiceQuestion)
        assert q.choices == ["A"]

    def test_choices_decoded_as_stored(self):
        many = questions.question_from_doc(
            {"id": "q1", "text": "Pick", "type": "multiple-choice", "choices": list("ABCDEFG")}
        )
        empty = questions.question_from_doc({"id": "q2", "text": "Pick", "type": "multiple-choice"})
        assert many.choices == list("ABCDEFG")
        assert empty.choices == []

    def test_unknown_type_becomes_text(self):
        q = questions.question_from_doc({"id": "q1", "text": "Rate", "type": "scale"})
        assert isinstance(q, TextQuestion)

    def test_skips_non_mapping_entries(self):
        result = questions.questions_from_doc({"questions": [{"id": "q1", "text": "A"}, "junk"]})
        assert [q.id for q in result] == ["q1"]


class TestQuestionToDoc:
    def test_writes_canonical_type(self):
        doc = questions.question_to_doc(MultipleChoiceQuestion(id="q1", text="Pick", choices=["A"]))
        assert doc == {"id": "q1", "text": "Pick", "type": "multiple-choice", "choices": ["A"]}

    def test_text_has_no_choices(self):
        assert questions.question_to_doc(TextQuestion(id="q1", text="Name?")) == {
            "id": "q1", "text": "Name?", "type": "text",
        }

    def test_unknown_variant(self):
        with pytest.raises(TypeError):
            questions.question_to_doc({"id": "q1"})


class TestNewQuestionId:
    def test_base36_token(self):
        token = questions.new_question_id()
        assert len(token) == questions.QUESTION_ID_LENGTH
        assert set(token) <= set(questions.BASE36)

    def test_rerolls_on_collision(self, mocker):
        mocker.patch(
            "uniforms.services.questions.secrets.choice",
            side_effect=list("aaaaaaaa") + list("bbbbbbbb"),
        )
        assert questions.new_question_id({"aaaaaaaa"}) == "bbbbbbbb"
