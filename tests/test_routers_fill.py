import pytest

from uniforms.exceptions import NotFoundError
from uniforms.models.fill import FillForm, FillQuestion, SubmissionReceipt

SAMPLE_FILL = FillForm(
    form_id="f1", title="Survey", description="",
    questions=[FillQuestion(id="q1", text="Pick", input="radio", options=["A", "B"])],
    answers={"q1": ""},
)


@pytest.fixture
def mock_svc(mocker):
    return mocker.patch("uniforms.routers.fill.fill_service")


class TestFill:
    def test_load_is_public(self, api_client, mock_svc):
        mock_svc.load_fill.return_value = SAMPLE_FILL
        resp = api_client.get("/api/fill/f1")
        assert resp.status_code == 200
        assert resp.json()["questions"][0]["options"] == ["A", "B"]

    def test_unknown_form(self, api_client, mock_svc):
        mock_svc.load_fill.side_effect = NotFoundError("Form not found in directory")
        resp = api_client.get("/api/fill/nope")
        assert resp.status_code == 404
        assert resp.json() == {"error_code": "not_found", "message": "Form not found in directory"}

    def test_submit(self, api_client, mock_svc):
        mock_svc.submit.return_value = SubmissionReceipt(form_id="f1", response_id="r1", answer_count=1)
        resp = api_client.post("/api/fill/f1", json={"answers": {"q1": "B"}})
        assert resp.status_code == 201
        assert mock_svc.submit.call_args.args[1:] == ("f1", {"q1": "B"})
