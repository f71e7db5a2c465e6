import pytest

from uniforms.models.responses import ResponsesView

SAMPLE_VIEW = ResponsesView(form_id="f1", form_title="Survey", count=0, responses=[])


@pytest.fixture
def mock_svc(mocker):
    return mocker.patch("uniforms.routers.responses.responses_service")


class TestResponses:
    def test_own_responses_require_auth(self, api_client, mock_svc):
        assert api_client.get("/api/responses/f1").status_code == 401
        mock_svc.view_responses.assert_not_called()

    def test_own_responses(self, api_client, auth_headers, owner, mock_svc):
        mock_svc.view_responses.return_value = SAMPLE_VIEW
        resp = api_client.get("/api/responses/f1", headers=auth_headers)
        assert resp.status_code == 200
        assert mock_svc.view_responses.call_args.args[1:] == (owner.user_id, "f1")

    def test_explicit_owner(self, api_client, mock_svc):
        mock_svc.view_responses.return_value = SAMPLE_VIEW
        resp = api_client.get("/api/view-responses/u9/f1")
        assert resp.status_code == 200
        assert resp.json()["form_title"] == "Survey"
        assert mock_svc.view_responses.call_args.args[1:] == ("u9", "f1")
