"""
End-to-end tests for the access request endpoints.
"""

import json
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from access_relay.main import create_app
from access_relay.models.requests import AccessDecisionQuery, AccessRequest, DenyQuery
from access_relay.models.responses import HttpError, NoResponse, RequestSetupError
from access_relay.services.access_service import AccessService
from access_relay.tools.access import accept_request, deny_request, submit_request

from .fakes import FakeAccessProvider, FakeNotifier

VALID_REQUEST = {
    "githubUsername": "alice123",
    "reason": "need it for review",
    "repoName": "my-repo",
    "requesterName": "Alice",
}


class TestSubmitRequest:
    """Test cases for POST /submit-request."""

    def test_submit_request_success(self, client, notifier, settings):
        """A valid request sends exactly one notification with both links."""
        response = client.post("/submit-request", json=VALID_REQUEST)

        assert response.status_code == 200
        assert response.json() == {"message": "Request submitted successfully!"}
        assert len(notifier.sent) == 1

        message = notifier.sent[0]
        assert message.sender == settings.email_user
        assert message.recipient == settings.to_email
        assert message.subject == "Access Request for Repository: my-repo"
        assert "https://relay.example.com/accept-request?repo=my-repo&username=alice123" in message.html_body
        assert "https://relay.example.com/deny-request?username=alice123" in message.html_body
        assert "Alice" in message.html_body
        assert "need it for review" in message.html_body

    def test_submit_request_form_encoded(self, client, notifier):
        """Form-encoded bodies are accepted as well as JSON."""
        response = client.post("/submit-request", data=VALID_REQUEST)

        assert response.status_code == 200
        assert len(notifier.sent) == 1

    def test_submit_request_invalid_username(self, client, notifier):
        """An invalid username is rejected and nothing is sent."""
        response = client.post(
            "/submit-request",
            json={"githubUsername": "bad-name!", "reason": "ok reason", "repoName": "repo1", "requesterName": "Bob"},
        )

        assert response.status_code == 400
        assert response.json() == {"errors": [{"field": "githubUsername", "message": "Invalid GitHub username"}]}
        assert notifier.sent == []

    def test_submit_request_missing_fields(self, client, notifier):
        response = client.post("/submit-request", json={})

        assert response.status_code == 400
        fields = [error["field"] for error in response.json()["errors"]]
        assert fields == ["githubUsername", "reason", "requesterName", "repoName"]
        assert notifier.sent == []

    def test_submit_request_malformed_json(self, client, notifier):
        response = client.post(
            "/submit-request", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Malformed request body."}
        assert notifier.sent == []

    def test_submit_request_escapes_free_text(self, client, notifier):
        response = client.post(
            "/submit-request",
            json={**VALID_REQUEST, "reason": "<b>please</b> let me in", "requesterName": "<i>Eve</i>"},
        )

        assert response.status_code == 200
        body = notifier.sent[0].html_body
        assert "&lt;b&gt;please&lt;/b&gt; let me in" in body
        assert "&lt;i&gt;Eve&lt;/i&gt;" in body
        assert "<b>please</b>" not in body

    def test_submit_request_notifier_failure(self, settings, failing_notifier, access_provider):
        """Notifier failures become a generic 500 without the cause."""
        client = TestClient(create_app(settings, notifier=failing_notifier, access_provider=access_provider))

        response = client.post("/submit-request", json=VALID_REQUEST)

        assert response.status_code == 500
        assert response.json() == {"message": "Error sending email."}
        assert "connection refused" not in response.text


class TestAcceptRequest:
    """Test cases for GET /accept-request."""

    def test_accept_request_success(self, client, access_provider, settings):
        response = client.get("/accept-request", params={"repo": "my-repo", "username": "alice123"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Successfully added alice123 to my-repo."
        assert access_provider.calls == [(settings.owner, "my-repo", "alice123")]

    def test_accept_request_is_repeatable(self, client, access_provider):
        """Granting twice gives the same observable outcome."""
        params = {"repo": "my-repo", "username": "alice123"}

        first = client.get("/accept-request", params=params)
        second = client.get("/accept-request", params=params)

        assert (first.status_code, first.text) == (second.status_code, second.text)
        assert len(access_provider.calls) == 2

    def test_accept_request_invalid_params(self, client, access_provider):
        response = client.get("/accept-request", params={"repo": "my repo", "username": "alice-123"})

        assert response.status_code == 400
        assert response.json() == {
            "errors": [
                {"field": "repo", "message": "Invalid repository name"},
                {"field": "username", "message": "Invalid GitHub username"},
            ]
        }
        assert access_provider.calls == []

    def test_accept_request_missing_repo(self, client, access_provider):
        response = client.get("/accept-request", params={"username": "alice123"})

        assert response.status_code == 400
        assert access_provider.calls == []

    def test_accept_request_provider_http_error(self, settings, notifier):
        """A provider 404 produces an error response instead of hanging."""
        provider = FakeAccessProvider(failure=HttpError(status=404, body={"message": "Not Found"}))
        client = TestClient(create_app(settings, notifier=notifier, access_provider=provider))

        response = client.get("/accept-request", params={"repo": "my-repo", "username": "alice123"})

        assert response.status_code == 502
        assert response.json() == {"message": "Error adding collaborator."}
        assert len(provider.calls) == 1

    def test_accept_request_provider_no_response(self, settings, notifier):
        provider = FakeAccessProvider(failure=NoResponse(message="connection timed out"))
        client = TestClient(create_app(settings, notifier=notifier, access_provider=provider))

        response = client.get("/accept-request", params={"repo": "my-repo", "username": "alice123"})

        assert response.status_code == 502
        assert response.json() == {"message": "Error adding collaborator."}

    def test_accept_request_provider_setup_error(self, settings, notifier):
        provider = FakeAccessProvider(failure=RequestSetupError(message="invalid URL"))
        client = TestClient(create_app(settings, notifier=notifier, access_provider=provider))

        response = client.get("/accept-request", params={"repo": "my-repo", "username": "alice123"})

        assert response.status_code == 500
        assert response.json() == {"message": "Error adding collaborator."}


class TestDenyRequest:
    """Test cases for GET /deny-request."""

    def test_deny_request_success(self, client, notifier, access_provider):
        response = client.get("/deny-request", params={"username": "alice123"})

        assert response.status_code == 200
        assert response.text == "Request from alice123 has been denied."
        assert notifier.sent == []
        assert access_provider.calls == []

    def test_deny_request_missing_username(self, client):
        response = client.get("/deny-request")

        assert response.status_code == 400
        assert response.json() == {"errors": [{"field": "username", "message": "Invalid GitHub username"}]}

    def test_deny_request_invalid_username(self, client):
        response = client.get("/deny-request", params={"username": "alice_123"})

        assert response.status_code == 400


class TestRateLimiting:
    """Test cases for the process-wide rate limit."""

    def test_requests_over_limit_are_rejected(self, settings):
        limited = settings.model_copy(update={"rate_limit_max": 2})
        client = TestClient(create_app(limited, notifier=FakeNotifier(), access_provider=FakeAccessProvider()))

        first = client.get("/deny-request", params={"username": "alice123"})
        second = client.get("/health")
        third = client.get("/accept-request", params={"repo": "my-repo", "username": "alice123"})

        assert first.status_code == 200
        assert first.headers["RateLimit-Remaining"] == "1"
        assert second.status_code == 200
        assert third.status_code == 429
        assert third.text == "Too many requests, please try again later."
        assert int(third.headers["Retry-After"]) > 0


class TestEmptyValueRecheck:
    """Handlers reject empty values even when given an unvalidated model."""

    @pytest.fixture
    def access_service(self, settings, notifier, access_provider):
        return AccessService(settings, notifier, access_provider)

    @pytest.mark.asyncio
    async def test_submit_request_rejects_empty_field(self, access_service, notifier):
        access_request = AccessRequest.model_construct(
            github_username="alice123", reason="need it for review", requester_name="Alice", repo_name=""
        )

        response = await submit_request(access_request=access_request, access_service=access_service)

        assert response.status_code == 400
        assert json.loads(response.body) == {"message": "Missing required fields."}
        assert notifier.sent == []

    @pytest.mark.asyncio
    async def test_submit_request_rejects_empty_requester_name(self, access_service, notifier):
        access_request = AccessRequest.model_construct(
            github_username="alice123", reason="need it for review", requester_name="", repo_name="my-repo"
        )

        response = await submit_request(access_request=access_request, access_service=access_service)

        assert response.status_code == 400
        assert notifier.sent == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("repo, username", [("", "alice123"), ("my-repo", "")])
    async def test_accept_request_rejects_empty_parameter(self, access_service, access_provider, repo, username):
        query = AccessDecisionQuery.model_construct(repo=repo, username=username)

        response = await accept_request(query=query, access_service=access_service)

        assert response.status_code == 400
        assert response.body == b"Missing repository name or username."
        assert access_provider.calls == []

    @pytest.mark.asyncio
    async def test_deny_request_rejects_empty_username(self, access_service, notifier, access_provider):
        response = await deny_request(query=DenyQuery.model_construct(username=""), access_service=access_service)

        assert response.status_code == 400
        assert response.body == b"Missing username."
        assert notifier.sent == []
        assert access_provider.calls == []


def test_submit_request_unencodable_mail_password(settings, access_provider):
    """Mail login encoding failures are reported like any other send failure."""
    smtp_settings = settings.model_copy(update={"email_pass": "pässwörd"})
    client = TestClient(create_app(smtp_settings, access_provider=access_provider))

    with patch("access_relay.services.notifier.smtplib.SMTP_SSL") as mock_smtp_ssl:
        server = mock_smtp_ssl.return_value.__enter__.return_value
        server.login.side_effect = UnicodeEncodeError("ascii", "pässwörd", 1, 2, "ordinal not in range(128)")
        response = client.post("/submit-request", json=VALID_REQUEST)

    assert response.status_code == 500
    assert response.json() == {"message": "Error sending email."}
