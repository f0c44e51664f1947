from __future__ import annotations

from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from fixme_bot.errors import InvalidCommitsUrlError
from fixme_bot.errors import MissingCredentialError
from fixme_bot.github.schemas import GitHubIssue
from fixme_bot.github.webhook import build_github_webhook_router
from fixme_bot.main import build_app
from fixme_bot.tasks.orchestrator import InvocationOutcome


class RecordingHandler:
    def __init__(self, outcome: InvocationOutcome) -> None:
        self.outcome = outcome
        self.events: list[Any] = []

    async def __call__(self, event: Any) -> InvocationOutcome:
        self.events.append(event)
        return self.outcome


def _client(handler: RecordingHandler) -> TestClient:
    app = FastAPI()
    app.include_router(build_github_webhook_router(handler=handler))
    return TestClient(app)


def test_ping_returns_pong() -> None:
    handler = RecordingHandler(InvocationOutcome.success([]))
    response = _client(handler).post("/github/webhook", headers={"X-GitHub-Event": "ping"}, json={})
    assert response.json() == {"status": "pong"}
    assert handler.events == []


def test_non_push_events_are_ignored() -> None:
    handler = RecordingHandler(InvocationOutcome.success([]))
    response = _client(handler).post("/github/webhook", headers={"X-GitHub-Event": "issues"}, json={"a": 1})
    assert response.status_code == 200
    assert response.json() == {"status": "ignored"}
    assert handler.events == []


def test_push_result_is_returned() -> None:
    issue = GitHubIssue(number=3, title="TODO x", html_url="https://github.com/o/r/issues/3")
    handler = RecordingHandler(InvocationOutcome.success([[issue], []]))
    response = _client(handler).post(
        "/github/webhook",
        headers={"X-GitHub-Event": "push"},
        json={"repository": {}, "commits": []},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["result"] == [[{"number": 3, "title": "TODO x", "html_url": "https://github.com/o/r/issues/3"}], []]
    assert handler.events == [{"repository": {}, "commits": []}]


def test_push_error_is_returned_with_status() -> None:
    outcome = InvocationOutcome.failure(InvalidCommitsUrlError("Invalid repository commits_url: x"))
    response = _client(RecordingHandler(outcome)).post(
        "/github/webhook", headers={"X-GitHub-Event": "push"}, json={"repository": {}}
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid repository commits_url: x"}


def test_empty_body_is_passed_as_missing_payload() -> None:
    handler = RecordingHandler(InvocationOutcome.success([]))
    _client(handler).post("/github/webhook", headers={"X-GitHub-Event": "push"})
    assert handler.events == [None]


def test_invalid_json_is_rejected() -> None:
    handler = RecordingHandler(InvocationOutcome.success([]))
    response = _client(handler).post(
        "/github/webhook",
        headers={"X-GitHub-Event": "push", "Content-Type": "application/json"},
        content=b"{not json",
    )
    assert response.status_code == 400
    assert handler.events == []


def test_build_app_requires_api_key() -> None:
    with pytest.raises(MissingCredentialError):
        build_app(environ={})


def test_build_app_health() -> None:
    with TestClient(build_app(environ={"GITHUB_API_KEY": "k"})) as client:
        response = client.get("/health")
    assert response.json() == {"status": "ok"}


def test_build_app_rejects_missing_payload_end_to_end() -> None:
    with TestClient(build_app(environ={"GITHUB_API_KEY": "k"})) as client:
        response = client.post("/github/webhook", headers={"X-GitHub-Event": "push"})
    assert response.status_code == 400
    assert response.json() == {"error": "empty push event"}
