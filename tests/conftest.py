from __future__ import annotations

from typing import Any

import pytest

API = "https://api.github.com/repos/octo/widgets"


def make_push_event(commit_ids: list[str] | None = None, **repository: str) -> dict[str, Any]:
    repo: dict[str, Any] = {
        "full_name": "octo/widgets",
        "commits_url": f"{API}/commits{{/sha}}",
        "issues_url": f"{API}/issues{{/number}}",
    }
    repo.update(repository)
    event: dict[str, Any] = {"ref": "refs/heads/main", "repository": repo}
    if commit_ids is not None:
        event["commits"] = [{"id": cid, "message": "msg"} for cid in commit_ids]
    return event


def make_commit(sha: str, files: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "sha": sha,
        "commit": {"author": {"name": "Ada Lovelace", "date": "2024-03-01T10:00:00Z"}},
        "files": files,
    }


def make_file(filename: str, patch: str | None) -> dict[str, Any]:
    f: dict[str, Any] = {
        "filename": filename,
        "blob_url": f"https://github.com/octo/widgets/blob/abc/{filename}",
        "status": "modified",
    }
    if patch is not None:
        f["patch"] = patch
    return f


@pytest.fixture
def push_event() -> dict[str, Any]:
    return make_push_event(commit_ids=["abc123"])
