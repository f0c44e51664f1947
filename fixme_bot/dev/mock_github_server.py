"""
本地 Mock GitHub API server（只覆盖最小闭环用到的两个接口）。

用途：
- 在没有真实 GitHub 的情况下，本地跑通：
  push webhook -> get commit -> create issues

启动：
  python -m fixme_bot.dev.mock_github_server

然后把 push payload 里的 commits_url / issues_url 指向
  http://127.0.0.1:9003/repos/{owner}/{repo}/commits{/sha}
  http://127.0.0.1:9003/repos/{owner}/{repo}/issues{/number}
"""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI
from pydantic import BaseModel


class IssueCreateRequest(BaseModel):
    title: str
    body: str
    labels: list[str] = []


def _default_commit_response(owner: str, repo: str, sha: str) -> dict[str, object]:
    return {
        "sha": sha,
        "commit": {"author": {"name": "Mock Author", "date": "2024-01-01T00:00:00Z"}},
        "files": [
            {
                "filename": "src/scheduler.py",
                "blob_url": f"https://github.com/{owner}/{repo}/blob/{sha}/src/scheduler.py",
                "patch": (
                    "@@ -1,3 +1,5 @@\n"
                    " def schedule(jobs):\n"
                    "-    return run(jobs)\n"
                    "+    # TODO: handle empty job list\n"
                    "+    return run(jobs)\n"
                    "+// FIXME lock ordering\n"
                ),
            },
            {
                "filename": "assets/logo.png",
                "blob_url": f"https://github.com/{owner}/{repo}/blob/{sha}/assets/logo.png",
            },
        ],
    }


app = FastAPI(title="Mock GitHub API", version="0.1.0")

_issues: list[dict[str, object]] = []


@app.get("/repos/{owner}/{repo}/commits/{sha}")
async def get_commit(owner: str, repo: str, sha: str) -> dict[str, object]:
    return _default_commit_response(owner=owner, repo=repo, sha=sha)


@app.post("/repos/{owner}/{repo}/issues", status_code=201)
async def create_issue(owner: str, repo: str, req: IssueCreateRequest) -> dict[str, object]:
    number = len(_issues) + 1
    issue = {
        "number": number,
        "title": req.title,
        "body": req.body,
        "labels": [{"name": name} for name in req.labels],
        "html_url": f"https://github.com/{owner}/{repo}/issues/{number}",
    }
    _issues.append(issue)
    return issue


@app.get("/_debug/issues")
async def list_issues() -> list[dict[str, object]]:
    return _issues


def main() -> None:
    uvicorn.run(app, host="127.0.0.1", port=9003)


if __name__ == "__main__":
    main()
