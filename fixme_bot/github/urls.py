"""
从 push event 的 repository 元数据推导 API endpoint。

GitHub 在 webhook 里给的是 URI template，例如：
- commits_url: https://api.github.com/repos/o/r/commits{/sha}
- issues_url:  https://api.github.com/repos/o/r/issues{/number}
"""

from __future__ import annotations

from fixme_bot.errors import InvalidCommitsUrlError
from fixme_bot.errors import InvalidIssuesUrlError
from fixme_bot.github.schemas import CommitRef
from fixme_bot.github.schemas import PushRepository

COMMIT_SHA_PLACEHOLDER = "{/sha}"
ISSUE_NUMBER_PLACEHOLDER = "{/number}"


def get_commits_url(repository: PushRepository) -> str:
    """返回带 `{/sha}` 占位符的 commits URL 模板。"""
    commits_url = repository.commits_url
    if COMMIT_SHA_PLACEHOLDER not in commits_url:
        raise InvalidCommitsUrlError(f"Invalid repository commits_url: {commits_url}")
    return commits_url


def get_issues_url(repository: PushRepository) -> str:
    """返回 issue 创建 endpoint（去掉 `{/number}` 占位符）。"""
    issues_url = repository.issues_url
    if ISSUE_NUMBER_PLACEHOLDER not in issues_url:
        raise InvalidIssuesUrlError(f"Invalid repository issues_url: {issues_url}")
    return issues_url.replace(ISSUE_NUMBER_PLACEHOLDER, "")


def build_commit_url(commits_url: str, commit: CommitRef) -> str:
    return commits_url.replace(COMMIT_SHA_PLACEHOLDER, f"/{commit.id}")
