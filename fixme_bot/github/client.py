"""
GitHub API 客户端（外部系统连接器）。

约定：
- 这里只做 HTTP 调用 + 错误处理 + schema 校验
- 出错直接抛错（不要吞），统一包装成 `CommitFetchFailedError` / `IssueSubmitFailedError`
- 请求头（含 token）由 `RequestOptions` 在每次 invocation 构造一次，之后只读
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Sequence
from dataclasses import dataclass

import httpx

from fixme_bot.errors import CommitFetchFailedError
from fixme_bot.errors import IssueSubmitFailedError
from fixme_bot.github.schemas import CommitDetail
from fixme_bot.github.schemas import CommitRef
from fixme_bot.github.schemas import GitHubIssue
from fixme_bot.github.schemas import IssuePayload
from fixme_bot.github.urls import build_commit_url
from fixme_bot.infra.concurrency import gather_or_cancel

logger = logging.getLogger(__name__)

GITHUB_V3_MEDIA_TYPE = "application/vnd.github.v3+json"


@dataclass(frozen=True)
class RequestOptions:
    """所有出站请求共享的选项（write-once, read-many）。"""

    headers: dict[str, str]


def build_request_options(api_key: str, user_agent: str) -> RequestOptions:
    return RequestOptions(
        headers={
            "User-Agent": user_agent,
            "Accept": GITHUB_V3_MEDIA_TYPE,
            "Authorization": f"token {api_key}",
        }
    )


class GitHubClient:
    """最小 GitHub API client（get commit + create issue）。"""

    def __init__(self, options: RequestOptions, http_client: httpx.AsyncClient) -> None:
        """
        - options: 本次 invocation 的请求头
        - http_client: 复用的 httpx.AsyncClient（timeout 在那里配置）
        """
        self._options = options
        self._http_client = http_client

    async def get_commit(self, commits_url: str, commit: CommitRef) -> CommitDetail:
        """
        拉取单个 commit 的完整信息（包含每个文件的 patch）。

        - commits_url: 带 `{/sha}` 占位符的模板
        - 失败统一抛 `CommitFetchFailedError`，不重试
        """
        url = build_commit_url(commits_url=commits_url, commit=commit)
        try:
            response = await self._http_client.get(url, headers=self._options.headers)
            if response.status_code >= 400:
                raise CommitFetchFailedError(
                    f"GitHub API error {response.status_code} fetching commit {commit.id}: {response.text}"
                )
            detail = CommitDetail.model_validate(response.json())
        except CommitFetchFailedError:
            logger.error(f"Commit fetch failed: {url}")
            raise
        except (httpx.HTTPError, ValueError) as exc:
            # ValueError 覆盖 JSONDecodeError 与 pydantic ValidationError
            logger.error(f"Commit fetch failed: {url}: {exc}")
            raise CommitFetchFailedError(f"Failed to fetch commit {commit.id}: {exc}") from exc

        logger.info(f"Fetched commit {detail.sha}: {len(detail.files)} file(s)")
        return detail

    async def create_issue(self, issues_url: str, payload: IssuePayload) -> GitHubIssue:
        """POST 一个 issue；失败抛 `IssueSubmitFailedError`。"""
        try:
            response = await self._http_client.post(
                issues_url,
                headers=self._options.headers,
                json=payload.model_dump(),
            )
            if response.status_code >= 400:
                raise IssueSubmitFailedError(
                    f"GitHub API error {response.status_code} creating issue {payload.title!r}: {response.text}"
                )
            issue = GitHubIssue.model_validate(response.json())
        except IssueSubmitFailedError:
            logger.error(f"Issue creation failed: {issues_url}")
            raise
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(f"Issue creation failed: {issues_url}: {exc}")
            raise IssueSubmitFailedError(f"Failed to create issue {payload.title!r}: {exc}") from exc

        logger.info(f"Created issue #{issue.number}: {issue.title}")
        return issue

    async def create_issues(self, issues_url: str, payloads: Sequence[IssuePayload]) -> list[GitHubIssue]:
        """
        并发创建一批 issue，结果顺序与 payloads 一致。

        注意：任意一个失败即整批失败（不跟踪部分成功），其余还在进行的请求会被取消。
        """
        return await gather_or_cancel(
            [functools.partial(self.create_issue, issues_url=issues_url, payload=p) for p in payloads]
        )
