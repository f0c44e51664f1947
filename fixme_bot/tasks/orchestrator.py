"""
Push Event Orchestrator（核心流程编排）。

最小闭环：
Webhook -> 校验 event/credential -> 推导 endpoint
        -> 每个 commit 并发：get commit -> scan diff -> format issue -> create issues

注意：
- 所有 commit 并发处理，结果顺序与 event.commits 一致，但完成顺序不保证
- 任意一个 commit 失败即整批失败（不做部分成功恢复），其余 commit 被取消
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import ValidationError

from fixme_bot.config import DEFAULT_USER_AGENT
from fixme_bot.config import AppConfig
from fixme_bot.config import TaskRules
from fixme_bot.errors import FixmeBotError
from fixme_bot.errors import MissingCredentialError
from fixme_bot.errors import MissingPayloadError
from fixme_bot.github.client import GitHubClient
from fixme_bot.github.client import build_request_options
from fixme_bot.github.schemas import CommitDetail
from fixme_bot.github.schemas import CommitRef
from fixme_bot.github.schemas import GitHubIssue
from fixme_bot.github.schemas import IssuePayload
from fixme_bot.github.schemas import PushEvent
from fixme_bot.github.urls import get_commits_url
from fixme_bot.github.urls import get_issues_url
from fixme_bot.infra.concurrency import gather_or_cancel
from fixme_bot.tasks.diff_scanner import iter_marker_lines
from fixme_bot.tasks.issue_formatter import build_issue_payload

logger = logging.getLogger(__name__)

PushEventInput = PushEvent | Mapping[str, Any] | None
CommitIssues = list[GitHubIssue]


@dataclass(frozen=True)
class InvocationOutcome:
    """
    (error, result) completion contract：两者有且只有一个非空。

    用 `success()` / `failure()` 构造，不要直接 new。
    """

    error: dict[str, str] | None
    result: list[CommitIssues] | None
    status_code: int = 200

    def __post_init__(self) -> None:
        if (self.error is None) == (self.result is None):
            raise ValueError("InvocationOutcome requires exactly one of error/result")

    @classmethod
    def success(cls, result: list[CommitIssues]) -> InvocationOutcome:
        return cls(error=None, result=result)

    @classmethod
    def failure(cls, exc: FixmeBotError) -> InvocationOutcome:
        return cls(error=exc.to_payload(), result=None, status_code=exc.status_code)

    @property
    def ok(self) -> bool:
        return self.error is None


def _parse_push_event(event: PushEventInput) -> PushEvent:
    if isinstance(event, PushEvent):
        return event
    if not event:
        raise MissingPayloadError("empty push event")
    try:
        return PushEvent.model_validate(event)
    except ValidationError as exc:
        raise MissingPayloadError(f"Invalid push event payload: {exc}") from exc


def build_commit_issue_payloads(commit: CommitDetail, rules: TaskRules) -> list[IssuePayload]:
    """commit 详情 -> 该 commit 所有 marker 行对应的 IssuePayload（按文件、行顺序）。"""
    payloads: list[IssuePayload] = []
    for file_change in commit.files:
        for line in iter_marker_lines(file_change=file_change, markers=rules.markers):
            payloads.append(build_issue_payload(line=line, file_change=file_change, commit=commit, rules=rules))
    return payloads


async def process_commit(
    client: GitHubClient,
    commits_url: str,
    issues_url: str,
    commit_ref: CommitRef,
    rules: TaskRules,
) -> CommitIssues:
    """单个 commit：fetch -> scan -> format -> submit。"""
    commit = await client.get_commit(commits_url=commits_url, commit=commit_ref)
    payloads = build_commit_issue_payloads(commit, rules=rules)
    logger.info(f"Commit {commit.sha}: {len(payloads)} task line(s)")
    if not payloads:
        return []
    return await client.create_issues(issues_url=issues_url, payloads=payloads)


async def handle_push_event(
    event: PushEventInput,
    api_key: str | None,
    http_client: httpx.AsyncClient,
    rules: TaskRules | None = None,
    user_agent: str = DEFAULT_USER_AGENT,
) -> list[CommitIssues]:
    """
    处理一次 push event，返回每个 commit 创建出的 issue 列表。

    - 校验与 endpoint 推导都在任何网络调用之前完成
    - event.commits 缺失/为空 -> 返回 []，不发任何请求
    - 出错直接抛 `FixmeBotError` 子类
    """
    push_event = _parse_push_event(event)
    if not api_key:
        raise MissingCredentialError("You must define the GITHUB_API_KEY secret")
    rules = rules or TaskRules()

    commits_url = get_commits_url(push_event.repository)
    issues_url = get_issues_url(push_event.repository)
    commit_refs = push_event.commits or []
    logger.info(f"Received push event: repository={push_event.repository.full_name}, commits={len(commit_refs)}")
    if not commit_refs:
        return []

    # options 每次 invocation 构造一次，之后所有并发请求只读
    client = GitHubClient(options=build_request_options(api_key=api_key, user_agent=user_agent), http_client=http_client)
    # 任意 commit 失败 -> 取消其余 commit（不会在报错之后还继续建 issue）
    return await gather_or_cancel(
        [
            functools.partial(
                process_commit,
                client=client,
                commits_url=commits_url,
                issues_url=issues_url,
                commit_ref=ref,
                rules=rules,
            )
            for ref in commit_refs
        ]
    )


async def run_invocation(
    event: PushEventInput,
    api_key: str | None,
    http_client: httpx.AsyncClient,
    rules: TaskRules | None = None,
    user_agent: str = DEFAULT_USER_AGENT,
) -> InvocationOutcome:
    """
    包一层 completion contract：业务错误 -> `InvocationOutcome.failure`。

    非 `FixmeBotError` 的异常是 bug，直接抛出。
    """
    try:
        result = await handle_push_event(
            event=event,
            api_key=api_key,
            http_client=http_client,
            rules=rules,
            user_agent=user_agent,
        )
    except FixmeBotError as exc:
        logger.error(f"Push event processing failed: {exc}")
        return InvocationOutcome.failure(exc)
    return InvocationOutcome.success(result)


PushEventHandler = Callable[[PushEventInput], Awaitable[InvocationOutcome]]


def build_push_event_handler(config: AppConfig, http_client: httpx.AsyncClient) -> PushEventHandler:
    """
    装配 webhook handler：
    - 把配置（token / 规则）和复用的 http client 绑定起来
    - 返回一个 `async def handle(event)` 给 webhook 路由调用
    """

    async def handle(event: PushEventInput) -> InvocationOutcome:
        return await run_invocation(
            event=event,
            api_key=config.github_api_key,
            http_client=http_client,
            rules=config.rules,
            user_agent=config.user_agent,
        )

    return handle
