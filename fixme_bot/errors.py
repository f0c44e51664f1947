"""
错误类型（整个 invocation 共用）。

约定：
- 所有错误对一次 invocation 都是终止性的：没有按 commit / 按文件的隔离
- 出错直接抛，由 orchestrator 统一转成 `{"error": ...}` 结构
"""

from __future__ import annotations


class FixmeBotError(RuntimeError):
    """所有业务错误的基类。"""

    status_code: int = 500

    def to_payload(self) -> dict[str, str]:
        """completion contract 里的结构化错误对象。"""
        return {"error": str(self)}


class MissingPayloadError(FixmeBotError):
    status_code = 400


class MissingCredentialError(FixmeBotError):
    status_code = 500


class InvalidCommitsUrlError(FixmeBotError):
    status_code = 400


class InvalidIssuesUrlError(FixmeBotError):
    status_code = 400


class CommitFetchFailedError(FixmeBotError):
    """拉取单个 commit 详情失败（网络错误 / 非 JSON / 远端 4xx-5xx / schema 不匹配）。"""

    status_code = 502


class IssueSubmitFailedError(FixmeBotError):
    """创建 issue 失败；一个失败即整批失败。"""

    status_code = 502
