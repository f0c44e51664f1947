"""
GitHub Webhook / API response schemas（Pydantic）。

说明：
- 字段只覆盖 push webhook + get commit + create issue 需要的子集
- 未知字段一律忽略（GitHub payload 很大）
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PushRepository(BaseModel):
    """push webhook 里的 repository 子结构（只取 URL 模板）。"""

    commits_url: str
    issues_url: str
    full_name: str | None = None


class CommitRef(BaseModel):
    """push event 里内嵌的轻量 commit 引用，只用来拼 fetch URL。"""

    id: str


class PushEvent(BaseModel):
    """
    GitHub `push` webhook event（最小结构）。

    commits 可能缺失（例如删除分支的 push），此时 orchestrator 直接返回空结果。
    """

    model_config = ConfigDict(frozen=True)

    repository: PushRepository
    commits: list[CommitRef] | None = None


class CommitAuthor(BaseModel):
    name: str
    date: str


class CommitInfo(BaseModel):
    author: CommitAuthor


class FileChange(BaseModel):
    """
    commit 的单个文件变更（GET /repos/{owner}/{repo}/commits/{sha} 的 files[] item）。

    patch 可能缺失（二进制 / 大文件），扫描时按 0 行处理。
    """

    filename: str
    blob_url: str
    patch: str | None = None


class CommitDetail(BaseModel):
    """完整 commit 记录。"""

    sha: str
    commit: CommitInfo
    files: list[FileChange] = Field(default_factory=list)

    @property
    def author_name(self) -> str:
        return self.commit.author.name

    @property
    def author_date(self) -> str:
        return self.commit.author.date


class IssuePayload(BaseModel):
    """POST /repos/{owner}/{repo}/issues 的请求体。"""

    model_config = ConfigDict(frozen=True)

    title: str
    body: str
    labels: list[str]


class GitHubIssue(BaseModel):
    """create issue 的响应；保留全部字段原样返回给调用方。"""

    model_config = ConfigDict(extra="allow")

    number: int
    title: str
    html_url: str | None = None
