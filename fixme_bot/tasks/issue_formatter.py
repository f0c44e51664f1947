"""
Issue Formatter（确定性输出，无网络副作用）。

把一行 marker diff 拼成 GitHub issue 的 title/body/labels。
"""

from __future__ import annotations

from fixme_bot.config import DEFAULT_MAX_TITLE_LENGTH
from fixme_bot.config import TaskRules
from fixme_bot.github.schemas import CommitDetail
from fixme_bot.github.schemas import FileChange
from fixme_bot.github.schemas import IssuePayload
from fixme_bot.tasks.diff_scanner import ADDED_LINE_PREFIX

# 只处理 `//` 一种注释前缀，且只剥一次
COMMENT_OPENER = "//"


def build_issue_title(line: str, max_title_length: int = DEFAULT_MAX_TITLE_LENGTH) -> str:
    """
    `+    // TODO fix race` -> `TODO fix race`（截断到 max_title_length，不加省略号）。
    """
    title = line
    if title.startswith(ADDED_LINE_PREFIX):
        title = title[len(ADDED_LINE_PREFIX) :]
    title = title.strip()
    if title.startswith(COMMENT_OPENER):
        title = title[len(COMMENT_OPENER) :]
    title = title.strip()
    return title[:max_title_length]


def build_issue_body(file_change: FileChange, commit: CommitDetail) -> str:
    lines: list[str] = []
    lines.append(f"File: [{file_change.filename}]({file_change.blob_url})")
    lines.append(f"Commit: {commit.sha}")
    lines.append(f"Author name: {commit.author_name}")
    lines.append(f"Date: {commit.author_date}")
    return "\n".join(lines)


def build_issue_payload(
    line: str,
    file_change: FileChange,
    commit: CommitDetail,
    rules: TaskRules | None = None,
) -> IssuePayload:
    """
    一行 marker -> 一个 IssuePayload。

    - line：diff 原始行（通常带 `+`）
    - file_change / commit：用于 body 里的来源信息（文件链接、sha、作者、时间）
    - rules：标题长度与 label；缺省用默认值
    """
    rules = rules or TaskRules()
    return IssuePayload(
        title=build_issue_title(line=line, max_title_length=rules.max_title_length),
        body=build_issue_body(file_change=file_change, commit=commit),
        labels=[rules.task_label],
    )
