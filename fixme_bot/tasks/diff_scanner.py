"""
Diff Scanner（非 AI，纯字符串处理）。

从单个文件的 unified diff patch 里挑出"新增且包含 marker"的行。
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from fixme_bot.config import DEFAULT_MARKERS
from fixme_bot.github.schemas import FileChange

ADDED_LINE_PREFIX = "+"


def iter_marker_lines(file_change: FileChange, markers: Iterable[str] = DEFAULT_MARKERS) -> Iterator[str]:
    """
    按文件顺序产出"新增且包含 marker"的原始 diff 行（保留开头的 `+`）。

    - 纯子串匹配、区分大小写，不看单词边界（`XXXyz` 也算）
    - patch 缺失（二进制/大文件）视为 0 行
    """
    if not file_change.patch:
        return
    tokens = tuple(markers)
    for line in file_change.patch.split("\n"):
        if not line.startswith(ADDED_LINE_PREFIX) or len(line) <= 1:
            continue
        # index 0 是 `+` 本身，marker 只能出现在它之后
        if any(line.find(token) > 0 for token in tokens):
            yield line


def find_marker_lines(file_change: FileChange, markers: Iterable[str] = DEFAULT_MARKERS) -> list[str]:
    return list(iter_marker_lines(file_change=file_change, markers=markers))
