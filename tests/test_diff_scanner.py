from __future__ import annotations

from fixme_bot.github.schemas import FileChange
from fixme_bot.tasks.diff_scanner import find_marker_lines
from fixme_bot.tasks.diff_scanner import iter_marker_lines


def _file(patch: str | None) -> FileChange:
    return FileChange(filename="a.py", blob_url="https://github.com/o/r/blob/s/a.py", patch=patch)


def test_only_added_lines_with_markers_are_returned() -> None:
    patch = "\n".join(
        [
            "@@ -1,4 +1,6 @@",
            " # TODO context line",
            "-# FIXME removed line",
            "+# XXX added hack",
            "+plain added line",
            "+",
            "+    // TODO fix race condition in scheduler",
        ]
    )
    lines = find_marker_lines(file_change=_file(patch))
    assert lines == ["+# XXX added hack", "+    // TODO fix race condition in scheduler"]


def test_matching_is_substring_based() -> None:
    lines = find_marker_lines(file_change=_file("+some code XXXyz"))
    assert lines == ["+some code XXXyz"]


def test_matching_is_case_sensitive() -> None:
    assert find_marker_lines(file_change=_file("+# todo lowercase\n+# Fixme mixed")) == []


def test_missing_patch_yields_nothing() -> None:
    assert find_marker_lines(file_change=_file(None)) == []
    assert find_marker_lines(file_change=_file("")) == []


def test_custom_markers() -> None:
    patch = "+# HACK around it\n+# TODO later"
    assert find_marker_lines(file_change=_file(patch), markers=("HACK",)) == ["+# HACK around it"]


def test_lines_are_yielded_lazily_in_file_order() -> None:
    it = iter_marker_lines(file_change=_file("+TODO one\n+TODO two"))
    assert next(it) == "+TODO one"
    assert next(it) == "+TODO two"
