"""
并发 fan-out（fail fast）。

约定：
- 任意一个任务失败 -> 立即取消其余任务，并等它们真正结束后才返回
- 向上抛出的是第一个失败的原始异常（不是 ExceptionGroup），方便调用方按类型处理
- 结果顺序与输入顺序一致，完成顺序不保证
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

import anyio

T = TypeVar("T")


def _first_leaf(group: BaseExceptionGroup) -> BaseException:
    exc: BaseException = group
    while isinstance(exc, BaseExceptionGroup):
        exc = exc.exceptions[0]
    return exc


async def gather_or_cancel(jobs: Sequence[Callable[[], Awaitable[T]]]) -> list[T]:
    """
    并发执行 jobs（无参 async callable），全部成功才返回结果列表。

    用 anyio task group 保证：出错时不会留下仍在发请求的孤儿任务。
    """
    results: list[T | None] = [None] * len(jobs)

    async def _run(index: int, job: Callable[[], Awaitable[T]]) -> None:
        results[index] = await job()

    try:
        async with anyio.create_task_group() as tg:
            for index, job in enumerate(jobs):
                tg.start_soon(_run, index, job)
    except BaseExceptionGroup as group:
        raise _first_leaf(group) from None
    return results  # type: ignore[return-value]
