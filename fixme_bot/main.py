"""
FastAPI 服务入口。

这里做三件事：
- 加载配置（缺 `GITHUB_API_KEY` 直接启动失败）
- 组装外部依赖（HTTP Client / push event handler）
- 装配路由（health + github webhook）

注意：
- 业务流程不写在这里（由 `tasks/orchestrator.py` 负责）
- `httpx.AsyncClient` 会被复用，且必须带显式 timeout（否则挂起的请求会卡住整次 invocation）

启动（factory 模式，import 本模块不会读取环境变量）：
  uvicorn fixme_bot.main:build_app --factory
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from fixme_bot.config import load_config_from_env
from fixme_bot.github.webhook import build_github_webhook_router
from fixme_bot.tasks.orchestrator import build_push_event_handler


def build_app(environ: Mapping[str, str] | None = None) -> FastAPI:
    """创建并返回 FastAPI app（便于测试/复用）。"""

    # 1) 配置：缺失会直接抛错，启动失败（这是期望行为）
    config = load_config_from_env(os.environ if environ is None else environ)
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # 2) 可复用的 HTTP client：所有 GitHub API 调用共用
    http_client = httpx.AsyncClient(timeout=httpx.Timeout(config.http_timeout_seconds))

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await http_client.aclose()

    app = FastAPI(title="FIXME comment to issue", version="0.1.0", lifespan=lifespan)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """健康检查：用于 k8s / LB 探活。"""
        return {"status": "ok"}

    # 3) push webhook -> orchestrator
    handler = build_push_event_handler(config=config, http_client=http_client)
    app.include_router(build_github_webhook_router(handler=handler))
    return app
