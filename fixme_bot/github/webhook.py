"""
GitHub Webhook 接入层。

职责：
- 校验 event 类型（只处理 push；ping 直接回 pong）
- 解析 JSON body
- 调用业务 handler，把 (error, result) 映射成 HTTP 响应

注意：不做 `X-Hub-Signature-256` 校验。
"""

from __future__ import annotations

import json

from fastapi import APIRouter
from fastapi import Header
from fastapi import HTTPException
from fastapi import Request
from fastapi.responses import JSONResponse

from fixme_bot.tasks.orchestrator import PushEventHandler


def build_github_webhook_router(handler: PushEventHandler) -> APIRouter:
    router = APIRouter()

    @router.post("/github/webhook")
    async def github_webhook(
        request: Request,
        x_github_event: str = Header(alias="X-GitHub-Event"),
    ) -> JSONResponse:
        if x_github_event == "ping":
            return JSONResponse({"status": "pong"})
        if x_github_event != "push":
            return JSONResponse({"status": "ignored"})

        body = await request.body()
        try:
            payload = json.loads(body.decode("utf-8")) if body else None
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise HTTPException(status_code=400, detail="Invalid JSON payload") from exc

        outcome = await handler(payload)
        if outcome.error is not None:
            return JSONResponse(outcome.error, status_code=outcome.status_code)
        result = [[issue.model_dump() for issue in issues] for issues in outcome.result or []]
        return JSONResponse({"status": "ok", "result": result})

    return router
