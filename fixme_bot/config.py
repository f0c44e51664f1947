"""
应用配置加载。

设计目标：
- **严格**：缺少 `GITHUB_API_KEY` 就直接报错，启动失败（而不是处理到一半才失败）
- **类型安全**：使用 Pydantic 校验数值/字符串，减少运行时踩坑
- **可测试**：核心加载函数接收 `environ` 显式输入，便于单元测试
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, Field

from fixme_bot.errors import MissingCredentialError

DEFAULT_MARKERS: tuple[str, ...] = ("XXX", "FIXME", "TODO")
DEFAULT_MAX_TITLE_LENGTH = 50
DEFAULT_TASK_LABEL = "FIXME"
DEFAULT_USER_AGENT = "FIXME helper"


class TaskRules(BaseModel, frozen=True):
    """扫描 + 格式化规则（marker 集合 / 标题长度 / label）。"""

    markers: tuple[str, ...] = Field(default=DEFAULT_MARKERS, min_length=1)
    max_title_length: int = Field(default=DEFAULT_MAX_TITLE_LENGTH, gt=0)
    task_label: str = Field(default=DEFAULT_TASK_LABEL, min_length=1)


class AppConfig(BaseModel, frozen=True):
    """应用运行所需配置；只有 API key 是必填。"""

    github_api_key: str = Field(min_length=1)
    user_agent: str = DEFAULT_USER_AGENT
    http_timeout_seconds: float = Field(default=30.0, gt=0)
    log_level: str = "INFO"
    rules: TaskRules = Field(default_factory=TaskRules)


def _parse_markers(raw: str) -> tuple[str, ...]:
    markers = tuple(m.strip() for m in raw.split(",") if m.strip())
    if not markers:
        raise ValueError(f"FIXME_MARKERS must contain at least one marker: {raw!r}")
    return markers


def load_config_from_env(environ: Mapping[str, str]) -> AppConfig:
    """
    从环境变量加载并校验配置。

    - **输入**：`environ`（例如 `os.environ`）
    - **输出**：`AppConfig`
    - **失败**：`GITHUB_API_KEY` 缺失/为空抛 `MissingCredentialError`；其它非法值抛 `ValueError`
    """

    api_key = environ.get("GITHUB_API_KEY", "")
    if not api_key:
        raise MissingCredentialError("You must define the GITHUB_API_KEY secret")

    rules: dict[str, object] = {}
    if environ.get("FIXME_MARKERS"):
        rules["markers"] = _parse_markers(environ["FIXME_MARKERS"])
    if environ.get("FIXME_MAX_TITLE_LENGTH"):
        rules["max_title_length"] = environ["FIXME_MAX_TITLE_LENGTH"]
    if environ.get("FIXME_TASK_LABEL"):
        rules["task_label"] = environ["FIXME_TASK_LABEL"]

    values: dict[str, object] = {"github_api_key": api_key, "rules": TaskRules.model_validate(rules)}
    if environ.get("FIXME_USER_AGENT"):
        values["user_agent"] = environ["FIXME_USER_AGENT"]
    if environ.get("GITHUB_HTTP_TIMEOUT"):
        values["http_timeout_seconds"] = environ["GITHUB_HTTP_TIMEOUT"]
    if environ.get("LOG_LEVEL"):
        values["log_level"] = environ["LOG_LEVEL"].upper()

    # 交给 Pydantic 做类型校验（ValidationError 是 ValueError 子类）
    return AppConfig.model_validate(values)
