"""配置管理 — 基于 Pydantic v2。

配置从 YAML 文件加载，经过 Pydantic 校验后生成不可变的配置对象。

使用方式::

    from questflow.infra.config import ConfigManager

    config = ConfigManager.load("settings.yaml")
    print(config.route.routing)
"""

from __future__ import annotations

import datetime
from pathlib import Path
from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, field_validator, model_validator

from .file_utils import load_yaml


DEFAULT_WANDERING_ENCOUNTERS: tuple[str, ...] = (
    # 万圣节狗
    "Wooof! Wooooooof!",
    "Playing Fetch*",
    # 医生包
    "A Pound of Cure",
    # 六月切肉刀
    "Aunts not Ants",
    "Bath Time",
    "Beware of Aligator",
    "Delicious Sprouts",
    "Hypnotic Master",
    "Lost and Found",
    "Poetic Justice",
    "Summer Days",
    "Teacher's Pet",
)
"""会打断当前地点冒险、需要立即重复的游荡非战斗事件。"""


# ── 子配置模型 ──


class LogConfig(BaseModel):
    """日志配置。"""

    model_config = {"frozen": True}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    """日志级别"""
    root: Path = Path("log")
    """日志保存根目录"""
    dir: Path | None = None
    """日志保存路径。自动按日期生成"""

    @model_validator(mode="after")
    def _set_log_dir(self) -> LogConfig:
        if self.dir is None:
            ts = datetime.datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
            object.__setattr__(self, "dir", self.root / ts)
        return self


class RouteConfig(BaseModel):
    """路由配置。"""

    model_config = {"frozen": True}

    routing: list[str] = Field(default_factory=list)
    """优先访问的任务名列表（带命名空间）"""
    ignore_missing_tasks: bool = False
    """路由中出现不存在的任务时是否静默跳过"""

    @field_validator("routing")
    @classmethod
    def _validate_routing(cls, v: list[str]) -> list[str]:
        for name in v:
            if not name.strip():
                raise ValueError("路由任务名不能为空")
        return v


# ── 顶层配置 ──


class EngineConfig(BaseModel):
    """引擎配置（顶层聚合）。"""

    model_config = {"frozen": True}

    log: LogConfig = Field(default_factory=LogConfig)
    route: RouteConfig = Field(default_factory=RouteConfig)

    implicit_after: bool = False
    """未声明依赖的任务自动依赖前一个任务"""
    wandering_encounters: list[str] = Field(
        default_factory=lambda: list(DEFAULT_WANDERING_ENCOUNTERS)
    )
    """遇到后需立即重复冒险的事件名"""
    properties: dict[str, str | bool | int | float] = Field(default_factory=dict)
    """覆盖引擎启动时写入的偏好设置"""

    @field_validator("wandering_encounters")
    @classmethod
    def _dedupe_encounters(cls, v: list[str]) -> list[str]:
        return list(dict.fromkeys(v))

    @classmethod
    def from_yaml(cls, path: str | Path) -> EngineConfig:
        """从 YAML 文件加载配置。"""
        data = load_yaml(path)
        return cls.model_validate(data)


# ── ConfigManager ──


class ConfigManager:
    """配置管理器 — 提供加载入口。"""

    @staticmethod
    def load(path: str | Path) -> EngineConfig:
        """从文件加载引擎配置。不存在时返回默认配置。"""
        path = Path(path)
        if not path.exists():
            logger.warning("配置文件 {} 不存在，使用默认配置", path)
            return EngineConfig()
        config = EngineConfig.from_yaml(path)
        logger.info("已加载配置: {}", path)
        return config
