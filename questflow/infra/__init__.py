"""基础设施层 — 日志、配置、异常体系、文件工具。"""

from .config import (
    DEFAULT_WANDERING_ENCOUNTERS,
    ConfigManager,
    EngineConfig,
    LogConfig,
    RouteConfig,
)
from .exceptions import (
    AcquireError,
    ConfigError,
    DependencyCycleError,
    GraphError,
    LimitExceededError,
    QuestflowError,
    QuestStateError,
    TaskError,
    UnknownDependencyError,
    UnknownRoutingTaskError,
)
from .file_utils import load_yaml, merge_dicts, save_yaml
from .logger import setup_logger

__all__ = [
    # config
    "DEFAULT_WANDERING_ENCOUNTERS",
    "ConfigManager",
    "EngineConfig",
    "LogConfig",
    "RouteConfig",
    # exceptions
    "AcquireError",
    "ConfigError",
    "DependencyCycleError",
    "GraphError",
    "LimitExceededError",
    "QuestflowError",
    "QuestStateError",
    "TaskError",
    "UnknownDependencyError",
    "UnknownRoutingTaskError",
    # file_utils
    "load_yaml",
    "merge_dicts",
    "save_yaml",
    # logger
    "setup_logger",
]
