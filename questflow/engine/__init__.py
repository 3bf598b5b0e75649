"""引擎层 — 世界接口、装备方案、设置项管理与任务执行状态机。

模块组成::

    engine/
    ├── world.py        # 外部世界抽象基类
    ├── outfit.py       # 装备方案
    ├── properties.py   # 设置项管理
    └── engine.py       # 任务引擎（状态机主循环）
"""

from .engine import DEFAULT_PREFERENCES, Engine, EngineOptions
from .outfit import Outfit
from .properties import PropertiesManager
from .world import World

__all__ = [
    "DEFAULT_PREFERENCES",
    "Engine",
    "EngineOptions",
    "Outfit",
    "PropertiesManager",
    "World",
]
