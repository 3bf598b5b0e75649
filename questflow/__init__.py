"""questflow — 长流程、多阶段游戏目标的任务编排引擎。

典型使用::

    from questflow import Engine, get_tasks, order_by_route

    tasks = order_by_route(get_tasks(quests), routing)
    engine = Engine(tasks, world)
    engine.run()
"""

from questflow.combat import CombatResource, CombatResources, CombatStrategy, Macro
from questflow.engine import Engine, EngineOptions, Outfit, World
from questflow.task import (
    AcquireItem,
    Limit,
    OutfitSpec,
    Quest,
    Task,
    get_tasks,
    order_by_route,
    quest_step,
)

__version__ = "0.3.0"

__all__ = [
    "AcquireItem",
    "CombatResource",
    "CombatResources",
    "CombatStrategy",
    "Engine",
    "EngineOptions",
    "Limit",
    "Macro",
    "Outfit",
    "OutfitSpec",
    "Quest",
    "Task",
    "World",
    "get_tasks",
    "order_by_route",
    "quest_step",
]
