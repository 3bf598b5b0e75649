"""任务层 — 任务模型、任务图构建与路由。

典型使用::

    from questflow.task import Quest, Task, get_tasks, order_by_route

    tasks = get_tasks([quest_a, quest_b], implicit_after=True)
    tasks = order_by_route(tasks, ["QuestB/boss"])
"""

from .graph import NAMESPACE_SEP, get_tasks
from .model import AcquireItem, Limit, OutfitSpec, Quest, Task, parse_step, quest_step
from .route import load_route, order_by_route

__all__ = [
    "NAMESPACE_SEP",
    "AcquireItem",
    "Limit",
    "OutfitSpec",
    "Quest",
    "Task",
    "get_tasks",
    "load_route",
    "order_by_route",
    "parse_step",
    "quest_step",
]
