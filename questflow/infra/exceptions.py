"""questflow 异常层级体系。

层级树::

    QuestflowError
    ├── ConfigError
    ├── GraphError
    │   ├── UnknownDependencyError
    │   ├── UnknownRoutingTaskError
    │   └── DependencyCycleError
    ├── TaskError
    │   ├── AcquireError
    │   └── LimitExceededError
    └── QuestStateError
"""

from __future__ import annotations

from questflow.types import LimitKind


# ── 基类 ──


class QuestflowError(Exception):
    """所有 questflow 异常的基类。"""


# ── 基础设施异常 ──


class ConfigError(QuestflowError):
    """配置错误（文件缺失、字段非法等）。"""


# ── 任务图异常 ──


class GraphError(QuestflowError):
    """任务图构建 / 路由错误，总在执行任何任务之前抛出。"""


class UnknownDependencyError(GraphError):
    """任务依赖了不存在的任务。"""

    def __init__(self, dependency: str, task_name: str) -> None:
        self.dependency = dependency
        self.task_name = task_name
        super().__init__(f"未知的任务依赖 {dependency} (来自 {task_name})")


class UnknownRoutingTaskError(GraphError):
    """路由列表中出现了不存在的任务。"""

    def __init__(self, task_name: str) -> None:
        self.task_name = task_name
        super().__init__(f"未知的路由任务 {task_name}")


class DependencyCycleError(GraphError):
    """路由优先级传播时发现依赖环。"""

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = list(cycle)
        super().__init__(f"任务依赖存在环: {' → '.join(self.cycle)}")


# ── 任务执行异常 ──


class TaskError(QuestflowError):
    """任务执行失败，终止整个运行。"""

    def __init__(self, task_name: str, message: str) -> None:
        self.task_name = task_name
        super().__init__(message)


class AcquireError(TaskError):
    """无法获取任务所需的物品。"""

    def __init__(self, task_name: str, item: str, needed: int, have: int = 0) -> None:
        self.item = item
        self.needed = needed
        self.have = have
        super().__init__(
            task_name,
            f"任务 {task_name} 无法获取 {needed} 个 {item}（当前 {have} 个）",
        )


class LimitExceededError(TaskError):
    """任务超出尝试次数 / 回合数限制仍未完成。"""

    def __init__(
        self,
        task_name: str,
        kind: LimitKind,
        limit: int,
        message: str = "",
    ) -> None:
        self.kind = kind
        self.limit = limit
        self.message = message
        if kind == LimitKind.turns:
            msg = f"任务 {task_name} 未能在 {limit} 回合内完成，请检查出了什么问题。"
        elif kind == LimitKind.soft:
            msg = (
                f"任务 {task_name} 未能在 {limit} 次尝试内完成，"
                "请检查出了什么问题（也可能只是运气不好）。"
            )
        else:
            msg = f"任务 {task_name} 未能在 {limit} 次尝试内完成，请检查出了什么问题。"
        if message:
            msg += f" {message}"
        super().__init__(task_name, msg)


# ── 游戏状态异常 ──


class QuestStateError(QuestflowError):
    """任务链进度设置值无法解析。"""

    def __init__(self, prop: str, value: str) -> None:
        self.property = prop
        self.value = value
        super().__init__(f"任务链进度解析错误: {prop} = {value!r}")
