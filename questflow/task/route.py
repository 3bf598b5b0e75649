"""任务路由 — 按外部给定的偏好顺序重排任务列表。

路由中第 ``i`` 个任务的优先级为 ``i``，它的直接依赖递归获得
``i - 0.01``、``i - 0.02`` …，因此依赖总排在被路由的任务之前。
未被提及的任务优先级为 1000，排序稳定，同优先级保持原顺序。
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from questflow.infra.exceptions import (
    ConfigError,
    DependencyCycleError,
    UnknownRoutingTaskError,
)
from questflow.infra.file_utils import load_yaml
from questflow.task.model import Task

UNROUTED_PRIORITY = 1000.0
"""未被路由提及的任务的优先级。"""

DEPENDENCY_STEP = 0.01
"""每深入一层依赖优先级降低的幅度。"""


def order_by_route(
    tasks: list[Task],
    routing: list[str],
    ignore_missing_tasks: bool = False,
) -> list[Task]:
    """按路由重排任务。

    Parameters
    ----------
    tasks:
        展平后的任务列表。
    routing:
        偏好的访问顺序（任务名）。
    ignore_missing_tasks:
        为真时静默跳过不存在的路由任务。

    Returns
    -------
    list[Task]
        新列表，原列表不变。

    Raises
    ------
    UnknownRoutingTaskError
        路由任务不存在且未设置 ``ignore_missing_tasks``。
    DependencyCycleError
        被路由任务的依赖链中存在环。
    """
    by_name = {task.name: task for task in tasks}
    priorities: dict[str, float] = {task.name: UNROUTED_PRIORITY for task in tasks}

    def set_priority(name: str, priority: float, path: list[str]) -> None:
        if name in path:
            raise DependencyCycleError(path[path.index(name):] + [name])
        task = by_name.get(name)
        if task is None:
            if ignore_missing_tasks:
                logger.debug("跳过不存在的路由任务 {}", name)
                return
            raise UnknownRoutingTaskError(name)
        if priorities[name] <= priority:
            return
        priorities[name] = priority
        path.append(name)
        for requirement in task.after or []:
            set_priority(requirement, priority - DEPENDENCY_STEP, path)
        path.pop()

    for index, name in enumerate(routing):
        set_priority(name, float(index), [])

    result = sorted(tasks, key=lambda t: priorities.get(t.name, UNROUTED_PRIORITY))
    logger.debug("路由完成: {} 个路由任务, {} 个任务", len(routing), len(result))
    return result


def load_route(path: str | Path) -> list[str]:
    """从 YAML 文件读取路由。

    文件内容可以是任务名列表，也可以是带 ``routing`` 键的字典。

    Raises
    ------
    ConfigError
        文件不存在或格式不对。
    """
    try:
        data = load_yaml(path)
    except FileNotFoundError as e:
        raise ConfigError(f"路由文件不存在: {path}") from e
    if isinstance(data, dict):
        data = data.get("routing", [])
    if not isinstance(data, list) or not all(isinstance(x, str) for x in data):
        raise ConfigError(f"路由文件格式错误: {path}")
    return data
