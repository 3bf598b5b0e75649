"""任务图构建 — 把任务链展平为带命名空间的任务列表并校验依赖。"""

from __future__ import annotations

from dataclasses import replace

from loguru import logger

from questflow.infra.exceptions import UnknownDependencyError
from questflow.task.model import Quest, Task

NAMESPACE_SEP = "/"
"""任务链名与任务名之间的分隔符。"""


def _qualify(quest: str, dependency: str) -> str:
    # 已含分隔符的依赖显式指向其他任务链，保持原样
    if NAMESPACE_SEP in dependency:
        return dependency
    return f"{quest}{NAMESPACE_SEP}{dependency}"


def get_tasks(quests: list[Quest], implicit_after: bool = False) -> list[Task]:
    """展平任务链。

    1. 任务名改写为 ``"<任务链>/<任务>"``。
    2. 依赖名同样加上所属任务链前缀，已含 ``/`` 的除外。
    3. ``implicit_after`` 为真且任务未声明依赖时，依赖前一个展平后的任务。

    所有任务名收集完毕后再校验依赖，因此允许跨任务链的前向引用。
    不检测依赖环。输入的任务对象不会被修改。

    Parameters
    ----------
    quests:
        任务链列表，按声明顺序展平。
    implicit_after:
        是否为未声明依赖的任务补上隐式依赖。

    Returns
    -------
    list[Task]

    Raises
    ------
    UnknownDependencyError
        某个依赖不在展平后的任务名集合中。
    """
    result: list[Task] = []
    for quest in quests:
        for task in quest.tasks:
            after = task.after
            if after is not None:
                after = [_qualify(quest.name, dep) for dep in after]
            elif implicit_after and result:
                after = [result[-1].name]
            result.append(
                replace(task, name=f"{quest.name}{NAMESPACE_SEP}{task.name}", after=after)
            )

    names = {task.name for task in result}
    for task in result:
        for dependency in task.after or []:
            if dependency not in names:
                raise UnknownDependencyError(dependency, task.name)

    logger.debug("任务图构建完成: {} 个任务链, {} 个任务", len(quests), len(result))
    return result
