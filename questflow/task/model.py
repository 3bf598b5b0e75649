"""任务模型 — 任务、任务链以及任务的各项附加配置。

``Quest`` 只是输入字面量，经 :func:`questflow.task.graph.get_tasks` 展平后
即被丢弃；此后所有模块只与带命名空间的 ``Task`` 列表打交道。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Union

from questflow.combat.strategy import CombatStrategy
from questflow.infra.exceptions import QuestStateError
from questflow.types import Familiar, Item, Location, QuestState

if TYPE_CHECKING:
    from questflow.engine.world import World


# ═══════════════════════════════════════════════════════════════════════════════
# 附加配置
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class AcquireItem:
    """执行任务前需要获取的物品。

    Attributes
    ----------
    item:
        物品。
    num:
        需要的数量（背包 + 已装备）。
    price:
        购买单价上限。给出时通过购买获取。
    useful:
        返回 ``False`` 时跳过获取。
    optional:
        获取失败时不报错。
    get:
        自定义获取流程，优先于购买和通用获取。
    """

    item: Item
    num: int = 1
    price: int | None = None
    useful: Callable[[], bool] | None = None
    optional: bool = False
    get: Callable[[], None] | None = None


@dataclass
class Limit:
    """任务的尝试预算。

    Attributes
    ----------
    tries:
        尝试次数上限。
    turns:
        在任务地点消耗的回合数上限（仅地点任务）。
    soft:
        软性尝试次数上限，报错信息提示可能只是运气不好。
    message:
        超限时附加到报错信息末尾的诊断说明。
    """

    tries: int | None = None
    turns: int | None = None
    soft: int | None = None
    message: str = ""


@dataclass
class OutfitSpec:
    """任务要求的装备方案。"""

    equip: list[Item | Familiar] = field(default_factory=list)
    """必须装备的物品"""
    modifier: str | None = None
    """最大化器的偏好表达式"""
    familiar: Familiar | None = None
    """使用的宠物"""
    avoid: list[Item] | None = None
    """禁止装备的物品"""
    skip_defaults: bool = False
    """跳过引擎的默认装备"""


# ═══════════════════════════════════════════════════════════════════════════════
# 任务
# ═══════════════════════════════════════════════════════════════════════════════

ChoiceSelection = Union[int, Callable[[], int]]


@dataclass
class Task:
    """单个任务。

    ``after`` 为 ``None`` 表示未声明依赖，与空列表 ``[]`` 含义不同:
    只有未声明依赖的任务才会在 ``implicit_after`` 下自动依赖前一个任务。

    Attributes
    ----------
    name:
        任务名，展平后形如 ``"<任务链>/<任务>"``。
    completed:
        任务目标是否已经达成。每次都重新检查，不缓存。
    do:
        冒险地点，或执行一次任务的回调。
    after:
        直接依赖的任务名。
    ready:
        返回 ``False`` 时任务暂不可用。
    prepare:
        执行前的准备操作。
    post:
        执行后的收尾操作。
    acquire:
        执行前需要获取的物品。
    choices:
        选择事件编号 → 固定选项或选择函数。
    limit:
        尝试预算。
    outfit:
        装备方案，或生成装备方案的函数。
    combat:
        作战策略。
    """

    name: str
    completed: Callable[[], bool]
    do: Location | Callable[[], None]
    after: list[str] | None = None
    ready: Callable[[], bool] | None = None
    prepare: Callable[[], None] | None = None
    post: Callable[[], None] | None = None
    acquire: list[AcquireItem] = field(default_factory=list)
    choices: dict[int, ChoiceSelection] = field(default_factory=dict)
    limit: Limit | None = None
    outfit: OutfitSpec | Callable[[], OutfitSpec] | None = None
    combat: CombatStrategy | None = None

    @property
    def location(self) -> Location | None:
        """任务地点；``do`` 为回调时返回 ``None``。"""
        return self.do if isinstance(self.do, Location) else None

    def __repr__(self) -> str:
        return f"Task({self.name!r}, after={self.after!r})"


@dataclass
class Quest:
    """任务链：一组有序任务。"""

    name: str
    tasks: list[Task] = field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════════════════
# 任务链进度
# ═══════════════════════════════════════════════════════════════════════════════


def parse_step(prop: str, value: str) -> int:
    """把任务链进度设置值解析为数值。

    - ``"unstarted"`` → -1
    - ``"started"`` → 0
    - ``"stepN"`` → N
    - ``"finished"`` → 999

    Raises
    ------
    QuestStateError
        无法识别的取值。
    """
    if value in {s.value for s in QuestState}:
        return QuestState(value).step
    if not value.startswith("step"):
        raise QuestStateError(prop, value)
    try:
        return int(value[4:])
    except ValueError:
        raise QuestStateError(prop, value) from None


def quest_step(world: World, prop: str) -> int:
    """读取并解析任务链 *prop* 的当前进度。"""
    return parse_step(prop, world.get_property(prop))
