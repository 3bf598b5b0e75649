"""全局枚举与世界值类型定义。

所有与游戏语义相关的枚举和不可变值对象集中于此，供各层引用。
值对象均为 frozen dataclass，可直接作为字典键使用。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# ── 枚举基类 ──


class BaseEnum(Enum):
    """提供更友好的中文报错信息。"""

    @classmethod
    def _missing_(cls, value: object) -> None:
        supported = ", ".join(str(m.value) for m in cls)
        raise ValueError(f'"{value}" 不是合法的 {cls.__name__} 取值。 支持: [{supported}]')


class StrEnum(str, BaseEnum):
    """字符串枚举基类。"""


class IntEnum(int, BaseEnum):
    """整数枚举基类。"""


# ── 装备 ──


class Slot(StrEnum):
    """装备槽位。"""

    hat = "hat"
    back = "back"
    shirt = "shirt"
    weapon = "weapon"
    off_hand = "off-hand"
    pants = "pants"
    accessory = "acc"
    """饰品，最多同时装备 3 件"""
    familiar = "familiar"
    """宠物装备"""

    @property
    def capacity(self) -> int:
        """该槽位可同时容纳的物品数。"""
        return 3 if self is Slot.accessory else 1


ACCESSORY_SLOTS: tuple[str, ...] = ("acc1", "acc2", "acc3")
"""饰品提交到世界时使用的具体槽位名。"""


# ── 任务限制 ──


class LimitKind(StrEnum):
    """任务限制类型。"""

    tries = "tries"
    """尝试次数上限"""
    soft = "soft"
    """软性尝试次数上限（可能只是运气不好）"""
    turns = "turns"
    """在该地点消耗的回合数上限"""


class QuestState(StrEnum):
    """任务链进度设置值中的特殊取值。"""

    unstarted = "unstarted"
    started = "started"
    finished = "finished"

    @property
    def step(self) -> int:
        """对应的数值进度。"""
        match self:
            case QuestState.unstarted:
                return -1
            case QuestState.started:
                return 0
            case QuestState.finished:
                return 999
            case _:
                raise ValueError(f"没有为 {self} 设置数值进度")


# ── 世界值类型 ──


@dataclass(frozen=True)
class Item:
    """物品。

    Attributes
    ----------
    name:
        物品名称（宏命令中使用）。
    id:
        物品编号。
    slot:
        可装备物品所属的槽位，不可装备时为 ``None``。
    """

    name: str
    id: int = 0
    slot: Slot | None = None

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Familiar:
    """宠物。"""

    name: str
    id: int = 0

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Skill:
    """技能。"""

    name: str
    id: int = 0

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Monster:
    """怪物。``id`` 用于宏条件 ``monsterid``。"""

    name: str
    id: int = 0

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Location:
    """冒险地点。"""

    name: str
    id: int = 0

    def __str__(self) -> str:
        return self.name
