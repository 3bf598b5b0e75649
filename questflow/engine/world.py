"""世界接口 — 引擎依赖的全部外部能力。

引擎只通过 ``World`` 读取和改变游戏状态，自身不缓存任何查询结果。
子类负责对接具体的游戏客户端（或测试中的内存实现）。
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from questflow.types import Familiar, Item, Location


class World(ABC):
    """外部世界抽象基类。

    查询类方法每次都返回当前真实状态；变更类方法以返回值报告成败，
    不抛出异常，由引擎决定是否视为失败。
    """

    # ── 物品查询 ──

    @abstractmethod
    def item_count(self, item: Item) -> int:
        """背包中的数量。"""
        ...

    @abstractmethod
    def equipped_count(self, item: Item) -> int:
        """已装备的数量。"""
        ...

    def available_amount(self, item: Item) -> int:
        """背包 + 已装备的数量。"""
        return self.item_count(item) + self.equipped_count(item)

    # ── 物品获取 ──

    @abstractmethod
    def buy(self, item: Item, quantity: int, price: int) -> int:
        """以不超过 *price* 的单价购买，返回实际买到的数量。"""
        ...

    @abstractmethod
    def retrieve_item(self, item: Item, quantity: int) -> bool:
        """通过任意途径凑齐 *quantity* 个物品。"""
        ...

    # ── 冒险 ──

    @abstractmethod
    def adventure(self, location: Location) -> bool:
        """在 *location* 冒险一次。"""
        ...

    @abstractmethod
    def turns_spent(self, location: Location) -> int:
        """在 *location* 累计消耗的回合数。"""
        ...

    @abstractmethod
    def last_encounter(self) -> str:
        """最近一次遭遇的名称。"""
        ...

    @abstractmethod
    def run_combat(self) -> None:
        """用已保存的宏完成当前战斗（没有战斗时不做任何事）。"""
        ...

    @abstractmethod
    def in_multi_fight(self) -> bool:
        """当前是否处于多段战斗中。"""
        ...

    @abstractmethod
    def choice_follows_fight(self) -> bool:
        """战斗后是否紧跟选择事件。"""
        ...

    @abstractmethod
    def run_choice(self, option: int) -> None:
        """处理当前选择事件。``-1`` 表示使用已设置的默认选项。"""
        ...

    # ── 装备 ──

    @abstractmethod
    def equip(self, slot: str, item: Item) -> bool:
        """把 *item* 装备到 *slot*。"""
        ...

    @abstractmethod
    def use_familiar(self, familiar: Familiar) -> bool:
        """切换宠物。"""
        ...

    @abstractmethod
    def maximize(self, modifier: str, forced: list[Item], avoid: list[Item]) -> bool:
        """按 *modifier* 填充剩余槽位，*forced* 必须保留，*avoid* 不得使用。"""
        ...

    # ── 宏与设置 ──

    @abstractmethod
    def save_macro(self, text: str) -> None:
        """保存下一次战斗自动执行的宏。"""
        ...

    @abstractmethod
    def get_property(self, key: str, default: str = "") -> str:
        """读取设置项。"""
        ...

    @abstractmethod
    def set_property(self, key: str, value: str) -> None:
        """写入设置项。"""
        ...
