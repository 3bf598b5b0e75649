"""装备方案 — 任务执行前要穿戴的装备与宠物。

``Outfit`` 只做槽位簿记：``equip`` 在槽位冲突或物品被禁用时返回 ``False``，
只有传入的类型根本无法装备时才抛出 ``TypeError``。``dress`` 才真正通过
``World`` 提交。
"""

from __future__ import annotations

import copy
from typing import Iterable, Union

from loguru import logger

from questflow.engine.world import World
from questflow.types import ACCESSORY_SLOTS, Familiar, Item, Slot

Equippable = Union[Item, Familiar, Iterable[Union[Item, Familiar]]]


class Outfit:
    """可变的装备方案。"""

    def __init__(self) -> None:
        self.equips: dict[Slot, Item] = {}
        self.accessories: list[Item] = []
        self.skip_defaults: bool = False
        self.familiar: Familiar | None = None
        self.modifier: str | None = None
        self.avoid: list[Item] = []

    def _equip_item(self, item: Item) -> bool:
        if item in self.avoid or item.slot is None:
            return False
        if item.slot is Slot.accessory:
            if item in self.accessories:
                return True
            if len(self.accessories) >= Slot.accessory.capacity:
                return False
            self.accessories.append(item)
            return True
        current = self.equips.get(item.slot)
        if current is not None:
            return current == item
        self.equips[item.slot] = item
        return True

    def _equip_familiar(self, familiar: Familiar) -> bool:
        if self.familiar is not None:
            return self.familiar == familiar
        self.familiar = familiar
        return True

    def equip(self, thing: Equippable | None) -> bool:
        """加入物品 / 宠物（或它们的列表）。

        Returns
        -------
        bool
            全部加入成功时为 ``True``。列表中失败的项不影响其余项。

        Raises
        ------
        TypeError
            既不是物品 / 宠物，也不是它们的列表。
        """
        if thing is None:
            return False
        if isinstance(thing, Item):
            return self._equip_item(thing)
        if isinstance(thing, Familiar):
            return self._equip_familiar(thing)
        if isinstance(thing, (str, bytes)) or not isinstance(thing, Iterable):
            raise TypeError(f"无法作为装备使用: {thing!r}")
        results = [self.equip(x) for x in thing]
        return all(results)

    def can_equip(self, thing: Equippable | None) -> bool:
        """``equip`` 是否会成功（不修改本方案）。"""
        if thing is not None and not isinstance(thing, (Item, Familiar)):
            thing = list(thing)
        return copy.deepcopy(self).equip(thing)

    def forced_items(self) -> list[Item]:
        """方案中必须穿戴的所有物品。"""
        return [*self.equips.values(), *self.accessories]

    def dress(self, world: World) -> bool:
        """通过 *world* 提交方案。

        Returns
        -------
        bool
            所有装备操作均成功时为 ``True``。
        """
        ok = True
        if self.familiar is not None and not world.use_familiar(self.familiar):
            logger.warning("无法使用宠物 {}", self.familiar)
            ok = False
        for slot, item in self.equips.items():
            if not world.equip(slot.value, item):
                logger.warning("无法装备 {} 到 {}", item, slot.value)
                ok = False
        for slot_name, item in zip(ACCESSORY_SLOTS, self.accessories):
            if not world.equip(slot_name, item):
                logger.warning("无法装备 {} 到 {}", item, slot_name)
                ok = False
        if self.modifier:
            if not world.maximize(self.modifier, self.forced_items(), list(self.avoid)):
                logger.warning("最大化失败: {}", self.modifier)
                ok = False
        return ok

    def __repr__(self) -> str:
        return (
            f"Outfit(equips={[str(i) for i in self.forced_items()]}, "
            f"familiar={self.familiar}, modifier={self.modifier!r})"
        )
