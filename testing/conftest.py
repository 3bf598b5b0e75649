"""测试公共 fixtures。"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from questflow.engine.world import World
from questflow.types import Familiar, Item, Location


class FakeWorld(World):
    """内存中的世界，记录所有变更调用。"""

    def __init__(self) -> None:
        self.inventory: dict[Item, int] = {}
        self.equipped: dict[str, Item] = {}
        self.familiar: Familiar | None = None
        self.properties: dict[str, str] = {}
        self.turns: dict[Location, int] = {}
        self.shop: dict[Item, int] = {}
        """可购买的物品 → 单价"""
        self.stock: dict[Item, int] = {}
        """可通过 retrieve_item 取得的库存"""
        self.encounters: list[str] = []
        """接下来每次冒险的遭遇名，耗尽后使用地点名"""
        self.multi_fight_rounds = 0
        self.choice_pending = False
        self.fail_equip: set[Item] = set()
        self.saved_macro = ""
        self.last = ""
        self.calls: list[tuple] = []
        self.on_adventure: Callable[[Location], None] | None = None

    # ── 查询 ──

    def item_count(self, item: Item) -> int:
        return self.inventory.get(item, 0)

    def equipped_count(self, item: Item) -> int:
        return sum(1 for equipped in self.equipped.values() if equipped == item)

    def turns_spent(self, location: Location) -> int:
        return self.turns.get(location, 0)

    def last_encounter(self) -> str:
        return self.last

    def in_multi_fight(self) -> bool:
        if self.multi_fight_rounds > 0:
            self.multi_fight_rounds -= 1
            return True
        return False

    def choice_follows_fight(self) -> bool:
        return self.choice_pending

    def get_property(self, key: str, default: str = "") -> str:
        return self.properties.get(key, default)

    # ── 变更 ──

    def buy(self, item: Item, quantity: int, price: int) -> int:
        self.calls.append(("buy", item.name, quantity, price))
        if item not in self.shop or self.shop[item] > price:
            return 0
        self.inventory[item] = self.item_count(item) + quantity
        return quantity

    def retrieve_item(self, item: Item, quantity: int) -> bool:
        self.calls.append(("retrieve", item.name, quantity))
        need = max(quantity - self.available_amount(item), 0)
        take = min(need, self.stock.get(item, 0))
        self.stock[item] = self.stock.get(item, 0) - take
        self.inventory[item] = self.item_count(item) + take
        return self.available_amount(item) >= quantity

    def adventure(self, location: Location) -> bool:
        self.calls.append(("adventure", location.name))
        self.turns[location] = self.turns_spent(location) + 1
        self.last = self.encounters.pop(0) if self.encounters else location.name
        if self.on_adventure is not None:
            self.on_adventure(location)
        return True

    def run_combat(self) -> None:
        self.calls.append(("combat",))

    def run_choice(self, option: int) -> None:
        self.calls.append(("choice", option))
        self.choice_pending = False

    def equip(self, slot: str, item: Item) -> bool:
        self.calls.append(("equip", slot, item.name))
        if item in self.fail_equip:
            return False
        self.equipped[slot] = item
        return True

    def use_familiar(self, familiar: Familiar) -> bool:
        self.calls.append(("familiar", familiar.name))
        self.familiar = familiar
        return True

    def maximize(self, modifier: str, forced: list[Item], avoid: list[Item]) -> bool:
        self.calls.append(("maximize", modifier, [i.name for i in forced], [i.name for i in avoid]))
        return True

    def save_macro(self, text: str) -> None:
        self.calls.append(("macro", text))
        self.saved_macro = text

    def set_property(self, key: str, value: str) -> None:
        self.properties[key] = value

    # ── 辅助 ──

    def called(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def world() -> FakeWorld:
    """空白的内存世界。"""
    return FakeWorld()


@pytest.fixture
def tmp_yaml(tmp_path: Path):
    """创建临时 YAML 文件的工厂 fixture。"""

    def _factory(name: str, content: str) -> Path:
        p = tmp_path / name
        p.write_text(content, encoding="utf-8")
        return p

    return _factory
