"""战斗宏 — 外部战斗引擎执行的脚本文本。

宏由若干命令组成，命令之间以 ``;`` 连接::

    if monsterid 12 || monsterid 40;use seal tooth;endif;attack;repeat

引擎只依赖宏文本的相等性（用于合并条件分支），不解析其语法。

``DelayedMacro`` 是 "宏" 或 "产生宏的回调" 的标签联合:

- ``LiteralMacro`` — 已确定的宏。
- ``DeferredMacro`` — 延迟到编译前一刻才调用的回调（此时装备已穿好）。

使用方式::

    macro = Macro().skill(Skill("Saucestorm")).repeat()
    delayed = delay(lambda: Macro().item(best_item()))
    undelay(delayed)  # 每次调用都重新求值
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Union

from questflow.types import Item, Monster, Skill


class Macro:
    """宏构建器，所有构建方法返回 ``self`` 以支持链式调用。"""

    def __init__(self, *components: str) -> None:
        self.components: list[str] = [c for c in components if c]

    def step(self, *nexts: Macro | str) -> Macro:
        """追加若干宏或原始命令。空命令被忽略。"""
        for nxt in nexts:
            if isinstance(nxt, Macro):
                self.components.extend(nxt.components)
            elif nxt:
                self.components.append(nxt)
        return self

    def if_(self, condition: str, body: Macro | str) -> Macro:
        """追加条件分支 ``if <condition>;<body>;endif``。"""
        return self.step(f"if {condition}").step(body).step("endif")

    def item(self, item: Item) -> Macro:
        return self.step(f"use {item.name}")

    def skill(self, skill: Skill) -> Macro:
        return self.step(f"skill {skill.name}")

    def attack(self) -> Macro:
        return self.step("attack")

    def runaway(self) -> Macro:
        return self.step("runaway")

    def abort(self, message: str = "") -> Macro:
        return self.step(f"abort {message}".strip())

    def repeat(self) -> Macro:
        return self.step("repeat")

    @staticmethod
    def monster_condition(monsters: Iterable[Monster]) -> str:
        """生成匹配任一怪物的条件，形如 ``monsterid 1 || monsterid 2``。"""
        return " || ".join(f"monsterid {m.id}" for m in monsters)

    @property
    def is_empty(self) -> bool:
        return not self.components

    def copy(self) -> Macro:
        return Macro(*self.components)

    def __str__(self) -> str:
        return ";".join(self.components)

    def __repr__(self) -> str:
        return f"Macro({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Macro):
            return self.components == other.components
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]


# ═══════════════════════════════════════════════════════════════════════════════
# 延迟宏
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class LiteralMacro:
    """已确定的宏。"""

    macro: Macro

    def resolve(self) -> Macro:
        return self.macro


@dataclass(frozen=True)
class DeferredMacro:
    """编译前才求值的宏回调。"""

    factory: Callable[[], Macro]

    def resolve(self) -> Macro:
        return self.factory()


DelayedMacro = Union[LiteralMacro, DeferredMacro]
"""宏，或可以变成宏的回调。"""

MacroLike = Union[Macro, str, Callable[[], Macro], LiteralMacro, DeferredMacro]
"""``delay`` 接受的所有写法。"""


def delay(macro: MacroLike) -> DelayedMacro:
    """将用户传入的宏写法包装为 ``DelayedMacro``。

    Raises
    ------
    TypeError
        无法识别的类型。
    """
    if isinstance(macro, (LiteralMacro, DeferredMacro)):
        return macro
    if isinstance(macro, Macro):
        return LiteralMacro(macro)
    if isinstance(macro, str):
        return LiteralMacro(Macro(macro))
    if callable(macro):
        return DeferredMacro(macro)
    raise TypeError(f"无法作为宏使用: {macro!r}")


def undelay(macro: DelayedMacro) -> Macro:
    """求值 ``DelayedMacro``，结果不会被缓存。"""
    return macro.resolve()
