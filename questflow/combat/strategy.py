"""作战策略 — 描述任务中遇到各个怪物时要做什么。

任务可以用两种方式指定某个怪物的处理方式:

1. 直接给出宏: ``.macro(macro, monsters)``
2. 给出抽象动作: ``.action("banish", monsters)``

*动作* 是任务本身不关心具体实现的处理方式。例如任务只想驱逐某个怪物，
但不在乎用哪种驱逐道具；具体用哪个由引擎在 ``Engine.customize`` 中决定:
通过 ``combat.can("banish")`` 判断任务是否需要，再用
``resources.provide("banish", resource)`` 提供资源。
没有资源的动作回退到引擎选项中的 ``combat_defaults``。

编译后的宏按以下固定顺序执行::

    1. starting_macro() 给出的起始宏
    2. 针对特定怪物的宏 (macro)
    3. 针对特定怪物的动作 (action)
    4. 通用宏 (不指定怪物的 macro)
    5. 通用动作 (不指定怪物的 action)

外部战斗脚本对单个宏中的条件分支数有硬上限，因此 2、3 两段会按宏文本
合并分支: ``[if x; A; if y; B; if z; A]`` 变为 ``[if x || z; A; if y; B]``。
"""

from __future__ import annotations

import copy
import keyword
from dataclasses import dataclass
from typing import Callable, Iterable, Union

from loguru import logger

from questflow.combat.macro import DelayedMacro, Macro, MacroLike, delay, undelay
from questflow.infra.exceptions import ConfigError
from questflow.types import Item, Location, Monster, Skill

ActionTarget = Union[Monster, Location, None]
"""默认宏的参数：特定怪物、当前地点，或未知。"""

ActionDefaults = dict[str, Callable[[ActionTarget], Macro]]
"""每个动作在没有资源时使用的默认宏。"""

Monsters = Union[Monster, Iterable[Monster]]


def _as_monsters(monsters: Monsters) -> list[Monster]:
    if isinstance(monsters, Monster):
        return [monsters]
    return list(monsters)


# ═══════════════════════════════════════════════════════════════════════════════
# 战斗资源
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class CombatResource:
    """用于完成某个动作的资源。

    Attributes
    ----------
    do:
        战斗中使用的物品、技能，或直接给出的宏。
    prepare:
        战斗前的准备操作（如装备驱逐道具）。
    """

    do: Item | Skill | Macro
    prepare: Callable[[], None] | None = None


class CombatResources:
    """为任务的动作分配的资源集合，每次执行任务时新建。"""

    def __init__(self) -> None:
        self._resources: dict[str, CombatResource] = {}

    def provide(self, action: str, resource: CombatResource | None) -> None:
        """用 *resource* 完成 *action*。``resource`` 为 ``None`` 时不做任何事。"""
        if resource is None:
            return
        self._resources[action] = resource

    def has(self, action: str) -> bool:
        return action in self._resources

    def all(self) -> list[CombatResource]:
        """按提供顺序返回所有资源。"""
        return list(self._resources.values())

    def get_macro(self, action: str) -> Macro | None:
        """返回资源对应的宏；未提供资源时返回 ``None``。"""
        resource = self._resources.get(action)
        if resource is None:
            return None
        if isinstance(resource.do, Item):
            return Macro().item(resource.do)
        if isinstance(resource.do, Skill):
            return Macro().skill(resource.do)
        return resource.do


# ═══════════════════════════════════════════════════════════════════════════════
# 分支合并
# ═══════════════════════════════════════════════════════════════════════════════


class CompressedMacro:
    """把宏文本相同的怪物分支合并为一个 ``if`` 分支。"""

    def __init__(self) -> None:
        # 宏文本 → (宏, 怪物列表)，保持首次出现的顺序
        self._components: dict[str, tuple[Macro, list[Monster]]] = {}

    def add(self, monster: Monster, macro: Macro) -> None:
        """登记 *monster* 要执行的宏。空宏被忽略。"""
        text = str(macro)
        if not text:
            return
        if text in self._components:
            self._components[text][1].append(monster)
        else:
            self._components[text] = (macro, [monster])

    def __len__(self) -> int:
        return len(self._components)

    def compile(self) -> Macro:
        result = Macro()
        for macro, monsters in self._components.values():
            result.if_(Macro.monster_condition(monsters), macro)
        return result


# ═══════════════════════════════════════════════════════════════════════════════
# 作战策略
# ═══════════════════════════════════════════════════════════════════════════════


class CombatStrategy:
    """单个任务的作战策略。

    ``ACTIONS`` 为 ``None`` 时接受任意动作名；由 :meth:`with_actions` 派生的
    子类只接受声明过的动作。
    """

    ACTIONS: tuple[str, ...] | None = None

    def __init__(self) -> None:
        self._starting_macro: DelayedMacro | None = None
        self._default_macro: list[DelayedMacro] | None = None
        self._macros: dict[Monster, list[DelayedMacro]] = {}
        self._default_action: str | None = None
        self._actions: dict[Monster, str] = {}

    # ── 构建 ──

    def macro(
        self,
        macro: MacroLike,
        monsters: Monsters | None = None,
        prepend: bool = False,
    ) -> CombatStrategy:
        """为怪物添加宏。同一怪物的多个宏会依次拼接。

        Parameters
        ----------
        macro:
            要执行的宏，或返回宏的回调。
        monsters:
            作用的怪物。为 ``None`` 时作为通用宏。
        prepend:
            为 ``True`` 时插入到该怪物已有宏之前。
        """
        delayed = delay(macro)
        if monsters is None:
            if self._default_macro is None:
                self._default_macro = []
            targets = [self._default_macro]
        else:
            targets = [self._macros.setdefault(m, []) for m in _as_monsters(monsters)]
        for macros in targets:
            if prepend:
                macros.insert(0, delayed)
            else:
                macros.append(delayed)
        return self

    def starting_macro(self, macro: MacroLike) -> CombatStrategy:
        """设置战斗开始时执行的宏。"""
        self._starting_macro = delay(macro)
        return self

    def action(self, action: str, monsters: Monsters | None = None) -> CombatStrategy:
        """为怪物设置动作。每个怪物只有一个动作，后设置的覆盖先前的。

        Parameters
        ----------
        action:
            动作名。
        monsters:
            作用的怪物。为 ``None`` 时设置为通用动作。

        Raises
        ------
        ConfigError
            动作不在 ``ACTIONS`` 声明的集合内。
        """
        if self.ACTIONS is not None and action not in self.ACTIONS:
            raise ConfigError(f"未声明的动作 {action!r}，支持: {list(self.ACTIONS)}")
        if monsters is None:
            self._default_action = action
        else:
            for monster in _as_monsters(monsters):
                self._actions[monster] = action
        return self

    # ── 查询 ──

    def can(self, action: str) -> bool:
        """是否有任何怪物（或通用动作）请求了 *action*。"""
        if action == self._default_action:
            return True
        return action in self._actions.values()

    def get_default_action(self) -> str | None:
        return self._default_action

    def where(self, action: str) -> list[Monster]:
        """请求了 *action* 的所有怪物。"""
        return [monster for monster, act in self._actions.items() if act == action]

    def current_strategy(self, monster: Monster) -> str | None:
        """*monster* 的动作，没有则返回通用动作。"""
        return self._actions.get(monster, self._default_action)

    def clone(self) -> CombatStrategy:
        """深拷贝策略，拷贝后的对象可独立修改。"""
        result = copy.copy(self)
        result._default_macro = (
            list(self._default_macro) if self._default_macro is not None else None
        )
        result._macros = {m: list(macros) for m, macros in self._macros.items()}
        result._actions = dict(self._actions)
        return result

    # ── 编译 ──

    def compile(
        self,
        resources: CombatResources,
        defaults: ActionDefaults | None = None,
        location: Location | None = None,
    ) -> Macro:
        """把策略编译为完整的宏。

        Parameters
        ----------
        resources:
            用于完成动作的资源。
        defaults:
            没有资源时各动作的默认宏。
        location:
            冒险地点（已知时）。

        Returns
        -------
        Macro
        """
        result = Macro()

        if self._starting_macro is not None:
            result.step(undelay(self._starting_macro))

        # 特定怪物的宏（可能结束战斗，也可能不会）
        monster_macros = CompressedMacro()
        for monster, macros in self._macros.items():
            monster_macros.add(monster, Macro().step(*(undelay(m) for m in macros)))
        result.step(monster_macros.compile())

        # 特定怪物的动作
        monster_actions = CompressedMacro()
        for monster, action in self._actions.items():
            macro = self._resolve_action(action, monster, resources, defaults)
            if macro is not None:
                monster_actions.add(monster, Macro().step(macro))
        result.step(monster_actions.compile())

        if self._default_macro:
            result.step(*(undelay(m) for m in self._default_macro))

        if self._default_action is not None:
            macro = self._resolve_action(self._default_action, location, resources, defaults)
            if macro is not None:
                result.step(macro)

        logger.debug(
            "作战策略编译完成: 怪物宏分支 {} 个, 怪物动作分支 {} 个",
            len(monster_macros),
            len(monster_actions),
        )
        return result

    @staticmethod
    def _resolve_action(
        action: str,
        target: ActionTarget,
        resources: CombatResources,
        defaults: ActionDefaults | None,
    ) -> Macro | None:
        """资源优先，其次默认宏。"""
        macro = resources.get_macro(action)
        if macro is not None:
            return macro
        default = (defaults or {}).get(action)
        if default is None:
            logger.warning("动作 {} 既没有资源也没有默认宏，已跳过", action)
            return None
        return default(target)

    # ── 流式动作 API ──

    @classmethod
    def with_actions(cls, actions: Iterable[str]) -> type[CombatStrategy]:
        """派生一个为每个动作生成同名方法的子类。

        子类的 ``ACTIONS`` 包含父类已声明的动作，因此可以链式派生。
        生成的方法与 ``action`` 等价::

            MyStrategy = CombatStrategy.with_actions(["kill", "banish"])
            MyStrategy().banish(crate).kill(tumbleweed)
            # 等价于 .action("banish", crate).action("kill", tumbleweed)

        Raises
        ------
        ConfigError
            动作名不是合法标识符、重复，或与策略自身的方法重名。
        """
        names = tuple(actions)
        namespace: dict[str, object] = {"ACTIONS": (cls.ACTIONS or ()) + names}
        for name in names:
            if not name.isidentifier() or keyword.iskeyword(name) or name.startswith("_"):
                raise ConfigError(f"动作名 {name!r} 不能作为方法名")
            if name in namespace:
                raise ConfigError(f"动作名 {name!r} 重复")
            if hasattr(cls, name):
                raise ConfigError(f"动作名 {name!r} 与 {cls.__name__} 的方法重名")
            namespace[name] = _make_action_method(name)
        return type(f"{cls.__name__}WithActions", (cls,), namespace)


def _make_action_method(name: str) -> Callable[..., CombatStrategy]:
    def _forward(self: CombatStrategy, monsters: Monsters | None = None) -> CombatStrategy:
        return self.action(name, monsters)

    _forward.__name__ = name
    _forward.__qualname__ = name
    _forward.__doc__ = f"等价于 ``action({name!r}, monsters)``。"
    return _forward
