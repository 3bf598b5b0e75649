"""战斗系统 — 作战策略与宏编译。

模块组成::

    combat/
    ├── macro.py      # 宏构建器与延迟宏
    └── strategy.py   # 作战策略、战斗资源、分支合并

典型使用::

    from questflow.combat import CombatResources, CombatStrategy, Macro

    strategy = CombatStrategy().macro(Macro().attack().repeat()).action("banish", crate)
    macro = strategy.compile(CombatResources(), defaults)
"""

from .macro import DeferredMacro, DelayedMacro, LiteralMacro, Macro, delay, undelay
from .strategy import (
    ActionDefaults,
    CombatResource,
    CombatResources,
    CombatStrategy,
    CompressedMacro,
)

__all__ = [
    "ActionDefaults",
    "CombatResource",
    "CombatResources",
    "CombatStrategy",
    "CompressedMacro",
    "DeferredMacro",
    "DelayedMacro",
    "LiteralMacro",
    "Macro",
    "delay",
    "undelay",
]
