"""任务引擎 — 单任务执行状态机。

``Engine`` 每次执行一个任务，按固定顺序经过以下阶段::

    获取物品 → 构建装备方案 → 定制 (customize) → 穿戴
        → 编译作战宏 & 设置选项 → 资源准备 → 任务准备
        → 执行 (含游荡事件重复) → 收尾 → 计数 & 限制检查

任何阶段抛出的异常都会直接终止整个运行，引擎不做本地恢复或自动重试。
尝试次数限制只阻止宿主循环继续手动重试同一任务。

可用性检查只看 *直接* 依赖: A 依赖 B、B 依赖 C 时，只要 B 已完成 A 即可用，
不管 C 是否仍然完成。宿主应当按路由后的顺序（依赖在前）提供任务。

使用方式::

    engine = Engine(tasks, world, EngineOptions(combat_defaults=defaults))
    engine.run()
    engine.destruct()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loguru import logger

from questflow.combat.strategy import ActionDefaults, CombatResources, CombatStrategy
from questflow.engine.outfit import Outfit
from questflow.engine.properties import PropertiesManager
from questflow.engine.world import World
from questflow.infra.config import EngineConfig
from questflow.infra.exceptions import (
    AcquireError,
    LimitExceededError,
    UnknownDependencyError,
)
from questflow.infra.file_utils import merge_dicts
from questflow.task.model import Task
from questflow.types import LimitKind

PREFERENCE_LOG_FILTER: tuple[str, ...] = (
    "libram_savedMacro",
    "maximizerMRUList",
    "testudinalTeachings",
    "_lastCombatStarted",
)
"""追加到 ``logPreferenceChangeFilter`` 的设置项，避免刷屏。"""

DEFAULT_PREFERENCES: dict[str, Any] = {
    "logPreferenceChange": True,
    "battleAction": "custom combat script",
    "autoSatisfyWithMall": True,
    "autoSatisfyWithNPCs": True,
    "autoSatisfyWithCoinmasters": True,
    "autoSatisfyWithStash": False,
    "dontStopForCounters": True,
    "maximizerFoldables": True,
    "hpAutoRecovery": "0.0",
    "hpAutoRecoveryTarget": "0.0",
    "mpAutoRecovery": "0.0",
    "mpAutoRecoveryTarget": "0.0",
    "afterAdventureScript": "",
    "betweenBattleScript": "",
    "choiceAdventureScript": "",
    "familiarScript": "",
    "currentMood": "apathetic",
    "autoTuxedo": True,
    "autoPinkyRing": True,
    "autoGarish": True,
    "allowNonMoodBurning": False,
    "allowSummonBurning": True,
    "libramSkillsSoftcore": "none",
}
"""引擎启动时写入的偏好设置。"""


@dataclass
class EngineOptions:
    """引擎的代码级选项（配置文件无法表达的部分）。

    Attributes
    ----------
    combat_defaults:
        每个动作在没有战斗资源时使用的默认宏。
    """

    combat_defaults: ActionDefaults | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# 任务引擎
# ═══════════════════════════════════════════════════════════════════════════════


class Engine:
    """单线程任务引擎。

    每个阶段都是公开方法，子类可按需覆盖；最常覆盖的是 :meth:`customize`。

    Parameters
    ----------
    tasks:
        任务列表，用于查找依赖与选择下一个任务。
    world:
        外部世界。
    options:
        代码级选项。
    config:
        引擎配置。为 ``None`` 时使用默认配置。
    """

    def __init__(
        self,
        tasks: list[Task],
        world: World,
        options: EngineOptions | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self.tasks = tasks
        self.world = world
        self.options = options or EngineOptions()
        self.config = config or EngineConfig()

        self.attempts: dict[str, int] = {}
        self.tasks_by_name: dict[str, Task] = {task.name: task for task in tasks}
        self.wandering_encounters: frozenset[str] = frozenset(self.config.wandering_encounters)

        self.properties = PropertiesManager(world)
        self.init_properties_manager(self.properties)

    # ═══════════════════════════════════════════════════════════════════════════
    # 公共接口
    # ═══════════════════════════════════════════════════════════════════════════

    def available(self, task: Task) -> bool:
        """任务此刻是否可用。

        所有直接依赖均已完成、``ready`` 为真（或未设置）、且任务本身未完成。

        Raises
        ------
        UnknownDependencyError
            依赖不在本引擎的任务列表中。
        """
        for name in task.after or []:
            after_task = self.tasks_by_name.get(name)
            if after_task is None:
                raise UnknownDependencyError(name, task.name)
            if not after_task.completed():
                return False
        if task.ready is not None and not task.ready():
            return False
        if task.completed():
            return False
        return True

    def get_next_task(self) -> Task | None:
        """按列表顺序返回第一个可用任务。"""
        for task in self.tasks:
            if self.available(task):
                return task
        return None

    def run(self, actions: int | None = None) -> int:
        """反复执行下一个可用任务，直到没有可用任务或达到 *actions* 次。

        Returns
        -------
        int
            实际执行的次数。
        """
        count = 0
        while actions is None or count < actions:
            task = self.get_next_task()
            if task is None:
                logger.info("没有可用任务，运行结束 (共执行 {} 次)", count)
                break
            self.execute(task)
            count += 1
        return count

    def execute(self, task: Task) -> None:
        """执行一个任务的全部阶段。

        Raises
        ------
        AcquireError
            必需物品获取失败。
        LimitExceededError
            任务未完成且超出限制。
        """
        logger.info("执行任务 {} (第 {} 次)", task.name, self.attempts.get(task.name, 0) + 1)

        # 先获取物品，后续阶段可能用到
        self.acquire_items(task)

        # 装备方案与战斗资源
        task_combat = task.combat.clone() if task.combat is not None else CombatStrategy()
        outfit = self.create_outfit(task)
        task_resources = CombatResources()
        self.customize(task, outfit, task_combat, task_resources)
        self.dress(task, outfit)

        # 战斗宏与选择事件
        macro = task_combat.compile(task_resources, self.options.combat_defaults, task.location)
        logger.debug("任务 {} 的作战宏: {}", task.name, macro)
        self.world.save_macro(str(macro))
        self.set_choices(task, self.properties)

        # 实际执行
        for resource in task_resources.all():
            if resource.prepare is not None:
                resource.prepare()
        self.prepare(task)
        self.do(task)
        while self.should_repeat_adv(task):
            logger.info("遇到游荡事件 {}，重复执行 {}", self.world.last_encounter(), task.name)
            self.do(task)
        self.post(task)

        # 计数并检查限制
        self.mark_attempt(task)
        if not task.completed():
            self.check_limits(task)

    def destruct(self) -> None:
        """恢复引擎修改过的所有设置项。"""
        self.properties.reset_all()

    # ═══════════════════════════════════════════════════════════════════════════
    # 执行阶段
    # ═══════════════════════════════════════════════════════════════════════════

    def acquire_items(self, task: Task) -> None:
        """获取任务所需的全部物品。"""
        for to_get in task.acquire:
            num_have = self.world.available_amount(to_get.item)
            if to_get.num <= num_have:
                continue
            if to_get.useful is not None and not to_get.useful():
                continue

            if to_get.get is not None:
                to_get.get()
            elif to_get.price is not None:
                self.world.buy(to_get.item, to_get.num - num_have, to_get.price)
            else:
                self.world.retrieve_item(to_get.item, to_get.num)

            num_have = self.world.available_amount(to_get.item)
            if num_have < to_get.num:
                if not to_get.optional:
                    raise AcquireError(task.name, str(to_get.item), to_get.num, num_have)
                logger.warning(
                    "任务 {} 未能获取可选物品 {} ({}/{})",
                    task.name, to_get.item, num_have, to_get.num,
                )
            else:
                logger.debug("已获取 {} x{}", to_get.item, to_get.num)

    def create_outfit(self, task: Task) -> Outfit:
        """根据任务的装备要求构建方案。"""
        spec = task.outfit() if callable(task.outfit) else task.outfit
        outfit = Outfit()
        if spec is None:
            return outfit
        for item in spec.equip:
            if not outfit.equip(item):
                logger.warning("任务 {} 的装备 {} 与方案冲突", task.name, item)
        if spec.familiar is not None:
            outfit.equip(spec.familiar)
        outfit.avoid = list(spec.avoid or [])
        outfit.modifier = spec.modifier
        outfit.skip_defaults = spec.skip_defaults
        return outfit

    def customize(
        self,
        task: Task,
        outfit: Outfit,
        combat: CombatStrategy,
        resources: CombatResources,
    ) -> None:
        """引擎级定制，默认不做任何事。

        适合在子类中覆盖以:

        - 分配战斗资源（例如根据 ``combat.can("banish")`` 提供驱逐道具）；
        - 加入默认装备（``outfit.skip_defaults`` 为假时）；
        - 为全局怪物追加宏。
        """

    def dress(self, task: Task, outfit: Outfit) -> None:
        """穿戴装备方案。"""
        if not outfit.dress(self.world):
            logger.warning("任务 {} 的装备方案未能完全穿戴", task.name)

    def set_choices(self, task: Task, manager: PropertiesManager) -> None:
        """设置选择事件的默认选项，选择函数在此刻求值。"""
        choices: dict[int, int] = {}
        for choice_id, choice in task.choices.items():
            choices[int(choice_id)] = choice() if callable(choice) else choice
        manager.set_choices(choices)

    def prepare(self, task: Task) -> None:
        """任务自身的准备操作。"""
        if task.prepare is not None:
            task.prepare()

    def do(self, task: Task) -> None:
        """执行一次任务并处理随之而来的战斗与选择事件。"""
        if task.location is not None:
            self.world.adventure(task.location)
        else:
            task.do()
        self.world.run_combat()
        while self.world.in_multi_fight():
            self.world.run_combat()
        if self.world.choice_follows_fight():
            self.world.run_choice(-1)

    def should_repeat_adv(self, task: Task) -> bool:
        """地点任务遇到游荡非战斗事件时立即重复，不重新准备。"""
        return task.location is not None and self.world.last_encounter() in self.wandering_encounters

    def post(self, task: Task) -> None:
        """任务自身的收尾操作。"""
        if task.post is not None:
            task.post()

    def mark_attempt(self, task: Task) -> None:
        self.attempts[task.name] = self.attempts.get(task.name, 0) + 1

    def check_limits(self, task: Task) -> None:
        """检查任务是否超出限制。

        Raises
        ------
        LimitExceededError
            超出 ``tries`` / ``soft`` / ``turns`` 中的任意一项。
        """
        limit = task.limit
        if limit is None:
            return
        attempts = self.attempts.get(task.name, 0)
        if limit.tries and attempts >= limit.tries:
            error = LimitExceededError(task.name, LimitKind.tries, limit.tries, limit.message)
        elif limit.soft and attempts >= limit.soft:
            error = LimitExceededError(task.name, LimitKind.soft, limit.soft, limit.message)
        elif (
            limit.turns
            and task.location is not None
            and self.world.turns_spent(task.location) >= limit.turns
        ):
            error = LimitExceededError(task.name, LimitKind.turns, limit.turns, limit.message)
        else:
            return
        logger.error("{}", error)
        raise error

    # ═══════════════════════════════════════════════════════════════════════════
    # 设置项
    # ═══════════════════════════════════════════════════════════════════════════

    def init_properties_manager(self, manager: PropertiesManager) -> None:
        """写入脚本运行所需的偏好设置。"""
        current = self.world.get_property("logPreferenceChangeFilter").split(",")
        log_filter = ",".join(sorted({*current, *PREFERENCE_LOG_FILTER} - {""}))
        values = merge_dicts(
            {**DEFAULT_PREFERENCES, "logPreferenceChangeFilter": log_filter},
            dict(self.config.properties),
        )
        manager.set(values)
