"""任务规划工具 — 展平、路由任务链并打印执行顺序。

用法
----
    questflow-plan mypackage.quests:QUESTS --route route.yaml

``MODULE:ATTR`` 指向任务链列表，或返回任务链列表的无参函数。

可选参数
--------
    --config FILE       引擎配置 (YAML)
    --route FILE        路由文件，覆盖配置中的 route.routing
    --implicit-after    未声明依赖的任务自动依赖前一个任务
    --ignore-missing    忽略路由中不存在的任务
    --output FILE       把排序后的任务名写入 YAML
    --log-level LEVEL   日志级别，覆盖配置中的 log.level（默认 WARNING）
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

from loguru import logger

from questflow.infra.config import ConfigManager
from questflow.infra.exceptions import ConfigError, GraphError
from questflow.infra.file_utils import save_yaml
from questflow.infra.logger import setup_logger
from questflow.task.graph import get_tasks
from questflow.task.model import Quest
from questflow.task.route import load_route, order_by_route


def load_quests(target: str) -> list[Quest]:
    """按 ``MODULE:ATTR`` 导入任务链列表。

    Raises
    ------
    ConfigError
        格式错误、无法导入，或导入的对象不是任务链列表。
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigError(f"目标格式应为 MODULE:ATTR，实际为 {target!r}")
    try:
        module = importlib.import_module(module_name)
        quests = getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise ConfigError(f"无法导入 {target}: {e}") from e
    if callable(quests):
        quests = quests()
    quests = list(quests)
    if not all(isinstance(q, Quest) for q in quests):
        raise ConfigError(f"{target} 不是任务链列表")
    return quests


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="questflow-plan",
        description="展平并路由任务链，打印执行顺序",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("target", metavar="MODULE:ATTR", help="任务链列表所在位置")
    p.add_argument("--config", default=None, metavar="FILE", help="引擎配置文件")
    p.add_argument("--route", default=None, metavar="FILE", help="路由文件")
    p.add_argument("--implicit-after", action="store_true", help="补全隐式依赖")
    p.add_argument("--ignore-missing", action="store_true", help="忽略不存在的路由任务")
    p.add_argument("--output", default=None, metavar="FILE", help="输出排序结果到 YAML")
    p.add_argument("--log-level", default=None, help="日志级别，覆盖配置中的 log.level")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    setup_logger(level=args.log_level or "WARNING")

    config = ConfigManager.load(args.config) if args.config else None
    if config is not None:
        # 有配置文件时按 log 配置写入日志目录
        setup_logger(log_dir=config.log.dir, level=args.log_level or config.log.level)

    routing = list(config.route.routing) if config else []
    ignore_missing = args.ignore_missing or (config.route.ignore_missing_tasks if config else False)
    implicit_after = args.implicit_after or (config.implicit_after if config else False)

    try:
        if args.route:
            routing = load_route(args.route)
        quests = load_quests(args.target)
        tasks = get_tasks(quests, implicit_after=implicit_after)
        tasks = order_by_route(tasks, routing, ignore_missing_tasks=ignore_missing)
    except (ConfigError, GraphError) as e:
        logger.error("规划失败: {}", e)
        return 1

    width = len(str(len(tasks)))
    for index, task in enumerate(tasks, start=1):
        deps = ", ".join(task.after or []) or "-"
        print(f"{index:>{width}}. {task.name}  ← {deps}")

    if args.output:
        save_yaml({"routing": [task.name for task in tasks]}, Path(args.output))
        logger.info("已写入 {}", args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
