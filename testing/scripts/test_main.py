"""命令行规划工具测试。"""

from __future__ import annotations

from pathlib import Path

import pytest

from questflow.infra.exceptions import ConfigError
from questflow.infra.file_utils import load_yaml
from questflow.scripts.main import load_quests, main

QUEST_MODULE = '''\
from questflow.task.model import Quest, Task


def _task(name, after=None):
    return Task(name, completed=lambda: False, do=lambda: None, after=after)


QUESTS = [
    Quest("Tavern", [_task("start"), _task("rats", ["start"])]),
    Quest("Bat", [_task("enter"), _task("boss", ["enter"])]),
]

BROKEN = [Quest("Broken", [_task("x", ["missing"])])]


def build():
    return [Quest("Built", [_task("only")])]


NOT_QUESTS = ["Tavern"]
'''


@pytest.fixture
def quest_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    (tmp_path / "cli_quests.py").write_text(QUEST_MODULE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    return "cli_quests"


def _printed_names(out: str) -> list[str]:
    return [line.split(". ", 1)[1].split("  ")[0] for line in out.strip().splitlines()]


class TestLoadQuests:
    def test_list(self, quest_module):
        assert [q.name for q in load_quests(f"{quest_module}:QUESTS")] == ["Tavern", "Bat"]

    def test_factory(self, quest_module):
        assert [q.name for q in load_quests(f"{quest_module}:build")] == ["Built"]

    @pytest.mark.parametrize("target", ["cli_quests", ":QUESTS", "cli_quests:"])
    def test_bad_format(self, target):
        with pytest.raises(ConfigError):
            load_quests(target)

    def test_not_quests(self, quest_module):
        with pytest.raises(ConfigError):
            load_quests(f"{quest_module}:NOT_QUESTS")

    def test_import_errors_wrapped(self, quest_module):
        with pytest.raises(ConfigError, match="无法导入"):
            load_quests("no_such_quest_module_xyz:QUESTS")
        with pytest.raises(ConfigError, match="无法导入"):
            load_quests(f"{quest_module}:MISSING")


class TestMain:
    def test_prints_plan(self, quest_module, capsys):
        assert main([f"{quest_module}:QUESTS"]) == 0
        out = capsys.readouterr().out
        assert _printed_names(out) == ["Tavern/start", "Tavern/rats", "Bat/enter", "Bat/boss"]
        assert "← Tavern/start" in out

    def test_route_file(self, quest_module, tmp_yaml, capsys):
        route = tmp_yaml("route.yaml", "- Bat/boss\n")
        assert main([f"{quest_module}:QUESTS", "--route", str(route)]) == 0
        names = _printed_names(capsys.readouterr().out)
        assert names == ["Bat/enter", "Bat/boss", "Tavern/start", "Tavern/rats"]

    def test_config_route_and_implicit_after(self, quest_module, tmp_yaml, tmp_path, capsys):
        config = tmp_yaml(
            "engine.yaml",
            f"implicit_after: true\nroute:\n  routing: [Bat/enter]\nlog:\n  dir: {tmp_path / 'log'}\n",
        )
        assert main([f"{quest_module}:QUESTS", "--config", str(config)]) == 0
        names = _printed_names(capsys.readouterr().out)
        # Bat/enter 隐式依赖 Tavern/rats，后者依赖 Tavern/start
        assert names == ["Tavern/start", "Tavern/rats", "Bat/enter", "Bat/boss"]

    def test_output(self, quest_module, tmp_path: Path):
        output = tmp_path / "out" / "plan.yaml"
        assert main([f"{quest_module}:QUESTS", "--output", str(output)]) == 0
        assert load_yaml(output)["routing"][0] == "Tavern/start"

    def test_unknown_dependency_fails(self, quest_module):
        assert main([f"{quest_module}:BROKEN"]) == 1

    def test_unknown_routing_task_fails(self, quest_module, tmp_yaml):
        route = tmp_yaml("route.yaml", "- Tavern/missing\n")
        assert main([f"{quest_module}:QUESTS", "--route", str(route)]) == 1

    def test_missing_route_file_fails(self, quest_module, tmp_path: Path):
        assert main([f"{quest_module}:QUESTS", "--route", str(tmp_path / "nope.yaml")]) == 1

    def test_unknown_module_fails(self):
        assert main(["no_such_quest_module_xyz:QUESTS"]) == 1

    def test_unknown_attribute_fails(self, quest_module):
        assert main([f"{quest_module}:MISSING"]) == 1

    def test_config_log_dir_written(self, quest_module, tmp_yaml, tmp_path: Path):
        log_dir = tmp_path / "logs"
        config = tmp_yaml("engine.yaml", f"log:\n  level: INFO\n  dir: {log_dir}\n")
        assert main([f"{quest_module}:QUESTS", "--config", str(config)]) == 0
        assert len(list(log_dir.glob("questflow_*.debug.log"))) == 1
        filtered = [p for p in log_dir.glob("questflow_*.log") if not p.name.endswith(".debug.log")]
        assert len(filtered) == 1

    def test_default_log_dir_under_root(self, quest_module, tmp_yaml, tmp_path: Path, monkeypatch):
        """未指定 log.dir 时写入 log.root 下按时间命名的目录。"""
        monkeypatch.chdir(tmp_path)
        config = tmp_yaml("engine.yaml", "log:\n  root: run_logs\n")
        assert main([f"{quest_module}:QUESTS", "--config", str(config)]) == 0
        dated = list((tmp_path / "run_logs").iterdir())
        assert len(dated) == 1
        assert list(dated[0].glob("questflow_*.debug.log"))

    def test_ignore_missing(self, quest_module, tmp_yaml):
        route = tmp_yaml("route.yaml", "- Tavern/missing\n")
        assert main([f"{quest_module}:QUESTS", "--route", str(route), "--ignore-missing"]) == 0
