"""测试配置系统。"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from questflow.infra.config import (
    DEFAULT_WANDERING_ENCOUNTERS,
    ConfigManager,
    EngineConfig,
    LogConfig,
    RouteConfig,
)


# ── LogConfig ──


class TestLogConfig:
    def test_dir_auto_generated(self):
        cfg = LogConfig()
        assert cfg.dir is not None
        assert str(cfg.root) in str(cfg.dir)

    def test_explicit_dir_kept(self, tmp_path: Path):
        cfg = LogConfig(dir=tmp_path)
        assert cfg.dir == tmp_path

    def test_invalid_level(self):
        with pytest.raises(ValidationError):
            LogConfig(level="VERBOSE")


# ── RouteConfig ──


class TestRouteConfig:
    def test_defaults(self):
        cfg = RouteConfig()
        assert cfg.routing == []
        assert cfg.ignore_missing_tasks is False

    def test_blank_task_name_rejected(self):
        with pytest.raises(ValidationError, match="不能为空"):
            RouteConfig(routing=["Tavern/Start", "  "])

    def test_frozen(self):
        cfg = RouteConfig()
        with pytest.raises(ValidationError):
            cfg.ignore_missing_tasks = True


# ── EngineConfig ──


class TestEngineConfig:
    def test_defaults(self):
        cfg = EngineConfig()
        assert cfg.implicit_after is False
        assert cfg.wandering_encounters == list(DEFAULT_WANDERING_ENCOUNTERS)
        assert cfg.properties == {}

    def test_wandering_encounters_deduplicated(self):
        cfg = EngineConfig(wandering_encounters=["Bath Time", "Lost and Found", "Bath Time"])
        assert cfg.wandering_encounters == ["Bath Time", "Lost and Found"]

    def test_from_yaml(self, tmp_yaml):
        content = """\
implicit_after: true
route:
  routing:
    - Tavern/Rats
    - Bat/Boss
  ignore_missing_tasks: true
properties:
  currentMood: "hostile"
  autoTuxedo: false
"""
        cfg = EngineConfig.from_yaml(tmp_yaml("engine.yaml", content))
        assert cfg.implicit_after is True
        assert cfg.route.routing == ["Tavern/Rats", "Bat/Boss"]
        assert cfg.route.ignore_missing_tasks is True
        assert cfg.properties == {"currentMood": "hostile", "autoTuxedo": False}

    def test_from_empty_yaml(self, tmp_yaml):
        cfg = EngineConfig.from_yaml(tmp_yaml("empty.yaml", ""))
        assert cfg == EngineConfig(log=cfg.log)


# ── ConfigManager ──


class TestConfigManager:
    def test_missing_file_returns_default(self, tmp_path: Path):
        cfg = ConfigManager.load(tmp_path / "nope.yaml")
        assert cfg.route.routing == []

    def test_load(self, tmp_yaml):
        cfg = ConfigManager.load(tmp_yaml("engine.yaml", "route:\n  routing: [A/a]\n"))
        assert cfg.route.routing == ["A/a"]
