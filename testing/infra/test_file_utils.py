"""测试文件工具函数。"""

from pathlib import Path

import pytest

from questflow.infra.file_utils import load_yaml, merge_dicts, save_yaml


class TestLoadYaml:
    """测试 load_yaml。"""

    def test_load_mapping(self, tmp_yaml):
        p = tmp_yaml("engine.yaml", "implicit_after: true\nproperties:\n  currentMood: apathetic\n")
        assert load_yaml(p) == {"implicit_after": True, "properties": {"currentMood": "apathetic"}}

    def test_load_top_level_list(self, tmp_yaml):
        """路由文件可以直接是任务名列表。"""
        p = tmp_yaml("route.yaml", "- Tavern/Start\n- Tavern/Rats\n")
        assert load_yaml(p) == ["Tavern/Start", "Tavern/Rats"]

    def test_load_empty_file(self, tmp_yaml):
        p = tmp_yaml("empty.yaml", "")
        assert load_yaml(p) == {}

    def test_file_not_found(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_yaml(tmp_path / "missing.yaml")

    def test_chinese_content(self, tmp_yaml):
        p = tmp_yaml("cn.yaml", "说明: 酒馆任务\n")
        assert load_yaml(p) == {"说明": "酒馆任务"}


class TestSaveYaml:
    """测试 save_yaml。"""

    def test_creates_parent_dirs(self, tmp_path: Path):
        path = tmp_path / "out" / "plans" / "route.yaml"
        save_yaml({"routing": ["A/a"]}, path)
        assert load_yaml(path) == {"routing": ["A/a"]}

    def test_keeps_key_order(self, tmp_path: Path):
        path = tmp_path / "ordered.yaml"
        save_yaml({"zeta": 1, "alpha": 2}, path)
        text = path.read_text(encoding="utf-8")
        assert text.index("zeta") < text.index("alpha")


class TestMergeDicts:
    """测试 merge_dicts。"""

    def test_override_wins(self):
        base = {"currentMood": "apathetic", "autoTuxedo": True}
        result = merge_dicts(base, {"autoTuxedo": False})
        assert result == {"currentMood": "apathetic", "autoTuxedo": False}

    def test_deep_merge(self):
        base = {"route": {"routing": ["A/a"], "ignore_missing_tasks": False}}
        override = {"route": {"ignore_missing_tasks": True}}
        result = merge_dicts(base, override)
        assert result == {"route": {"routing": ["A/a"], "ignore_missing_tasks": True}}

    def test_does_not_mutate_originals(self):
        base = {"a": {"x": 1}}
        override = {"a": {"y": 2}}
        merge_dicts(base, override)
        assert base == {"a": {"x": 1}}
        assert override == {"a": {"y": 2}}
