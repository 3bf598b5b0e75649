"""设置项管理 — 写入偏好设置与选择事件选项，并记住原值以便恢复。"""

from __future__ import annotations

from typing import Any, Mapping

from loguru import logger

from questflow.engine.world import World

CHOICE_PREFIX = "choiceAdventure"
"""选择事件选项的设置项前缀，完整键形如 ``choiceAdventure1060``。"""


def to_setting(value: Any) -> str:
    """把 Python 值转换为设置项字符串。布尔值写作 ``true`` / ``false``。"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


class PropertiesManager:
    """设置项管理器。

    每个键第一次被写入时记录原值，``reset_all`` 恢复全部原值。

    Parameters
    ----------
    world:
        设置项存储所在的世界。
    """

    def __init__(self, world: World) -> None:
        self._world = world
        self._originals: dict[str, str] = {}

    def set(self, values: Mapping[str, Any]) -> None:
        """批量写入设置项。"""
        for key, value in values.items():
            if key not in self._originals:
                self._originals[key] = self._world.get_property(key)
            self._world.set_property(key, to_setting(value))

    def set_choices(self, choices: Mapping[int, int]) -> None:
        """为选择事件设置默认选项。"""
        self.set({f"{CHOICE_PREFIX}{choice_id}": option for choice_id, option in choices.items()})

    def reset(self, *keys: str) -> None:
        """恢复指定键的原值。"""
        for key in keys:
            if key in self._originals:
                self._world.set_property(key, self._originals.pop(key))

    def reset_all(self) -> None:
        """恢复所有被修改过的设置项。"""
        logger.debug("恢复 {} 个设置项", len(self._originals))
        self.reset(*list(self._originals))

    @property
    def originals(self) -> dict[str, str]:
        """被修改过的键及其原值。"""
        return dict(self._originals)
