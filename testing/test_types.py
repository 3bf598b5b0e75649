"""测试枚举与世界值类型。"""

import pytest

from questflow.types import (
    ACCESSORY_SLOTS,
    Item,
    LimitKind,
    Location,
    Monster,
    QuestState,
    Slot,
)


class TestBaseEnum:
    """测试枚举基类功能。"""

    def test_missing_value_error_message(self):
        with pytest.raises(ValueError, match="不是合法的"):
            Slot("tail")

    def test_str_enum_value(self):
        assert Slot.off_hand.value == "off-hand"
        assert isinstance(LimitKind.tries, str)


class TestSlot:
    def test_accessory_capacity(self):
        assert Slot.accessory.capacity == len(ACCESSORY_SLOTS) == 3

    def test_single_capacity(self):
        assert Slot.hat.capacity == 1


class TestQuestState:
    @pytest.mark.parametrize(
        ("state", "step"),
        [(QuestState.unstarted, -1), (QuestState.started, 0), (QuestState.finished, 999)],
    )
    def test_step(self, state, step):
        assert state.step == step


class TestValueTypes:
    def test_hashable_and_equal(self):
        assert {Monster("crate", 1): "x"}[Monster("crate", 1)] == "x"

    def test_str_is_name(self):
        assert str(Item("seal tooth", 2)) == "seal tooth"
        assert str(Location("The Sleazy Back Alley")) == "The Sleazy Back Alley"

    def test_frozen(self):
        item = Item("seal tooth")
        with pytest.raises(AttributeError):
            item.name = "other"
