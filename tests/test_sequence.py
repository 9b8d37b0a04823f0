"""Tests for the sequence editor."""

import pytest

from journeymap.errors import IndexOutOfRange, ValidationError
from journeymap.models import JourneyStep
from journeymap.sequence import add_step, reindex, remove_step, update_step


def _orders(steps):
    return [s.order for s in steps]


class TestAddStep:
    def test_add_to_empty(self):
        steps = add_step([])
        assert len(steps) == 1
        assert steps[0].order == 1
        assert steps[0].timeline_day == 0

    def test_appends_with_cadence(self, three_steps):
        steps = add_step(three_steps)
        assert _orders(steps) == [1, 2, 3, 4]
        assert steps[-1].timeline_day == 21

    def test_input_untouched(self, three_steps):
        add_step(three_steps)
        assert len(three_steps) == 3


class TestRemoveStep:
    def test_middle_keeps_days(self, three_steps):
        steps = remove_step(three_steps, 1)
        assert _orders(steps) == [1, 2]
        assert [s.timeline_day for s in steps] == [0, 14]
        assert [s.title for s in steps] == ["Notice problem", "Give up"]

    def test_first(self, three_steps):
        steps = remove_step(three_steps, 0)
        assert _orders(steps) == [1, 2]
        assert steps[0].title == "Search options"

    def test_last(self, three_steps):
        assert _orders(remove_step(three_steps, 2)) == [1, 2]

    def test_only_step(self):
        assert remove_step(add_step([]), 0) == []

    @pytest.mark.parametrize("index", [-1, 3, 10])
    def test_out_of_range(self, three_steps, index):
        with pytest.raises(IndexOutOfRange):
            remove_step(three_steps, index)
        assert _orders(three_steps) == [1, 2, 3]

    def test_out_of_range_is_validation_error(self):
        with pytest.raises(ValidationError):
            remove_step([], 0)

    def test_orders_dense_after_every_removal(self):
        steps = []
        for _ in range(6):
            steps = add_step(steps)
        for index in (4, 0, 2, 1, 0, 0):
            steps = remove_step(steps, index)
            assert _orders(steps) == list(range(1, len(steps) + 1))
        assert steps == []

    def test_ids_carried(self, three_steps):
        with_ids = [s.model_copy(update={"id": f"id-{i}"}) for i, s in enumerate(three_steps)]
        steps = remove_step(with_ids, 0)
        assert [s.id for s in steps] == ["id-1", "id-2"]


class TestReindex:
    def test_renumbers_by_position(self):
        steps = [JourneyStep(order=5, title="a"), JourneyStep(order=2, title="b")]
        result = reindex(steps)
        assert _orders(result) == [1, 2]
        assert [s.title for s in result] == ["a", "b"]


class TestUpdateStep:
    def test_updates_fields(self, three_steps):
        steps = update_step(three_steps, 0, title="Spot the dip", negative_experience=5)
        assert steps[0].title == "Spot the dip"
        assert steps[0].negative_experience == 5
        assert three_steps[0].title == "Notice problem"

    def test_rejects_out_of_range_value(self, three_steps):
        with pytest.raises(ValidationError):
            update_step(three_steps, 1, positive_experience=6)
        assert three_steps[1].positive_experience == 4

    def test_rejects_order_edit(self, three_steps):
        with pytest.raises(ValidationError, match="not editable"):
            update_step(three_steps, 0, order=3)

    def test_rejects_id_edit(self, three_steps):
        with pytest.raises(ValidationError, match="not editable"):
            update_step(three_steps, 0, id="x")

    def test_bad_index(self, three_steps):
        with pytest.raises(IndexOutOfRange):
            update_step(three_steps, 3, title="x")

    def test_out_of_order_days_tolerated(self, three_steps):
        steps = update_step(three_steps, 2, timeline_day=1)
        assert [s.timeline_day for s in steps] == [0, 7, 1]
