"""
Tests for the in-memory marker store.
"""

import pytest

from mpvmarkers import EmptyStoreError, Marker, MarkerStore


class TestAdd:
    """Test id assignment on add."""

    def test_ids_start_at_one_and_increase(self):
        store = MarkerStore()
        ids = [store.add(t).id for t in [50.0, 0.0, 12.5, 12.5, 3.0]]
        assert ids == [1, 2, 3, 4, 5]
        assert store.next_id == 6
        assert len(store) == 5

    def test_negative_time_rejected(self):
        store = MarkerStore()
        with pytest.raises(ValueError):
            store.add(-1.0)
        with pytest.raises(ValueError):
            store.add(None)
        assert len(store) == 0
        assert store.next_id == 1

    def test_non_finite_time_rejected(self):
        store = MarkerStore()
        with pytest.raises(ValueError):
            store.add(float("inf"))
        with pytest.raises(ValueError):
            store.add(float("nan"))
        assert len(store) == 0
        assert store.next_id == 1

    def test_ids_not_reused_after_remove(self):
        store = MarkerStore()
        store.add(1.0)
        store.add(2.0)
        store.remove_last()
        assert store.add(3.0).id == 3


class TestOrderings:
    """Test the id and time views."""

    def test_example_scenario(self):
        store = MarkerStore()
        first = store.add(12.345)
        second = store.add(5.0)
        assert first.id == 1 and second.id == 2
        assert [m.id for m in store.by_time_ascending()] == [2, 1]
        assert [m.id for m in store.by_id_ascending()] == [1, 2]

    def test_time_ties_ordered_by_id(self):
        store = MarkerStore()
        store.add(10.0)
        store.add(5.0)
        store.add(10.0)
        store.add(5.0)
        assert [m.id for m in store.by_time_ascending()] == [2, 4, 1, 3]

    def test_views_refresh_after_mutation(self):
        store = MarkerStore()
        store.add(10.0)
        assert [m.id for m in store.by_time_ascending()] == [1]
        store.add(1.0)
        assert [m.id for m in store.by_time_ascending()] == [2, 1]
        store.remove_last()
        assert [m.id for m in store.by_time_ascending()] == [1]

    def test_iteration_is_id_order(self, three_markers):
        assert [m.id for m in three_markers] == [1, 2, 3]


class TestRemoveLast:
    """Test removal of the highest id."""

    def test_removes_highest_id(self, three_markers):
        removed = three_markers.remove_last()
        assert removed == Marker(time=50.0, id=3)
        assert [m.id for m in three_markers] == [1, 2]

    def test_highest_id_regardless_of_position(self):
        store = MarkerStore()
        store.load_replace([Marker(5.0, 7), Marker(1.0, 2), Marker(3.0, 4)])
        assert store.remove_last().id == 7
        assert store.remove_last().id == 4

    def test_n_adds_then_n_removes_empties_store(self):
        store = MarkerStore()
        for t in range(5):
            store.add(float(t))
        removed = [store.remove_last().id for _ in range(5)]
        assert removed == [5, 4, 3, 2, 1]
        assert not store
        assert store.next_id == 6

    def test_empty_store(self):
        with pytest.raises(EmptyStoreError):
            MarkerStore().remove_last()


class TestClearAndLoad:
    """Test clear and load_replace."""

    def test_clear_returns_count(self, three_markers):
        assert three_markers.clear() == 3
        assert len(three_markers) == 0
        assert three_markers.clear() == 0

    def test_clear_keeps_next_id(self, three_markers):
        three_markers.clear()
        assert three_markers.add(1.0).id == 4

    def test_load_replace_sets_next_id(self, three_markers):
        three_markers.load_replace([Marker(1.0, 4), Marker(2.0, 9)])
        assert [m.id for m in three_markers] == [4, 9]
        assert three_markers.next_id == 10

    def test_load_replace_empty(self, three_markers):
        three_markers.load_replace([])
        assert len(three_markers) == 0
        assert three_markers.next_id == 1

    def test_load_replace_duplicate_ids_keep_first(self):
        store = MarkerStore()
        store.load_replace([Marker(1.0, 3), Marker(2.0, 3)])
        assert len(store) == 1
        assert store.get(3).time == 1.0

    def test_change_callbacks(self):
        store = MarkerStore()
        calls = []
        store.register_change_callback(lambda: calls.append(len(store)))
        store.add(1.0)
        store.add(2.0)
        store.remove_last()
        store.clear()
        assert calls == [1, 2, 1, 0]
