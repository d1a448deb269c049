"""
Unit tests for the reorder engine.
"""

from collections import Counter
import pytest

from filegen.reorder import reorder_fields, is_valid_move


class TestReorderFields:
    """Test cases for reorder_fields."""

    def test_move_first_to_last(self):
        assert reorder_fields(["a", "b", "c"], 0, 2) == ["b", "c", "a"]

    def test_move_last_to_first(self):
        assert reorder_fields(["a", "b", "c"], 2, 0) == ["c", "a", "b"]

    def test_move_to_middle(self):
        assert reorder_fields(["a", "b", "c", "d"], 3, 1) == ["a", "d", "b", "c"]

    def test_input_is_not_modified(self):
        items = ["a", "b", "c"]
        reorder_fields(items, 0, 2)
        assert items == ["a", "b", "c"]

    @pytest.mark.parametrize("source,destination", [(5, 0), (0, 5), (-1, 1), (1, -1), (1, 1), (None, 0), (0, None)])
    def test_invalid_moves_return_unchanged_copy(self, source, destination):
        items = ["a", "b", "c"]
        result = reorder_fields(items, source, destination)
        assert result == items
        assert result is not items

    def test_preserves_length_and_membership_for_all_moves(self):
        items = ["a", "b", "c", "d", "e"]
        for source in range(len(items)):
            for destination in range(len(items)):
                result = reorder_fields(items, source, destination)
                assert len(result) == len(items)
                assert Counter(result) == Counter(items)
                assert result[destination] == items[source]

                # Everything else keeps its relative order
                rest_before = [x for x in items if x != items[source]]
                rest_after = [x for x in result if x != items[source]]
                assert rest_before == rest_after

    def test_empty_list(self):
        assert reorder_fields([], 0, 0) == []


class TestIsValidMove:
    """Test cases for is_valid_move."""

    def test_valid(self):
        assert is_valid_move(3, 0, 2)

    def test_same_index(self):
        assert not is_valid_move(3, 1, 1)

    def test_dropped_outside(self):
        assert not is_valid_move(3, 1, None)
