"""
Test suite for tracklog.core — coordinate diff / patch.

    §1  Diff on hand-checked examples
    §2  Apply and the running offset
    §3  Round trip  apply(s, diff(s, t)) == t
    §4  Malformed scripts
"""

import sys
import os
import pytest

# Add parent to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tracklog.core import (
    Insert, Delete, Replace,
    diff, apply, patch, edit_distance,
)
from tracklog.errors import MalformedScript, UnknownOperationKind


# ═══════════════════════════════════════════════════════════════════
#  §1  DIFF
# ═══════════════════════════════════════════════════════════════════

class TestDiff:

    def test_single_replace(self):
        source = [[0, 0], [1, 1], [2, 2]]
        target = [[0, 0], [9, 9], [2, 2]]
        assert diff(source, target) == [Replace([9, 9], 2)]

    def test_identical_is_empty(self):
        s = [[0, 0], [1, 1], [2, 2, 10.5]]
        assert diff(s, s) == []
        assert diff(s, [list(c) for c in s]) == []

    def test_empty_both(self):
        assert diff([], []) == []

    def test_append_point(self):
        assert diff([[0, 0]], [[0, 0], [1, 1]]) == [Insert([1, 1], 1)]

    def test_prepend_point(self):
        assert diff([[1, 1]], [[0, 0], [1, 1]]) == [Insert([0, 0], 0)]

    def test_drop_last_point(self):
        assert diff([[0, 0], [1, 1]], [[0, 0]]) == [Delete(2)]

    def test_from_empty(self):
        assert diff([], [[1, 1], [2, 2]]) == [Insert([1, 1], 0), Insert([2, 2], 0)]

    def test_to_empty(self):
        assert diff([[1, 1], [2, 2]], []) == [Delete(1), Delete(2)]

    def test_tuples_and_lists_compare_equal(self):
        assert diff([(0, 0), (1, 1)], [[0, 0], [1, 1]]) == []

    def test_elevation_is_part_of_the_value(self):
        ops = diff([[0, 0, 10]], [[0, 0, 12]])
        assert ops == [Replace([0, 0, 12], 1)]

    def test_exact_equality_no_tolerance(self):
        ops = diff([[5.0, 60.0]], [[5.0, 60.0000001]])
        assert len(ops) == 1

    def test_script_is_minimal(self):
        source = [[0, 0], [1, 1], [2, 2], [3, 3]]
        target = [[0, 0], [2, 2], [3, 3], [4, 4]]
        assert len(diff(source, target)) == edit_distance(source, target) == 2

    def test_positions_refer_to_source(self):
        source = [[0, 0], [1, 1], [2, 2], [3, 3]]
        target = [[0, 0], [3, 3]]
        ops = diff(source, target)
        assert sorted(op.position for op in ops) == [2, 3]
        assert all(isinstance(op, Delete) for op in ops)


class TestEditDistance:

    @pytest.mark.parametrize("source,target,expected", [
        ([], [], 0),
        ([[0, 0]], [], 1),
        ([], [[0, 0]], 1),
        ([[0, 0], [1, 1]], [[1, 1], [0, 0]], 2),
        ([[0, 0], [1, 1], [2, 2]], [[0, 0], [9, 9], [2, 2]], 1),
    ])
    def test_distance(self, source, target, expected):
        assert edit_distance(source, target) == expected


# ═══════════════════════════════════════════════════════════════════
#  §2  APPLY
# ═══════════════════════════════════════════════════════════════════

class TestApply:

    def test_replace(self):
        assert apply([[0, 0], [1, 1]], [Replace([5, 5], 2)]) == [[0, 0], [5, 5]]

    def test_delete_shifts_later_positions(self):
        source = [[0, 0], [1, 1], [2, 2], [3, 3]]
        # Both positions are in the original index space
        assert apply(source, [Delete(2), Delete(4)]) == [[0, 0], [2, 2]]

    def test_insert_shifts_later_positions(self):
        source = [[0, 0], [1, 1], [2, 2]]
        script = [Insert([9, 9], 1), Replace([8, 8], 2)]
        assert apply(source, script) == [[0, 0], [9, 9], [8, 8], [2, 2]]

    def test_consecutive_inserts_keep_order(self):
        script = [Insert([1, 1], 0), Insert([2, 2], 0), Insert([3, 3], 0)]
        assert apply([], script) == [[1, 1], [2, 2], [3, 3]]

    def test_delete_then_insert_at_same_position(self):
        source = [[0, 0], [1, 1], [2, 2]]
        script = [Delete(2), Insert([7, 7], 2)]
        assert apply(source, script) == [[0, 0], [7, 7], [2, 2]]

    def test_mixed_script(self):
        source = [[0, 0], [1, 1], [2, 2], [3, 3], [4, 4]]
        script = [
            Insert([-1, -1], 0),
            Delete(2),
            Replace([30, 30], 4),
            Insert([45, 45], 4),
            Delete(5),
        ]
        assert apply(source, script) == [[-1, -1], [0, 0], [2, 2], [30, 30], [45, 45]]

    def test_does_not_mutate_source(self):
        source = [[0, 0], [1, 1]]
        apply(source, [Delete(1), Insert([3, 3], 2)])
        assert source == [[0, 0], [1, 1]]

    def test_empty_script_copies(self):
        source = [[0, 0]]
        result = apply(source, [])
        assert result == source
        assert result is not source

    def test_patch_alias(self):
        assert patch is apply


# ═══════════════════════════════════════════════════════════════════
#  §3  ROUND TRIP
# ═══════════════════════════════════════════════════════════════════

class TestRoundTrip:

    CASES = [
        ([], []),
        ([], [[1, 1]]),
        ([[1, 1]], []),
        ([[0, 0], [1, 1], [2, 2]], [[0, 0], [9, 9], [2, 2]]),
        ([[0, 0], [1, 1], [2, 2]], [[2, 2], [1, 1], [0, 0]]),
        ([[0, 0], [1, 1], [2, 2], [3, 3]], [[0, 0], [1.5, 1.5], [3, 3], [4, 4]]),
        ([[0, 0], [0, 0], [0, 0]], [[0, 0]]),
        ([[0, 0]], [[0, 0], [0, 0], [0, 0]]),
        ([[1, 1], [2, 2], [3, 3]], [[0, 0], [1, 1], [5, 5], [3, 3], [6, 6], [7, 7]]),
        ([[5.3, 60.3, 12.0], [5.31, 60.31, 14.0], [5.32, 60.32, 11.0]],
         [[5.3, 60.3, 12.0], [5.305, 60.305, 13.0], [5.32, 60.32, 11.0]]),
    ]

    @pytest.mark.parametrize("source,target", CASES)
    def test_round_trip(self, source, target):
        assert apply(source, diff(source, target)) == target

    @pytest.mark.parametrize("source,target", CASES)
    def test_reverse_round_trip(self, source, target):
        assert apply(target, diff(target, source)) == source

    def test_long_track_drag_one_vertex(self):
        source = [[i, i * 2] for i in range(50)]
        target = [list(c) for c in source]
        target[25] = [25.5, 49.0]
        ops = diff(source, target)
        assert ops == [Replace([25.5, 49.0], 26)]
        assert apply(source, ops) == target


# ═══════════════════════════════════════════════════════════════════
#  §4  MALFORMED SCRIPTS
# ═══════════════════════════════════════════════════════════════════

class TestMalformedScript:

    @pytest.mark.parametrize("script", [
        [Delete(5)],
        [Delete(0)],
        [Replace([1, 1], 3)],
        [Insert([1, 1], 4)],
        [Insert([1, 1], -1)],
        [Delete(1), Delete(1), Delete(1)],
    ])
    def test_out_of_range(self, script):
        with pytest.raises(MalformedScript):
            apply([[0, 0], [1, 1]], script)

    def test_replace_on_empty(self):
        with pytest.raises(MalformedScript):
            apply([], [Replace([1, 1], 1)])

    def test_failure_leaves_source_alone(self):
        source = [[0, 0], [1, 1]]
        with pytest.raises(MalformedScript):
            apply(source, [Delete(1), Delete(9)])
        assert source == [[0, 0], [1, 1]]

    def test_unknown_op(self):
        with pytest.raises(UnknownOperationKind):
            apply([[0, 0]], [("delete", 1)])

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError):
            apply([], [Delete(1)])

    @pytest.mark.parametrize("script", [
        [Delete(1.5)],
        [Delete(1.0)],
        [Replace([1, 1], True)],
        [Insert([1, 1], "1")],
        [Insert([1, 1], None)],
    ])
    def test_non_integer_position(self, script):
        with pytest.raises(MalformedScript):
            apply([[0, 0], [1, 1]], script)
