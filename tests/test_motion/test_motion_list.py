"""
Test Suite: Motion List Algebra
===============================

Covers the structural side of the motion composition engine:

1. Construction: non-empty, owns its motions
2. Sub-selection: copy and view forms, NoMotion on empty results
3. Concatenation: index re-basing across two spin populations
4. Breakpoints: sorted, unique, starting at zero
5. Sorting and comparison: order-insensitive equality

Coordinate evaluation is tested in test_spin_coords.py.
"""

import numpy as np
import pytest

from spin_motion.motion import (
    Motion,
    MotionList,
    NoMotion,
    translate,
    rotate,
    path,
    times,
    sort_motions,
    vcat,
)
from spin_motion.primitives.time_spans import TimeRange, Periodic
from spin_motion.primitives.spins import AllSpins, SpinRange


@pytest.fixture
def motions():
    """Three motions with distinct start times, declared out of order."""
    return [
        translate(0.01, 0.0, 0.0, TimeRange(2.0, 3.0), SpinRange(range(0, 5))),
        rotate(0.0, 0.0, 45.0, TimeRange(0.0, 1.0), SpinRange(range(5, 10))),
        translate(0.0, 0.02, 0.0, TimeRange(1.0, 2.0)),
    ]


@pytest.fixture
def motion_list(motions) -> MotionList:
    return MotionList(*motions)


# =============================================================================
# CATEGORY 1: CONSTRUCTION
# =============================================================================

class TestConstruction:
    """MotionList is never empty."""

    @pytest.mark.parametrize("k", [1, 2, 3])
    def test_length_equals_motion_count(self, motions, k):
        assert len(MotionList(*motions[:k])) == k

    def test_zero_motions_raise(self):
        with pytest.raises(ValueError, match="NoMotion"):
            MotionList()

    def test_non_motion_items_raise(self):
        with pytest.raises(TypeError):
            MotionList("rotate")

    def test_accepts_a_list(self, motions):
        assert len(MotionList(motions)) == 3

    def test_owns_its_motions(self, motions):
        ml = MotionList(*motions)
        assert ml.motions[0] is not motions[0]
        assert ml.motions[0] == motions[0]

    def test_partition_keeps_declaration_order(self, motion_list):
        assert [m.is_composable for m in motion_list.composable] == [True]
        assert motion_list.additive[0].time == TimeRange(2.0, 3.0)
        assert motion_list.additive[1].time == TimeRange(1.0, 2.0)


# =============================================================================
# CATEGORY 2: SUB-SELECTION
# =============================================================================

class TestSubSelection:
    """Restricting every motion to a subset of spins."""

    def test_disjoint_subset_gives_no_motion(self):
        ml = MotionList(
            translate(0.01, 0.0, 0.0, spins=SpinRange(range(0, 5))),
            rotate(0.0, 0.0, 45.0, spins=SpinRange(range(5, 10))),
        )
        assert isinstance(ml[[20, 21]], NoMotion)
        assert isinstance(ml.view([20, 21]), NoMotion)

    def test_motions_without_surviving_spins_are_dropped(self, motion_list):
        sub = motion_list[[6, 7]]
        assert isinstance(sub, MotionList)
        assert len(sub) == 2
        assert sub.motions[0].spins == SpinRange([0, 1])
        assert sub.motions[1].spins == AllSpins()

    def test_view_shares_path_data(self):
        dx = np.zeros((4, 2))
        ml = MotionList(path(dx, np.zeros((4, 2)), np.zeros((4, 2))))
        assert np.shares_memory(ml.view(range(0, 2)).motions[0].action.dx,
                                ml.motions[0].action.dx)
        assert not np.shares_memory(ml[range(0, 2)].motions[0].action.dx,
                                    ml.motions[0].action.dx)

    def test_no_motion_sub_selection(self):
        assert isinstance(NoMotion()[[0, 1]], NoMotion)
        assert isinstance(NoMotion().view([0, 1]), NoMotion)


# =============================================================================
# CATEGORY 3: CONCATENATION
# =============================================================================

class TestConcatenation:
    """vcat re-bases the second population by Ns1."""

    def test_whole_population_motions(self):
        ml1 = MotionList(translate(0.01, 0.0, 0.0))
        ml2 = MotionList(rotate(0.0, 0.0, 45.0))
        combined = vcat(ml1, ml2, 3, 4)
        assert len(combined) == 2
        assert combined.motions[0].spins == SpinRange(range(0, 3))
        assert combined.motions[1].spins == SpinRange(range(3, 7))

    def test_explicit_indices_are_shifted(self):
        ml1 = MotionList(translate(0.01, 0.0, 0.0))
        ml2 = MotionList(rotate(0.0, 0.0, 45.0, spins=SpinRange([0, 2])))
        combined = vcat(ml1, ml2, 5, 3)
        np.testing.assert_array_equal(combined.motions[1].spins.range, [5, 7])

    def test_operands_are_not_modified(self):
        ml1 = MotionList(translate(0.01, 0.0, 0.0))
        ml2 = MotionList(rotate(0.0, 0.0, 45.0, spins=SpinRange([0, 2])))
        vcat(ml1, ml2, 5, 3)
        assert ml1.motions[0].spins == AllSpins()
        assert ml2.motions[0].spins == SpinRange([0, 2])

    def test_first_list_precedes_second(self):
        ml1 = MotionList(rotate(0.0, 0.0, 10.0), translate(1.0, 0.0, 0.0))
        ml2 = MotionList(rotate(0.0, 0.0, 20.0))
        combined = vcat(ml1, ml2, 2, 2)
        yaws = [m.action.yaw for m in combined.composable]
        assert yaws == [10.0, 20.0]

    def test_with_no_motion(self):
        ml2 = MotionList(translate(0.01, 0.0, 0.0))
        combined = vcat(NoMotion(), ml2, 3, 4)
        assert len(combined) == 1
        assert combined.motions[0].spins == SpinRange(range(3, 7))
        assert vcat(ml2, NoMotion(), 4, 3).motions[0].spins == SpinRange(range(0, 4))
        assert isinstance(vcat(NoMotion(), NoMotion(), 1, 1), NoMotion)


# =============================================================================
# CATEGORY 4: BREAKPOINTS
# =============================================================================

class TestBreakpoints:
    """times() merges every motion's breakpoints."""

    def test_merged_sorted_unique(self):
        ml = MotionList(
            translate(0.01, 0.0, 0.0, TimeRange(0.5, 1.0)),
            rotate(0.0, 0.0, 45.0, Periodic(2.0)),
        )
        np.testing.assert_allclose(times(ml), [0.0, 0.5, 1.0, 2.0])

    def test_always_starts_at_zero(self, motion_list):
        nodes = motion_list.times()
        assert nodes[0] == 0.0
        assert len(nodes) == len(np.unique(nodes))
        assert np.all(np.diff(nodes) > 0)

    def test_zero_is_added_for_late_motions(self):
        ml = MotionList(translate(0.01, 0.0, 0.0, TimeRange(3.0, 4.0)))
        np.testing.assert_allclose(times(ml), [0.0, 3.0, 4.0])

    def test_no_motion(self):
        np.testing.assert_array_equal(times(NoMotion()), [0.0])


# =============================================================================
# CATEGORY 5: SORTING AND COMPARISON
# =============================================================================

class TestSorting:
    """Stable in-place sort by earliest breakpoint."""

    def test_sort_by_start_time(self, motion_list):
        sort_motions(motion_list)
        starts = [m.times()[0] for m in motion_list]
        assert starts == [0.0, 1.0, 2.0]

    def test_sort_is_stable(self):
        a = translate(1.0, 0.0, 0.0, TimeRange(0.0, 1.0))
        b = translate(2.0, 0.0, 0.0, TimeRange(0.0, 2.0))
        ml = MotionList(b, a)
        ml.sort_motions()
        assert ml.motions[0] == b

    def test_declaration_order_survives_sorting(self, motion_list, motions):
        sort_motions(motion_list)
        assert motion_list.declared == motions
        assert motion_list[range(0, 10)].motions[0] == motions[0]

    def test_no_motion_is_a_no_op(self):
        assert sort_motions(NoMotion()) is None


class TestComparison:
    """Equality is insensitive to declaration order."""

    def test_reflexive(self, motion_list):
        assert motion_list == motion_list

    def test_shuffled_copy_is_equal(self, motions, motion_list):
        shuffled = MotionList(motions[2], motions[0], motions[1])
        assert shuffled == motion_list

    def test_tied_start_times_compare_in_any_order(self):
        a = translate(1.0, 0.0, 0.0, TimeRange(0.0, 1.0))
        b = translate(2.0, 0.0, 0.0, TimeRange(0.0, 2.0))
        assert MotionList(a, b) == MotionList(b, a)
        assert MotionList(a, b).isclose(MotionList(b, a))

    def test_tied_start_times_still_compare_contents(self):
        a = translate(1.0, 0.0, 0.0, TimeRange(0.0, 1.0))
        b = translate(2.0, 0.0, 0.0, TimeRange(0.0, 2.0))
        c = translate(3.0, 0.0, 0.0, TimeRange(0.0, 2.0))
        assert MotionList(a, b) != MotionList(c, a)
        assert MotionList(a, a) != MotionList(a, b)
        assert not MotionList(a, b).isclose(MotionList(c, a))

    def test_comparison_sorts_both_operands(self, motions):
        a = MotionList(*motions)
        b = MotionList(*reversed(motions))
        assert a == b
        assert [m.times()[0] for m in a] == [0.0, 1.0, 2.0]
        assert [m.times()[0] for m in b] == [0.0, 1.0, 2.0]

    def test_length_mismatch_skips_sorting(self, motions):
        a = MotionList(*motions)
        b = MotionList(motions[0])
        assert a != b
        assert a.motions[0].time == TimeRange(2.0, 3.0)

    def test_different_parameters(self, motions):
        other = list(motions)
        other[1] = rotate(0.0, 0.0, 46.0, TimeRange(0.0, 1.0), SpinRange(range(5, 10)))
        assert MotionList(*motions) != MotionList(*other)

    def test_isclose_tolerates_rounding(self, motions):
        other = list(motions)
        other[1] = rotate(0.0, 0.0, 45.0 + 1e-9, TimeRange(0.0, 1.0), SpinRange(range(5, 10)))
        assert MotionList(*motions) != MotionList(*other)
        assert MotionList(*motions).isclose(MotionList(*other))

    def test_no_motion_comparison(self, motion_list):
        assert NoMotion() == NoMotion()
        assert motion_list != NoMotion()
        assert not motion_list.isclose(NoMotion())
