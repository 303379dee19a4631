"""
Test Suite: Spin Selector Index Algebra
=======================================

Selectors are value types addressing rows of the coordinate matrices.
These tests pin down resolution, restriction to a sub-population,
expansion and shifting, which the motion list relies on for
sub-selection and concatenation.
"""

import numpy as np
import pytest

from spin_motion.primitives.spins import AllSpins, SpinRange


# =============================================================================
# ALL SPINS
# =============================================================================

class TestAllSpins:
    """AllSpins covers whatever population it is evaluated on."""

    def test_resolves_to_full_slice(self):
        assert AllSpins().get_idx() == slice(None)

    def test_expand_enumerates_population(self):
        assert AllSpins().expand(3) == SpinRange([0, 1, 2])

    def test_shift_requires_expansion(self):
        with pytest.raises(ValueError):
            AllSpins().shift(4)

    def test_restrict_keeps_every_requested_spin(self):
        rows, sel = AllSpins().restrict([2, 5])
        np.testing.assert_array_equal(rows, [2, 5])
        assert sel == AllSpins()

    def test_restrict_to_empty_population_is_none(self):
        assert AllSpins().restrict([]) is None

    def test_count_follows_population(self):
        assert AllSpins().count(7) == 7


# =============================================================================
# SPIN RANGE
# =============================================================================

class TestSpinRange:
    """Explicit index sets."""

    def test_contiguous_range_resolves_to_slice(self):
        assert SpinRange(range(10, 20)).get_idx() == slice(10, 20, 1)

    def test_strided_range_resolves_to_slice(self):
        assert SpinRange([1, 3, 5]).get_idx() == slice(1, 6, 2)

    def test_irregular_indices_resolve_to_array(self):
        idx = SpinRange([1, 5, 2]).get_idx()
        assert isinstance(idx, np.ndarray)
        np.testing.assert_array_equal(idx, [1, 5, 2])

    def test_boolean_mask_is_converted(self):
        np.testing.assert_array_equal(SpinRange(np.array([True, False, True])).range, [0, 2])

    def test_float_indices_are_rejected(self):
        with pytest.raises(TypeError):
            SpinRange([0.5, 1.5])

    @pytest.mark.parametrize("indices", [[0, 0], [3, 1, 3], np.array([2, 2, 2])])
    def test_duplicate_indices_are_rejected(self, indices):
        with pytest.raises(ValueError, match="unique"):
            SpinRange(indices)

    def test_restriction_of_repeated_population_keeps_unique_selector(self):
        rows, sel = SpinRange([2, 5]).restrict([5, 5, 2])
        np.testing.assert_array_equal(sel.range, [0, 1, 2])
        np.testing.assert_array_equal(rows, [1, 1, 0])

    def test_indices_are_read_only(self):
        sel = SpinRange([0, 1, 2])
        with pytest.raises(ValueError):
            sel.range[0] = 5

    def test_equality_ignores_container_type(self):
        assert SpinRange(range(3)) == SpinRange([0, 1, 2])
        assert SpinRange(range(3)) != SpinRange([0, 1])

    def test_shift_rebases_every_index(self):
        np.testing.assert_array_equal(SpinRange([0, 1]).shift(5).range, [5, 6])

    def test_shift_returns_new_selector(self):
        sel = SpinRange([0, 1])
        sel.shift(5)
        np.testing.assert_array_equal(sel.range, [0, 1])

    def test_expand_keeps_indices(self):
        assert SpinRange([4, 6]).expand(10) == SpinRange([4, 6])


class TestSpinRangeRestriction:
    """Restriction expresses surviving spins in the sub-population's index space."""

    def test_partial_overlap(self):
        rows, sel = SpinRange([2, 3, 7]).restrict([0, 3, 7, 9])
        # Spins 3 and 7 sit at positions 1, 2 of the selector and of p
        np.testing.assert_array_equal(rows, [1, 2])
        assert sel == SpinRange([1, 2])

    def test_rows_follow_selector_order(self):
        rows, sel = SpinRange([7, 2]).restrict([2, 7])
        np.testing.assert_array_equal(rows, [1, 0])
        assert sel == SpinRange([0, 1])

    def test_disjoint_population_is_none(self):
        assert SpinRange([0, 1]).restrict([5, 6]) is None

    def test_restrict_accepts_range(self):
        rows, sel = SpinRange(range(10)).restrict(range(8, 12))
        np.testing.assert_array_equal(rows, [8, 9])
        assert sel == SpinRange([0, 1])


class TestBounds:
    """Index range checks performed before evaluation."""

    def test_index_past_end_raises(self):
        with pytest.raises(IndexError):
            SpinRange([0, 10]).check_bounds(10)

    def test_negative_index_raises(self):
        with pytest.raises(IndexError):
            SpinRange([-1, 2]).check_bounds(10)

    def test_valid_indices_pass(self):
        SpinRange([0, 10]).check_bounds(11)

    def test_empty_selector_passes(self):
        SpinRange([]).check_bounds(0)
