"""
Spin Selectors
==============

A spin selector identifies which spins of a phantom a motion applies to.
Selectors never own coordinates: they are index sets into coordinate
arrays held by the caller.

Two selectors are provided:

    AllSpins()              every spin of whatever population it is used on
    SpinRange(indices)      an explicit set of 0-based spin indices

Index Algebra
-------------
Motions are combined and sub-selected by the motion list, which needs four
operations from every selector:

1. **Resolution**: ``get_idx()`` returns something numpy can index rows
   with. Contiguous or regularly strided sets resolve to a ``slice`` so the
   motion engine can work on views instead of fancy-indexed copies.

2. **Restriction**: ``restrict(p)`` narrows the selector to the spins of a
   sub-population ``p`` (indices into the current population). The result
   is expressed in the index space of ``p`` itself. It also returns the
   rows of any per-spin action data that survive, so that an action such as
   ``Path`` can be narrowed in step with its selector.

       SpinRange([2, 3, 7]).restrict([0, 3, 7, 9])
           rows     -> [1, 2]      (positions inside [2, 3, 7])
           selector -> SpinRange([1, 2])   (positions inside p)

3. **Expansion**: ``expand(n_spins)`` enumerates the selector explicitly
   over a population of ``n_spins``.

4. **Shifting**: ``shift(offset)`` re-bases every index; used when two
   populations are concatenated.

Selectors are immutable values; every operation returns a new selector.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from ..utils.math_utils import normalize_indices, indices_to_slice


IndexLike = Union[range, Sequence[int], np.ndarray]


# =============================================================================
# BASE CLASS
# =============================================================================

class SpinSelector(ABC):
    """Abstract index set over a spin population."""

    @abstractmethod
    def get_idx(self) -> Union[slice, np.ndarray]:
        """Row index usable on an (N, M) coordinate matrix."""

    @abstractmethod
    def restrict(self, p: IndexLike) -> Optional[Tuple[np.ndarray, "SpinSelector"]]:
        """
        Narrow the selector to the sub-population ``p``.

        Returns
        -------
        (rows, selector) or None
            ``rows`` indexes per-spin action data of the original motion,
            ``selector`` addresses the surviving spins inside ``p``.
            ``None`` when no selected spin is part of ``p``.
        """

    @abstractmethod
    def expand(self, n_spins: int) -> "SpinRange":
        """Explicit enumeration over a population of ``n_spins``."""

    @abstractmethod
    def shift(self, offset: int) -> "SpinSelector":
        """Selector with every index moved by ``offset``."""

    @abstractmethod
    def indices(self, n_spins: int) -> np.ndarray:
        """Selected global indices for a population of ``n_spins``."""

    @abstractmethod
    def check_bounds(self, n_spins: int) -> None:
        """Raise ``IndexError`` if any index falls outside ``[0, n_spins)``."""

    def count(self, n_spins: int) -> int:
        """Number of rows selected in a population of ``n_spins``."""
        return len(self.indices(n_spins))


# =============================================================================
# ALL SPINS
# =============================================================================

@dataclass(frozen=True)
class AllSpins(SpinSelector):
    """
    Selector covering the whole population.

    Example
    -------
    >>> AllSpins().expand(3)
    SpinRange(range=array([0, 1, 2]))
    """

    def get_idx(self) -> slice:
        return slice(None)

    def restrict(self, p: IndexLike) -> Optional[Tuple[np.ndarray, "AllSpins"]]:
        rows = normalize_indices(p)
        if len(rows) == 0:
            return None
        return rows, AllSpins()

    def expand(self, n_spins: int) -> "SpinRange":
        return SpinRange(range(n_spins))

    def shift(self, offset: int) -> SpinSelector:
        raise ValueError(
            "AllSpins has no explicit indices to shift; call expand(n_spins) first"
        )

    def indices(self, n_spins: int) -> np.ndarray:
        return np.arange(n_spins, dtype=np.intp)

    def check_bounds(self, n_spins: int) -> None:
        return None


# =============================================================================
# SPIN RANGE
# =============================================================================

@dataclass(frozen=True, eq=False)
class SpinRange(SpinSelector):
    """
    Explicit set of 0-based spin indices.

    Attributes
    ----------
    range : range | sequence of int | np.ndarray
        Selected indices. Stored as a read-only ``intp`` array; a boolean
        mask is accepted and converted to the indices it marks.
        Indices must be unique: a spin is either selected or not.

    Example
    -------
    >>> sel = SpinRange(range(10, 20))
    >>> sel.get_idx()
    slice(10, 20, 1)
    >>> sel.shift(5).range[:3]
    array([15, 16, 17])
    """
    range: IndexLike = field(default_factory=lambda: np.zeros(0, dtype=np.intp))

    def __post_init__(self):
        arr = normalize_indices(self.range).copy()
        if len(np.unique(arr)) != len(arr):
            raise ValueError(
                f"SpinRange indices must be unique, got duplicates in {arr.tolist()[:10]}"
            )
        arr.setflags(write=False)
        object.__setattr__(self, 'range', arr)
        object.__setattr__(self, '_slice', indices_to_slice(arr))

    def __eq__(self, other):
        if not isinstance(other, SpinRange):
            return NotImplemented
        return np.array_equal(self.range, other.range)

    __hash__ = None

    def __len__(self) -> int:
        return len(self.range)

    def get_idx(self) -> Union[slice, np.ndarray]:
        if self._slice is not None:
            return self._slice
        return self.range

    def restrict(self, p: IndexLike) -> Optional[Tuple[np.ndarray, "SpinRange"]]:
        p = normalize_indices(p)
        inside = np.flatnonzero(np.isin(p, self.range))
        if len(inside) == 0:
            return None
        # Position of each surviving spin inside self.range (first match)
        sorter = np.argsort(self.range, kind="stable")
        found = np.searchsorted(self.range, p[inside], sorter=sorter)
        rows = sorter[found]
        return rows, SpinRange(inside)

    def expand(self, n_spins: int) -> "SpinRange":
        return SpinRange(self.range)

    def shift(self, offset: int) -> "SpinRange":
        return SpinRange(self.range + int(offset))

    def indices(self, n_spins: int) -> np.ndarray:
        return self.range

    def check_bounds(self, n_spins: int) -> None:
        if len(self.range) == 0:
            return
        lo, hi = int(self.range.min()), int(self.range.max())
        if lo < 0 or hi >= n_spins:
            raise IndexError(
                f"Spin index out of range: selector spans [{lo}, {hi}] "
                f"but only {n_spins} spins are available"
            )
