"""
Motion List: The Motion Composition Engine
==========================================

A dynamic phantom is described by a ``MotionList``: one or more motions,
each scoped to a set of spins and a time span. This module combines them
into one deterministic trajectory per spin.

Coordinate Evaluation
---------------------

``get_spin_coords(motions, x, y, z, t)`` returns three (N, M) matrices,
the position of each of the N spins at each of the M instants:

1. **Initialise**: every row holds the spin's initial coordinate.

2. **Composable fold**: composable motions run strictly in declaration
   order. Each one reads the coordinates left by the previous one and adds
   its displacement to the rows its selector addresses:

       X₀ → X₁ = X₀ + u₁(X₀) → X₂ = X₁ + u₂(X₁) → ...

3. **Additive reduction**: additive motions are evaluated against the
   coordinates produced by the fold. They do not see each other, so they
   may be evaluated in any order and on worker threads; their
   displacements are summed into the output.

``sort_motions`` reorders ``motions`` for comparison only. Step 2 always
follows the declaration order, which every list keeps in ``declared``.

Additive Concurrency
--------------------

With ``EvaluationConfig(n_workers > 1)`` additive displacements are
evaluated on a thread pool (numpy releases the GIL in its kernels):

- Disjoint selectors: each worker writes its own rows directly.
- Overlapping selectors: workers only compute; the displacements are
  accumulated afterwards on the calling thread in declaration order, so
  no two writes to a row ever race.

Structural Operations
---------------------

    ml[p]             restriction to sub-population p (copies per-spin data)
    ml.view(p)        restriction sharing per-spin data with ``ml``
    vcat(a, b, n1, n2) motions of two concatenated populations
    times(ml)         sorted unique breakpoints, starting at 0
    sort_motions(ml)  stable in-place sort by earliest breakpoint
    a == b            equality after sorting both operands
    a.isclose(b)      tolerance-based equality after sorting both operands

Restrictions that leave no motion return ``NoMotion()``, never an empty
list.
"""

import copy
import logging
import warnings
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple, Union

import numpy as np

from ..configurations import EvaluationConfig
from ..primitives.spins import IndexLike
from .coordinates import prepare_inputs, coordinate_buffers
from .motion import Motion
from .no_motion import NoMotion

logger = logging.getLogger(__name__)


# =============================================================================
# MOTION LIST
# =============================================================================

class MotionList:
    """
    Ordered, non-empty collection of motions.

    Parameters
    ----------
    *motions : Motion
        One or more motions, in declaration order. A single list or tuple
        of motions is accepted as well.

    Raises
    ------
    ValueError
        If no motion is given. Use ``NoMotion()`` for static phantoms.
    TypeError
        If an item is not a ``Motion``.

    Example
    -------
    >>> motions = MotionList(
    ...     Motion(action=Translate(0.01, 0.0, 0.02), time=TimeRange(0.0, 1.0)),
    ...     Motion(action=Rotate(0.0, 0.0, 45.0), time=Periodic(1.0),
    ...            spins=SpinRange(range(10))),
    ... )
    >>> len(motions)
    2
    """

    def __init__(self, *motions: Motion):
        if len(motions) == 1 and isinstance(motions[0], (list, tuple)):
            motions = tuple(motions[0])
        if len(motions) == 0:
            raise ValueError(
                "You must provide at least one motion as input argument. "
                "If you do not want to define motion, use NoMotion()"
            )
        for m in motions:
            if not isinstance(m, Motion):
                raise TypeError(f"MotionList items must be Motion, got {type(m).__name__}")
        self.motions: List[Motion] = [copy.copy(m) for m in motions]
        self._declared: List[Motion] = list(self.motions)

    def __len__(self) -> int:
        return len(self.motions)

    def __iter__(self):
        return iter(self.motions)

    def __repr__(self) -> str:
        return f"MotionList({', '.join(repr(m) for m in self.motions)})"

    @property
    def declared(self) -> List[Motion]:
        """Motions in declaration order, unaffected by ``sort_motions``."""
        return list(self._declared)

    @property
    def composable(self) -> List[Motion]:
        """Composable motions in declaration order."""
        return [m for m in self._declared if m.is_composable]

    @property
    def additive(self) -> List[Motion]:
        """Additive motions in declaration order."""
        return [m for m in self._declared if not m.is_composable]

    # -------------------------------------------------------------------------
    # Sub-selection
    # -------------------------------------------------------------------------

    def _restrict(self, p: IndexLike, view: bool) -> Union["MotionList", NoMotion]:
        restricted = []
        for m in self._declared:
            sub = m.restrict(p, view=view)
            if sub is not None:
                restricted.append(sub)
        if not restricted:
            return NoMotion()
        return MotionList(restricted)

    def __getitem__(self, p: IndexLike) -> Union["MotionList", NoMotion]:
        """Motions restricted to the spins ``p``, with independent per-spin data."""
        return self._restrict(p, view=False)

    def view(self, p: IndexLike) -> Union["MotionList", NoMotion]:
        """Motions restricted to the spins ``p``, sharing per-spin data."""
        return self._restrict(p, view=True)

    # -------------------------------------------------------------------------
    # Breakpoints and ordering
    # -------------------------------------------------------------------------

    def times(self) -> np.ndarray:
        """Sorted unique breakpoints of every motion, always including 0."""
        nodes = [np.zeros(1)] + [np.asarray(m.times(), dtype=float) for m in self.motions]
        return np.unique(np.concatenate(nodes))

    def sort_motions(self) -> None:
        """Stable in-place sort by each motion's earliest breakpoint."""
        self.motions.sort(key=lambda m: m.times()[0])

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def __eq__(self, other):
        """
        Equality up to motion order.

        Both operands are sorted in place. Motions sharing a start time are
        then matched regardless of their relative order.
        """
        if not isinstance(other, MotionList):
            return NotImplemented
        if len(self) != len(other):
            return False
        self.sort_motions()
        other.sort_motions()
        return _match_sorted(self.motions, other.motions, lambda a, b: a == b)

    __hash__ = None

    def isclose(self, other, rtol: float = 1e-5, atol: float = 1e-8) -> bool:
        """
        Approximate equality up to motion order.

        Like ``==``, sorts both operands in place first.
        """
        if not isinstance(other, MotionList):
            return False
        if len(self) != len(other):
            return False
        self.sort_motions()
        other.sort_motions()
        return _match_sorted(self.motions, other.motions,
                             lambda a, b: a.isclose(b, rtol=rtol, atol=atol))

    # -------------------------------------------------------------------------
    # Coordinate evaluation
    # -------------------------------------------------------------------------

    def get_spin_coords(
        self,
        x: np.ndarray,
        y: np.ndarray,
        z: np.ndarray,
        t: np.ndarray,
        config: Optional[EvaluationConfig] = None,
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Position of each spin at each time instant.

        Parameters
        ----------
        x, y, z : np.ndarray
            Initial spin coordinates, 1-D of length N (meters).
        t : np.ndarray
            Time instants, shape (M,), (1, M) or (N, M) for spin-dependent
            timing (seconds). Must share the floating dtype of x, y, z.
        config : EvaluationConfig, optional
            Evaluation options; defaults to ``EvaluationConfig()``.

        Returns
        -------
        xt, yt, zt : np.ndarray
            Coordinates of shape (N, M).

        Raises
        ------
        ValueError
            On shape mismatches, or overlapping additive selectors with
            ``overlap_policy="error"``.
        TypeError
            On non-floating or mixed dtypes.
        IndexError
            When a selector addresses a spin outside [0, N).
        """
        config = config if config is not None else EvaluationConfig()
        x, y, z, t = prepare_inputs(x, y, z, t)
        n_spins = len(x)

        for m in self._declared:
            m.validate(n_spins, check_bounds=config.check_bounds)

        composable = self.composable
        additive = self.additive
        overlapping = _additive_overlap(additive, n_spins, config.overlap_policy)

        logger.debug(
            "Evaluating %d composable and %d additive motions on %d spins x %d instants",
            len(composable), len(additive), n_spins, t.shape[1],
        )

        xt, yt, zt = coordinate_buffers(x, y, z, t)
        _fold_composable(composable, xt, yt, zt, t, n_spins)
        _reduce_additive(additive, xt, yt, zt, t, n_spins, config.n_workers, overlapping)
        return xt, yt, zt


# =============================================================================
# COMPARISON HELPERS
# =============================================================================

def _start_groups(motions: List[Motion]) -> List[List[Motion]]:
    """Consecutive runs of sorted motions sharing one start time."""
    groups = []
    start = None
    for m in motions:
        t0 = m.times()[0]
        if groups and t0 == start:
            groups[-1].append(m)
        else:
            groups.append([m])
            start = t0
    return groups


def _match_sorted(a: List[Motion], b: List[Motion], same) -> bool:
    """
    Pairwise match of two sorted motion sequences.

    Within a run of equal start times each motion of ``a`` is paired with
    the first unused motion of ``b`` that ``same`` accepts.
    """
    groups_a, groups_b = _start_groups(a), _start_groups(b)
    if [len(g) for g in groups_a] != [len(g) for g in groups_b]:
        return False
    for ga, gb in zip(groups_a, groups_b):
        unused = list(gb)
        for m in ga:
            for i, candidate in enumerate(unused):
                if same(m, candidate):
                    del unused[i]
                    break
            else:
                return False
    return True


# =============================================================================
# EVALUATION STAGES
# =============================================================================

def _time_rows(t: np.ndarray, idx) -> np.ndarray:
    """Time rows matching the selected spins (shared row or per-spin rows)."""
    if t.shape[0] == 1:
        return t
    return t[idx]


def _add_rows(target: np.ndarray, idx, values: np.ndarray) -> None:
    values = np.asarray(values).astype(target.dtype, copy=False)
    if isinstance(idx, slice):
        target[idx] += values
    else:
        np.add.at(target, idx, values)


def _displace(m: Motion, xt, yt, zt, t):
    idx = m.spins.get_idx()
    s = m.unit_time(_time_rows(t, idx))
    return idx, m.action.displacement(xt[idx], yt[idx], zt[idx], s)


def _apply(idx, displacement, xt, yt, zt) -> None:
    ux, uy, uz = displacement
    _add_rows(xt, idx, ux)
    _add_rows(yt, idx, uy)
    _add_rows(zt, idx, uz)


def _fold_composable(motions: List[Motion], xt, yt, zt, t, n_spins: int) -> None:
    """Sequential fold: each motion reads the output of the previous one."""
    for m in motions:
        if m.spins.count(n_spins) == 0:
            continue
        idx, displacement = _displace(m, xt, yt, zt, t)
        _apply(idx, displacement, xt, yt, zt)


def _reduce_additive(
    motions: List[Motion],
    xt, yt, zt, t,
    n_spins: int,
    n_workers: int,
    overlapping: bool,
) -> None:
    """Sum of independent displacements evaluated on the folded coordinates."""
    motions = [m for m in motions if m.spins.count(n_spins) > 0]
    if not motions:
        return

    if not overlapping:
        # Disjoint rows: each unit reads and writes only its own rows
        def unit(m):
            idx, displacement = _displace(m, xt, yt, zt, t)
            _apply(idx, displacement, xt, yt, zt)

        if n_workers > 1 and len(motions) > 1:
            with ThreadPoolExecutor(max_workers=n_workers) as pool:
                list(pool.map(unit, motions))
        else:
            for m in motions:
                unit(m)
        return

    # Overlapping rows: evaluate everything first, then accumulate in order
    if n_workers > 1 and len(motions) > 1:
        with ThreadPoolExecutor(max_workers=n_workers) as pool:
            results = list(pool.map(lambda m: _displace(m, xt, yt, zt, t), motions))
    else:
        results = [_displace(m, xt, yt, zt, t) for m in motions]
    for idx, displacement in results:
        _apply(idx, displacement, xt, yt, zt)


def _additive_overlap(motions: List[Motion], n_spins: int, policy: str) -> bool:
    """
    Whether any spin is addressed by more than one additive motion.

    Applies ``policy`` ("sum", "warn" or "error") when it is.
    """
    if len(motions) < 2:
        return False
    coverage = np.zeros(n_spins, dtype=np.intp)
    for m in motions:
        coverage[m.spins.indices(n_spins)] += 1
    shared = np.flatnonzero(coverage > 1)
    if len(shared) == 0:
        return False

    message = (
        f"{len(shared)} spins are addressed by more than one additive motion "
        f"(first: {shared[:5].tolist()}); their displacements are summed"
    )
    if policy == "error":
        raise ValueError(message.replace("; their displacements are summed", ""))
    if policy == "warn":
        warnings.warn(message, UserWarning)
    logger.debug(message)
    return True


# =============================================================================
# MOTION SET FUNCTIONS
# =============================================================================

MotionSet = Union[MotionList, NoMotion]


def get_spin_coords(
    motion_set: MotionSet,
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
    t: np.ndarray,
    config: Optional[EvaluationConfig] = None,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Position of each spin at each time instant.

    Works for both ``MotionList`` and ``NoMotion``; see
    ``MotionList.get_spin_coords`` for the arguments.
    """
    return motion_set.get_spin_coords(x, y, z, t, config=config)


def times(motion_set: MotionSet) -> np.ndarray:
    """Sorted unique breakpoints, starting at 0."""
    return motion_set.times()


def sort_motions(motion_set: MotionSet) -> None:
    """
    Sorts motions according to their starting time, in place.

    Does nothing for ``NoMotion``.
    """
    motion_set.sort_motions()


def vcat(m1: MotionSet, m2: MotionSet, ns1: int, ns2: int) -> MotionSet:
    """
    Motions of two concatenated spin populations.

    The motions of ``m1`` keep their indices (made explicit over ``ns1``
    spins); the motions of ``m2`` are made explicit over ``ns2`` spins and
    shifted by ``ns1``. Every motion is copied, so neither operand is
    modified.

    Parameters
    ----------
    m1, m2 : MotionList or NoMotion
        Motion sets defined on populations of ``ns1`` and ``ns2`` spins.
    ns1, ns2 : int
        Population sizes.

    Returns
    -------
    MotionList or NoMotion
        ``NoMotion()`` only when both operands are ``NoMotion``.
    """
    motions = [m.expand(ns1) for m in m1.declared]
    motions += [m.expand(ns2).shift(ns1) for m in m2.declared]
    if not motions:
        return NoMotion()
    return MotionList(motions)
