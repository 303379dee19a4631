"""
Motion
======

A motion binds one action to the time span during which it acts and to the
spins it acts on:

    Motion(action=Rotate(0, 0, 45), time=Periodic(1.0), spins=SpinRange(range(10)))

Motions are values. Sub-selection and concatenation never modify a motion
that is referenced elsewhere; they build a new one.
"""

import copy
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

import numpy as np

from ..primitives.actions import Action, Translate, Rotate, HeartBeat, Path
from ..primitives.time_spans import TimeSpan, TimeRange
from ..primitives.spins import SpinSelector, AllSpins, IndexLike


# =============================================================================
# MOTION
# =============================================================================

@dataclass(eq=False)
class Motion:
    """
    One scoped displacement rule.

    Attributes
    ----------
    action : Action
        Displacement field applied to the selected spins.
    time : TimeSpan
        Maps global time to unit time. Defaults to ``TimeRange(0, 0)``,
        a step at t = 0 (the full displacement from the first instant).
    spins : SpinSelector
        Spins the motion applies to. Defaults to ``AllSpins()``.
    """
    action: Action
    time: TimeSpan = field(default_factory=lambda: TimeRange(0.0, 0.0))
    spins: SpinSelector = field(default_factory=AllSpins)

    def __post_init__(self):
        if not isinstance(self.action, Action):
            raise TypeError(f"action must be an Action, got {type(self.action).__name__}")
        if not isinstance(self.time, TimeSpan):
            raise TypeError(f"time must be a TimeSpan, got {type(self.time).__name__}")
        if not isinstance(self.spins, SpinSelector):
            raise TypeError(f"spins must be a SpinSelector, got {type(self.spins).__name__}")

    @property
    def is_composable(self) -> bool:
        """True when the action must run in the sequential fold."""
        return self.action.is_composable

    def times(self) -> np.ndarray:
        """Breakpoints of the motion's time span."""
        return self.time.times()

    def unit_time(self, t: np.ndarray) -> np.ndarray:
        return self.time.unit_time(t)

    # -------------------------------------------------------------------------
    # Sub-selection
    # -------------------------------------------------------------------------

    def restrict(self, p: IndexLike, view: bool = False) -> Optional["Motion"]:
        """
        Motion narrowed to the sub-population ``p``.

        Returns None when none of the motion's spins belongs to ``p``.
        With ``view=True`` per-spin action data shares memory with this
        motion wherever numpy can express the selection as a view.
        """
        narrowed = self.spins.restrict(p)
        if narrowed is None:
            return None
        rows, spins = narrowed
        return Motion(
            action=self.action.restrict(rows, view=view),
            time=copy.deepcopy(self.time),
            spins=spins,
        )

    def __getitem__(self, p: IndexLike) -> Optional["Motion"]:
        return self.restrict(p, view=False)

    def view(self, p: IndexLike) -> Optional["Motion"]:
        return self.restrict(p, view=True)

    # -------------------------------------------------------------------------
    # Index re-basing
    # -------------------------------------------------------------------------

    def copy(self) -> "Motion":
        return copy.deepcopy(self)

    def expand(self, n_spins: int) -> "Motion":
        """Copy whose selector enumerates its spins explicitly."""
        moved = self.copy()
        moved.spins = moved.spins.expand(n_spins)
        return moved

    def shift(self, offset: int) -> "Motion":
        moved = self.copy()
        moved.spins = moved.spins.shift(offset)
        return moved

    # -------------------------------------------------------------------------
    # Validation and comparison
    # -------------------------------------------------------------------------

    def validate(self, n_spins: int, check_bounds: bool = True) -> None:
        """Check the motion can be evaluated on ``n_spins`` spins."""
        if check_bounds:
            self.spins.check_bounds(n_spins)
        if self.action.per_spin:
            self.action.check_rows(self.spins.count(n_spins))

    def __eq__(self, other):
        if not isinstance(other, Motion):
            return NotImplemented
        return (
            self.action == other.action
            and self.time == other.time
            and self.spins == other.spins
        )

    __hash__ = None

    def isclose(self, other: "Motion", rtol: float = 1e-5, atol: float = 1e-8) -> bool:
        """Tolerance-based equality of action and time parameters."""
        return (
            self.action.isclose(other.action, rtol=rtol, atol=atol)
            and self.time.isclose(other.time, rtol=rtol, atol=atol)
            and self.spins == other.spins
        )


# =============================================================================
# CONVENIENCE CONSTRUCTORS
# =============================================================================

def _motion(action: Action, time: Optional[TimeSpan], spins: Optional[SpinSelector]) -> Motion:
    return Motion(
        action=action,
        time=time if time is not None else TimeRange(0.0, 0.0),
        spins=spins if spins is not None else AllSpins(),
    )


def translate(
    dx: float,
    dy: float,
    dz: float,
    time: Optional[TimeSpan] = None,
    spins: Optional[SpinSelector] = None,
) -> Motion:
    """Motion wrapping ``Translate(dx, dy, dz)``."""
    return _motion(Translate(dx, dy, dz), time, spins)


def rotate(
    pitch: float,
    roll: float,
    yaw: float,
    time: Optional[TimeSpan] = None,
    spins: Optional[SpinSelector] = None,
    center: Tuple[float, float, float] = (0.0, 0.0, 0.0),
) -> Motion:
    """Motion wrapping ``Rotate(pitch, roll, yaw, center)``."""
    return _motion(Rotate(pitch, roll, yaw, center), time, spins)


def heartbeat(
    circumferential_strain: float,
    radial_strain: float,
    longitudinal_strain: float,
    time: Optional[TimeSpan] = None,
    spins: Optional[SpinSelector] = None,
) -> Motion:
    """Motion wrapping ``HeartBeat``."""
    return _motion(
        HeartBeat(circumferential_strain, radial_strain, longitudinal_strain), time, spins
    )


def path(
    dx: Sequence,
    dy: Sequence,
    dz: Sequence,
    time: Optional[TimeSpan] = None,
    spins: Optional[SpinSelector] = None,
) -> Motion:
    """Motion wrapping ``Path(dx, dy, dz)``."""
    return _motion(Path(dx, dy, dz), time, spins)
