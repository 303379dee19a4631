"""
Time Spans for Motion Primitives
================================

A time span maps global simulation time onto the normalised "unit time"
value that drives an action:

    s(t) = 0   → the action contributes no displacement
    s(t) = 1   → the action contributes its full displacement

Available Spans
---------------

    TimeRange(t_start, t_end)
        One-shot linear ramp. s = 0 before t_start, rises linearly to 1 at
        t_end and stays at 1 afterwards. With t_start == t_end the ramp
        degenerates to a step at t_start.

    Periodic(period, asymmetry=0.5)
        Triangular waveform repeating every ``period`` seconds. The rising
        edge lasts ``asymmetry·period`` and the falling edge the remainder:

            s
            1 |     /\\          /\\
              |    /  \\        /  \\
            0 |___/    \\______/    \\___
                  0   a·T   T

    TimeCurve(t, t_unit, periodic=False, periods=1.0)
        User-defined piecewise-linear curve through the points
        (t·periods, t_unit), clamped outside its knots or repeated when
        ``periodic`` is set.

Breakpoints
-----------
``times()`` lists the instants where s(t) changes slope. The motion list
aggregates them so the surrounding simulator can choose a sampling grid
that resolves every discontinuity.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

from ..utils.math_utils import allclose_params


# =============================================================================
# BASE CLASS
# =============================================================================

class TimeSpan(ABC):
    """Mapping from global time to unit time, plus its breakpoints."""

    @abstractmethod
    def unit_time(self, t: np.ndarray) -> np.ndarray:
        """Unit-time values with the same shape and dtype as ``t``."""

    @abstractmethod
    def times(self) -> np.ndarray:
        """Ordered breakpoint instants."""

    @abstractmethod
    def _params(self) -> tuple:
        """Parameters compared by equality and ``isclose``."""

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return all(
            np.array_equal(a, b) for a, b in zip(self._params(), other._params())
        )

    __hash__ = None

    def isclose(self, other: "TimeSpan", rtol: float = 1e-5, atol: float = 1e-8) -> bool:
        """Tolerance-based equality."""
        if type(self) is not type(other):
            return False
        return all(
            allclose_params(a, b, rtol=rtol, atol=atol)
            for a, b in zip(self._params(), other._params())
        )


# =============================================================================
# ONE-SHOT INTERVAL
# =============================================================================

@dataclass(eq=False)
class TimeRange(TimeSpan):
    """
    One-shot interval [t_start, t_end].

    Attributes
    ----------
    t_start : float
        Instant where the motion starts (seconds).
    t_end : float
        Instant where the motion reaches its full displacement (seconds).

    Example
    -------
    >>> TimeRange(0.0, 2.0).unit_time(np.array([-1.0, 1.0, 3.0]))
    array([0. , 0.5, 1. ])
    """
    t_start: float = 0.0
    t_end: float = 0.0

    def __post_init__(self):
        if self.t_end < self.t_start:
            raise ValueError(
                f"TimeRange requires t_end >= t_start, got "
                f"t_start={self.t_start}, t_end={self.t_end}"
            )

    def unit_time(self, t: np.ndarray) -> np.ndarray:
        t = np.asarray(t)
        if self.t_end == self.t_start:
            return (t >= self.t_start).astype(t.dtype)
        s = (t - self.t_start) / (self.t_end - self.t_start)
        return np.clip(s, 0, 1).astype(t.dtype, copy=False)

    def times(self) -> np.ndarray:
        return np.array([self.t_start, self.t_end], dtype=float)

    def _params(self) -> tuple:
        return (self.t_start, self.t_end)


# =============================================================================
# PERIODIC INTERVAL
# =============================================================================

@dataclass(eq=False)
class Periodic(TimeSpan):
    """
    Repeating triangular ramp.

    Attributes
    ----------
    period : float
        Duration of one cycle (seconds). Must be positive.
    asymmetry : float
        Fraction of the period spent on the rising edge, in [0, 1].
        0.5 gives a symmetric triangle, 1.0 a sawtooth.

    Physics Notes
    -------------
    Useful for respiratory or cardiac cycles where the displacement
    returns to the rest position at the end of each period.
    """
    period: float = 1.0
    asymmetry: float = 0.5

    def __post_init__(self):
        if self.period <= 0:
            raise ValueError(f"Periodic requires period > 0, got {self.period}")
        if not 0.0 <= self.asymmetry <= 1.0:
            raise ValueError(
                f"Periodic asymmetry must lie in [0, 1], got {self.asymmetry}"
            )

    def unit_time(self, t: np.ndarray) -> np.ndarray:
        t = np.asarray(t)
        t_rel = np.mod(t, self.period)
        rise = self.asymmetry * self.period
        fall = self.period - rise
        if rise == 0:
            s = 1 - t_rel / fall
        elif fall == 0:
            s = t_rel / rise
        else:
            s = np.where(t_rel < rise, t_rel / rise, 1 - (t_rel - rise) / fall)
        return np.asarray(s).astype(t.dtype, copy=False)

    def times(self) -> np.ndarray:
        return np.unique([0.0, self.asymmetry * self.period, self.period])

    def _params(self) -> tuple:
        return (self.period, self.asymmetry)


# =============================================================================
# USER-DEFINED CURVE
# =============================================================================

@dataclass(eq=False)
class TimeCurve(TimeSpan):
    """
    Piecewise-linear time curve.

    Attributes
    ----------
    t : array_like
        Strictly increasing knot instants of one cycle (seconds).
    t_unit : array_like
        Unit-time value at each knot; same length as ``t``.
    periodic : bool
        Repeat the curve indefinitely when True, otherwise hold the end
        values outside the knots.
    periods : float
        Scale factor applied to ``t`` (stretches or compresses the cycle).

    Example
    -------
    >>> # Hold still for 0.2 s, move over 0.6 s, hold again
    >>> curve = TimeCurve(t=[0.0, 0.2, 0.8, 1.0], t_unit=[0.0, 0.0, 1.0, 1.0])
    """
    t: np.ndarray = None
    t_unit: np.ndarray = None
    periodic: bool = False
    periods: float = 1.0

    def __post_init__(self):
        if self.t is None or self.t_unit is None:
            raise ValueError("TimeCurve requires both t and t_unit")
        t = np.asarray(self.t, dtype=float)
        t_unit = np.asarray(self.t_unit, dtype=float)
        if t.ndim != 1 or t.shape != t_unit.shape:
            raise ValueError(
                f"TimeCurve t and t_unit must be 1-D of equal length, "
                f"got shapes {t.shape} and {t_unit.shape}"
            )
        if len(t) < 2:
            raise ValueError("TimeCurve needs at least two knots")
        if np.any(np.diff(t) <= 0):
            raise ValueError("TimeCurve knots must be strictly increasing")
        if self.periods <= 0:
            raise ValueError(f"TimeCurve periods must be positive, got {self.periods}")
        self.t = t
        self.t_unit = t_unit

    @property
    def knots(self) -> np.ndarray:
        """Knot instants after applying ``periods``."""
        return self.t * self.periods

    def unit_time(self, t: np.ndarray) -> np.ndarray:
        t = np.asarray(t)
        knots = self.knots
        tq = t.astype(float)
        if self.periodic:
            span = knots[-1] - knots[0]
            tq = knots[0] + np.mod(tq - knots[0], span)
        s = np.interp(tq.ravel(), knots, self.t_unit).reshape(t.shape)
        return s.astype(t.dtype, copy=False)

    def times(self) -> np.ndarray:
        return self.knots.copy()

    def _params(self) -> tuple:
        return (self.t, self.t_unit, self.periodic, self.periods)
