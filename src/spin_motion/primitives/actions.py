"""
Motion Actions
==============

An action is a displacement field. Given the current coordinates of a set
of spins and the unit-time values produced by a time span, it returns the
displacement to add along each axis:

    (ux, uy, uz) = action.displacement(x, y, z, s)

All inputs are 2-D arrays: one row per spin and one column per time
instant (``s`` may have a single row that broadcasts over every spin).
At s = 0 every action returns a zero displacement.

COMPOSABLE VS ADDITIVE
----------------------

Actions fall in two families, fixed per variant by ``is_composable``:

**Composable** actions must see the coordinates produced by earlier
composable actions. A rotation followed by another rotation depends on
the order, so the motion list folds composable actions one after the
other in declaration order.

**Additive** actions are independent of each other. Their displacements
are evaluated against the coordinates left by the composable fold and
simply summed, so they may be evaluated in any order (or concurrently).

    Variant      Composable   Per-spin data
    ─────────────────────────────────────────
    Translate    no           no
    Rotate       yes          no
    HeartBeat    no           no
    Path         no           yes

PER-SPIN ACTIONS
----------------

``Path`` stores one displacement trajectory per selected spin. When a
motion is restricted to a sub-population the action must be narrowed in
step with its selector; ``restrict(rows, view)`` does that. Scalar-valued
actions return a copy of themselves.
"""

import copy
import warnings
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Tuple

import numpy as np

from ..utils.math_utils import rotation_matrices, indices_to_slice, allclose_params


Displacement = Tuple[np.ndarray, np.ndarray, np.ndarray]


# =============================================================================
# BASE CLASS
# =============================================================================

class Action(ABC):
    """
    Capability interface implemented by every displacement variant.

    Subclasses provide ``displacement_x``, ``displacement_y`` and
    ``displacement_z``; variants whose axes share work (rotations) override
    ``displacement`` instead and derive the per-axis methods from it.
    """
    is_composable: ClassVar[bool] = False
    per_spin: ClassVar[bool] = False

    @abstractmethod
    def displacement_x(self, x, y, z, t) -> np.ndarray:
        """Displacement along x."""

    @abstractmethod
    def displacement_y(self, x, y, z, t) -> np.ndarray:
        """Displacement along y."""

    @abstractmethod
    def displacement_z(self, x, y, z, t) -> np.ndarray:
        """Displacement along z."""

    def displacement(self, x, y, z, t) -> Displacement:
        """All three displacements, evaluated on the same input state."""
        return (
            self.displacement_x(x, y, z, t),
            self.displacement_y(x, y, z, t),
            self.displacement_z(x, y, z, t),
        )

    def restrict(self, rows: np.ndarray, view: bool = False) -> "Action":
        """Action narrowed to ``rows`` of its per-spin data."""
        return copy.copy(self)

    def check_rows(self, n_rows: int) -> None:
        """Raise ``ValueError`` if per-spin data does not match ``n_rows``."""
        return None

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

    def isclose(self, other: "Action", rtol: float = 1e-5, atol: float = 1e-8) -> bool:
        """Tolerance-based equality."""
        if type(self) is not type(other):
            return False
        return all(
            allclose_params(a, b, rtol=rtol, atol=atol)
            for a, b in zip(self._params(), other._params())
        )


# =============================================================================
# TRANSLATION
# =============================================================================

@dataclass(eq=False)
class Translate(Action):
    """
    Rigid translation.

    u(s) = s · (dx, dy, dz)

    Attributes
    ----------
    dx, dy, dz : float
        Full displacement along each axis (meters), reached at s = 1.

    Example
    -------
    >>> Translate(0.01, 0.0, 0.0).displacement_x(x, y, z, np.array([[0.0, 0.5, 1.0]]))
    array([[0.   , 0.005, 0.01 ]])
    """
    dx: float = 0.0
    dy: float = 0.0
    dz: float = 0.0

    def displacement_x(self, x, y, z, t) -> np.ndarray:
        return self.dx * t

    def displacement_y(self, x, y, z, t) -> np.ndarray:
        return self.dy * t

    def displacement_z(self, x, y, z, t) -> np.ndarray:
        return self.dz * t

    def _params(self) -> tuple:
        return (self.dx, self.dy, self.dz)


# =============================================================================
# ROTATION
# =============================================================================

@dataclass(eq=False)
class Rotate(Action):
    """
    Rigid rotation about a centre point.

    The rotation angles grow linearly with s; the rotation is extrinsic
    about x (pitch), then y (roll), then z (yaw).

    Attributes
    ----------
    pitch : float
        Rotation about the x axis (degrees).
    roll : float
        Rotation about the y axis (degrees).
    yaw : float
        Rotation about the z axis (degrees).
    center : tuple of float
        Rotation centre (meters). Defaults to the origin.

    Physics Notes
    -------------
    Rotations do not commute with each other or with translations of the
    rotated spins, so this action is composable: it always acts on the
    coordinates produced by earlier composable motions.
    """
    is_composable: ClassVar[bool] = True

    pitch: float = 0.0
    roll: float = 0.0
    yaw: float = 0.0
    center: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    def __post_init__(self):
        center = tuple(float(c) for c in self.center)
        if len(center) != 3:
            raise ValueError(f"Rotate center must have 3 components, got {len(center)}")
        self.center = center

    def displacement(self, x, y, z, t) -> Displacement:
        t = np.asarray(t)
        R = rotation_matrices(self.pitch, self.roll, self.yaw, t).astype(
            np.result_type(x, t), copy=False
        )
        cx, cy, cz = self.center
        xc, yc, zc = x - cx, y - cy, z - cz
        ux = R[..., 0, 0] * xc + R[..., 0, 1] * yc + R[..., 0, 2] * zc - xc
        uy = R[..., 1, 0] * xc + R[..., 1, 1] * yc + R[..., 1, 2] * zc - yc
        uz = R[..., 2, 0] * xc + R[..., 2, 1] * yc + R[..., 2, 2] * zc - zc
        return ux, uy, uz

    def displacement_x(self, x, y, z, t) -> np.ndarray:
        return self.displacement(x, y, z, t)[0]

    def displacement_y(self, x, y, z, t) -> np.ndarray:
        return self.displacement(x, y, z, t)[1]

    def displacement_z(self, x, y, z, t) -> np.ndarray:
        return self.displacement(x, y, z, t)[2]

    def _params(self) -> tuple:
        return (self.pitch, self.roll, self.yaw, self.center)


# =============================================================================
# HEART BEAT
# =============================================================================

@dataclass(eq=False)
class HeartBeat(Action):
    """
    Cylindrical contraction model about the z axis.

    With r the in-plane radius and r_max the largest radius among the
    spins being displaced at the same instant (one value per time column,
    so earlier rotations that move spins off the z axis never couple
    different instants):

        Δr(s) = s · (c·r − ρ·(r_max − r))
        uz(s) = s · l · z

    and the in-plane displacement is Δr along the radial direction.
    Radii are never pushed through the axis: when r + Δr < 0 the spin is
    moved onto the axis instead.

    Attributes
    ----------
    circumferential_strain : float
        c, relative change of the perimeter (negative contracts).
    radial_strain : float
        ρ, wall thickening that pulls inner spins toward the axis.
    longitudinal_strain : float
        l, relative change along z.
    """
    circumferential_strain: float = 0.0
    radial_strain: float = 0.0
    longitudinal_strain: float = 0.0

    def _radial(self, x, y, t) -> Tuple[np.ndarray, np.ndarray]:
        r = np.hypot(x, y)
        theta = np.arctan2(y, x)
        r_max = r.max(axis=0, keepdims=True) if r.size else 0.0
        dr = t * (self.circumferential_strain * r - self.radial_strain * (r_max - r))
        dr = np.where(r + dr < 0, -r, dr)
        return dr, theta

    def displacement_x(self, x, y, z, t) -> np.ndarray:
        dr, theta = self._radial(x, y, t)
        return dr * np.cos(theta)

    def displacement_y(self, x, y, z, t) -> np.ndarray:
        dr, theta = self._radial(x, y, t)
        return dr * np.sin(theta)

    def displacement_z(self, x, y, z, t) -> np.ndarray:
        return t * self.longitudinal_strain * z

    def displacement(self, x, y, z, t) -> Displacement:
        dr, theta = self._radial(x, y, t)
        return dr * np.cos(theta), dr * np.sin(theta), self.displacement_z(x, y, z, t)

    def _params(self) -> tuple:
        return (self.circumferential_strain, self.radial_strain, self.longitudinal_strain)


# =============================================================================
# TABULATED PATH
# =============================================================================

@dataclass(eq=False)
class Path(Action):
    """
    Arbitrary per-spin trajectories.

    Each row of ``dx``, ``dy``, ``dz`` holds the displacement of one
    selected spin at K knots spread uniformly over unit time [0, 1];
    values in between are linearly interpolated.

    Attributes
    ----------
    dx, dy, dz : np.ndarray
        Arrays of shape (n_spins, K) with K >= 2 (meters). Row i belongs
        to the i-th spin addressed by the motion's selector.

    Example
    -------
    >>> # Two spins, the second one moving 1 mm along x and back
    >>> Path(dx=[[0, 0, 0], [0, 1e-3, 0]], dy=np.zeros((2, 3)), dz=np.zeros((2, 3)))
    """
    per_spin: ClassVar[bool] = True

    dx: np.ndarray = None
    dy: np.ndarray = None
    dz: np.ndarray = None

    def __post_init__(self):
        if self.dx is None or self.dy is None or self.dz is None:
            raise ValueError("Path requires dx, dy and dz")
        self.dx = np.asarray(self.dx, dtype=float)
        self.dy = np.asarray(self.dy, dtype=float)
        self.dz = np.asarray(self.dz, dtype=float)
        if self.dx.ndim != 2:
            raise ValueError(f"Path arrays must be 2-D (spins × knots), got shape {self.dx.shape}")
        if not (self.dx.shape == self.dy.shape == self.dz.shape):
            raise ValueError(
                f"Path arrays must share one shape, got "
                f"{self.dx.shape}, {self.dy.shape}, {self.dz.shape}"
            )
        if self.dx.shape[1] < 2:
            raise ValueError("Path needs at least two knots per spin")

    @property
    def n_spins(self) -> int:
        return self.dx.shape[0]

    def _interpolate(self, d: np.ndarray, t: np.ndarray) -> np.ndarray:
        t = np.asarray(t)
        n_knots = d.shape[1]
        pos = t * (n_knots - 1)
        i0 = np.clip(np.floor(pos), 0, n_knots - 2).astype(np.intp)
        frac = pos - i0
        shape = (d.shape[0], t.shape[-1])
        i0 = np.broadcast_to(i0, shape)
        v0 = np.take_along_axis(d, i0, axis=1)
        v1 = np.take_along_axis(d, i0 + 1, axis=1)
        return (v0 + (v1 - v0) * frac).astype(t.dtype, copy=False)

    def displacement_x(self, x, y, z, t) -> np.ndarray:
        return self._interpolate(self.dx, t)

    def displacement_y(self, x, y, z, t) -> np.ndarray:
        return self._interpolate(self.dy, t)

    def displacement_z(self, x, y, z, t) -> np.ndarray:
        return self._interpolate(self.dz, t)

    def restrict(self, rows: np.ndarray, view: bool = False) -> "Path":
        if view:
            sl = indices_to_slice(np.asarray(rows))
            if sl is not None:
                return Path(self.dx[sl], self.dy[sl], self.dz[sl])
            warnings.warn(
                "Path rows selected by a non-strided index set cannot be aliased; "
                "returning a copy instead of a view.",
                UserWarning
            )
        return Path(self.dx[rows], self.dy[rows], self.dz[rows])

    def check_rows(self, n_rows: int) -> None:
        if self.n_spins != n_rows:
            raise ValueError(
                f"Path holds {self.n_spins} trajectories but its selector "
                f"addresses {n_rows} spins"
            )

    def _params(self) -> tuple:
        return (self.dx, self.dy, self.dz)
