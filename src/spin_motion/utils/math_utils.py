"""
Mathematical Utilities
======================

Small numeric helpers used by the motion primitives.

Functions
---------
- rotation_matrices: Batched rotation matrices for time-scaled Euler angles
- normalize_indices: Convert a range / sequence of spin indices to an array
- indices_to_slice: Express a strided index array as a slice (for numpy views)
- allclose_params: Tolerance comparison of scalar or array parameters
"""

from typing import Optional, Sequence, Union

import numpy as np
from scipy.spatial.transform import Rotation


# =============================================================================
# ROTATIONS
# =============================================================================

def rotation_matrices(
    pitch: float,
    roll: float,
    yaw: float,
    t_unit: np.ndarray,
) -> np.ndarray:
    """
    Rotation matrices for Euler angles scaled by a unit-time array.

    The rotation is extrinsic about the x, y and z axes (in that order):

        R(s) = Rz(s·yaw) · Ry(s·roll) · Rx(s·pitch)

    where s is each element of ``t_unit``.

    Parameters
    ----------
    pitch, roll, yaw : float
        Full rotation angles about x, y, z in degrees (reached at s = 1).
    t_unit : np.ndarray
        Normalised time values, any shape.

    Returns
    -------
    np.ndarray
        Array of shape ``t_unit.shape + (3, 3)``.
    """
    t_unit = np.asarray(t_unit)
    if t_unit.size == 0:
        return np.zeros(t_unit.shape + (3, 3))
    s = t_unit.reshape(-1, 1)
    angles = s * np.array([pitch, roll, yaw], dtype=float)
    R = Rotation.from_euler("xyz", angles, degrees=True).as_matrix()
    return R.reshape(t_unit.shape + (3, 3))


# =============================================================================
# INDEX HELPERS
# =============================================================================

def normalize_indices(indices: Union[range, Sequence[int], np.ndarray]) -> np.ndarray:
    """Return ``indices`` as a 1-D ``intp`` array, rejecting non-integer input."""
    if isinstance(indices, range):
        return np.arange(indices.start, indices.stop, indices.step, dtype=np.intp)
    arr = np.asarray(indices)
    if arr.size == 0:
        return np.zeros(0, dtype=np.intp)
    if arr.dtype == bool:
        return np.flatnonzero(arr).astype(np.intp)
    if not np.issubdtype(arr.dtype, np.integer):
        raise TypeError(f"Spin indices must be integers, got dtype {arr.dtype}")
    if arr.ndim != 1:
        raise ValueError(f"Spin indices must be 1-D, got shape {arr.shape}")
    return arr.astype(np.intp, copy=False)


def indices_to_slice(indices: np.ndarray) -> Optional[slice]:
    """
    Express an index array as an equivalent slice, if possible.

    Only non-empty, strictly increasing arithmetic progressions map to a
    slice; numpy can index those without copying.
    """
    n = len(indices)
    if n == 0:
        return None
    start = int(indices[0])
    if n == 1:
        return slice(start, start + 1)
    step = int(indices[1] - indices[0])
    if step <= 0:
        return None
    if not np.array_equal(np.diff(indices), np.full(n - 1, step)):
        return None
    return slice(start, start + step * (n - 1) + 1, step)


# =============================================================================
# COMPARISON
# =============================================================================

def allclose_params(a, b, rtol: float = 1e-5, atol: float = 1e-8) -> bool:
    """Tolerance comparison for scalars, tuples or arrays of matching shape."""
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    if a.shape != b.shape:
        return False
    return bool(np.allclose(a, b, rtol=rtol, atol=atol))
