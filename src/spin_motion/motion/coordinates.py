"""
Coordinate input checks and output buffers shared by every motion set.

All checks run before any coordinate is computed, so evaluation either
succeeds for every spin and instant or fails without partial output.
"""

from typing import Tuple

import numpy as np


def prepare_inputs(x, y, z, t) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Validate spin coordinates and time instants.

    Parameters
    ----------
    x, y, z : array_like
        1-D spin coordinates of equal length N.
    t : array_like
        Time instants: shape (M,), (1, M) or (N, M).

    Returns
    -------
    x, y, z : np.ndarray
        The coordinates as arrays.
    t : np.ndarray
        Time instants as a 2-D array with 1 or N rows.

    Raises
    ------
    ValueError
        On mismatched lengths or unsupported shapes.
    TypeError
        When inputs are not floating point or do not share one dtype.
    """
    x, y, z, t = (np.asarray(a) for a in (x, y, z, t))

    for name, a in (("x", x), ("y", y), ("z", z)):
        if a.ndim != 1:
            raise ValueError(f"{name} must be a 1-D coordinate vector, got shape {a.shape}")
    if not (len(x) == len(y) == len(z)):
        raise ValueError(
            f"Coordinate vectors must have equal length, got "
            f"len(x)={len(x)}, len(y)={len(y)}, len(z)={len(z)}"
        )

    dtypes = {a.dtype for a in (x, y, z, t)}
    if not all(np.issubdtype(d, np.floating) for d in dtypes):
        raise TypeError(
            f"Coordinates and time must be floating point, got {sorted(str(d) for d in dtypes)}"
        )
    if len(dtypes) > 1:
        raise TypeError(
            f"Coordinates and time must share one dtype, got {sorted(str(d) for d in dtypes)}"
        )

    n_spins = len(x)
    if t.ndim == 1:
        t = t.reshape(1, -1)
    elif t.ndim != 2:
        raise ValueError(f"t must be 1-D or 2-D, got {t.ndim} dimensions")
    if t.shape[0] not in (1, n_spins):
        raise ValueError(
            f"2-D t must have 1 row or one row per spin ({n_spins}), got {t.shape[0]} rows"
        )
    return x, y, z, t


def coordinate_buffers(x, y, z, t) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """(N, M) matrices holding each spin's initial coordinate at every instant."""
    shape = (len(x), t.shape[1])
    buffers = []
    for a in (x, y, z):
        out = np.empty(shape, dtype=a.dtype)
        out[...] = a[:, np.newaxis]
        buffers.append(out)
    return tuple(buffers)
