# Utility Functions
#
# Common numeric helpers shared by the primitives and the motion engine.
#
# Submodules:
#   - math_utils: Rotation matrices, index normalisation, tolerance checks

from .math_utils import (
    rotation_matrices,
    normalize_indices,
    indices_to_slice,
    allclose_params,
)

__all__ = [
    "rotation_matrices",
    "normalize_indices",
    "indices_to_slice",
    "allclose_params",
]
