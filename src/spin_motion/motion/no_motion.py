"""
NoMotion sentinel.

Static phantoms carry ``NoMotion()`` instead of an empty ``MotionList``;
operations that would leave a motion list empty return it as well.
"""

import numpy as np

from .coordinates import prepare_inputs, coordinate_buffers


class NoMotion:
    """The absence of motion. Supports the same operations as ``MotionList``."""

    motions = ()
    declared = ()

    def __len__(self) -> int:
        return 0

    def __iter__(self):
        return iter(())

    def __repr__(self) -> str:
        return "NoMotion()"

    def __getitem__(self, p) -> "NoMotion":
        return NoMotion()

    def view(self, p) -> "NoMotion":
        return NoMotion()

    def __eq__(self, other):
        return isinstance(other, NoMotion)

    __hash__ = None

    def isclose(self, other, rtol: float = 1e-5, atol: float = 1e-8) -> bool:
        return isinstance(other, NoMotion)

    def times(self) -> np.ndarray:
        return np.zeros(1)

    def sort_motions(self) -> None:
        return None

    def get_spin_coords(self, x, y, z, t, config=None):
        """Static coordinates repeated over every time instant."""
        x, y, z, t = prepare_inputs(x, y, z, t)
        return coordinate_buffers(x, y, z, t)
