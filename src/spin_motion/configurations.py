"""
Evaluation Configuration
========================

Dataclass grouping the knobs of ``get_spin_coords``. The defaults evaluate
serially, sum overlapping additive motions and check every selector
against the coordinate arrays before any work starts.

Example
-------
>>> config = EvaluationConfig(n_workers=4, overlap_policy="warn")
>>> xt, yt, zt = get_spin_coords(motions, x, y, z, t, config=config)
"""

from dataclasses import dataclass


OVERLAP_POLICIES = ("sum", "warn", "error")


@dataclass
class EvaluationConfig:
    """
    Options for coordinate evaluation.

    Attributes
    ----------
    n_workers : int
        Threads used to evaluate additive displacements. 1 evaluates them
        serially on the calling thread.

    overlap_policy : str
        What to do when two additive motions address the same spin:
        - "sum": accumulate both displacements
        - "warn": accumulate and emit a UserWarning
        - "error": raise ValueError before evaluation

    check_bounds : bool
        Verify every selector index lies in [0, N) and raise IndexError
        otherwise. Disabling it hands the precondition to the caller.
    """
    n_workers: int = 1
    overlap_policy: str = "sum"
    check_bounds: bool = True

    def __post_init__(self):
        if self.n_workers < 1:
            raise ValueError(f"n_workers must be >= 1, got {self.n_workers}")
        if self.overlap_policy not in OVERLAP_POLICIES:
            raise ValueError(f"Unknown overlap_policy: {self.overlap_policy}. "
                             f"Available: {list(OVERLAP_POLICIES)}")
