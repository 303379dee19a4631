# Spin Motion: Motion Composition Engine for Spin Phantoms
#
# Describes how discrete spins move over time and evaluates their
# coordinates at arbitrary time instants for an external simulator.
#
# Architecture:
#   Layer 0 (Primitives): Actions, time spans and spin selectors
#   Layer 1 (Motion): Scoped motions, the NoMotion sentinel and MotionList
#
# Typical use:
#   ml = MotionList(translate(0.01, 0.0, 0.0, TimeRange(0.0, 1.0)),
#                   rotate(0.0, 0.0, 45.0, Periodic(1.0), SpinRange(range(10))))
#   xt, yt, zt = get_spin_coords(ml, x, y, z, t)

__version__ = "0.1.0"

from .configurations import EvaluationConfig
from .logging_config import setup_logging

from .primitives import (
    Action,
    Translate,
    Rotate,
    HeartBeat,
    Path,
    TimeSpan,
    TimeRange,
    Periodic,
    TimeCurve,
    SpinSelector,
    AllSpins,
    SpinRange,
)

from .motion import (
    Motion,
    translate,
    rotate,
    heartbeat,
    path,
    NoMotion,
    MotionList,
    get_spin_coords,
    times,
    sort_motions,
    vcat,
)

__all__ = [
    "EvaluationConfig",
    "setup_logging",
    "Action",
    "Translate",
    "Rotate",
    "HeartBeat",
    "Path",
    "TimeSpan",
    "TimeRange",
    "Periodic",
    "TimeCurve",
    "SpinSelector",
    "AllSpins",
    "SpinRange",
    "Motion",
    "translate",
    "rotate",
    "heartbeat",
    "path",
    "NoMotion",
    "MotionList",
    "get_spin_coords",
    "times",
    "sort_motions",
    "vcat",
]
