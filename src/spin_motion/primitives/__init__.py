# Primitives Layer
#
# Building blocks a motion is made of:
#   - Actions: displacement fields (Translate, Rotate, HeartBeat, Path)
#   - Time spans: global time → unit time (TimeRange, Periodic, TimeCurve)
#   - Spin selectors: which spins a motion applies to (AllSpins, SpinRange)
#
# Primitives are values: every structural operation returns a new object.

from .actions import (
    Action,
    Translate,
    Rotate,
    HeartBeat,
    Path,
)

from .time_spans import (
    TimeSpan,
    TimeRange,
    Periodic,
    TimeCurve,
)

from .spins import (
    SpinSelector,
    AllSpins,
    SpinRange,
)

__all__ = [
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
]
