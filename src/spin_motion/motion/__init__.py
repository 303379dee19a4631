# Motion Layer
#
# Scoped motions and the engine that composes them:
#   - Motion: action + time span + spin selector
#   - NoMotion: sentinel for static phantoms (never an empty MotionList)
#   - MotionList: ordered, non-empty motion collection
#
# Module functions accept either MotionList or NoMotion:
#   get_spin_coords, times, sort_motions, vcat

from .motion import (
    Motion,
    translate,
    rotate,
    heartbeat,
    path,
)

from .no_motion import NoMotion

from .motion_list import (
    MotionList,
    MotionSet,
    get_spin_coords,
    times,
    sort_motions,
    vcat,
)

__all__ = [
    "Motion",
    "translate",
    "rotate",
    "heartbeat",
    "path",
    "NoMotion",
    "MotionList",
    "MotionSet",
    "get_spin_coords",
    "times",
    "sort_motions",
    "vcat",
]
