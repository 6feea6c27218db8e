"""Free disk space probing.

Reports remaining capacity in whole megabytes for the volume backing a
directory. When the probe cannot produce a trustworthy reading it returns
:data:`UNKNOWN_FREE_MB`, which callers treat as "do not block".
"""

from fetchkit.space.parsers import parse_df_output, parse_dir_free_bytes
from fetchkit.space.probe import (
    UNKNOWN_FREE_MB,
    SpaceProbe,
    SpaceReport,
    free_space,
)
from fetchkit.space.strategies import (
    NativeVolumeStrategy,
    NetworkShareStrategy,
    PosixDfStrategy,
    SpaceStrategy,
    select_strategies,
)

__all__ = [
    "UNKNOWN_FREE_MB",
    "NativeVolumeStrategy",
    "NetworkShareStrategy",
    "PosixDfStrategy",
    "SpaceProbe",
    "SpaceReport",
    "SpaceStrategy",
    "free_space",
    "parse_df_output",
    "parse_dir_free_bytes",
    "select_strategies",
]
