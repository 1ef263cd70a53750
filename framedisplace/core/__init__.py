"""framedisplace core: raster buffers, frame sequences and displacement."""

from .errors import (
    FrameDisplaceError,
    FrameIOError,
    DecodeError,
    EncodeError,
    FormatMismatch,
    PreconditionViolation,
    RenderError,
)
from .raster import RasterFormat, RasterBuffer
from .frames import FrameStore, frame_filename, count_frames
from .displacement import (
    STRATEGIES,
    TAIL_POLICIES,
    DEFAULT_STEP,
    displaced_index,
    displace,
    displace_by_row,
    displace_by_col,
    displace_by_rowcol,
)
from .config import DisplaceConfig

__all__ = [
    "FrameDisplaceError",
    "FrameIOError",
    "DecodeError",
    "EncodeError",
    "FormatMismatch",
    "PreconditionViolation",
    "RenderError",
    "RasterFormat",
    "RasterBuffer",
    "FrameStore",
    "frame_filename",
    "count_frames",
    "STRATEGIES",
    "TAIL_POLICIES",
    "DEFAULT_STEP",
    "displaced_index",
    "displace",
    "displace_by_row",
    "displace_by_col",
    "displace_by_rowcol",
    "DisplaceConfig",
]
