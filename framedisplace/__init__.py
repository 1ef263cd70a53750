"""framedisplace: temporal pixel displacement for numbered frame sequences.

Main components:
- core: raster buffers, frame store and displacement strategies
- codecs: image file encoding/decoding (RasterCodec)
- generators: whole-sequence rendering (SequenceGenerator)
"""

from .core import (
    FrameDisplaceError,
    FrameIOError,
    DecodeError,
    EncodeError,
    FormatMismatch,
    PreconditionViolation,
    RenderError,
    RasterFormat,
    RasterBuffer,
    FrameStore,
    frame_filename,
    count_frames,
    STRATEGIES,
    TAIL_POLICIES,
    DEFAULT_STEP,
    displaced_index,
    displace,
    displace_by_row,
    displace_by_col,
    displace_by_rowcol,
    DisplaceConfig,
)
from .codecs import RasterCodec
from .generators import SequenceGenerator

__version__ = "0.1.0"
__all__ = [
    # Core
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
    # Errors
    "FrameDisplaceError",
    "FrameIOError",
    "DecodeError",
    "EncodeError",
    "FormatMismatch",
    "PreconditionViolation",
    "RenderError",
    # Codecs
    "RasterCodec",
    # Generators
    "SequenceGenerator",
]
