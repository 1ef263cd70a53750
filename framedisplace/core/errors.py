"""Error types raised while loading, displacing and saving frames."""

from pathlib import Path
from typing import Any, Optional, Union


class FrameDisplaceError(Exception):
    """Base class for all framedisplace errors."""


class FrameIOError(FrameDisplaceError, OSError):
    """A frame file could not be opened or created."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = path


class DecodeError(FrameDisplaceError):
    """A frame file exists but could not be decoded into a raster."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = path


class EncodeError(FrameDisplaceError):
    """A raster could not be encoded to a file."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = path


class FormatMismatch(FrameDisplaceError):
    """A frame's geometry or colour layout differs from the first frame.

    Attributes:
        field: name of the first disagreeing format field
        frame_index: 1-based frame number of the offending file
        path: offending file, if loaded from disk
        expected: value taken from the first frame
        actual: value found in the offending frame
    """

    def __init__(
        self,
        field: str,
        frame_index: int,
        expected: Any,
        actual: Any,
        path: Optional[Union[str, Path]] = None,
    ):
        self.field = field
        self.frame_index = frame_index
        self.expected = expected
        self.actual = actual
        self.path = path
        where = f"frame {frame_index}"
        if path is not None:
            where += f" ({path})"
        super().__init__(
            f"{where}: {field} is {actual!r}, expected {expected!r} from the first frame"
        )


class PreconditionViolation(FrameDisplaceError, AssertionError):
    """A caller broke an invariant (bad index, zero frame count, mixed formats)."""


class RenderError(FrameDisplaceError):
    """Rendering or saving a single output frame failed."""

    def __init__(self, frame_index: int, path: Optional[Union[str, Path]], cause: Exception):
        self.frame_index = frame_index
        self.path = path
        super().__init__(f"output frame {frame_index + 1} ({path}): {cause}")
