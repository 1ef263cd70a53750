"""Displacement strategies: rebuild a frame from pixels of neighbouring frames.

For output frame ``i`` every pixel ``(row, col)`` is taken from input frame
``j`` at the same position, where ``j`` depends on the strategy:

    row     j = i + row // step               rows past the last frame are skipped
    col     j = i + col // step               columns past the last frame are skipped
    rowcol  j = (i + (row + col) // step) % n wraps around, every pixel is written
"""

from typing import Callable, Dict, Optional

import numpy as np

from .errors import PreconditionViolation
from .frames import FrameStore
from .raster import RasterBuffer

STRATEGIES = ("row", "col", "rowcol")
TAIL_POLICIES = ("skip", "clamp")
DEFAULT_STEP = 2


def displaced_index(
    strategy: str,
    frame_index: int,
    row: int,
    col: int,
    step: int,
    frame_count: int,
    tail: str = "skip",
) -> Optional[int]:
    """Source frame for pixel ``(row, col)`` of output frame ``frame_index``.

    Returns None when the row/col strategies run past the end of the
    sequence and ``tail`` is ``"skip"``; with ``"clamp"`` the last frame is
    used instead.
    """
    if strategy == "rowcol":
        return (frame_index + (row + col) // step) % frame_count
    if strategy == "row":
        j = frame_index + row // step
    elif strategy == "col":
        j = frame_index + col // step
    else:
        raise ValueError(f"Unknown strategy: {strategy}")

    if j < frame_count:
        return j
    if tail == "clamp":
        return frame_count - 1
    return None


def _check_arguments(
    store: FrameStore,
    frame_index: int,
    output: RasterBuffer,
    step: int,
    tail: str,
) -> None:
    if tail not in TAIL_POLICIES:
        raise ValueError(f"Unknown tail policy: {tail}")
    if step <= 0:
        raise PreconditionViolation(f"displacement step must be positive, got {step}")
    if not 0 <= frame_index < len(store):
        raise PreconditionViolation(f"frame index {frame_index} outside 0..{len(store) - 1}")
    if output.format != store.format:
        raise PreconditionViolation(
            f"output format {output.format} does not match frame format {store.format}"
        )


def displace_by_row(
    store: FrameStore,
    frame_index: int,
    output: RasterBuffer,
    step: int = DEFAULT_STEP,
    tail: str = "skip",
) -> None:
    _check_arguments(store, frame_index, output, step, tail)
    n = len(store)
    for row in range(store.format.height):
        j = displaced_index("row", frame_index, row, 0, step, n, tail)
        if j is not None:
            output.copy_row(store[j], row)


def displace_by_col(
    store: FrameStore,
    frame_index: int,
    output: RasterBuffer,
    step: int = DEFAULT_STEP,
    tail: str = "skip",
) -> None:
    _check_arguments(store, frame_index, output, step, tail)
    n = len(store)
    for col in range(store.format.width):
        j = displaced_index("col", frame_index, 0, col, step, n, tail)
        if j is not None:
            output.copy_col(store[j], col)


def displace_by_rowcol(
    store: FrameStore,
    frame_index: int,
    output: RasterBuffer,
    step: int = DEFAULT_STEP,
    tail: str = "skip",
) -> None:
    """Per-pixel diagonal displacement.

    Pixels are grouped by source frame and copied one group at a time with
    fancy indexing, which gives the same bytes as a per-pixel copy.
    ``tail`` is accepted for signature parity; this strategy always wraps.
    """
    _check_arguments(store, frame_index, output, step, tail)
    fmt = store.format
    rows, cols = np.indices((fmt.height, fmt.width))
    source = (frame_index + (rows + cols) // step) % len(store)

    order = np.argsort(source, axis=None, kind="stable")
    bounds = np.flatnonzero(np.diff(source.ravel()[order])) + 1
    dst = output.image_view()
    for group in np.split(order, bounds):
        j = int(source.flat[group[0]])
        r, c = np.divmod(group, fmt.width)
        dst[r, c] = store[j].image_view()[r, c]


_DISPLACERS: Dict[str, Callable[..., None]] = {
    "row": displace_by_row,
    "col": displace_by_col,
    "rowcol": displace_by_rowcol,
}


def displace(
    strategy: str,
    store: FrameStore,
    frame_index: int,
    output: RasterBuffer,
    step: int = DEFAULT_STEP,
    tail: str = "skip",
) -> None:
    """Fill ``output`` with displaced frame ``frame_index`` of ``store``.

    ``output`` is cleared to zero first, so rows or columns skipped near the
    end of the sequence come out black rather than holding stale pixels.

    Args:
        strategy: "row" | "col" | "rowcol"
        store: source frames
        frame_index: 0-based index of the output frame
        output: destination buffer with the store's format
        step: rows/columns per one-frame advance, must be positive
        tail: "skip" | "clamp" behaviour past the last frame (row/col only)
    """
    if strategy not in _DISPLACERS:
        raise ValueError(f"Unknown strategy: {strategy}")
    _check_arguments(store, frame_index, output, step, tail)

    output.clear()
    _DISPLACERS[strategy](store, frame_index, output, step, tail)
