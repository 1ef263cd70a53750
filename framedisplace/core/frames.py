"""FrameStore: an ordered, format-homogeneous sequence of decoded frames."""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Union

from tqdm import tqdm

from .errors import FormatMismatch, PreconditionViolation
from .raster import RasterBuffer, RasterFormat

logger = logging.getLogger(__name__)

FRAME_DIGITS = 4


def frame_filename(index: int, extension: str = "png", digits: int = FRAME_DIGITS) -> str:
    """File name of 1-based frame ``index``, e.g. ``0001.png``."""
    return f"{index:0{digits}d}.{extension.lstrip('.')}"


def count_frames(source_dir: Union[str, Path], extension: str = "png") -> int:
    """Number of consecutively numbered frames in ``source_dir`` starting at 1."""
    source_dir = Path(source_dir)
    count = 0
    while (source_dir / frame_filename(count + 1, extension)).is_file():
        count += 1
    return count


class FrameStore:
    """Read-only sequence of :class:`RasterBuffer` frames sharing one format.

    Index 0 is the first input frame (``0001`` on disk). The store takes the
    buffers it is given without copying and marks their pixel arrays
    read-only, so worker threads can share it without locking. Buffers
    passed to the constructor are therefore no longer writable afterwards;
    pass ``buffer.copy()`` to keep a mutable original.
    """

    def __init__(self, frames: Sequence[RasterBuffer], paths: Optional[Sequence[Path]] = None):
        if not frames:
            raise PreconditionViolation("a frame store needs at least one frame")
        self._frames = tuple(frames)
        self.paths = tuple(paths) if paths is not None else None
        self.format = self._frames[0].format

        for i, frame in enumerate(self._frames[1:], start=1):
            field = self.format.diff(frame.format)
            if field is not None:
                raise FormatMismatch(
                    field=field,
                    frame_index=i + 1,
                    expected=getattr(self.format, field),
                    actual=getattr(frame.format, field),
                    path=self.paths[i] if self.paths is not None else None,
                )

        for frame in self._frames:
            frame.pixels.flags.writeable = False

    @classmethod
    def load(
        cls,
        source_dir: Union[str, Path],
        frame_count: int,
        extension: str = "png",
        num_workers: int = 1,
        codec=None,
        progress: bool = False,
    ) -> "FrameStore":
        """Decode frames ``1..frame_count`` from ``source_dir``.

        Args:
            source_dir: directory holding ``0001.<ext>``, ``0002.<ext>``, ...
            frame_count: number of frames to load, must be positive
            extension: file extension of the frames
            num_workers: decode in parallel threads when > 1
            codec: object with a ``decode(path)`` classmethod (RasterCodec by default)
            progress: show a progress bar

        Returns:
            FrameStore with frames in index order

        Raises:
            PreconditionViolation: ``frame_count`` is not positive
            FrameIOError, DecodeError: a file is missing or undecodable
            FormatMismatch: a frame differs from the first one
        """
        if frame_count <= 0:
            raise PreconditionViolation(f"frame_count must be positive, got {frame_count}")
        if codec is None:
            from ..codecs import RasterCodec
            codec = RasterCodec

        source_dir = Path(source_dir)
        paths = [source_dir / frame_filename(i, extension) for i in range(1, frame_count + 1)]
        logger.info("Loading %d frames from %s", frame_count, source_dir)

        if num_workers <= 1:
            iterator = tqdm(paths, desc="Loading") if progress else paths
            frames = [codec.decode(p) for p in iterator]
        else:
            # map() yields results in submission order and re-raises the
            # first failure in that order.
            with ThreadPoolExecutor(max_workers=num_workers) as executor:
                results = executor.map(codec.decode, paths)
                if progress:
                    results = tqdm(results, total=len(paths), desc="Loading")
                frames = list(results)

        store = cls(frames, paths)
        fmt = store.format
        logger.debug("Frame format: %dx%d %s stride=%d", fmt.width, fmt.height, fmt.mode, fmt.stride)
        return store

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    def allocate_output(self) -> RasterBuffer:
        """Fresh zero-filled buffer matching the store's format."""
        return RasterBuffer.allocate(self.format)

    def __len__(self) -> int:
        return len(self._frames)

    def __getitem__(self, index: int) -> RasterBuffer:
        return self._frames[index]

    def __iter__(self) -> Iterator[RasterBuffer]:
        return iter(self._frames)

    @property
    def frames(self) -> List[RasterBuffer]:
        return list(self._frames)

    def __repr__(self):
        fmt: RasterFormat = self.format
        return f"FrameStore({len(self)} frames, {fmt.width}x{fmt.height} {fmt.mode})"
