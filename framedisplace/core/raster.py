"""Raster buffers: packed row-major 8-bit pixel storage with pixel-level copies."""

from dataclasses import dataclass, fields
from typing import Optional, Union

import numpy as np

from .errors import PreconditionViolation


# Colour layouts handled by the byte-level pixel operations (8 bits per sample).
MODE_SAMPLES = {
    "L": 1,
    "LA": 2,
    "RGB": 3,
    "RGBA": 4,
}


@dataclass(frozen=True)
class RasterFormat:
    """Geometry and colour layout shared by every frame of a sequence.

    ``stride`` is the number of bytes per row; it may exceed
    ``width * samples_per_pixel`` when rows carry padding. A stride of 0
    means packed rows, and a ``samples_per_pixel`` of 0 takes the count
    implied by ``mode``.
    """
    width: int
    height: int
    mode: str = "RGB"
    samples_per_pixel: int = 0
    bit_depth: int = 8
    stride: int = 0

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise PreconditionViolation(f"invalid raster size {self.width}x{self.height}")
        if self.bit_depth != 8:
            raise PreconditionViolation(f"unsupported bit depth {self.bit_depth}, only 8 is handled")
        expected = MODE_SAMPLES.get(self.mode)
        if expected is None:
            raise PreconditionViolation(f"unsupported colour mode {self.mode!r}")
        if self.samples_per_pixel == 0:
            object.__setattr__(self, "samples_per_pixel", expected)
        if self.samples_per_pixel != expected:
            raise PreconditionViolation(
                f"mode {self.mode!r} has {expected} samples per pixel, got {self.samples_per_pixel}"
            )
        if self.stride == 0:
            object.__setattr__(self, "stride", self.row_size)
        if self.stride < self.row_size:
            raise PreconditionViolation(f"stride {self.stride} is shorter than a row ({self.row_size} bytes)")

    @classmethod
    def from_mode(
        cls,
        width: int,
        height: int,
        mode: str = "RGB",
        stride: Optional[int] = None,
    ) -> "RasterFormat":
        if mode not in MODE_SAMPLES:
            raise PreconditionViolation(f"unsupported colour mode {mode!r}")
        return cls(
            width=width,
            height=height,
            mode=mode,
            samples_per_pixel=MODE_SAMPLES[mode],
            stride=stride or 0,
        )

    @property
    def row_size(self) -> int:
        """Bytes of pixel data per row, excluding padding."""
        return self.width * self.samples_per_pixel

    @property
    def buffer_size(self) -> int:
        return self.stride * self.height

    def diff(self, other: "RasterFormat") -> Optional[str]:
        """Name of the first field that differs from ``other``, or None."""
        for f in fields(self):
            if getattr(self, f.name) != getattr(other, f.name):
                return f.name
        return None


class RasterBuffer:
    """An owned flat ``uint8`` pixel buffer plus its :class:`RasterFormat`.

    All pixel addressing goes through :meth:`pixel_offset`, so the buffer
    layout (stride, samples per pixel) is only interpreted in one place.
    """

    def __init__(
        self,
        format: RasterFormat,
        pixels: Optional[Union[bytes, bytearray, memoryview, np.ndarray]] = None,
    ):
        self.format = format
        if pixels is None:
            self.pixels = np.zeros(format.buffer_size, dtype=np.uint8)
        elif isinstance(pixels, (bytes, bytearray, memoryview)):
            self.pixels = np.frombuffer(pixels, dtype=np.uint8).copy()
        else:
            self.pixels = np.array(pixels, dtype=np.uint8).reshape(-1)

        if self.pixels.size != format.buffer_size:
            raise PreconditionViolation(
                f"pixel buffer holds {self.pixels.size} bytes, format needs {format.buffer_size}"
            )

    @classmethod
    def allocate(cls, format: RasterFormat) -> "RasterBuffer":
        """Zero-filled buffer of the right size for ``format``."""
        return cls(format)

    @classmethod
    def from_array(cls, array: np.ndarray, mode: Optional[str] = None) -> "RasterBuffer":
        """Build a packed buffer from an ``[H, W]`` or ``[H, W, C]`` uint8 array."""
        array = np.asarray(array)
        if array.dtype != np.uint8:
            raise PreconditionViolation(f"expected uint8 pixels, got {array.dtype}")
        if array.ndim == 2:
            array = array[:, :, None]
        if array.ndim != 3:
            raise PreconditionViolation(f"expected [H, W] or [H, W, C] array, got shape {array.shape}")

        h, w, c = array.shape
        if mode is None:
            mode = {1: "L", 2: "LA", 3: "RGB", 4: "RGBA"}.get(c)
            if mode is None:
                raise PreconditionViolation(f"cannot infer colour mode for {c} channels")
        fmt = RasterFormat.from_mode(w, h, mode)
        if fmt.samples_per_pixel != c:
            raise PreconditionViolation(f"mode {mode!r} does not match {c} channels")
        return cls(fmt, np.ascontiguousarray(array))

    @property
    def width(self) -> int:
        return self.format.width

    @property
    def height(self) -> int:
        return self.format.height

    @property
    def samples_per_pixel(self) -> int:
        return self.format.samples_per_pixel

    @property
    def stride(self) -> int:
        return self.format.stride

    def pixel_offset(self, row: int, col: int) -> int:
        """Byte offset of the first sample of pixel ``(row, col)``."""
        if not (0 <= row < self.format.height and 0 <= col < self.format.width):
            raise PreconditionViolation(
                f"pixel ({row}, {col}) outside {self.format.width}x{self.format.height} raster"
            )
        return row * self.format.stride + col * self.format.samples_per_pixel

    def read_pixel(self, row: int, col: int) -> bytes:
        offset = self.pixel_offset(row, col)
        return self.pixels[offset:offset + self.format.samples_per_pixel].tobytes()

    def _check_source(self, src: "RasterBuffer") -> None:
        if src.format != self.format:
            field = self.format.diff(src.format)
            raise PreconditionViolation(
                f"cannot copy between rasters of different format ({field}: "
                f"{getattr(src.format, field)!r} into {getattr(self.format, field)!r})"
            )

    def copy_pixel(self, src: "RasterBuffer", row: int, col: int) -> None:
        """Copy pixel ``(row, col)`` of ``src`` into the same position here."""
        self._check_source(src)
        n = self.format.samples_per_pixel
        dst_offset = self.pixel_offset(row, col)
        src_offset = src.pixel_offset(row, col)
        self.pixels[dst_offset:dst_offset + n] = src.pixels[src_offset:src_offset + n]

    def copy_row(self, src: "RasterBuffer", row: int) -> None:
        """Copy the whole of row ``row`` from ``src``."""
        self._check_source(src)
        start = self.pixel_offset(row, 0)
        end = start + self.format.row_size
        self.pixels[start:end] = src.pixels[start:end]

    def copy_col(self, src: "RasterBuffer", col: int) -> None:
        """Copy the whole of column ``col`` from ``src``."""
        self._check_source(src)
        self.pixel_offset(0, col)  # bounds
        self.image_view()[:, col] = src.image_view()[:, col]

    def swap_pixel(self, row_a: int, col_a: int, row_b: int, col_b: int) -> None:
        """Exchange two pixels of this buffer in place."""
        n = self.format.samples_per_pixel
        a = self.pixel_offset(row_a, col_a)
        b = self.pixel_offset(row_b, col_b)
        tmp = self.pixels[a:a + n].copy()
        self.pixels[a:a + n] = self.pixels[b:b + n]
        self.pixels[b:b + n] = tmp

    def flip_vertical(self) -> None:
        """Mirror the raster top to bottom in place."""
        h = self.format.height
        for row in range(h // 2):
            for col in range(self.format.width):
                self.swap_pixel(row, col, h - row - 1, col)

    def clear(self) -> None:
        self.pixels.fill(0)

    def image_view(self) -> np.ndarray:
        """Writable ``[H, W, C]`` view of the pixel data, skipping row padding."""
        fmt = self.format
        return np.lib.stride_tricks.as_strided(
            self.pixels,
            shape=(fmt.height, fmt.width, fmt.samples_per_pixel),
            strides=(fmt.stride, fmt.samples_per_pixel, 1),
        )

    def copy(self) -> "RasterBuffer":
        return RasterBuffer(self.format, self.pixels)

    def tobytes(self) -> bytes:
        return self.pixels.tobytes()

    def __eq__(self, other):
        if not isinstance(other, RasterBuffer):
            return NotImplemented
        return self.format == other.format and np.array_equal(self.pixels, other.pixels)

    __hash__ = None

    def __repr__(self):
        fmt = self.format
        return f"RasterBuffer({fmt.width}x{fmt.height} {fmt.mode}, stride={fmt.stride})"
