"""Raster encoding/decoding through Pillow."""

import re
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..core.errors import DecodeError, EncodeError, FrameIOError
from ..core.raster import MODE_SAMPLES, RasterBuffer, RasterFormat


# 16 bits per sample, any byte order (PNG "RGB;16B", TIFF "RGB;16N", ...).
# Packed 16-bit-per-pixel layouts such as BMP "BGR;16" hold 5-6 bit samples
# and decode to 8 bits without loss.
WIDE_RAWMODE = re.compile(r";16[BLN]$")


class RasterCodec:
    """Decode image files into :class:`RasterBuffer` and encode them back.

    Supported layouts are 8-bit ``L``, ``LA``, ``RGB`` and ``RGBA``. Bilevel
    (``1``) images are widened to ``L`` and palette (``P``) images are
    expanded to ``RGB``, or ``RGBA`` when the palette carries transparency,
    so frames can be copied byte-wise without a shared palette. Files with
    16-bit samples are rejected even where Pillow opens them as ``RGB``
    or ``RGBA``, as is everything else.
    """

    WIDENED_MODES = {
        "1": "L",
        "PA": "RGBA",
    }

    @classmethod
    def _target_mode(cls, img: Image.Image) -> str:
        if img.mode in MODE_SAMPLES:
            return img.mode
        if img.mode == "P":
            return "RGBA" if "transparency" in img.info else "RGB"
        return cls.WIDENED_MODES.get(img.mode, "")

    @staticmethod
    def _source_bit_depth(img: Image.Image) -> int:
        """Bits per sample as stored in the file, before Pillow narrows it.

        16-bit colour PNGs open as plain ``RGB``/``RGBA``; only the raw mode
        of the pending decoder tile (e.g. ``RGB;16B``) tells them apart.
        """
        if img.tile:
            rawmode = img.tile[0][-1]
            if isinstance(rawmode, tuple):
                rawmode = rawmode[0] if rawmode else ""
            if isinstance(rawmode, str) and WIDE_RAWMODE.search(rawmode):
                return 16
        return 8

    @classmethod
    def decode(cls, path: Union[str, Path]) -> RasterBuffer:
        """Read ``path`` into a packed raster buffer."""
        path = Path(path)
        try:
            with Image.open(path) as img:
                depth = cls._source_bit_depth(img)
                if depth != 8:
                    raise DecodeError(f"{path}: unsupported bit depth {depth}, only 8-bit samples are handled", path)
                mode = cls._target_mode(img)
                if not mode:
                    raise DecodeError(f"{path}: unsupported image mode {img.mode!r}", path)
                if img.mode != mode:
                    img = img.convert(mode)
                array = np.asarray(img, dtype=np.uint8)
        except FileNotFoundError as e:
            raise FrameIOError(f"{path}: no such file", path) from e
        except (UnidentifiedImageError, SyntaxError, ValueError) as e:
            raise DecodeError(f"{path}: {e}", path) from e
        except OSError as e:
            # Pillow reports truncated or corrupt data as OSError without an errno
            if e.errno is None:
                raise DecodeError(f"{path}: {e}", path) from e
            raise FrameIOError(f"{path}: {e}", path) from e

        return RasterBuffer.from_array(array, mode)

    @classmethod
    def encode(cls, buffer: RasterBuffer) -> Image.Image:
        """Build a Pillow image from ``buffer``, dropping any row padding."""
        fmt = buffer.format
        rows = buffer.pixels.reshape(fmt.height, fmt.stride)[:, :fmt.row_size]
        return Image.frombytes(fmt.mode, (fmt.width, fmt.height), np.ascontiguousarray(rows).tobytes())

    @classmethod
    def save(cls, path: Union[str, Path], buffer: RasterBuffer) -> None:
        """Encode ``buffer`` to ``path``; the file type follows the extension."""
        path = Path(path)
        img = cls.encode(buffer)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            img.save(path)
        except (KeyError, ValueError) as e:
            raise EncodeError(f"{path}: {e}", path) from e
        except OSError as e:
            if e.errno is None:
                raise EncodeError(f"{path}: {e}", path) from e
            raise FrameIOError(f"{path}: {e}", path) from e

    @classmethod
    def load(cls, path: Union[str, Path]) -> RasterBuffer:
        return cls.decode(path)
