"""Shared fixtures for framedisplace tests."""

import struct
import zlib
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)


def solid_array(color, width=4, height=4):
    """[H, W, C] uint8 array filled with ``color``."""
    return np.full((height, width, len(color)), color, dtype=np.uint8)


def write_sequence(directory: Path, colors, width=4, height=4, ext="png"):
    """Write solid-colour frames 0001.<ext>, 0002.<ext>, ... into ``directory``."""
    directory.mkdir(parents=True, exist_ok=True)
    paths = []
    for i, color in enumerate(colors, start=1):
        path = directory / f"{i:04d}.{ext}"
        Image.fromarray(solid_array(color, width, height)).save(path)
        paths.append(path)
    return paths


def write_png16(path: Path, width=4, height=4, sample=0x1234, alpha=False):
    """Write a PNG with 16 bits per sample (colour type 2, or 6 with alpha).

    Pillow has no 16-bit RGB image mode to save from, so the chunks are
    assembled by hand.
    """
    channels = 4 if alpha else 3
    row = b"\x00" + struct.pack(">H", sample) * (width * channels)
    ihdr = struct.pack(">IIBBBBB", width, height, 16, 6 if alpha else 2, 0, 0, 0)

    def chunk(tag, data):
        return struct.pack(">I", len(data)) + tag + data + struct.pack(">I", zlib.crc32(tag + data))

    path.write_bytes(
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", ihdr)
        + chunk(b"IDAT", zlib.compress(row * height))
        + chunk(b"IEND", b"")
    )
    return path


@pytest.fixture
def rgb_sequence(tmp_path):
    """Three 4x4 frames: red, green, blue."""
    src = tmp_path / "input"
    write_sequence(src, [RED, GREEN, BLUE])
    return src


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
