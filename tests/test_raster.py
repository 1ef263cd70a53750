"""Tests for RasterFormat and RasterBuffer."""

import pytest
import numpy as np

from framedisplace.core import RasterFormat, RasterBuffer, PreconditionViolation


def random_buffer(fmt, rng):
    return RasterBuffer(fmt, rng.integers(0, 256, size=fmt.buffer_size, dtype=np.uint8))


class TestRasterFormat:
    def test_from_mode(self):
        fmt = RasterFormat.from_mode(5, 4, "RGB")
        assert fmt.samples_per_pixel == 3
        assert fmt.bit_depth == 8
        assert fmt.stride == 15
        assert fmt.row_size == 15
        assert fmt.buffer_size == 60

    def test_padded_stride(self):
        fmt = RasterFormat.from_mode(5, 4, "RGB", stride=16)
        assert fmt.stride == 16
        assert fmt.row_size == 15
        assert fmt.buffer_size == 64

    def test_invalid(self):
        with pytest.raises(PreconditionViolation):
            RasterFormat.from_mode(5, 4, "RGB", stride=10)
        with pytest.raises(PreconditionViolation):
            RasterFormat.from_mode(0, 4, "RGB")
        with pytest.raises(PreconditionViolation):
            RasterFormat.from_mode(4, 4, "CMYK")
        with pytest.raises(PreconditionViolation):
            RasterFormat(4, 4, "RGB", 3, bit_depth=16)
        with pytest.raises(PreconditionViolation):
            RasterFormat(4, 4, "RGB", samples_per_pixel=4)

    @pytest.mark.parametrize("mode,samples", [("L", 1), ("LA", 2), ("RGB", 3), ("RGBA", 4)])
    def test_samples_follow_mode(self, mode, samples):
        fmt = RasterFormat(4, 4, mode)
        assert fmt.samples_per_pixel == samples
        assert fmt.stride == 4 * samples
        assert fmt == RasterFormat.from_mode(4, 4, mode)

    def test_diff(self):
        a = RasterFormat.from_mode(4, 4, "RGB")
        assert a.diff(RasterFormat.from_mode(4, 4, "RGB")) is None
        assert a.diff(RasterFormat.from_mode(5, 4, "RGB")) == "width"
        assert a.diff(RasterFormat.from_mode(4, 3, "RGB")) == "height"
        assert a.diff(RasterFormat.from_mode(4, 4, "RGBA")) == "mode"
        assert a.diff(RasterFormat.from_mode(4, 4, "RGB", stride=16)) == "stride"


class TestPixelOffset:
    def test_injective_and_in_bounds(self):
        fmt = RasterFormat.from_mode(5, 4, "RGB", stride=16)
        buf = RasterBuffer.allocate(fmt)

        offsets = [buf.pixel_offset(r, c) for r in range(fmt.height) for c in range(fmt.width)]

        assert len(set(offsets)) == fmt.width * fmt.height
        assert max(offsets) <= buf.pixels.size - fmt.samples_per_pixel
        assert buf.pixel_offset(2, 3) == 2 * 16 + 3 * 3

    @pytest.mark.parametrize("row,col", [(-1, 0), (0, -1), (4, 0), (0, 5)])
    def test_out_of_range(self, row, col):
        buf = RasterBuffer.allocate(RasterFormat.from_mode(5, 4, "RGB"))
        with pytest.raises(PreconditionViolation):
            buf.pixel_offset(row, col)

    def test_precondition_is_assertion(self):
        buf = RasterBuffer.allocate(RasterFormat.from_mode(2, 2, "L"))
        with pytest.raises(AssertionError):
            buf.read_pixel(2, 2)


class TestRasterBuffer:
    def test_allocate_zero_filled(self):
        fmt = RasterFormat.from_mode(3, 2, "RGBA")
        buf = RasterBuffer.allocate(fmt)
        assert buf.pixels.dtype == np.uint8
        assert buf.pixels.size == 24
        assert not buf.pixels.any()

    def test_wrong_size(self):
        fmt = RasterFormat.from_mode(3, 2, "RGB")
        with pytest.raises(PreconditionViolation):
            RasterBuffer(fmt, bytes(17))

    def test_owns_storage(self):
        fmt = RasterFormat.from_mode(2, 1, "L")
        data = np.array([1, 2], dtype=np.uint8)
        buf = RasterBuffer(fmt, data)
        data[0] = 99
        assert buf.read_pixel(0, 0) == b"\x01"

    def test_from_array(self):
        arr = np.arange(2 * 3 * 4, dtype=np.uint8).reshape(2, 3, 4)
        buf = RasterBuffer.from_array(arr)
        assert buf.format.mode == "RGBA"
        assert buf.read_pixel(1, 2) == arr[1, 2].tobytes()
        gray = RasterBuffer.from_array(np.zeros((2, 3), dtype=np.uint8))
        assert gray.format.mode == "L"

    @pytest.mark.parametrize("mode", ["L", "RGB", "RGBA"])
    def test_copy_pixel(self, mode, rng):
        fmt = RasterFormat.from_mode(5, 4, mode, stride=5 * len(mode) + 2)
        src = random_buffer(fmt, rng)
        dst = RasterBuffer.allocate(fmt)

        for row in range(fmt.height):
            for col in range(fmt.width):
                dst.copy_pixel(src, row, col)
                assert dst.read_pixel(row, col) == src.read_pixel(row, col)

        np.testing.assert_array_equal(dst.image_view(), src.image_view())

    def test_copy_pixel_only_touches_target(self, rng):
        fmt = RasterFormat.from_mode(4, 4, "RGB")
        src = random_buffer(fmt, rng)
        dst = RasterBuffer.allocate(fmt)

        dst.copy_pixel(src, 2, 1)

        view = dst.image_view()
        assert view.sum() == view[2, 1].sum()

    def test_copy_format_mismatch(self, rng):
        src = random_buffer(RasterFormat.from_mode(4, 4, "RGBA"), rng)
        dst = RasterBuffer.allocate(RasterFormat.from_mode(4, 4, "RGB"))
        with pytest.raises(PreconditionViolation):
            dst.copy_pixel(src, 0, 0)
        with pytest.raises(PreconditionViolation):
            dst.copy_row(src, 0)
        with pytest.raises(PreconditionViolation):
            dst.copy_col(src, 0)

    def test_copy_row_skips_padding(self):
        fmt = RasterFormat.from_mode(3, 3, "RGB", stride=12)
        src = RasterBuffer(fmt, np.full(fmt.buffer_size, 7, dtype=np.uint8))
        dst = RasterBuffer.allocate(fmt)

        dst.copy_row(src, 1)

        rows = dst.pixels.reshape(fmt.height, fmt.stride)
        assert (rows[1, :fmt.row_size] == 7).all()
        assert not rows[1, fmt.row_size:].any()
        assert not rows[0].any()
        assert not rows[2].any()

    def test_copy_col(self, rng):
        fmt = RasterFormat.from_mode(4, 3, "RGB", stride=14)
        src = random_buffer(fmt, rng)
        dst = RasterBuffer.allocate(fmt)

        dst.copy_col(src, 2)

        view = dst.image_view()
        np.testing.assert_array_equal(view[:, 2], src.image_view()[:, 2])
        assert not view[:, [0, 1, 3]].any()
        with pytest.raises(PreconditionViolation):
            dst.copy_col(src, 4)

    def test_swap_pixel(self):
        arr = np.arange(2 * 2 * 3, dtype=np.uint8).reshape(2, 2, 3)
        buf = RasterBuffer.from_array(arr)

        buf.swap_pixel(0, 0, 1, 1)

        assert buf.read_pixel(0, 0) == arr[1, 1].tobytes()
        assert buf.read_pixel(1, 1) == arr[0, 0].tobytes()
        assert buf.read_pixel(0, 1) == arr[0, 1].tobytes()

    @pytest.mark.parametrize("height", [1, 4, 5])
    def test_flip_vertical(self, height, rng):
        arr = rng.integers(0, 256, size=(height, 3, 3), dtype=np.uint8)
        buf = RasterBuffer.from_array(arr)

        buf.flip_vertical()

        np.testing.assert_array_equal(buf.image_view(), arr[::-1])

    def test_image_view_is_writable_view(self):
        fmt = RasterFormat.from_mode(2, 2, "RGB", stride=8)
        buf = RasterBuffer.allocate(fmt)

        view = buf.image_view()
        view[1, 1] = (1, 2, 3)

        assert view.shape == (2, 2, 3)
        assert buf.read_pixel(1, 1) == b"\x01\x02\x03"
        assert buf.pixel_offset(1, 1) == 11

    def test_clear_and_copy(self, rng):
        fmt = RasterFormat.from_mode(3, 3, "L")
        buf = random_buffer(fmt, rng)
        dup = buf.copy()

        assert dup == buf
        buf.clear()
        assert not buf.pixels.any()
        assert dup != buf
