"""framedisplace codecs: image file encoding/decoding."""

from .raster import RasterCodec

__all__ = ["RasterCodec"]
