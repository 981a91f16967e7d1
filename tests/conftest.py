"""Shared fixtures for the tgablend test suite."""
import struct

import numpy as np
import pytest

from tgablend.models.image import PixelBuffer


def _raw_header(width, height, *, id_length=0, color_map_type=0, data_type=2, bpp=24, descriptor=0):
    # built by hand so codec tests do not depend on TgaHeader.pack()
    return (
        bytes([id_length, color_map_type, data_type])
        + struct.pack("<HH", 0, 0)
        + bytes([0])
        + struct.pack("<HHHH", 0, 0, width, height)
        + bytes([bpp, descriptor])
    )


@pytest.fixture
def raw_header():
    return _raw_header


@pytest.fixture
def write_tga(tmp_path):
    """
    Write a TGA file byte by byte.

    ``rows`` is a list of scanlines in *disk* order, each a list of (b, g, r).
    """
    def _write(name, rows, *, top_origin=False, image_id=b"", payload=None, **header):
        height = len(rows)
        width = len(rows[0]) if rows else 0
        header.setdefault("descriptor", 0x20 if top_origin else 0)
        body = payload if payload is not None else bytes(
            sample for row in rows for pixel in row for sample in pixel
        )
        path = tmp_path / name
        path.write_bytes(
            _raw_header(width, height, id_length=len(image_id), **header) + image_id + body
        )
        return path

    return _write


@pytest.fixture
def make_buffer():
    """Build a PixelBuffer from rows listed bottom row first."""
    def _make(rows):
        return PixelBuffer(np.array(rows, dtype=np.uint8))

    return _make


@pytest.fixture
def random_buffer():
    rng = np.random.default_rng(1234)

    def _make(width=7, height=5):
        return PixelBuffer(rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8))

    return _make
