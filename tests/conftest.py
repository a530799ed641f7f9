import struct
import zlib

import pytest
from PIL import Image
from PIL.PngImagePlugin import PngInfo

from create_db import create_database
from db_config import DatabaseConfig

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def png_chunk(chunk_type: bytes, payload: bytes) -> bytes:
    crc = zlib.crc32(chunk_type + payload) & 0xFFFFFFFF
    return struct.pack(">I", len(payload)) + chunk_type + payload + struct.pack(">I", crc)


@pytest.fixture
def make_png():
    """Build a PNG byte stream from (type, payload) pairs, IEND appended."""
    def _make(*chunks, end=True):
        data = PNG_SIGNATURE + png_chunk(b"IHDR", struct.pack(">IIBBBBB", 1, 1, 8, 2, 0, 0, 0))
        for chunk_type, payload in chunks:
            data += png_chunk(chunk_type, payload)
        if end:
            data += png_chunk(b"IEND", b"")
        return data
    return _make


@pytest.fixture
def write_image():
    """Write a small real PNG with Pillow, optionally carrying text chunks."""
    def _write(path, parameters=None, compressed=False, **extra_text):
        info = PngInfo()
        for key, value in extra_text.items():
            info.add_text(key, value)
        if parameters is not None:
            info.add_text("parameters", parameters, zip=compressed)
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", (4, 4), (200, 30, 30)).save(path, pnginfo=info)
        return path
    return _write


@pytest.fixture
def db_config(tmp_path):
    config = DatabaseConfig(str(tmp_path / "image_parameters.db"))
    create_database(config)
    return config
