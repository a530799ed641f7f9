#!/usr/bin/env python3
"""
PNG Parameters Reader
Walks the chunk stream of a PNG file and pulls out the generation parameters
stored in a `tEXt` chunk keyed "parameters".
"""

import struct
from dataclasses import dataclass
from typing import Iterator, Optional, Union

PNG_SIGNATURE_LENGTH = 8
CHUNK_HEADER_LENGTH = 8  # length + type
CHUNK_OVERHEAD = 12  # length + type + CRC
TEXT_CHUNK_TYPE = b"tEXt"
PARAMETERS_KEYWORD = "parameters"
PARAMETERS_PREFIX = "parameters "
_PARAMETERS_KEYWORD_BYTES = PARAMETERS_KEYWORD.encode("ascii")

_CHUNK_HEADER = struct.Struct(">I4s")


class ParseError(ValueError):
    """Raised when a PNG byte stream cannot be read or decoded."""


@dataclass(frozen=True)
class Chunk:
    length: int
    type: bytes
    payload: memoryview


def iter_chunks(data: Union[bytes, bytearray, memoryview]) -> Iterator[Chunk]:
    """Yield chunks following the 8-byte signature.

    The signature itself is not checked. A payload running past the end of
    the buffer is yielded truncated.
    """
    view = memoryview(data)
    offset = PNG_SIGNATURE_LENGTH
    size = len(view)

    while offset < size:
        header = view[offset:offset + CHUNK_HEADER_LENGTH]
        if len(header) < CHUNK_HEADER_LENGTH:
            raise ParseError(f"Truncated chunk header at offset {offset}")

        length, chunk_type = _CHUNK_HEADER.unpack(header)
        start = offset + CHUNK_HEADER_LENGTH
        yield Chunk(length, chunk_type, view[start:start + length])

        offset += length + CHUNK_OVERHEAD


def parse_parameters(data: Union[bytes, bytearray, memoryview]) -> Optional[str]:
    """Return the parameters text of the first matching tEXt chunk.

    Other tEXt chunks are skipped undecoded, since tEXt is Latin-1 by
    definition. Raises ParseError on a truncated chunk header or a
    parameters payload that is not valid UTF-8.
    """
    for chunk in iter_chunks(data):
        if chunk.type != TEXT_CHUNK_TYPE:
            continue
        # the keyword is ASCII with no null bytes, so raw bytes compare the same
        if bytes(chunk.payload[:len(_PARAMETERS_KEYWORD_BYTES)]) != _PARAMETERS_KEYWORD_BYTES:
            continue

        try:
            text = str(chunk.payload, "utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"tEXt chunk is not valid UTF-8: {e}") from e

        # keyword and text are separated by a null byte
        text = text.replace("\0", " ")
        if text.startswith(PARAMETERS_PREFIX):
            text = text[len(PARAMETERS_PREFIX):]
        return text

    return None


def extract_parameters(data: Union[bytes, bytearray, memoryview],
                       source: Optional[str] = None,
                       verbose: bool = True) -> Optional[str]:
    """Like parse_parameters, but malformed input yields None instead of raising."""
    try:
        return parse_parameters(data)
    except ParseError as e:
        if verbose:
            print(f"⚠ Could not read parameters from {source or '<bytes>'}: {e}")
        return None


def read_parameters(file_path) -> Optional[str]:
    """Read a PNG file from disk and return its parameters text, if any."""
    try:
        with open(file_path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ParseError(f"Cannot read {file_path}: {e}") from e
    return parse_parameters(data)
