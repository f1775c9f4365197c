"""
Big-endian field codec for ITCH frames.

All ITCH integers are unsigned and transmitted most-significant byte first.
The readers take any buffer-protocol object (bytes, bytearray, memoryview)
plus an offset and never copy the frame.

Callers own frame boundaries: these functions assume the span holds the
required bytes from ``offset`` on.
"""

import struct

_U16 = struct.Struct('>H')
_U32 = struct.Struct('>I')
_U64 = struct.Struct('>Q')
# 6-byte timestamp: high 2 bytes + low 4 bytes
_U48 = struct.Struct('>HI')

PRICE_SCALE = 10000.0


def read_uint16_be(buf, offset: int = 0) -> int:
    """Read 2 bytes as an unsigned integer."""
    return _U16.unpack_from(buf, offset)[0]


def read_uint32_be(buf, offset: int = 0) -> int:
    """Read 4 bytes as an unsigned integer."""
    return _U32.unpack_from(buf, offset)[0]


def read_uint48_be(buf, offset: int = 0) -> int:
    """Read 6 bytes as an unsigned integer (ITCH nanosecond timestamps)."""
    high, low = _U48.unpack_from(buf, offset)
    return (high << 32) | low


def read_uint64_be(buf, offset: int = 0) -> int:
    """Read 8 bytes as an unsigned integer."""
    return _U64.unpack_from(buf, offset)[0]


def read_char(buf, offset: int = 0) -> str:
    """Read a single byte as a one-character string."""
    return chr(buf[offset])


def read_alpha(buf, offset: int, width: int) -> str:
    """
    Read a fixed-width, space-padded text field, right-trimmed.

    Decoded as latin-1 so every byte, ASCII or not, maps to one character.
    """
    return bytes(buf[offset:offset + width]).decode('latin-1').rstrip(' ')


def read_price4(buf, offset: int = 0) -> float:
    """Read a 4-byte fixed-point price with 4 implied decimals."""
    return _U32.unpack_from(buf, offset)[0] / PRICE_SCALE


def read_flag(buf, offset: int, true_byte: str) -> bool:
    """True if the byte at ``offset`` equals ``true_byte``."""
    return buf[offset] == ord(true_byte)


READERS_BY_WIDTH = {
    2: read_uint16_be,
    4: read_uint32_be,
    6: read_uint48_be,
    8: read_uint64_be,
}
