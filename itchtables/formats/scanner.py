"""
Buffered frame scanner for ITCH capture files.

The scanner handles:
- Chunked reads of a configurable size
- Frame boundary detection (raw or length-prefixed framing)
- Reassembly of frames split across chunk boundaries
- Detection of truncated trailing frames

It is shared by the counting pass and the loading pass. Frames are yielded
as zero-copy memoryview slices of the current chunk; they are only valid
until the generator is advanced.
"""

import gzip
import logging
from numbers import Integral
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, Optional, Union

from .codec import read_uint16_be
from .message_types import FRAME_SIZES_BY_BYTE, MSG_SIZES
from ..core.errors import ConfigError, FramingError, TruncatedFrameError

logger = logging.getLogger(__name__)

# 100 MB: amortizes read cost without holding the whole capture in memory
DEFAULT_BUFFER_SIZE = 100_000_000

# Above this a single chunk starts to dominate process memory
LARGE_BUFFER_SIZE = 1_000_000_000

FRAMING_RAW = 'raw'
FRAMING_PREFIXED = 'prefixed'
FRAMINGS = (FRAMING_RAW, FRAMING_PREFIXED)

LENGTH_PREFIX_SIZE = 2

ProgressCallback = Callable[[int, Optional[int]], None]


def check_buffer_size(buffer_size: int) -> None:
    """Raise ConfigError for unusable buffer sizes, warn for huge ones."""
    if not isinstance(buffer_size, Integral) or isinstance(buffer_size, bool) or buffer_size <= 0:
        raise ConfigError(
            f"buffer_size must be a positive integer, got {buffer_size!r}",
            buffer_size=buffer_size,
        )
    if buffer_size > LARGE_BUFFER_SIZE:
        logger.warning(
            f"Allocating a {buffer_size:,} byte read buffer; "
            f"use a smaller buffer_size if memory is tight"
        )


def check_framing(framing: str) -> None:
    if framing not in FRAMINGS:
        raise ConfigError(
            f"Unknown framing {framing!r}, expected one of {', '.join(FRAMINGS)}",
            framing=framing,
        )


def open_feed(path: Union[Path, str]) -> BinaryIO:
    """
    Open a capture file for binary reading.

    Files ending in .gz are decompressed on the fly.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"ITCH file not found: {path}")

    if path.suffix.lower() == '.gz':
        return gzip.open(path, 'rb')
    return open(path, 'rb')


def feed_size(path: Union[Path, str]) -> Optional[int]:
    """Uncompressed size in bytes, or None when it is not known up front."""
    path = Path(path)
    if path.suffix.lower() == '.gz':
        return None
    return path.stat().st_size


def iter_frames(
    path: Union[Path, str],
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    framing: str = FRAMING_RAW,
    progress: Optional[ProgressCallback] = None,
) -> Iterator[memoryview]:
    """
    Yield every complete frame in a capture file, in file order.

    Args:
        path: Path to the capture file (plain or .gz)
        buffer_size: Bytes requested per read
        framing: 'raw' (back-to-back frames) or 'prefixed' (2-byte length
            before each frame)
        progress: Optional callback(bytes_read, total_bytes) as each chunk is read

    Yields:
        memoryview over one frame, starting at its type byte

    Raises:
        FramingError: If a frame boundary cannot be determined
        TruncatedFrameError: If the file ends inside a frame
    """
    check_buffer_size(buffer_size)
    check_framing(framing)
    buffer_size = int(buffer_size)

    total = feed_size(path)
    prefixed = framing == FRAMING_PREFIXED

    with open_feed(path) as f:
        pending = b''
        base = 0        # file offset of pending[0]
        bytes_read = 0

        while True:
            chunk = f.read(buffer_size)
            if not chunk:
                break

            bytes_read += len(chunk)
            logger.debug(f"Read {len(chunk):,} bytes ({bytes_read:,} total)")
            # Reported before yielding; the consumer may stop mid-chunk
            if progress is not None:
                progress(bytes_read, total)

            data = pending + chunk if pending else chunk
            view = memoryview(data)
            end = len(data)
            pos = 0

            if prefixed:
                while pos + LENGTH_PREFIX_SIZE <= end:
                    length = read_uint16_be(data, pos)
                    if length == 0:
                        raise FramingError(
                            f"Zero length prefix at byte offset {base + pos}",
                            offset=base + pos,
                        )
                    stop = pos + LENGTH_PREFIX_SIZE + length
                    if stop > end:
                        break
                    start = pos + LENGTH_PREFIX_SIZE
                    expected = MSG_SIZES.get(chr(data[start]))
                    if expected is not None and length < expected:
                        raise FramingError(
                            f"Frame of type {chr(data[start])!r} at byte offset "
                            f"{base + pos} is {length} bytes, expected {expected}",
                            offset=base + pos,
                            type_code=chr(data[start]),
                        )
                    yield view[start:stop]
                    pos = stop
            else:
                while pos < end:
                    size = FRAME_SIZES_BY_BYTE.get(data[pos])
                    if size is None:
                        raise FramingError(
                            f"Unknown message type {chr(data[pos])!r} at byte offset "
                            f"{base + pos}; cannot determine frame length",
                            offset=base + pos,
                            type_code=chr(data[pos]),
                        )
                    if pos + size > end:
                        break
                    yield view[pos:pos + size]
                    pos += size

            pending = data[pos:]
            base += pos

        if pending:
            raise _truncated(pending, base, prefixed)


def _truncated(pending: bytes, offset: int, prefixed: bool) -> TruncatedFrameError:
    if prefixed:
        if len(pending) < LENGTH_PREFIX_SIZE:
            return TruncatedFrameError(offset, '?', LENGTH_PREFIX_SIZE, len(pending))
        expected = LENGTH_PREFIX_SIZE + read_uint16_be(pending, 0)
        type_code = chr(pending[LENGTH_PREFIX_SIZE]) if len(pending) > LENGTH_PREFIX_SIZE else '?'
        return TruncatedFrameError(offset, type_code, expected, len(pending))

    type_code = chr(pending[0])
    return TruncatedFrameError(offset, type_code, MSG_SIZES[type_code], len(pending))
