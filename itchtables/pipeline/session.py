"""
Decode sessions: the count-then-load protocol.

A session takes one decoder through its whole life:

1. Normalize the window (swap start/end if given in reverse)
2. If no window end was given, run a counting pass to find it
3. Reserve column storage for the expected number of rows
4. Run the loading pass
5. Hand back the decoder's columns

Example:
    columns = decode_messages(Orders(), "20170130.PSX_ITCH_50", 0, 99)
    print(columns['price'][:5])
"""

import logging
from numbers import Integral
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import numpy as np

from .loader import count_messages, load_messages
from ..core.errors import ConfigError
from ..core.observer import DecodeObserver, NULL_OBSERVER
from ..decoders.base import MessageDecoder
from ..formats.message_types import MSG_SIZES
from ..formats.scanner import (
    DEFAULT_BUFFER_SIZE,
    FRAMING_PREFIXED,
    FRAMING_RAW,
    LENGTH_PREFIX_SIZE,
    check_buffer_size,
    check_framing,
    feed_size,
)

logger = logging.getLogger(__name__)

MIN_FRAME_SIZE = min(MSG_SIZES.values())


def _check_index(name: str, value) -> None:
    if value is None:
        return
    if not isinstance(value, Integral) or isinstance(value, bool) or value < 0:
        raise ConfigError(f"{name} must be a non-negative integer, got {value!r}", **{name: value})


class DecodeSession:
    """
    One decoder, one file, one pass (plus an optional counting pass).

    Usage:
        session = DecodeSession(Trades(), path, buffer_size=10_000_000)
        columns = session.run(start_msg_count=100, end_msg_count=199)
    """

    def __init__(
        self,
        decoder: MessageDecoder,
        path: Union[Path, str],
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        framing: str = FRAMING_RAW,
        observer: Optional[DecodeObserver] = None,
        quiet: bool = False,
    ):
        check_buffer_size(buffer_size)
        check_framing(framing)

        self.decoder = decoder
        self.path = Path(path)
        self.buffer_size = buffer_size
        self.framing = framing
        self.observer = NULL_OBSERVER if quiet or observer is None else observer

    def resolve_window(
        self,
        start_msg_count: int = 0,
        end_msg_count: Optional[int] = None,
    ) -> Tuple[int, int, int]:
        """
        Turn a requested window into concrete bounds.

        Returns:
            (start, end, n_messages) where end is inclusive and n_messages is
            the number of rows to reserve. An end of None triggers a
            counting pass over the file.
        """
        _check_index('start_msg_count', start_msg_count)
        _check_index('end_msg_count', end_msg_count)
        start = int(start_msg_count)

        if end_msg_count is None:
            counts = count_messages(self.path, self.buffer_size, self.framing)
            total = self.decoder.count_valid_messages(counts)
            logger.debug(f"{total:,} {self.decoder.name} messages in {self.path}")
            return start, total - 1, max(total - start, 0)

        end = int(end_msg_count)
        if start > end:
            start, end = end, start
        return start, end, end - start + 1

    def _capacity_hint(self, n_messages: int) -> int:
        """A file cannot hold more frames than its size allows."""
        size = feed_size(self.path)
        if size is None:
            return n_messages
        min_frame = MIN_FRAME_SIZE
        if self.framing == FRAMING_PREFIXED:
            min_frame += LENGTH_PREFIX_SIZE
        return min(n_messages, size // min_frame)

    def run(
        self,
        start_msg_count: int = 0,
        end_msg_count: Optional[int] = None,
    ) -> Dict[str, np.ndarray]:
        """
        Decode the window and return the columns.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigError: If the window bounds are invalid
            AllocationError: If column storage cannot be reserved
            TruncatedFrameError: If the file ends inside a frame
            FramingError: If a frame boundary cannot be determined
        """
        if not self.path.exists():
            raise FileNotFoundError(f"ITCH file not found: {self.path}")
        if self.decoder.message_count or len(self.decoder):
            raise ValueError(f"{self.decoder.name} decoder was already used; create a new one")

        start, end, n_messages = self.resolve_window(start_msg_count, end_msg_count)
        self.observer.on_counted(n_messages)

        self.decoder.reserve(self._capacity_hint(n_messages))
        self.decoder.set_boundaries(start, end)

        if n_messages > 0:
            load_messages(
                self.path,
                self.decoder,
                buffer_size=self.buffer_size,
                framing=self.framing,
                observer=self.observer,
            )
        else:
            logger.debug(f"Empty window for {self.decoder.name}, skipping loading pass")

        self.observer.on_done(len(self.decoder))
        return self.decoder.export_columns()


def decode_messages(
    decoder: MessageDecoder,
    path: Union[Path, str],
    start_msg_count: int = 0,
    end_msg_count: Optional[int] = None,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    quiet: bool = False,
    framing: str = FRAMING_RAW,
    observer: Optional[DecodeObserver] = None,
) -> Dict[str, np.ndarray]:
    """
    Decode messages of one family from a capture file.

    Args:
        decoder: Fresh decoder (Orders, Trades, Modifications)
        path: Path to the capture file (plain or .gz)
        start_msg_count: First message index to keep (0-based)
        end_msg_count: Last message index to keep (inclusive), None for all
        buffer_size: Bytes requested per read, defaults to 100 MB
        quiet: If True, the observer is not notified
        framing: 'raw' or 'prefixed'
        observer: Receives counted/progress/done events

    Returns:
        Column name -> numpy array, all arrays of equal length
    """
    session = DecodeSession(
        decoder,
        path,
        buffer_size=buffer_size,
        framing=framing,
        observer=observer,
        quiet=quiet,
    )
    return session.run(start_msg_count, end_msg_count)
