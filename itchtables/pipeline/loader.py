"""
Counting and loading passes over an ITCH capture.

count_messages() tallies frames per type byte without decoding any field.
load_messages() feeds every complete frame to a decoder until the decoder
signals that its window is exhausted or the file ends.

Both passes open the file themselves and close it on every exit path.
"""

import logging
from contextlib import closing
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from ..core.observer import DecodeObserver, NULL_OBSERVER
from ..decoders.base import MessageDecoder
from ..formats.message_types import TYPE_SLOTS
from ..formats.scanner import DEFAULT_BUFFER_SIZE, FRAMING_RAW, iter_frames

logger = logging.getLogger(__name__)


def count_messages(
    path: Union[Path, str],
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    framing: str = FRAMING_RAW,
) -> List[int]:
    """
    Count frames per type byte.

    Args:
        path: Path to the capture file
        buffer_size: Bytes requested per read
        framing: 'raw' or 'prefixed'

    Returns:
        List of 256 counts, indexed by type byte value
    """
    counts = [0] * TYPE_SLOTS
    for frame in iter_frames(path, buffer_size, framing):
        counts[frame[0]] += 1

    logger.debug(f"Counted {sum(counts):,} frames in {path}")
    return counts


def summarize_counts(counts: Sequence[int]) -> Dict[str, int]:
    """Type code -> count, for the types that occur."""
    return {chr(pos): count for pos, count in enumerate(counts) if count}


def load_messages(
    path: Union[Path, str],
    decoder: MessageDecoder,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    framing: str = FRAMING_RAW,
    observer: Optional[DecodeObserver] = None,
) -> int:
    """
    Feed all frames of a file to a decoder.

    Scanning stops as soon as decoder.load_frame() returns False; the rest of
    the file is never read.

    Args:
        path: Path to the capture file
        decoder: Decoder with its window already set
        buffer_size: Bytes requested per read
        framing: 'raw' or 'prefixed'
        observer: Receives on_progress after each chunk

    Returns:
        Number of rows the decoder holds afterwards

    Raises:
        TruncatedFrameError: If the file ends inside a frame
        FramingError: If a frame boundary cannot be determined
    """
    observer = observer or NULL_OBSERVER
    frames = iter_frames(path, buffer_size, framing, progress=observer.on_progress)

    with closing(frames):
        for frame in frames:
            if not decoder.load_frame(frame):
                logger.debug(
                    f"Window end {decoder.end_msg_count} passed, stopping scan of {path}"
                )
                break

    return len(decoder)
