"""
Decode-session observers.

Observers receive session lifecycle events. They are purely informational:
nothing in the decode path depends on what an observer does.

Events:
- on_counted(n_messages): expected number of rows, after window resolution
- on_progress(bytes_read, total_bytes): after each chunk of the loading pass
  (total_bytes is None for compressed input)
- on_done(n_rows): rows actually retained
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class DecodeObserver:
    """No-op observer. Subclass and override the events you need."""

    def on_counted(self, n_messages: int) -> None:
        pass

    def on_progress(self, bytes_read: int, total_bytes: Optional[int]) -> None:
        pass

    def on_done(self, n_rows: int) -> None:
        pass


class LoggingObserver(DecodeObserver):
    """Reports session events through the logging module."""

    def __init__(self, name: str = ''):
        self.name = name
        self._label = f" {name}" if name else ""

    def on_counted(self, n_messages: int) -> None:
        logger.info(f"[Counting] {n_messages:,}{self._label} messages found")

    def on_progress(self, bytes_read: int, total_bytes: Optional[int]) -> None:
        if total_bytes:
            logger.debug(f"[Loading] {bytes_read:,}/{total_bytes:,} bytes ({bytes_read / total_bytes:.1%})")
        else:
            logger.debug(f"[Loading] {bytes_read:,} bytes")

    def on_done(self, n_rows: int) -> None:
        logger.info(f"[Done] {n_rows:,}{self._label} rows loaded")


NULL_OBSERVER = DecodeObserver()
