"""
Front-end functions: one call per table type.

Each selects a decoder, runs a decode session and converts the result to a
DataFrame. Message windows are 0-based and inclusive: start_msg_count=20,
end_msg_count=22 returns the 21st to 23rd matching messages.

Example:
    orders = get_orders("20170130.PSX_ITCH_50", framing="prefixed")
    trades = get_trades("20170130.PSX_ITCH_50.gz", quiet=True)
"""

from datetime import date
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from .convert import get_date_from_filename, to_dataframe
from ..core.observer import DecodeObserver, LoggingObserver
from ..decoders import get_decoder
from ..formats.scanner import DEFAULT_BUFFER_SIZE, FRAMING_RAW
from ..pipeline.session import decode_messages


def get_messages(
    kind: str,
    path: Union[Path, str],
    start_msg_count: int = 0,
    end_msg_count: Optional[int] = None,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    quiet: bool = False,
    framing: str = FRAMING_RAW,
    observer: Optional[DecodeObserver] = None,
    trade_date: Optional[date] = None,
    add_datetime: bool = True,
) -> pd.DataFrame:
    """
    Decode one table type from a capture file.

    Args:
        kind: 'orders', 'trades' or 'modifications'
        path: Path to the capture file (plain or .gz)
        start_msg_count: First message index to keep (0-based)
        end_msg_count: Last message index to keep (inclusive), None for all
        buffer_size: Bytes requested per read, defaults to 100 MB
        quiet: If True, no progress is reported
        framing: 'raw' or 'prefixed'
        observer: Progress observer, defaults to a LoggingObserver
        trade_date: Trading date, defaults to the date in the file name
        add_datetime: If False, no date/datetime columns are added

    Returns:
        DataFrame with one row per retained message
    """
    decoder = get_decoder(kind)
    if observer is None:
        observer = LoggingObserver(kind)

    columns = decode_messages(
        decoder,
        path,
        start_msg_count=start_msg_count,
        end_msg_count=end_msg_count,
        buffer_size=buffer_size,
        quiet=quiet,
        framing=framing,
        observer=observer,
    )

    if add_datetime and trade_date is None:
        trade_date = get_date_from_filename(path)

    return to_dataframe(columns, trade_date if add_datetime else None)


def get_orders(path: Union[Path, str], start_msg_count: int = 0,
               end_msg_count: Optional[int] = None, **kwargs) -> pd.DataFrame:
    """Add-order messages ('A', 'F') as a DataFrame."""
    return get_messages('orders', path, start_msg_count, end_msg_count, **kwargs)


def get_trades(path: Union[Path, str], start_msg_count: int = 0,
               end_msg_count: Optional[int] = None, **kwargs) -> pd.DataFrame:
    """Trade messages ('P', 'Q', 'B') as a DataFrame."""
    return get_messages('trades', path, start_msg_count, end_msg_count, **kwargs)


def get_modifications(path: Union[Path, str], start_msg_count: int = 0,
                      end_msg_count: Optional[int] = None, **kwargs) -> pd.DataFrame:
    """Order modification messages ('E', 'C', 'X', 'D', 'U') as a DataFrame."""
    return get_messages('modifications', path, start_msg_count, end_msg_count, **kwargs)
