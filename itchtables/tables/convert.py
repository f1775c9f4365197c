"""
Table conversion: decoded columns -> pandas DataFrame.

ITCH timestamps are nanoseconds since midnight. When the trading date is
known (usually from a YYYYMMDD token in the file name, e.g.
20170130.PSX_ITCH_50), a `date` column and an absolute `datetime` column
are added.
"""

import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np
import pandas as pd

from ..core.errors import ConfigError

logger = logging.getLogger(__name__)

_DATE_PATTERN = re.compile(r'(?<!\d)(\d{8})(?!\d)')


def get_date_from_filename(path: Union[Path, str]) -> Optional[date]:
    """
    Extract the trading date from a capture file name.

    Returns:
        The first valid YYYYMMDD token in the name, or None
    """
    for token in _DATE_PATTERN.findall(Path(path).name):
        try:
            return datetime.strptime(token, '%Y%m%d').date()
        except ValueError:
            continue
    return None


def to_dataframe(
    columns: Dict[str, np.ndarray],
    trade_date: Optional[date] = None,
) -> pd.DataFrame:
    """
    Build a DataFrame from decoded columns.

    Args:
        columns: Column name -> array, as returned by decode_messages()
        trade_date: If given, adds `date` and `datetime` columns

    Returns:
        DataFrame with one row per retained message
    """
    df = pd.DataFrame(columns)

    if trade_date is not None and 'timestamp' in df.columns:
        midnight = pd.Timestamp(trade_date)
        df['date'] = midnight
        df['datetime'] = midnight + pd.to_timedelta(df['timestamp'].astype('int64'), unit='ns')

    return df


def write_table(df: pd.DataFrame, path: Union[Path, str], fmt: Optional[str] = None) -> Path:
    """
    Write a table to disk.

    Args:
        df: Table to write
        path: Output file
        fmt: 'csv', 'json' (one record per line) or 'parquet';
            inferred from the suffix when None

    Returns:
        The path written
    """
    path = Path(path)
    fmt = fmt or path.suffix.lstrip('.').lower() or 'csv'

    if fmt == 'csv':
        df.to_csv(path, index=False)
    elif fmt == 'json':
        df.to_json(path, orient='records', lines=True, date_format='iso')
    elif fmt == 'parquet':
        df.to_parquet(path, index=False)
    else:
        raise ConfigError(f"Unknown output format: {fmt!r}", format=fmt)

    logger.debug(f"Wrote {len(df):,} rows to {path}")
    return path
