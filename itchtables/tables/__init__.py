"""Table conversion and per-table front-end functions."""

from .convert import get_date_from_filename, to_dataframe, write_table
from .frontends import get_messages, get_orders, get_trades, get_modifications

__all__ = [
    'get_date_from_filename',
    'to_dataframe',
    'write_table',
    'get_messages',
    'get_orders',
    'get_trades',
    'get_modifications',
]
