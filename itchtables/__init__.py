"""
itchtables - Decode NASDAQ ITCH 5.0 captures into columnar tables.

This package provides:
- formats: Big-endian field codec, message catalogue and frame scanner
- decoders: Orders, Trades and Modifications decoders
- pipeline: Counting pass, loading pass and decode sessions
- tables: DataFrame conversion and get_orders/get_trades/get_modifications
- config: YAML configuration with environment variable support
- core: Error codes and session observers
- cli: Command-line interface
"""

__version__ = "0.3.0"

from .formats import DEFAULT_BUFFER_SIZE, FRAMING_RAW, FRAMING_PREFIXED, MSG_SIZES
from .decoders import MessageDecoder, Orders, Trades, Modifications, get_decoder
from .pipeline import count_messages, load_messages, decode_messages, DecodeSession
from .tables import get_orders, get_trades, get_modifications, to_dataframe
from .config import ItchConfig, load_config
from .core import (
    ErrorCode,
    ItchDecodeError,
    TruncatedFrameError,
    FramingError,
    AllocationError,
    ConfigError,
    DecodeObserver,
    LoggingObserver,
)

__all__ = [
    # Version
    '__version__',
    # Formats
    'DEFAULT_BUFFER_SIZE',
    'FRAMING_RAW',
    'FRAMING_PREFIXED',
    'MSG_SIZES',
    # Decoders
    'MessageDecoder',
    'Orders',
    'Trades',
    'Modifications',
    'get_decoder',
    # Pipeline
    'count_messages',
    'load_messages',
    'decode_messages',
    'DecodeSession',
    # Tables
    'get_orders',
    'get_trades',
    'get_modifications',
    'to_dataframe',
    # Config
    'ItchConfig',
    'load_config',
    # Core
    'ErrorCode',
    'ItchDecodeError',
    'TruncatedFrameError',
    'FramingError',
    'AllocationError',
    'ConfigError',
    'DecodeObserver',
    'LoggingObserver',
]
