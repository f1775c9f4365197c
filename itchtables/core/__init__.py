"""Errors and session observers shared across itchtables."""

from .errors import (
    ErrorCode,
    ERROR_METADATA,
    DecodeDiagnostic,
    ItchDecodeError,
    TruncatedFrameError,
    FramingError,
    AllocationError,
    ConfigError,
)
from .observer import DecodeObserver, LoggingObserver, NULL_OBSERVER

__all__ = [
    # Errors
    'ErrorCode',
    'ERROR_METADATA',
    'DecodeDiagnostic',
    'ItchDecodeError',
    'TruncatedFrameError',
    'FramingError',
    'AllocationError',
    'ConfigError',
    # Observers
    'DecodeObserver',
    'LoggingObserver',
    'NULL_OBSERVER',
]
