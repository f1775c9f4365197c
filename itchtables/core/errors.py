"""
Error codes and exceptions for itchtables.

Structured error codes for machine-parseable diagnostics.

Format: E{category}{number}
- E1xxx: Data errors
- E2xxx: Resource errors
- E3xxx: Configuration errors
- E4xxx: Export errors
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional


class ErrorCode(Enum):
    """Structured error codes."""

    # E1xxx: Data errors
    E1001_TRUNCATED_FRAME = "E1001"
    E1002_FRAMING_ERROR = "E1002"
    E1003_UNRECOGNIZED_TYPE = "E1003"

    # E2xxx: Resource errors
    E2001_ALLOCATION_FAILED = "E2001"

    # E3xxx: Configuration errors
    E3001_INVALID_CONFIG = "E3001"

    # E4xxx: Export errors
    E4001_FILE_WRITE_FAILED = "E4001"


# Error code metadata
ERROR_METADATA = {
    ErrorCode.E1001_TRUNCATED_FRAME: {
        'severity': 'error',
        'message': 'File ends inside a message frame',
        'recoverable': False,
    },
    ErrorCode.E1002_FRAMING_ERROR: {
        'severity': 'error',
        'message': 'Cannot locate the next frame boundary',
        'recoverable': False,
    },
    ErrorCode.E1003_UNRECOGNIZED_TYPE: {
        'severity': 'warning',
        'message': 'Type code not handled by this decoder',
        'recoverable': True,
    },
    ErrorCode.E2001_ALLOCATION_FAILED: {
        'severity': 'error',
        'message': 'Could not reserve column storage',
        'recoverable': False,
    },
    ErrorCode.E3001_INVALID_CONFIG: {
        'severity': 'error',
        'message': 'Invalid configuration',
        'recoverable': False,
    },
    ErrorCode.E4001_FILE_WRITE_FAILED: {
        'severity': 'error',
        'message': 'Failed to write output file',
        'recoverable': True,
    },
}


@dataclass
class DecodeDiagnostic:
    """
    Non-fatal anomaly recorded during a decode session.

    Example:
        diag = DecodeDiagnostic(
            code=ErrorCode.E1003_UNRECOGNIZED_TYPE,
            context={'type': 'Z', 'decoder': 'trades'},
        )
    """
    code: ErrorCode
    context: Optional[dict] = None

    @property
    def severity(self) -> str:
        return ERROR_METADATA.get(self.code, {}).get('severity', 'error')

    @property
    def message(self) -> str:
        base_msg = ERROR_METADATA.get(self.code, {}).get('message', 'Unknown error')
        if self.context:
            return f"{base_msg}: {self.context}"
        return base_msg

    @property
    def recoverable(self) -> bool:
        return ERROR_METADATA.get(self.code, {}).get('recoverable', False)

    def to_dict(self) -> dict:
        return {
            'code': self.code.value,
            'severity': self.severity,
            'message': self.message,
            'recoverable': self.recoverable,
            'context': self.context,
        }


class ItchDecodeError(Exception):
    """Base class for fatal decode-session errors."""

    code = ErrorCode.E1002_FRAMING_ERROR

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.context = context

    def to_dict(self) -> dict:
        return {
            'code': self.code.value,
            'severity': ERROR_METADATA[self.code]['severity'],
            'message': str(self),
            'context': self.context,
        }


class TruncatedFrameError(ItchDecodeError):
    """End of file reached inside a frame."""

    code = ErrorCode.E1001_TRUNCATED_FRAME

    def __init__(self, offset: int, type_code: str, expected: int, available: int):
        super().__init__(
            f"Truncated frame at byte offset {offset}: type {type_code!r} "
            f"needs {expected} bytes, only {available} available",
            offset=offset,
            type_code=type_code,
            expected=expected,
            available=available,
        )
        self.offset = offset


class FramingError(ItchDecodeError):
    """Frame boundaries cannot be determined (unknown type or bad prefix)."""

    code = ErrorCode.E1002_FRAMING_ERROR

    def __init__(self, message: str, offset: int, **context):
        super().__init__(message, offset=offset, **context)
        self.offset = offset


class AllocationError(ItchDecodeError):
    """Column storage could not be reserved."""

    code = ErrorCode.E2001_ALLOCATION_FAILED

    def __init__(self, requested: int, reason: str):
        super().__init__(
            f"Cannot reserve storage for {requested:,} messages: {reason}",
            requested=requested,
        )
        self.requested = requested


class ConfigError(ItchDecodeError, ValueError):
    """Invalid decode configuration."""

    code = ErrorCode.E3001_INVALID_CONFIG
