"""ITCH wire format: field codec, message catalogue and frame scanner."""

from .codec import (
    read_uint16_be,
    read_uint32_be,
    read_uint48_be,
    read_uint64_be,
    read_alpha,
    read_price4,
)
from .message_types import ITCHMsgType, MSG_SIZES, MSG_TYPE_NAMES, message_name, message_size
from .scanner import (
    DEFAULT_BUFFER_SIZE,
    FRAMING_RAW,
    FRAMING_PREFIXED,
    FRAMINGS,
    iter_frames,
    open_feed,
)

__all__ = [
    'read_uint16_be',
    'read_uint32_be',
    'read_uint48_be',
    'read_uint64_be',
    'read_alpha',
    'read_price4',
    'ITCHMsgType',
    'MSG_SIZES',
    'MSG_TYPE_NAMES',
    'message_name',
    'message_size',
    'DEFAULT_BUFFER_SIZE',
    'FRAMING_RAW',
    'FRAMING_PREFIXED',
    'FRAMINGS',
    'iter_frames',
    'open_feed',
]
