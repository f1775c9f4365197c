"""
NASDAQ ITCH 5.0 message catalogue.

Every ITCH frame starts with a one-byte ASCII type code. The remaining layout
is fixed per type, so the type code alone determines the frame size. Sizes
below include the type byte itself.
"""

from enum import Enum
from typing import Optional


class ITCHMsgType(Enum):
    """ITCH 5.0 message types."""
    SYSTEM_EVENT = 'S'
    STOCK_DIRECTORY = 'R'
    STOCK_TRADING_ACTION = 'H'
    REG_SHO = 'Y'
    MARKET_PARTICIPANT_POSITION = 'L'
    MWCB_DECLINE_LEVEL = 'V'
    MWCB_STATUS = 'W'
    IPO_QUOTING_PERIOD = 'K'
    LULD_AUCTION_COLLAR = 'J'
    OPERATIONAL_HALT = 'h'
    ADD_ORDER = 'A'
    ADD_ORDER_MPID = 'F'
    ORDER_EXECUTED = 'E'
    ORDER_EXECUTED_PRICE = 'C'
    ORDER_CANCEL = 'X'
    ORDER_DELETE = 'D'
    ORDER_REPLACE = 'U'
    TRADE = 'P'
    CROSS_TRADE = 'Q'
    BROKEN_TRADE = 'B'
    NOII = 'I'
    RPII = 'N'


MSG_TYPE_NAMES = {
    'S': 'System Event',
    'R': 'Stock Directory',
    'H': 'Stock Trading Action',
    'Y': 'Reg SHO',
    'L': 'Market Participant Position',
    'V': 'MWCB Decline Level',
    'W': 'MWCB Status',
    'K': 'IPO Quoting Period',
    'J': 'LULD Auction Collar',
    'h': 'Operational Halt',
    'A': 'Add Order',
    'F': 'Add Order (MPID)',
    'E': 'Order Executed',
    'C': 'Order Executed (Price)',
    'X': 'Order Cancel',
    'D': 'Order Delete',
    'U': 'Order Replace',
    'P': 'Trade (Non-Cross)',
    'Q': 'Cross Trade',
    'B': 'Broken Trade',
    'I': 'NOII',
    'N': 'RPII',
}

# Message sizes (ITCH 5.0)
MSG_SIZES = {
    'S': 12,
    'R': 39,
    'H': 25,
    'Y': 20,
    'L': 26,
    'V': 35,
    'W': 12,
    'K': 28,
    'J': 35,
    'h': 21,
    'A': 36,
    'F': 40,
    'E': 31,
    'C': 36,
    'X': 23,
    'D': 19,
    'U': 35,
    'P': 44,
    'Q': 40,
    'B': 19,
    'I': 50,
    'N': 20,
}

# Same table keyed by the raw type byte, for the scanner's hot loop
FRAME_SIZES_BY_BYTE = {ord(code): size for code, size in MSG_SIZES.items()}

# Number of distinct type-byte slots in a count vector
TYPE_SLOTS = 256


def message_size(code: str) -> Optional[int]:
    """Frame size for a type code, or None if the code is unknown."""
    return MSG_SIZES.get(code)


def message_name(code: str) -> str:
    """Human-readable name for a type code."""
    return MSG_TYPE_NAMES.get(code, f'Unknown ({code!r})')
