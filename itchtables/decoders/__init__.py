"""
Message decoders.

Decoders turn raw ITCH frames into typed columns. Each decoder handles one
family of message types and owns the state of one decode session.
"""

from typing import Dict, Type

from .base import Column, ColumnSpec, FieldSpec, FrameLayout, MessageDecoder
from .orders import Orders
from .trades import Trades
from .modifications import Modifications


DECODERS: Dict[str, Type[MessageDecoder]] = {
    Orders.name: Orders,
    Trades.name: Trades,
    Modifications.name: Modifications,
}


def get_decoder(name: str) -> MessageDecoder:
    """
    Create a fresh decoder by name.

    Raises:
        ValueError: If no decoder has that name
    """
    try:
        return DECODERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown decoder {name!r}, expected one of {', '.join(DECODERS)}"
        ) from None


__all__ = [
    'Column',
    'ColumnSpec',
    'FieldSpec',
    'FrameLayout',
    'MessageDecoder',
    'Orders',
    'Trades',
    'Modifications',
    'DECODERS',
    'get_decoder',
]
