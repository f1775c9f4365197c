"""
Trades decoder: executions not tied to a displayed order.

Types:
- 'P': Trade (non-cross)
- 'Q': Cross trade
- 'B': Broken trade

Per-type layouts after the common 11-byte header:

    'P' (44 bytes): order_ref 11-18, side 19, shares 20-23, stock 24-31,
                    price 32-35, match number 36-43
    'Q' (40 bytes): shares 11-18, stock 19-26, cross price 27-30,
                    match number 31-38, cross type 39
    'B' (19 bytes): match number 11-18

Fields a type does not carry hold sentinels: order_ref 0, buy False,
shares 0, stock "", price 0.0, match_number 0, cross_type " ". For 'Q' the
price column holds the cross price.
"""

from .base import ColumnSpec, FieldSpec, FrameLayout, HEADER_COLUMNS, HEADER_FIELDS, MessageDecoder


class Trades(MessageDecoder):
    """Decoder for trade messages ('P', 'Q', 'B')."""

    name = 'trades'

    COLUMNS = HEADER_COLUMNS + (
        ColumnSpec('order_ref', 'uint64', 0),
        ColumnSpec('buy', 'bool', False),
        # uint64 because cross trades carry an 8-byte share count
        ColumnSpec('shares', 'uint64', 0),
        ColumnSpec('stock', 'U8', ''),
        ColumnSpec('price', 'float64', 0.0),
        ColumnSpec('match_number', 'uint64', 0),
        ColumnSpec('cross_type', 'U1', ' '),
    )

    LAYOUTS = {
        'P': FrameLayout('P', HEADER_FIELDS + (
            FieldSpec('order_ref', 11, 'uint', 8),
            FieldSpec('buy', 19, 'flag', true_byte='B'),
            FieldSpec('shares', 20, 'uint', 4),
            FieldSpec('stock', 24, 'alpha', 8),
            FieldSpec('price', 32, 'price'),
            FieldSpec('match_number', 36, 'uint', 8),
        )),
        'Q': FrameLayout('Q', HEADER_FIELDS + (
            FieldSpec('shares', 11, 'uint', 8),
            FieldSpec('stock', 19, 'alpha', 8),
            FieldSpec('price', 27, 'price'),
            FieldSpec('match_number', 31, 'uint', 8),
            FieldSpec('cross_type', 39, 'char'),
        )),
        'B': FrameLayout('B', HEADER_FIELDS + (
            FieldSpec('match_number', 11, 'uint', 8),
        )),
    }
