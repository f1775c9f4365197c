"""
Orders decoder: add-order messages.

Types:
- 'A': Add Order (no attribution)
- 'F': Add Order with market participant identifier (MPID)

Layout (36 bytes for 'A', 40 for 'F'):
    Byte 0:      type
    Bytes 1-2:   locate code
    Bytes 3-4:   tracking number
    Bytes 5-10:  timestamp (ns since midnight)
    Bytes 11-18: order reference
    Byte 19:     buy/sell indicator ('B' or 'S')
    Bytes 20-23: shares
    Bytes 24-31: stock symbol
    Bytes 32-35: price (4 implied decimals)
    Bytes 36-39: MPID ('F' only)
"""

from .base import ColumnSpec, FieldSpec, FrameLayout, HEADER_COLUMNS, HEADER_FIELDS, MessageDecoder


_ADD_ORDER_FIELDS = HEADER_FIELDS + (
    FieldSpec('order_ref', 11, 'uint', 8),
    FieldSpec('buy', 19, 'flag', true_byte='B'),
    FieldSpec('shares', 20, 'uint', 4),
    FieldSpec('stock', 24, 'alpha', 8),
    FieldSpec('price', 32, 'price'),
)


class Orders(MessageDecoder):
    """Decoder for add-order messages ('A', 'F')."""

    name = 'orders'

    COLUMNS = HEADER_COLUMNS + (
        ColumnSpec('order_ref', 'uint64', 0),
        ColumnSpec('buy', 'bool', False),
        ColumnSpec('shares', 'uint32', 0),
        ColumnSpec('stock', 'U8', ''),
        ColumnSpec('price', 'float64', 0.0),
        ColumnSpec('mpid', 'U4', ''),
    )

    LAYOUTS = {
        'A': FrameLayout('A', _ADD_ORDER_FIELDS),
        'F': FrameLayout('F', _ADD_ORDER_FIELDS + (
            FieldSpec('mpid', 36, 'alpha', 4),
        )),
    }
