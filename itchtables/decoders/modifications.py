"""
Modifications decoder: messages that change a resting order.

Types:
- 'E': Order executed
- 'C': Order executed with price
- 'X': Order cancel (partial)
- 'D': Order delete
- 'U': Order replace

Every type carries the order reference at bytes 11-18. For 'U' that is the
reference of the order being replaced; the replacement's reference goes to
new_order_ref.
"""

from .base import ColumnSpec, FieldSpec, FrameLayout, HEADER_COLUMNS, HEADER_FIELDS, MessageDecoder


_ORDER_FIELDS = HEADER_FIELDS + (
    FieldSpec('order_ref', 11, 'uint', 8),
)


class Modifications(MessageDecoder):
    """Decoder for order modification messages ('E', 'C', 'X', 'D', 'U')."""

    name = 'modifications'

    COLUMNS = HEADER_COLUMNS + (
        ColumnSpec('order_ref', 'uint64', 0),
        ColumnSpec('shares', 'uint32', 0),
        ColumnSpec('match_number', 'uint64', 0),
        ColumnSpec('printable', 'bool', False),
        ColumnSpec('price', 'float64', 0.0),
        ColumnSpec('new_order_ref', 'uint64', 0),
    )

    LAYOUTS = {
        # executed shares
        'E': FrameLayout('E', _ORDER_FIELDS + (
            FieldSpec('shares', 19, 'uint', 4),
            FieldSpec('match_number', 23, 'uint', 8),
        )),
        'C': FrameLayout('C', _ORDER_FIELDS + (
            FieldSpec('shares', 19, 'uint', 4),
            FieldSpec('match_number', 23, 'uint', 8),
            FieldSpec('printable', 31, 'flag', true_byte='Y'),
            FieldSpec('price', 32, 'price'),
        )),
        # cancelled shares
        'X': FrameLayout('X', _ORDER_FIELDS + (
            FieldSpec('shares', 19, 'uint', 4),
        )),
        'D': FrameLayout('D', _ORDER_FIELDS),
        'U': FrameLayout('U', _ORDER_FIELDS + (
            FieldSpec('new_order_ref', 19, 'uint', 8),
            FieldSpec('shares', 27, 'uint', 4),
            FieldSpec('price', 31, 'price'),
        )),
    }
