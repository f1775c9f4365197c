"""
Tests for the message decoders.

CRITICAL TESTS:
1. test_single_add_order - Field-by-field decode of an 'A' frame
2. test_broken_trade_sentinels - Inapplicable fields hold sentinels
3. test_columns_stay_aligned - Every column grows by one per retained frame
"""

import numpy as np
import pytest

from itchtables.core.errors import AllocationError, ErrorCode
from itchtables.decoders import DECODERS, Modifications, Orders, Trades, get_decoder
from itchtables.decoders.base import ColumnSpec, FieldSpec, FrameLayout, MessageDecoder
from itchtables.formats.message_types import TYPE_SLOTS

from conftest import (
    add_order,
    broken_trade,
    cross_trade,
    order_cancel,
    order_delete,
    order_executed,
    order_executed_price,
    order_replace,
    system_event,
    trade,
)


def decode(decoder: MessageDecoder, *frames) -> dict:
    for frame in frames:
        assert decoder.load_frame(frame)
    return decoder.export_columns()


def row(columns: dict, i: int = 0) -> dict:
    return {name: values[i].item() for name, values in columns.items()}


class TestOrders:
    """Test add-order decoding."""

    def test_single_add_order(self):
        """'A' frame decodes to the documented row."""
        frame = add_order(ref=100, side='B', shares=500, stock='AAPL', price=1500000,
                          locate=1, tracking=0, timestamp=0)
        r = row(decode(Orders(), frame))

        assert r == {
            'msg_type': 'A',
            'locate_code': 1,
            'tracking_number': 0,
            'timestamp': 0,
            'order_ref': 100,
            'buy': True,
            'shares': 500,
            'stock': 'AAPL',
            'price': 150.0,
            'mpid': '',
        }

    def test_add_order_mpid(self):
        r = row(decode(Orders(), add_order(side='S', mpid='GS', stock='BRK A')))

        assert r['msg_type'] == 'F'
        assert r['mpid'] == 'GS'
        assert r['buy'] is False
        assert r['stock'] == 'BRK A'

    def test_non_ascii_symbol_byte(self):
        """A stray high byte in the symbol is kept, not fatal."""
        frame = bytearray(add_order(stock='AAPL'))
        frame[28] = 0xC9
        r = row(decode(Orders(), bytes(frame)))

        assert r['stock'] == 'AAPL\xc9'
        assert r['price'] == 150.0

    def test_large_fields(self):
        """48-bit timestamps and 64-bit references survive intact."""
        frame = add_order(ref=2 ** 64 - 1, timestamp=2 ** 48 - 1, locate=65535)
        r = row(decode(Orders(), frame))

        assert r['order_ref'] == 2 ** 64 - 1
        assert r['timestamp'] == 2 ** 48 - 1
        assert r['locate_code'] == 65535

    def test_ignores_other_types(self):
        decoder = Orders()
        assert decoder.load_frame(trade())
        assert decoder.load_frame(system_event())
        assert len(decoder) == 0
        assert decoder.message_count == 0

    def test_dtypes(self):
        columns = decode(Orders(), add_order())
        assert columns['order_ref'].dtype == np.uint64
        assert columns['shares'].dtype == np.uint32
        assert columns['locate_code'].dtype == np.uint16
        assert columns['buy'].dtype == np.bool_
        assert columns['price'].dtype == np.float64


class TestTrades:
    """Test trade decoding."""

    def test_non_cross_trade(self):
        r = row(decode(Trades(), trade(ref=7, side='B', shares=100, stock='MSFT',
                                       price=2500000, match=9001)))

        assert r['msg_type'] == 'P'
        assert r['order_ref'] == 7
        assert r['buy'] is True
        assert r['shares'] == 100
        assert r['stock'] == 'MSFT'
        assert r['price'] == 250.0
        assert r['match_number'] == 9001
        assert r['cross_type'] == ' '

    def test_cross_trade(self):
        """'Q' puts the cross price in price and has no order reference."""
        r = row(decode(Trades(), cross_trade(shares=5_000_000_000, stock='QQQ',
                                             price=3000000, match=9002, cross_type='C')))

        assert r['msg_type'] == 'Q'
        assert r['shares'] == 5_000_000_000
        assert r['stock'] == 'QQQ'
        assert r['price'] == 300.0
        assert r['match_number'] == 9002
        assert r['cross_type'] == 'C'
        assert r['order_ref'] == 0
        assert r['buy'] is False

    def test_broken_trade_sentinels(self):
        """'B' only carries a match number."""
        r = row(decode(Trades(), broken_trade(match=9003, locate=3, timestamp=77)))

        assert r['msg_type'] == 'B'
        assert r['match_number'] == 9003
        assert r['locate_code'] == 3
        assert r['timestamp'] == 77
        assert r['order_ref'] == 0
        assert r['buy'] is False
        assert r['shares'] == 0
        assert r['stock'] == ''
        assert r['price'] == 0.0
        assert r['cross_type'] == ' '

    def test_unrecognized_subtype_is_skipped(self):
        """A type that passes the filter but has no layout is reported, not decoded."""

        class WideTrades(Trades):
            valid_types = ('P', 'Q', 'B', 'S')

        decoder = WideTrades()
        assert decoder.load_frame(system_event())
        assert decoder.load_frame(trade())

        assert len(decoder) == 1
        assert decoder.message_count == 1
        assert len(decoder.diagnostics) == 1
        diag = decoder.diagnostics[0]
        assert diag.code == ErrorCode.E1003_UNRECOGNIZED_TYPE
        assert diag.recoverable
        assert diag.context['type'] == 'S'

    def test_unrecognized_subtype_takes_no_index(self):
        """Frames without a layout never shift the window, wherever it starts."""

        class WideTrades(Trades):
            valid_types = ('P', 'Q', 'B', 'S')

        decoder = WideTrades()
        decoder.set_boundaries(1, 1)
        results = [decoder.load_frame(f) for f in (system_event(), trade(ref=1), trade(ref=2), trade(ref=3))]

        assert list(decoder.export_columns()['order_ref']) == [2]
        assert results == [True, True, False, False]
        assert len(decoder.diagnostics) == 1


class TestModifications:
    """Test order modification decoding."""

    def test_executed(self):
        r = row(decode(Modifications(), order_executed(ref=100, shares=200, match=501)))

        assert (r['msg_type'], r['order_ref'], r['shares'], r['match_number']) == ('E', 100, 200, 501)
        assert r['printable'] is False
        assert r['price'] == 0.0
        assert r['new_order_ref'] == 0

    def test_executed_with_price(self):
        r = row(decode(Modifications(), order_executed_price(
            ref=100, shares=50, match=502, printable='Y', price=1499900)))

        assert r['msg_type'] == 'C'
        assert r['shares'] == 50
        assert r['match_number'] == 502
        assert r['printable'] is True
        assert r['price'] == 149.99
        assert r['new_order_ref'] == 0

    def test_non_printable_execution(self):
        r = row(decode(Modifications(), order_executed_price(printable='N')))
        assert r['printable'] is False

    def test_cancel(self):
        r = row(decode(Modifications(), order_cancel(ref=100, shares=25)))

        assert (r['msg_type'], r['order_ref'], r['shares']) == ('X', 100, 25)
        assert r['match_number'] == 0
        assert r['price'] == 0.0

    def test_delete(self):
        """'D' carries only the order reference."""
        r = row(decode(Modifications(), order_delete(ref=42)))

        assert r['msg_type'] == 'D'
        assert r['order_ref'] == 42
        assert r['shares'] == 0
        assert r['match_number'] == 0
        assert r['printable'] is False
        assert r['price'] == 0.0
        assert r['new_order_ref'] == 0

    def test_replace(self):
        """order_ref is the replaced order, new_order_ref the replacement."""
        r = row(decode(Modifications(), order_replace(ref=100, new_ref=101, shares=300,
                                                      price=1510000)))

        assert r['msg_type'] == 'U'
        assert r['order_ref'] == 100
        assert r['new_order_ref'] == 101
        assert r['shares'] == 300
        assert r['price'] == 151.0
        assert r['match_number'] == 0


class TestWindow:
    """Test index window handling inside a decoder."""

    def test_skips_before_start(self):
        decoder = Orders()
        decoder.set_boundaries(2, None)
        for ref in range(5):
            assert decoder.load_frame(add_order(ref=ref))

        assert list(decoder.export_columns()['order_ref']) == [2, 3, 4]
        assert decoder.message_count == 5

    def test_stops_after_end(self):
        """load_frame signals termination once the last wanted row is in."""
        decoder = Orders()
        decoder.set_boundaries(1, 2)

        results = [decoder.load_frame(add_order(ref=ref)) for ref in range(5)]

        assert results == [True, True, False, False, False]
        assert list(decoder.export_columns()['order_ref']) == [1, 2]

    def test_other_types_do_not_advance_window(self):
        decoder = Orders()
        decoder.set_boundaries(0, 0)

        assert decoder.load_frame(trade())
        assert decoder.load_frame(order_delete())
        assert decoder.load_frame(add_order(ref=9)) is False
        assert list(decoder.export_columns()['order_ref']) == [9]

    def test_columns_stay_aligned(self):
        decoder = Trades()
        frames = [trade(), cross_trade(), broken_trade(), trade()]
        for i, frame in enumerate(frames, start=1):
            decoder.load_frame(frame)
            assert {len(c) for c in decoder.columns.values()} == {i}

    def test_determinism(self):
        frames = [order_executed(), order_executed_price(), order_cancel(),
                  order_delete(), order_replace()]
        first = decode(Modifications(), *frames)
        second = decode(Modifications(), *frames)

        for name in first:
            np.testing.assert_array_equal(first[name], second[name])


class TestDecoderBasics:
    """Test reservation, counting and the registry."""

    def test_count_valid_messages(self):
        counts = [0] * TYPE_SLOTS
        for code, n in {'A': 3, 'F': 2, 'P': 7, 'E': 11, 'S': 1}.items():
            counts[ord(code)] = n

        assert Orders().count_valid_messages(counts) == 5
        assert Trades().count_valid_messages(counts) == 7
        assert Modifications().count_valid_messages(counts) == 11

    def test_count_vector_size(self):
        with pytest.raises(ValueError):
            Orders().count_valid_messages([0] * 10)

    def test_type_positions(self):
        assert Orders().type_positions == [ord('A'), ord('F')]
        assert Trades().type_positions == sorted(ord(c) for c in 'PQB')

    def test_reserve(self):
        decoder = Orders()
        decoder.reserve(1000)
        assert all(c.capacity >= 1000 for c in decoder.columns.values())
        assert len(decoder) == 0

    def test_reserve_failure(self):
        """Impossible reservations surface as AllocationError."""
        with pytest.raises(AllocationError) as exc_info:
            Orders().reserve(2 ** 62)
        assert exc_info.value.requested == 2 ** 62

    def test_growth_without_reserve(self):
        decoder = Orders()
        for ref in range(3000):
            decoder.load_frame(add_order(ref=ref))
        assert len(decoder) == 3000
        assert decoder.export_columns()['order_ref'][-1] == 2999

    def test_registry(self):
        assert set(DECODERS) == {'orders', 'trades', 'modifications'}
        assert isinstance(get_decoder('trades'), Trades)
        with pytest.raises(ValueError, match="Unknown decoder"):
            get_decoder('quotes')


class TestLayouts:
    """Test the declarative layout tables."""

    @pytest.mark.parametrize("decoder_cls", [Orders, Trades, Modifications])
    def test_layouts_fit_frames(self, decoder_cls):
        for layout in decoder_cls.LAYOUTS.values():
            assert layout.validate(decoder_cls.COLUMNS) == []

    def test_layout_overrun_detected(self):
        columns = (ColumnSpec('x', 'uint64', 0),)
        layout = FrameLayout('D', (FieldSpec('x', 15, 'uint', 8),))

        errors = layout.validate(columns)
        assert any('ends at byte 23' in e for e in errors)

    def test_invalid_layout_rejected_at_construction(self):

        class Broken(MessageDecoder):
            name = 'broken'
            COLUMNS = (ColumnSpec('x', 'uint64', 0),)
            LAYOUTS = {'D': FrameLayout('D', (FieldSpec('y', 11, 'uint', 8),))}

        with pytest.raises(ValueError, match="unknown column"):
            Broken()
