"""Pytest fixtures and frame builders for itchtables tests."""

import struct
from pathlib import Path
from typing import List, Sequence

import pytest

from itchtables.formats.message_types import MSG_SIZES


def _header(code: str, locate: int = 1, tracking: int = 0, timestamp: int = 0) -> bytes:
    return code.encode('ascii') + struct.pack('>HH', locate, tracking) + timestamp.to_bytes(6, 'big')


def _alpha(value: str, width: int) -> bytes:
    return value.ljust(width).encode('ascii')


def _checked(frame: bytes) -> bytes:
    code = chr(frame[0])
    assert len(frame) == MSG_SIZES[code], f"{code} frame is {len(frame)} bytes"
    return frame


def system_event(event: str = 'O', **header) -> bytes:
    return _checked(_header('S', **header) + event.encode('ascii'))


def add_order(ref: int = 100, side: str = 'B', shares: int = 500, stock: str = 'AAPL',
              price: int = 1500000, mpid: str = None, **header) -> bytes:
    code = 'A' if mpid is None else 'F'
    frame = (
        _header(code, **header)
        + struct.pack('>Q', ref)
        + side.encode('ascii')
        + struct.pack('>I', shares)
        + _alpha(stock, 8)
        + struct.pack('>I', price)
    )
    if mpid is not None:
        frame += _alpha(mpid, 4)
    return _checked(frame)


def trade(ref: int = 7, side: str = 'S', shares: int = 100, stock: str = 'MSFT',
          price: int = 2500000, match: int = 9001, **header) -> bytes:
    return _checked(
        _header('P', **header)
        + struct.pack('>Q', ref)
        + side.encode('ascii')
        + struct.pack('>I', shares)
        + _alpha(stock, 8)
        + struct.pack('>I', price)
        + struct.pack('>Q', match)
    )


def cross_trade(shares: int = 10000, stock: str = 'QQQ', price: int = 3000000,
                match: int = 9002, cross_type: str = 'O', **header) -> bytes:
    return _checked(
        _header('Q', **header)
        + struct.pack('>Q', shares)
        + _alpha(stock, 8)
        + struct.pack('>I', price)
        + struct.pack('>Q', match)
        + cross_type.encode('ascii')
    )


def broken_trade(match: int = 9003, **header) -> bytes:
    return _checked(_header('B', **header) + struct.pack('>Q', match))


def order_executed(ref: int = 100, shares: int = 200, match: int = 501, **header) -> bytes:
    return _checked(_header('E', **header) + struct.pack('>QIQ', ref, shares, match))


def order_executed_price(ref: int = 100, shares: int = 50, match: int = 502,
                         printable: str = 'Y', price: int = 1499900, **header) -> bytes:
    return _checked(
        _header('C', **header)
        + struct.pack('>QIQ', ref, shares, match)
        + printable.encode('ascii')
        + struct.pack('>I', price)
    )


def order_cancel(ref: int = 100, shares: int = 25, **header) -> bytes:
    return _checked(_header('X', **header) + struct.pack('>QI', ref, shares))


def order_delete(ref: int = 100, **header) -> bytes:
    return _checked(_header('D', **header) + struct.pack('>Q', ref))


def order_replace(ref: int = 100, new_ref: int = 101, shares: int = 300,
                  price: int = 1510000, **header) -> bytes:
    return _checked(_header('U', **header) + struct.pack('>QQII', ref, new_ref, shares, price))


def write_feed(path: Path, frames: Sequence[bytes], prefixed: bool = False) -> Path:
    """Write frames back to back, optionally with 2-byte length prefixes."""
    with open(path, 'wb') as f:
        for frame in frames:
            if prefixed:
                f.write(struct.pack('>H', len(frame)))
            f.write(frame)
    return path


def build_session(n_rounds: int = 20) -> List[bytes]:
    """
    A deterministic mix of every message family.

    Each round holds 2 orders, 2 trades, 5 modifications and one system
    event, with fields varying by round.
    """
    frames = [system_event('O', timestamp=1)]
    for i in range(n_rounds):
        ts = 34_200_000_000_000 + i * 1_000
        ref = 1000 + 2 * i
        frames.extend([
            add_order(ref=ref, side='B' if i % 2 else 'S', shares=100 + i, stock='AAPL',
                      price=1500000 + i, locate=i, tracking=i, timestamp=ts),
            add_order(ref=ref + 1, shares=200 + i, stock='MSFT', price=2500000 + i,
                      mpid='GSCO', timestamp=ts + 1),
            order_executed(ref=ref, shares=10 + i, match=5000 + i, timestamp=ts + 2),
            trade(ref=ref, shares=5 + i, match=6000 + i, timestamp=ts + 3),
            order_executed_price(ref=ref + 1, shares=20 + i, match=7000 + i,
                                 printable='Y' if i % 3 else 'N', timestamp=ts + 4),
            order_cancel(ref=ref + 1, shares=i, timestamp=ts + 5),
            cross_trade(shares=100000 + i, match=8000 + i, timestamp=ts + 6),
            order_replace(ref=ref, new_ref=ref + 10_000, shares=300 + i, timestamp=ts + 7),
            order_delete(ref=ref + 10_000, timestamp=ts + 8),
            broken_trade(match=6000 + i, timestamp=ts + 9),
        ])
    frames.append(system_event('C', timestamp=2))
    return frames


@pytest.fixture
def session_frames() -> List[bytes]:
    return build_session()


@pytest.fixture
def feed_file(tmp_path: Path, session_frames) -> Path:
    """Raw-framed capture with a date in its name."""
    return write_feed(tmp_path / '20170130.PSX_ITCH_50', session_frames)


@pytest.fixture
def prefixed_feed_file(tmp_path: Path, session_frames) -> Path:
    """Length-prefixed capture of the same frames."""
    return write_feed(tmp_path / '20170130.PSX_ITCH_50.prefixed', session_frames, prefixed=True)


@pytest.fixture
def single_order_file(tmp_path: Path) -> Path:
    return write_feed(tmp_path / 'single.itch', [add_order()])
