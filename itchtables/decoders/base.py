"""
Base classes for message decoders.

A MessageDecoder turns raw ITCH frames into typed, column-oriented storage.
Concrete decoders (Orders, Trades, Modifications) only declare:

- COLUMNS: the output schema, one ColumnSpec per column (dtype + sentinel)
- LAYOUTS: one FrameLayout per accepted type code, listing which bytes feed
  which column

Columns a layout does not mention receive that column's sentinel, so every
retained frame appends exactly one value to every column.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..core.errors import AllocationError, DecodeDiagnostic, ErrorCode
from ..formats.codec import READERS_BY_WIDTH, read_alpha, read_char, read_flag, read_price4
from ..formats.message_types import MSG_SIZES, TYPE_SLOTS

logger = logging.getLogger(__name__)

FieldReader = Callable[[Any], Any]


@dataclass(frozen=True)
class ColumnSpec:
    """
    One output column.

    Attributes:
        name: Column name in the exported mapping
        dtype: numpy dtype string
        sentinel: Value written when a frame's sub-type has no such field
    """
    name: str
    dtype: str
    sentinel: Any


@dataclass(frozen=True)
class FieldSpec:
    """
    Where one column's value lives inside a frame.

    Kinds:
        char:  one byte as a one-character string
        uint:  big-endian unsigned integer of ``width`` 2/4/6/8
        alpha: ``width`` bytes as latin-1 text, right-space-trimmed
        price: 4-byte fixed-point price, divided by 10000
        flag:  True if the byte equals ``true_byte``
    """
    column: str
    offset: int
    kind: str
    width: int = 1
    true_byte: str = ''

    def end(self) -> int:
        if self.kind == 'price':
            return self.offset + 4
        return self.offset + self.width

    def reader(self) -> FieldReader:
        offset = self.offset

        if self.kind == 'char':
            return lambda buf: read_char(buf, offset)

        if self.kind == 'uint':
            read = READERS_BY_WIDTH[self.width]
            return lambda buf: read(buf, offset)

        if self.kind == 'alpha':
            width = self.width
            return lambda buf: read_alpha(buf, offset, width)

        if self.kind == 'price':
            return lambda buf: read_price4(buf, offset)

        if self.kind == 'flag':
            true_byte = self.true_byte
            return lambda buf: read_flag(buf, offset, true_byte)

        raise ValueError(f"Unknown field kind: {self.kind!r}")


@dataclass(frozen=True)
class FrameLayout:
    """Byte layout of one message sub-type."""
    type_code: str
    fields: Tuple[FieldSpec, ...]

    @property
    def size(self) -> int:
        return MSG_SIZES[self.type_code]

    def validate(self, columns: Sequence[ColumnSpec]) -> List[str]:
        """
        Check the layout against a schema.

        Returns:
            List of problems (empty if the layout is consistent).
        """
        errors = []
        names = {c.name for c in columns}
        seen = set()

        for spec in self.fields:
            if spec.column not in names:
                errors.append(f"{self.type_code}: unknown column {spec.column!r}")
            if spec.column in seen:
                errors.append(f"{self.type_code}: column {spec.column!r} mapped twice")
            seen.add(spec.column)
            if spec.end() > self.size:
                errors.append(
                    f"{self.type_code}: {spec.column} ends at byte {spec.end()}, "
                    f"frame is {self.size} bytes"
                )

        return errors

    def compile(self, columns: Sequence[ColumnSpec]) -> Tuple[FieldReader, ...]:
        """One reader per column, in schema order; sentinels fill the gaps."""
        by_column = {spec.column: spec for spec in self.fields}
        readers = []
        for column in columns:
            spec = by_column.get(column.name)
            if spec is None:
                readers.append(lambda buf, value=column.sentinel: value)
            else:
                readers.append(spec.reader())
        return tuple(readers)


# Fields common to every ITCH message
HEADER_COLUMNS = (
    ColumnSpec('msg_type', 'U1', ''),
    ColumnSpec('locate_code', 'uint16', 0),
    ColumnSpec('tracking_number', 'uint16', 0),
    ColumnSpec('timestamp', 'uint64', 0),
)

HEADER_FIELDS = (
    FieldSpec('msg_type', 0, 'char'),
    FieldSpec('locate_code', 1, 'uint', 2),
    FieldSpec('tracking_number', 3, 'uint', 2),
    FieldSpec('timestamp', 5, 'uint', 6),
)


class Column:
    """
    Append-only typed column backed by a numpy array.

    Capacity is reserved up front when the message count is known and grows
    geometrically otherwise.
    """

    MIN_GROWTH = 1024

    def __init__(self, spec: ColumnSpec):
        self.spec = spec
        self._data = np.empty(0, dtype=spec.dtype)
        self._size = 0

    def __len__(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        return len(self._data)

    def reserve(self, capacity: int) -> None:
        if capacity <= len(self._data):
            return
        grown = np.empty(capacity, dtype=self.spec.dtype)
        grown[:self._size] = self._data[:self._size]
        self._data = grown

    def append(self, value: Any) -> None:
        if self._size == len(self._data):
            self.reserve(max(self.MIN_GROWTH, 2 * len(self._data)))
        self._data[self._size] = value
        self._size += 1

    def values(self) -> np.ndarray:
        """Copy of the populated part, without spare capacity."""
        return self._data[:self._size].copy()


class MessageDecoder:
    """
    Base class for message decoders.

    Subclasses set ``name``, ``COLUMNS`` and ``LAYOUTS``. ``valid_types``
    defaults to the layout keys.

    Usage:
        decoder = Orders()
        decoder.set_boundaries(0, 99)
        for frame in frames:
            if not decoder.load_frame(frame):
                break
        columns = decoder.export_columns()
    """

    name: str = ''
    COLUMNS: Tuple[ColumnSpec, ...] = ()
    LAYOUTS: Dict[str, FrameLayout] = {}
    valid_types: Tuple[str, ...] = ()

    def __init__(self):
        if not self.valid_types:
            self.valid_types = tuple(self.LAYOUTS)

        problems = []
        for layout in self.LAYOUTS.values():
            problems.extend(layout.validate(self.COLUMNS))
        if problems:
            raise ValueError(f"Invalid layouts for {self.name}: {'; '.join(problems)}")

        self.columns: Dict[str, Column] = {spec.name: Column(spec) for spec in self.COLUMNS}
        self._column_list = list(self.columns.values())
        self._readers = {
            ord(code): layout.compile(self.COLUMNS)
            for code, layout in self.LAYOUTS.items()
        }
        self._valid_bytes = frozenset(ord(code) for code in self.valid_types)

        self.message_count = 0
        self.start_msg_count = 0
        self.end_msg_count: Optional[int] = None
        self.diagnostics: List[DecodeDiagnostic] = []

    def __len__(self) -> int:
        """Number of retained rows."""
        return len(self._column_list[0]) if self._column_list else 0

    @property
    def type_positions(self) -> List[int]:
        """Count-vector slots (type byte values) this decoder accepts."""
        return sorted(self._valid_bytes)

    @property
    def column_names(self) -> List[str]:
        return [spec.name for spec in self.COLUMNS]

    def count_valid_messages(self, counts: Sequence[int]) -> int:
        """Sum a per-type-byte count vector over this decoder's types."""
        if len(counts) != TYPE_SLOTS:
            raise ValueError(f"Count vector must have {TYPE_SLOTS} slots, got {len(counts)}")
        return sum(counts[pos] for pos in self.type_positions)

    def set_boundaries(self, start_msg_count: int = 0, end_msg_count: Optional[int] = None) -> None:
        """
        Set the inclusive window of message indices to retain.

        Args:
            start_msg_count: First message index kept (0-based)
            end_msg_count: Last message index kept, None for no limit
        """
        self.start_msg_count = start_msg_count
        self.end_msg_count = end_msg_count

    def reserve(self, size: int) -> None:
        """
        Reserve storage for ``size`` rows in every column.

        Raises:
            AllocationError: If the memory cannot be reserved
        """
        try:
            for column in self._column_list:
                column.reserve(size)
        except (MemoryError, ValueError) as e:
            raise AllocationError(size, str(e) or type(e).__name__) from e

    def load_frame(self, frame) -> bool:
        """
        Decode one frame into the columns if it is in the window.

        Args:
            frame: Buffer holding exactly one frame, type byte first

        Returns:
            False once the window end has been passed and loading can stop,
            True otherwise
        """
        type_byte = frame[0]
        if type_byte not in self._valid_bytes:
            return True

        # Frames without a layout never take a message index
        readers = self._readers.get(type_byte)
        if readers is None:
            self._unrecognized(type_byte)
            return True

        if self.message_count < self.start_msg_count:
            self.message_count += 1
            return True

        end = self.end_msg_count
        if end is not None and self.message_count > end:
            return False

        # Read everything before appending so a bad field can't leave
        # columns at different lengths
        values = [read(frame) for read in readers]
        for column, value in zip(self._column_list, values):
            column.append(value)

        self.message_count += 1
        return end is None or self.message_count <= end

    def export_columns(self) -> Dict[str, np.ndarray]:
        """Column name -> populated values, all of equal length."""
        return {name: column.values() for name, column in self.columns.items()}

    def _unrecognized(self, type_byte: int) -> None:
        diagnostic = DecodeDiagnostic(
            code=ErrorCode.E1003_UNRECOGNIZED_TYPE,
            context={'type': chr(type_byte), 'decoder': self.name},
        )
        self.diagnostics.append(diagnostic)
        logger.warning(f"Unknown type {chr(type_byte)!r} in {self.name} decoder, frame skipped")
