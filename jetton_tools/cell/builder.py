"""Cell builder: accumulates bits MSB first and child references."""

import logging

from ..core.exceptions import CapacityExceededError, ValidationError
from ..core.types import MAX_CELL_BITS, MAX_CELL_REFS
from .cell import Cell

logger = logging.getLogger(__name__)

# Whole bytes that fit in an otherwise empty cell
BYTES_PER_CELL = MAX_CELL_BITS // 8


class Builder:
    """Mutable writer for a single cell.

    Every store method either applies completely or raises and leaves the
    builder unchanged. Store methods return the builder so calls can chain.
    """

    def __init__(self) -> None:
        self._value = 0
        self._bit_length = 0
        self._refs: list[Cell] = []

    @property
    def bits(self) -> int:
        return self._bit_length

    @property
    def refs(self) -> int:
        return len(self._refs)

    @property
    def available_bits(self) -> int:
        return MAX_CELL_BITS - self._bit_length

    @property
    def available_refs(self) -> int:
        return MAX_CELL_REFS - len(self._refs)

    def store_uint(self, value: int, width: int) -> "Builder":
        """
        Append an unsigned integer as `width` bits, most significant bit first.

        Raises:
            ValidationError: If value is negative or does not fit in width bits
            CapacityExceededError: If the cell would exceed 1023 bits
        """
        if not isinstance(width, int) or width < 0:
            raise ValidationError("width", str(width), "must be a non-negative integer")
        if not isinstance(value, int) or value < 0:
            raise ValidationError("value", str(value), "must be a non-negative integer")
        if value.bit_length() > width:
            raise ValidationError("value", str(value), f"does not fit in {width} bits")
        if self._bit_length + width > MAX_CELL_BITS:
            raise CapacityExceededError("bits", self._bit_length + width, MAX_CELL_BITS)

        self._value = (self._value << width) | value
        self._bit_length += width
        return self

    def store_bit(self, bit: bool | int) -> "Builder":
        return self.store_uint(1 if bit else 0, 1)

    def store_bytes(self, data: bytes) -> "Builder":
        if not data:
            return self
        return self.store_uint(int.from_bytes(data, "big"), len(data) * 8)

    def store_ref(self, cell: Cell) -> "Builder":
        """
        Append a child reference.

        Raises:
            CapacityExceededError: On a 5th reference
        """
        if not isinstance(cell, Cell):
            raise ValidationError("cell", repr(cell), "references must be cells")
        if len(self._refs) >= MAX_CELL_REFS:
            raise CapacityExceededError("refs", len(self._refs) + 1, MAX_CELL_REFS)

        self._refs.append(cell)
        return self

    def store_string_tail(self, text: str) -> "Builder":
        """
        Store a UTF-8 string, chaining into child cells when it does not fit.

        As many whole bytes as fit go into this builder; the rest is split
        across a chain of cells, each holding up to 127 bytes and a reference
        to the next.
        """
        data = _utf8(text)
        head_size = self.available_bits // 8
        head, rest = data[:head_size], data[head_size:]

        tail = _chain_cells(rest)
        if tail is not None:
            self.store_ref(tail)
        self.store_bytes(head)
        return self

    def store_string_ref_tail(self, text: str) -> "Builder":
        """Store a reference to a fresh cell holding the string tail."""
        return self.store_ref(Builder().store_string_tail(text).end_cell())

    def end_cell(self) -> Cell:
        """Finalize into an immutable cell. The builder stays usable."""
        pad = (-self._bit_length) % 8
        size = (self._bit_length + 7) // 8
        data = (self._value << pad).to_bytes(size, "big")
        return Cell(data, self._bit_length, self._refs)

    def __repr__(self) -> str:
        return f"Builder(bits={self._bit_length}, refs={len(self._refs)})"


def begin_cell() -> Builder:
    """Return an empty builder."""
    return Builder()


def _utf8(text: str) -> bytes:
    if not isinstance(text, str):
        raise ValidationError("text", repr(text), "must be a string")
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValidationError("text", repr(text), f"not encodable as UTF-8: {e}") from e


def _chain_cells(data: bytes) -> Cell | None:
    """Pack bytes into a linked chain of cells, returning the head."""
    if not data:
        return None

    chunks = [data[i : i + BYTES_PER_CELL] for i in range(0, len(data), BYTES_PER_CELL)]
    logger.debug(f"Chaining {len(data)} bytes across {len(chunks)} cells")

    head = None
    for chunk in reversed(chunks):
        builder = Builder().store_bytes(chunk)
        if head is not None:
            builder.store_ref(head)
        head = builder.end_cell()
    return head
