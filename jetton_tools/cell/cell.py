"""Immutable cell: up to 1023 data bits and up to 4 child references.

The cell hash is the ledger's representation hash of an ordinary cell:

    sha256(d1 | d2 | padded data | child depths | child hashes)

    d1 = number of references
    d2 = ceil(bits / 8) + floor(bits / 8)
    padded data = data bits, then (if not byte aligned) a single 1 bit
                  followed by 0 bits up to the byte boundary
    child depth = 2 bytes big-endian, child hash = 32 bytes, in ref order
    depth is therefore capped at 65535

Two cells with the same bits and the same child hashes in the same order
have the same hash and are interchangeable.
"""

import hashlib
from typing import TYPE_CHECKING, Sequence

from ..core.exceptions import CapacityExceededError, ValidationError
from ..core.types import MAX_CELL_BITS, MAX_CELL_DEPTH, MAX_CELL_REFS

if TYPE_CHECKING:
    from .slice import Slice


class Cell:
    """A finalized cell. Construct through Builder.end_cell()."""

    __slots__ = ("_data", "_bit_length", "_refs", "_depth", "_hash")

    def __init__(self, data: bytes = b"", bit_length: int = 0, refs: Sequence["Cell"] = ()):
        """
        Create a cell.

        Args:
            data: Bits packed MSB first, zero padded to a byte boundary
            bit_length: Number of meaningful bits in data
            refs: Ordered child cells
        """
        if bit_length < 0:
            raise ValidationError("bit_length", str(bit_length), "must be non-negative")
        if bit_length > MAX_CELL_BITS:
            raise CapacityExceededError("bits", bit_length, MAX_CELL_BITS)
        if len(refs) > MAX_CELL_REFS:
            raise CapacityExceededError("refs", len(refs), MAX_CELL_REFS)
        if len(data) != (bit_length + 7) // 8:
            raise ValidationError(
                "data", data.hex(), f"expected {(bit_length + 7) // 8} bytes for {bit_length} bits"
            )
        pad = len(data) * 8 - bit_length
        if pad and int.from_bytes(data, "big") & ((1 << pad) - 1):
            raise ValidationError("data", data.hex(), "padding bits must be zero")
        for ref in refs:
            if not isinstance(ref, Cell):
                raise ValidationError("refs", repr(ref), "references must be cells")

        depth = 1 + max(ref.depth for ref in refs) if refs else 0
        if depth > MAX_CELL_DEPTH:
            raise CapacityExceededError("depth", depth, MAX_CELL_DEPTH)

        self._data = bytes(data)
        self._bit_length = bit_length
        self._refs = tuple(refs)
        self._depth = depth
        self._hash = hashlib.sha256(self._representation()).digest()

    def _representation(self) -> bytes:
        n = self._bit_length
        d1 = len(self._refs)
        d2 = (n + 7) // 8 + n // 8

        padded = self._data
        if n % 8:
            pad = 8 - n % 8
            value = int.from_bytes(self._data, "big") | (1 << (pad - 1))
            padded = value.to_bytes(len(self._data), "big")

        parts = [bytes([d1, d2]), padded]
        parts.extend(ref.depth.to_bytes(2, "big") for ref in self._refs)
        parts.extend(ref.hash for ref in self._refs)
        return b"".join(parts)

    @property
    def bit_length(self) -> int:
        return self._bit_length

    @property
    def data(self) -> bytes:
        """Data bits, zero padded to a whole number of bytes."""
        return self._data

    @property
    def refs(self) -> tuple["Cell", ...]:
        return self._refs

    @property
    def depth(self) -> int:
        """Longest path to a leaf; 0 for a cell without references."""
        return self._depth

    @property
    def hash(self) -> bytes:
        return self._hash

    @property
    def hash_hex(self) -> str:
        return self._hash.hex()

    def bit_string(self) -> str:
        """Data bits as a string of '0' and '1'."""
        if not self._bit_length:
            return ""
        value = int.from_bytes(self._data, "big") >> (len(self._data) * 8 - self._bit_length)
        return format(value, f"0{self._bit_length}b")

    def begin_parse(self) -> "Slice":
        """Open a read cursor at the first bit and first reference."""
        from .slice import Slice

        return Slice(self)

    def describe(self, indent: int = 0) -> str:
        """Render the tree, one cell per line."""
        pad = "  " * indent
        lines = [f"{pad}{self._bit_length}[{self._data.hex().upper()}] refs={len(self._refs)}"]
        for ref in self._refs:
            lines.append(ref.describe(indent + 1))
        return "\n".join(lines)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return self._hash == other._hash

    def __hash__(self) -> int:
        return int.from_bytes(self._hash[:8], "big")

    def __repr__(self) -> str:
        return (
            f"Cell(bits={self._bit_length}, refs={len(self._refs)}, "
            f"hash={self.hash_hex[:16]})"
        )
