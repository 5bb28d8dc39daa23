"""Read cursor over a cell's bits and references."""

from ..core.exceptions import FormatError, UnderflowError, ValidationError
from .cell import Cell


class Slice:
    """Sequential reader over one cell. Obtain through Cell.begin_parse()."""

    def __init__(self, cell: Cell):
        self._cell = cell
        self._value = int.from_bytes(cell.data, "big")
        self._padded_bits = len(cell.data) * 8
        self._bit_pos = 0
        self._ref_pos = 0

    @property
    def cell(self) -> Cell:
        return self._cell

    @property
    def remaining_bits(self) -> int:
        return self._cell.bit_length - self._bit_pos

    @property
    def remaining_refs(self) -> int:
        return len(self._cell.refs) - self._ref_pos

    def preload_uint(self, width: int) -> int:
        """Read `width` bits without advancing."""
        if not isinstance(width, int) or width < 0:
            raise ValidationError("width", str(width), "must be a non-negative integer")
        if width > self.remaining_bits:
            raise UnderflowError("bits", width, self.remaining_bits)
        if width == 0:
            return 0

        shift = self._padded_bits - self._bit_pos - width
        return (self._value >> shift) & ((1 << width) - 1)

    def load_uint(self, width: int) -> int:
        """
        Read `width` bits as an unsigned integer, most significant bit first.

        Raises:
            UnderflowError: If fewer than `width` bits remain
        """
        value = self.preload_uint(width)
        self._bit_pos += width
        return value

    def load_bit(self) -> bool:
        return bool(self.load_uint(1))

    def load_bytes(self, size: int) -> bytes:
        return self.load_uint(size * 8).to_bytes(size, "big")

    def load_ref(self) -> Cell:
        """
        Return the next unread child reference.

        Raises:
            UnderflowError: If no references remain
        """
        if self.remaining_refs < 1:
            raise UnderflowError("refs", 1, 0)
        ref = self._cell.refs[self._ref_pos]
        self._ref_pos += 1
        return ref

    def load_string_tail(self) -> str:
        """
        Read the rest of this slice as UTF-8, following the single-ref chain.

        Raises:
            FormatError: If a link is not byte aligned, branches, or the bytes
                are not valid UTF-8
        """
        chunks: list[bytes] = []
        current = self
        while True:
            if current.remaining_bits % 8:
                raise FormatError(
                    "string tail", f"{current.remaining_bits} bits is not whole bytes"
                )
            chunks.append(current.load_bytes(current.remaining_bits // 8))

            refs = current.remaining_refs
            if refs == 0:
                break
            if refs > 1:
                raise FormatError("string tail", f"chain cell has {refs} references")
            current = current.load_ref().begin_parse()

        try:
            return b"".join(chunks).decode("utf-8")
        except UnicodeDecodeError as e:
            raise FormatError("string tail", f"invalid UTF-8: {e}") from e

    def end_parse(self) -> None:
        """Fail unless every bit and reference has been consumed."""
        if self.remaining_bits or self.remaining_refs:
            raise FormatError(
                "cell",
                f"{self.remaining_bits} bits and {self.remaining_refs} refs left unread",
            )

    def __repr__(self) -> str:
        return (
            f"Slice(bits={self._bit_pos}/{self._cell.bit_length}, "
            f"refs={self._ref_pos}/{len(self._cell.refs)})"
        )
