"""Keyed content dictionary serialized as an ordered list of entry cells.

Each entry is one cell holding the 256-bit key followed by exactly one
reference to the value cell. Entries hang off a chain of list nodes:

    list node = has_next:1 bit, entry refs..., [next node ref]

A node without a successor holds up to 4 entries; a node with one holds up
to 3 entries and the successor as its last reference. Entries keep
insertion order.
"""

import hashlib
import logging
from typing import Iterator

from ..core.exceptions import DuplicateKeyError, FormatError, ValidationError
from ..core.types import DICT_KEY_BITS, MAX_CELL_REFS
from .builder import Builder
from .cell import Cell

logger = logging.getLogger(__name__)


def key_for(name: str) -> int:
    """Dictionary key for a field name: SHA-256 of its UTF-8 bytes, big-endian."""
    return int.from_bytes(hashlib.sha256(name.encode("utf-8")).digest(), "big")


class ContentDictionary:
    """Ordered association of 256-bit keys to value cells."""

    def __init__(self) -> None:
        self._entries: dict[int, Cell] = {}

    def insert(self, key: int, value: Cell) -> None:
        """
        Add an entry.

        Raises:
            ValidationError: If key is not a 256-bit unsigned integer
            DuplicateKeyError: If key is already present
        """
        if not isinstance(key, int) or key < 0 or key.bit_length() > DICT_KEY_BITS:
            raise ValidationError("key", str(key), "must be a 256-bit unsigned integer")
        if not isinstance(value, Cell):
            raise ValidationError("value", repr(value), "must be a cell")
        if key in self._entries:
            raise DuplicateKeyError(key)
        self._entries[key] = value

    def lookup(self, key: int) -> Cell | None:
        """Return the value for key, or None if it was never inserted."""
        return self._entries.get(key)

    def keys(self) -> list[int]:
        return list(self._entries)

    def items(self) -> list[tuple[int, Cell]]:
        return list(self._entries.items())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[int]:
        return iter(self._entries)

    def serialize(self) -> Cell:
        """Serialize to the root list node."""
        entries = [
            Builder().store_uint(key, DICT_KEY_BITS).store_ref(value).end_cell()
            for key, value in self._entries.items()
        ]

        groups: list[list[Cell]] = []
        rest = entries
        while len(rest) > MAX_CELL_REFS:
            groups.append(rest[: MAX_CELL_REFS - 1])
            rest = rest[MAX_CELL_REFS - 1 :]
        groups.append(rest)

        node = None
        for group in reversed(groups):
            builder = Builder().store_bit(node is not None)
            for entry in group:
                builder.store_ref(entry)
            if node is not None:
                builder.store_ref(node)
            node = builder.end_cell()

        logger.debug(f"Serialized dictionary: {len(entries)} entries, {len(groups)} nodes")
        return node

    @classmethod
    def deserialize(cls, cell: Cell) -> "ContentDictionary":
        """
        Parse a dictionary from its root list node.

        Raises:
            FormatError: If a list node or entry cell does not match the layout,
                or a key repeats
        """
        dictionary = cls()
        node: Cell | None = cell
        while node is not None:
            node_slice = node.begin_parse()
            if node_slice.remaining_bits != 1:
                raise FormatError(
                    "dictionary node", f"expected a 1-bit header, got {node_slice.remaining_bits} bits"
                )
            has_next = node_slice.load_bit()
            entry_count = node_slice.remaining_refs - (1 if has_next else 0)
            if entry_count < 0:
                raise FormatError("dictionary node", "next-node flag set without a reference")

            for _ in range(entry_count):
                key, value = _parse_entry(node_slice.load_ref())
                try:
                    dictionary.insert(key, value)
                except DuplicateKeyError as e:
                    raise FormatError("dictionary", e.message) from e

            node = node_slice.load_ref() if has_next else None

        return dictionary

    def __repr__(self) -> str:
        return f"ContentDictionary(entries={len(self._entries)})"


def _parse_entry(entry: Cell) -> tuple[int, Cell]:
    entry_slice = entry.begin_parse()
    if entry_slice.remaining_bits != DICT_KEY_BITS or entry_slice.remaining_refs != 1:
        raise FormatError(
            "dictionary entry",
            f"expected {DICT_KEY_BITS} bits and 1 ref, got "
            f"{entry_slice.remaining_bits} bits and {entry_slice.remaining_refs} refs",
        )
    return entry_slice.load_uint(DICT_KEY_BITS), entry_slice.load_ref()
