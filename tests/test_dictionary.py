"""Tests for the content dictionary."""

import hashlib

import pytest

from jetton_tools.cell import ContentDictionary, begin_cell, key_for
from jetton_tools.core.exceptions import DuplicateKeyError, FormatError, ValidationError


def _value(text: str):
    return begin_cell().store_string_tail(text).end_cell()


class TestKeys:
    """Tests for field-name keys."""

    def test_key_is_sha256(self):
        """Test that the key is the big-endian SHA-256 of the name."""
        expected = int.from_bytes(hashlib.sha256(b"name").digest(), "big")
        assert key_for("name") == expected

    def test_keys_differ(self):
        assert key_for("name") != key_for("symbol")


class TestContentDictionary:
    """Tests for insert and lookup."""

    def test_insert_and_lookup(self):
        """Test a simple insert."""
        dictionary = ContentDictionary()
        dictionary.insert(key_for("name"), _value("Kiwi"))
        assert dictionary.lookup(key_for("name")) == _value("Kiwi")
        assert key_for("name") in dictionary
        assert len(dictionary) == 1

    def test_lookup_absent(self):
        """Test that an absent key gives None, not an error."""
        assert ContentDictionary().lookup(key_for("name")) is None

    def test_duplicate_key(self):
        """Test that a second insert of the same key fails."""
        dictionary = ContentDictionary()
        dictionary.insert(1, _value("a"))
        with pytest.raises(DuplicateKeyError) as exc_info:
            dictionary.insert(1, _value("b"))
        assert exc_info.value.key == 1
        assert dictionary.lookup(1) == _value("a")

    def test_key_out_of_range(self):
        """Test that keys wider than 256 bits are rejected."""
        with pytest.raises(ValidationError):
            ContentDictionary().insert(1 << 256, _value("a"))
        with pytest.raises(ValidationError):
            ContentDictionary().insert(-1, _value("a"))

    def test_keys_keep_insertion_order(self):
        dictionary = ContentDictionary()
        for key in (5, 1, 3):
            dictionary.insert(key, _value(str(key)))
        assert dictionary.keys() == [5, 1, 3]


class TestDictionarySerialization:
    """Tests for the list-node layout."""

    @pytest.mark.parametrize("count", [0, 1, 4, 5, 7, 12])
    def test_round_trip(self, count):
        """Test that every entry comes back for several node splits."""
        dictionary = ContentDictionary()
        for index in range(count):
            dictionary.insert(key_for(f"field{index}"), _value(f"value {index}"))

        restored = ContentDictionary.deserialize(dictionary.serialize())
        assert restored.items() == dictionary.items()

    def test_four_entries_fit_one_node(self):
        """Test that four entries need no second node."""
        dictionary = ContentDictionary()
        for index in range(4):
            dictionary.insert(index, _value("v"))
        root = dictionary.serialize()
        assert root.bit_string() == "0"
        assert len(root.refs) == 4

    def test_five_entries_chain(self):
        """Test that the fifth entry moves into a successor node."""
        dictionary = ContentDictionary()
        for index in range(5):
            dictionary.insert(index, _value("v"))
        root = dictionary.serialize()
        assert root.bit_string() == "1"
        assert len(root.refs) == 4
        successor = root.refs[3]
        assert successor.bit_string() == "0"
        assert len(successor.refs) == 2

    def test_serialization_is_deterministic(self):
        first, second = ContentDictionary(), ContentDictionary()
        for dictionary in (first, second):
            dictionary.insert(key_for("name"), _value("Kiwi"))
            dictionary.insert(key_for("symbol"), _value("KWT"))
        assert first.serialize().hash == second.serialize().hash


class TestMalformedDictionary:
    """Tests for rejecting cells that do not match the layout."""

    def test_header_too_long(self):
        """Test a node with more than the 1-bit header."""
        node = begin_cell().store_uint(0, 2).end_cell()
        with pytest.raises(FormatError):
            ContentDictionary.deserialize(node)

    def test_next_flag_without_ref(self):
        """Test a node claiming a successor it does not carry."""
        node = begin_cell().store_bit(1).end_cell()
        with pytest.raises(FormatError):
            ContentDictionary.deserialize(node)

    def test_entry_without_value(self):
        """Test an entry cell missing its value reference."""
        entry = begin_cell().store_uint(1, 256).end_cell()
        node = begin_cell().store_bit(0).store_ref(entry).end_cell()
        with pytest.raises(FormatError):
            ContentDictionary.deserialize(node)

    def test_entry_short_key(self):
        """Test an entry with fewer than 256 key bits."""
        entry = begin_cell().store_uint(1, 255).store_ref(_value("a")).end_cell()
        node = begin_cell().store_bit(0).store_ref(entry).end_cell()
        with pytest.raises(FormatError):
            ContentDictionary.deserialize(node)

    def test_repeated_key(self):
        """Test that a serialized duplicate key is a format error."""
        entry = begin_cell().store_uint(1, 256).store_ref(_value("a")).end_cell()
        node = begin_cell().store_bit(0).store_ref(entry).store_ref(entry).end_cell()
        with pytest.raises(FormatError):
            ContentDictionary.deserialize(node)
