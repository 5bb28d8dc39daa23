"""Jetton content metadata codec.

Two layouts share a leading 8-bit flag:

- off-chain (flag 0): one reference to a string-tail cell chain holding the
  metadata URI
- on-chain (flag 1): one reference to a content dictionary keyed by
  sha256(field name), each value a string-tail cell holding the UTF-8 text

Decoders either return a complete result or raise; they never hand back a
partially populated record.
"""

import logging
import re
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from ..cell import Cell, ContentDictionary, begin_cell, key_for
from ..cell.slice import Slice
from ..core.exceptions import (
    FormatError,
    MissingFieldError,
    UnderflowError,
    ValidationError,
)
from ..core.models import MetadataRecord, OnchainFields
from ..core.types import FLAG_BITS, MetadataField, MetadataVariant

logger = logging.getLogger(__name__)

OFFCHAIN_FLAG = MetadataVariant.OFFCHAIN.flag
ONCHAIN_FLAG = MetadataVariant.ONCHAIN.flag

_DECIMAL_DIGITS = re.compile(r"[0-9]+")


def encode_offchain(uri: str) -> Cell:
    """
    Build an off-chain content cell.

    Args:
        uri: Metadata URI, e.g. "https://kiwi.eu.com/kwt/metadata.json"

    Returns:
        Content cell: flag 0 and a reference to the URI chain
    """
    cell = begin_cell().store_uint(OFFCHAIN_FLAG, FLAG_BITS).store_string_ref_tail(uri).end_cell()
    logger.debug(f"Encoded off-chain metadata ({len(uri)} chars), hash {cell.hash_hex}")
    return cell


def decode_offchain(cell: Cell) -> str:
    """
    Read the URI from an off-chain content cell.

    Raises:
        FormatError: If the flag is not 0, the URI reference is missing, or
            the URI is not valid UTF-8
    """
    content = _open(cell, MetadataVariant.OFFCHAIN)
    if content.remaining_refs < 1:
        raise FormatError("off-chain metadata", "no URI reference")
    return content.load_ref().begin_parse().load_string_tail()


def encode_onchain(fields: OnchainFields | Mapping[str, Any]) -> Cell:
    """
    Build an on-chain content cell.

    Args:
        fields: name, symbol, description, image and decimals

    Returns:
        Content cell: flag 1 and a reference to the serialized dictionary
    """
    fields = _coerce_fields(fields)

    dictionary = ContentDictionary()
    for field, value in fields.as_strings().items():
        dictionary.insert(key_for(field.value), begin_cell().store_string_tail(value).end_cell())

    cell = begin_cell().store_uint(ONCHAIN_FLAG, FLAG_BITS).store_ref(dictionary.serialize()).end_cell()
    logger.debug(f"Encoded on-chain metadata for {fields.symbol}, hash {cell.hash_hex}")
    return cell


def decode_onchain(cell: Cell) -> OnchainFields:
    """
    Read the fixed field set from an on-chain content cell.

    Keys outside the fixed field set are ignored.

    Raises:
        FormatError: If the flag is not 1, the dictionary is missing or
            malformed, or a value cannot be decoded
        MissingFieldError: If one of the five fields is absent
    """
    content = _open(cell, MetadataVariant.ONCHAIN)
    if content.remaining_refs < 1:
        raise FormatError("on-chain metadata", "no dictionary reference")

    dictionary = ContentDictionary.deserialize(content.load_ref())

    values: dict[str, str] = {}
    for field in MetadataField:
        value_cell = dictionary.lookup(key_for(field.value))
        if value_cell is None:
            raise MissingFieldError(field.value)
        values[field.value] = value_cell.begin_parse().load_string_tail()

    decimals = values[MetadataField.DECIMALS.value]
    if not _DECIMAL_DIGITS.fullmatch(decimals):
        raise FormatError("on-chain metadata", f"decimals is not a decimal integer: {decimals!r}")
    try:
        decimals_value = int(decimals)
    except ValueError as e:
        # Interpreter limit on int-string conversion length
        raise FormatError("on-chain metadata", f"decimals too long ({len(decimals)} digits)") from e

    return OnchainFields(
        name=values[MetadataField.NAME.value],
        symbol=values[MetadataField.SYMBOL.value],
        description=values[MetadataField.DESCRIPTION.value],
        image=values[MetadataField.IMAGE.value],
        decimals=decimals_value,
    )


def encode_metadata(record: MetadataRecord) -> Cell:
    """Encode a record in whichever layout its variant selects."""
    if record.variant is MetadataVariant.OFFCHAIN:
        return encode_offchain(record.uri)
    return encode_onchain(record.content)


def decode_metadata(cell: Cell) -> MetadataRecord:
    """
    Decode a content cell of either layout, dispatching on the flag byte.

    Raises:
        FormatError: If the flag is unknown or the layout is malformed
        MissingFieldError: If an on-chain field is absent
    """
    variant = read_variant(cell)
    if variant is MetadataVariant.OFFCHAIN:
        return MetadataRecord.offchain(decode_offchain(cell))
    return MetadataRecord.onchain(decode_onchain(cell))


def read_variant(cell: Cell) -> MetadataVariant:
    """Return the layout selected by a content cell's flag byte."""
    flag = _read_flag(cell.begin_parse())
    try:
        return MetadataVariant.from_flag(flag)
    except ValueError as e:
        raise FormatError("metadata", f"unknown flag {flag}") from e


def _open(cell: Cell, expected: MetadataVariant) -> Slice:
    content = cell.begin_parse()
    flag = _read_flag(content)
    if flag != expected.flag:
        raise FormatError(
            f"{expected.value} metadata", f"flag is {flag}, expected {expected.flag}"
        )
    return content


def _read_flag(content: Slice) -> int:
    try:
        return content.load_uint(FLAG_BITS)
    except UnderflowError as e:
        raise FormatError("metadata", "cell too short for the flag byte") from e


def _coerce_fields(fields: OnchainFields | Mapping[str, Any]) -> OnchainFields:
    if isinstance(fields, OnchainFields):
        return fields
    try:
        return OnchainFields.model_validate(dict(fields))
    except PydanticValidationError as e:
        raise ValidationError("fields", str(dict(fields)), str(e)) from e
