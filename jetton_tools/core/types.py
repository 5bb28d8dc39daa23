"""Type definitions, enums and wire constants for the jetton toolkit."""

from enum import Enum

# Cell limits of the ledger's native cell primitive
MAX_CELL_BITS = 1023
MAX_CELL_REFS = 4
# Child depths are serialized as 2 bytes
MAX_CELL_DEPTH = 0xFFFF

# Metadata layout
FLAG_BITS = 8
DICT_KEY_BITS = 256

# Smallest supply unit is 10^-9 of the display unit
NANO_DECIMALS = 9


class MetadataVariant(str, Enum):
    """Content metadata layouts, selected by the leading flag byte."""

    OFFCHAIN = "offchain"
    ONCHAIN = "onchain"

    @property
    def flag(self) -> int:
        """Flag byte value stored in the first 8 bits of the content cell."""
        return 0 if self is MetadataVariant.OFFCHAIN else 1

    @classmethod
    def from_flag(cls, flag: int) -> "MetadataVariant":
        """Return the variant for a flag byte, raising ValueError if unknown."""
        for variant in cls:
            if variant.flag == flag:
                return variant
        raise ValueError(f"Unknown metadata flag: {flag}")


class MetadataField(str, Enum):
    """Fixed on-chain metadata fields, in serialization order."""

    NAME = "name"
    SYMBOL = "symbol"
    DESCRIPTION = "description"
    IMAGE = "image"
    DECIMALS = "decimals"


class BucketKind(str, Enum):
    """How an allocation bucket's amount is determined."""

    RESERVED = "reserved"   # Literal amount carved out first
    WEIGHTED = "weighted"   # Integer percentage of the remaining supply


# Type aliases for common patterns
NanoAmount = int   # Exact supply amount in nano units
Percentage = int   # Integer percentage, 0-100
