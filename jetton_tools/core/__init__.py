"""Core module - data models, types, units, and exceptions."""

from .models import (
    OnchainFields,
    MetadataRecord,
    FieldCheck,
    MetadataCheck,
    WeightedBucket,
    BucketAmount,
    AllocationPlan,
    SupplyState,
    MintVerification,
    LedgerEvent,
    SubmitResult,
)
from .types import (
    BucketKind,
    MetadataField,
    MetadataVariant,
    MAX_CELL_BITS,
    MAX_CELL_REFS,
    MAX_CELL_DEPTH,
    NANO_DECIMALS,
)
from .exceptions import (
    JettonToolsError,
    CapacityExceededError,
    UnderflowError,
    FormatError,
    DuplicateKeyError,
    MissingFieldError,
    InvalidWeightsError,
    NegativeRemainingError,
    InvariantViolationError,
    ValidationError,
    ConfigurationError,
    PreflightError,
    LedgerError,
    LedgerTimeoutError,
)
from .units import format_nano, to_nano

__all__ = [
    # Models
    "OnchainFields",
    "MetadataRecord",
    "FieldCheck",
    "MetadataCheck",
    "WeightedBucket",
    "BucketAmount",
    "AllocationPlan",
    "SupplyState",
    "MintVerification",
    "LedgerEvent",
    "SubmitResult",
    # Types
    "BucketKind",
    "MetadataField",
    "MetadataVariant",
    "MAX_CELL_BITS",
    "MAX_CELL_REFS",
    "MAX_CELL_DEPTH",
    "NANO_DECIMALS",
    # Exceptions
    "JettonToolsError",
    "CapacityExceededError",
    "UnderflowError",
    "FormatError",
    "DuplicateKeyError",
    "MissingFieldError",
    "InvalidWeightsError",
    "NegativeRemainingError",
    "InvariantViolationError",
    "ValidationError",
    "ConfigurationError",
    "PreflightError",
    "LedgerError",
    "LedgerTimeoutError",
    # Units
    "format_nano",
    "to_nano",
]
