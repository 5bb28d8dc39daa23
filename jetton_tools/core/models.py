"""Pydantic data models for the jetton toolkit.

All data structures are immutable (frozen) after creation; an update to
metadata or an allocation always produces a new object.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, model_validator

from .types import (
    BucketKind,
    MetadataField,
    MetadataVariant,
    NanoAmount,
    Percentage,
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OnchainFields(BaseModel):
    """The fixed field set stored in an on-chain metadata dictionary."""

    name: str
    symbol: str
    description: str
    image: str
    decimals: int = Field(ge=0)

    model_config = {"frozen": True}

    def as_strings(self) -> dict[MetadataField, str]:
        """Return every field as its stored string, in serialization order."""
        return {
            MetadataField.NAME: self.name,
            MetadataField.SYMBOL: self.symbol,
            MetadataField.DESCRIPTION: self.description,
            MetadataField.IMAGE: self.image,
            MetadataField.DECIMALS: str(self.decimals),
        }


class MetadataRecord(BaseModel):
    """A content metadata record in one of its two variants."""

    variant: MetadataVariant
    uri: str | None = None
    content: OnchainFields | None = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_payload(self) -> "MetadataRecord":
        if self.variant is MetadataVariant.OFFCHAIN:
            if self.uri is None or self.content is not None:
                raise ValueError("off-chain metadata carries a uri and no fields")
        elif self.content is None or self.uri is not None:
            raise ValueError("on-chain metadata carries fields and no uri")
        return self

    @classmethod
    def offchain(cls, uri: str) -> "MetadataRecord":
        return cls(variant=MetadataVariant.OFFCHAIN, uri=uri)

    @classmethod
    def onchain(cls, fields: OnchainFields) -> "MetadataRecord":
        return cls(variant=MetadataVariant.ONCHAIN, content=fields)


class FieldCheck(BaseModel):
    """Comparison of one expected metadata value against the decoded one."""

    field: str
    expected: str
    actual: str | None = None

    model_config = {"frozen": True}

    @property
    def matches(self) -> bool:
        return self.actual == self.expected


class MetadataCheck(BaseModel):
    """Result of verifying a content cell against an expected record."""

    expected_variant: MetadataVariant
    actual_variant: MetadataVariant
    cell_hash: str
    checks: list[FieldCheck] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def ok(self) -> bool:
        """True when the variant and every compared field match."""
        return self.expected_variant == self.actual_variant and all(
            check.matches for check in self.checks
        )

    @property
    def mismatches(self) -> list[FieldCheck]:
        return [check for check in self.checks if not check.matches]


class WeightedBucket(BaseModel):
    """A destination bucket receiving an integer percentage of the remainder."""

    label: str
    weight: Percentage

    model_config = {"frozen": True}


class BucketAmount(BaseModel):
    """Final amount assigned to one bucket of an allocation."""

    label: str
    amount: NanoAmount
    kind: BucketKind
    weight: Percentage | None = None  # None for the reserved bucket
    absorbed_remainder: NanoAmount = 0

    model_config = {"frozen": True}


class AllocationPlan(BaseModel):
    """A computed, exact split of a total supply.

    A plan is single-use: once any mint referencing it has been submitted it
    must not be submitted again. The fingerprint identifies the plan for that
    bookkeeping.
    """

    total: NanoAmount
    reserved: NanoAmount
    remaining: NanoAmount
    buckets: list[BucketAmount]
    absorber: str
    remainder: NanoAmount
    fingerprint: str
    calculation_notes: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utc_now)

    model_config = {"frozen": True}

    @property
    def amounts(self) -> dict[str, NanoAmount]:
        """Bucket label -> amount, in plan order."""
        return {bucket.label: bucket.amount for bucket in self.buckets}

    @property
    def allocated(self) -> NanoAmount:
        """Sum of every bucket amount."""
        return sum(bucket.amount for bucket in self.buckets)

    def amount_for(self, label: str) -> NanoAmount:
        """Return the amount for a bucket label, raising KeyError if unknown."""
        return self.amounts[label]


class SupplyState(BaseModel):
    """Snapshot of the master contract state relevant to the initial allocation."""

    configured: bool
    mintable: bool
    total_supply: NanoAmount = Field(ge=0)
    max_supply: NanoAmount = Field(ge=0)
    reserved_total: NanoAmount = Field(ge=0)

    model_config = {"frozen": True}


class MintVerification(BaseModel):
    """Comparison of the observed total supply with a plan's total."""

    expected: NanoAmount
    observed: NanoAmount

    model_config = {"frozen": True}

    @property
    def difference(self) -> NanoAmount:
        """Expected minus observed; positive means supply is still missing."""
        return self.expected - self.observed

    @property
    def matches(self) -> bool:
        return self.difference == 0


class LedgerEvent(BaseModel):
    """Audit entry for one request made to the ledger collaborator."""

    timestamp: datetime = Field(default_factory=_utc_now)
    network: str
    action: str  # "submit", "query"
    payload_hash: str | None = None
    success: bool = True
    error_message: str | None = None
    notes: str | None = None

    model_config = {"frozen": True}


class SubmitResult(BaseModel):
    """Outcome of handing a payload cell to the ledger collaborator."""

    accepted: bool
    payload_hash: str
    network: str
    message: str | None = None
    timestamp: datetime = Field(default_factory=_utc_now)

    model_config = {"frozen": True}
