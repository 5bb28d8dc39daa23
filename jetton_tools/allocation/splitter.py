"""Exact integer split of a total supply across allocation buckets.

Formula, all in integer nano units:
- remaining = total - reserved
- amount_i = floor(remaining × weight_i / 100)
- remainder = remaining - Σ amount_i, added to the largest-weight bucket
  (first one listed on ties)

The result is re-checked to sum exactly to total before it is returned,
since it feeds an irreversible mint.
"""

import hashlib
import json
import logging
from typing import Mapping, Sequence

from ..core.exceptions import (
    InvalidWeightsError,
    InvariantViolationError,
    NegativeRemainingError,
    ValidationError,
)
from ..core.models import AllocationPlan, BucketAmount, WeightedBucket
from ..core.types import BucketKind, NanoAmount
from ..core.units import format_nano

logger = logging.getLogger(__name__)

DEFAULT_RESERVED_LABEL = "burn_reserve"
PERCENT = 100

WeightsInput = Mapping[str, int] | Sequence[WeightedBucket | tuple[str, int]]


def split(
    total: NanoAmount,
    reserved: NanoAmount,
    weighted_buckets: WeightsInput,
    reserved_label: str = DEFAULT_RESERVED_LABEL,
) -> list[BucketAmount]:
    """
    Split total into a reserved bucket and percentage-weighted buckets.

    Args:
        total: Total supply to distribute, in nano units
        reserved: Literal amount for the reserved bucket, in nano units
        weighted_buckets: Ordered (label, integer percentage) pairs summing to 100
        reserved_label: Label of the reserved bucket

    Returns:
        Reserved bucket first, then the weighted buckets in input order

    Raises:
        ValidationError: If total or reserved is not a non-negative integer
        NegativeRemainingError: If reserved > total
        InvalidWeightsError: If the weights are not a valid percentage split
        InvariantViolationError: If the amounts do not sum to total
    """
    return build_plan(total, reserved, weighted_buckets, reserved_label).buckets


def build_plan(
    total: NanoAmount,
    reserved: NanoAmount,
    weighted_buckets: WeightsInput,
    reserved_label: str = DEFAULT_RESERVED_LABEL,
) -> AllocationPlan:
    """
    Compute a complete allocation plan. See split() for arguments and errors.

    Returns:
        AllocationPlan with per-bucket amounts, absorber, remainder and
        calculation notes
    """
    _check_amount("total", total)
    _check_amount("reserved", reserved)
    if reserved > total:
        raise NegativeRemainingError(total, reserved)

    buckets = normalize_weights(weighted_buckets, reserved_label)
    remaining = total - reserved
    notes = [
        f"Remaining = {format_nano(total)} - {format_nano(reserved)} = {format_nano(remaining)}"
    ]

    floors = [remaining * bucket.weight // PERCENT for bucket in buckets]
    remainder = remaining - sum(floors)
    absorber = select_absorber(buckets)

    amounts = [
        BucketAmount(
            label=reserved_label,
            amount=reserved,
            kind=BucketKind.RESERVED,
        )
    ]
    for index, (bucket, floor) in enumerate(zip(buckets, floors)):
        absorbed = remainder if index == absorber else 0
        amounts.append(
            BucketAmount(
                label=bucket.label,
                amount=floor + absorbed,
                kind=BucketKind.WEIGHTED,
                weight=bucket.weight,
                absorbed_remainder=absorbed,
            )
        )
        notes.append(
            f"{bucket.label} = {format_nano(remaining)} × {bucket.weight} / {PERCENT} "
            f"= {format_nano(floor)}"
        )

    if remainder:
        logger.warning(
            f"Truncation remainder of {remainder} nano added to '{buckets[absorber].label}'"
        )
        notes.append(f"Remainder {remainder} nano added to {buckets[absorber].label}")

    check_sum(total, amounts)

    plan = AllocationPlan(
        total=total,
        reserved=reserved,
        remaining=remaining,
        buckets=amounts,
        absorber=buckets[absorber].label,
        remainder=remainder,
        fingerprint=_fingerprint(total, reserved, amounts),
        calculation_notes=notes,
    )
    logger.info(
        f"Allocation plan {plan.fingerprint[:12]}: {len(amounts)} buckets, "
        f"total {format_nano(total)}"
    )
    return plan


def normalize_weights(
    weighted_buckets: WeightsInput,
    reserved_label: str = DEFAULT_RESERVED_LABEL,
) -> list[WeightedBucket]:
    """
    Validate weights and return them as ordered WeightedBucket objects.

    Raises:
        InvalidWeightsError: If empty, a weight is not a non-negative integer,
            a label repeats or clashes with the reserved label, or the
            weights do not sum to 100
    """
    if isinstance(weighted_buckets, Mapping):
        pairs = list(weighted_buckets.items())
    else:
        pairs = [
            (item.label, item.weight) if isinstance(item, WeightedBucket) else tuple(item)
            for item in weighted_buckets
        ]

    weights = {str(label): weight for label, weight in pairs}
    if not pairs:
        raise InvalidWeightsError("no weighted buckets", weights)

    seen: set[str] = set()
    buckets = []
    for label, weight in pairs:
        if isinstance(weight, bool) or not isinstance(weight, int):
            raise InvalidWeightsError(f"weight for '{label}' is not an integer", weights)
        if weight < 0:
            raise InvalidWeightsError(f"weight for '{label}' is negative", weights)
        if label in seen:
            raise InvalidWeightsError(f"label '{label}' appears more than once", weights)
        if label == reserved_label:
            raise InvalidWeightsError(
                f"label '{label}' is the reserved bucket's label", weights
            )
        seen.add(label)
        buckets.append(WeightedBucket(label=label, weight=weight))

    weight_sum = sum(bucket.weight for bucket in buckets)
    if weight_sum != PERCENT:
        raise InvalidWeightsError(f"weights sum to {weight_sum}, expected {PERCENT}", weights)

    return buckets


def select_absorber(buckets: Sequence[WeightedBucket]) -> int:
    """Index of the bucket that absorbs the remainder: largest weight, first on ties."""
    return max(range(len(buckets)), key=lambda index: buckets[index].weight)


def check_sum(total: NanoAmount, amounts: Sequence[BucketAmount]) -> None:
    """
    Re-verify that amounts are non-negative and sum exactly to total.

    Raises:
        InvariantViolationError: Otherwise. Any pending mint must be aborted.
    """
    negative = [bucket.label for bucket in amounts if bucket.amount < 0]
    allocated = sum(bucket.amount for bucket in amounts)
    if negative:
        raise InvariantViolationError(
            total, allocated, f"negative amount for {', '.join(negative)}"
        )
    if allocated != total:
        raise InvariantViolationError(total, allocated)


def verify_plan(plan: AllocationPlan) -> None:
    """
    Re-check a plan before it is used, e.g. after loading it from disk.

    Raises:
        InvariantViolationError: If the amounts, reserved bucket or
            fingerprint are inconsistent with the plan's total
    """
    check_sum(plan.total, plan.buckets)

    reserved = [bucket for bucket in plan.buckets if bucket.kind is BucketKind.RESERVED]
    if len(reserved) != 1 or reserved[0].amount != plan.reserved:
        raise InvariantViolationError(
            plan.reserved,
            sum(bucket.amount for bucket in reserved),
            "reserved bucket does not match the plan",
        )

    if _fingerprint(plan.total, plan.reserved, plan.buckets) != plan.fingerprint:
        raise InvariantViolationError(plan.total, plan.allocated, "fingerprint mismatch")


def _check_amount(field: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, repr(value), "must be an integer nano amount")
    if value < 0:
        raise ValidationError(field, str(value), "must be non-negative")


def _fingerprint(
    total: NanoAmount, reserved: NanoAmount, amounts: Sequence[BucketAmount]
) -> str:
    payload = json.dumps(
        {
            "total": total,
            "reserved": reserved,
            "buckets": [[bucket.label, bucket.weight, bucket.amount] for bucket in amounts],
        },
        separators=(",", ":"),
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
