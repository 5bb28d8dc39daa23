"""Checks around the one-time initial allocation mint.

Before minting, the master contract must be configured, still mintable and
have zero supply. After minting, the observed total supply must equal the
plan's total exactly.
"""

import logging

from ..core.exceptions import PreflightError
from ..core.models import AllocationPlan, MintVerification, SupplyState
from ..core.types import NanoAmount
from ..core.units import format_nano
from .splitter import DEFAULT_RESERVED_LABEL, WeightsInput, build_plan

logger = logging.getLogger(__name__)


def check_ready_for_allocation(state: SupplyState) -> None:
    """
    Verify the contract state allows the initial allocation.

    Raises:
        PreflightError: If the contract is not configured, minting is closed,
            supply was already minted, or the reserve exceeds max supply
    """
    if not state.configured:
        raise PreflightError("configured", "contract is not configured")
    if not state.mintable:
        raise PreflightError("mintable", "minting is disabled")
    if state.total_supply != 0:
        raise PreflightError(
            "total_supply",
            f"supply is {format_nano(state.total_supply)}, expected 0; "
            "initial allocation already performed",
        )
    if state.reserved_total > state.max_supply:
        raise PreflightError(
            "reserved_total",
            f"reserve {format_nano(state.reserved_total)} exceeds max supply "
            f"{format_nano(state.max_supply)}",
        )
    logger.info("Pre-flight checks passed")


def plan_from_state(
    state: SupplyState,
    weighted_buckets: WeightsInput,
    reserved_label: str = DEFAULT_RESERVED_LABEL,
    check_ready: bool = True,
) -> AllocationPlan:
    """
    Build the initial allocation plan from on-chain constants.

    The total is the contract's max supply and the reserved amount is its
    reserve total.

    Args:
        state: Current contract snapshot
        weighted_buckets: Ordered (label, percentage) pairs summing to 100
        reserved_label: Label of the reserved bucket
        check_ready: Run check_ready_for_allocation first (disable for dry runs
            against an already minted contract)
    """
    if check_ready:
        check_ready_for_allocation(state)
    return build_plan(state.max_supply, state.reserved_total, weighted_buckets, reserved_label)


def verify_minted_supply(plan: AllocationPlan, observed_total: NanoAmount) -> MintVerification:
    """Compare the total supply observed after minting with the plan's total."""
    verification = MintVerification(expected=plan.total, observed=observed_total)
    if verification.matches:
        logger.info(f"Minted supply matches plan: {format_nano(observed_total)}")
    else:
        logger.warning(
            f"Minted supply {format_nano(observed_total)} differs from plan "
            f"{format_nano(plan.total)} by {format_nano(verification.difference)}"
        )
    return verification
