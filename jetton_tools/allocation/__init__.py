"""Allocation module.

Computes the exact integer split of the initial supply and the checks
that surround the one-time mint.
"""

from .splitter import build_plan, check_sum, normalize_weights, select_absorber, split, verify_plan
from .preflight import check_ready_for_allocation, plan_from_state, verify_minted_supply

__all__ = [
    "build_plan",
    "check_sum",
    "normalize_weights",
    "select_absorber",
    "split",
    "verify_plan",
    "check_ready_for_allocation",
    "plan_from_state",
    "verify_minted_supply",
]
