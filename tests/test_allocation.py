"""Tests for the allocation splitter and mint pre-flight checks."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from jetton_tools.allocation import (
    build_plan,
    check_ready_for_allocation,
    check_sum,
    normalize_weights,
    plan_from_state,
    select_absorber,
    split,
    verify_minted_supply,
    verify_plan,
)
from jetton_tools.core.exceptions import (
    InvalidWeightsError,
    InvariantViolationError,
    NegativeRemainingError,
    PreflightError,
    ValidationError,
)
from jetton_tools.core.models import BucketAmount, SupplyState, WeightedBucket
from jetton_tools.core.types import BucketKind

NANO = 10**9


class TestSplit:
    """Tests for the integer split."""

    def test_kwt_initial_allocation(self, kwt_weights):
        """Test the deployed 66B supply with a 10% reserve."""
        buckets = split(66_000_000_000 * NANO, 6_600_000_000 * NANO, kwt_weights)

        assert [(bucket.label, bucket.amount) for bucket in buckets] == [
            ("burn_reserve", 6_600_000_000 * NANO),
            ("treasury", 29_700_000_000 * NANO),
            ("team", 17_820_000_000 * NANO),
            ("airdrop", 11_880_000_000 * NANO),
        ]
        assert sum(bucket.amount for bucket in buckets) == 66_000_000_000 * NANO

    def test_even_split_no_remainder(self):
        """Test remaining 100 over 33/33/34."""
        buckets = split(100, 0, {"a": 33, "b": 33, "c": 34})
        assert [bucket.amount for bucket in buckets] == [0, 33, 33, 34]

    def test_remainder_goes_to_largest_weight(self):
        """Test remaining 101 over 33/33/34: the extra unit goes to c."""
        plan = build_plan(101, 0, {"a": 33, "b": 33, "c": 34})
        assert plan.amounts == {"burn_reserve": 0, "a": 33, "b": 33, "c": 35}
        assert plan.absorber == "c"
        assert plan.remainder == 1
        assert plan.buckets[3].absorbed_remainder == 1

    def test_remainder_tie_goes_to_first(self):
        """Test that the first of equal largest weights absorbs the remainder."""
        plan = build_plan(7, 0, [("a", 40), ("b", 40), ("c", 20)])
        # floors 2, 2, 1 -> remainder 2
        assert plan.amounts == {"burn_reserve": 0, "a": 4, "b": 2, "c": 1}
        assert plan.absorber == "a"

    def test_reserved_bucket_first(self):
        """Test that the reserved bucket leads and keeps its literal amount."""
        buckets = split(1000, 250, {"ops": 100}, reserved_label="burn")
        assert buckets[0].label == "burn"
        assert buckets[0].kind is BucketKind.RESERVED
        assert buckets[0].amount == 250
        assert buckets[0].weight is None
        assert buckets[1].amount == 750

    def test_reserved_equals_total(self):
        """Test that zero remaining gives zero weighted amounts."""
        buckets = split(500, 500, {"a": 50, "b": 50})
        assert [bucket.amount for bucket in buckets] == [500, 0, 0]

    def test_zero_weight_bucket(self):
        buckets = split(10, 0, {"a": 100, "b": 0})
        assert [bucket.amount for bucket in buckets] == [0, 10, 0]

    @pytest.mark.parametrize("total", [0, 1, 3, 99, 101, 997, 10**18 + 7, 66_000_000_000 * NANO])
    @pytest.mark.parametrize("reserved_share", [0, 1, 3])
    @pytest.mark.parametrize(
        "weights",
        [
            {"a": 100},
            {"a": 33, "b": 33, "c": 34},
            {"a": 1, "b": 1, "c": 98},
            {"a": 50, "b": 30, "c": 20},
            {"a": 14, "b": 14, "c": 14, "d": 14, "e": 14, "f": 15, "g": 15},
        ],
    )
    def test_sum_is_exact(self, total, reserved_share, weights):
        """Test that amounts always sum to total and none are negative."""
        reserved = total * reserved_share // 10
        buckets = split(total, reserved, weights)
        assert sum(bucket.amount for bucket in buckets) == total
        assert all(bucket.amount >= 0 for bucket in buckets)
        assert [bucket.label for bucket in buckets[1:]] == list(weights)

    def test_deterministic(self, kwt_weights):
        first = build_plan(1_000_003, 7, kwt_weights)
        second = build_plan(1_000_003, 7, kwt_weights)
        assert first.buckets == second.buckets
        assert first.fingerprint == second.fingerprint

    def test_notes(self):
        plan = build_plan(101, 0, {"a": 33, "b": 33, "c": 34})
        assert plan.calculation_notes[-1] == "Remainder 1 nano added to c"


class TestSplitErrors:
    """Tests for rejected inputs."""

    def test_reserved_exceeds_total(self):
        with pytest.raises(NegativeRemainingError) as exc_info:
            split(100, 101, {"a": 100})
        assert exc_info.value.reserved == 101

    @pytest.mark.parametrize("total, reserved", [(-1, 0), (10, -1), (10.0, 0), (True, 0)])
    def test_invalid_amounts(self, total, reserved):
        with pytest.raises(ValidationError):
            split(total, reserved, {"a": 100})

    def test_weights_must_sum_to_100(self):
        with pytest.raises(InvalidWeightsError):
            split(100, 0, {"a": 50, "b": 49})

    def test_empty_weights(self):
        with pytest.raises(InvalidWeightsError):
            split(100, 0, {})

    def test_negative_weight(self):
        with pytest.raises(InvalidWeightsError):
            split(100, 0, {"a": 110, "b": -10})

    def test_fractional_weight(self):
        with pytest.raises(InvalidWeightsError):
            split(100, 0, {"a": 50.5, "b": 49.5})

    def test_bool_weight(self):
        with pytest.raises(InvalidWeightsError):
            split(100, 0, {"a": True, "b": 99})

    def test_duplicate_label(self):
        with pytest.raises(InvalidWeightsError):
            split(100, 0, [("a", 33), ("b", 33), ("b", 34)])

    def test_label_clashes_with_reserved(self):
        with pytest.raises(InvalidWeightsError):
            split(100, 0, {"burn_reserve": 100})


class TestSplitHelpers:
    """Tests for weight normalization, absorber selection and sum checks."""

    def test_normalize_mixed_input(self):
        buckets = normalize_weights([WeightedBucket(label="a", weight=60), ("b", 40)])
        assert [(bucket.label, bucket.weight) for bucket in buckets] == [("a", 60), ("b", 40)]

    def test_select_absorber(self):
        buckets = normalize_weights({"a": 20, "b": 40, "c": 40})
        assert select_absorber(buckets) == 1

    def test_check_sum_mismatch(self):
        amounts = [
            BucketAmount(label="r", amount=10, kind=BucketKind.RESERVED),
            BucketAmount(label="a", amount=89, kind=BucketKind.WEIGHTED, weight=100),
        ]
        with pytest.raises(InvariantViolationError) as exc_info:
            check_sum(100, amounts)
        assert exc_info.value.actual == 99

    def test_check_sum_negative(self):
        amounts = [
            BucketAmount(label="r", amount=110, kind=BucketKind.RESERVED),
            BucketAmount(label="a", amount=-10, kind=BucketKind.WEIGHTED, weight=100),
        ]
        with pytest.raises(InvariantViolationError):
            check_sum(100, amounts)


class TestVerifyPlan:
    """Tests for re-checking a stored plan."""

    def test_valid_plan(self, kwt_weights):
        verify_plan(build_plan(1_000_000, 100_000, kwt_weights))

    def test_reloaded_plan(self, kwt_weights):
        """Test a plan that went through JSON."""
        plan = build_plan(1_000_000, 100_000, kwt_weights)
        reloaded = type(plan).model_validate_json(plan.model_dump_json())
        verify_plan(reloaded)

    def test_tampered_amounts(self, kwt_weights):
        """Test that moving supply between buckets breaks the fingerprint."""
        plan = build_plan(1_000_000, 100_000, kwt_weights)
        buckets = list(plan.buckets)
        buckets[1] = buckets[1].model_copy(update={"amount": buckets[1].amount - 5})
        buckets[2] = buckets[2].model_copy(update={"amount": buckets[2].amount + 5})
        tampered = plan.model_copy(update={"buckets": buckets})
        with pytest.raises(InvariantViolationError):
            verify_plan(tampered)

    def test_tampered_total(self, kwt_weights):
        plan = build_plan(1_000_000, 100_000, kwt_weights)
        with pytest.raises(InvariantViolationError):
            verify_plan(plan.model_copy(update={"total": 1_000_001}))


class TestPreflight:
    """Tests for contract state checks around the mint."""

    def test_ready(self, fresh_supply_state):
        check_ready_for_allocation(fresh_supply_state)

    @pytest.mark.parametrize(
        "update, check",
        [
            ({"configured": False}, "configured"),
            ({"mintable": False}, "mintable"),
            ({"total_supply": 1}, "total_supply"),
            ({"reserved_total": 66_000_000_001 * NANO}, "reserved_total"),
        ],
    )
    def test_not_ready(self, fresh_supply_state, update, check):
        state = fresh_supply_state.model_copy(update=update)
        with pytest.raises(PreflightError) as exc_info:
            check_ready_for_allocation(state)
        assert exc_info.value.check == check

    def test_plan_from_state(self, fresh_supply_state, kwt_weights):
        plan = plan_from_state(fresh_supply_state, kwt_weights)
        assert plan.total == 66_000_000_000 * NANO
        assert plan.amount_for("treasury") == 29_700_000_000 * NANO

    def test_plan_from_minted_state(self, fresh_supply_state, kwt_weights):
        """Test that an already minted contract blocks planning unless skipped."""
        minted = fresh_supply_state.model_copy(update={"total_supply": 66_000_000_000 * NANO})
        with pytest.raises(PreflightError):
            plan_from_state(minted, kwt_weights)
        assert plan_from_state(minted, kwt_weights, check_ready=False).allocated == minted.max_supply

    def test_verify_minted_supply(self, kwt_weights):
        plan = build_plan(1000, 100, kwt_weights)
        assert verify_minted_supply(plan, 1000).matches

        short = verify_minted_supply(plan, 900)
        assert not short.matches
        assert short.difference == 100

    def test_supply_state_rejects_negative(self):
        with pytest.raises(PydanticValidationError):
            SupplyState(
                configured=True, mintable=True, total_supply=-1, max_supply=0, reserved_total=0
            )
