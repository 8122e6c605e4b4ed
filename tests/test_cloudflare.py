"""
Unit tests for Cloudflare pricing.

Tests plan base prices, overage charges and breakdown layout.
"""

import pytest

from hosting_calculator.providers.cloudflare import (
    CLOUDFLARE_CONFIG,
    CLOUDFLARE_FREE_PLAN_INPUTS,
    CLOUDFLARE_PAID_PLAN_INPUTS,
    CloudflarePlan,
    calculate_cloudflare_cost,
    resolve_plan,
)


def _line(result, label):
    return next(item for item in result.breakdown if item.label == label)


def _paid(**overrides):
    inputs = dict(CLOUDFLARE_PAID_PLAN_INPUTS)
    inputs.update(overrides)
    return inputs


class TestBasePrice:
    """Test plan base prices."""

    def test_free_plan_has_no_base(self):
        """Free plan costs nothing at its own preset."""
        result = calculate_cloudflare_cost(CLOUDFLARE_FREE_PLAN_INPUTS, "free")
        assert result.base_price == 0.0
        assert result.total == 0.0

    def test_paid_plan_base(self):
        """Workers Paid is $5/month."""
        assert calculate_cloudflare_cost(CLOUDFLARE_PAID_PLAN_INPUTS, "paid").base_price == 5.0

    def test_custom_plan_prices_as_paid(self):
        """Custom uses the paid base price."""
        assert calculate_cloudflare_cost(CLOUDFLARE_PAID_PLAN_INPUTS, "custom").base_price == 5.0

    def test_unknown_plan_prices_as_paid(self):
        """Unrecognized plans fall back to the paid base without raising."""
        assert resolve_plan("enterprise") is None
        assert calculate_cloudflare_cost(CLOUDFLARE_PAID_PLAN_INPUTS, "enterprise").base_price == 5.0

    def test_resolve_known_plan(self):
        """Known plan strings map onto the enum."""
        assert resolve_plan("paid") is CloudflarePlan.PAID


class TestScenarios:
    """Test reference scenarios."""

    def test_paid_plan_at_quota(self):
        """Usage exactly at every quota is covered by the base price."""
        result = calculate_cloudflare_cost(CLOUDFLARE_PAID_PLAN_INPUTS, "paid")
        assert all(item.value == 0 for item in result.breakdown[1:])
        assert result.usage_charges == 0.0
        assert result.credits_applied == 0.0
        assert result.total == 5.00

    def test_worker_request_overage(self):
        """1M requests over the 10M quota costs $0.30."""
        result = calculate_cloudflare_cost(_paid(workerRequests=11_000_000), "paid")
        # 1,000,000 * ($0.30 / 1,000,000) = $0.30
        assert _line(result, "Worker Requests").value == pytest.approx(0.30)
        assert result.usage_charges == pytest.approx(0.30)
        assert result.total == pytest.approx(5.30)


class TestUsageCharges:
    """Test individual metered resources."""

    def test_kv_writes_monotonic(self):
        """Each extra million KV writes beyond the quota adds $5."""
        one = calculate_cloudflare_cost(_paid(kvWrites=2_000_000), "paid")
        two = calculate_cloudflare_cost(_paid(kvWrites=3_000_000), "paid")
        delta = _line(two, "KV Writes").value - _line(one, "KV Writes").value
        assert delta == pytest.approx(5.0)

    def test_storage_overage_per_gb(self):
        """R2 storage beyond 10 GB costs $0.015/GB."""
        result = calculate_cloudflare_cost(_paid(r2StorageGb=110), "paid")
        # 100 GB * $0.015 = $1.50
        assert _line(result, "R2 Storage").value == pytest.approx(1.50)

    def test_images_stored_billed_from_first_image(self):
        """Stored images have no included quota."""
        result = calculate_cloudflare_cost(_paid(imagesStored=200_000), "paid")
        # 200,000 * ($5 / 100,000) = $10.00
        assert _line(result, "Images Stored").value == pytest.approx(10.0)

    def test_images_delivered_billed_from_first_image(self):
        """Delivered images have no included quota."""
        result = calculate_cloudflare_cost(_paid(imagesDelivered=300_000), "paid")
        assert _line(result, "Images Delivered").value == pytest.approx(3.0)

    def test_usage_pricing_identical_across_plans(self):
        """Plans change the base price only."""
        inputs = _paid(workerRequests=50_000_000, d1StorageGb=9)
        free = calculate_cloudflare_cost(inputs, "free")
        paid = calculate_cloudflare_cost(inputs, "paid")
        assert free.usage_charges == pytest.approx(paid.usage_charges)
        assert paid.total - free.total == pytest.approx(5.0)

    def test_negative_inputs_clamped(self):
        """Negative usage never produces negative charges."""
        result = calculate_cloudflare_cost(_paid(workerRequests=-5, imagesStored=-100), "paid")
        assert all(item.value >= 0 for item in result.breakdown)
        assert result.total == 5.0

    def test_missing_inputs_treated_as_zero(self):
        """An empty inputs mapping prices as no usage."""
        result = calculate_cloudflare_cost({}, "paid")
        assert result.total == 5.0

    def test_inputs_not_mutated(self):
        """Calculation is pure."""
        inputs = _paid(workerRequests=20_000_000)
        snapshot = dict(inputs)
        calculate_cloudflare_cost(inputs, "paid")
        assert inputs == snapshot

    def test_deterministic(self):
        """Identical arguments give identical results."""
        inputs = _paid(kvReads=70_000_000)
        assert calculate_cloudflare_cost(inputs, "paid") == calculate_cloudflare_cost(inputs, "paid")


class TestBreakdown:
    """Test breakdown layout."""

    def test_line_order(self):
        """Base first, then every resource in declaration order."""
        result = calculate_cloudflare_cost(CLOUDFLARE_PAID_PLAN_INPUTS, "paid")
        labels = [item.label for item in result.breakdown]
        assert labels[0] == "Base Subscription"
        assert labels[1:3] == ["Worker Requests", "CPU Time"]
        assert labels[-1] == "Images Delivered"
        assert len(labels) == 15

    def test_never_emits_credit_line(self):
        """Cloudflare grants no credits."""
        result = calculate_cloudflare_cost(_paid(workerRequests=900_000_000), "paid")
        assert all(not item.is_credit for item in result.breakdown)

    def test_included_annotations(self):
        """Quota lines carry their included amount for display."""
        result = calculate_cloudflare_cost(CLOUDFLARE_PAID_PLAN_INPUTS, "paid")
        assert _line(result, "Worker Requests").included == 10_000_000
        assert _line(result, "CPU Time").included == "30M ms"
        assert _line(result, "D1 Rows Read").included == "25B"
        assert _line(result, "Images Stored").included is None

    def test_breakdown_sums_to_total(self):
        """Line values add up to the total."""
        result = calculate_cloudflare_cost(_paid(workerRequests=40_000_000, kvStorageGb=3), "paid")
        assert sum(item.value for item in result.breakdown) == pytest.approx(result.total)


class TestConfig:
    """Test the exported provider configuration."""

    def test_presets(self):
        """Custom reuses the paid preset; defaults are the free preset."""
        assert CLOUDFLARE_CONFIG.plans == ["free", "paid", "custom"]
        assert CLOUDFLARE_CONFIG.default_inputs == CLOUDFLARE_FREE_PLAN_INPUTS
        assert CLOUDFLARE_CONFIG.plan_presets["custom"] == CLOUDFLARE_PAID_PLAN_INPUTS

    def test_persistence_keys(self):
        """Cloudflare persists inputs and plan but has no team key."""
        keys = CLOUDFLARE_CONFIG.persistence_keys
        assert keys.inputs == "hosting-calc-cloudflare-inputs"
        assert keys.team_members is None
        assert not CLOUDFLARE_CONFIG.supports_team

    def test_calculate_accepts_team_members(self):
        """The engine ignores team size but accepts it."""
        one = CLOUDFLARE_CONFIG.calculate(CLOUDFLARE_PAID_PLAN_INPUTS, "paid", 1)
        five = CLOUDFLARE_CONFIG.calculate(CLOUDFLARE_PAID_PLAN_INPUTS, "paid", 5)
        assert one == five
