"""
Metered billing calculations.

Tiered/overage pricing shared by every provider engine: each metered
resource has an included quota and a marginal rate charged beyond it.
"""

from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Union

from .types import CREDITS_CATEGORY, CostBreakdownItem, CostResult

BASE_LABEL = "Base Subscription"
BASE_CATEGORY = "Base"
CREDITS_LABEL = "Credits Applied"


@dataclass(frozen=True)
class MeteredRate:
    """Pricing for a single metered resource."""
    key: str  # Input field holding the usage amount
    label: str
    category: str
    rate: float  # Price per unit beyond the included quota
    included: float = 0.0  # Units covered at no charge
    included_display: Optional[Union[int, str]] = None
    unit_multiplier: float = 1.0  # Converts the input unit into billed units


def clamp_usage(value: Optional[float]) -> float:
    """Treat missing and negative usage as zero."""
    if value is None:
        return 0.0
    return max(0.0, float(value))


def overage_charge(usage: Optional[float], included: float, rate: float) -> float:
    """Charge for usage beyond the included quota.

    Args:
        usage: Raw usage amount (None and negatives count as zero)
        included: Units covered at no additional charge
        rate: Price per unit beyond the quota

    Returns:
        max(0, usage - included) * rate
    """
    return max(0.0, clamp_usage(usage) - included) * rate


def price_resource(inputs: Mapping[str, Optional[float]], metered: MeteredRate) -> CostBreakdownItem:
    """Price one metered resource from the inputs."""
    usage = clamp_usage(inputs.get(metered.key)) * metered.unit_multiplier
    return CostBreakdownItem(
        label=metered.label,
        value=overage_charge(usage, metered.included, metered.rate),
        category=metered.category,
        included=metered.included_display,
    )


def price_usage(
    inputs: Mapping[str, Optional[float]],
    rates: Sequence[MeteredRate],
) -> List[CostBreakdownItem]:
    """Price every metered resource, in the order given."""
    return [price_resource(inputs, metered) for metered in rates]


def apply_credits(usage_total: float, available_credit: float) -> float:
    """Credits applied never exceed the usage they offset."""
    return min(max(0.0, available_credit), usage_total)


def build_cost_result(
    base_price: float,
    usage_lines: List[CostBreakdownItem],
    available_credit: float = 0.0,
) -> CostResult:
    """Assemble a CostResult from priced lines.

    The breakdown starts with the base subscription, follows with the usage
    lines as given and ends with a negative credits line when any credit
    was applied.

    Args:
        base_price: Subscription price for the plan
        usage_lines: Priced metered resources
        available_credit: Usage credit pool granted by the plan

    Returns:
        CostResult honoring total == base + max(0, usage - credits)
    """
    usage_total = sum(line.value for line in usage_lines)
    credits_applied = apply_credits(usage_total, available_credit)
    total = base_price + max(0.0, usage_total - credits_applied)

    breakdown = [CostBreakdownItem(label=BASE_LABEL, value=base_price, category=BASE_CATEGORY)]
    breakdown.extend(usage_lines)
    if credits_applied > 0:
        breakdown.append(CostBreakdownItem(
            label=CREDITS_LABEL,
            value=-credits_applied,
            category=CREDITS_CATEGORY,
        ))

    return CostResult(
        base_price=base_price,
        usage_charges=usage_total,
        credits_applied=credits_applied,
        total=total,
        breakdown=breakdown,
    )
