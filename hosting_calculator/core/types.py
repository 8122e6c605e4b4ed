"""
Shared result types for cost calculation.

Provider-agnostic structures produced by every pricing engine.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

# Metric name -> usage amount; optional metrics may be None or absent
UsageInputs = Dict[str, Optional[float]]

# Plan identifiers are only meaningful within one provider
Plan = str

CREDITS_CATEGORY = "Credits"


@dataclass(frozen=True)
class CostBreakdownItem:
    """One itemized charge (or credit) contributing to the total."""
    label: str
    value: float
    category: str
    included: Optional[Union[int, str]] = None  # Included quota, for display

    @property
    def is_credit(self) -> bool:
        return self.category == CREDITS_CATEGORY


@dataclass(frozen=True)
class CostResult:
    """Itemized monthly cost for one set of inputs.

    Invariants:
    - total == base_price + max(0, usage_charges - credits_applied)
    - sum of breakdown values == total (credits recorded as a negative line)
    """
    base_price: float
    usage_charges: float
    credits_applied: float
    total: float
    breakdown: List[CostBreakdownItem] = field(default_factory=list)

    def visible_lines(self) -> List[CostBreakdownItem]:
        """Breakdown lines with a non-zero value, in engine order."""
        return [item for item in self.breakdown if item.value != 0]
