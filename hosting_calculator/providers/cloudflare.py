"""
Cloudflare pricing.

Workers Paid plan pricing for Workers, KV, R2, D1 and Images.
"""

from enum import Enum
from typing import Dict, Optional

from ..core.billing import MeteredRate, build_cost_result, price_usage
from ..core.provider_config import InputField, PersistenceKeys, ProviderConfig
from ..core.types import CostResult, Plan, UsageInputs


class CloudflarePlan(Enum):
    """Known Cloudflare plans."""
    FREE = "free"
    PAID = "paid"
    CUSTOM = "custom"


# Monthly subscription per plan; unknown plans price as Workers Paid
BASE_PRICES: Dict[CloudflarePlan, float] = {
    CloudflarePlan.FREE: 0.0,
    CloudflarePlan.PAID: 5.0,
    CloudflarePlan.CUSTOM: 5.0,
}
DEFAULT_BASE_PRICE = 5.0

# Usage pricing is identical across plans
METERED_RATES = (
    # Workers
    MeteredRate("workerRequests", "Worker Requests", "Workers",
                rate=0.30 / 1_000_000, included=10_000_000, included_display=10_000_000),
    MeteredRate("cpuTimeMs", "CPU Time", "Workers",
                rate=0.02 / 1_000_000, included=30_000_000, included_display="30M ms"),
    # KV
    MeteredRate("kvReads", "KV Reads", "KV Storage",
                rate=0.50 / 1_000_000, included=10_000_000, included_display=10_000_000),
    MeteredRate("kvWrites", "KV Writes", "KV Storage",
                rate=5.00 / 1_000_000, included=1_000_000, included_display=1_000_000),
    MeteredRate("kvStorageGb", "KV Storage", "KV Storage",
                rate=0.50, included=1, included_display="1 GB"),
    # R2
    MeteredRate("r2StorageGb", "R2 Storage", "R2",
                rate=0.015, included=10, included_display="10 GB"),
    MeteredRate("r2ClassAOps", "R2 Class A Ops", "R2",
                rate=4.50 / 1_000_000, included=1_000_000, included_display=1_000_000),
    MeteredRate("r2ClassBOps", "R2 Class B Ops", "R2",
                rate=0.36 / 1_000_000, included=10_000_000, included_display=10_000_000),
    # D1
    MeteredRate("d1RowsRead", "D1 Rows Read", "D1",
                rate=0.001 / 1_000_000, included=25_000_000_000, included_display="25B"),
    MeteredRate("d1RowsWritten", "D1 Rows Written", "D1",
                rate=1.00 / 1_000_000, included=50_000_000, included_display="50M"),
    MeteredRate("d1StorageGb", "D1 Storage", "D1",
                rate=0.75, included=5, included_display="5 GB"),
    # Images
    MeteredRate("imageTransformations", "Image Transforms", "Images",
                rate=0.50 / 1_000, included=5_000, included_display=5_000),
    MeteredRate("imagesStored", "Images Stored", "Images", rate=5 / 100_000),
    MeteredRate("imagesDelivered", "Images Delivered", "Images", rate=1 / 100_000),
)


def resolve_plan(plan: Plan) -> Optional[CloudflarePlan]:
    """Map a plan string to a known plan, or None if unrecognized."""
    try:
        return CloudflarePlan(plan)
    except ValueError:
        return None


def calculate_cloudflare_cost(inputs: UsageInputs, plan: Plan = "paid", team_members: int = 1) -> CostResult:
    """Calculate the monthly Cloudflare cost.

    Args:
        inputs: Cloudflare usage inputs
        plan: Plan identifier ("free", "paid" or "custom")
        team_members: Ignored; Cloudflare does not bill per seat

    Returns:
        Itemized CostResult (no credits are ever applied)
    """
    known_plan = resolve_plan(plan)
    base_price = BASE_PRICES[known_plan] if known_plan is not None else DEFAULT_BASE_PRICE
    return build_cost_result(base_price, price_usage(inputs, METERED_RATES))


CLOUDFLARE_FIELDS = (
    InputField("workerRequests", "Worker Requests", "requests/mo", "Workers"),
    InputField("cpuTimeMs", "CPU Time", "ms", "Workers"),
    InputField("kvReads", "KV Reads", "reads/mo", "KV Storage"),
    InputField("kvWrites", "KV Writes", "writes/mo", "KV Storage"),
    InputField("kvStorageGb", "KV Storage", "GB", "KV Storage"),
    InputField("r2StorageGb", "R2 Storage", "GB", "R2"),
    InputField("r2ClassAOps", "R2 Class A Operations", "ops/mo", "R2"),
    InputField("r2ClassBOps", "R2 Class B Operations", "ops/mo", "R2"),
    InputField("d1RowsRead", "D1 Rows Read", "rows/mo", "D1"),
    InputField("d1RowsWritten", "D1 Rows Written", "rows/mo", "D1"),
    InputField("d1StorageGb", "D1 Storage", "GB", "D1"),
    InputField("imageTransformations", "Image Transformations", "unique/mo", "Images"),
    InputField("imagesStored", "Images Stored", "images", "Images"),
    InputField("imagesDelivered", "Images Delivered", "images/mo", "Images"),
)

CLOUDFLARE_FREE_PLAN_INPUTS: UsageInputs = {
    "workerRequests": 100_000,
    "cpuTimeMs": 10_000,
    "kvReads": 100_000,
    "kvWrites": 1_000,
    "kvStorageGb": 1,
    "r2StorageGb": 10,
    "r2ClassAOps": 1_000_000,
    "r2ClassBOps": 10_000_000,
    "d1RowsRead": 5_000_000,
    "d1RowsWritten": 100_000,
    "d1StorageGb": 5,
    "imageTransformations": 0,
    "imagesStored": 0,
    "imagesDelivered": 0,
}

# Every metered value sits exactly at its included quota
CLOUDFLARE_PAID_PLAN_INPUTS: UsageInputs = {
    "workerRequests": 10_000_000,
    "cpuTimeMs": 30_000_000,
    "kvReads": 10_000_000,
    "kvWrites": 1_000_000,
    "kvStorageGb": 1,
    "r2StorageGb": 10,
    "r2ClassAOps": 1_000_000,
    "r2ClassBOps": 10_000_000,
    "d1RowsRead": 25_000_000_000,
    "d1RowsWritten": 50_000_000,
    "d1StorageGb": 5,
    "imageTransformations": 5_000,
    "imagesStored": 0,
    "imagesDelivered": 0,
}

CLOUDFLARE_CONFIG = ProviderConfig(
    name="Cloudflare",
    default_inputs=CLOUDFLARE_FREE_PLAN_INPUTS,
    plan_presets={
        CloudflarePlan.FREE.value: CLOUDFLARE_FREE_PLAN_INPUTS,
        CloudflarePlan.PAID.value: CLOUDFLARE_PAID_PLAN_INPUTS,
        CloudflarePlan.CUSTOM.value: CLOUDFLARE_PAID_PLAN_INPUTS,  # Paid limits as base
    },
    calculate=calculate_cloudflare_cost,
    persistence_keys=PersistenceKeys(
        inputs="hosting-calc-cloudflare-inputs",
        plan="hosting-calc-cloudflare-plan",
    ),
    fields=CLOUDFLARE_FIELDS,
)
