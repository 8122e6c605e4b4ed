"""
Vercel pricing.

Per-seat Pro pricing with a usage credit pool, plus metered usage for the
edge network, functions, sandbox, workflow, builds, images, analytics,
blob storage, edge config, ISR and firewall.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from ..core.billing import MeteredRate, build_cost_result, price_usage
from ..core.provider_config import InputField, PersistenceKeys, ProviderConfig
from ..core.types import CostResult, Plan, UsageInputs


class VercelPlan(Enum):
    """Known Vercel plans."""
    HOBBY = "hobby"
    PRO = "pro"
    ENTERPRISE = "enterprise"


@dataclass(frozen=True)
class SeatPricing:
    """Plan-dependent coefficients; everything else is shared."""
    price_per_seat: float
    credit_per_seat: float
    edge_requests_included: int
    fast_data_transfer_included: int  # GB


PRO_PRICING = SeatPricing(
    price_per_seat=20.0,
    credit_per_seat=20.0,
    edge_requests_included=10_000_000,
    fast_data_transfer_included=1_000,
)

# Hobby, enterprise and unrecognized plans
STANDARD_PRICING = SeatPricing(
    price_per_seat=0.0,
    credit_per_seat=0.0,
    edge_requests_included=1_000_000,
    fast_data_transfer_included=100,
)

PLAN_PRICING: Dict[VercelPlan, SeatPricing] = {
    VercelPlan.HOBBY: STANDARD_PRICING,
    VercelPlan.PRO: PRO_PRICING,
    VercelPlan.ENTERPRISE: STANDARD_PRICING,
}


def resolve_plan(plan: Plan) -> Optional[VercelPlan]:
    """Map a plan string to a known plan, or None if unrecognized."""
    try:
        return VercelPlan(plan)
    except ValueError:
        return None


def seat_pricing(plan: Plan) -> SeatPricing:
    """Coefficients for a plan string, defaulting to hobby pricing."""
    known_plan = resolve_plan(plan)
    if known_plan is None:
        return STANDARD_PRICING
    return PLAN_PRICING[known_plan]


def _edge_network_rates(pricing: SeatPricing) -> Tuple[MeteredRate, ...]:
    return (
        MeteredRate("edgeRequests", "Edge Requests", "Edge Network",
                    rate=2.00 / 1_000_000,
                    included=pricing.edge_requests_included,
                    included_display=pricing.edge_requests_included),
        MeteredRate("fastDataTransfer", "Fast Data Transfer", "Edge Network",
                    rate=0.15,
                    included=pricing.fast_data_transfer_included,
                    included_display=f"{pricing.fast_data_transfer_included} GB"),
        MeteredRate("fastOriginTransfer", "Fast Origin Transfer", "Edge Network",
                    rate=0.06, included=10, included_display="10 GB"),
    )


# Identical for every plan; listed in breakdown order
SHARED_RATES = (
    # Functions
    MeteredRate("functionActiveCpuTime", "Functions Active CPU", "Compute",
                rate=0.128, included=4, included_display="4 hrs"),
    MeteredRate("provisionedMemory", "Functions Memory", "Compute",
                rate=0.0106, included=360, included_display="360 GB-hrs"),
    MeteredRate("invocations", "Function Invocations", "Compute",
                rate=0.60 / 1_000_000, included=1_000_000, included_display=1_000_000),
    # Sandbox
    MeteredRate("sandboxActiveCpuTime", "Sandbox Active CPU", "Sandbox",
                rate=0.128, included=5, included_display="5 hrs"),
    MeteredRate("sandboxProvisionedMemory", "Sandbox Memory", "Sandbox",
                rate=0.0106, included=420, included_display="420 GB-hrs"),
    MeteredRate("sandboxCreations", "Sandbox Creations", "Sandbox",
                rate=0.60 / 1_000_000, included=5_000, included_display=5_000),
    MeteredRate("sandboxNetwork", "Sandbox Network", "Sandbox",
                rate=0.15, included=20, included_display="20 GB"),
    # Workflow
    MeteredRate("steps", "Workflow Steps", "Workflow",
                rate=2.50 / 100_000, included=50_000, included_display=50_000),
    MeteredRate("storage", "Workflow Storage", "Workflow",
                rate=0.50, included=1, included_display="1 GB"),
    # Build minutes, billed from the first minute
    MeteredRate("standardMachines", "Build Standard Machines", "Build", rate=0.014),
    MeteredRate("enhancedMachines", "Build Enhanced Machines", "Build", rate=0.028),
    MeteredRate("turboMachines", "Build Turbo Machines", "Build", rate=0.126),
    # Image optimization
    MeteredRate("imageTransformations", "Image Transformations", "Image Optimization",
                rate=0.05 / 1_000, included=5_000, included_display=5_000),
    MeteredRate("imageCacheReads", "Image Cache Reads", "Image Optimization",
                rate=0.40 / 1_000_000, included=300_000, included_display=300_000),
    MeteredRate("imageCacheWrites", "Image Cache Writes", "Image Optimization",
                rate=4.00 / 1_000_000, included=100_000, included_display=100_000),
    # Observability
    MeteredRate("webAnalytics", "Web Analytics", "Analytics", rate=3 / 100_000),
    # Blob
    MeteredRate("blobStorageSize", "Blob Storage Size", "Blob Storage",
                rate=0.023, included=1, included_display="1 GB"),
    MeteredRate("blobSimpleOps", "Blob Simple Ops", "Blob Storage",
                rate=0.40 / 1_000_000, included=10_000, included_display=10_000),
    MeteredRate("blobAdvancedOps", "Blob Advanced Ops", "Blob Storage",
                rate=5.00 / 1_000_000, included=2_000, included_display=2_000),
    MeteredRate("blobDataTransfer", "Blob Data Transfer", "Blob Storage",
                rate=0.05, included=10, included_display="10 GB"),
    # Edge Config
    MeteredRate("edgeConfigReads", "Edge Config Reads", "Edge Config",
                rate=3.00 / 1_000_000, included=100_000, included_display=100_000),
    MeteredRate("edgeConfigWrites", "Edge Config Writes", "Edge Config",
                rate=5.00 / 500, included=100, included_display=100),
    # ISR
    MeteredRate("isrReads", "ISR Reads", "ISR",
                rate=0.40 / 1_000_000, included=1_000_000, included_display=1_000_000),
    MeteredRate("isrWrites", "ISR Writes", "ISR",
                rate=4.00 / 1_000_000, included=200_000, included_display=200_000),
    # Firewall; rate limiting is entered in millions of requests
    MeteredRate("rateLimitingRequests", "Rate Limiting", "Firewall",
                rate=0.50 / 1_000_000, included=1_000_000, included_display=1_000_000,
                unit_multiplier=1_000_000),
    MeteredRate("botId", "BotID Deep Analysis", "Firewall", rate=1.00 / 1_000),
)


def metered_rates(plan: Plan) -> Tuple[MeteredRate, ...]:
    """All metered resources for a plan, in breakdown order."""
    return _edge_network_rates(seat_pricing(plan)) + SHARED_RATES


def calculate_vercel_cost(inputs: UsageInputs, plan: Plan = "hobby", team_members: int = 1) -> CostResult:
    """Calculate the monthly Vercel cost.

    Pro bills $20 per seat and grants a $20 per seat usage credit that
    offsets usage charges before the base price is added.

    Args:
        inputs: Vercel usage inputs
        plan: Plan identifier ("hobby", "pro" or "enterprise")
        team_members: Number of full-access seats

    Returns:
        Itemized CostResult
    """
    pricing = seat_pricing(plan)
    seats = 1 if team_members is None else max(0, team_members)
    base_price = pricing.price_per_seat * seats
    available_credit = pricing.credit_per_seat * seats
    return build_cost_result(base_price, price_usage(inputs, metered_rates(plan)), available_credit)


VERCEL_FIELDS = (
    InputField("edgeRequests", "Edge Requests", "requests/mo", "Edge Network"),
    InputField("fastDataTransfer", "Fast Data Transfer", "GB", "Edge Network"),
    InputField("fastOriginTransfer", "Fast Origin Transfer", "GB", "Edge Network"),
    InputField("rateLimitingRequests", "Rate Limiting Requests", "M requests", "Firewall"),
    InputField("botId", "BotID Deep Analysis Checks", "checks", "Firewall", optional=True),
    InputField("isrReads", "ISR Reads", "reads/mo", "ISR"),
    InputField("isrWrites", "ISR Writes", "writes/mo", "ISR"),
    InputField("blobStorageSize", "Blob Storage Size", "GB", "Blob Storage"),
    InputField("blobSimpleOps", "Blob Simple Operations", "ops/mo", "Blob Storage"),
    InputField("blobAdvancedOps", "Blob Advanced Operations", "ops/mo", "Blob Storage"),
    InputField("blobDataTransfer", "Blob Data Transfer", "GB", "Blob Storage"),
    InputField("imageCacheReads", "Image Cache Reads", "reads/mo", "Image Optimization"),
    InputField("imageCacheWrites", "Image Cache Writes", "writes/mo", "Image Optimization"),
    InputField("imageTransformations", "Image Transformations", "transforms/mo", "Image Optimization"),
    InputField("edgeConfigReads", "Edge Config Reads", "reads/mo", "Edge Config"),
    InputField("edgeConfigWrites", "Edge Config Writes", "writes/mo", "Edge Config"),
    InputField("functionActiveCpuTime", "Functions Active CPU Time", "hours", "Functions"),
    InputField("provisionedMemory", "Functions Provisioned Memory", "GB-hrs", "Functions"),
    InputField("invocations", "Function Invocations", "invocations/mo", "Functions"),
    InputField("sandboxActiveCpuTime", "Sandbox Active CPU Time", "hours", "Sandbox"),
    InputField("sandboxProvisionedMemory", "Sandbox Provisioned Memory", "GB-hrs", "Sandbox"),
    InputField("sandboxInvocations", "Sandbox Invocations", "invocations/mo", "Sandbox"),
    InputField("sandboxCreations", "Sandbox Creations", "creations/mo", "Sandbox"),
    InputField("sandboxNetwork", "Sandbox Network", "GB", "Sandbox"),
    InputField("steps", "Workflow Steps", "steps/mo", "Workflow"),
    InputField("storage", "Workflow Storage", "GB", "Workflow"),
    InputField("standardMachines", "Standard Build Machines", "minutes", "Build"),
    InputField("enhancedMachines", "Enhanced Build Machines", "minutes", "Build"),
    InputField("turboMachines", "Turbo Build Machines", "minutes", "Build"),
    InputField("webAnalytics", "Web Analytics Events", "events/mo", "Observability"),
)

VERCEL_HOBBY_INPUTS: UsageInputs = {
    "edgeRequests": 1_000_000,
    "fastDataTransfer": 100,
    "fastOriginTransfer": 10,
    "rateLimitingRequests": 1,
    "botId": None,
    "isrReads": 1_000_000,
    "isrWrites": 200_000,
    "blobStorageSize": 1,
    "blobSimpleOps": 10_000,
    "blobAdvancedOps": 2_000,
    "blobDataTransfer": 10,
    "imageCacheReads": 300_000,
    "imageCacheWrites": 100_000,
    "imageTransformations": 5_000,
    "edgeConfigReads": 100_000,
    "edgeConfigWrites": 100,
    "functionActiveCpuTime": 4,
    "provisionedMemory": 360,
    "invocations": 1_000_000,
    "sandboxActiveCpuTime": 5,
    "sandboxProvisionedMemory": 420,
    "sandboxInvocations": 0,
    "sandboxCreations": 5_000,
    "sandboxNetwork": 20,
    "steps": 50_000,
    "storage": 1,
    "standardMachines": 0,
    "enhancedMachines": 0,
    "turboMachines": 0,
    "webAnalytics": 0,
}

# Pro raises the edge network quotas; everything else matches hobby
VERCEL_PRO_INPUTS: UsageInputs = dict(
    VERCEL_HOBBY_INPUTS,
    edgeRequests=10_000_000,
    fastDataTransfer=1_000,
)

VERCEL_CONFIG = ProviderConfig(
    name="Vercel",
    default_inputs=VERCEL_HOBBY_INPUTS,
    plan_presets={
        VercelPlan.HOBBY.value: VERCEL_HOBBY_INPUTS,
        VercelPlan.PRO.value: VERCEL_PRO_INPUTS,
        VercelPlan.ENTERPRISE.value: VERCEL_PRO_INPUTS,  # Pro limits as base
    },
    calculate=calculate_vercel_cost,
    persistence_keys=PersistenceKeys(
        inputs="hosting-calc-vercel-inputs",
        team_members="hosting-calc-vercel-team",
        plan="hosting-calc-vercel-plan",
    ),
    fields=VERCEL_FIELDS,
)
