"""
Scenario configuration loading.

Reads usage scenarios from YAML files with strict validation.
"""

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml

from hosting_calculator.core.provider_config import ProviderConfig
from hosting_calculator.core.types import CostResult, Plan, UsageInputs
from hosting_calculator.providers import get_provider


@dataclass(frozen=True)
class Scenario:
    """A complete set of arguments for one cost calculation."""
    provider: ProviderConfig
    plan: Plan
    team_members: int
    inputs: UsageInputs

    def __post_init__(self):
        """Validate team size is positive."""
        if self.team_members < 1:
            raise ValueError("team_members must be >= 1")

    def calculate(self) -> CostResult:
        return self.provider.calculate(self.inputs, self.plan, self.team_members)


def load_scenario(path: str) -> Scenario:
    """Load and validate a usage scenario from a YAML file.

    The file names a provider and optionally a plan, a team size and input
    overrides. Overrides are applied on top of the plan's preset inputs.

    Example:
        provider: vercel
        plan: pro
        team_members: 3
        inputs:
          webAnalytics: 400000

    Args:
        path: Path to YAML scenario file

    Returns:
        Validated Scenario object

    Raises:
        FileNotFoundError: If scenario file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If scenario is invalid
    """
    scenario_path = Path(path)
    if not scenario_path.exists():
        raise FileNotFoundError(f"Scenario file not found: {path}")

    with open(scenario_path, 'r', encoding='utf-8') as f:
        try:
            raw_scenario = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in scenario file {path}: {e}")

    if not raw_scenario:
        raise ValueError("Scenario file is empty")
    if not isinstance(raw_scenario, dict):
        raise ValueError("Scenario must be a dictionary")

    return parse_scenario(raw_scenario)


def parse_scenario(raw_scenario: Dict[str, Any]) -> Scenario:
    """Validate an already-decoded scenario mapping.

    Raises:
        ValueError: If scenario is invalid
    """
    allowed_top_keys = {'provider', 'plan', 'team_members', 'inputs'}
    unknown_keys = set(raw_scenario.keys()) - allowed_top_keys
    if unknown_keys:
        raise ValueError(f"Unknown scenario keys: {unknown_keys}")

    if 'provider' not in raw_scenario:
        raise ValueError("Missing required 'provider'")
    provider_name = raw_scenario['provider']
    if not isinstance(provider_name, str):
        raise ValueError("'provider' must be a string")
    provider = get_provider(provider_name)

    plan = raw_scenario.get('plan', provider.first_plan)
    if not isinstance(plan, str):
        raise ValueError("'plan' must be a string")
    if plan not in provider.plan_presets:
        raise ValueError(f"'plan' must be one of: {provider.plans}")

    team_members = raw_scenario.get('team_members', 1)
    if not isinstance(team_members, int) or isinstance(team_members, bool):
        raise ValueError("'team_members' must be an integer")

    overrides = raw_scenario.get('inputs') or {}
    if not isinstance(overrides, dict):
        raise ValueError("'inputs' must be a dictionary")

    inputs = provider.preset_for(plan)
    inputs.update(_parse_inputs(provider, overrides))

    return Scenario(
        provider=provider,
        plan=plan,
        team_members=team_members,
        inputs=inputs,
    )


def _parse_inputs(provider: ProviderConfig, data: Dict[str, Any]) -> UsageInputs:
    """Validate input overrides against the provider's fields.

    Args:
        provider: Provider whose fields are accepted
        data: Input overrides

    Returns:
        Validated overrides

    Raises:
        ValueError: If an override is unknown, non-numeric or negative
    """
    known = set(provider.field_keys())
    unknown_keys = set(data.keys()) - known
    if unknown_keys:
        raise ValueError(f"Unknown {provider.name} inputs: {unknown_keys}")

    inputs: UsageInputs = {}
    for key, value in data.items():
        if value is None and provider.get_field(key).optional:
            inputs[key] = None
            continue
        if not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value):
            raise ValueError(f"Input '{key}' must be a number")
        if value < 0:
            raise ValueError(f"Input '{key}' must be >= 0")
        inputs[key] = value
    return inputs
