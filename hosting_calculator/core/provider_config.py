"""
Provider configuration.

Binds a provider's default inputs, plan presets, pricing engine and
persistence key names into one immutable descriptor.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .types import CostResult, Plan, UsageInputs

PricingEngine = Callable[[UsageInputs, Plan, int], CostResult]


@dataclass(frozen=True)
class PersistenceKeys:
    """Key names a provider uses in the persistence port."""
    inputs: str
    team_members: Optional[str] = None
    plan: Optional[str] = None

    def __post_init__(self):
        """Validate the inputs key is usable."""
        if not self.inputs or not self.inputs.strip():
            raise ValueError("inputs persistence key is required and cannot be empty")

    def names(self) -> List[str]:
        """Every declared key name."""
        return [key for key in (self.inputs, self.team_members, self.plan) if key]


@dataclass(frozen=True)
class InputField:
    """Descriptor for one usage metric a provider accepts."""
    key: str
    label: str
    unit: str
    group: str
    optional: bool = False


@dataclass(frozen=True)
class ProviderConfig:
    """Immutable description of one hosting provider."""
    name: str
    default_inputs: UsageInputs
    plan_presets: Dict[Plan, UsageInputs]
    calculate: PricingEngine
    persistence_keys: PersistenceKeys
    fields: Tuple[InputField, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """Validate the configuration is usable by a session."""
        if not self.name or not self.name.strip():
            raise ValueError("provider name is required and cannot be empty")
        if not self.plan_presets:
            raise ValueError(f"{self.name}: plan_presets must contain at least one plan")

    @property
    def plans(self) -> List[Plan]:
        """Plan keys in declaration order."""
        return list(self.plan_presets)

    @property
    def first_plan(self) -> Plan:
        """The plan a fresh session starts on."""
        return next(iter(self.plan_presets))

    @property
    def supports_team(self) -> bool:
        return self.persistence_keys.team_members is not None

    def preset_for(self, plan: Plan) -> Optional[UsageInputs]:
        """Copy of the preset inputs for a plan, or None for unknown plans."""
        preset = self.plan_presets.get(plan)
        return dict(preset) if preset is not None else None

    def field_keys(self) -> List[str]:
        """Input field names, falling back to the default inputs' keys."""
        if self.fields:
            return [f.key for f in self.fields]
        return list(self.default_inputs)

    def get_field(self, key: str) -> InputField:
        """Look up an input field descriptor.

        Raises:
            ValueError: If the provider has no such input
        """
        for f in self.fields:
            if f.key == key:
                return f
        raise ValueError(f"Unknown input for {self.name}: {key}")


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def validate_inputs(config: ProviderConfig, data: Any) -> UsageInputs:
    """Check a decoded value has the shape of the provider's usage inputs.

    Args:
        config: Provider whose input shape is expected
        data: Decoded value, typically from JSON

    Returns:
        A fresh UsageInputs dict

    Raises:
        ValueError: If the value is not a mapping of known fields to numbers
    """
    if not isinstance(data, Mapping):
        raise ValueError(f"{config.name} inputs must be an object, got {type(data).__name__}")

    known = config.field_keys()
    unknown = set(data) - set(known)
    if unknown:
        raise ValueError(f"Unknown {config.name} inputs: {sorted(unknown)}")

    optional = {f.key for f in config.fields if f.optional}
    inputs: UsageInputs = {}
    for key in known:
        if key not in data and key in optional:
            continue
        if data.get(key) is None:
            if key in optional:
                inputs[key] = None
                continue
            raise ValueError(f"Missing required {config.name} input: {key}")
        value = data[key]
        if not _is_number(value):
            raise ValueError(f"{config.name} input '{key}' must be a number")
        inputs[key] = value
    return inputs
