"""
Calculator session state.

Owns the inputs, plan and team size for one calculator instance, keeps the
cost current and synchronizes state with a persistence port.
"""

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol, Union

from .provider_config import ProviderConfig, validate_inputs
from .types import CostResult, Plan, UsageInputs

logger = logging.getLogger(__name__)

# Stored team sizes are read up to the first non-digit, so "2.5" restores 2
LEADING_INTEGER = re.compile(r"\s*[+-]?\d+")

InputsUpdate = Union[UsageInputs, Callable[[UsageInputs], UsageInputs]]


class PersistencePort(Protocol):
    """Key-value storage for session state."""

    def load(self, key: str) -> Optional[str]:
        ...

    def save(self, key: str, value: str) -> None:
        ...


class SessionStatus(Enum):
    """Lifecycle of a session controller."""
    UNINITIALIZED = "uninitialized"
    HYDRATING = "hydrating"
    ACTIVE = "active"


@dataclass(frozen=True)
class SessionState:
    """Snapshot of the mutable session values."""
    inputs: UsageInputs
    plan: Plan
    team_members: int


class SessionController:
    """Stateful orchestrator for one calculator session.

    Every mutation recomputes the cost immediately, so ``cost`` always
    reflects the latest inputs, plan and team size. Persistence failures
    are logged and never raised to the caller.
    """

    def __init__(self, config: ProviderConfig, store: Optional[PersistencePort] = None):
        """Initialize the session and hydrate it from the store.

        Args:
            config: Provider the session prices against
            store: Persistence port; None keeps the session in memory only
        """
        self.config = config
        self.store = store
        self.status = SessionStatus.UNINITIALIZED

        self._inputs: UsageInputs = dict(config.default_inputs)
        self._plan: Plan = config.first_plan
        self._team_members = 1

        self.status = SessionStatus.HYDRATING
        self._hydrate()
        self.status = SessionStatus.ACTIVE
        self._recalculate()

    @property
    def inputs(self) -> UsageInputs:
        return dict(self._inputs)

    @property
    def plan(self) -> Plan:
        return self._plan

    @property
    def team_members(self) -> int:
        return self._team_members

    @property
    def cost(self) -> CostResult:
        return self._cost

    @property
    def state(self) -> SessionState:
        return SessionState(inputs=self.inputs, plan=self._plan, team_members=self._team_members)

    def set_inputs(self, update: InputsUpdate) -> None:
        """Replace the inputs and persist them.

        Args:
            update: Complete replacement inputs, or a function of the
                previous inputs returning the replacement
        """
        if callable(update):
            new_inputs = update(dict(self._inputs))
        else:
            new_inputs = update
        self._inputs = dict(new_inputs)
        self._recalculate()
        self._save_inputs()

    def set_plan(self, plan: Plan) -> None:
        """Switch plans, replacing the inputs with the plan's preset if it has one."""
        self._plan = plan
        preset = self.config.preset_for(plan)
        if preset is not None:
            self._inputs = preset
        else:
            logger.warning("%s has no preset for plan %r; keeping current inputs", self.config.name, plan)
        self._recalculate()
        if preset is not None:
            self._save_inputs()
        self._save_plan()

    def set_team_members(self, members: int) -> None:
        """Set the number of seats and persist it when the provider tracks teams."""
        self._team_members = int(members)
        self._recalculate()
        self._save_team_members()

    def reset(self) -> None:
        """Restore default inputs and plan; the team size is kept."""
        self._inputs = dict(self.config.default_inputs)
        self._plan = self.config.first_plan
        self._recalculate()

    def persist(self) -> None:
        """Write the complete current state to the store."""
        self._save_inputs()
        self._save_plan()
        self._save_team_members()

    def _recalculate(self) -> None:
        self._cost = self.config.calculate(self._inputs, self._plan, self._team_members)

    def _hydrate(self) -> None:
        if self.store is None:
            return
        keys = self.config.persistence_keys

        raw_inputs = self._load(keys.inputs)
        if raw_inputs:
            try:
                self._inputs = validate_inputs(self.config, json.loads(raw_inputs))
            except ValueError as e:
                # json.JSONDecodeError is a ValueError
                logger.error("Failed to parse %s from storage: %s", keys.inputs, e)

        if keys.team_members:
            raw_team = self._load(keys.team_members)
            if raw_team:
                match = LEADING_INTEGER.match(raw_team)
                if match:
                    self._team_members = int(match.group())
                else:
                    logger.error("Ignoring non-numeric %s in storage: %r", keys.team_members, raw_team)

        if keys.plan:
            raw_plan = self._load(keys.plan)
            if raw_plan:
                if raw_plan in self.config.plan_presets:
                    self._plan = raw_plan
                else:
                    logger.error("Ignoring unknown %s plan in storage: %r", self.config.name, raw_plan)

    def _load(self, key: str) -> Optional[str]:
        try:
            return self.store.load(key)
        except Exception as e:
            logger.error("Failed to load %s from storage: %s", key, e)
            return None

    def _save(self, key: str, value: str) -> None:
        if self.store is None:
            return
        try:
            self.store.save(key, value)
        except Exception as e:
            logger.warning("Failed to save %s: %s", key, e)

    def _save_inputs(self) -> None:
        self._save(self.config.persistence_keys.inputs, json.dumps(self._inputs))

    def _save_plan(self) -> None:
        if self.config.persistence_keys.plan:
            self._save(self.config.persistence_keys.plan, self._plan)

    def _save_team_members(self) -> None:
        if self.config.persistence_keys.team_members:
            self._save(self.config.persistence_keys.team_members, str(self._team_members))
