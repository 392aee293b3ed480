"""Composable stop conditions evaluated once per generation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from evolab.exceptions import ConfigurationError

if TYPE_CHECKING:
    from evolab.simulation.results import SimulationState


class StopReason(BaseModel):
    """Why a simulation stopped.

    ``condition`` names the condition that fired; combinators list the
    triggered child reasons in ``causes``.
    """

    condition: str
    message: str
    causes: tuple["StopReason", ...] = ()

    model_config = ConfigDict(frozen=True)

    def triggered_by(self, condition: str) -> bool:
        """True if ``condition`` fired anywhere in this reason tree."""
        if self.condition == condition:
            return True
        return any(cause.triggered_by(condition) for cause in self.causes)

    def __str__(self) -> str:
        return self.message


class TerminationCondition(ABC):
    """Stateless predicate over the latest simulation state."""

    @abstractmethod
    def evaluate(self, state: "SimulationState") -> StopReason | None:
        """Return a stop reason if the simulation must stop, else ``None``."""

    def __or__(self, other: "TerminationCondition") -> "Or":
        return Or(self, other)

    def __and__(self, other: "TerminationCondition") -> "And":
        return And(self, other)


class FitnessLimit(TerminationCondition):
    """Stops once the best fitness reaches ``fitness_target``."""

    CONDITION = "fitness-limit"

    def __init__(self, fitness_target: Any):
        self.fitness_target = fitness_target

    def evaluate(self, state: "SimulationState") -> StopReason | None:
        best = state.best_solution.solution.fitness
        if best >= self.fitness_target:
            return StopReason(
                condition=self.CONDITION,
                message=(
                    f"Simulation stopped after the fitness limit of {self.fitness_target} "
                    f"has been reached (best fitness {best})"
                ),
            )
        return None


class GenerationLimit(TerminationCondition):
    """Stops once ``max_generations`` generations have been processed."""

    CONDITION = "generation-limit"

    def __init__(self, max_generations: int):
        if max_generations < 1:
            raise ConfigurationError(
                f"max_generations must be at least 1, got {max_generations}"
            )
        self.max_generations = max_generations

    def evaluate(self, state: "SimulationState") -> StopReason | None:
        if state.generation >= self.max_generations:
            return StopReason(
                condition=self.CONDITION,
                message=(
                    f"Simulation stopped after the limit of {self.max_generations} "
                    f"generations has been reached"
                ),
            )
        return None


class TimeLimit(TerminationCondition):
    """Stops once the run has been going for at least ``max_duration``."""

    CONDITION = "time-limit"

    def __init__(self, max_duration: timedelta):
        if max_duration <= timedelta(0):
            raise ConfigurationError(f"max_duration must be positive, got {max_duration}")
        self.max_duration = max_duration

    def evaluate(self, state: "SimulationState") -> StopReason | None:
        if state.duration >= self.max_duration:
            return StopReason(
                condition=self.CONDITION,
                message=(
                    f"Simulation stopped after the time limit of {self.max_duration} "
                    f"has been reached"
                ),
            )
        return None


class Or(TerminationCondition):
    """Stops when any child condition fires; the first one wins."""

    CONDITION = "or"

    def __init__(self, *conditions: TerminationCondition):
        if not conditions:
            raise ConfigurationError("Or requires at least one condition")
        self.conditions = conditions

    def evaluate(self, state: "SimulationState") -> StopReason | None:
        for condition in self.conditions:
            reason = condition.evaluate(state)
            if reason is not None:
                return StopReason(
                    condition=self.CONDITION, message=reason.message, causes=(reason,)
                )
        return None


class And(TerminationCondition):
    """Stops only when every child condition fires."""

    CONDITION = "and"

    def __init__(self, *conditions: TerminationCondition):
        if not conditions:
            raise ConfigurationError("And requires at least one condition")
        self.conditions = conditions

    def evaluate(self, state: "SimulationState") -> StopReason | None:
        reasons = []
        for condition in self.conditions:
            reason = condition.evaluate(state)
            if reason is None:
                return None
            reasons.append(reason)
        return StopReason(
            condition=self.CONDITION,
            message=" and ".join(r.message for r in reasons),
            causes=tuple(reasons),
        )


def or_(*conditions: TerminationCondition) -> Or:
    return Or(*conditions)


def and_(*conditions: TerminationCondition) -> And:
    return And(*conditions)
