from __future__ import annotations

from abc import ABC, abstractmethod
import math
import random
from typing import Any, Generic, TypeVar

from evolab.evolution.genetic import EvaluatedIndividual, EvaluatedPopulation
from evolab.exceptions import ConfigurationError

G = TypeVar("G")


def validate_ratio(name: str, value: float, *, allow_zero: bool = True) -> float:
    """Check that ``value`` is a finite ratio in ``[0, 1]`` (or ``(0, 1]``)."""
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ConfigurationError(f"{name} must be a finite number, got {value!r}")
    if value > 1.0 or value < 0.0 or (value == 0.0 and not allow_zero):
        bounds = "[0, 1]" if allow_zero else "(0, 1]"
        raise ConfigurationError(f"{name} must be in {bounds}, got {value}")
    return float(value)


def validate_count(name: str, value: int, *, minimum: int = 1) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
        raise ConfigurationError(f"{name} must be an integer >= {minimum}, got {value!r}")
    return value


def scaled_count(size: int, ratio: float) -> int:
    """Round ``size * ratio`` half up."""
    return int(math.floor(size * ratio + 0.5))


class GeneticOperator(ABC):
    """Common base of every pluggable strategy."""

    @property
    def name(self) -> str:
        return type(self).__name__

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({params})"


class SelectionOp(GeneticOperator, Generic[G]):
    """Chooses groups of parents from an evaluated population."""

    @abstractmethod
    def select_from(
        self, population: EvaluatedPopulation[G, Any], rng: random.Random
    ) -> list[list[G]]:
        """Return parent groups, each exactly ``num_individuals_per_parents`` long."""


class CrossoverOp(GeneticOperator, Generic[G]):
    """Combines one parent group into offspring."""

    @abstractmethod
    def crossover(self, parents: list[G], rng: random.Random) -> list[G]:
        """Return the offspring bred from ``parents``."""


class MutationOp(GeneticOperator, Generic[G]):
    """Randomly perturbs a single genome."""

    @abstractmethod
    def mutate(self, genome: G, rng: random.Random) -> G:
        """Return the mutated genome; ``genome`` itself is left untouched.

        Raises:
            GenomeError: if ``genome`` is malformed for this operator.
        """


class ReinsertionOp(GeneticOperator, Generic[G]):
    """Merges offspring and the current population into the next generation."""

    @abstractmethod
    def combine(
        self,
        offspring: EvaluatedPopulation[G, Any],
        population: EvaluatedPopulation[G, Any],
        population_size: int,
        rng: random.Random,
        best_so_far: EvaluatedIndividual[G, Any] | None = None,
    ) -> list[G]:
        """Return exactly ``population_size`` genomes for the next generation.

        Every slot holds its own genome object; a genome that fills more than
        one slot is copied.
        """
