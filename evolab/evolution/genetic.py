"""Capability contracts every pluggable strategy is written against."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import random
from typing import Any, Generic, Protocol, Sequence, TypeVar, runtime_checkable

G = TypeVar("G")
F = TypeVar("F")


@runtime_checkable
class AsScalar(Protocol):
    def as_scalar(self) -> float: ...


def as_scalar(value: Any) -> float:
    """Convert a fitness value to a float weight."""
    if isinstance(value, AsScalar):
        return float(value.as_scalar())
    return float(value)


@dataclass(frozen=True)
class EvaluatedIndividual(Generic[G, F]):
    """A genome paired with its computed fitness."""

    genome: G
    fitness: F


class FitnessEvaluation(ABC, Generic[G, F]):
    """Computes the fitness of genomes.

    Implementations must be pure functions of the genome: evaluating the same
    genome twice yields the same value, and evaluations of different genomes
    may run concurrently.
    """

    @abstractmethod
    def fitness_of(self, genome: G) -> F:
        """Return the fitness of ``genome``."""

    @abstractmethod
    def average(self, fitness_values: Sequence[F]) -> F:
        """Return the average of ``fitness_values``."""

    @abstractmethod
    def highest_possible_fitness(self) -> F: ...

    @abstractmethod
    def lowest_possible_fitness(self) -> F: ...


class PopulationGenerator(ABC, Generic[G]):
    """Synthesizes random genomes for the initial population."""

    @abstractmethod
    def generate_genotype(self, rng: random.Random) -> G:
        """Return a new, independent genome."""

    def generate_population(self, size: int, rng: random.Random) -> list[G]:
        if size < 1:
            raise ValueError(f"population size must be at least 1, got {size}")
        return [self.generate_genotype(rng) for _ in range(size)]


@dataclass(frozen=True)
class EvaluatedPopulation(Generic[G, F]):
    """The genomes of one generation together with their fitness values."""

    individuals: list[G]
    fitness_values: list[F]
    average_fitness: F
    highest_fitness: F
    lowest_fitness: F

    @classmethod
    def from_fitness_values(
        cls,
        individuals: list[G],
        fitness_values: list[F],
        evaluator: FitnessEvaluation[G, F],
    ) -> "EvaluatedPopulation[G, F]":
        if len(individuals) != len(fitness_values):
            raise ValueError(
                f"{len(individuals)} individuals but {len(fitness_values)} fitness values"
            )
        if not individuals:
            raise ValueError("cannot evaluate an empty population")
        return cls(
            individuals=list(individuals),
            fitness_values=list(fitness_values),
            average_fitness=evaluator.average(fitness_values),
            highest_fitness=max(fitness_values),
            lowest_fitness=min(fitness_values),
        )

    def __len__(self) -> int:
        return len(self.individuals)

    def individual(self, index: int) -> EvaluatedIndividual[G, F]:
        return EvaluatedIndividual(self.individuals[index], self.fitness_values[index])

    def evaluated_individuals(self) -> list[EvaluatedIndividual[G, F]]:
        return [self.individual(i) for i in range(len(self))]

    def ranked_indices(self) -> list[int]:
        """Indices ordered by descending fitness; ties keep population order."""
        return sorted(
            range(len(self)), key=lambda i: self.fitness_values[i], reverse=True
        )

    def best(self) -> EvaluatedIndividual[G, F]:
        """The fittest individual; the earliest one wins ties."""
        best_index = 0
        for i, fitness in enumerate(self.fitness_values):
            if fitness > self.fitness_values[best_index]:
                best_index = i
        return self.individual(best_index)
