from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Generic, TypeVar, Union

from evolab.evolution.genetic import EvaluatedIndividual, EvaluatedPopulation
from evolab.evolution.statistics import FitnessStatistics
from evolab.evolution.termination import StopReason

G = TypeVar("G")
F = TypeVar("F")


@dataclass(frozen=True)
class BestSolution(Generic[G, F]):
    """Best individual of a run and where it was found."""

    found_at: datetime
    generation: int
    solution: EvaluatedIndividual[G, F]

    def improved_by(self, candidate: EvaluatedIndividual[G, F]) -> bool:
        return candidate.fitness > self.solution.fitness


@dataclass(frozen=True)
class SimulationState(Generic[G, F]):
    """Snapshot of a simulation after one step.

    Attributes:
        started_at: when the first step began
        generation: number of generations processed so far
        population: the evaluated population this generation bred from
        best_solution: best individual seen across all generations
        processing_time: time spent in the latest step
        total_processing_time: time spent in all steps so far
        duration: wall clock time since ``started_at``
    """

    started_at: datetime
    generation: int
    population: EvaluatedPopulation[G, F]
    best_solution: BestSolution[G, F]
    processing_time: timedelta
    total_processing_time: timedelta
    duration: timedelta

    @property
    def average_fitness(self) -> F:
        return self.population.average_fitness

    @property
    def highest_fitness(self) -> F:
        return self.population.highest_fitness

    @property
    def lowest_fitness(self) -> F:
        return self.population.lowest_fitness

    def fitness_statistics(self) -> FitnessStatistics:
        return FitnessStatistics.from_values(self.population.fitness_values)


@dataclass(frozen=True)
class IntermediateResult(Generic[G, F]):
    state: SimulationState[G, F]

    @property
    def is_final(self) -> bool:
        return False


@dataclass(frozen=True)
class FinalResult(Generic[G, F]):
    state: SimulationState[G, F]
    duration: timedelta
    stop_reason: StopReason

    @property
    def is_final(self) -> bool:
        return True


StepResult = Union[IntermediateResult, FinalResult]
