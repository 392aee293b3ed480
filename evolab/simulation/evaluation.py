"""Fitness evaluation and breeding fan-out.

Both helpers accept an optional :class:`concurrent.futures.Executor`. Results
are always collected in input order and every breeding unit draws from its own
random stream, so a seeded run produces the same generations with or without
an executor.
"""

from __future__ import annotations

from concurrent.futures import Executor
import random
from typing import Any, Sequence

from evolab.evolution.genetic import EvaluatedPopulation, FitnessEvaluation
from evolab.evolution.operators.base import CrossoverOp, MutationOp
from evolab.evolution.sampling import spawn_rngs

__all__ = ["evaluate_population", "breed_offspring"]


def evaluate_population(
    genomes: Sequence[Any],
    evaluator: FitnessEvaluation[Any, Any],
    executor: Executor | None = None,
) -> EvaluatedPopulation[Any, Any]:
    if executor is None:
        fitness_values = [evaluator.fitness_of(genome) for genome in genomes]
    else:
        fitness_values = list(executor.map(evaluator.fitness_of, genomes))
    return EvaluatedPopulation.from_fitness_values(list(genomes), fitness_values, evaluator)


def _breed_group(
    breeder: CrossoverOp,
    mutator: MutationOp,
    parents: list[Any],
    rng: random.Random,
) -> list[Any]:
    children = breeder.crossover(parents, rng)
    return [mutator.mutate(child, rng) for child in children]


def breed_offspring(
    parent_groups: list[list[Any]],
    breeder: CrossoverOp,
    mutator: MutationOp,
    rng: random.Random,
    executor: Executor | None = None,
) -> list[Any]:
    """Recombine and mutate every parent group; returns the flat offspring list."""
    streams = spawn_rngs(rng, len(parent_groups))
    if executor is None:
        broods = [
            _breed_group(breeder, mutator, parents, stream)
            for parents, stream in zip(parent_groups, streams)
        ]
    else:
        futures = [
            executor.submit(_breed_group, breeder, mutator, parents, stream)
            for parents, stream in zip(parent_groups, streams)
        ]
        broods = [future.result() for future in futures]
    return [child for brood in broods for child in brood]
