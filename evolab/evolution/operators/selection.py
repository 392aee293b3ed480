from __future__ import annotations

import random
from typing import Any

from loguru import logger

from evolab.evolution.genetic import EvaluatedPopulation
from evolab.evolution.operators.base import (
    SelectionOp,
    scaled_count,
    validate_count,
    validate_ratio,
)
from evolab.evolution.sampling import (
    WeightedDistribution,
    sample_index,
    sample_probability,
)
from evolab.exceptions import SimulationError


class ParentGroupSelector(SelectionOp):
    """Base for selectors parameterized by selection ratio and group arity."""

    def __init__(self, selection_ratio: float, num_individuals_per_parents: int):
        self.selection_ratio = validate_ratio(
            "selection_ratio", selection_ratio, allow_zero=False
        )
        self.num_individuals_per_parents = validate_count(
            "num_individuals_per_parents", num_individuals_per_parents
        )

    def num_groups(self, population_size: int) -> int:
        return max(1, scaled_count(population_size, self.selection_ratio))


class MaximizeSelector(ParentGroupSelector):
    """Truncation selection of the fittest individuals.

    Individuals are ranked by descending fitness (ties keep population order),
    the top ``selection_ratio`` share is kept and partitioned into consecutive
    groups. A last incomplete group wraps around to the top of the pool.
    """

    def select_from(
        self, population: EvaluatedPopulation[Any, Any], rng: random.Random
    ) -> list[list[Any]]:
        arity = self.num_individuals_per_parents
        pool_size = max(arity, scaled_count(len(population), self.selection_ratio))
        ranked = population.ranked_indices()
        mating_pool = [ranked[i % len(ranked)] for i in range(pool_size)]

        groups: list[list[Any]] = []
        for start in range(0, pool_size, arity):
            group = [
                population.individuals[mating_pool[(start + k) % pool_size]]
                for k in range(arity)
            ]
            groups.append(group)

        logger.debug(
            "MaximizeSelector: {} groups of {} from top {} of {} individuals",
            len(groups),
            arity,
            pool_size,
            len(population),
        )
        return groups


def _fitness_weights(population: EvaluatedPopulation[Any, Any]) -> WeightedDistribution:
    distribution = WeightedDistribution.from_scalar_values(population.fitness_values)
    if any(weight < 0 for weight in distribution.weights):
        raise SimulationError(
            "fitness proportional selection requires non-negative fitness values"
        )
    return distribution


class RouletteWheelSelector(ParentGroupSelector):
    """Fitness proportionate selection with one spin per parent."""

    def select_from(
        self, population: EvaluatedPopulation[Any, Any], rng: random.Random
    ) -> list[list[Any]]:
        distribution = _fitness_weights(population)
        uniform = distribution.sum <= 0
        if uniform:
            logger.debug("RouletteWheelSelector: zero total fitness, sampling uniformly")

        groups: list[list[Any]] = []
        for _ in range(self.num_groups(len(population))):
            group = []
            for _ in range(self.num_individuals_per_parents):
                if uniform:
                    index = sample_index(rng, len(population))
                else:
                    index = distribution.select(
                        sample_probability(rng) * distribution.sum
                    )
                group.append(population.individuals[index])
            groups.append(group)
        return groups


class UniversalSamplingSelector(ParentGroupSelector):
    """Stochastic universal sampling.

    All parents are picked in one spin using evenly spaced pointers, which
    keeps the spread of selected individuals close to their expected share.
    """

    def select_from(
        self, population: EvaluatedPopulation[Any, Any], rng: random.Random
    ) -> list[list[Any]]:
        distribution = _fitness_weights(population)
        num_groups = self.num_groups(len(population))
        total = num_groups * self.num_individuals_per_parents

        if distribution.sum <= 0:
            indices = [sample_index(rng, len(population)) for _ in range(total)]
        else:
            spacing = distribution.sum / total
            start = sample_probability(rng) * spacing
            indices = [distribution.select(start + i * spacing) for i in range(total)]
            rng.shuffle(indices)

        arity = self.num_individuals_per_parents
        return [
            [population.individuals[i] for i in indices[g * arity : (g + 1) * arity]]
            for g in range(num_groups)
        ]


class TournamentSelector(ParentGroupSelector):
    """Tournament selection.

    Each parent is the winner of a tournament between ``tournament_size``
    randomly drawn individuals. The fittest contestant wins with
    ``probability``, the second with ``probability * (1 - probability)`` and
    so on; the weakest contestant takes the remainder.
    """

    def __init__(
        self,
        selection_ratio: float,
        num_individuals_per_parents: int,
        tournament_size: int,
        probability: float = 1.0,
        remove_selected_individuals: bool = False,
    ):
        super().__init__(selection_ratio, num_individuals_per_parents)
        self.tournament_size = validate_count("tournament_size", tournament_size)
        self.probability = validate_ratio("probability", probability, allow_zero=False)
        self.remove_selected_individuals = remove_selected_individuals

    def select_from(
        self, population: EvaluatedPopulation[Any, Any], rng: random.Random
    ) -> list[list[Any]]:
        candidates = list(range(len(population)))
        groups: list[list[Any]] = []

        for _ in range(self.num_groups(len(population))):
            group = []
            for _ in range(self.num_individuals_per_parents):
                if not candidates:
                    candidates = list(range(len(population)))
                winner = self._run_tournament(population, candidates, rng)
                if self.remove_selected_individuals:
                    candidates.remove(winner)
                group.append(population.individuals[winner])
            groups.append(group)
        return groups

    def _run_tournament(
        self,
        population: EvaluatedPopulation[Any, Any],
        candidates: list[int],
        rng: random.Random,
    ) -> int:
        contestants = [
            candidates[sample_index(rng, len(candidates))]
            for _ in range(self.tournament_size)
        ]
        contestants.sort(key=lambda i: population.fitness_values[i], reverse=True)
        for contestant in contestants[:-1]:
            if sample_probability(rng) < self.probability:
                return contestant
        return contestants[-1]
