from __future__ import annotations

import copy
import random
from typing import Any

from loguru import logger

from evolab.evolution.genetic import EvaluatedIndividual, EvaluatedPopulation
from evolab.evolution.operators.base import (
    ReinsertionOp,
    scaled_count,
    validate_count,
    validate_ratio,
)


class ElitistReinserter(ReinsertionOp):
    """Elitist reinsertion.

    The first slot of the next generation always holds the best individual of
    this generation (parents and offspring), or the best individual of the
    whole run if ``retain_best_of_run`` is set and it is fitter. When
    ``offspring_has_precedence`` is set, up to ``replace_ratio`` of the
    population is then filled with the fittest offspring and the rest with the
    fittest parents; otherwise the rest is the fittest of parents and offspring
    combined. Remaining offspring backfill any shortfall.
    """

    def __init__(
        self,
        offspring_has_precedence: bool,
        replace_ratio: float,
        retain_best_of_run: bool = False,
    ):
        self.offspring_has_precedence = offspring_has_precedence
        self.replace_ratio = validate_ratio("replace_ratio", replace_ratio)
        self.retain_best_of_run = retain_best_of_run

    def combine(
        self,
        offspring: EvaluatedPopulation[Any, Any],
        population: EvaluatedPopulation[Any, Any],
        population_size: int,
        rng: random.Random,
        best_so_far: EvaluatedIndividual[Any, Any] | None = None,
    ) -> list[Any]:
        validate_count("population_size", population_size)

        # candidates as (source, index); source 0 = offspring, 1 = parents
        offspring_ranked = [(0, i) for i in offspring.ranked_indices()]
        parents_ranked = [(1, i) for i in population.ranked_indices()]
        sources = (offspring, population)

        def fitness(candidate: tuple[int, int]) -> Any:
            source, index = candidate
            return sources[source].fitness_values[index]

        # ties go to the parent
        elite_candidate = parents_ranked[0]
        if offspring_ranked and fitness(offspring_ranked[0]) > fitness(elite_candidate):
            elite_candidate = offspring_ranked[0]

        next_generation: list[Any] = []
        used: set[tuple[int, int]] = set()
        if (
            self.retain_best_of_run
            and best_so_far is not None
            and best_so_far.fitness > fitness(elite_candidate)
        ):
            next_generation.append(best_so_far.genome)
        else:
            next_generation.append(sources[elite_candidate[0]].individuals[elite_candidate[1]])
            used.add(elite_candidate)

        if self.offspring_has_precedence:
            quota = min(scaled_count(population_size, self.replace_ratio), population_size - 1)
            children = [c for c in offspring_ranked if c not in used]
            ordered = (
                children[:quota]
                + [c for c in parents_ranked if c not in used]
                + children[quota:]
            )
        else:
            ordered = sorted(
                [c for c in parents_ranked + offspring_ranked if c not in used],
                key=fitness,
                reverse=True,
            )

        for candidate in ordered:
            if len(next_generation) >= population_size:
                break
            next_generation.append(sources[candidate[0]].individuals[candidate[1]])

        # smaller sources than the target size: repeat copies of the fittest
        fill_index = 0
        while len(next_generation) < population_size:
            next_generation.append(copy.copy(next_generation[fill_index]))
            fill_index += 1

        logger.debug(
            "ElitistReinserter: next generation of {} from {} offspring and {} parents",
            len(next_generation),
            len(offspring),
            len(population),
        )
        return next_generation


class UniformReinserter(ReinsertionOp):
    """Random reinsertion: ``replace_ratio`` of the next generation are random
    offspring, the rest random parents."""

    def __init__(self, replace_ratio: float):
        self.replace_ratio = validate_ratio("replace_ratio", replace_ratio)

    def combine(
        self,
        offspring: EvaluatedPopulation[Any, Any],
        population: EvaluatedPopulation[Any, Any],
        population_size: int,
        rng: random.Random,
        best_so_far: EvaluatedIndividual[Any, Any] | None = None,
    ) -> list[Any]:
        validate_count("population_size", population_size)
        num_offspring = min(
            scaled_count(population_size, self.replace_ratio), len(offspring)
        )
        next_generation = rng.sample(offspring.individuals, num_offspring)
        num_parents = min(population_size - num_offspring, len(population))
        next_generation.extend(rng.sample(population.individuals, num_parents))
        while len(next_generation) < population_size:
            next_generation.append(copy.copy(rng.choice(population.individuals)))
        return next_generation
