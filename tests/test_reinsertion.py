import random

import pytest

from evolab.evolution.genetic import EvaluatedIndividual
from evolab.evolution.operators.reinsertion import ElitistReinserter, UniformReinserter
from evolab.exceptions import ConfigurationError

from conftest import evaluated


def _genes(genomes):
    return [genome[0] for genome in genomes]


@pytest.mark.parametrize(
    "reinserter",
    [
        ElitistReinserter(True, 0.7),
        ElitistReinserter(False, 0.7),
        ElitistReinserter(True, 0.0),
        ElitistReinserter(True, 1.0, retain_best_of_run=True),
        UniformReinserter(0.7),
        UniformReinserter(1.0),
    ],
)
@pytest.mark.parametrize("num_offspring", [1, 3, 10, 25])
def test_reinsertion_returns_configured_size(reinserter, num_offspring):
    rng = random.Random(num_offspring)
    parents = evaluated([rng.randint(0, 100) for _ in range(10)])
    offspring = evaluated([rng.randint(0, 100) for _ in range(num_offspring)])
    next_generation = reinserter.combine(offspring, parents, 10, rng)
    assert len(next_generation) == 10


def test_elitist_keeps_best_parent_first(rng):
    parents = evaluated([5, 50, 7, 3])
    offspring = evaluated([10, 20, 30, 40])
    next_generation = ElitistReinserter(True, 0.5).combine(offspring, parents, 4, rng)
    # elite, two best offspring, then best remaining parent
    assert _genes(next_generation) == [50, 40, 30, 7]


def test_elitist_keeps_best_offspring_as_elite(rng):
    parents = evaluated([5, 6, 7, 3])
    offspring = evaluated([10, 90, 30, 40])
    next_generation = ElitistReinserter(True, 0.5).combine(offspring, parents, 4, rng)
    assert _genes(next_generation) == [90, 40, 30, 7]


def test_elitist_without_precedence_keeps_fittest_overall(rng):
    parents = evaluated([50, 60, 1, 2])
    offspring = evaluated([10, 70, 3, 4])
    next_generation = ElitistReinserter(False, 0.5).combine(offspring, parents, 4, rng)
    assert _genes(next_generation) == [70, 60, 50, 10]


def test_elitist_backfills_from_parents_when_offspring_short(rng):
    parents = evaluated([1, 2, 3, 4, 5, 6])
    offspring = evaluated([100])
    next_generation = ElitistReinserter(True, 0.9).combine(offspring, parents, 6, rng)
    assert _genes(next_generation) == [100, 6, 5, 4, 3, 2]


def test_elitist_retains_best_of_run(rng):
    parents = evaluated([1, 2, 3])
    offspring = evaluated([4, 5, 6])
    best = EvaluatedIndividual(genome=[99], fitness=99)
    reinserter = ElitistReinserter(True, 0.6, retain_best_of_run=True)
    next_generation = reinserter.combine(offspring, parents, 3, rng, best_so_far=best)
    assert next_generation[0] is best.genome
    assert _genes(next_generation) == [99, 6, 5]


def test_elitist_ignores_weaker_best_of_run(rng):
    parents = evaluated([1, 2, 3])
    offspring = evaluated([4, 5, 6])
    best = EvaluatedIndividual(genome=[2], fitness=2)
    reinserter = ElitistReinserter(True, 0.6, retain_best_of_run=True)
    next_generation = reinserter.combine(offspring, parents, 3, rng, best_so_far=best)
    assert _genes(next_generation) == [6, 5, 4]


def test_elitist_fills_larger_target_by_repeating(rng):
    parents = evaluated([1, 2])
    offspring = evaluated([3])
    next_generation = ElitistReinserter(True, 0.5).combine(offspring, parents, 5, rng)
    assert len(next_generation) == 5
    assert next_generation[0][0] == 3


def test_uniform_reinserter_mixes_sources():
    rng = random.Random(0)
    parents = evaluated([1, 2, 3, 4, 5, 6, 7, 8, 9, 10])
    offspring = evaluated([101, 102, 103, 104, 105, 106, 107, 108, 109, 110])
    next_generation = UniformReinserter(0.3).combine(offspring, parents, 10, rng)
    assert sum(1 for g in _genes(next_generation) if g > 100) == 3


def test_invalid_replace_ratio():
    with pytest.raises(ConfigurationError):
        ElitistReinserter(True, 1.5)
    with pytest.raises(ConfigurationError):
        UniformReinserter(float("inf"))


@pytest.mark.parametrize(
    "reinserter", [ElitistReinserter(True, 0.5), UniformReinserter(0.5)]
)
def test_repeated_genomes_are_independent_copies(reinserter, rng):
    parents = evaluated([1, 2])
    offspring = evaluated([3])
    next_generation = reinserter.combine(offspring, parents, 6, rng)

    assert len({id(genome) for genome in next_generation}) == 6
    next_generation[0].append("mutated in place")
    assert all(len(genome) == 1 for genome in next_generation[1:])
