import random

import pytest

from evolab.evolution.genetic import (
    EvaluatedPopulation,
    FitnessEvaluation,
    PopulationGenerator,
)

TARGET_TEXT = "Be not afraid of greatness!"


class TextFitness(FitnessEvaluation):
    """Squared share of characters matching a target text, scaled to 0..10000."""

    def __init__(self, target: str = TARGET_TEXT):
        self.target = target

    def fitness_of(self, genome):
        score = sum(1 for c, t in zip(genome, self.target) if chr(c) == t)
        fraction = score / len(self.target)
        return int(fraction * fraction * 10_000 + 0.5)

    def average(self, fitness_values):
        return sum(fitness_values) // len(fitness_values)

    def highest_possible_fitness(self):
        return 10_000

    def lowest_possible_fitness(self):
        return 0


class RandomText(PopulationGenerator):
    def __init__(self, length: int = len(TARGET_TEXT)):
        self.length = length

    def generate_genotype(self, rng):
        return [rng.randint(32, 126) for _ in range(self.length)]


class OneMax(FitnessEvaluation):
    """Number of set bits."""

    def __init__(self, genome_length: int):
        self.genome_length = genome_length

    def fitness_of(self, genome):
        return sum(1 for gene in genome if gene)

    def average(self, fitness_values):
        return sum(fitness_values) / len(fitness_values)

    def highest_possible_fitness(self):
        return self.genome_length

    def lowest_possible_fitness(self):
        return 0


class Identity(FitnessEvaluation):
    """Fitness of a one-gene genome is the gene itself."""

    def fitness_of(self, genome):
        return genome[0]

    def average(self, fitness_values):
        return sum(fitness_values) / len(fitness_values)

    def highest_possible_fitness(self):
        return float("inf")

    def lowest_possible_fitness(self):
        return 0


def evaluated(fitness_values):
    """Population of one-gene genomes ``[f]`` with fitness ``f``."""
    genomes = [[f] for f in fitness_values]
    return EvaluatedPopulation.from_fitness_values(genomes, list(fitness_values), Identity())


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def text_fitness():
    return TextFitness()


@pytest.fixture
def text_population(rng):
    return RandomText().generate_population(40, rng)
