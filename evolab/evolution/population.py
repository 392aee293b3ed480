"""Generic random genome builders for seeding the initial population."""

from __future__ import annotations

import random
from typing import Any, Sequence

from evolab.evolution.genetic import PopulationGenerator


class ValueEncodedGenomeBuilder(PopulationGenerator[list]):
    """Builds fixed-length genomes of values drawn from an inclusive range.

    Integer bounds yield integer genes, otherwise genes are floats.
    """

    def __init__(self, genome_length: int, min_value: Any, max_value: Any):
        if genome_length < 1:
            raise ValueError(f"genome_length must be at least 1, got {genome_length}")
        if min_value > max_value:
            raise ValueError(
                f"min_value ({min_value}) must be <= max_value ({max_value})"
            )
        self.genome_length = genome_length
        self.min_value = min_value
        self.max_value = max_value
        self._integral = isinstance(min_value, int) and isinstance(max_value, int)

    def generate_genotype(self, rng: random.Random) -> list:
        if self._integral:
            return [
                rng.randint(self.min_value, self.max_value)
                for _ in range(self.genome_length)
            ]
        return [
            rng.uniform(self.min_value, self.max_value)
            for _ in range(self.genome_length)
        ]


class BinaryEncodedGenomeBuilder(PopulationGenerator[list]):
    def __init__(self, genome_length: int):
        if genome_length < 1:
            raise ValueError(f"genome_length must be at least 1, got {genome_length}")
        self.genome_length = genome_length

    def generate_genotype(self, rng: random.Random) -> list[bool]:
        return [rng.random() < 0.5 for _ in range(self.genome_length)]


class PermutationEncodedGenomeBuilder(PopulationGenerator[list]):
    """Builds random permutations of a fixed set of values."""

    def __init__(self, values: Sequence[Any]):
        if not values:
            raise ValueError("values cannot be empty")
        self.values = list(values)

    def generate_genotype(self, rng: random.Random) -> list:
        genome = list(self.values)
        rng.shuffle(genome)
        return genome
