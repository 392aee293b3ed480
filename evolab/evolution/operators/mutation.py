from __future__ import annotations

from abc import abstractmethod
import math
import random
from typing import Any, Sequence

from loguru import logger

from evolab.evolution.operators.base import MutationOp, validate_ratio
from evolab.evolution.sampling import sample_cut_points, sample_probability
from evolab.exceptions import ConfigurationError, GenomeError


class RandomValueMutator(MutationOp):
    """Redraws each gene independently with probability ``mutation_rate``.

    Replacement values are uniform in ``[min_value, max_value]``; integer
    bounds yield integers, boolean bounds yield booleans, anything else floats.
    """

    def __init__(self, mutation_rate: float, min_value: Any, max_value: Any):
        self.mutation_rate = validate_ratio("mutation_rate", mutation_rate)
        if min_value > max_value:
            raise ConfigurationError(
                f"min_value ({min_value}) must be <= max_value ({max_value})"
            )
        self.min_value = min_value
        self.max_value = max_value

    def _random_value(self, rng: random.Random) -> Any:
        if isinstance(self.min_value, bool) and isinstance(self.max_value, bool):
            return bool(rng.randint(int(self.min_value), int(self.max_value)))
        if isinstance(self.min_value, int) and isinstance(self.max_value, int):
            return rng.randint(self.min_value, self.max_value)
        return rng.uniform(self.min_value, self.max_value)

    def mutate(self, genome: Sequence[Any], rng: random.Random) -> list[Any]:
        mutated = list(genome)
        for locus in range(len(mutated)):
            if sample_probability(rng) < self.mutation_rate:
                mutated[locus] = self._random_value(rng)
        return mutated


class OrderMutator(MutationOp):
    """Base for mutations that permute positions and keep the gene multiset.

    The number of mutation events per genome is
    ``floor(len(genome) * mutation_rate + u)`` with ``u`` uniform in
    ``[0, 1)``, so the expected count equals ``len(genome) * mutation_rate``.
    """

    MIN_GENOME_LENGTH = 4

    def __init__(self, mutation_rate: float):
        self.mutation_rate = validate_ratio("mutation_rate", mutation_rate)

    def num_mutations(self, genome_length: int, rng: random.Random) -> int:
        return int(math.floor(genome_length * self.mutation_rate + sample_probability(rng)))

    def mutate(self, genome: Sequence[Any], rng: random.Random) -> list[Any]:
        genome_length = len(genome)
        num_mutations = self.num_mutations(genome_length, rng)
        mutated = list(genome)
        if num_mutations == 0:
            return mutated
        if genome_length < self.MIN_GENOME_LENGTH:
            raise GenomeError(
                f"{self.name} requires genomes of at least {self.MIN_GENOME_LENGTH} genes, "
                f"got {genome_length}"
            )
        for _ in range(num_mutations):
            locus1, locus2 = sample_cut_points(rng, genome_length)
            self._apply(mutated, locus1, locus2)
        logger.trace("{}: applied {} mutations", self.name, num_mutations)
        return mutated

    @abstractmethod
    def _apply(self, genome: list[Any], locus1: int, locus2: int) -> None:
        """Apply one mutation event in place."""


class InsertOrderMutator(OrderMutator):
    """Moves the gene at the second locus to just after the first."""

    def _apply(self, genome: list[Any], locus1: int, locus2: int) -> None:
        value = genome.pop(locus2)
        genome.insert(locus1 + 1, value)


class SwapOrderMutator(OrderMutator):
    """Exchanges the genes at two loci."""

    def _apply(self, genome: list[Any], locus1: int, locus2: int) -> None:
        genome[locus1], genome[locus2] = genome[locus2], genome[locus1]
