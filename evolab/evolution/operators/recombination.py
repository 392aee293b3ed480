from __future__ import annotations

import random
from typing import Any, Sequence

from loguru import logger

from evolab.evolution.operators.base import CrossoverOp, validate_count
from evolab.evolution.sampling import (
    sample_cut_points,
    sample_index,
    sample_n_cut_points,
)
from evolab.exceptions import GenomeError


def _common_length(parents: Sequence[Sequence[Any]]) -> int:
    if not parents:
        raise GenomeError("crossover requires at least one parent")
    length = len(parents[0])
    for parent in parents[1:]:
        if len(parent) != length:
            raise GenomeError(
                f"parents must have equal length, got {[len(p) for p in parents]}"
            )
    return length


class MultiPointCrossBreeder(CrossoverOp):
    """Discrete multi-point crossover for fixed-length genomes.

    One child is bred per parent. For every child fresh cut points are drawn;
    the child starts with the segment of its own parent and switches to the
    next parent (cyclically) at each cut point.
    """

    def __init__(self, num_cut_points: int):
        self.num_cut_points = validate_count("num_cut_points", num_cut_points)

    def crossover(self, parents: list[Any], rng: random.Random) -> list[Any]:
        genome_length = _common_length(parents)
        num_parents = len(parents)
        offspring = []
        for child_index in range(num_parents):
            cutpoints = sample_n_cut_points(rng, self.num_cut_points, genome_length)
            cutpoints.append(genome_length)
            genome: list[Any] = []
            start = 0
            parent_index = child_index
            for end in cutpoints:
                genome.extend(parents[parent_index % num_parents][start:end])
                parent_index += 1
                start = end
            offspring.append(genome)
        return offspring


class UniformCrossBreeder(CrossoverOp):
    """Each gene of a child is copied from a uniformly chosen parent."""

    def crossover(self, parents: list[Any], rng: random.Random) -> list[Any]:
        genome_length = _common_length(parents)
        return [
            [parents[sample_index(rng, len(parents))][locus] for locus in range(genome_length)]
            for _ in parents
        ]


def _check_permutations(parents: Sequence[Sequence[Any]]) -> int:
    genome_length = _common_length(parents)
    if genome_length < 4:
        raise GenomeError(
            f"order crossover requires genomes of at least 4 genes, got {genome_length}"
        )
    reference = set(parents[0])
    for parent in parents:
        genes = set(parent)
        if len(genes) != genome_length:
            raise GenomeError("order crossover requires genomes without duplicate genes")
        if genes != reference:
            raise GenomeError("order crossover requires permutations of the same genes")
    return genome_length


class OrderOneCrossover(CrossoverOp):
    """Order crossover (OX1) for permutation encoded genomes.

    Child ``i`` inherits a slice from parent ``i`` at its original positions;
    the remaining genes are filled in the order they appear in the next parent,
    starting right after the slice.
    """

    def crossover(self, parents: list[Any], rng: random.Random) -> list[Any]:
        genome_length = _check_permutations(parents)
        num_parents = len(parents)
        if num_parents < 2:
            return [list(parents[0])]

        offspring = []
        for i in range(num_parents):
            donor = parents[i]
            other = parents[(i + 1) % num_parents]
            start, end = sample_cut_points(rng, genome_length)
            child: list[Any] = [None] * genome_length
            child[start:end] = donor[start:end]
            taken = set(donor[start:end])
            fill = [
                other[(end + k) % genome_length]
                for k in range(genome_length)
                if other[(end + k) % genome_length] not in taken
            ]
            positions = [
                (end + k) % genome_length
                for k in range(genome_length - (end - start))
            ]
            for position, gene in zip(positions, fill):
                child[position] = gene
            offspring.append(child)
        return offspring


class PartiallyMappedCrossover(CrossoverOp):
    """Partially mapped crossover (PMX) for permutation encoded genomes."""

    def crossover(self, parents: list[Any], rng: random.Random) -> list[Any]:
        genome_length = _check_permutations(parents)
        num_parents = len(parents)
        if num_parents < 2:
            return [list(parents[0])]

        offspring = []
        for i in range(num_parents):
            donor = parents[i]
            other = parents[(i + 1) % num_parents]
            start, end = sample_cut_points(rng, genome_length)
            offspring.append(self._map(donor, other, start, end))

        logger.debug(
            "PartiallyMappedCrossover: bred {} children of length {}",
            len(offspring),
            genome_length,
        )
        return offspring

    @staticmethod
    def _map(donor: Sequence[Any], other: Sequence[Any], start: int, end: int) -> list[Any]:
        child = list(other)
        filled = [False] * len(other)
        position_in_other = {gene: pos for pos, gene in enumerate(other)}
        for pos in range(start, end):
            child[pos] = donor[pos]
            filled[pos] = True

        segment = set(donor[start:end])
        for pos in range(start, end):
            gene = other[pos]
            if gene in segment:
                continue
            target = pos
            while start <= target < end:
                target = position_in_other[donor[target]]
            child[target] = gene
            filled[target] = True

        for pos, is_filled in enumerate(filled):
            if not is_filled:
                child[pos] = other[pos]
        return child
