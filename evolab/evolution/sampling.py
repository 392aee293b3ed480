"""Randomized sampling primitives shared by the genetic operators.

Every function takes an explicit :class:`random.Random` stream so that callers
control seeding and can hand independent streams to concurrent workers.
"""

from __future__ import annotations

import random
from typing import Any, Generic, Sequence, TypeVar

from evolab.evolution.genetic import as_scalar
from evolab.exceptions import SamplingExhaustedError, SamplingPreconditionError

T = TypeVar("T")

# Upper bound for rejection sampling loops. For any valid range the expected
# number of attempts is small; the bound only trips on pathological input.
MAX_SAMPLING_ATTEMPTS = 1_000_000


def sample_index(rng: random.Random, length: int) -> int:
    return sample_index_from_range(rng, 0, length)


def sample_index_from_range(rng: random.Random, min_: int, max_: int) -> int:
    """Uniform integer in ``[min_, max_)``."""
    if max_ <= min_:
        raise SamplingPreconditionError(
            f"empty range [{min_}, {max_}) for index sampling"
        )
    return rng.randrange(min_, max_)


def sample_cut_points(rng: random.Random, length: int) -> tuple[int, int]:
    return sample_cut_points_from_range(rng, 0, length)


def sample_cut_points_from_range(
    rng: random.Random, min_: int, max_: int
) -> tuple[int, int]:
    """Sample two distinct cut points ``a < b`` inside ``[min_, max_)``.

    The span ``b - a`` is always smaller than ``max_ - min_ - 2``.

    Points are drawn by rejection: two uniform indices are drawn until they
    differ and satisfy the span constraint. This terminates almost surely but
    has no deterministic bound; after ``MAX_SAMPLING_ATTEMPTS`` draws a
    :class:`SamplingExhaustedError` is raised.

    Raises:
        SamplingPreconditionError: if ``max_ < min_ + 4``.
    """
    if max_ < min_ + 4:
        raise SamplingPreconditionError(
            f"cut point range too small: max ({max_}) must be >= min ({min_}) + 4"
        )
    max_slice = max_ - min_ - 2
    for _ in range(MAX_SAMPLING_ATTEMPTS):
        cutpoint1 = rng.randrange(min_, max_)
        cutpoint2 = rng.randrange(min_, max_)
        if cutpoint1 == cutpoint2:
            continue
        low, high = min(cutpoint1, cutpoint2), max(cutpoint1, cutpoint2)
        if high - low >= max_slice:
            continue
        return low, high
    raise SamplingExhaustedError(
        f"no cut points found in [{min_}, {max_}) after {MAX_SAMPLING_ATTEMPTS} attempts"
    )


def sample_n_cut_points(rng: random.Random, n: int, length: int) -> list[int]:
    """Sample ``n`` cut points partitioning ``[0, length)``.

    For ``n > 2`` the range is walked in windows of ``length // n``; one cut
    point is drawn per window starting at the previous cut point, and the last
    window extends to ``length``. Draws landing on ``0`` or ``length`` are
    rejected.

    Raises:
        SamplingPreconditionError: if ``n < 1`` or ``length < 2 * n``.
    """
    if n < 1:
        raise SamplingPreconditionError(f"number of cut points must be > 0, got {n}")
    if length < 2 * n:
        raise SamplingPreconditionError(
            f"length ({length}) must be >= 2 * number of cut points ({n})"
        )

    if n == 1:
        return [sample_index(rng, length)]
    if n == 2:
        return list(sample_cut_points(rng, length))

    slice_len = length // n
    cutpoints: list[int] = []
    start, end = 0, slice_len
    attempts = 0
    while len(cutpoints) < n:
        attempts += 1
        if attempts > MAX_SAMPLING_ATTEMPTS:
            raise SamplingExhaustedError(
                f"no valid cut point in [{start}, {end}) after {MAX_SAMPLING_ATTEMPTS} attempts"
            )
        cutpoint = sample_index_from_range(rng, start, end)
        if cutpoint == 0 or cutpoint == length:
            continue
        cutpoints.append(cutpoint)
        start = cutpoint
        end = length if len(cutpoints) == n - 1 else end + slice_len
    return cutpoints


def sample_probability(rng: random.Random) -> float:
    return rng.random()


def spawn_rngs(rng: random.Random, count: int) -> list[random.Random]:
    """Derive ``count`` independent streams seeded from ``rng``.

    The derived seeds depend only on the state of ``rng``, so a run seeded with
    the same master seed partitions identically.
    """
    return [random.Random(rng.getrandbits(64)) for _ in range(count)]


class WeightedDistribution(Generic[T]):
    """Selects values proportional to their scalar weights (roulette wheel)."""

    def __init__(self, values: Sequence[T], weights: list[float], total: float):
        self._values = values
        self._weights = weights
        self._sum = total

    @classmethod
    def from_scalar_values(cls, values: Sequence[T]) -> "WeightedDistribution[T]":
        weights = [as_scalar(value) for value in values]
        return cls(values, weights, sum(weights))

    @property
    def sum(self) -> float:
        return self._sum

    @property
    def weights(self) -> list[float]:
        return list(self._weights)

    def __len__(self) -> int:
        return len(self._weights)

    def select(self, pointer: float) -> int:
        """Return the index whose weight interval contains ``pointer``.

        ``pointer`` is expected to be uniform in ``[0, sum)``. When floating
        point rounding leaves a positive remainder after the last weight, the
        last index is returned.
        """
        return weighted_select(pointer, self._weights)

    def value(self, index: int) -> Any:
        return self._values[index]


def weighted_select(pointer: float, weights: Sequence[float]) -> int:
    delta = pointer
    for i, weight in enumerate(weights):
        delta -= weight
        if delta <= 0.0:
            return i
    # rounding errors: fall back to the last index
    return len(weights) - 1
