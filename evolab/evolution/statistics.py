from __future__ import annotations

from datetime import timedelta
from typing import Any, Sequence

import numpy as np
from pydantic import BaseModel, Field, computed_field

from evolab.evolution.genetic import as_scalar


class FitnessStatistics(BaseModel):
    """Distribution of fitness values within one generation."""

    count: int = Field(ge=0)
    minimum: float
    maximum: float
    mean: float
    std: float = Field(ge=0.0)

    @classmethod
    def from_values(cls, fitness_values: Sequence[Any]) -> "FitnessStatistics":
        if not fitness_values:
            return cls(count=0, minimum=0.0, maximum=0.0, mean=0.0, std=0.0)
        values = np.asarray([as_scalar(v) for v in fitness_values], dtype=float)
        return cls(
            count=int(values.size),
            minimum=float(values.min()),
            maximum=float(values.max()),
            mean=float(values.mean()),
            std=float(values.std()),
        )


class SimulationMetrics(BaseModel):
    """Counters accumulated over the lifetime of a simulator."""

    total_generations: int = Field(
        default=0, description="Total number of generations run"
    )
    fitness_evaluations: int = Field(
        default=0, description="Total number of fitness evaluations"
    )
    parent_groups_selected: int = Field(
        default=0, description="Total parent groups produced by selection"
    )
    offspring_created: int = Field(
        default=0, description="Total offspring produced by recombination"
    )
    errors_encountered: int = Field(
        default=0, description="Total number of failed steps"
    )
    processing_time: timedelta = Field(
        default=timedelta(0), description="Cumulative processing time of all steps"
    )

    @computed_field
    @property
    def mean_step_time(self) -> timedelta:
        if self.total_generations == 0:
            return timedelta(0)
        return self.processing_time / self.total_generations

    def record_step(
        self,
        *,
        evaluations: int,
        parent_groups: int,
        offspring: int,
        processing_time: timedelta,
    ) -> None:
        self.total_generations += 1
        self.fitness_evaluations += evaluations
        self.parent_groups_selected += parent_groups
        self.offspring_created += offspring
        self.processing_time += processing_time

    def record_error(self) -> None:
        self.errors_encountered += 1
