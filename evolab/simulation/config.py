from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from evolab.evolution.operators.mutation import RandomValueMutator
from evolab.evolution.operators.recombination import MultiPointCrossBreeder
from evolab.evolution.operators.reinsertion import ElitistReinserter
from evolab.evolution.operators.selection import MaximizeSelector
from evolab.evolution.termination import GenerationLimit
from evolab.exceptions import ConfigurationError


class SimulationConfig(BaseModel):
    """Numeric knobs of a genetic algorithm run."""

    population_size: int = Field(gt=0, description="Fixed number of individuals")
    selection_ratio: float = Field(
        default=0.7, gt=0, le=1, description="Share of the population eligible as parents"
    )
    num_individuals_per_parents: int = Field(
        default=2, ge=1, description="Number of parents per group"
    )
    num_crossover_points: int = Field(
        default=1, ge=1, description="Number of cut points for multi-point crossover"
    )
    mutation_rate: float = Field(
        default=0.05, ge=0, le=1, description="Expected per-gene mutation probability"
    )
    reinsertion_ratio: float = Field(
        default=0.7,
        ge=0,
        le=1,
        description="Share of the next generation sourced from offspring",
    )
    generation_limit: int | None = Field(
        default=None, gt=0, description="Stop after this many generations (None = no limit)"
    )
    seed: int | None = Field(
        default=None, description="Master seed of the random stream (None = entropy)"
    )
    max_workers: int | None = Field(
        default=None,
        gt=0,
        description="Worker threads for evaluation and breeding (None = sequential)",
    )

    model_config = ConfigDict(allow_inf_nan=False, extra="forbid", frozen=True)

    @classmethod
    def validated(cls, **kwargs: Any) -> "SimulationConfig":
        """Build a config, raising ConfigurationError on invalid values."""
        try:
            return cls(**kwargs)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid simulation config: {exc}") from exc

    def maximize_selector(self) -> MaximizeSelector:
        return MaximizeSelector(self.selection_ratio, self.num_individuals_per_parents)

    def multi_point_breeder(self) -> MultiPointCrossBreeder:
        return MultiPointCrossBreeder(self.num_crossover_points)

    def random_value_mutator(self, min_value: Any, max_value: Any) -> RandomValueMutator:
        return RandomValueMutator(self.mutation_rate, min_value, max_value)

    def elitist_reinserter(
        self, offspring_has_precedence: bool = True, retain_best_of_run: bool = False
    ) -> ElitistReinserter:
        return ElitistReinserter(
            offspring_has_precedence, self.reinsertion_ratio, retain_best_of_run
        )

    def generation_limit_condition(self) -> GenerationLimit | None:
        if self.generation_limit is None:
            return None
        return GenerationLimit(self.generation_limit)
