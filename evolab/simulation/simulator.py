from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
import random
import time
from typing import Any, Sequence

from loguru import logger

from evolab.evolution.genetic import FitnessEvaluation
from evolab.evolution.operators.base import (
    CrossoverOp,
    MutationOp,
    ReinsertionOp,
    SelectionOp,
)
from evolab.evolution.statistics import SimulationMetrics
from evolab.evolution.termination import TerminationCondition
from evolab.exceptions import (
    ConfigurationError,
    SimulationError,
    SimulationTerminatedError,
)
from evolab.simulation.config import SimulationConfig
from evolab.simulation.evaluation import breed_offspring, evaluate_population
from evolab.simulation.phase import SimulationPhase, is_finished, validate_transition
from evolab.simulation.results import (
    BestSolution,
    FinalResult,
    IntermediateResult,
    SimulationState,
    StepResult,
)

__all__ = ["Simulator", "SimulationBuilder"]


class SimulationBuilder:
    """Collects the pluggable strategies of a simulation and validates them."""

    _REQUIRED = (
        ("fitness_evaluator", FitnessEvaluation),
        ("selector", SelectionOp),
        ("breeder", CrossoverOp),
        ("mutator", MutationOp),
        ("reinserter", ReinsertionOp),
        ("termination", TerminationCondition),
    )

    def __init__(
        self,
        fitness_evaluator: FitnessEvaluation[Any, Any],
        selector: SelectionOp,
        breeder: CrossoverOp,
        mutator: MutationOp,
        reinserter: ReinsertionOp,
        termination: TerminationCondition,
    ):
        self.fitness_evaluator = fitness_evaluator
        self.selector = selector
        self.breeder = breeder
        self.mutator = mutator
        self.reinserter = reinserter
        self.termination = termination
        self._config: SimulationConfig | None = None
        self._rng: random.Random | None = None
        self._seed: int | None = None
        self._executor: Executor | None = None

    def with_config(self, config: SimulationConfig) -> "SimulationBuilder":
        self._config = config
        return self

    def with_seed(self, seed: int) -> "SimulationBuilder":
        self._seed = seed
        return self

    def with_rng(self, rng: random.Random) -> "SimulationBuilder":
        self._rng = rng
        return self

    def with_executor(self, executor: Executor) -> "SimulationBuilder":
        self._executor = executor
        return self

    def _validate(self, initial_population: Sequence[Any] | None) -> list[Any]:
        for attr, expected in self._REQUIRED:
            value = getattr(self, attr)
            if value is None:
                raise ConfigurationError(f"{attr} is required")
            if not isinstance(value, expected):
                raise ConfigurationError(
                    f"{attr} must be a {expected.__name__}, got {type(value).__name__}"
                )
        if not initial_population:
            raise ConfigurationError("initial population cannot be empty")
        population = list(initial_population)
        if self._config is not None and len(population) != self._config.population_size:
            raise ConfigurationError(
                f"initial population has {len(population)} individuals, "
                f"config.population_size is {self._config.population_size}"
            )
        return population

    def _resolve_rng(self) -> random.Random:
        if self._rng is not None:
            return self._rng
        if self._seed is not None:
            return random.Random(self._seed)
        if self._config is not None and self._config.seed is not None:
            return random.Random(self._config.seed)
        return random.Random()

    def initialize(self, initial_population: Sequence[Any]) -> "Simulator":
        population = self._validate(initial_population)

        executor = self._executor
        owns_executor = False
        if executor is None and self._config is not None and self._config.max_workers:
            executor = ThreadPoolExecutor(
                max_workers=self._config.max_workers,
                thread_name_prefix="evolab-worker",
            )
            owns_executor = True

        return Simulator(
            fitness_evaluator=self.fitness_evaluator,
            selector=self.selector,
            breeder=self.breeder,
            mutator=self.mutator,
            reinserter=self.reinserter,
            termination=self.termination,
            population=population,
            rng=self._resolve_rng(),
            executor=executor,
            owns_executor=owns_executor,
        )


class Simulator:
    """Genetic algorithm driven one generation at a time.

    Each :meth:`step` evaluates the current population, selects parent groups,
    breeds and mutates offspring, evaluates them, reinserts into the next
    population, updates the best solution and checks the termination
    condition. New state is committed only after every stage succeeded.
    """

    def __init__(
        self,
        *,
        fitness_evaluator: FitnessEvaluation[Any, Any],
        selector: SelectionOp,
        breeder: CrossoverOp,
        mutator: MutationOp,
        reinserter: ReinsertionOp,
        termination: TerminationCondition,
        population: list[Any],
        rng: random.Random,
        executor: Executor | None = None,
        owns_executor: bool = False,
    ):
        self.fitness_evaluator = fitness_evaluator
        self.selector = selector
        self.breeder = breeder
        self.mutator = mutator
        self.reinserter = reinserter
        self.termination = termination

        self._population = population
        self._population_size = len(population)
        self._rng = rng
        self._executor = executor
        self._owns_executor = owns_executor

        self._phase = SimulationPhase.CREATED
        self._generation = 0
        self._best: BestSolution[Any, Any] | None = None
        self._started_at: datetime | None = None
        self._run_start: float | None = None
        self._last_error: SimulationError | None = None

        self.metrics = SimulationMetrics()

        logger.info(
            "[Simulator] Init | population={}, selector={}, breeder={}, mutator={}, reinserter={}",
            self._population_size,
            self.selector.name,
            self.breeder.name,
            self.mutator.name,
            self.reinserter.name,
        )

    @staticmethod
    def builder(
        fitness_evaluator: FitnessEvaluation[Any, Any],
        selector: SelectionOp,
        breeder: CrossoverOp,
        mutator: MutationOp,
        reinserter: ReinsertionOp,
        termination: TerminationCondition,
    ) -> SimulationBuilder:
        return SimulationBuilder(
            fitness_evaluator, selector, breeder, mutator, reinserter, termination
        )

    # -------------------------- Properties --------------------------

    @property
    def phase(self) -> SimulationPhase:
        return self._phase

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def population(self) -> list[Any]:
        return list(self._population)

    @property
    def population_size(self) -> int:
        return self._population_size

    @property
    def best_solution(self) -> BestSolution[Any, Any] | None:
        return self._best

    @property
    def last_error(self) -> SimulationError | None:
        return self._last_error

    # -------------------------- Public API --------------------------

    def step(self) -> StepResult:
        """Process one generation.

        Returns:
            IntermediateResult while running, FinalResult once a termination
            condition fired.

        Raises:
            SimulationTerminatedError: if the simulation already finished.
            SimulationError: if any stage failed; the simulation is then
                finished and keeps the last committed population.
        """
        if is_finished(self._phase):
            raise SimulationTerminatedError(
                f"Cannot step a simulation in phase '{self._phase.value}'"
            )

        if self._phase == SimulationPhase.CREATED:
            self._started_at = datetime.now(timezone.utc)
            self._run_start = time.perf_counter()
            self._set_phase(SimulationPhase.RUNNING)
            logger.info("[Simulator] Start")

        try:
            return self._step()
        except Exception as exc:
            self.metrics.record_error()
            self._set_phase(SimulationPhase.FAILED)
            error = (
                exc
                if isinstance(exc, SimulationError)
                else SimulationError(f"Simulation step failed: {exc}")
            )
            self._last_error = error
            logger.error(
                "[Simulator] Generation {} failed: {}", self._generation + 1, exc
            )
            if error is exc:
                raise
            raise error from exc

    def close(self) -> None:
        """Shut down the worker pool if the simulator created it."""
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "Simulator":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -------------------------- Internals --------------------------

    def _set_phase(self, phase: SimulationPhase) -> None:
        validate_transition(self._phase, phase)
        self._phase = phase

    def _step(self) -> StepResult:
        step_start = time.perf_counter()
        generation = self._generation + 1

        population = evaluate_population(
            self._population, self.fitness_evaluator, self._executor
        )
        parent_groups = self.selector.select_from(population, self._rng)
        if not parent_groups:
            raise SimulationError(f"{self.selector.name} selected no parents")

        offspring_genomes = breed_offspring(
            parent_groups, self.breeder, self.mutator, self._rng, self._executor
        )
        if not offspring_genomes:
            raise SimulationError(f"{self.breeder.name} produced no offspring")
        offspring = evaluate_population(
            offspring_genomes, self.fitness_evaluator, self._executor
        )

        best = self._updated_best(population, offspring, generation)

        next_population = self.reinserter.combine(
            offspring,
            population,
            self._population_size,
            self._rng,
            best_so_far=best.solution,
        )
        if len(next_population) != self._population_size:
            raise SimulationError(
                f"{self.reinserter.name} returned {len(next_population)} individuals, "
                f"expected {self._population_size}"
            )

        processing_time = timedelta(seconds=time.perf_counter() - step_start)

        state = SimulationState(
            started_at=self._started_at,
            generation=generation,
            population=population,
            best_solution=best,
            processing_time=processing_time,
            total_processing_time=self.metrics.processing_time + processing_time,
            duration=timedelta(seconds=time.perf_counter() - self._run_start),
        )
        stop_reason = self.termination.evaluate(state)

        # commit
        self._population = list(next_population)
        self._generation = generation
        self._best = best
        self.metrics.record_step(
            evaluations=len(population) + len(offspring),
            parent_groups=len(parent_groups),
            offspring=len(offspring),
            processing_time=processing_time,
        )

        logger.debug(
            "[Simulator] Generation {} | average={}, highest={}, best={} (generation {}), time={}",
            generation,
            population.average_fitness,
            population.highest_fitness,
            best.solution.fitness,
            best.generation,
            processing_time,
        )

        if stop_reason is None:
            return IntermediateResult(state)

        self._set_phase(SimulationPhase.TERMINATED)
        logger.info(
            "[Simulator] Stop after {} generations: {}", generation, stop_reason.message
        )
        return FinalResult(state, state.duration, stop_reason)

    def _updated_best(self, population, offspring, generation: int) -> BestSolution:
        candidate = population.best()
        offspring_best = offspring.best()
        if offspring_best.fitness > candidate.fitness:
            candidate = offspring_best

        if self._best is not None and not self._best.improved_by(candidate):
            return self._best
        return BestSolution(
            found_at=datetime.now(timezone.utc),
            generation=generation,
            solution=candidate,
        )
