from datetime import datetime, timedelta

import pytest

from evolab.evolution.genetic import EvaluatedIndividual
from evolab.evolution.termination import (
    And,
    FitnessLimit,
    GenerationLimit,
    Or,
    StopReason,
    TerminationCondition,
    TimeLimit,
    and_,
    or_,
)
from evolab.exceptions import ConfigurationError
from evolab.simulation.results import BestSolution, SimulationState

from conftest import evaluated


def make_state(generation=1, best_fitness=5, duration=timedelta(seconds=1)):
    started_at = datetime(2024, 1, 1, 12, 0, 0)
    return SimulationState(
        started_at=started_at,
        generation=generation,
        population=evaluated([1, 2, best_fitness]),
        best_solution=BestSolution(
            found_at=started_at,
            generation=generation,
            solution=EvaluatedIndividual(genome=[best_fitness], fitness=best_fitness),
        ),
        processing_time=timedelta(milliseconds=10),
        total_processing_time=timedelta(milliseconds=10) * generation,
        duration=duration,
    )


class Recording(TerminationCondition):
    """Fires on demand and counts how often it was asked."""

    def __init__(self, fires, name="recording"):
        self.fires = fires
        self.name = name
        self.calls = 0

    def evaluate(self, state):
        self.calls += 1
        if self.fires:
            return StopReason(condition=self.name, message=f"{self.name} fired")
        return None


def test_fitness_limit():
    condition = FitnessLimit(10)
    assert condition.evaluate(make_state(best_fitness=9)) is None
    reason = condition.evaluate(make_state(best_fitness=10))
    assert reason.condition == "fitness-limit"
    assert "10" in str(reason)


def test_generation_limit():
    condition = GenerationLimit(3)
    assert condition.evaluate(make_state(generation=2)) is None
    reason = condition.evaluate(make_state(generation=3))
    assert reason.triggered_by("generation-limit")
    assert reason.message == (
        "Simulation stopped after the limit of 3 generations has been reached"
    )


def test_time_limit():
    condition = TimeLimit(timedelta(seconds=30))
    assert condition.evaluate(make_state(duration=timedelta(seconds=29))) is None
    reason = condition.evaluate(make_state(duration=timedelta(seconds=30)))
    assert reason.condition == "time-limit"


def test_or_returns_first_triggered_and_short_circuits():
    first = Recording(False, "first")
    second = Recording(True, "second")
    third = Recording(True, "third")
    reason = Or(first, second, third).evaluate(make_state())
    assert reason.condition == "or"
    assert reason.message == "second fired"
    assert [cause.condition for cause in reason.causes] == ["second"]
    assert reason.triggered_by("second")
    assert not reason.triggered_by("third")
    assert third.calls == 0


def test_or_without_triggers_is_none():
    assert Or(Recording(False), Recording(False)).evaluate(make_state()) is None


def test_and_requires_every_condition():
    assert And(Recording(True), Recording(False)).evaluate(make_state()) is None

    reason = And(Recording(True, "a"), Recording(True, "b")).evaluate(make_state())
    assert reason.condition == "and"
    assert reason.message == "a fired and b fired"
    assert reason.triggered_by("a") and reason.triggered_by("b")


def test_and_short_circuits_on_first_miss():
    last = Recording(True)
    And(Recording(False), last).evaluate(make_state())
    assert last.calls == 0


def test_operators_and_helpers_compose():
    combined = FitnessLimit(100) | GenerationLimit(2)
    assert isinstance(combined, Or)
    reason = combined.evaluate(make_state(generation=2))
    assert reason.triggered_by("generation-limit")
    assert not reason.triggered_by("fitness-limit")

    both = FitnessLimit(5) & GenerationLimit(2)
    assert isinstance(both, And)
    assert both.evaluate(make_state(generation=1)) is None
    assert both.evaluate(make_state(generation=2)) is not None

    nested = or_(and_(FitnessLimit(5), GenerationLimit(10)), TimeLimit(timedelta(seconds=1)))
    reason = nested.evaluate(make_state(generation=1))
    assert reason.triggered_by("time-limit")


@pytest.mark.parametrize(
    "factory",
    [
        lambda: GenerationLimit(0),
        lambda: TimeLimit(timedelta(0)),
        lambda: Or(),
        lambda: And(),
    ],
)
def test_invalid_conditions(factory):
    with pytest.raises(ConfigurationError):
        factory()
