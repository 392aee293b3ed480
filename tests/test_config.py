import pytest
from pydantic import ValidationError

from evolab.evolution.operators import ElitistReinserter, MaximizeSelector, MultiPointCrossBreeder
from evolab.exceptions import ConfigurationError
from evolab.simulation import SimulationConfig


def test_defaults():
    config = SimulationConfig(population_size=100)
    assert config.selection_ratio == 0.7
    assert config.num_individuals_per_parents == 2
    assert config.num_crossover_points == 1
    assert config.mutation_rate == 0.05
    assert config.reinsertion_ratio == 0.7
    assert config.seed is None
    assert config.max_workers is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"population_size": 0},
        {"selection_ratio": 0.0},
        {"selection_ratio": 1.2},
        {"mutation_rate": float("nan")},
        {"reinsertion_ratio": float("inf")},
        {"num_individuals_per_parents": 0},
        {"max_workers": 0},
        {"unknown_knob": 1},
    ],
)
def test_validated_rejects_invalid_values(overrides):
    kwargs = {"population_size": 10, **overrides}
    with pytest.raises(ConfigurationError):
        SimulationConfig.validated(**kwargs)


def test_config_is_frozen():
    config = SimulationConfig(population_size=10)
    with pytest.raises(ValidationError):
        config.population_size = 20


def test_operator_factories_use_config_values():
    config = SimulationConfig.validated(
        population_size=50,
        selection_ratio=0.5,
        num_individuals_per_parents=3,
        num_crossover_points=2,
        reinsertion_ratio=0.4,
    )

    selector = config.maximize_selector()
    assert isinstance(selector, MaximizeSelector)
    assert selector.selection_ratio == 0.5
    assert selector.num_individuals_per_parents == 3

    breeder = config.multi_point_breeder()
    assert isinstance(breeder, MultiPointCrossBreeder)
    assert breeder.num_cut_points == 2

    reinserter = config.elitist_reinserter(retain_best_of_run=True)
    assert isinstance(reinserter, ElitistReinserter)
    assert reinserter.offspring_has_precedence
    assert reinserter.replace_ratio == 0.4
    assert reinserter.retain_best_of_run

    mutator = config.random_value_mutator(0, 9)
    assert mutator.mutation_rate == 0.05


def test_generation_limit_condition():
    assert SimulationConfig(population_size=10).generation_limit_condition() is None
    condition = SimulationConfig(population_size=10, generation_limit=25).generation_limit_condition()
    assert condition.max_generations == 25
    with pytest.raises(ConfigurationError):
        SimulationConfig.validated(population_size=10, generation_limit=0)
