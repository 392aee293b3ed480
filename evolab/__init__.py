"""
evolab - generic genetic algorithm engine

Evolves a population of genomes with pluggable selection, recombination,
mutation and reinsertion strategies, one generation per ``Simulator.step()``.
"""

__version__ = "0.1.0"

from evolab.evolution.genetic import (  # noqa: F401
    EvaluatedIndividual,
    EvaluatedPopulation,
    FitnessEvaluation,
    PopulationGenerator,
)
from evolab.evolution.termination import (  # noqa: F401
    And,
    FitnessLimit,
    GenerationLimit,
    Or,
    StopReason,
    TimeLimit,
    and_,
    or_,
)
from evolab.exceptions import (  # noqa: F401
    ConfigurationError,
    EvolabError,
    GenomeError,
    SimulationError,
    SimulationTerminatedError,
)
from evolab.simulation import (  # noqa: F401
    FinalResult,
    IntermediateResult,
    SimulationConfig,
    Simulator,
)
