from __future__ import annotations

from evolab.simulation.config import SimulationConfig
from evolab.simulation.phase import SimulationPhase
from evolab.simulation.results import (
    BestSolution,
    FinalResult,
    IntermediateResult,
    SimulationState,
    StepResult,
)
from evolab.simulation.simulator import SimulationBuilder, Simulator
