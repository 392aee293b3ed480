from enum import Enum


class SimulationPhase(str, Enum):
    CREATED = "created"
    RUNNING = "running"
    TERMINATED = "terminated"
    FAILED = "failed"


FINISHED_PHASES = {
    SimulationPhase.TERMINATED,
    SimulationPhase.FAILED,
}

VALID_TRANSITIONS: dict[SimulationPhase, set[SimulationPhase]] = {
    SimulationPhase.CREATED: {
        SimulationPhase.RUNNING,
        SimulationPhase.TERMINATED,
        SimulationPhase.FAILED,
    },
    SimulationPhase.RUNNING: {
        SimulationPhase.TERMINATED,
        SimulationPhase.FAILED,
    },
    SimulationPhase.TERMINATED: set(),
    SimulationPhase.FAILED: set(),
}


def is_valid_transition(current: SimulationPhase, new: SimulationPhase) -> bool:
    if current == new:
        return True
    return new in VALID_TRANSITIONS.get(current, set())


def validate_transition(current: SimulationPhase, new: SimulationPhase) -> None:
    if not is_valid_transition(current, new):
        valid_next = VALID_TRANSITIONS.get(current, set())
        raise ValueError(
            f"Invalid phase transition: {current.value} -> {new.value}. "
            f"Valid transitions from {current.value}: {[s.value for s in valid_next]}"
        )


def is_finished(phase: SimulationPhase) -> bool:
    return phase in FINISHED_PHASES
