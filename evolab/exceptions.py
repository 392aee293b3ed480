class EvolabError(Exception):
    """Base for all evolab exceptions."""

    pass


# High-level families
class ConfigurationError(EvolabError):
    """Invalid simulation or operator configuration."""

    pass


class SimulationError(EvolabError):
    """Simulation step failures."""

    pass


class SamplingError(EvolabError):
    """Random sampling failures."""

    pass


# Simulation subtypes
class GenomeError(SimulationError):
    """Genome is malformed for the operator it was passed to."""

    pass


class SimulationTerminatedError(EvolabError):
    """Raised when stepping a simulator that already terminated or failed."""

    pass


# Sampling subtypes
class SamplingPreconditionError(SamplingError, AssertionError):
    """Sampling primitive called with a range too small for the request."""

    pass


class SamplingExhaustedError(SamplingError):
    """Rejection sampling gave up after the maximum number of attempts."""

    pass
