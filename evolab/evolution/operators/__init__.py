from evolab.evolution.operators.base import (
    CrossoverOp,
    GeneticOperator,
    MutationOp,
    ReinsertionOp,
    SelectionOp,
)
from evolab.evolution.operators.mutation import (
    InsertOrderMutator,
    RandomValueMutator,
    SwapOrderMutator,
)
from evolab.evolution.operators.recombination import (
    MultiPointCrossBreeder,
    OrderOneCrossover,
    PartiallyMappedCrossover,
    UniformCrossBreeder,
)
from evolab.evolution.operators.reinsertion import ElitistReinserter, UniformReinserter
from evolab.evolution.operators.selection import (
    MaximizeSelector,
    RouletteWheelSelector,
    TournamentSelector,
    UniversalSamplingSelector,
)
