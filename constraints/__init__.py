"""Rank-1 constraint systems.

Variables, sparse linear combinations, the ConstraintSystem interface that
gadgets synthesize against, and two implementations: TestConstraintSystem
(computes and checks a witness) and ShapeConstraintSystem (structure only).
"""

from .base import ConstraintSystem, Producer
from .errors import AssignmentMissing, DivisionByZero, SynthesisError, Unsatisfiable
from .linear_combination import LinearCombination, Variable, VariableKind
from .satisfiability import Constraint, TestConstraintSystem
from .shape import ShapeConstraintSystem

__all__ = [
    "ConstraintSystem",
    "Producer",
    "TestConstraintSystem",
    "ShapeConstraintSystem",
    "Constraint",
    "LinearCombination",
    "Variable",
    "VariableKind",
    "SynthesisError",
    "AssignmentMissing",
    "DivisionByZero",
    "Unsatisfiable",
]
