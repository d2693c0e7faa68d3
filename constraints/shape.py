"""Constraint system that records circuit structure only.

Mirrors a key-generation pass: producers are never invoked, so every hint a
gadget derives from them stays absent. Only variable counts and the named
constraints are kept.
"""

from typing import List, Tuple

from constraints.base import ConstraintSystem
from constraints.linear_combination import LinearCombination, Variable, VariableKind
from primitives.field import DEFAULT_FIELD, PrimeField


class ShapeConstraintSystem(ConstraintSystem):
    """Structure-only constraint system."""

    def __init__(self, field: PrimeField = DEFAULT_FIELD):
        super().__init__(field)
        self._num_inputs = 1
        self._num_aux = 0
        self.constraints: List[Tuple[str, LinearCombination, LinearCombination, LinearCombination]] = []

    def alloc(self, name, producer) -> Variable:
        var = Variable(VariableKind.AUX, self._num_aux)
        self._num_aux += 1
        return var

    def alloc_input(self, name, producer) -> Variable:
        var = Variable(VariableKind.INPUT, self._num_inputs)
        self._num_inputs += 1
        return var

    def enforce(self, name, a, b, c) -> None:
        self.constraints.append((self.path(name), a, b, c))

    def num_constraints(self) -> int:
        return len(self.constraints)

    def num_inputs(self) -> int:
        return self._num_inputs

    def num_aux(self) -> int:
        return self._num_aux

    def constraint_names(self) -> List[str]:
        return [name for name, _, _, _ in self.constraints]
