"""Constraint system that computes witnesses and checks satisfiability.

Every producer is invoked eagerly, so the assignment is known as soon as a
gadget returns. Variables and constraints are addressable by their full
path (e.g. 'a/sum num') so tests can read and tamper with the witness.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from constraints.base import ConstraintSystem, Producer
from constraints.linear_combination import LinearCombination, Variable, VariableKind
from primitives.field import DEFAULT_FIELD, PrimeField

logger = logging.getLogger(__name__)


@dataclass
class Constraint:
    """One rank-1 constraint a * b = c."""
    a: LinearCombination
    b: LinearCombination
    c: LinearCombination
    name: str


_NAMESPACE = "namespace"


class TestConstraintSystem(ConstraintSystem):
    """Constraint system holding a full assignment, for testing gadgets."""

    # Not a pytest test class
    __test__ = False

    def __init__(self, field: PrimeField = DEFAULT_FIELD):
        super().__init__(field)
        self._named: Dict[str, Union[Variable, Constraint, str]] = {}
        self._inputs: List[list] = [[field.one(), "ONE"]]
        self._aux: List[list] = []
        self.constraints: List[Constraint] = []
        self._named["ONE"] = self.one()

    def _set_named(self, path: str, obj: Union[Variable, Constraint, str]) -> None:
        if path in self._named:
            raise ValueError(f"tried to create object at {path} which already exists")
        self._named[path] = obj

    def _coerce(self, value):
        if not isinstance(value, self.field.FF):
            raise TypeError(
                f"producer returned {type(value).__name__}, expected an element of {self.field.name}"
            )
        return value

    # --- Allocation ---

    def alloc(self, name: str, producer: Producer) -> Variable:
        path = self.path(name)
        value = self._coerce(producer())
        var = Variable(VariableKind.AUX, len(self._aux))
        self._set_named(path, var)
        self._aux.append([value, path])
        return var

    def alloc_input(self, name: str, producer: Producer) -> Variable:
        path = self.path(name)
        value = self._coerce(producer())
        var = Variable(VariableKind.INPUT, len(self._inputs))
        self._set_named(path, var)
        self._inputs.append([value, path])
        return var

    def enforce(self, name, a, b, c) -> None:
        path = self.path(name)
        constraint = Constraint(a, b, c, path)
        self._set_named(path, constraint)
        self.constraints.append(constraint)

    def push_namespace(self, name: str) -> None:
        path = self.path(name)
        existing = self._named.get(path)
        if existing is None:
            self._named[path] = _NAMESPACE
        elif existing != _NAMESPACE:
            raise ValueError(f"tried to create namespace at {path} which already holds an object")
        super().push_namespace(name)

    # --- Satisfiability ---

    def value_of(self, var: Variable):
        """Assigned value of var."""
        if var.kind is VariableKind.INPUT:
            return self._inputs[var.index][0]
        return self._aux[var.index][0]

    def _holds(self, constraint: Constraint) -> bool:
        a = constraint.a.evaluate(self.value_of)
        b = constraint.b.evaluate(self.value_of)
        c = constraint.c.evaluate(self.value_of)
        return bool(a * b == c)

    def which_is_unsatisfied(self) -> Optional[str]:
        """Path of the first constraint that does not hold, or None."""
        for constraint in self.constraints:
            if not self._holds(constraint):
                logger.debug("constraint %r is not satisfied", constraint.name)
                return constraint.name
        return None

    def is_satisfied(self) -> bool:
        return self.which_is_unsatisfied() is None

    def num_constraints(self) -> int:
        return len(self.constraints)

    def num_inputs(self) -> int:
        return len(self._inputs)

    def num_aux(self) -> int:
        return len(self._aux)

    # --- Witness access ---

    def _variable_at(self, path: str) -> Variable:
        obj = self._named.get(path)
        if obj is None:
            raise KeyError(f"no variable exists at path: {path}")
        if not isinstance(obj, Variable):
            raise ValueError(f"object at {path} is not a variable")
        return obj

    def get(self, path: str):
        """Assigned value of the variable at path."""
        return self.value_of(self._variable_at(path))

    def set(self, path: str, value) -> None:
        """Overwrite the assigned value of the variable at path."""
        var = self._variable_at(path)
        value = self._coerce(value)
        if var.kind is VariableKind.INPUT:
            self._inputs[var.index][0] = value
        else:
            self._aux[var.index][0] = value

    def get_input(self, index: int, path: str):
        """Value of public input index, checking it was allocated at path."""
        value, input_path = self._inputs[index]
        if input_path != path:
            raise ValueError(f"input {index} is at {input_path}, not {path}")
        return value

    def input_assignment(self):
        """Public input vector (slot 0 is the constant one)."""
        return self.field.FF([int(v) for v, _ in self._inputs])

    def aux_assignment(self):
        """Auxiliary (private) witness vector."""
        return self.field.FF([int(v) for v, _ in self._aux])

    def verify(self, expected: Sequence) -> bool:
        """Check the public inputs equal expected and every constraint holds."""
        if len(expected) + 1 != len(self._inputs):
            return False
        if len(expected) > 0:
            expected = self.field.FF([int(v) for v in expected])
            if not np.array_equal(expected, self.input_assignment()[1:]):
                return False
        return self.is_satisfied()

    def pretty_print(self) -> str:
        """Human readable dump of all constraints."""
        lines = []
        for constraint in self.constraints:
            lines.append(f"{constraint.name}: ({constraint.a!r}) * ({constraint.b!r}) = ({constraint.c!r})")
        return "\n".join(lines)
