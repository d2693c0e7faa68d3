"""Base class for rank-1 constraint systems.

ConstraintSystem is the interface every gadget synthesizes against. The same
gadget code runs against a TestConstraintSystem (witnesses are computed and
can be checked) and a ShapeConstraintSystem (only the structure is recorded,
as during key generation).

Example:
    def square(cs: ConstraintSystem, x: Variable, x_value):
        y = cs.alloc("y", lambda: x_value * x_value)
        cs.enforce("square", cs.lc() + x, cs.lc() + x, cs.lc() + y)
        return y

    cs = TestConstraintSystem()
    with cs.namespace("square of x"):
        square(cs, x, x_value)
    assert cs.is_satisfied()
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Callable, Iterator, List

from constraints.linear_combination import LinearCombination, Variable, VariableKind
from primitives.field import DEFAULT_FIELD, PrimeField

# A value producer returns a field element or raises
Producer = Callable[[], object]


class ConstraintSystem(ABC):
    """Append-only store of variables and constraints A * B = C."""

    def __init__(self, field: PrimeField = DEFAULT_FIELD):
        self.field = field
        self._namespace: List[str] = []

    @staticmethod
    def one() -> Variable:
        """The variable fixed to the constant one."""
        return Variable(VariableKind.INPUT, 0)

    def lc(self) -> LinearCombination:
        """An empty linear combination over this system's field."""
        return LinearCombination.zero(self.field.FF)

    @abstractmethod
    def alloc(self, name: str, producer: Producer) -> Variable:
        """Allocate an auxiliary (private) variable.

        Args:
            name: Name of the variable within the current namespace
            producer: Zero-argument callable computing the assignment. It may
                not be invoked at all (key generation). Exceptions it raises
                propagate to the caller.

        Returns:
            The new variable
        """
        pass

    @abstractmethod
    def alloc_input(self, name: str, producer: Producer) -> Variable:
        """Allocate a public input variable. See alloc."""
        pass

    @abstractmethod
    def enforce(
        self,
        name: str,
        a: LinearCombination,
        b: LinearCombination,
        c: LinearCombination,
    ) -> None:
        """Register the constraint a * b = c."""
        pass

    # --- Namespacing ---

    def push_namespace(self, name: str) -> None:
        if "/" in name:
            raise ValueError(f"'/' is not allowed in names: {name!r}")
        self._namespace.append(name)

    def pop_namespace(self) -> None:
        assert self._namespace, "pop_namespace called on the root namespace"
        self._namespace.pop()

    @contextmanager
    def namespace(self, name: str) -> Iterator["ConstraintSystem"]:
        """Scope variable and constraint names under name."""
        self.push_namespace(name)
        try:
            yield self
        finally:
            self.pop_namespace()

    def path(self, name: str) -> str:
        """Full hierarchical path of name in the current namespace."""
        if "/" in name:
            raise ValueError(f"'/' is not allowed in names: {name!r}")
        return "/".join(self._namespace + [name])
