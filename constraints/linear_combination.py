"""Variables and sparse linear combinations over a prime field."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterator, Tuple, Union


class VariableKind(Enum):
    INPUT = "input"
    AUX = "aux"


@dataclass(frozen=True)
class Variable:
    """A slot in the input or auxiliary assignment vector.

    Input slot 0 is reserved for the constant one.
    """
    kind: VariableKind
    index: int

    def __repr__(self) -> str:
        return f"{self.kind.value}[{self.index}]"


Term = Tuple[object, Variable]
LCOperand = Union[Variable, Term, "LinearCombination"]


class LinearCombination:
    """Weighted sum of variables, stored as a sparse {Variable: coeff} map.

    All coefficients are elements of the galois field class FF. Operators
    return new instances; the receiver is never modified.
    """

    __slots__ = ("FF", "_terms")

    def __init__(self, FF: type, terms: Dict[Variable, object] = None):
        self.FF = FF
        self._terms: Dict[Variable, object] = dict(terms) if terms else {}

    @classmethod
    def zero(cls, FF: type) -> "LinearCombination":
        return cls(FF)

    @classmethod
    def from_variable(cls, FF: type, variable: Variable) -> "LinearCombination":
        return cls(FF, {variable: FF(1)})

    def _merge(self, other: LCOperand, sign: int) -> "LinearCombination":
        if isinstance(other, Variable):
            pairs = [(other, self.FF(1))]
        elif isinstance(other, LinearCombination):
            pairs = list(other._terms.items())
        else:
            coeff, var = other
            pairs = [(var, coeff)]

        terms = dict(self._terms)
        for var, coeff in pairs:
            if sign < 0:
                coeff = -coeff
            if var in terms:
                terms[var] = terms[var] + coeff
            else:
                terms[var] = coeff
        return LinearCombination(self.FF, terms)

    def __add__(self, other: LCOperand) -> "LinearCombination":
        return self._merge(other, 1)

    def __sub__(self, other: LCOperand) -> "LinearCombination":
        return self._merge(other, -1)

    def __neg__(self) -> "LinearCombination":
        return LinearCombination(self.FF, {v: -c for v, c in self._terms.items()})

    def scale(self, coeff) -> "LinearCombination":
        """Multiply every coefficient by coeff."""
        return LinearCombination(self.FF, {v: c * coeff for v, c in self._terms.items()})

    def __iter__(self) -> Iterator[Tuple[Variable, object]]:
        return iter(self._terms.items())

    def __len__(self) -> int:
        return len(self._terms)

    def __contains__(self, variable: Variable) -> bool:
        return variable in self._terms

    def coeff(self, variable: Variable):
        """Coefficient of variable (zero if absent)."""
        return self._terms.get(variable, self.FF(0))

    def evaluate(self, lookup: Callable[[Variable], object]):
        """Sum of coeff * lookup(var) over all terms."""
        acc = self.FF(0)
        for var, coeff in self._terms.items():
            acc = acc + coeff * lookup(var)
        return acc

    def __repr__(self) -> str:
        if not self._terms:
            return "0"
        return " + ".join(f"{int(c)}*{v!r}" for v, c in self._terms.items())
