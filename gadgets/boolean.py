"""Single-bit gadgets.

AllocatedBit is a witness variable constrained to {0, 1}. Boolean is what
other gadgets consume: a constant, an allocated bit, or the negation of an
allocated bit.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from constraints.base import ConstraintSystem
from constraints.errors import AssignmentMissing, Unsatisfiable
from constraints.linear_combination import LinearCombination, Variable
from primitives.field import PrimeField


def _bit_producer(cs: ConstraintSystem, value: Optional[bool]):
    def produce():
        if value is None:
            raise AssignmentMissing()
        return cs.field.one() if value else cs.field.zero()
    return produce


@dataclass(frozen=True)
class AllocatedBit:
    """A variable whose assignment is constrained to be 0 or 1."""
    variable: Variable
    value: Optional[bool]

    @classmethod
    def alloc(cls, cs: ConstraintSystem, value: Optional[bool]) -> "AllocatedBit":
        """Allocate a bit and enforce (1 - a) * a = 0."""
        var = cs.alloc("boolean", _bit_producer(cs, value))
        cs.enforce(
            "boolean constraint",
            cs.lc() + cs.one() - var,
            cs.lc() + var,
            cs.lc(),
        )
        return cls(var, value)

    @classmethod
    def alloc_conditionally(
        cls,
        cs: ConstraintSystem,
        value: Optional[bool],
        must_be_false: "AllocatedBit",
    ) -> "AllocatedBit":
        """Allocate a bit that is forced to 0 whenever must_be_false is 1.

        Enforces (1 - must_be_false - a) * a = 0: with must_be_false = 1 it
        reduces to -a * a = 0, otherwise to the usual boolean constraint.

        Raises:
            Unsatisfiable: If both hints are true
        """
        def produce():
            if value is None:
                raise AssignmentMissing()
            if value and must_be_false.value:
                raise Unsatisfiable("bit must be false while the guarding bit is set")
            return cs.field.one() if value else cs.field.zero()

        var = cs.alloc("boolean", produce)
        cs.enforce(
            "boolean constraint",
            cs.lc() + cs.one() - must_be_false.variable - var,
            cs.lc() + var,
            cs.lc(),
        )
        return cls(var, value)

    @classmethod
    def and_(cls, cs: ConstraintSystem, a: "AllocatedBit", b: "AllocatedBit") -> "AllocatedBit":
        """Allocate a AND b, enforcing a * b = result."""
        if a.value is None or b.value is None:
            value = None
        else:
            value = a.value and b.value

        var = cs.alloc("and result", _bit_producer(cs, value))
        cs.enforce(
            "and constraint",
            cs.lc() + a.variable,
            cs.lc() + b.variable,
            cs.lc() + var,
        )
        return cls(var, value)


class BooleanKind(Enum):
    CONSTANT = "constant"
    IS = "is"
    NOT = "not"


@dataclass(frozen=True)
class Boolean:
    """A constant, an allocated bit, or the negation of one."""
    kind: BooleanKind
    bit: Optional[AllocatedBit] = None
    constant_value: bool = False

    @classmethod
    def constant(cls, value: bool) -> "Boolean":
        return cls(BooleanKind.CONSTANT, constant_value=bool(value))

    @classmethod
    def from_bit(cls, bit: AllocatedBit) -> "Boolean":
        return cls(BooleanKind.IS, bit=bit)

    def not_(self) -> "Boolean":
        if self.kind is BooleanKind.CONSTANT:
            return Boolean.constant(not self.constant_value)
        if self.kind is BooleanKind.IS:
            return Boolean(BooleanKind.NOT, bit=self.bit)
        return Boolean(BooleanKind.IS, bit=self.bit)

    @property
    def value(self) -> Optional[bool]:
        if self.kind is BooleanKind.CONSTANT:
            return self.constant_value
        if self.bit.value is None:
            return None
        if self.kind is BooleanKind.IS:
            return self.bit.value
        return not self.bit.value

    @property
    def variable(self) -> Optional[Variable]:
        """Underlying bit variable, None for constants."""
        return self.bit.variable if self.bit is not None else None

    def lc(self, one: Variable, coeff) -> LinearCombination:
        """Linear combination equal to coeff * self."""
        FF = type(coeff)
        lc = LinearCombination.zero(FF)
        if self.kind is BooleanKind.CONSTANT:
            return lc + (coeff, one) if self.constant_value else lc
        if self.kind is BooleanKind.IS:
            return lc + (coeff, self.bit.variable)
        return lc + (coeff, one) - (coeff, self.bit.variable)


def field_into_allocated_bits_le(
    cs: ConstraintSystem,
    field: PrimeField,
    value,
) -> List[AllocatedBit]:
    """Allocate the num_bits little-endian bits of value, named 'bit i'.

    Each bit is boolean constrained; nothing ties them to value.
    """
    if value is None:
        values = [None] * field.num_bits
    else:
        le_bits = field.to_le_bits(value)
        assert not any(le_bits[field.num_bits:]), "value exceeds the field bit length"
        values = le_bits[:field.num_bits]

    bits = []
    for i, b in enumerate(values):
        with cs.namespace(f"bit {i}"):
            bits.append(AllocatedBit.alloc(cs, b))
    return bits
