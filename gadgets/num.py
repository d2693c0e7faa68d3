"""Gadgets representing numbers in a prime scalar field.

AllocatedNum is a field value bound to exactly one witness variable. Every
operation allocates its result and registers the constraints tying it to the
operands, so the arithmetic done on hints is also proven in the circuit.

Num is a deferred number: a pending linear combination that is only ever
used as one side of a constraint built elsewhere.

Hints are None while building structure without witnesses (e.g. with a
ShapeConstraintSystem); operations then produce None hints too.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from constraints.base import ConstraintSystem
from constraints.errors import AssignmentMissing, DivisionByZero, Unsatisfiable
from constraints.linear_combination import LinearCombination, Variable
from gadgets import bits as _bits
from gadgets.boolean import AllocatedBit, Boolean
from primitives.field import PrimeField

logger = logging.getLogger(__name__)


def _require(value):
    if value is None:
        raise AssignmentMissing()
    return value


@dataclass(frozen=True, eq=False)
class AllocatedNum:
    """A field element committed to one variable of a constraint system.

    Attributes:
        value: Hint for the assignment, None when unknown
        variable: The bound variable
        field: Field the value lives in
    """
    value: Optional[object]
    variable: Variable
    field: PrimeField

    # --- Allocation ---

    @classmethod
    def _alloc_with(
        cls,
        cs: ConstraintSystem,
        name: str,
        producer: Callable[[], object],
        public: bool = False,
    ) -> "AllocatedNum":
        value = None

        def produce():
            nonlocal value
            value = producer()
            return value

        if public:
            var = cs.alloc_input(name, produce)
        else:
            var = cs.alloc(name, produce)
        return cls(value, var, cs.field)

    @classmethod
    def alloc(cls, cs: ConstraintSystem, producer: Callable[[], object]) -> "AllocatedNum":
        """Allocate a private number.

        Args:
            cs: Constraint system to allocate in
            producer: Zero-argument callable returning the value. Whatever it
                raises propagates unchanged.
        """
        return cls._alloc_with(cs, "num", producer)

    @classmethod
    def alloc_infallible(cls, cs: ConstraintSystem, producer: Callable[[], object]) -> "AllocatedNum":
        """Allocate a private number from a producer that cannot fail."""
        return cls.alloc(cs, producer)

    @classmethod
    def alloc_input(cls, cs: ConstraintSystem, producer: Callable[[], object]) -> "AllocatedNum":
        """Allocate a public input number."""
        return cls._alloc_with(cs, "input num", producer, public=True)

    @classmethod
    def alloc_maybe_input(
        cls,
        cs: ConstraintSystem,
        is_input: bool,
        producer: Callable[[], object],
    ) -> "AllocatedNum":
        """Allocate a public input if is_input, a private number otherwise."""
        if is_input:
            return cls.alloc_input(cs, producer)
        return cls.alloc(cs, producer)

    def inputize(self, cs: ConstraintSystem) -> None:
        """Expose this number as a new public input constrained equal to it."""
        input_var = cs.alloc_input("input variable", lambda: _require(self.value))
        cs.enforce(
            "enforce input is correct",
            cs.lc() + input_var,
            cs.lc() + cs.one(),
            cs.lc() + self.variable,
        )

    # --- Bit decomposition ---

    def to_bits_le(self, cs: ConstraintSystem) -> List[Boolean]:
        """Little-endian bits of this number.

        Only proves the bits match modulo p; see to_bits_le_strict.
        """
        return _bits.to_bits_le(cs, self)

    def to_bits_le_strict(self, cs: ConstraintSystem) -> List[Boolean]:
        """Little-endian bits of this number, proven to be < p."""
        return _bits.to_bits_le_strict(cs, self)

    # --- Arithmetic ---

    def add(self, cs: ConstraintSystem, other: "AllocatedNum") -> "AllocatedNum":
        """Returns self + other."""
        result = self._alloc_with(
            cs, "sum num", lambda: _require(self.value) + _require(other.value)
        )

        # (a + b) * 1 = result
        cs.enforce(
            "addition constraint",
            cs.lc() + self.variable + other.variable,
            cs.lc() + cs.one(),
            cs.lc() + result.variable,
        )
        return result

    def sub(self, cs: ConstraintSystem, other: "AllocatedNum") -> "AllocatedNum":
        """Returns self - other."""
        result = self._alloc_with(
            cs, "sub num", lambda: _require(self.value) - _require(other.value)
        )

        # (a - b) * 1 = result
        cs.enforce(
            "subtraction constraint",
            cs.lc() + self.variable - other.variable,
            cs.lc() + cs.one(),
            cs.lc() + result.variable,
        )
        return result

    def neg(self, cs: ConstraintSystem) -> "AllocatedNum":
        """Returns -self."""
        result = self._alloc_with(cs, "neg num", lambda: -_require(self.value))

        # 0 * 0 = a + result
        cs.enforce(
            "negation constraint",
            cs.lc(),
            cs.lc(),
            cs.lc() + self.variable + result.variable,
        )
        return result

    def mul(self, cs: ConstraintSystem, other: "AllocatedNum") -> "AllocatedNum":
        """Returns self * other."""
        result = self._alloc_with(
            cs, "product num", lambda: _require(self.value) * _require(other.value)
        )

        cs.enforce(
            "multiplication constraint",
            cs.lc() + self.variable,
            cs.lc() + other.variable,
            cs.lc() + result.variable,
        )
        return result

    def div(self, cs: ConstraintSystem, other: "AllocatedNum") -> "AllocatedNum":
        """Returns self * other^-1.

        Raises:
            DivisionByZero: If the hint of other is zero
        """
        def quotient():
            numerator = _require(self.value)
            denominator = _require(other.value)
            if self.field.is_zero(denominator):
                raise DivisionByZero("divisor is zero")
            return numerator * self.field.invert(denominator)

        result = self._alloc_with(cs, "div num", quotient)

        # result * b = a
        cs.enforce(
            "division constraint",
            cs.lc() + result.variable,
            cs.lc() + other.variable,
            cs.lc() + self.variable,
        )
        return result

    def square(self, cs: ConstraintSystem) -> "AllocatedNum":
        """Returns self^2."""
        def squared():
            value = _require(self.value)
            return value * value

        result = self._alloc_with(cs, "squared num", squared)

        cs.enforce(
            "squaring constraint",
            cs.lc() + self.variable,
            cs.lc() + self.variable,
            cs.lc() + result.variable,
        )
        return result

    # --- Zero tests ---

    def assert_nonzero(self, cs: ConstraintSystem) -> None:
        """Enforce self != 0 by exhibiting an inverse.

        Raises:
            DivisionByZero: If the hint is zero
        """
        def inverse():
            value = _require(self.value)
            if self.field.is_zero(value):
                raise DivisionByZero()
            return self.field.invert(value)

        inv = cs.alloc("ephemeral inverse", inverse)

        # a * inv = 1 has no solution for a = 0
        cs.enforce(
            "nonzero assertion constraint",
            cs.lc() + self.variable,
            cs.lc() + inv,
            cs.lc() + cs.one(),
        )

    def is_zero(self, cs: ConstraintSystem) -> Boolean:
        """Returns the bit self == 0.

        With out the result and m a free multiplier, enforces
        m * self = 1 - out and out * self = 0. For self != 0 the second forces
        out = 0; for self = 0 the first forces out = 1.
        """
        out_value = None if self.value is None else self.field.is_zero(self.value)
        with cs.namespace("out bit"):
            out = AllocatedBit.alloc(cs, out_value)

        def zero_or_inverse():
            value = _require(self.value)
            if self.field.is_zero(value):
                return self.field.zero()
            return self.field.invert(value)

        with cs.namespace("zero or inverse"):
            multiplier = AllocatedNum.alloc(cs, zero_or_inverse)

        cs.enforce(
            "multiplier * input === 1 - out",
            cs.lc() + multiplier.variable,
            cs.lc() + self.variable,
            cs.lc() + cs.one() - out.variable,
        )
        cs.enforce(
            "out * input === 0",
            cs.lc() + out.variable,
            cs.lc() + self.variable,
            cs.lc(),
        )
        return Boolean.from_bit(out)

    def is_equal(self, cs: ConstraintSystem, other: "AllocatedNum") -> Boolean:
        """Returns the bit self == other."""
        with cs.namespace("self-other"):
            diff = self.sub(cs, other)
        return diff.is_zero(cs)

    # --- Selection ---

    @staticmethod
    def _select_producer(
        condition: Boolean,
        if_false: "AllocatedNum",
        if_true: "AllocatedNum",
    ) -> Callable[[], object]:
        def produce():
            if _require(condition.value):
                return _require(if_true.value)
            return _require(if_false.value)
        return produce

    @classmethod
    def conditionally_select(
        cls,
        cs: ConstraintSystem,
        a: "AllocatedNum",
        b: "AllocatedNum",
        condition: Boolean,
    ) -> "AllocatedNum":
        """Returns a if condition is false, b otherwise."""
        with cs.namespace("alloc output"):
            c = cls.alloc(cs, cls._select_producer(condition, a, b))

        cs.enforce(
            "condition * (a - b) === a - c",
            condition.lc(cs.one(), cs.field.one()),
            cs.lc() + a.variable - b.variable,
            cs.lc() + a.variable - c.variable,
        )
        return c

    @classmethod
    def conditionally_reverse(
        cls,
        cs: ConstraintSystem,
        a: "AllocatedNum",
        b: "AllocatedNum",
        condition: Boolean,
    ) -> Tuple["AllocatedNum", "AllocatedNum"]:
        """Returns (b, a) if condition is true, (a, b) otherwise."""
        with cs.namespace("conditional reversal result 1"):
            c = cls.alloc(cs, cls._select_producer(condition, a, b))

        cs.enforce(
            "first conditional reversal",
            cs.lc() + a.variable - b.variable,
            condition.lc(cs.one(), cs.field.one()),
            cs.lc() + a.variable - c.variable,
        )

        with cs.namespace("conditional reversal result 2"):
            d = cls.alloc(cs, cls._select_producer(condition, b, a))

        cs.enforce(
            "second conditional reversal",
            cs.lc() + b.variable - a.variable,
            condition.lc(cs.one(), cs.field.one()),
            cs.lc() + b.variable - d.variable,
        )
        return c, d

    @classmethod
    def mux_tree(
        cls,
        cs: ConstraintSystem,
        select_bits: Sequence[Boolean],
        inputs: Sequence["AllocatedNum"],
    ) -> "AllocatedNum":
        """Select inputs[index], index read from select_bits most significant first.

        Raises:
            Unsatisfiable: If len(inputs) != 2 ** len(select_bits)
        """
        select_bits = list(select_bits)
        if len(inputs) != 1 << len(select_bits):
            logger.debug(
                "mux tree over %d inputs with %d selector bits", len(inputs), len(select_bits)
            )
            raise Unsatisfiable(
                f"mux tree needs {1 << len(select_bits)} inputs, got {len(inputs)}"
            )
        return cls._mux_tree(cs, select_bits, list(inputs))

    @classmethod
    def _mux_tree(
        cls,
        cs: ConstraintSystem,
        select_bits: List[Boolean],
        inputs: List["AllocatedNum"],
    ) -> "AllocatedNum":
        if not select_bits:
            return inputs[0]

        bit, rest = select_bits[0], select_bits[1:]
        half = len(inputs) // 2
        with cs.namespace("left"):
            left = cls._mux_tree(cs, rest, inputs[:half])
        with cs.namespace("right"):
            right = cls._mux_tree(cs, rest, inputs[half:])
        with cs.namespace("join"):
            return cls.conditionally_select(cs, left, right, bit)


@dataclass(frozen=True, eq=False)
class Num:
    """A deferred number: a value hint and a linear combination.

    Never allocates a variable nor registers a constraint by itself.
    """
    value: Optional[object]
    linear_combination: LinearCombination
    field: PrimeField

    @classmethod
    def zero(cls, field: PrimeField) -> "Num":
        return cls(field.zero(), LinearCombination.zero(field.FF), field)

    @classmethod
    def from_allocated(cls, num: AllocatedNum) -> "Num":
        return cls(num.value, LinearCombination.from_variable(num.field.FF, num.variable), num.field)

    def lc(self, coeff) -> LinearCombination:
        """The linear combination multiplied by coeff."""
        return self.linear_combination.scale(coeff)

    def add_bool_with_coeff(self, one: Variable, bit: Boolean, coeff) -> "Num":
        """Returns self + coeff * bit."""
        bit_value = bit.value
        if self.value is None or bit_value is None:
            value = None
        elif bit_value:
            value = self.value + coeff
        else:
            value = self.value

        return Num(value, self.linear_combination + bit.lc(one, coeff), self.field)

    def add(self, other: "Num") -> "Num":
        if self.value is None or other.value is None:
            value = None
        else:
            value = self.value + other.value
        return Num(value, self.linear_combination + other.linear_combination, self.field)

    def scale(self, scalar) -> "Num":
        """Multiply every coefficient and the hint by scalar."""
        value = None if self.value is None else self.value * scalar
        return Num(value, self.linear_combination.scale(scalar), self.field)
