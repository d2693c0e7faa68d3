"""Tests for Num, the deferred (unallocated) number."""

from constraints import ShapeConstraintSystem
from constraints.linear_combination import LinearCombination, Variable, VariableKind
from gadgets.boolean import AllocatedBit, Boolean
from gadgets.num import AllocatedNum, Num
from primitives.field import BLS12_381_SCALAR

F = BLS12_381_SCALAR
FF = F.FF


class TestNum:
    """Accumulation without allocation."""

    def test_partial_addition(self) -> None:
        """Any absent hint makes the sum's hint absent."""
        a = Num.zero(F)
        b = Num(None, LinearCombination.zero(FF), F)
        assert a.add(b).value is None
        assert b.add(a).value is None
        assert b.add(b).value is None
        assert a.add(a).value == F.zero()

    def test_scale(self, rng) -> None:
        n = 5
        lc = LinearCombination.zero(FF)
        coeffs = []
        value = F.zero()
        for i in range(n):
            coeff = F.random(rng)
            lc = lc + (coeff, Variable(VariableKind.AUX, i))
            coeffs.append(coeff)
            value = value + coeff

        scalar = F.random(rng)
        num = Num(value, lc, F)
        scaled = num.scale(scalar)

        assert scaled.value == value * scalar
        for i, coeff in enumerate(coeffs):
            assert scaled.linear_combination.coeff(Variable(VariableKind.AUX, i)) == coeff * scalar
        # The original is untouched
        assert num.value == value
        assert num.linear_combination.coeff(Variable(VariableKind.AUX, 0)) == coeffs[0]

    def test_scale_absent_hint(self) -> None:
        num = Num(None, LinearCombination.zero(FF), F)
        assert num.scale(FF(3)).value is None

    def test_add_bool_with_coeff(self, cs) -> None:
        """Packing bits with powers of two reproduces the integer."""
        values = [True, False, True, True]
        acc = Num.zero(F)
        coeff = F.one()
        for i, v in enumerate(values):
            with cs.namespace(f"bit {i}"):
                bit = Boolean.from_bit(AllocatedBit.alloc(cs, v))
            acc = acc.add_bool_with_coeff(cs.one(), bit, coeff)
            coeff = coeff + coeff

        assert acc.value == FF(0b1101)
        assert acc.linear_combination.evaluate(cs.value_of) == FF(0b1101)
        # Nothing was allocated or enforced beyond the bits themselves
        assert cs.num_constraints() == len(values)
        assert cs.num_aux() == len(values)

    def test_add_bool_constant_and_negated(self, cs) -> None:
        with cs.namespace("bit"):
            bit = AllocatedBit.alloc(cs, True)
        acc = (
            Num.zero(F)
            .add_bool_with_coeff(cs.one(), Boolean.constant(True), FF(10))
            .add_bool_with_coeff(cs.one(), Boolean.from_bit(bit).not_(), FF(100))
            .add_bool_with_coeff(cs.one(), Boolean.from_bit(bit), FF(1000))
        )
        assert acc.value == FF(1010)
        assert acc.linear_combination.evaluate(cs.value_of) == FF(1010)

    def test_unknown_bit_poisons_chain(self) -> None:
        """An absent bit hint anywhere leaves the whole chain absent."""
        shape = ShapeConstraintSystem(F)
        unknown = Boolean.from_bit(AllocatedBit.alloc(shape, None))
        acc = Num.zero(F).add_bool_with_coeff(shape.one(), unknown, FF(2))
        acc = acc.add_bool_with_coeff(shape.one(), Boolean.constant(True), FF(1))
        acc = acc.add(Num.zero(F))
        assert acc.value is None

    def test_lc_used_in_constraint(self, cs) -> None:
        """lc(coeff) serves as one side of a caller-built constraint."""
        a = AllocatedNum.alloc(cs, lambda: FF(6))
        with cs.namespace("b"):
            b = AllocatedNum.alloc(cs, lambda: FF(7))
        total = Num.from_allocated(a).add(Num.from_allocated(b))
        assert total.value == FF(13)

        with cs.namespace("doubled"):
            doubled = AllocatedNum.alloc(cs, lambda: FF(26))
        cs.enforce("2 * (a + b) = doubled", total.lc(FF(2)), cs.lc() + cs.one(), cs.lc() + doubled.variable)
        assert cs.is_satisfied()

        cs.set("doubled/num", FF(27))
        assert not cs.is_satisfied()

    def test_from_allocated(self, cs) -> None:
        a = AllocatedNum.alloc(cs, lambda: FF(4))
        num = Num.from_allocated(a)
        assert num.value == FF(4)
        assert num.linear_combination.coeff(a.variable) == F.one()
        assert len(num.linear_combination) == 1
