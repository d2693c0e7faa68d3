"""Tests for AllocatedBit and Boolean."""

import pytest

from constraints import AssignmentMissing, ShapeConstraintSystem, Unsatisfiable
from gadgets.boolean import AllocatedBit, Boolean, BooleanKind, field_into_allocated_bits_le
from primitives.field import GOLDILOCKS

FF = GOLDILOCKS.FF


class TestAllocatedBit:
    """Boolean constrained witnesses."""

    @pytest.mark.parametrize("value", [False, True])
    def test_alloc(self, small_cs, value) -> None:
        bit = AllocatedBit.alloc(small_cs, value)
        assert bit.value is value
        assert small_cs.get("boolean") == (FF(1) if value else FF(0))
        assert small_cs.is_satisfied()

    def test_non_boolean_assignment_unsatisfied(self, small_cs) -> None:
        AllocatedBit.alloc(small_cs, True)
        small_cs.set("boolean", FF(2))
        assert small_cs.which_is_unsatisfied() == "boolean constraint"

    def test_missing_value(self, small_cs) -> None:
        with pytest.raises(AssignmentMissing):
            AllocatedBit.alloc(small_cs, None)

    def test_and_truth_table(self, small_cs) -> None:
        for a_val in (False, True):
            for b_val in (False, True):
                with small_cs.namespace(f"{a_val} {b_val}"):
                    with small_cs.namespace("a"):
                        a = AllocatedBit.alloc(small_cs, a_val)
                    with small_cs.namespace("b"):
                        b = AllocatedBit.alloc(small_cs, b_val)
                    c = AllocatedBit.and_(small_cs, a, b)
                assert c.value is (a_val and b_val)
        assert small_cs.is_satisfied()

    def test_and_tampered(self, small_cs) -> None:
        with small_cs.namespace("a"):
            a = AllocatedBit.alloc(small_cs, True)
        with small_cs.namespace("b"):
            b = AllocatedBit.alloc(small_cs, True)
        AllocatedBit.and_(small_cs, a, b)
        small_cs.set("and result", FF(0))
        assert small_cs.which_is_unsatisfied() == "and constraint"


class TestAllocConditionally:
    """Bits forced to zero by a guarding bit."""

    def _guard(self, cs, value: bool) -> AllocatedBit:
        with cs.namespace("guard"):
            return AllocatedBit.alloc(cs, value)

    def test_free_when_guard_unset(self, small_cs) -> None:
        guard = self._guard(small_cs, False)
        with small_cs.namespace("bit"):
            AllocatedBit.alloc_conditionally(small_cs, True, guard)
        assert small_cs.is_satisfied()

    def test_zero_when_guard_set(self, small_cs) -> None:
        guard = self._guard(small_cs, True)
        with small_cs.namespace("bit"):
            AllocatedBit.alloc_conditionally(small_cs, False, guard)
        assert small_cs.is_satisfied()

        # A one under a set guard violates the constraint
        small_cs.set("bit/boolean", FF(1))
        assert small_cs.which_is_unsatisfied() == "bit/boolean constraint"

    def test_one_under_set_guard_fails(self, small_cs) -> None:
        guard = self._guard(small_cs, True)
        with pytest.raises(Unsatisfiable):
            AllocatedBit.alloc_conditionally(small_cs, True, guard)


class TestBoolean:
    """Values and weighted linear combinations of the three variants."""

    def test_constant(self) -> None:
        assert Boolean.constant(True).value is True
        assert Boolean.constant(False).not_().value is True
        assert Boolean.constant(True).variable is None

    def test_not_of_bit(self, small_cs) -> None:
        bit = AllocatedBit.alloc(small_cs, True)
        b = Boolean.from_bit(bit)
        assert b.kind is BooleanKind.IS
        assert b.not_().kind is BooleanKind.NOT
        assert b.not_().value is False
        assert b.not_().not_().value is True
        assert b.variable == bit.variable

    def test_unknown_value(self) -> None:
        cs = ShapeConstraintSystem(GOLDILOCKS)
        bit = AllocatedBit.alloc(cs, None)
        assert Boolean.from_bit(bit).value is None
        assert Boolean.from_bit(bit).not_().value is None

    @pytest.mark.parametrize("value", [False, True])
    def test_lc_evaluates_to_weighted_value(self, small_cs, value) -> None:
        """lc(one, k) evaluates to k * value for every variant."""
        bit = AllocatedBit.alloc(small_cs, value)
        coeff = FF(9)
        variants = [
            Boolean.constant(value),
            Boolean.from_bit(bit),
            Boolean.from_bit(bit).not_(),
        ]
        for b in variants:
            expected = coeff if b.value else FF(0)
            lc = b.lc(small_cs.one(), coeff)
            assert lc.evaluate(small_cs.value_of) == expected

    def test_false_constant_lc_is_empty(self, small_cs) -> None:
        assert len(Boolean.constant(False).lc(small_cs.one(), FF(3))) == 0


class TestFieldIntoBits:
    """Weak bit allocation."""

    def test_bits_match_value(self, small_cs, rng) -> None:
        x = GOLDILOCKS.random(rng)
        bits = field_into_allocated_bits_le(small_cs, GOLDILOCKS, x)
        assert len(bits) == GOLDILOCKS.num_bits
        assert sum(1 << i for i, b in enumerate(bits) if b.value) == int(x)
        assert small_cs.get("bit 0/boolean") == (FF(1) if int(x) & 1 else FF(0))
        assert small_cs.is_satisfied()

    def test_unknown_value(self) -> None:
        cs = ShapeConstraintSystem(GOLDILOCKS)
        bits = field_into_allocated_bits_le(cs, GOLDILOCKS, None)
        assert all(b.value is None for b in bits)
        assert cs.num_constraints() == GOLDILOCKS.num_bits
