"""Little-endian bit decomposition of committed numbers.

Two variants are provided:

    to_bits_le         Boolean constrained bits plus one packing constraint
                       sum(bit_i * 2^i) = x. Proves the bits represent x modulo
                       p, so x + p is accepted as well when it fits.

    to_bits_le_strict  Additionally proves the bits, read most significant
                       first, are lexicographically <= the bits of p - 1.

Strict decomposition walks the bits of the bound p - 1 from the top:

    - leading zeros of the bound are skipped, no bit is allocated;
    - where the bound has a one, the witness bit is free and is appended to
      the current run of ones;
    - where the bound has a zero, a pending run is first folded with k-ary
      AND (together with the previous fold) into last_run, meaning "every
      witness bit so far equals the bound". The witness bit is then
      allocated conditionally: it must be 0 when last_run is 1.

Since p is odd, p - 1 ends in a zero and no run is pending at the end.
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Sequence

from constraints.base import ConstraintSystem
from constraints.linear_combination import Variable
from gadgets.boolean import AllocatedBit, Boolean, field_into_allocated_bits_le

if TYPE_CHECKING:
    from gadgets.num import AllocatedNum

logger = logging.getLogger(__name__)


class RunState(Enum):
    """Position of the strict decomposition walk relative to the bound."""
    BEFORE_FIRST_ONE = "before-first-one"
    IN_ONE_RUN = "in-one-run"
    IN_ZERO_RUN = "in-zero-run"


def kary_and(cs: ConstraintSystem, bits: Sequence[AllocatedBit]) -> AllocatedBit:
    """AND all bits together, one 'and i' namespace per conjunction."""
    assert len(bits) > 0, "kary_and needs at least one bit"

    cur = bits[0]
    for i, bit in enumerate(bits[1:], start=1):
        with cs.namespace(f"and {i}"):
            cur = AllocatedBit.and_(cs, cur, bit)
    return cur


def enforce_packing(
    cs: ConstraintSystem,
    bits_le: Sequence[AllocatedBit],
    variable: Variable,
) -> None:
    """Enforce 0 * 0 = sum(bit_i * 2^i) - variable."""
    lc = cs.lc()
    coeff = cs.field.one()
    for bit in bits_le:
        lc = lc + (coeff, bit.variable)
        coeff = coeff + coeff

    lc = lc - variable
    cs.enforce("unpacking constraint", cs.lc(), cs.lc(), lc)


def to_bits_le(cs: ConstraintSystem, num: "AllocatedNum") -> List[Boolean]:
    bits = field_into_allocated_bits_le(cs, cs.field, num.value)
    enforce_packing(cs, bits, num.variable)
    return [Boolean.from_bit(bit) for bit in bits]


def to_bits_le_strict(cs: ConstraintSystem, num: "AllocatedNum") -> List[Boolean]:
    """Canonical little-endian bits of num: the bits must encode a value < p.

    Returns:
        num_bits Booleans, least significant first
    """
    field = cs.field
    bound_be = list(reversed(field.modulus_minus_one_le_bits))
    if num.value is None:
        value_be: List[Optional[bool]] = [None] * len(bound_be)
    else:
        value_be = list(reversed(field.to_le_bits(num.value)))

    # Big-endian until the final reversal
    result: List[AllocatedBit] = []
    current_run: List[AllocatedBit] = []
    last_run: Optional[AllocatedBit] = None
    state = RunState.BEFORE_FIRST_ONE
    runs_folded = 0
    i = 0

    for bound_bit, a_bit in zip(bound_be, value_be):
        if state is RunState.BEFORE_FIRST_ONE and not bound_bit:
            if a_bit is not None:
                assert not a_bit, "value has a bit set above the bound"
            continue

        if bound_bit:
            # Part of a run of ones, the witness bit is unconstrained here
            with cs.namespace(f"bit {i}"):
                bit = AllocatedBit.alloc(cs, a_bit)
            current_run.append(bit)
            result.append(bit)
            state = RunState.IN_ONE_RUN
        else:
            if state is RunState.IN_ONE_RUN:
                if last_run is not None:
                    current_run.append(last_run)
                with cs.namespace(f"run ending at {i}"):
                    last_run = kary_and(cs, current_run)
                current_run = []
                runs_folded += 1
                state = RunState.IN_ZERO_RUN

            # Tied with the bound so far: a one here would exceed it
            with cs.namespace(f"bit {i}"):
                bit = AllocatedBit.alloc_conditionally(cs, a_bit, last_run)
            result.append(bit)

        i += 1

    assert not current_run, "bound must end in a run of zeros"

    result.reverse()
    enforce_packing(cs, result, num.variable)
    logger.debug("strict decomposition: %d bits, %d runs folded", len(result), runs_folded)

    return [Boolean.from_bit(bit) for bit in result]
