"""Circuit gadgets: bits, committed numbers and deferred numbers."""

from .bits import RunState, enforce_packing, kary_and, to_bits_le, to_bits_le_strict
from .boolean import AllocatedBit, Boolean, BooleanKind, field_into_allocated_bits_le
from .num import AllocatedNum, Num

__all__ = [
    "AllocatedBit",
    "Boolean",
    "BooleanKind",
    "field_into_allocated_bits_le",
    "AllocatedNum",
    "Num",
    "RunState",
    "kary_and",
    "enforce_packing",
    "to_bits_le",
    "to_bits_le_strict",
]
