"""Prime fields GF(p) used as circuit scalars.

Uses galois library for all field arithmetic. Each supported field is
described by a PrimeField, which carries the galois class FF together with
the bit-level constants the gadgets need (bit length, serialization width
and the bits of p - 1, the bound for canonical decomposition).
"""

import galois
import random
from dataclasses import dataclass
from functools import cached_property
from typing import Dict, List, Tuple

# --- Field Construction ---

BLS12_381_SCALAR_PRIME = 0x73EDA753299D7D483339D80809A1D80553BDA402FFFE5BFEFFFFFFFF00000001
GOLDILOCKS_PRIME = 0xFFFFFFFF00000001

# Serialization is done in whole 64-bit limbs
LIMB_BITS = 64


@dataclass(frozen=True)
class PrimeField:
    """Descriptor of a prime scalar field.

    Attributes:
        name: Registry name
        modulus: The characteristic p
        FF: galois FieldArray class for GF(p)
    """
    name: str
    modulus: int
    FF: type

    @cached_property
    def num_bits(self) -> int:
        """Number of bits needed to write any canonical element."""
        return self.modulus.bit_length()

    @cached_property
    def repr_bits(self) -> int:
        """Width of the little-endian serialization (whole limbs)."""
        return -(-self.num_bits // LIMB_BITS) * LIMB_BITS

    @cached_property
    def modulus_minus_one_le_bits(self) -> Tuple[bool, ...]:
        """Little-endian bits of p - 1, the largest canonical value."""
        return tuple(_int_to_le_bits(self.modulus - 1, self.repr_bits))

    def zero(self):
        return self.FF(0)

    def one(self):
        return self.FF(1)

    def element(self, value: int):
        """Reduce an integer into the field."""
        return self.FF(value % self.modulus)

    def random(self, rng: random.Random):
        """Uniformly random element drawn from rng."""
        return self.FF(rng.randrange(self.modulus))

    def is_zero(self, value) -> bool:
        return int(value) == 0

    def invert(self, value):
        """Multiplicative inverse.

        Raises:
            ZeroDivisionError: If value is zero
        """
        if self.is_zero(value):
            raise ZeroDivisionError(f"cannot invert 0 in {self.name}")
        return value ** -1

    def to_le_bits(self, value) -> List[bool]:
        """Little-endian bits of the canonical representative, repr_bits long."""
        return _int_to_le_bits(int(value), self.repr_bits)


def _int_to_le_bits(value: int, n_bits: int) -> List[bool]:
    return [bool((value >> i) & 1) for i in range(n_bits)]


def prime_field(name: str, modulus: int, primitive_element: int) -> PrimeField:
    """Build a PrimeField over GF(modulus).

    The primitive element is supplied so galois does not need to factor
    modulus - 1 when the field class is created.
    """
    FF = galois.GF(modulus, primitive_element=primitive_element, verify=False)
    return PrimeField(name=name, modulus=modulus, FF=FF)


BLS12_381_SCALAR = prime_field("bls12_381_scalar", BLS12_381_SCALAR_PRIME, 7)
"""Scalar field of BLS12-381 (255-bit), the default circuit field."""

GOLDILOCKS = prime_field("goldilocks", GOLDILOCKS_PRIME, 7)
"""Goldilocks field p = 2^64 - 2^32 + 1."""

DEFAULT_FIELD = BLS12_381_SCALAR

# --- Field Registry ---

FIELD_REGISTRY: Dict[str, PrimeField] = {
    BLS12_381_SCALAR.name: BLS12_381_SCALAR,
    GOLDILOCKS.name: GOLDILOCKS,
}


def get_field(name: str) -> PrimeField:
    """Look up a field descriptor by name.

    Raises:
        KeyError: If no field is registered under name
    """
    if name in FIELD_REGISTRY:
        return FIELD_REGISTRY[name]
    raise KeyError(
        f"No field named '{name}'. "
        f"Available: {list(FIELD_REGISTRY.keys())}"
    )
