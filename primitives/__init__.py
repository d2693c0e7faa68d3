"""Primitives - prime field descriptors for circuit scalars."""

from primitives.field import (
    BLS12_381_SCALAR,
    BLS12_381_SCALAR_PRIME,
    DEFAULT_FIELD,
    FIELD_REGISTRY,
    GOLDILOCKS,
    GOLDILOCKS_PRIME,
    PrimeField,
    get_field,
    prime_field,
)

__all__ = [
    "PrimeField",
    "prime_field",
    "get_field",
    "FIELD_REGISTRY",
    "DEFAULT_FIELD",
    "BLS12_381_SCALAR",
    "BLS12_381_SCALAR_PRIME",
    "GOLDILOCKS",
    "GOLDILOCKS_PRIME",
]
