"""
BN254 scalar field using galois library.

The galois field class FF is used wherever field linear algebra is needed
(matrix inverse, rank, products), which only happens when parameter sets are
built. The permutation itself works on plain Python ints with an explicit
reduction after every operation.
"""

import re
from typing import Union

import galois

from .errors import ParseStringError

# BN254 scalar field prime (order of the curve group)
BN254_PRIME = 0x30644E72E131A029B85045B68181585D2833E84879B9709143E1F593F0000001
BN254_FIELD_BITS = 254

# 5 generates the multiplicative group; passing it skips the factorisation of
# p - 1 that galois would otherwise perform at import time.
FF = galois.GF(BN254_PRIME, primitive_element=5, verify=False)
"""Scalar field GF(p)."""

FieldLike = Union[int, FF]

FIELD_BYTES = 32

_HEX_RE = re.compile(r"[0-9a-fA-F]+")
_DEC_RE = re.compile(r"[0-9]+")


# --- Int arithmetic (hot loop) ---

def add(a: int, b: int) -> int:
    return (a + b) % BN254_PRIME


def mul(a: int, b: int) -> int:
    return (a * b) % BN254_PRIME


def pow5(x: int) -> int:
    """
    Compute x^5 in the BN254 scalar field.

    Uses x^5 = (x^2)^2 * x.
    """
    x2 = (x * x) % BN254_PRIME
    x4 = (x2 * x2) % BN254_PRIME
    return (x4 * x) % BN254_PRIME


def sbox(x: int, alpha: int) -> int:
    """Raise x to the S-box exponent alpha."""
    if alpha == 5:
        return pow5(x)
    if alpha == 3:
        x2 = (x * x) % BN254_PRIME
        return (x2 * x) % BN254_PRIME
    if alpha == 7:
        x2 = (x * x) % BN254_PRIME
        x4 = (x2 * x2) % BN254_PRIME
        x6 = (x4 * x2) % BN254_PRIME
        return (x6 * x) % BN254_PRIME
    return pow(x, alpha, BN254_PRIME)


def to_field_int(value: FieldLike) -> int:
    """Convert an int or FF element to its reduced int representative."""
    return int(value) % BN254_PRIME


# --- Text and byte conversion ---

def field_from_hex_string(text: str) -> int:
    """
    Parse a hexadecimal string into a field element.

    An optional 0x prefix is accepted. Values larger than the modulus are
    reduced; only malformed text is rejected.

    Raises:
        ParseStringError: If text is empty or contains non-hex characters.
    """
    digits = text[2:] if text[:2] in ("0x", "0X") else text
    if not _HEX_RE.fullmatch(digits):
        raise ParseStringError(f"not a hexadecimal field element: {text!r}")
    return int(digits, 16) % BN254_PRIME


def field_from_dec_string(text: str) -> int:
    """
    Parse a decimal string into a field element, reducing modulo p.

    Raises:
        ParseStringError: If text is empty or contains non-digit characters.
    """
    if not _DEC_RE.fullmatch(text):
        raise ParseStringError(f"not a decimal field element: {text!r}")
    return int(text) % BN254_PRIME


def field_to_hex(value: FieldLike, pad: bool = False) -> str:
    """Format a field element as 0x-prefixed lowercase hex."""
    x = to_field_int(value)
    if pad:
        return f"0x{x:064x}"
    return f"0x{x:x}"


def field_from_bytes(data: bytes) -> int:
    """Big-endian bytes to field element (reduced modulo p)."""
    return int.from_bytes(data, "big") % BN254_PRIME


def field_to_bytes(value: FieldLike) -> bytes:
    """Field element to 32 big-endian bytes."""
    return to_field_int(value).to_bytes(FIELD_BYTES, "big")
