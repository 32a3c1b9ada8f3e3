"""
Poseidon hash over the BN254 scalar field.

Circom-compatible Poseidon (x^5 S-box, 8 full rounds) for hashing two or
three field elements, plus the guessing-game commitment built on it.

This package provides:
- BN254 scalar field arithmetic (via galois)
- Poseidon parameter sets (round constants and MDS matrices)
- The Poseidon permutation, literal and optimized
- Sponge hashing of 2 or 3 inputs, and a hash chain
- Guessing-game commitments

Usage:
    from bn254_poseidon import hash_two, hash_three

    digest = hash_two(1, 2)
"""

# Field arithmetic (via galois)
from .field import (
    FF,
    BN254_PRIME,
    pow5,
    field_from_hex_string,
    field_from_dec_string,
    field_to_hex,
    field_from_bytes,
    field_to_bytes,
)

from .errors import (
    PoseidonError,
    InvalidParametersError,
    ParseStringError,
)

# Parameter sets
from .parameters import (
    PoseidonParams,
    load_params,
    dump_params,
)
from .constants import (
    PoseidonConfig,
    circom_params,
    register_params,
    bn254_t3_params,
    bn254_t4_params,
)

# Permutation and hashing
from .poseidon import Poseidon
from .hash import (
    poseidon_hash,
    hash_two,
    hash_three,
    poseidon_hash_chain,
)

from .commitment import guessing_game_commit

__version__ = "0.1.0"
__all__ = [
    # Field
    "FF",
    "BN254_PRIME",
    "pow5",
    "field_from_hex_string",
    "field_from_dec_string",
    "field_to_hex",
    "field_from_bytes",
    "field_to_bytes",
    # Errors
    "PoseidonError",
    "InvalidParametersError",
    "ParseStringError",
    # Parameters
    "PoseidonParams",
    "PoseidonConfig",
    "load_params",
    "dump_params",
    "circom_params",
    "register_params",
    "bn254_t3_params",
    "bn254_t4_params",
    # Permutation
    "Poseidon",
    # Hash
    "poseidon_hash",
    "hash_two",
    "hash_three",
    "poseidon_hash_chain",
    # Commitment
    "guessing_game_commit",
]
