"""
Guessing-game commitment.

A player commits to a guess by publishing Poseidon(guess, address, r) with
a private randomness r; the commitment is later recomputed from the revealed
values and compared to the recorded one.
"""

from typing import Tuple

from .errors import ParseStringError
from .field import field_from_hex_string
from .hash import hash_three

MAX_GUESS = 0xFFFF


def commitment_inputs(guess: int, address: str, randomness: str) -> Tuple[int, int, int]:
    """
    Convert raw commitment inputs to field elements.

    Returns:
        (guess, address, randomness) as field elements

    Raises:
        ParseStringError: If address or randomness is not valid hex, or the
            guess is outside [0, 65535].
    """
    if not 0 <= guess <= MAX_GUESS:
        raise ParseStringError(f"guess must be in [0, {MAX_GUESS}], got {guess}")
    return guess, field_from_hex_string(address), field_from_hex_string(randomness)


def guessing_game_commit(guess: int, address: str, randomness: str) -> int:
    """
    Recompute a guessing-game commitment.

    All inputs are parsed before hashing, so malformed text never reaches the
    hash function.
    """
    g, a, r = commitment_inputs(guess, address, randomness)
    return hash_three(g, a, r)
