"""
Circom-compatible Poseidon hash.

Single-block sponge: the capacity word state[0] starts at zero, the k inputs
fill state[1..k] in order, and the digest is state[0] after one permutation
of width t = k + 1.
"""

from typing import List, Sequence

from .constants import circom_params
from .errors import InvalidParametersError
from .field import FieldLike, to_field_int
from .poseidon import Poseidon

# Capacity element of the initial state
CAPACITY_VALUE = 0


def _poseidon(t: int) -> Poseidon:
    try:
        params = circom_params(t)
    except InvalidParametersError as e:
        raise InvalidParametersError(
            f"no parameter set hashes {t - 1} inputs"
        ) from e
    return Poseidon(params)


def poseidon_hash(inputs: Sequence[FieldLike]) -> int:
    """
    Hash len(inputs) field elements to one field element.

    Raises:
        InvalidParametersError: If no parameter set has t = len(inputs) + 1.
    """
    if len(inputs) == 0:
        raise InvalidParametersError("at least one input is required")
    poseidon = _poseidon(len(inputs) + 1)
    state = [CAPACITY_VALUE] + [to_field_int(x) for x in inputs]
    return poseidon.permutation(state)[0]


def hash_two(a: FieldLike, b: FieldLike) -> int:
    """Poseidon hash of two field elements (t=3)."""
    return poseidon_hash([a, b])


def hash_three(a: FieldLike, b: FieldLike, c: FieldLike) -> int:
    """Poseidon hash of three field elements (t=4)."""
    return poseidon_hash([a, b, c])


def poseidon_hash_chain(inputs: Sequence[FieldLike]) -> int:
    """
    Fold inputs through t=3 permutations.

    Each step permutes [0, previous digest, input] and keeps state[0]. An
    empty input yields 0.
    """
    poseidon = _poseidon(3)
    state: List[int] = [CAPACITY_VALUE] * 3
    for x in inputs:
        state = poseidon.permutation([CAPACITY_VALUE, state[0], to_field_int(x)])
    return state[0]
