"""
Poseidon parameter sets.

A parameter set binds one state size t to its round schedule (R_F full
rounds split evenly around R_P partial rounds), S-box exponent, MDS matrix
and round-constant table. Tables are validated once at construction and are
read-only afterwards, so a single instance can be shared by every permutation
call in the process.

Construction also precomputes the equivalent representation used by the
optimized permutation: partial rounds are rewritten so that only state[0]
receives a round constant and the dense MDS product is replaced by a sparse
matrix (first row w_hat, first column v, identity elsewhere).
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple, Union

import numpy as np

from .errors import InvalidParametersError, ParseStringError
from .field import BN254_FIELD_BITS, BN254_PRIME, FF, field_from_hex_string, field_to_hex

Row = Tuple[int, ...]
Matrix = Tuple[Row, ...]


def _ints(values) -> Row:
    return tuple(int(v) for v in values)


def _matrix(values) -> Matrix:
    return tuple(_ints(row) for row in values)


def mat_vec_mul(mat: Sequence[Sequence[int]], vec: Sequence[int]) -> List[int]:
    """out[i] = sum_j mat[i][j] * vec[j] (mod p)."""
    return [sum(m * x for m, x in zip(row, vec)) % BN254_PRIME for row in mat]


def equivalent_matrices(mds: FF, rounds_p: int) -> Tuple[Matrix, Tuple[Row, ...], Tuple[Row, ...]]:
    """
    Factor the partial-round MDS products into sparse matrices.

    Returns:
        m_i: dense matrix applied once before the partial rounds
        v: per partial round, first column of the sparse matrix (without [0][0])
        w_hat: per partial round, first row of the sparse matrix (without [0][0])

    The lists are indexed by the number of partial rounds still to come, so
    the last partial round uses index 0.
    """
    t = mds.shape[0]
    mds_t = mds.T
    m_mul = mds_t.copy()
    m_i = FF.Identity(t)
    v = []
    w_hat = []

    for _ in range(rounds_p):
        v.append(_ints(m_mul[0, 1:]))
        m_hat = m_mul[1:, 1:]
        w = m_mul[1:, 0]
        w_hat.append(_ints(np.linalg.inv(m_hat) @ w))

        m_i = m_mul.copy()
        m_i[0, :] = 0
        m_i[:, 0] = 0
        m_i[0, 0] = 1
        m_mul = mds_t @ m_i

    return _matrix(m_i.T), tuple(v), tuple(w_hat)


def equivalent_round_constants(
    round_constants: FF, mds: FF, rounds_f_beginning: int, rounds_p: int
) -> Tuple[Row, ...]:
    """
    Move partial-round constants through the inverse MDS.

    Entry 0 is a full t-length row added before the partial rounds; entries
    1..rounds_p-1 hold the single constant added to state[0] after the S-box
    of the preceding partial round.
    """
    mds_inv = np.linalg.inv(mds)
    opt: List[Row] = [()] * rounds_p

    p_end = rounds_f_beginning + rounds_p - 1
    tmp = round_constants[p_end].copy()
    for i in range(rounds_p - 2, -1, -1):
        inv_cip = mds_inv @ tmp
        opt[i + 1] = (int(inv_cip[0]),)
        tmp = round_constants[rounds_f_beginning + i].copy()
        tmp[1:] = tmp[1:] + inv_cip[1:]
    opt[0] = _ints(tmp)

    return tuple(opt)


class PoseidonParams:
    """
    Immutable Poseidon parameter set for one state size.

    Attributes:
        t: State size (capacity + rate)
        alpha: S-box exponent
        rounds_f: Total number of full rounds (even)
        rounds_p: Number of partial rounds
        rounds: rounds_f + rounds_p
        rounds_f_beginning: Full rounds before the partial rounds
        mds: t x t mixing matrix
        round_constants: One t-length row per round

    Attributes cannot be reassigned once construction finishes.
    """

    __slots__ = (
        "t", "alpha", "rounds_f", "rounds_p", "rounds", "rounds_f_beginning",
        "mds", "round_constants", "m_i", "v", "w_hat", "opt_round_constants",
        "_frozen",
    )

    def __init__(
        self,
        t: int,
        alpha: int,
        rounds_f: int,
        rounds_p: int,
        mds: Sequence[Sequence[int]],
        round_constants: Sequence[Sequence[int]],
    ):
        if t < 2:
            raise InvalidParametersError(f"state size must be at least 2, got {t}")
        if rounds_f % 2 != 0:
            raise InvalidParametersError(f"full round count must be even, got {rounds_f}")
        if rounds_p < 1:
            raise InvalidParametersError(f"partial round count must be positive, got {rounds_p}")
        if len(mds) != t or any(len(row) != t for row in mds):
            raise InvalidParametersError(f"MDS matrix must be {t}x{t}")
        rounds = rounds_f + rounds_p
        if len(round_constants) != rounds:
            raise InvalidParametersError(
                f"expected {rounds} round-constant rows, got {len(round_constants)}"
            )
        if any(len(row) != t for row in round_constants):
            raise InvalidParametersError(f"every round-constant row must have {t} entries")

        mds_ff = FF([[int(v) % BN254_PRIME for v in row] for row in mds])
        if np.linalg.matrix_rank(mds_ff) != t:
            raise InvalidParametersError("MDS matrix is singular")
        rc_ff = FF([[int(v) % BN254_PRIME for v in row] for row in round_constants])

        self.t = t
        self.alpha = alpha
        self.rounds_f = rounds_f
        self.rounds_p = rounds_p
        self.rounds = rounds
        self.rounds_f_beginning = rounds_f // 2
        self.mds = _matrix(mds_ff)
        self.round_constants = _matrix(rc_ff)

        self.m_i, self.v, self.w_hat = equivalent_matrices(mds_ff, rounds_p)
        self.opt_round_constants = equivalent_round_constants(
            rc_ff, mds_ff, self.rounds_f_beginning, rounds_p
        )
        self._frozen = True

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, "_frozen", False):
            raise AttributeError(f"PoseidonParams is read-only, cannot set {name!r}")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"PoseidonParams is read-only, cannot delete {name!r}")

    def round_constant(self, i: int) -> Row:
        """
        Round-constant row for round i.

        Raises:
            InvalidParametersError: If i is outside the table, meaning the
                round schedule and the loaded table disagree.
        """
        if not 0 <= i < self.rounds:
            raise InvalidParametersError(
                f"round {i} outside the {self.rounds}-row constant table (t={self.t})"
            )
        return self.round_constants[i]

    def __repr__(self) -> str:
        return (
            f"PoseidonParams(t={self.t}, alpha={self.alpha}, "
            f"rounds_f={self.rounds_f}, rounds_p={self.rounds_p})"
        )

    # --- JSON interchange ---

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize to the metadata / round_constants / mds_matrix layout."""
        return {
            "metadata": {
                "field_size_bits": BN254_FIELD_BITS,
                "state_size": self.t,
                "alpha": self.alpha,
                "full_rounds": self.rounds_f,
                "partial_rounds": self.rounds_p,
                "total_rounds": self.rounds,
                "num_round_constants": self.rounds * self.t,
                "modulus": {
                    "decimal": str(BN254_PRIME),
                    "hex": f"0x{BN254_PRIME:064x}",
                },
            },
            "round_constants": [field_to_hex(c, pad=True) for row in self.round_constants for c in row],
            "mds_matrix": [[field_to_hex(c, pad=True) for c in row] for row in self.mds],
        }

    @classmethod
    def from_json_dict(cls, data: Dict[str, Any]) -> "PoseidonParams":
        """
        Build a parameter set from generator output in JSON form.

        Raises:
            InvalidParametersError: On missing keys, a foreign modulus,
                malformed hex, or tables of the wrong shape.
        """
        try:
            metadata = data["metadata"]
            t = int(metadata["state_size"])
            alpha = int(metadata["alpha"])
            rounds_f = int(metadata["full_rounds"])
            rounds_p = int(metadata["partial_rounds"])
            flat = [field_from_hex_string(c) for c in data["round_constants"]]
            mds = [[field_from_hex_string(c) for c in row] for row in data["mds_matrix"]]
            modulus = metadata.get("modulus", {}).get("decimal")
            if modulus is not None:
                modulus = int(modulus)
        except ParseStringError as e:
            raise InvalidParametersError(f"malformed parameter file: {e}") from e
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise InvalidParametersError(f"malformed parameter file: {e!r}") from e

        if modulus is not None and modulus != BN254_PRIME:
            raise InvalidParametersError(f"parameters are for modulus {modulus}, not BN254")
        if len(flat) != (rounds_f + rounds_p) * t:
            raise InvalidParametersError(
                f"expected {(rounds_f + rounds_p) * t} round constants, got {len(flat)}"
            )

        round_constants = [flat[r * t:(r + 1) * t] for r in range(rounds_f + rounds_p)]
        return cls(t, alpha, rounds_f, rounds_p, mds, round_constants)


def load_params(path: Union[str, Path]) -> PoseidonParams:
    """Load a parameter set from a JSON file."""
    with open(path) as f:
        return PoseidonParams.from_json_dict(json.load(f))


def dump_params(params: PoseidonParams, path: Union[str, Path]) -> None:
    """Write a parameter set to a JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(params.to_json_dict(), f, indent=2)
