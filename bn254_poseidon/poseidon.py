"""
Poseidon permutation over the BN254 scalar field.

Round schedule: R_F/2 full rounds, R_P partial rounds, R_F/2 full rounds.
Each round adds the round constants, applies the S-box (to every word in a
full round, to state[0] only in a partial round) and multiplies by the MDS
matrix.

Two implementations are provided and must agree on every input:
permutation_not_opt follows the schedule literally; permutation uses the
equivalent sparse partial rounds precomputed by PoseidonParams.
"""

from typing import Iterator, List, Sequence

from .errors import InvalidParametersError
from .field import BN254_PRIME, FieldLike, add, mul, sbox, to_field_int
from .parameters import PoseidonParams, mat_vec_mul


class Poseidon:
    """Poseidon permutation bound to one parameter set."""

    def __init__(self, params: PoseidonParams):
        self.params = params

    @property
    def t(self) -> int:
        return self.params.t

    def _check_state(self, state: Sequence[FieldLike]) -> List[int]:
        if len(state) != self.params.t:
            raise InvalidParametersError(
                f"state must have {self.params.t} elements, got {len(state)}"
            )
        return [to_field_int(x) for x in state]

    def _add_rc(self, state: List[int], rc: Sequence[int]) -> None:
        for i, c in enumerate(rc):
            state[i] = add(state[i], c)

    def _sbox_full(self, state: List[int]) -> None:
        alpha = self.params.alpha
        for i in range(len(state)):
            state[i] = sbox(state[i], alpha)

    def _full_round(self, state: List[int], r: int) -> List[int]:
        self._add_rc(state, self.params.round_constant(r))
        self._sbox_full(state)
        return mat_vec_mul(self.params.mds, state)

    def _cheap_matmul(self, state: List[int], r: int) -> List[int]:
        """
        Multiply by the sparse matrix of the partial round with r rounds left.

        new[0] = mds[0][0] * s[0] + sum(w_hat[k-1] * s[k])
        new[k] = v[k-1] * s[0] + s[k]
        """
        v = self.params.v[r]
        w_hat = self.params.w_hat[r]
        s0 = state[0]

        acc = self.params.mds[0][0] * s0
        for w, x in zip(w_hat, state[1:]):
            acc += w * x
        new_state = [acc % BN254_PRIME]
        for vk, x in zip(v, state[1:]):
            new_state.append(add(mul(s0, vk), x))
        return new_state

    def permutation(self, state: Sequence[FieldLike]) -> List[int]:
        """
        Apply the permutation using sparse partial rounds.

        Args:
            state: t field elements

        Returns:
            t field elements, each in [0, p)

        Raises:
            InvalidParametersError: If len(state) != t.
        """
        params = self.params
        current = self._check_state(state)
        rf_begin = params.rounds_f_beginning
        p_end = rf_begin + params.rounds_p

        for r in range(rf_begin):
            current = self._full_round(current, r)

        self._add_rc(current, params.opt_round_constants[0])
        current = mat_vec_mul(params.m_i, current)
        for r in range(rf_begin, p_end):
            current[0] = sbox(current[0], params.alpha)
            if r < p_end - 1:
                current[0] = add(current[0], params.opt_round_constants[r + 1 - rf_begin][0])
            current = self._cheap_matmul(current, p_end - r - 1)

        for r in range(p_end, params.rounds):
            current = self._full_round(current, r)

        return current

    def rounds(self, state: Sequence[FieldLike]) -> Iterator[List[int]]:
        """
        Run the literal round schedule, yielding a copy of the state after
        every round.

        Exactly params.rounds states are yielded; the last one is the
        permutation output.
        """
        params = self.params
        current = self._check_state(state)
        rf_begin = params.rounds_f_beginning
        p_end = rf_begin + params.rounds_p

        for r in range(params.rounds):
            if rf_begin <= r < p_end:
                self._add_rc(current, params.round_constant(r))
                current[0] = sbox(current[0], params.alpha)
                current = mat_vec_mul(params.mds, current)
            else:
                current = self._full_round(current, r)
            yield list(current)

    def permutation_not_opt(self, state: Sequence[FieldLike]) -> List[int]:
        """Apply the permutation following the round schedule literally."""
        *_, last = self.rounds(state)
        return last
