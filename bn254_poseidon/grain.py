"""
Grain LFSR derivation of Poseidon round constants and MDS matrices.

Reproduces the sampling procedure of the Poseidon reference parameter
generator for prime fields with the x^alpha S-box. The generator is an 80-bit
Grain LFSR seeded from the instance description, clocked 160 times, then used
in self-shrinking mode: bits are read in pairs and the second bit is emitted
only when the first is 1.

Constants are sampled first, one n-bit integer at a time, rejecting values
not below p. The same bit stream then feeds the Cauchy MDS matrix
M[i][j] = 1 / (x_i + y_j).
"""

import logging
from typing import Iterator, List, Tuple

from .field import FF

logger = logging.getLogger(__name__)

STATE_BITS = 80
WARMUP_CLOCKS = 160

# Feedback taps: b[i+80] = b[i+62] ^ b[i+51] ^ b[i+38] ^ b[i+23] ^ b[i+13] ^ b[i]
TAPS = (62, 51, 38, 23, 13, 0)

FIELD_PRIME = 1
SBOX_POWER = 0


def _bits(value: int, width: int) -> List[int]:
    return [int(c) for c in format(value, f"0{width}b")]


def init_sequence(field_size: int, t: int, rounds_f: int, rounds_p: int) -> List[int]:
    """
    Build the 80-bit seed for a prime-field, x^alpha instance.

    Layout: field (2) | sbox (4) | n (12) | t (12) | R_F (10) | R_P (10) | 1 * 30
    """
    seq = (
        _bits(FIELD_PRIME, 2)
        + _bits(SBOX_POWER, 4)
        + _bits(field_size, 12)
        + _bits(t, 12)
        + _bits(rounds_f, 10)
        + _bits(rounds_p, 10)
        + [1] * 30
    )
    assert len(seq) == STATE_BITS
    return seq


class GrainLFSR:
    """Self-shrinking Grain LFSR bit source."""

    def __init__(self, field_size: int, t: int, rounds_f: int, rounds_p: int):
        self.state = init_sequence(field_size, t, rounds_f, rounds_p)
        for _ in range(WARMUP_CLOCKS):
            self._clock()
        self._bits = self._shrinking_bits()

    def _clock(self) -> int:
        s = self.state
        new_bit = 0
        for tap in TAPS:
            new_bit ^= s[tap]
        s.pop(0)
        s.append(new_bit)
        return new_bit

    def _shrinking_bits(self) -> Iterator[int]:
        while True:
            new_bit = self._clock()
            while new_bit == 0:
                self._clock()
                new_bit = self._clock()
            yield self._clock()

    def random_bits(self, num_bits: int) -> int:
        """Read num_bits output bits as a big-endian integer."""
        value = 0
        for _ in range(num_bits):
            value = (value << 1) | next(self._bits)
        return value


def generate_round_constants(
    lfsr: GrainLFSR, num_constants: int, field_size: int, prime: int
) -> List[int]:
    """Sample num_constants field elements by rejection below prime."""
    constants = []
    for _ in range(num_constants):
        value = lfsr.random_bits(field_size)
        while value >= prime:
            value = lfsr.random_bits(field_size)
        constants.append(value)
    return constants


def generate_mds(lfsr: GrainLFSR, t: int, field_size: int) -> List[List[int]]:
    """
    Sample a t x t Cauchy matrix M[i][j] = 1 / (x_i + y_j).

    The 2t samples are reduced into the field and must be pairwise distinct;
    a zero denominator discards the whole draw.
    """
    while True:
        samples = [lfsr.random_bits(field_size) % FF.order for _ in range(2 * t)]
        while len(set(samples)) != len(samples):
            samples = [lfsr.random_bits(field_size) % FF.order for _ in range(2 * t)]
        xs = FF(samples[:t])
        ys = FF(samples[t:])

        denominators = xs[:, None] + ys[None, :]
        if (denominators == 0).any():
            continue
        return [[int(v) for v in row] for row in denominators ** -1]


def generate_parameters(
    t: int, rounds_f: int, rounds_p: int, field_size: int = 254, prime: int = FF.order
) -> Tuple[List[List[int]], List[List[int]]]:
    """
    Derive (round_constants, mds) for one instance.

    Returns:
        round_constants: (rounds_f + rounds_p) rows of t field elements
        mds: t x t matrix
    """
    logger.debug("deriving Poseidon tables: t=%d R_F=%d R_P=%d", t, rounds_f, rounds_p)
    lfsr = GrainLFSR(field_size, t, rounds_f, rounds_p)
    flat = generate_round_constants(lfsr, (rounds_f + rounds_p) * t, field_size, prime)
    mds = generate_mds(lfsr, t, field_size)
    round_constants = [flat[r * t:(r + 1) * t] for r in range(rounds_f + rounds_p)]
    return round_constants, mds
