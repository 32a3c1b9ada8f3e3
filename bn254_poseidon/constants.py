"""
Canonical Circom-compatible parameter sets for BN254.

Round counts follow circomlib: 8 full rounds and, indexed by t - 2, the
partial round counts below. Tables are derived on first use and cached for
the lifetime of the process.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Dict, List

from .errors import InvalidParametersError
from .field import BN254_FIELD_BITS, BN254_PRIME
from .grain import generate_parameters
from .parameters import PoseidonParams

logger = logging.getLogger(__name__)

ALPHA = 5
ROUNDS_F = 8

# circomlib N_ROUNDS_P, index t - 2
ROUNDS_P = [56, 57, 56, 60, 60, 63, 64, 63, 60, 66, 60, 65, 70, 60, 64, 68]

SUPPORTED_STATE_SIZES = (3, 4)


@dataclass(frozen=True)
class PoseidonConfig:
    """Provenance of one generated parameter set."""
    t: int
    rounds_f: int = ROUNDS_F
    rounds_p: int = 0
    alpha: int = ALPHA
    field_size: int = BN254_FIELD_BITS
    prime: int = BN254_PRIME

    @classmethod
    def circom(cls, t: int) -> "PoseidonConfig":
        if not 2 <= t < len(ROUNDS_P) + 2:
            raise InvalidParametersError(f"no Circom round schedule for t={t}")
        return cls(t=t, rounds_p=ROUNDS_P[t - 2])

    def build(self) -> PoseidonParams:
        round_constants, mds = generate_parameters(
            self.t, self.rounds_f, self.rounds_p, self.field_size, self.prime
        )
        return PoseidonParams(self.t, self.alpha, self.rounds_f, self.rounds_p, mds, round_constants)


_registry: Dict[int, PoseidonParams] = {}
_lock = threading.Lock()


def circom_params(t: int) -> PoseidonParams:
    """
    Process-wide parameter set for state size t.

    Returns a registered set if one exists, otherwise derives the
    Circom-compatible tables for t on first call.
    """
    params = _registry.get(t)
    if params is not None:
        return params
    with _lock:
        params = _registry.get(t)
        if params is None:
            params = PoseidonConfig.circom(t).build()
            logger.debug("built %r", params)
            _registry[t] = params
    return params


def register_params(params: PoseidonParams) -> None:
    """
    Make a parameter set available to arity-dispatched hashing.

    Raises:
        InvalidParametersError: If a different set is already bound to t.
    """
    with _lock:
        existing = _registry.get(params.t)
        if existing is not None and existing is not params:
            raise InvalidParametersError(f"parameters for t={params.t} are already registered")
        _registry[params.t] = params


def registered_state_sizes() -> List[int]:
    """State sizes with a parameter set already built or registered."""
    return sorted(_registry)


def bn254_t3_params() -> PoseidonParams:
    """t=3 parameter set (hashes two field elements)."""
    return circom_params(3)


def bn254_t4_params() -> PoseidonParams:
    """t=4 parameter set (hashes three field elements)."""
    return circom_params(4)
