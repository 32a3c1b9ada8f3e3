"""Pytest configuration for bn254_poseidon tests."""

import sys
from pathlib import Path

import pytest

# Make the golden vectors module importable from every test file
tests_dir = Path(__file__).parent
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))


@pytest.fixture(scope="session")
def params_t3():
    from bn254_poseidon.constants import circom_params
    return circom_params(3)


@pytest.fixture(scope="session")
def params_t4():
    from bn254_poseidon.constants import circom_params
    return circom_params(4)
