"""Tests for Poseidon parameter sets."""

import json

import numpy as np
import pytest

from bn254_poseidon import constants
from bn254_poseidon.constants import PoseidonConfig, circom_params, register_params
from bn254_poseidon.errors import InvalidParametersError
from bn254_poseidon.field import BN254_PRIME, FF
from bn254_poseidon.parameters import PoseidonParams, dump_params, load_params


def _copy(params, **overrides):
    kwargs = dict(
        t=params.t,
        alpha=params.alpha,
        rounds_f=params.rounds_f,
        rounds_p=params.rounds_p,
        mds=[list(row) for row in params.mds],
        round_constants=[list(row) for row in params.round_constants],
    )
    kwargs.update(overrides)
    return PoseidonParams(**kwargs)


class TestCanonicalParams:
    """Shipped Circom-compatible instances."""

    def test_t3_schedule(self, params_t3) -> None:
        assert params_t3.t == 3
        assert params_t3.alpha == 5
        assert params_t3.rounds_f == 8
        assert params_t3.rounds_p == 57
        assert params_t3.rounds == 65
        assert len(params_t3.round_constants) == params_t3.rounds

    def test_t4_schedule(self, params_t4) -> None:
        assert params_t4.t == 4
        assert params_t4.rounds_f == 8
        assert params_t4.rounds_p == 56
        assert len(params_t4.round_constants) == 64

    def test_instances_are_shared(self, params_t3) -> None:
        assert circom_params(3) is params_t3

    def test_mds_full_rank(self, params_t3, params_t4) -> None:
        for params in (params_t3, params_t4):
            assert np.linalg.matrix_rank(FF([list(row) for row in params.mds])) == params.t

    def test_tables_are_immutable(self, params_t3) -> None:
        with pytest.raises(TypeError):
            params_t3.round_constants[0][0] = 1
        with pytest.raises(TypeError):
            params_t3.mds[0] = (1, 2, 3)

    @pytest.mark.parametrize("name", ["t", "alpha", "rounds_p", "mds", "round_constants", "w_hat"])
    def test_attributes_are_read_only(self, params_t3, name: str) -> None:
        before = getattr(params_t3, name)
        with pytest.raises(AttributeError):
            setattr(params_t3, name, before)
        with pytest.raises(AttributeError):
            delattr(params_t3, name)
        assert getattr(params_t3, name) is before

    def test_no_new_attributes(self, params_t3) -> None:
        with pytest.raises(AttributeError):
            params_t3.extra = 1

    def test_unsupported_state_size(self) -> None:
        with pytest.raises(InvalidParametersError):
            circom_params(1)
        with pytest.raises(InvalidParametersError):
            circom_params(18)

    def test_config_for_t3(self) -> None:
        config = PoseidonConfig.circom(3)
        assert config.rounds_f == 8
        assert config.rounds_p == 57
        assert config.alpha == 5
        assert config.prime == BN254_PRIME


class TestRoundConstantAccess:
    """round_constant(i) bounds."""

    def test_in_range(self, params_t3) -> None:
        assert params_t3.round_constant(0) == params_t3.round_constants[0]
        assert params_t3.round_constant(64) == params_t3.round_constants[64]

    @pytest.mark.parametrize("i", [-1, 65, 1000])
    def test_out_of_range(self, params_t3, i: int) -> None:
        with pytest.raises(InvalidParametersError):
            params_t3.round_constant(i)


class TestValidation:
    """Malformed tables are rejected at construction."""

    def test_wrong_row_count(self, params_t3) -> None:
        with pytest.raises(InvalidParametersError):
            _copy(params_t3, round_constants=[list(r) for r in params_t3.round_constants[:-1]])

    def test_wrong_row_width(self, params_t3) -> None:
        rows = [list(r) for r in params_t3.round_constants]
        rows[10] = rows[10][:2]
        with pytest.raises(InvalidParametersError):
            _copy(params_t3, round_constants=rows)

    def test_non_square_mds(self, params_t3) -> None:
        with pytest.raises(InvalidParametersError):
            _copy(params_t3, mds=[list(r) for r in params_t3.mds[:2]])

    def test_singular_mds(self, params_t3) -> None:
        with pytest.raises(InvalidParametersError):
            _copy(params_t3, mds=[[1, 2, 3], [2, 4, 6], [5, 6, 7]])

    def test_odd_full_rounds(self, params_t3) -> None:
        rows = [list(r) for r in params_t3.round_constants]
        with pytest.raises(InvalidParametersError):
            _copy(params_t3, rounds_f=7, rounds_p=58, round_constants=rows)

    def test_schedule_table_mismatch(self, params_t3) -> None:
        # 65 rows but the schedule declares 8 + 56 rounds
        with pytest.raises(InvalidParametersError):
            _copy(params_t3, rounds_p=56)


class TestJson:
    """JSON interchange."""

    def test_json_layout(self, params_t3) -> None:
        data = params_t3.to_json_dict()
        assert data["metadata"]["state_size"] == 3
        assert data["metadata"]["full_rounds"] == 8
        assert data["metadata"]["partial_rounds"] == 57
        assert data["metadata"]["num_round_constants"] == 195
        assert data["metadata"]["modulus"]["decimal"] == str(BN254_PRIME)
        assert len(data["round_constants"]) == 195
        assert len(data["mds_matrix"]) == 3

    def test_file_preserves_tables(self, params_t3, tmp_path) -> None:
        path = tmp_path / "params" / "t3.json"
        dump_params(params_t3, path)
        loaded = load_params(path)
        assert loaded.t == params_t3.t
        assert loaded.round_constants == params_t3.round_constants
        assert loaded.mds == params_t3.mds
        assert loaded.opt_round_constants == params_t3.opt_round_constants

    def test_foreign_modulus_rejected(self, params_t3) -> None:
        data = params_t3.to_json_dict()
        data["metadata"]["modulus"]["decimal"] = str(2**64 - 2**32 + 1)
        with pytest.raises(InvalidParametersError):
            PoseidonParams.from_json_dict(data)

    def test_truncated_constants_rejected(self, params_t3) -> None:
        data = params_t3.to_json_dict()
        data["round_constants"] = data["round_constants"][:-1]
        with pytest.raises(InvalidParametersError):
            PoseidonParams.from_json_dict(data)

    def test_bad_hex_rejected(self, params_t3) -> None:
        data = json.loads(json.dumps(params_t3.to_json_dict()))
        data["mds_matrix"][0][0] = "0xnothex"
        with pytest.raises(InvalidParametersError):
            PoseidonParams.from_json_dict(data)

    @pytest.mark.parametrize("key", ["state_size", "alpha", "full_rounds", "partial_rounds"])
    def test_non_integer_metadata_rejected(self, params_t3, key: str) -> None:
        data = params_t3.to_json_dict()
        data["metadata"][key] = "three"
        with pytest.raises(InvalidParametersError):
            PoseidonParams.from_json_dict(data)

    def test_modulus_not_an_object_rejected(self, params_t3) -> None:
        data = params_t3.to_json_dict()
        data["metadata"]["modulus"] = "0x30644e"
        with pytest.raises(InvalidParametersError):
            PoseidonParams.from_json_dict(data)

    def test_non_decimal_modulus_rejected(self, params_t3) -> None:
        data = params_t3.to_json_dict()
        data["metadata"]["modulus"]["decimal"] = "0x30644e"
        with pytest.raises(InvalidParametersError):
            PoseidonParams.from_json_dict(data)

    def test_modulus_optional(self, params_t3) -> None:
        data = params_t3.to_json_dict()
        del data["metadata"]["modulus"]
        assert PoseidonParams.from_json_dict(data).mds == params_t3.mds

    def test_missing_key_rejected(self) -> None:
        with pytest.raises(InvalidParametersError):
            PoseidonParams.from_json_dict({"metadata": {}})


class TestRegistry:
    """Additional parameter sets."""

    def test_register_new_state_size(self, monkeypatch, params_t3) -> None:
        monkeypatch.setattr(constants, "_registry", dict(constants._registry))
        params_t2 = PoseidonConfig.circom(2).build()
        register_params(params_t2)
        assert circom_params(2) is params_t2
        assert 2 in constants.registered_state_sizes()

    def test_register_conflict(self, monkeypatch, params_t3) -> None:
        monkeypatch.setattr(constants, "_registry", dict(constants._registry))
        with pytest.raises(InvalidParametersError):
            register_params(_copy(params_t3))

    def test_register_same_instance(self, monkeypatch, params_t3) -> None:
        monkeypatch.setattr(constants, "_registry", dict(constants._registry))
        register_params(params_t3)
        assert circom_params(3) is params_t3
