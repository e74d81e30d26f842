import json

import pytest

from zkrel.field import FR, G1, Z1, ec_eq, ec_is_inf, ec_mul
from zkrel.chips.fibonacci import FibonacciCircuit
from zkrel.plonk.keygen import keygen_vk
from zkrel.plonk.prover import Proof
from zkrel.pipeline import run_relation
from zkrel.plonk.srs import Params, required_degree

from relation_serializers import (
    serialize_fr, deserialize_fr,
    serialize_fr_list,
    serialize_g1, deserialize_g1,
    serialize_proof, deserialize_proof,
    serialize_report, summarize_vk, g1_short, fr_short,
)


def _fake_proof():
    fields = {name: ec_mul(G1, i + 2) for i, name in enumerate(Proof.COMMITMENTS)}
    fields.update({name: FR(100 + i) for i, name in enumerate(Proof.EVALUATIONS)})
    fields["t_hi_comm"] = Z1
    return Proof(**fields)


class TestScalars:
    def test_fr(self):
        assert serialize_fr(FR(42)) == "42"
        assert deserialize_fr("42") == FR(42)

    def test_fr_list(self):
        values = [FR(1), FR(-1)]
        data = serialize_fr_list(values)
        assert data[1] == str(FR.field_modulus - 1)
        assert [deserialize_fr(s) for s in data] == values

    def test_fr_short(self):
        assert fr_short(FR(55)) == "55"
        assert "..." in fr_short(FR(-1))


class TestPoints:
    def test_g1(self):
        p = ec_mul(G1, 77)
        data = serialize_g1(p)
        assert len(data) == 2
        assert ec_eq(deserialize_g1(data), p)

    def test_g1_infinity(self):
        assert serialize_g1(Z1) is None
        assert ec_is_inf(deserialize_g1(None))

    def test_g1_off_curve(self):
        with pytest.raises(ValueError):
            deserialize_g1(["1", "1"])

    def test_g1_short(self):
        assert g1_short(Z1) == "O"
        assert g1_short(G1) == "(1..., 2...)"


class TestProof:
    def test_round_trip_through_json(self):
        proof = _fake_proof()
        data = json.loads(json.dumps(serialize_proof(proof)))
        restored = deserialize_proof(data)
        for name in Proof.COMMITMENTS:
            assert ec_eq(getattr(restored, name), getattr(proof, name))
        for name in Proof.EVALUATIONS:
            assert getattr(restored, name) == getattr(proof, name)

    def test_missing_field(self):
        data = serialize_proof(_fake_proof())
        del data["r_eval"]
        with pytest.raises(KeyError):
            deserialize_proof(data)


class TestVerifyingKey:
    def test_summary(self):
        params = Params.setup(required_degree(16), seed=5)
        vk = keygen_vk(params, FibonacciCircuit())
        summary = summarize_vk(vk)
        assert summary["n"] == 16
        assert summary["num_public"] == 3
        assert set(summary["commitments"]) == {
            "q_l", "q_r", "q_o", "q_m", "q_c", "s_sigma1", "s_sigma2", "s_sigma3"}
        json.dumps(summary)


class TestReport:
    def test_failed_local_check(self):
        data = serialize_report(run_relation(FibonacciCircuit(), [1, 7, 55]))
        assert data["ok"] is False
        assert [s["status"] for s in data["stages"]] == ["failed", "skipped", "skipped", "skipped"]
        assert len(data["failures"]) == 1
        assert "vk" not in data
        json.dumps(data)

    def test_passed_includes_vk_summary(self):
        params = Params.setup(required_degree(16), seed=5)
        data = serialize_report(run_relation(FibonacciCircuit(), [1, 1, 55], params=params))
        assert data["ok"] is True
        assert data["vk"]["n"] == 16
        json.dumps(data)
