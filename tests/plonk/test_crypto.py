"""
Tests for cryptographic building blocks: Params (SRS), KZG, Transcript.

Covers:
- SRS generation (deterministic, correct lengths, max_degree)
- KZG commit (known polynomial, zero polynomial, degree overflow)
- KZG create_witness + verify_opening (valid/invalid proofs)
- Transcript determinism, domain separation, hash choice
"""

import pytest

from zkrel.field import FR, G1, G2, ec_add, ec_eq, ec_is_inf, ec_mul
from zkrel.plonk.polynomial import Polynomial
from zkrel.plonk.srs import Params, required_degree
from zkrel.plonk.kzg import commit, create_witness, verify_opening
from zkrel.plonk.transcript import Transcript


# ─────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="module")
def params_small():
    """Small SRS for fast tests (max_degree=8)."""
    return Params.setup(max_degree=8, seed=42)


# ─────────────────────────────────────────────────────────────────────
# SRS Tests
# ─────────────────────────────────────────────────────────────────────

class TestParams:
    def test_lengths(self, params_small):
        assert len(params_small.g1_powers) == 9
        assert len(params_small.g2_powers) == 2
        assert params_small.max_degree == 8

    def test_generators_first(self, params_small):
        assert ec_eq(params_small.g1_powers[0], G1)
        assert ec_eq(params_small.g2_powers[0], G2)

    def test_deterministic_with_same_seed(self):
        a = Params.setup(max_degree=3, seed=7)
        b = Params.setup(max_degree=3, seed=7)
        assert all(ec_eq(p, q) for p, q in zip(a.g1_powers, b.g1_powers))

    def test_different_seeds(self):
        a = Params.setup(max_degree=2, seed=1)
        b = Params.setup(max_degree=2, seed=2)
        assert not ec_eq(a.g1_powers[1], b.g1_powers[1])

    def test_without_seed(self):
        params = Params.setup(max_degree=2)
        assert not ec_is_inf(params.g1_powers[1])

    def test_max_degree_zero(self):
        with pytest.raises(ValueError):
            Params.setup(max_degree=0)

    def test_required_degree(self):
        assert required_degree(16) == 21
        assert required_degree(512) == 517


# ─────────────────────────────────────────────────────────────────────
# KZG Tests
# ─────────────────────────────────────────────────────────────────────

class TestKZGCommit:
    def test_constant(self, params_small):
        assert ec_eq(commit(Polynomial([7]), params_small), ec_mul(G1, 7))

    def test_zero(self, params_small):
        assert ec_is_inf(commit(Polynomial.zero(), params_small))

    def test_linearity(self, params_small):
        p = Polynomial([1, 2, 3])
        q = Polynomial([4, 0, 0, 5])
        assert ec_eq(commit(p + q, params_small),
                     ec_add(commit(p, params_small), commit(q, params_small)))

    def test_degree_exceeds(self, params_small):
        with pytest.raises(ValueError):
            commit(Polynomial([1] * 10), params_small)

    def test_at_max_degree(self, params_small):
        assert not ec_is_inf(commit(Polynomial([1] * 9), params_small))


class TestKZGOpening:
    @pytest.mark.parametrize("point", [0, 1, 5, FR(123456)])
    def test_valid_opening(self, params_small, point):
        p = Polynomial([3, 1, 4, 1, 5])
        c = commit(p, params_small)
        pi = create_witness(p, point, params_small)
        assert verify_opening(c, pi, point, p.evaluate(point), params_small)

    def test_wrong_evaluation(self, params_small):
        p = Polynomial([3, 1, 4])
        c = commit(p, params_small)
        pi = create_witness(p, 2, params_small)
        assert not verify_opening(c, pi, 2, p.evaluate(2) + FR(1), params_small)

    def test_wrong_point(self, params_small):
        p = Polynomial([3, 1, 4])
        c = commit(p, params_small)
        pi = create_witness(p, 2, params_small)
        assert not verify_opening(c, pi, 3, p.evaluate(2), params_small)

    def test_wrong_commitment(self, params_small):
        p = Polynomial([3, 1, 4])
        other = commit(Polynomial([3, 1, 5]), params_small)
        pi = create_witness(p, 2, params_small)
        assert not verify_opening(other, pi, 2, p.evaluate(2), params_small)


# ─────────────────────────────────────────────────────────────────────
# Transcript Tests
# ─────────────────────────────────────────────────────────────────────

class TestTranscript:
    def _run(self, transcript, scalar=FR(5)):
        transcript.append_point(b"p", ec_mul(G1, 3))
        transcript.append_scalar(b"s", scalar)
        return transcript.challenge_scalar(b"beta")

    def test_deterministic(self):
        assert self._run(Transcript()) == self._run(Transcript())

    def test_depends_on_messages(self):
        assert self._run(Transcript()) != self._run(Transcript(), FR(6))

    def test_depends_on_label(self):
        assert self._run(Transcript(b"a")) != self._run(Transcript(b"b"))

    def test_hash_choice(self):
        assert self._run(Transcript.sha256()) != self._run(Transcript.blake2b())

    def test_by_name(self):
        assert Transcript.by_name("blake2b").name == "blake2b"
        assert Transcript.by_name("sha256").name == "sha256"
        with pytest.raises(ValueError):
            Transcript.by_name("md5")

    def test_successive_challenges_differ(self):
        t = Transcript()
        assert t.challenge_scalar(b"x") != t.challenge_scalar(b"x")

    def test_fresh(self):
        t = Transcript.blake2b(b"label")
        self._run(t)
        fresh = t.fresh()
        assert fresh.name == "blake2b"
        assert bytes(fresh.state) == b"label"

    def test_infinity_point(self):
        t1, t2 = Transcript(), Transcript()
        t1.append_point(b"p", ec_add(G1, ec_mul(G1, -1)))
        t2.append_point(b"p", ec_mul(G1, 0))
        assert t1.challenge_scalar(b"c") == t2.challenge_scalar(b"c")
