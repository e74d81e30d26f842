"""
Foundation module tests: field.py, polynomial.py, utils.py
"""
import pytest
from py_ecc import optimized_bn128 as bn128

from zkrel.field import (
    FR, CURVE_ORDER, G1, G2, Z1,
    ec_add, ec_eq, ec_from_affine, ec_is_inf, ec_mul, ec_neg, ec_normalize, ec_pairing,
    get_root_of_unity, get_roots_of_unity, to_fr,
)
from zkrel.plonk.polynomial import Polynomial, fft, ifft
from zkrel.plonk.utils import (
    vanishing_poly_eval,
    lagrange_basis_eval,
    public_input_polynomial,
    public_input_poly_eval,
    coset_fft,
    coset_ifft,
    next_power_of_2,
)


# =====================================================================
# FR arithmetic
# =====================================================================

class TestFR:
    def test_modular_reduction(self):
        assert FR(CURVE_ORDER) == FR(0)
        assert FR(CURVE_ORDER + 7) == FR(7)

    def test_negative(self):
        assert FR(-1) == FR(CURVE_ORDER - 1)

    def test_division_inverse(self):
        a = FR(3)
        assert a * (FR(1) / a) == FR(1)

    def test_to_fr(self):
        x = FR(5)
        assert to_fr(x) is x
        assert to_fr(5) == x


# =====================================================================
# Roots of unity
# =====================================================================

class TestRootsOfUnity:
    @pytest.mark.parametrize("n", [2, 4, 8, 16, 512])
    def test_primitive(self, n):
        omega = get_root_of_unity(n)
        assert omega ** n == FR(1)
        assert omega ** (n // 2) != FR(1)

    def test_domain(self):
        domain = get_roots_of_unity(8)
        assert len(domain) == 8
        assert domain[0] == FR(1)
        assert len(set(int(x) for x in domain)) == 8

    def test_size_one(self):
        assert get_root_of_unity(1) == FR(1)

    @pytest.mark.parametrize("n", [0, 3, 12])
    def test_not_power_of_two(self, n):
        with pytest.raises(ValueError):
            get_root_of_unity(n)

    def test_too_large(self):
        with pytest.raises(ValueError):
            get_root_of_unity(1 << 29)


# =====================================================================
# Curve helpers
# =====================================================================

class TestCurve:
    def test_mul_add(self):
        assert ec_eq(ec_mul(G1, 2), ec_add(G1, G1))
        assert ec_eq(ec_mul(G1, FR(3)), ec_add(G1, ec_add(G1, G1)))

    def test_mul_reduces_scalar(self):
        assert ec_eq(ec_mul(G1, CURVE_ORDER + 5), ec_mul(G1, 5))

    def test_neg(self):
        assert ec_is_inf(ec_add(G1, ec_neg(G1)))

    def test_identity(self):
        assert ec_is_inf(Z1)
        assert ec_normalize(Z1) is None
        assert ec_eq(ec_add(G1, Z1), G1)

    def test_affine_round_trip(self):
        p = ec_mul(G1, 12345)
        assert ec_eq(ec_from_affine(ec_normalize(p)), p)

    def test_from_affine_infinity(self):
        assert ec_is_inf(ec_from_affine(None))

    def test_from_affine_rejects_off_curve(self):
        with pytest.raises(ValueError):
            ec_from_affine((bn128.FQ(1), bn128.FQ(1)))

    def test_pairing_bilinear(self):
        lhs = ec_pairing(ec_mul(G2, 3), ec_mul(G1, 5))
        rhs = ec_pairing(G2, ec_mul(G1, 15))
        assert lhs == rhs


# =====================================================================
# Polynomial
# =====================================================================

class TestPolynomial:
    def test_trailing_zeros_trimmed(self):
        p = Polynomial([1, 2, 0, 0])
        assert p.degree == 1
        assert Polynomial([]).is_zero()
        assert Polynomial().is_zero()

    def test_evaluate(self):
        # 3 + 2x + x²
        p = Polynomial([3, 2, 1])
        assert p.evaluate(2) == FR(11)
        assert p.evaluate(FR(0)) == FR(3)

    def test_add_sub(self):
        p = Polynomial([1, 2])
        q = Polynomial([0, 0, 5])
        assert p + q == Polynomial([1, 2, 5])
        assert (p + q) - q == p
        assert p + 4 == Polynomial([5, 2])
        assert 1 - p == Polynomial([0, -2])

    def test_mul(self):
        # (1 + x)(1 - x) = 1 - x²
        assert Polynomial([1, 1]) * Polynomial([1, -1]) == Polynomial([1, 0, -1])
        assert Polynomial([1, 2]) * 3 == Polynomial([3, 6])
        assert 3 * Polynomial([1, 2]) == Polynomial([3, 6])

    def test_vanishing(self):
        n = 8
        zh = Polynomial.vanishing(n)
        for w in get_roots_of_unity(n):
            assert zh.evaluate(w) == FR(0)
        assert zh.evaluate(FR(2)) == vanishing_poly_eval(n, FR(2))

    def test_from_evaluations(self):
        n = 4
        omega = get_root_of_unity(n)
        evals = [FR(5), FR(1), FR(7), FR(2)]
        p = Polynomial.from_evaluations(evals, omega)
        assert [p.evaluate(w) for w in get_roots_of_unity(n)] == evals

    def test_scale_input(self):
        p = Polynomial([1, 2, 3])
        k = FR(7)
        assert p.scale_input(k).evaluate(FR(5)) == p.evaluate(k * FR(5))

    def test_divide_by_linear(self):
        # (x² - 1) / (x - 1) = x + 1
        assert Polynomial([-1, 0, 1]).divide_by_linear(FR(1)) == Polynomial([1, 1])

    def test_divide_by_linear_identity(self):
        p = Polynomial([4, 0, 9, 1, 3])
        z = FR(11)
        q = p.divide_by_linear(z)
        x = FR(29)
        assert q.evaluate(x) * (x - z) + p.evaluate(z) == p.evaluate(x)

    def test_divide_constant(self):
        assert Polynomial([5]).divide_by_linear(FR(3)).is_zero()

    def test_split(self):
        p = Polynomial(list(range(1, 11)))
        lo, mid, hi = p.split(4, 3)
        assert lo == Polynomial([1, 2, 3, 4])
        assert mid == Polynomial([5, 6, 7, 8])
        assert hi == Polynomial([9, 10])
        x = FR(3)
        assert lo.evaluate(x) + x ** 4 * mid.evaluate(x) + x ** 8 * hi.evaluate(x) == p.evaluate(x)

    def test_split_short(self):
        lo, mid, hi = Polynomial([1, 2]).split(4, 3)
        assert mid.is_zero() and hi.is_zero()


# =====================================================================
# FFT
# =====================================================================

class TestFFT:
    def test_matches_evaluation(self):
        coeffs = [FR(c) for c in (3, 1, 4, 1, 5, 9, 2, 6)]
        omega = get_root_of_unity(8)
        evals = fft(coeffs, omega)
        p = Polynomial(coeffs)
        assert evals == [p.evaluate(w) for w in get_roots_of_unity(8)]

    def test_inverse(self):
        coeffs = [FR(c) for c in (2, 7, 1, 8)]
        omega = get_root_of_unity(4)
        assert ifft(fft(coeffs, omega), omega) == coeffs

    def test_coset_round_trip(self):
        coeffs = [FR(c) for c in (1, 2, 3)]
        omega = get_root_of_unity(8)
        evals = coset_fft(coeffs, omega, 8)
        assert len(evals) == 8
        assert coset_ifft(evals, omega)[:3] == coeffs
        assert all(c == 0 for c in coset_ifft(evals, omega)[3:])

    def test_coset_points(self):
        coeffs = [FR(c) for c in (1, 2, 3)]
        omega = get_root_of_unity(4)
        evals = coset_fft(coeffs, omega, 4)
        p = Polynomial(coeffs)
        assert evals[1] == p.evaluate(FR(5) * omega)

    def test_coset_too_many_coeffs(self):
        with pytest.raises(ValueError):
            coset_fft([FR(1)] * 5, get_root_of_unity(4), 4)


# =====================================================================
# Lagrange / public input helpers
# =====================================================================

class TestUtils:
    def test_lagrange_on_domain(self):
        n = 8
        omega = get_root_of_unity(n)
        domain = get_roots_of_unity(n)
        assert lagrange_basis_eval(2, n, omega, domain[2]) == FR(1)
        assert lagrange_basis_eval(2, n, omega, domain[3]) == FR(0)

    def test_lagrange_partition_of_unity(self):
        n = 8
        omega = get_root_of_unity(n)
        zeta = FR(123456789)
        total = FR(0)
        for i in range(n):
            total = total + lagrange_basis_eval(i, n, omega, zeta)
        assert total == FR(1)

    def test_public_input_polynomial(self):
        n = 8
        omega = get_root_of_unity(n)
        values = [FR(1), FR(1), FR(55)]
        pi = public_input_polynomial(values, n, omega)
        domain = get_roots_of_unity(n)
        assert pi.evaluate(domain[2]) == FR(-55)
        assert pi.evaluate(domain[5]) == FR(0)
        zeta = FR(987654321)
        assert pi.evaluate(zeta) == public_input_poly_eval(values, n, omega, zeta)

    def test_public_input_empty(self):
        assert public_input_polynomial([], 4, get_root_of_unity(4)).is_zero()

    @pytest.mark.parametrize("n, expected", [(1, 1), (3, 4), (8, 8), (11, 16), (378, 512)])
    def test_next_power_of_2(self, n, expected):
        assert next_power_of_2(n) == expected
