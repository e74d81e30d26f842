"""
평가 도메인 유틸리티
=====================

  - vanishing_poly_eval:     Z_H(ζ) = ζ^n - 1
  - lagrange_basis_eval:     L_i(ζ)
  - public_input_polynomial: PI(x), PI(ωⁱ) = -xᵢ (i < k), 나머지 0
  - public_input_poly_eval:  PI(ζ) (Verifier 용, 다항식을 만들지 않음)
  - coset_fft / coset_ifft:  코셋 g·H' 위의 평가 (Round 3)
  - next_power_of_2

**공개 입력 행**:
  첫 k 행은 q_L = 1 인 공개 입력 게이트이다.

      q_L · a + PI = a - xᵢ = 0   →  a(ωⁱ) = xᵢ

  a 배선은 순열로 회로 안의 바인딩된 셀과 연결된다.
"""

from zkrel.field import FR, MULTIPLICATIVE_GENERATOR
from zkrel.plonk.polynomial import Polynomial, fft, ifft

COSET_SHIFT = FR(MULTIPLICATIVE_GENERATOR)


def vanishing_poly_eval(n, zeta):
    return zeta ** n - FR(1)


def lagrange_basis_eval(i, n, omega, zeta):
    """L_i(ζ) = ωⁱ · (ζ^n - 1) / (n · (ζ - ωⁱ)).

    ζ 가 도메인 위의 점이면 크로네커 델타 값을 돌려준다.
    """
    if not isinstance(zeta, FR):
        zeta = FR(zeta)
    omega_i = omega ** i
    zh = vanishing_poly_eval(n, zeta)
    if zh == 0:
        return FR(1) if zeta == omega_i else FR(0)
    return omega_i * zh / (FR(n) * (zeta - omega_i))


def public_input_polynomial(values, n, omega):
    """PI(x): 도메인 위에서 PI(ωⁱ) = -values[i]."""
    if not values:
        return Polynomial.zero()
    evals = [FR(0)] * n
    for i, x in enumerate(values):
        evals[i] = -(x if isinstance(x, FR) else FR(x))
    return Polynomial.from_evaluations(evals, omega)


def public_input_poly_eval(values, n, omega, zeta):
    """PI(ζ) = Σ -xᵢ · L_i(ζ)."""
    acc = FR(0)
    for i, x in enumerate(values):
        if not isinstance(x, FR):
            x = FR(x)
        acc = acc - x * lagrange_basis_eval(i, n, omega, zeta)
    return acc


def coset_fft(coeffs, omega, size, shift=COSET_SHIFT):
    """계수 리스트를 길이 size 로 0 패딩한 뒤 {shift · ωⁱ} 에서 평가한다.

    Args:
        coeffs: 계수 리스트 (길이 ≤ size)
        omega: size 차 원시 단위근
        size: 평가 도메인 크기
        shift: 코셋 이동 상수 (H' 에 속하지 않는 원소)
    """
    if len(coeffs) > size:
        raise ValueError(f"계수 {len(coeffs)}개가 도메인 크기 {size}를 초과합니다")
    shifted = []
    power = FR(1)
    for c in coeffs:
        shifted.append(c * power)
        power = power * shift
    shifted.extend([FR(0)] * (size - len(shifted)))
    return fft(shifted, omega)


def coset_ifft(evals, omega, shift=COSET_SHIFT):
    """coset_fft 의 역변환: 평가값 → 계수."""
    coeffs = ifft(evals, omega)
    inv = FR(1) / shift
    power = FR(1)
    out = []
    for c in coeffs:
        out.append(c * power)
        power = power * inv
    return out


def next_power_of_2(n):
    p = 1
    while p < n:
        p <<= 1
    return p
