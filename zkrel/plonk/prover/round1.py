"""
Round 1: 배선 다항식 커밋
==========================

  1. PI(x): PI(ωⁱ) = -xᵢ (공개 입력 행), 나머지 0
  2. a(x), b(x), c(x) 를 배선 평가값에서 IFFT 로 보간
  3. 블라인딩: a'(x) = a(x) + (r₁ + r₂·x)·Z_H(x)
     도메인 위의 값은 그대로이고 차수는 n + 1
  4. [a]₁, [b]₁, [c]₁ 을 커밋하고 트랜스크립트에 흡수
"""

from zkrel.plonk.kzg import commit
from zkrel.plonk.polynomial import Polynomial
from zkrel.plonk.utils import public_input_polynomial

WIRE_BLINDING = 2


def blind(state, poly, count):
    """poly + (r₀ + r₁·x + ...)·Z_H(x)."""
    mask = Polynomial([state.random_scalar() for _ in range(count)])
    return poly + mask * Polynomial.vanishing(state.n)


def execute(state):
    omega = state.omega
    state.pi_poly = public_input_polynomial(state.public, state.n, omega)

    a_vals, b_vals, c_vals = state.wires
    state.a_poly = blind(state, Polynomial.from_evaluations(a_vals, omega), WIRE_BLINDING)
    state.b_poly = blind(state, Polynomial.from_evaluations(b_vals, omega), WIRE_BLINDING)
    state.c_poly = blind(state, Polynomial.from_evaluations(c_vals, omega), WIRE_BLINDING)

    proof = state.proof
    proof.a_comm = commit(state.a_poly, state.params)
    proof.b_comm = commit(state.b_poly, state.params)
    proof.c_comm = commit(state.c_poly, state.params)

    state.transcript.append_point(b"a_comm", proof.a_comm)
    state.transcript.append_point(b"b_comm", proof.b_comm)
    state.transcript.append_point(b"c_comm", proof.c_comm)
