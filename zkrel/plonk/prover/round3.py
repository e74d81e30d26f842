"""
Round 3: 몫 다항식 t(x)
========================

  C(x) = q_L·a + q_R·b + q_O·c + q_M·a·b + q_C + PI                 (게이트)
       + α·[ (a+βx+γ)(b+βK1x+γ)(c+βK2x+γ)·z(x)
             - (a+βS_σ1+γ)(b+βS_σ2+γ)(c+βS_σ3+γ)·z(ωx) ]            (순열)
       + α²·(z(x) - 1)·L₁(x)                                        (경계)

  t(x) = C(x) / Z_H(x)

**코셋 평가**:
  deg C ≤ 4n + 5 이므로 크기 8n 의 코셋 g·H' (g = 5) 위에서 모든 항을
  점별로 계산한다. H' 위에서는 Z_H 가 0 이 아니므로 점별 나눗셈이 된다.
  (g·ω₈ₙⁱ)^n 은 8 개 값만 돌므로 Z_H 의 역원도 8 개만 계산한다.

**나누어떨어짐 검사**:
  역변환한 t 의 계수 중 3n + 5 차를 넘는 것이 0 이 아니면 C 가 Z_H 로
  나누어떨어지지 않는 것이다 (게이트 불만족) → ProofError.

**분할**:
  t = t_lo + x^n·t_mid + x^{2n}·t_hi,  deg t_hi ≤ n + 5
"""

import logging

from zkrel.field import FR, get_root_of_unity
from zkrel.plonk.errors import ProofError
from zkrel.plonk.kzg import commit
from zkrel.plonk.permutation import K1, K2
from zkrel.plonk.polynomial import Polynomial
from zkrel.plonk.utils import COSET_SHIFT, coset_fft, coset_ifft

logger = logging.getLogger(__name__)

EXTENSION = 8


def execute(state):
    state.alpha = state.transcript.challenge_scalar(b"alpha")

    n = state.n
    size = EXTENSION * n
    big_omega = get_root_of_unity(size)
    alpha, beta, gamma = state.alpha, state.beta, state.gamma
    polys = state.polys

    def on_coset(poly):
        return coset_fft(poly.coeffs, big_omega, size)

    a, b, c = on_coset(state.a_poly), on_coset(state.b_poly), on_coset(state.c_poly)
    z = on_coset(state.z_poly)
    z_next = on_coset(state.z_poly.scale_input(state.omega))
    pi = on_coset(state.pi_poly)
    q_l, q_r, q_o, q_m, q_c = (on_coset(polys[name])
                               for name in ("q_l", "q_r", "q_o", "q_m", "q_c"))
    s1, s2, s3 = (on_coset(polys[name]) for name in ("s_sigma1", "s_sigma2", "s_sigma3"))

    # Z_H(g·ω₈ₙⁱ) = g^n · ω₈ₙ^(n·i) - 1, 주기 EXTENSION
    shift_n = COSET_SHIFT ** n
    step = big_omega ** n
    zh_values = []
    power = FR(1)
    for _ in range(EXTENSION):
        zh_values.append(shift_n * power - FR(1))
        power = power * step
    zh_inv = [FR(1) / v for v in zh_values]

    n_fr = FR(n)
    alpha_sq = alpha * alpha
    quotient = []
    x = COSET_SHIFT
    for i in range(size):
        zh = zh_values[i % EXTENSION]
        l1 = zh / (n_fr * (x - FR(1)))

        gate = (q_l[i] * a[i] + q_r[i] * b[i] + q_o[i] * c[i]
                + q_m[i] * a[i] * b[i] + q_c[i] + pi[i])
        perm = ((a[i] + beta * x + gamma)
                * (b[i] + beta * K1 * x + gamma)
                * (c[i] + beta * K2 * x + gamma) * z[i]
                - (a[i] + beta * s1[i] + gamma)
                * (b[i] + beta * s2[i] + gamma)
                * (c[i] + beta * s3[i] + gamma) * z_next[i])
        boundary = (z[i] - FR(1)) * l1

        quotient.append((gate + alpha * perm + alpha_sq * boundary) * zh_inv[i % EXTENSION])
        x = x * big_omega

    coeffs = coset_ifft(quotient, big_omega)
    bound = 3 * n + 6
    if any(coeff != 0 for coeff in coeffs[bound:]):
        logger.info("round 3: constraint polynomial not divisible by Z_H")
        raise ProofError("게이트 제약이 만족되지 않습니다 (C(x)가 Z_H(x)로 나누어떨어지지 않음)")

    t_poly = Polynomial(coeffs[:bound])
    state.t_lo_poly, state.t_mid_poly, state.t_hi_poly = t_poly.split(n, 3)

    proof = state.proof
    proof.t_lo_comm = commit(state.t_lo_poly, state.params)
    proof.t_mid_comm = commit(state.t_mid_poly, state.params)
    proof.t_hi_comm = commit(state.t_hi_poly, state.params)

    state.transcript.append_point(b"t_lo_comm", proof.t_lo_comm)
    state.transcript.append_point(b"t_mid_comm", proof.t_mid_comm)
    state.transcript.append_point(b"t_hi_comm", proof.t_hi_comm)
