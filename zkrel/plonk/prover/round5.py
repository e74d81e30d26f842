"""
Round 5: 선형화 + KZG 열기 증명
================================

**선형화 다항식 r(x)**:
  Round 4 의 평가값을 스칼라로 대입하고, 커밋먼트로 남길 수 있는 다항식
  (셀렉터, z, S_σ3) 만 남긴다.

    r(x) = ā·b̄·q_M + ā·q_L + b̄·q_R + c̄·q_O + q_C + PI(ζ)
         + α·(ā+βζ+γ)(b̄+βK1ζ+γ)(c̄+βK2ζ+γ)·z(x)
         - α·(ā+βs̄1+γ)(b̄+βs̄2+γ)·z̄_ω·(β·S_σ3(x) + c̄ + γ)
         + α²·L₁(ζ)·(z(x) - 1)

  r(ζ) = C(ζ) = t(ζ)·Z_H(ζ) 이므로 Verifier 는 t(ζ) = r̄ / Z_H(ζ) 로 쓴다.

**일괄 열기**:
  W_ζ(x)  = [t_comb + v·r + v²·a + v³·b + v⁴·c + v⁵·S_σ1 + v⁶·S_σ2 - (ζ 값)] / (x - ζ)
  W_ζω(x) = [z(x) - z̄_ω] / (x - ζω)

  t_comb(x) = t_lo(x) + ζ^n·t_mid(x) + ζ^{2n}·t_hi(x)
"""

from zkrel.plonk.kzg import commit
from zkrel.plonk.permutation import K1, K2
from zkrel.plonk.utils import lagrange_basis_eval


def linearization(state):
    """r(x) 를 만든다."""
    proof = state.proof
    polys = state.polys
    zeta, alpha, beta, gamma = state.zeta, state.alpha, state.beta, state.gamma
    a, b, c = proof.a_eval, proof.b_eval, proof.c_eval

    pi_zeta = state.pi_poly.evaluate(zeta)
    l1_zeta = lagrange_basis_eval(0, state.n, state.omega, zeta)

    r = (polys["q_m"] * (a * b) + polys["q_l"] * a + polys["q_r"] * b
         + polys["q_o"] * c + polys["q_c"] + pi_zeta)

    z_scalar = (alpha
                * (a + beta * zeta + gamma)
                * (b + beta * K1 * zeta + gamma)
                * (c + beta * K2 * zeta + gamma)
                + alpha * alpha * l1_zeta)
    sigma_factor = (alpha
                    * (a + beta * proof.s_sigma1_eval + gamma)
                    * (b + beta * proof.s_sigma2_eval + gamma)
                    * proof.z_omega_eval)

    r = r + state.z_poly * z_scalar
    r = r - polys["s_sigma3"] * (sigma_factor * beta)
    r = r - (sigma_factor * (c + gamma) + alpha * alpha * l1_zeta)
    return r


def execute(state):
    proof = state.proof
    zeta = state.zeta
    n = state.n

    r_poly = linearization(state)
    proof.r_eval = r_poly.evaluate(zeta)
    state.transcript.append_scalar(b"r_eval", proof.r_eval)

    state.v = state.transcript.challenge_scalar(b"v")
    v = state.v

    zeta_n = zeta ** n
    combined = (state.t_lo_poly
                + state.t_mid_poly * zeta_n
                + state.t_hi_poly * (zeta_n * zeta_n))
    power = v
    for poly in (r_poly, state.a_poly, state.b_poly, state.c_poly,
                 state.polys["s_sigma1"], state.polys["s_sigma2"]):
        combined = combined + poly * power
        power = power * v

    w_zeta = combined.divide_by_linear(zeta)
    w_zeta_omega = state.z_poly.divide_by_linear(zeta * state.omega)

    proof.W_zeta_comm = commit(w_zeta, state.params)
    proof.W_zeta_omega_comm = commit(w_zeta_omega, state.params)
    state.transcript.append_point(b"W_zeta_comm", proof.W_zeta_comm)
    state.transcript.append_point(b"W_zeta_omega_comm", proof.W_zeta_omega_comm)

