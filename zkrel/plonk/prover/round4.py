"""
Round 4: ζ 에서의 평가값
=========================

  ā = a(ζ), b̄ = b(ζ), c̄ = c(ζ), s̄_σ1 = S_σ1(ζ), s̄_σ2 = S_σ2(ζ), z̄_ω = z(ζ·ω)

  z̄_ω 는 순열 항의 z(ωx) 때문에 필요하다. S_σ3 과 z(ζ) 는 Round 5 의
  선형화 다항식 안에 다항식으로 남는다.
"""


def execute(state):
    state.zeta = state.transcript.challenge_scalar(b"zeta")
    zeta = state.zeta
    proof = state.proof

    proof.a_eval = state.a_poly.evaluate(zeta)
    proof.b_eval = state.b_poly.evaluate(zeta)
    proof.c_eval = state.c_poly.evaluate(zeta)
    proof.s_sigma1_eval = state.polys["s_sigma1"].evaluate(zeta)
    proof.s_sigma2_eval = state.polys["s_sigma2"].evaluate(zeta)
    proof.z_omega_eval = state.z_poly.evaluate(zeta * state.omega)

    for label in ("a_eval", "b_eval", "c_eval", "s_sigma1_eval", "s_sigma2_eval", "z_omega_eval"):
        state.transcript.append_scalar(label.encode(), getattr(proof, label))
