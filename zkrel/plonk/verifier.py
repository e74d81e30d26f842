"""
PLONK Verifier
===============

  1. 트랜스크립트 재생: vk, 공개 입력 → β γ α ζ (r̄) v u
  2. Z_H(ζ), L₁(ζ), PI(ζ) 계산. PI(ζ) 는 공개 입력 벡터에서 직접 계산한다.
  3. 선형화 커밋먼트 [D]₁ 과 상수 r₀ 구성
       [r]₁ = [D]₁ + r₀·G1
  4. [F]₁ = [t_comb]₁ + v·[r]₁ + v²·[a]₁ + v³·[b]₁ + v⁴·[c]₁ + v⁵·[S_σ1]₁ + v⁶·[S_σ2]₁
     E    = t̄ + v·r̄ + v²·ā + v³·b̄ + v⁴·c̄ + v⁵·s̄_σ1 + v⁶·s̄_σ2 + u·z̄_ω
     t̄    = r̄ / Z_H(ζ)
  5. 페어링:
       e([W_ζ]₁ + u·[W_ζω]₁, [τ]₂)
         == e(ζ·[W_ζ]₁ + u·ζω·[W_ζω]₁ + [F]₁ + u·[z]₁ - E·G1, G2)

공개 입력이 증명을 만들 때와 다르면 PI(ζ) 와 챌린지가 달라져 False 가 된다.

사용 예시:
    >>> verify_proof(params, vk, proof, [1, 1, 55])
    True
"""

import logging

from zkrel.circuit.layouter import InstanceLengthError
from zkrel.field import G1, ec_add, ec_mul, ec_neg, ec_pairing, to_fr
from zkrel.plonk.permutation import K1, K2
from zkrel.plonk.prover import absorb_public
from zkrel.plonk.transcript import Transcript
from zkrel.plonk.utils import lagrange_basis_eval, public_input_poly_eval, vanishing_poly_eval

logger = logging.getLogger(__name__)


def verify_proof(params, vk, proof, instance, transcript=None):
    """증명을 검증한다.

    Args:
        params: Params
        vk: VerifyingKey
        proof: Proof
        instance: 공개 입력 벡터
        transcript: 증명을 만들 때와 같은 해시의 빈 Transcript (기본: SHA-256)

    Returns:
        bool

    Raises:
        InstanceLengthError: 공개 입력 길이가 vk 와 다를 때
    """
    if len(instance) != vk.num_public:
        raise InstanceLengthError(vk.num_public, len(instance))

    public = [to_fr(x) for x in instance]
    n, omega = vk.n, vk.omega
    comms = vk.commitments

    # ── 1. 트랜스크립트 재생 ──
    t = transcript if transcript is not None else Transcript()
    absorb_public(t, vk, public)
    t.append_point(b"a_comm", proof.a_comm)
    t.append_point(b"b_comm", proof.b_comm)
    t.append_point(b"c_comm", proof.c_comm)
    beta = t.challenge_scalar(b"beta")
    gamma = t.challenge_scalar(b"gamma")
    t.append_point(b"z_comm", proof.z_comm)
    alpha = t.challenge_scalar(b"alpha")
    t.append_point(b"t_lo_comm", proof.t_lo_comm)
    t.append_point(b"t_mid_comm", proof.t_mid_comm)
    t.append_point(b"t_hi_comm", proof.t_hi_comm)
    zeta = t.challenge_scalar(b"zeta")
    for label in ("a_eval", "b_eval", "c_eval", "s_sigma1_eval", "s_sigma2_eval", "z_omega_eval"):
        t.append_scalar(label.encode(), getattr(proof, label))
    t.append_scalar(b"r_eval", proof.r_eval)
    v = t.challenge_scalar(b"v")
    t.append_point(b"W_zeta_comm", proof.W_zeta_comm)
    t.append_point(b"W_zeta_omega_comm", proof.W_zeta_omega_comm)
    u = t.challenge_scalar(b"u")

    a, b, c = proof.a_eval, proof.b_eval, proof.c_eval
    s1, s2 = proof.s_sigma1_eval, proof.s_sigma2_eval
    z_omega = proof.z_omega_eval

    # ── 2. 공개 값 ──
    zh_zeta = vanishing_poly_eval(n, zeta)
    if zh_zeta == 0:
        logger.info("verify: zeta fell on the domain")
        return False
    l1_zeta = lagrange_basis_eval(0, n, omega, zeta)
    pi_zeta = public_input_poly_eval(public, n, omega, zeta)
    alpha_sq = alpha * alpha

    # ── 3. [D]₁ 와 r₀ ──
    D = ec_mul(comms["q_m"], a * b)
    D = ec_add(D, ec_mul(comms["q_l"], a))
    D = ec_add(D, ec_mul(comms["q_r"], b))
    D = ec_add(D, ec_mul(comms["q_o"], c))
    D = ec_add(D, comms["q_c"])

    z_scalar = (alpha
                * (a + beta * zeta + gamma)
                * (b + beta * K1 * zeta + gamma)
                * (c + beta * K2 * zeta + gamma)
                + alpha_sq * l1_zeta)
    D = ec_add(D, ec_mul(proof.z_comm, z_scalar))

    sigma_factor = alpha * (a + beta * s1 + gamma) * (b + beta * s2 + gamma) * z_omega
    D = ec_add(D, ec_neg(ec_mul(comms["s_sigma3"], sigma_factor * beta)))

    r_0 = pi_zeta - sigma_factor * (c + gamma) - alpha_sq * l1_zeta

    # ── 4. [F]₁ 와 E ──
    zeta_n = zeta ** n
    F = ec_add(proof.t_lo_comm,
               ec_add(ec_mul(proof.t_mid_comm, zeta_n),
                      ec_mul(proof.t_hi_comm, zeta_n * zeta_n)))
    F = ec_add(F, ec_mul(ec_add(D, ec_mul(G1, r_0)), v))

    t_eval = proof.r_eval / zh_zeta
    e_scalar = t_eval + v * proof.r_eval
    power = v * v
    for comm, value in ((proof.a_comm, a), (proof.b_comm, b), (proof.c_comm, c),
                        (comms["s_sigma1"], s1), (comms["s_sigma2"], s2)):
        F = ec_add(F, ec_mul(comm, power))
        e_scalar = e_scalar + power * value
        power = power * v
    e_scalar = e_scalar + u * z_omega

    # ── 5. 페어링 ──
    A = ec_add(proof.W_zeta_comm, ec_mul(proof.W_zeta_omega_comm, u))
    B = ec_mul(proof.W_zeta_comm, zeta)
    B = ec_add(B, ec_mul(proof.W_zeta_omega_comm, u * zeta * omega))
    B = ec_add(B, F)
    B = ec_add(B, ec_mul(proof.z_comm, u))
    B = ec_add(B, ec_neg(ec_mul(G1, e_scalar)))

    ok = ec_pairing(params.g2_powers[1], A) == ec_pairing(params.g2_powers[0], B)
    logger.info("verify: %s", "accepted" if ok else "rejected")
    return ok

