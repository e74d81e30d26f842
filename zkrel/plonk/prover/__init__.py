"""
PLONK Prover: 5 라운드 오케스트레이터
======================================

  ┌─────────────────────────────────────────────────────┐
  │  준비:    vk 커밋먼트와 공개 입력을 트랜스크립트에   │
  │  Round 1: [a]₁, [b]₁, [c]₁   (블라인딩 2계수)       │
  │  Round 2: β, γ → [z]₁         (블라인딩 3계수)       │
  │  Round 3: α → [t_lo]₁, [t_mid]₁, [t_hi]₁             │
  │  Round 4: ζ → ā, b̄, c̄, s̄_σ1, s̄_σ2, z̄_ω             │
  │  Round 5: r̄ → v → [W_ζ]₁, [W_ζω]₁                  │
  └─────────────────────────────────────────────────────┘

witness 가 제약을 만족하지 않으면 Round 2 (복사 제약, instance 바인딩)
또는 Round 3 (게이트) 에서 ProofError 로 중단한다.

난수원(rng)과 트랜스크립트는 주입할 수 있다. rng 는 randrange(bound) 를
가진 객체면 되며, 기본값은 secrets.SystemRandom().

사용 예시:
    >>> proof = create_proof(params, pk, FibonacciCircuit(), [1, 1, 55])
    >>> verify_proof(params, pk.vk, proof, [1, 1, 55])
    True
"""

import logging
import secrets

from zkrel.circuit.layouter import synthesize
from zkrel.field import FR, to_fr
from zkrel.plonk.compiler import compile_circuit
from zkrel.plonk.errors import BackendError
from zkrel.plonk.prover import round1, round2, round3, round4, round5
from zkrel.plonk.transcript import Transcript

logger = logging.getLogger(__name__)


class Proof:
    """PLONK 증명.

    Round 1: a_comm, b_comm, c_comm
    Round 2: z_comm
    Round 3: t_lo_comm, t_mid_comm, t_hi_comm
    Round 4: a_eval, b_eval, c_eval, s_sigma1_eval, s_sigma2_eval, z_omega_eval
    Round 5: r_eval, W_zeta_comm, W_zeta_omega_comm
    """

    COMMITMENTS = ("a_comm", "b_comm", "c_comm", "z_comm",
                   "t_lo_comm", "t_mid_comm", "t_hi_comm",
                   "W_zeta_comm", "W_zeta_omega_comm")
    EVALUATIONS = ("a_eval", "b_eval", "c_eval", "s_sigma1_eval",
                   "s_sigma2_eval", "z_omega_eval", "r_eval")

    def __init__(self, **fields):
        for name in self.COMMITMENTS + self.EVALUATIONS:
            setattr(self, name, fields.get(name))

    def __repr__(self):
        return f"Proof(a_eval={int(self.a_eval) if self.a_eval is not None else None}, ...)"


class ProverState:
    """라운드 사이에 공유되는 Prover 상태.

    속성 (입력):
        pk, params, wires (a, b, c 평가값), public (FR 리스트)
        rng, transcript

    속성 (라운드 산출물):
        pi_poly, a_poly, b_poly, c_poly, z_poly, t_lo_poly, t_mid_poly, t_hi_poly
        beta, gamma, alpha, zeta, v
    """

    def __init__(self, pk, params, wires, public, rng, transcript):
        self.pk = pk
        self.params = params
        self.wires = wires
        self.public = public
        self.rng = rng
        self.transcript = transcript

        self.n = pk.n
        self.omega = pk.vk.omega
        self.domain = pk.domain
        self.polys = pk.polys

        self.pi_poly = None
        self.a_poly = self.b_poly = self.c_poly = None
        self.z_poly = None
        self.t_lo_poly = self.t_mid_poly = self.t_hi_poly = None

        self.beta = self.gamma = self.alpha = self.zeta = self.v = None

        self.proof = Proof()

    def random_scalar(self):
        return FR(self.rng.randrange(FR.field_modulus))


def absorb_public(transcript, vk, public):
    vk.absorb_into(transcript)
    for x in public:
        transcript.append_scalar(b"public", x)


def create_proof(params, pk, circuit, instance, rng=None, transcript=None):
    """witness 가 있는 회로의 증명을 만든다.

    Args:
        params: Params (SRS)
        pk: ProvingKey
        circuit: witness 를 가진 Circuit
        instance: 공개 입력 벡터
        rng: randrange 를 가진 난수원 (기본: secrets.SystemRandom())
        transcript: 빈 Transcript (기본: SHA-256)

    Returns:
        Proof

    Raises:
        InstanceLengthError: 공개 입력 길이가 다를 때
        BackendError: 회로 구조가 증명 키와 다를 때
        ProofError: witness 가 제약을 만족하지 않을 때
    """
    cs, _, assignment = synthesize(circuit, instance)
    compiled = compile_circuit(cs, assignment)
    if not compiled.same_structure(pk.compiled):
        raise BackendError("회로 구조가 증명 키와 일치하지 않습니다")

    public = [to_fr(x) for x in instance]
    transcript = transcript if transcript is not None else Transcript()
    absorb_public(transcript, pk.vk, public)

    state = ProverState(pk, params, compiled.wire_values(assignment), public,
                        rng if rng is not None else secrets.SystemRandom(), transcript)

    # ┌────────────────────────────────────┐
    # │  Round 1: 배선 다항식 커밋          │
    # └────────────────────────────────────┘
    round1.execute(state)

    # ┌────────────────────────────────────┐
    # │  Round 2: 순열 누산기 z(x)          │
    # └────────────────────────────────────┘
    round2.execute(state)

    # ┌────────────────────────────────────┐
    # │  Round 3: 몫 다항식 t(x)            │
    # └────────────────────────────────────┘
    round3.execute(state)

    # ┌────────────────────────────────────┐
    # │  Round 4: ζ 에서의 평가값           │
    # └────────────────────────────────────┘
    round4.execute(state)

    # ┌────────────────────────────────────┐
    # │  Round 5: 선형화 + 열기 증명        │
    # └────────────────────────────────────┘
    round5.execute(state)

    logger.info("proof created: %r (n=%d)", circuit, state.n)
    return state.proof
