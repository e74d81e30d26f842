"""
Round 2: 순열 누산기 z(x)
==========================

  β, γ 를 뽑고 z(ωⁱ) 를 누적곱으로 계산한다 (permutation.compute_accumulator).
  누적곱이 1 로 돌아오지 않으면 복사 제약이나 instance 바인딩이 깨진 것이므로
  여기서 바로 ProofError 를 낸다.

  블라인딩 3계수: z'(x) = z(x) + (r₁ + r₂·x + r₃·x²)·Z_H(x)
"""

import logging

from zkrel.field import FR
from zkrel.plonk.errors import ProofError
from zkrel.plonk.kzg import commit
from zkrel.plonk.permutation import compute_accumulator
from zkrel.plonk.polynomial import Polynomial
from zkrel.plonk.prover.round1 import blind

logger = logging.getLogger(__name__)

Z_BLINDING = 3


def execute(state):
    state.beta = state.transcript.challenge_scalar(b"beta")
    state.gamma = state.transcript.challenge_scalar(b"gamma")

    z_evals, final = compute_accumulator(
        state.wires, state.pk.sigma_evals, state.domain, state.beta, state.gamma)
    if final != FR(1):
        logger.info("round 2: permutation product != 1")
        raise ProofError("복사 제약 또는 공개 입력 바인딩이 만족되지 않습니다")

    state.z_poly = blind(state, Polynomial.from_evaluations(z_evals, state.omega), Z_BLINDING)

    state.proof.z_comm = commit(state.z_poly, state.params)
    state.transcript.append_point(b"z_comm", state.proof.z_comm)
