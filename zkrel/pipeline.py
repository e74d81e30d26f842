"""
릴레이션 파이프라인
====================

한 릴레이션을 끝까지 돌린다.

    로컬 검사 → 키 생성 → 증명 → 검증

  - 로컬 검사가 실패하면 그 뒤 단계는 실행하지 않는다 (skipped).
  - 백엔드가 증명을 거부하면 (ProofError) proof 단계가 실패로 기록된다.
  - 각 단계의 통과/실패와 상세는 PipelineReport 에 남는다.

사용 예시:
    >>> report = run_relation(FibonacciCircuit(), [1, 1, 55])
    >>> report.ok
    True
    >>> [s.name for s in report.stages]
    ['local check', 'keygen', 'proof', 'verify']
"""

import logging

from zkrel.circuit.checker import MockProver
from zkrel.plonk.errors import ProofError
from zkrel.plonk.keygen import compile_structure, keygen_pk, keygen_vk
from zkrel.plonk.prover import create_proof
from zkrel.plonk.srs import Params, required_degree
from zkrel.plonk.verifier import verify_proof

logger = logging.getLogger(__name__)

PASSED = "passed"
FAILED = "failed"
SKIPPED = "skipped"

STAGES = ("local check", "keygen", "proof", "verify")


class StageResult:

    def __init__(self, name, status, detail=""):
        self.name = name
        self.status = status
        self.detail = detail

    @property
    def passed(self):
        return self.status == PASSED

    def to_dict(self):
        return {"stage": self.name, "status": self.status, "detail": self.detail}

    def __repr__(self):
        return f"StageResult({self.name!r}, {self.status})"


class PipelineReport:
    """파이프라인 실행 결과.

    속성:
        stages: [StageResult] (항상 4개, 실행하지 않은 단계는 skipped)
        failures: 로컬 검사 위반 목록
        proof, vk, params: 생성된 산출물 (없으면 None)
    """

    def __init__(self, circuit):
        self.circuit = circuit
        self.stages = []
        self.failures = []
        self.params = None
        self.vk = None
        self.proof = None

    @property
    def ok(self):
        return all(stage.passed for stage in self.stages)

    def stage(self, name):
        for stage in self.stages:
            if stage.name == name:
                return stage
        raise KeyError(name)

    def record(self, name, status, detail=""):
        self.stages.append(StageResult(name, status, detail))
        log = logger.info if status != FAILED else logger.warning
        log("%r: %s %s%s", self.circuit, name, status, f" ({detail})" if detail else "")

    def skip_rest(self):
        done = {stage.name for stage in self.stages}
        for name in STAGES:
            if name not in done:
                self.record(name, SKIPPED)

    def to_dict(self):
        return {"ok": self.ok,
                "stages": [stage.to_dict() for stage in self.stages],
                "failures": [repr(f) for f in self.failures]}


def default_params(circuit, seed=None):
    """회로 도메인에 맞는 최소 크기의 SRS."""
    n = compile_structure(circuit).n
    return Params.setup(required_degree(n), seed=seed)


def run_relation(circuit, instance, params=None, rng=None, transcript_factory=None):
    """릴레이션을 로컬 검사부터 검증까지 실행한다.

    Args:
        circuit: witness 를 가진 Circuit
        instance: 공개 입력 벡터
        params: Params. None 이면 회로 크기에 맞춰 생성
        rng: 블라인딩 난수원. None 이면 OS 난수
        transcript_factory: 빈 Transcript 를 만드는 함수 (증명과 검증에 각각 호출)

    Returns:
        PipelineReport

    Raises:
        InstanceLengthError: 공개 입력 길이가 다를 때
    """
    report = PipelineReport(circuit)

    prover = MockProver.run(circuit, instance)
    report.failures = prover.verify()
    if report.failures:
        report.record("local check", FAILED, f"{len(report.failures)} violation(s)")
        report.skip_rest()
        return report
    report.record("local check", PASSED)

    report.params = params if params is not None else default_params(circuit)
    vk = keygen_vk(report.params, circuit)
    pk = keygen_pk(report.params, vk, circuit)
    report.vk = vk
    report.record("keygen", PASSED, f"n={vk.n}")

    new_transcript = transcript_factory or (lambda: None)
    try:
        report.proof = create_proof(report.params, pk, circuit, instance,
                                    rng=rng, transcript=new_transcript())
    except ProofError as exc:
        report.record("proof", FAILED, str(exc))
        report.skip_rest()
        return report
    report.record("proof", PASSED)

    accepted = verify_proof(report.params, vk, report.proof, instance,
                            transcript=new_transcript())
    report.record("verify", PASSED if accepted else FAILED)
    return report
