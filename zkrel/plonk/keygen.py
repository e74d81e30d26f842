"""
키 생성 (전처리)
=================

witness 없이 회로 구조만으로 셀렉터·순열 다항식을 만들고 커밋한다.

    keygen_vk:  circuit.without_witnesses() 를 합성 → 컴파일 → 커밋
    keygen_pk:  같은 구조에서 다항식 원본을 함께 보관

**검증 키 (Verifier)**:
  n, ω, 공개 입력 수, [q_L]₁ ~ [q_C]₁, [S_σ1]₁ ~ [S_σ3]₁

**증명 키 (Prover)**:
  검증 키 + 셀렉터/순열 다항식 + σ 평가값 + 컴파일된 구조

사용 예시:
    >>> params = Params.setup(64, seed=1)
    >>> vk = keygen_vk(params, FibonacciCircuit())
    >>> pk = keygen_pk(params, vk, FibonacciCircuit())
"""

import logging

from zkrel.circuit.layouter import synthesize
from zkrel.field import ec_eq, get_root_of_unity, get_roots_of_unity
from zkrel.plonk.compiler import SELECTOR_NAMES, compile_circuit
from zkrel.plonk.errors import BackendError
from zkrel.plonk.kzg import commit
from zkrel.plonk.permutation import sigma_evaluations
from zkrel.plonk.polynomial import Polynomial
from zkrel.plonk.srs import required_degree

logger = logging.getLogger(__name__)

SIGMA_NAMES = ("s_sigma1", "s_sigma2", "s_sigma3")


class VerifyingKey:
    """검증 키.

    속성:
        n, omega: 평가 도메인
        num_public: 공개 입력 수
        commitments: {"q_l": G1, ..., "s_sigma3": G1}
    """

    def __init__(self, n, num_public, commitments):
        self.n = n
        self.num_public = num_public
        self.omega = get_root_of_unity(n)
        self.commitments = commitments

    def absorb_into(self, transcript):
        for name in SELECTOR_NAMES + SIGMA_NAMES:
            transcript.append_point(f"vk_{name}".encode(), self.commitments[name])

    def __repr__(self):
        return f"VerifyingKey(n={self.n}, public={self.num_public})"


class ProvingKey:
    """증명 키.

    속성:
        vk: VerifyingKey
        compiled: CompiledCircuit
        domain: [ω⁰, ..., ω^(n-1)]
        polys: {"q_l": Polynomial, ..., "s_sigma3": Polynomial}
        sigma_evals: (S_σ1, S_σ2, S_σ3) 평가값
    """

    def __init__(self, vk, compiled, domain, polys, sigma_evals):
        self.vk = vk
        self.compiled = compiled
        self.domain = domain
        self.polys = polys
        self.sigma_evals = sigma_evals

    @property
    def n(self):
        return self.vk.n

    def __repr__(self):
        return f"ProvingKey(n={self.n}, public={self.vk.num_public})"


def compile_structure(circuit):
    """witness 없는 합성으로 회로 구조를 컴파일한다."""
    cs, _, assignment = synthesize(circuit.without_witnesses())
    return compile_circuit(cs, assignment)


def _preprocess(params, circuit):
    compiled = compile_structure(circuit)
    n = compiled.n
    if params.max_degree < required_degree(n):
        raise BackendError(
            f"SRS 차수 {params.max_degree}가 부족합니다 (도메인 {n}, 필요 {required_degree(n)})")

    omega = get_root_of_unity(n)
    domain = get_roots_of_unity(n)
    sigma_evals = sigma_evaluations(compiled.sigma, n, domain)

    polys = {name: Polynomial.from_evaluations(compiled.selectors[name], omega)
             for name in SELECTOR_NAMES}
    for name, evals in zip(SIGMA_NAMES, sigma_evals):
        polys[name] = Polynomial.from_evaluations(evals, omega)
    return compiled, domain, polys, sigma_evals


def keygen_vk(params, circuit):
    """검증 키를 만든다.

    Raises:
        BackendError: 회로를 표현할 수 없거나 SRS 가 작을 때
    """
    compiled, _, polys, _ = _preprocess(params, circuit)
    commitments = {name: commit(poly, params) for name, poly in polys.items()}
    logger.info("keygen_vk: %r -> n=%d, %d public input(s)",
                circuit, compiled.n, compiled.num_public)
    return VerifyingKey(compiled.n, compiled.num_public, commitments)


def keygen_pk(params, vk, circuit):
    """증명 키를 만든다.

    셀렉터와 순열 다항식을 다시 커밋해 vk 의 커밋과 비교한다.

    Raises:
        BackendError: vk 와 회로 구조 (도메인, 공개 입력 수, 셀렉터, σ) 가 다를 때
    """
    compiled, domain, polys, sigma_evals = _preprocess(params, circuit)
    if compiled.n != vk.n or compiled.num_public != vk.num_public:
        raise BackendError("검증 키와 회로 구조가 일치하지 않습니다")
    mismatched = [name for name, poly in polys.items()
                  if not ec_eq(commit(poly, params), vk.commitments[name])]
    if mismatched:
        raise BackendError(f"검증 키와 회로 구조가 일치하지 않습니다: {', '.join(mismatched)}")
    logger.info("keygen_pk: %r", circuit)
    return ProvingKey(vk, compiled, domain, polys, sigma_evals)
