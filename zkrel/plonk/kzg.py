"""
KZG 다항식 커밋먼트
====================

  commit:          C = p(τ)·G1 = Σ cᵢ · [τⁱ]₁
  create_witness:  π = q(τ)·G1,  q(x) = (p(x) - p(z)) / (x - z)
  verify_opening:  e(C - y·G1, G2) == e(π, [τ]₂ - z·G2)

Prover 는 Round 5 에서 여러 다항식의 열기를 v 로 묶어 하나의 π 로 만든다.
verify_opening 은 단일 열기 검사용이다 (테스트와 디버깅).

사용 예시:
    >>> C = commit(p, params)
    >>> pi = create_witness(p, FR(7), params)
    >>> verify_opening(C, pi, FR(7), p.evaluate(FR(7)), params)
    True
"""

from zkrel.field import FR, G1, Z1, ec_add, ec_mul, ec_neg, ec_pairing


def commit(poly, params):
    """다항식 커밋먼트.

    Raises:
        ValueError: 차수가 params.max_degree 를 초과할 때
    """
    if poly.degree > params.max_degree:
        raise ValueError(
            f"다항식 차수 {poly.degree}가 SRS 최대 차수 {params.max_degree}를 초과합니다"
        )
    acc = Z1
    for coeff, base in zip(poly.coeffs, params.g1_powers):
        if coeff == 0:
            continue
        acc = ec_add(acc, ec_mul(base, coeff))
    return acc


def create_witness(poly, point, params):
    """p(point) 의 열기 증명 π."""
    if not isinstance(point, FR):
        point = FR(point)
    return commit(poly.divide_by_linear(point), params)


def verify_opening(commitment, proof, point, evaluation, params):
    """단일 KZG 열기 증명을 검사한다."""
    if not isinstance(point, FR):
        point = FR(point)
    if not isinstance(evaluation, FR):
        evaluation = FR(evaluation)

    g2, tau_g2 = params.g2_powers
    tau_minus_z = ec_add(tau_g2, ec_neg(ec_mul(g2, point)))
    c_minus_y = ec_add(commitment, ec_neg(ec_mul(G1, evaluation)))

    return ec_pairing(g2, c_minus_y) == ec_pairing(tau_minus_z, proof)
