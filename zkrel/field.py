"""
유한체(Finite Field)와 bn128 곡선 연산
=======================================

회로 값과 증명 시스템 전체가 공유하는 대수적 기반.

**FR**:
  bn128 스칼라 필드. 회로의 모든 셀 값(스도쿠 숫자, 피보나치 항 등)은
  이 필드의 원소로 임베딩된다.
  - p - 1 = 2^28 × m (m은 홀수) → 최대 2^28 크기의 평가 도메인

**곡선 연산**:
  KZG 커밋먼트에 쓰이는 G1/G2 스칼라 곱, 덧셈, 부호 반전, 페어링.
  py_ecc.optimized_bn128 (야코비안 좌표)을 얇게 감싼다. 점을 비교하거나
  직렬화할 때는 ec_normalize로 아핀 좌표 (x, y)를 얻는다.

사용 예시:
    >>> from zkrel.field import FR, G1, ec_mul
    >>> FR(45) == FR(40) + FR(5)
    True
    >>> P = ec_mul(G1, FR(7))
"""

from py_ecc import optimized_bn128 as bn128
from py_ecc.fields import bn128_FQ as FQ


class FR(FQ):
    """bn128 곡선 위수(curve order)를 법으로 하는 필드 원소."""
    field_modulus = bn128.curve_order


CURVE_ORDER = bn128.curve_order

G1 = bn128.G1
G2 = bn128.G2

# G1 항등원 (무한원점)
Z1 = bn128.Z1

# FR* 생성자. 단위근과 코셋 이동(shift)에 사용한다.
MULTIPLICATIVE_GENERATOR = 5

MAX_TWO_ADICITY = 28


def to_fr(x):
    """정수 또는 FR을 FR로 변환한다."""
    return x if isinstance(x, FR) else FR(x)


def ec_mul(point, scalar):
    """스칼라 곱 scalar · point (G1, G2 공통)."""
    if isinstance(scalar, FR):
        scalar = int(scalar)
    return bn128.multiply(point, scalar % CURVE_ORDER)


def ec_add(p1, p2):
    return bn128.add(p1, p2)


def ec_neg(point):
    return bn128.neg(point)


def ec_pairing(g2_point, g1_point):
    """페어링 e(g1_point, g2_point).

    주의: py_ecc 인자 순서는 (G2, G1)이다.
    """
    return bn128.pairing(g2_point, g1_point)


def get_root_of_unity(n):
    """n차 원시 단위근 ω (ω^n = 1, ω^k ≠ 1 for 0 < k < n).

    ω = g^((p-1)/n), g = 5.

    Raises:
        ValueError: n이 2의 거듭제곱이 아니거나 2^28을 초과할 때
    """
    if n < 1 or (n & (n - 1)) != 0:
        raise ValueError(f"도메인 크기는 2의 거듭제곱이어야 합니다: {n}")
    if n > (1 << MAX_TWO_ADICITY):
        raise ValueError(f"도메인 크기는 2^{MAX_TWO_ADICITY} 이하여야 합니다: {n}")
    if n == 1:
        return FR(1)
    return FR(MULTIPLICATIVE_GENERATOR) ** ((CURVE_ORDER - 1) // n)


def get_roots_of_unity(n):
    """평가 도메인 H = [1, ω, ω², ..., ω^(n-1)]."""
    omega = get_root_of_unity(n)
    roots = [FR(1)]
    for _ in range(n - 1):
        roots.append(roots[-1] * omega)
    return roots


def ec_eq(p1, p2):
    return bn128.eq(p1, p2)


def ec_is_inf(point):
    return bn128.is_inf(point)


def ec_normalize(point):
    """야코비안 점 → 아핀 (x, y). 무한원점이면 None."""
    if bn128.is_inf(point):
        return None
    return bn128.normalize(point)


def ec_from_affine(xy):
    """아핀 좌표에서 G1 점을 복원하고 곡선 위에 있는지 확인한다.

    Args:
        xy: (x, y) FQ 원소 쌍. None이면 무한원점

    Raises:
        ValueError: 점이 곡선 위에 있지 않을 때
    """
    if xy is None:
        return bn128.Z1
    x, y = xy
    point = (x, y, x.one())
    if not bn128.is_on_curve(point, bn128.b):
        raise ValueError("곡선 위의 점이 아닙니다")
    return point
