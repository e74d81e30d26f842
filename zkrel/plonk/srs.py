"""
공개 파라미터 (SRS)
====================

KZG 커밋먼트용 구조화 참조 문자열.

    g1_powers = [G1, τ·G1, τ²·G1, ..., τ^d·G1]
    g2_powers = [G2, τ·G2]

회로와 무관한 범용 설정이다. 최대 차수 d 이하의 다항식이면 어떤 회로에도
재사용할 수 있다. 도메인 크기 n 인 회로는 d ≥ n + 5 를 요구한다
(몫 조각 t_hi 의 차수).

τ 를 아는 사람은 거짓 증명을 만들 수 있다. seed 를 주면 τ 가 seed 에서
결정되므로 테스트와 데모 전용이다.

사용 예시:
    >>> params = Params.setup(max_degree=40, seed=42)
    >>> len(params.g1_powers)
    41
"""

import hashlib
import logging
import secrets

from zkrel.field import CURVE_ORDER, FR, G1, G2, ec_mul

logger = logging.getLogger(__name__)


class Params:
    """KZG 공개 파라미터.

    속성:
        g1_powers: [τⁱ·G1] (i = 0..max_degree)
        g2_powers: [G2, τ·G2]
        max_degree: 커밋 가능한 최대 차수
    """

    def __init__(self, g1_powers, g2_powers, max_degree):
        self.g1_powers = g1_powers
        self.g2_powers = g2_powers
        self.max_degree = max_degree

    @classmethod
    def setup(cls, max_degree, seed=None):
        """파라미터를 생성한다.

        Args:
            max_degree: 지원할 최대 다항식 차수
            seed: 결정론적 τ 를 위한 시드. None 이면 OS 난수

        Returns:
            Params
        """
        if max_degree < 1:
            raise ValueError(f"max_degree는 1 이상이어야 합니다: {max_degree}")
        if seed is not None:
            digest = hashlib.sha256(f"zkrel-srs:{seed}".encode()).digest()
            tau = FR(int.from_bytes(digest, "big") % CURVE_ORDER)
        else:
            tau = FR(secrets.randbelow(CURVE_ORDER - 1) + 1)

        g1_powers = []
        power = FR(1)
        for _ in range(max_degree + 1):
            g1_powers.append(ec_mul(G1, power))
            power = power * tau

        logger.info("SRS generated: max_degree=%d (seeded=%s)", max_degree, seed is not None)
        return cls(g1_powers, [G2, ec_mul(G2, tau)], max_degree)

    def __repr__(self):
        return f"Params(max_degree={self.max_degree})"


def required_degree(n):
    """도메인 크기 n 인 회로가 요구하는 최소 SRS 차수."""
    return n + 5
