"""
Fiat-Shamir 트랜스크립트
=========================

Prover 와 Verifier 가 같은 순서로 같은 메시지를 흡수하면 같은 챌린지를 얻는다.

**흡수 순서**:
  1. 검증 키 (셀렉터·순열 커밋먼트) 와 공개 입력
  2. [a]₁ [b]₁ [c]₁                      → β, γ
  3. [z]₁                                → α
  4. [t_lo]₁ [t_mid]₁ [t_hi]₁            → ζ
  5. ā b̄ c̄ s̄_σ1 s̄_σ2 z̄_ω r̄              → v
  6. [W_ζ]₁ [W_ζω]₁                      → u

해시 함수는 주입할 수 있다 (기본 SHA-256, blake2b() 로 BLAKE2b-256).

사용 예시:
    >>> t = Transcript()
    >>> t.append_point(b"a_comm", commitment)
    >>> beta = t.challenge_scalar(b"beta")
"""

import functools
import hashlib

from zkrel.field import CURVE_ORDER, FR, ec_normalize


class Transcript:
    """해시 기반 Fiat-Shamir 트랜스크립트.

    Args:
        label: 도메인 분리 레이블
        hash_fn: bytes 를 받아 .digest() 를 가진 객체를 돌려주는 생성자
        name: 직렬화용 해시 이름
    """

    def __init__(self, label=b"zkrel-plonk", hash_fn=hashlib.sha256, name="sha256"):
        self.label = label
        self.hash_fn = hash_fn
        self.name = name
        self.state = bytearray(label)

    @classmethod
    def sha256(cls, label=b"zkrel-plonk"):
        return cls(label)

    @classmethod
    def blake2b(cls, label=b"zkrel-plonk"):
        return cls(label, functools.partial(hashlib.blake2b, digest_size=32), "blake2b")

    @classmethod
    def by_name(cls, name, label=b"zkrel-plonk"):
        factories = {"sha256": cls.sha256, "blake2b": cls.blake2b}
        if name not in factories:
            raise ValueError(f"알 수 없는 트랜스크립트 해시: {name}")
        return factories[name](label)

    def fresh(self):
        """같은 해시와 레이블의 빈 트랜스크립트."""
        return Transcript(self.label, self.hash_fn, self.name)

    def append_scalar(self, label, scalar):
        self.state.extend(label)
        self.state.extend((int(scalar) % CURVE_ORDER).to_bytes(32, "big"))

    def append_point(self, label, point):
        """G1 점을 아핀 좌표 64바이트로 흡수한다. 무한원점은 0 바이트."""
        self.state.extend(label)
        affine = ec_normalize(point)
        if affine is None:
            self.state.extend(b"\x00" * 64)
            return
        x, y = affine
        self.state.extend(int(x).to_bytes(32, "big"))
        self.state.extend(int(y).to_bytes(32, "big"))

    def challenge_scalar(self, label):
        """현재 상태의 해시로 챌린지를 만들고, 해시를 상태에 다시 흡수한다."""
        self.state.extend(label)
        digest = self.hash_fn(bytes(self.state)).digest()
        self.state.extend(digest)
        return FR(int.from_bytes(digest, "big") % CURVE_ORDER)

    def __repr__(self):
        return f"Transcript({self.name}, {len(self.state)} bytes)"
