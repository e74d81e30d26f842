"""
다항식과 NTT
=============

PLONK 백엔드가 쓰는 계수 표현 다항식과 단위근 위의 FFT.

**Polynomial**:
  coeffs = [c₀, c₁, ..., c_d] → c₀ + c₁·x + ... + c_d·x^d
  최고차 0 계수는 생성 시 잘라낸다. 영 다항식은 [0].

**FFT / IFFT**:
  길이 n (2의 거듭제곱) 의 계수 ↔ {ω⁰, ..., ω^(n-1)} 위의 평가값.
  재귀 radix-2 Cooley-Tukey.

**나눗셈**:
  - divide_by_linear: (x - z) 로 나누기 (조립제법, KZG 열기 증명용)

사용 예시:
    >>> p = Polynomial([1, 2, 3])   # 1 + 2x + 3x²
    >>> p.evaluate(FR(2))
    17
    >>> q = p.divide_by_linear(FR(2))  # (p(x) - 17) / (x - 2)
"""

from zkrel.field import FR


class Polynomial:
    """FR 위의 계수 표현 다항식.

    백엔드에서의 쓰임:
      - 배선 a(x), b(x), c(x) 와 누산기 z(x)
      - 셀렉터 q_L ~ q_C, 순열 S_σ1 ~ S_σ3
      - 몫 t(x) 와 열기 증명 W(x)
    """

    def __init__(self, coeffs=None):
        if coeffs is None:
            coeffs = [FR(0)]
        self.coeffs = [c if isinstance(c, FR) else FR(c) for c in coeffs] or [FR(0)]
        while len(self.coeffs) > 1 and self.coeffs[-1] == 0:
            self.coeffs.pop()

    @classmethod
    def zero(cls):
        return cls([FR(0)])

    @classmethod
    def constant(cls, value):
        return cls([value])

    @classmethod
    def vanishing(cls, n):
        """Z_H(x) = x^n - 1."""
        coeffs = [FR(0)] * (n + 1)
        coeffs[0] = FR(-1)
        coeffs[n] = FR(1)
        return cls(coeffs)

    @classmethod
    def from_evaluations(cls, evals, omega):
        """도메인 {ωⁱ} 위의 평가값을 보간한다 (IFFT)."""
        return cls(ifft(evals, omega))

    @property
    def degree(self):
        """차수. 영 다항식은 0."""
        return len(self.coeffs) - 1

    def is_zero(self):
        return len(self.coeffs) == 1 and self.coeffs[0] == 0

    def evaluate(self, point):
        """Horner 법으로 p(point) 를 계산한다."""
        if not isinstance(point, FR):
            point = FR(point)
        acc = FR(0)
        for c in reversed(self.coeffs):
            acc = acc * point + c
        return acc

    def _lift(self, other):
        if isinstance(other, Polynomial):
            return other
        return Polynomial([other])

    def __add__(self, other):
        other = self._lift(other)
        longer, shorter = (self.coeffs, other.coeffs)
        if len(shorter) > len(longer):
            longer, shorter = shorter, longer
        out = list(longer)
        for i, c in enumerate(shorter):
            out[i] = out[i] + c
        return Polynomial(out)

    __radd__ = __add__

    def __neg__(self):
        return Polynomial([-c for c in self.coeffs])

    def __sub__(self, other):
        return self + (-self._lift(other))

    def __rsub__(self, other):
        return self._lift(other) - self

    def __mul__(self, other):
        if not isinstance(other, Polynomial):
            factor = other if isinstance(other, FR) else FR(other)
            return Polynomial([c * factor for c in self.coeffs])
        # 나이브 합성곱
        out = [FR(0)] * (len(self.coeffs) + len(other.coeffs) - 1)
        for i, a in enumerate(self.coeffs):
            if a == 0:
                continue
            for j, b in enumerate(other.coeffs):
                out[i + j] = out[i + j] + a * b
        return Polynomial(out)

    __rmul__ = __mul__

    def __eq__(self, other):
        if not isinstance(other, Polynomial):
            other = self._lift(other)
        return self.coeffs == other.coeffs

    def __len__(self):
        return len(self.coeffs)

    def __repr__(self):
        head = ", ".join(str(int(c)) for c in self.coeffs[:4])
        more = ", ..." if len(self.coeffs) > 4 else ""
        return f"Polynomial(deg={self.degree}, [{head}{more}])"

    def scale_input(self, factor):
        """p(factor · x) 의 계수: cᵢ → factorⁱ · cᵢ."""
        out = []
        power = FR(1)
        for c in self.coeffs:
            out.append(c * power)
            power = power * factor
        return Polynomial(out)

    def divide_by_linear(self, point):
        """(p(x) - p(point)) / (x - point) 를 조립제법으로 계산한다."""
        if len(self.coeffs) == 1:
            return Polynomial.zero()
        quotient = [FR(0)] * (len(self.coeffs) - 1)
        carry = FR(0)
        for i in range(len(self.coeffs) - 1, 0, -1):
            carry = carry * point + self.coeffs[i]
            quotient[i - 1] = carry
        return Polynomial(quotient)

    def split(self, size, parts):
        """계수를 size 개씩 잘라 parts 개의 조각으로 나눈다. 마지막 조각은 나머지를 모두 가진다.

        t(x) = t_lo(x) + x^n · t_mid(x) + x^{2n} · t_hi(x)
        """
        chunks = []
        for k in range(parts):
            start = k * size
            end = None if k == parts - 1 else start + size
            chunk = self.coeffs[start:end]
            chunks.append(Polynomial(chunk if chunk else [FR(0)]))
        return chunks


# ─────────────────────────────────────────────────────────────────────
# FFT / IFFT
# ─────────────────────────────────────────────────────────────────────

def fft(coeffs, omega):
    """계수 → [p(ω⁰), p(ω¹), ..., p(ω^(n-1))].

    Args:
        coeffs: 길이 n (2의 거듭제곱) 의 계수 리스트
        omega: n차 원시 단위근
    """
    n = len(coeffs)
    if n == 1:
        c = coeffs[0]
        return [c if isinstance(c, FR) else FR(c)]

    evens = fft(coeffs[0::2], omega * omega)
    odds = fft(coeffs[1::2], omega * omega)

    half = n // 2
    out = [None] * n
    w = FR(1)
    for k in range(half):
        t = w * odds[k]
        out[k] = evens[k] + t
        out[k + half] = evens[k] - t
        w = w * omega
    return out


def ifft(evals, omega):
    """평가값 → 계수. ω⁻¹ 로 FFT 후 n 으로 나눈다."""
    n = len(evals)
    raw = fft(evals, FR(1) / omega)
    n_inv = FR(1) / FR(n)
    return [c * n_inv for c in raw]
