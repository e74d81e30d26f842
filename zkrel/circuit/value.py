"""
회로 값(Value)과 필드 연산 능력(FieldOps)
==========================================

회로 합성(synthesis) 단계에서 셀에 들어가는 값을 표현한다.

**FieldOps**:
  릴레이션 칩이 필요로 하는 최소한의 필드 연산 {zero, add, equals, from_int}.
  칩은 구체적인 필드 타입 대신 이 능력(capability) 객체를 받는다.
  기본 구현 FR_OPS는 bn128 스칼라 필드(FR)를 사용한다.

**Value (known / unknown)**:
  키 생성(keygen) 단계에서는 witness 없이 회로 구조만 필요하다.
  이때 셀 값은 "unknown"이며, 산술 연산을 거쳐도 오류 없이 unknown으로 전파된다.
  증명 생성 단계에서는 모든 값이 "known"이다.

  | 왼쪽     | 오른쪽   | 결과     |
  |----------|----------|----------|
  | known    | known    | known    |
  | known    | unknown  | unknown  |
  | unknown  | *        | unknown  |

사용 예시:
    >>> a = Value.known(FR(3))
    >>> b = Value.unknown()
    >>> (a + a).assign()   # FR(6)
    >>> (a + b).is_known()  # False
"""

from zkrel.field import FR


class SynthesisError(ValueError):
    """회로 합성 중 발생하는 치명적 오류 (재할당, 존재하지 않는 셀 참조 등)."""


class FieldOps:
    """칩이 사용하는 필드 연산 능력.

    Args:
        element: 필드 원소 클래스 (int를 받아 원소를 만드는 생성자)
        name: 표시용 이름
    """

    def __init__(self, element, name):
        self.element = element
        self.name = name

    def zero(self):
        return self.element(0)

    def from_int(self, x):
        if isinstance(x, self.element):
            return x
        return self.element(x)

    def add(self, a, b):
        return a + b

    def equals(self, a, b):
        return a == b

    def __repr__(self):
        return f"FieldOps({self.name})"


# bn128 스칼라 필드
FR_OPS = FieldOps(FR, "bn128.Fr")


class Value:
    """known 또는 unknown 상태의 셀 값."""

    __slots__ = ("_inner",)

    _UNKNOWN = object()

    def __init__(self, inner):
        self._inner = inner

    @classmethod
    def known(cls, inner):
        return cls(inner)

    @classmethod
    def unknown(cls):
        return cls(cls._UNKNOWN)

    def is_known(self):
        return self._inner is not Value._UNKNOWN

    def map(self, fn):
        """known이면 fn을 적용하고, unknown이면 그대로 unknown."""
        if not self.is_known():
            return self
        return Value(fn(self._inner))

    def zip_with(self, other, fn):
        """두 값이 모두 known일 때만 fn(a, b)를 계산한다."""
        if not (self.is_known() and other.is_known()):
            return Value.unknown()
        return Value(fn(self._inner, other._inner))

    def assign(self):
        """내부 원소를 꺼낸다.

        Raises:
            SynthesisError: 값이 unknown일 때
        """
        if not self.is_known():
            raise SynthesisError("unknown 값은 할당할 수 없습니다 (witness 없는 합성)")
        return self._inner

    def __add__(self, other):
        return self.zip_with(other, lambda a, b: a + b)

    def __sub__(self, other):
        return self.zip_with(other, lambda a, b: a - b)

    def __mul__(self, other):
        return self.zip_with(other, lambda a, b: a * b)

    def __neg__(self):
        return self.map(lambda a: -a)

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return self._inner is other._inner or self._inner == other._inner

    def __repr__(self):
        if not self.is_known():
            return "Value(unknown)"
        return f"Value({int(self._inner)})"
