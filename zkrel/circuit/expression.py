"""
게이트 다항식(Expression)
==========================

커스텀 게이트는 (열, 행 오프셋) 쿼리와 셀렉터로 이루어진 다항식이다.
셀렉터가 켜진 모든 행에서 이 다항식이 0이 되어야 릴레이션이 만족된다.

**구성 요소**:
  - Constant:        상수
  - SelectorQuery:   셀렉터 s (행마다 0 또는 1)
  - AdviceQuery:     witness 열의 (행 + rotation) 셀
  - InstanceQuery:   공개 입력 열의 (행 + rotation) 셀
  - Negated / Sum / Product / Scaled: 산술 결합

**예시 (덧셈 게이트)**:
  s · (a + b - c) = 0

    >>> s = meta.query_selector(selector)
    >>> a = meta.query_advice(col_a, Rotation.cur())
    >>> gate = s * (a + b - c)

evaluate()는 각 리프를 콜백으로 치환한 뒤 +, -, * 로 접는다.
콜백 반환값이 FR이면 수치 평가(로컬 검사기), 단항식 사전이면 표준 게이트
계수 추출(PLONK 컴파일러)에 쓰인다.
"""

from zkrel.field import FR


class Rotation:
    """현재 행 기준 상대 오프셋."""

    __slots__ = ("offset",)

    def __init__(self, offset):
        self.offset = offset

    @classmethod
    def cur(cls):
        return cls(0)

    @classmethod
    def prev(cls):
        return cls(-1)

    @classmethod
    def next(cls):
        return cls(1)

    def __eq__(self, other):
        return isinstance(other, Rotation) and self.offset == other.offset

    def __hash__(self):
        return hash(self.offset)

    def __repr__(self):
        return f"Rotation({self.offset})"


class Expression:
    """게이트 다항식의 기반 클래스."""

    def evaluate(self, constant, selector, advice, instance):
        raise NotImplementedError

    def degree(self):
        raise NotImplementedError

    def _wrap(self, other):
        if isinstance(other, Expression):
            return other
        return Constant(other)

    def __add__(self, other):
        return Sum(self, self._wrap(other))

    def __radd__(self, other):
        return Sum(self._wrap(other), self)

    def __sub__(self, other):
        return Sum(self, Negated(self._wrap(other)))

    def __rsub__(self, other):
        return Sum(self._wrap(other), Negated(self))

    def __neg__(self):
        return Negated(self)

    def __mul__(self, other):
        if isinstance(other, Expression):
            return Product(self, other)
        return Scaled(self, other)

    def __rmul__(self, other):
        return Scaled(self, other)


class Constant(Expression):

    def __init__(self, value):
        self.value = value if isinstance(value, FR) else FR(value)

    def evaluate(self, constant, selector, advice, instance):
        return constant(self.value)

    def degree(self):
        return 0

    def __repr__(self):
        return f"Constant({int(self.value)})"


class SelectorQuery(Expression):

    def __init__(self, selector):
        self.selector = selector

    def evaluate(self, constant, selector, advice, instance):
        return selector(self.selector)

    def degree(self):
        return 1

    def __repr__(self):
        return f"Selector({self.selector.index})"


class AdviceQuery(Expression):

    def __init__(self, column, rotation):
        self.column = column
        self.rotation = rotation

    def evaluate(self, constant, selector, advice, instance):
        return advice(self)

    def degree(self):
        return 1

    def __repr__(self):
        return f"Advice({self.column.index}, {self.rotation.offset})"


class InstanceQuery(Expression):

    def __init__(self, column, rotation):
        self.column = column
        self.rotation = rotation

    def evaluate(self, constant, selector, advice, instance):
        return instance(self)

    def degree(self):
        return 1

    def __repr__(self):
        return f"Instance({self.column.index}, {self.rotation.offset})"


class Negated(Expression):

    def __init__(self, inner):
        self.inner = inner

    def evaluate(self, constant, selector, advice, instance):
        return -self.inner.evaluate(constant, selector, advice, instance)

    def degree(self):
        return self.inner.degree()

    def __repr__(self):
        return f"-({self.inner!r})"


class Sum(Expression):

    def __init__(self, left, right):
        self.left = left
        self.right = right

    def evaluate(self, constant, selector, advice, instance):
        return (self.left.evaluate(constant, selector, advice, instance)
                + self.right.evaluate(constant, selector, advice, instance))

    def degree(self):
        return max(self.left.degree(), self.right.degree())

    def __repr__(self):
        return f"({self.left!r} + {self.right!r})"


class Product(Expression):

    def __init__(self, left, right):
        self.left = left
        self.right = right

    def evaluate(self, constant, selector, advice, instance):
        return (self.left.evaluate(constant, selector, advice, instance)
                * self.right.evaluate(constant, selector, advice, instance))

    def degree(self):
        return self.left.degree() + self.right.degree()

    def __repr__(self):
        return f"({self.left!r} * {self.right!r})"


class Scaled(Expression):

    def __init__(self, inner, factor):
        self.inner = inner
        self.factor = factor if isinstance(factor, FR) else FR(factor)

    def evaluate(self, constant, selector, advice, instance):
        return self.inner.evaluate(constant, selector, advice, instance) * constant(self.factor)

    def degree(self):
        return self.inner.degree()

    def __repr__(self):
        return f"({self.inner!r} * {int(self.factor)})"
