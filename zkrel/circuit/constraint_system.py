"""
열(Column)과 게이트(Gate) 레지스트리
=====================================

회로 구성(configure) 단계에서 한 번만 실행되는 스키마 선언.
witness가 알려지기 전에 열, 셀렉터, 게이트가 고정된다.

**열 종류**:
  | 종류      | 값의 출처             | 복사 제약                    |
  |-----------|-----------------------|------------------------------|
  | advice    | Prover (비공개)       | enable_equality 후 가능      |
  | instance  | Verifier (공개 입력)  | enable_equality 후 가능      |
  | selector  | 회로 구조 (0/1)       | 불가                         |

**예시 (두 릴레이션 공통 구성)**:
  advice 3개, selector 1개, instance 1개, 게이트 1개:

    s · (a + b - c) = 0

    >>> meta = ConstraintSystem()
    >>> a, b, c = meta.advice_column(), meta.advice_column(), meta.advice_column()
    >>> s = meta.selector()
    >>> meta.create_gate("add", lambda vc: [
    ...     vc.query_selector(s) * (vc.query_advice(a, Rotation.cur())
    ...                             + vc.query_advice(b, Rotation.cur())
    ...                             - vc.query_advice(c, Rotation.cur()))])
"""

from zkrel.circuit.expression import (
    AdviceQuery, InstanceQuery, Rotation, SelectorQuery,
)

ADVICE = "advice"
INSTANCE = "instance"


class Column:
    """회로의 세로 레인 (advice 또는 instance)."""

    __slots__ = ("index", "kind")

    def __init__(self, index, kind):
        self.index = index
        self.kind = kind

    def __eq__(self, other):
        return (isinstance(other, Column)
                and self.index == other.index and self.kind == other.kind)

    def __hash__(self):
        return hash((self.index, self.kind))

    def __repr__(self):
        return f"Column({self.kind}, {self.index})"


class Selector:
    """게이트를 행 단위로 켜고 끄는 불리언 열."""

    __slots__ = ("index",)

    def __init__(self, index):
        self.index = index

    def __eq__(self, other):
        return isinstance(other, Selector) and self.index == other.index

    def __hash__(self):
        return hash(("selector", self.index))

    def __repr__(self):
        return f"Selector({self.index})"


class Gate:
    """이름이 붙은 다항식 제약 묶음."""

    def __init__(self, name, polys):
        self.name = name
        self.polys = polys

    def queried_selectors(self):
        found = []

        def visit(sel):
            if sel not in found:
                found.append(sel)
            return 0

        for poly in self.polys:
            poly.evaluate(lambda c: 0, visit, lambda q: 0, lambda q: 0)
        return found

    def __repr__(self):
        return f"Gate({self.name!r}, {len(self.polys)} polys)"


class VirtualCells:
    """create_gate 콜백에 전달되는 쿼리 생성기."""

    def __init__(self, meta):
        self.meta = meta

    def query_selector(self, selector):
        return SelectorQuery(selector)

    def query_advice(self, column, rotation=None):
        if column.kind != ADVICE:
            raise ValueError(f"advice 열이 아닙니다: {column}")
        return AdviceQuery(column, rotation or Rotation.cur())

    def query_instance(self, column, rotation=None):
        if column.kind != INSTANCE:
            raise ValueError(f"instance 열이 아닙니다: {column}")
        return InstanceQuery(column, rotation or Rotation.cur())


class ConstraintSystem:
    """열, 셀렉터, 게이트, equality 설정을 담는 레지스트리.

    속성:
        advice_columns: advice 열 리스트 (선언 순서)
        instance_columns: instance 열 리스트
        selectors: 셀렉터 리스트
        gates: Gate 리스트
        equality: 복사 제약이 허용된 열 집합
    """

    def __init__(self):
        self.advice_columns = []
        self.instance_columns = []
        self.selectors = []
        self.gates = []
        self.equality = []

    def advice_column(self):
        column = Column(len(self.advice_columns), ADVICE)
        self.advice_columns.append(column)
        return column

    def instance_column(self):
        column = Column(len(self.instance_columns), INSTANCE)
        self.instance_columns.append(column)
        return column

    def selector(self):
        selector = Selector(len(self.selectors))
        self.selectors.append(selector)
        return selector

    def enable_equality(self, column):
        """열에 복사 제약을 허용한다. 두 번째 호출은 아무 일도 하지 않는다."""
        if column not in self.equality:
            self.equality.append(column)

    def has_equality(self, column):
        return column in self.equality

    def create_gate(self, name, constraints):
        """게이트를 등록한다. 셀렉터를 쿼리하지 않는 게이트는 모든 행에 적용된다.

        Args:
            name: 게이트 이름 (레이블일 뿐이며 중복을 허용한다)
            constraints: VirtualCells를 받아 Expression 리스트를 반환하는 함수

        Returns:
            Gate: 등록된 게이트
        """
        polys = list(constraints(VirtualCells(self)))
        if not polys:
            raise ValueError(f"게이트 '{name}'에 제약이 없습니다")
        gate = Gate(name, polys)
        self.gates.append(gate)
        return gate

    def degree(self):
        """가장 높은 게이트 다항식 차수."""
        return max((p.degree() for g in self.gates for p in g.polys), default=0)
