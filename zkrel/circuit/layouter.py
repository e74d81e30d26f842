"""
영역(Region) 할당기와 witness 기록
====================================

릴레이션 칩은 Layouter에 이름 붙은 영역을 요청하고, 영역 안에서 셀에 값을
쓰고 셀렉터를 켠다. 영역은 서로 겹치지 않는 행 구간을 받는다.

**행 배치 (단일 패스 floor planner)**:
  영역은 다음 빈 행에서 시작하고, 높이는 사용한 최대 오프셋 + 1 이다.

    | 행 | 영역          | a    | b    | c    | s |
    |----|---------------|------|------|------|---|
    | 0  | first row     | F(0) | F(1) | F(2) | 1 |
    | 1  | next row      | F(1) | F(2) | F(3) | 1 |
    | .. | ...           |      |      |      |   |

**셀 연산**:
  - assign_advice:                값을 새 셀에 기록
  - copy_advice:                  기존 셀 값을 새 셀로 복사 + 복사 제약 등록
  - assign_advice_from_instance:  공개 입력 값을 새 셀에 기록 + instance 바인딩 등록
  - constrain_instance:           기존 셀을 공개 입력 항목에 바인딩

**오류**:
  이미 값이 있는 셀에 다시 쓰면 SynthesisError (합성 중단).
  witness 없는 합성에서는 값이 unknown으로 흘러가며 오류가 나지 않는다.
"""

import logging

from zkrel.circuit.constraint_system import ADVICE, INSTANCE, ConstraintSystem
from zkrel.circuit.value import SynthesisError, Value
from zkrel.field import to_fr

logger = logging.getLogger(__name__)


class InstanceLengthError(ValueError):
    """공개 입력 벡터 길이가 릴레이션이 요구하는 길이와 다를 때."""

    def __init__(self, expected, actual):
        super().__init__(f"공개 입력 길이가 {expected}이어야 하지만 {actual}입니다")
        self.expected = expected
        self.actual = actual


class Cell:
    """(열, 절대 행) 좌표. 값과 무관한 셀의 식별자."""

    __slots__ = ("column", "row", "region")

    def __init__(self, column, row, region):
        self.column = column
        self.row = row
        self.region = region

    def key(self):
        return (self.column.kind, self.column.index, self.row)

    def __eq__(self, other):
        return isinstance(other, Cell) and self.key() == other.key()

    def __hash__(self):
        return hash(self.key())

    def __repr__(self):
        return f"Cell({self.column.kind}[{self.column.index}], row={self.row})"


class AssignedCell:
    """값이 기록된 셀."""

    def __init__(self, cell, value):
        self.cell = cell
        self.value = value

    def copy_advice(self, name, region, column, offset):
        """이 셀의 값을 region의 (column, offset)에 복사하고 복사 제약을 건다."""
        copied = region.assign_advice(name, column, offset, self.value)
        region.constrain_equal(self.cell, copied.cell)
        return copied

    def __repr__(self):
        return f"AssignedCell({self.cell!r}, {self.value!r})"


class RegionInfo:
    """영역 메타데이터 (검사기 보고용)."""

    def __init__(self, index, name, start):
        self.index = index
        self.name = name
        self.start = start
        self.height = 0

    def rows(self):
        return range(self.start, self.start + self.height)

    def __repr__(self):
        return f"Region({self.index}, {self.name!r}, rows {self.start}..{self.start + self.height})"


class Assignment:
    """한 번의 합성이 소유하는 행/셀 테이블.

    속성:
        cs: ConstraintSystem
        instance: 공개 입력 벡터 (witness 없는 합성이면 None)
        num_instance: 릴레이션이 요구하는 공개 입력 길이
        advice: {(열 인덱스, 행): Value}
        enabled: {셀렉터 인덱스: 켜진 행 집합}
        copies: [(Cell, Cell)] 복사 제약
        bindings: [(Cell, instance 열, 인덱스)] instance 바인딩
        regions: [RegionInfo]
        names: {Cell: 셀 이름}
    """

    def __init__(self, cs, num_instance, instance=None):
        if instance is not None and len(instance) != num_instance:
            raise InstanceLengthError(num_instance, len(instance))
        self.cs = cs
        self.num_instance = num_instance
        self.instance = None if instance is None else [to_fr(x) for x in instance]
        self.advice = {}
        self.enabled = {s.index: set() for s in cs.selectors}
        self.copies = []
        self.bindings = []
        self.regions = []
        self.names = {}
        self.next_row = 0

    @property
    def num_rows(self):
        return self.next_row

    def instance_value(self, column, index):
        if column.kind != INSTANCE:
            raise SynthesisError(f"instance 열이 아닙니다: {column}")
        if not 0 <= index < self.num_instance:
            raise SynthesisError(
                f"공개 입력 인덱스 {index}가 범위 [0, {self.num_instance})를 벗어났습니다"
            )
        if self.instance is None:
            return Value.unknown()
        return Value.known(self.instance[index])

    def write_advice(self, name, cell, value):
        key = (cell.column.index, cell.row)
        if key in self.advice:
            raise SynthesisError(
                f"셀 재할당: {cell!r} ('{self.names[cell]}') 에 '{name}' 을(를) 다시 쓰려 했습니다"
            )
        self.advice[key] = value
        self.names[cell] = name

    def query_advice(self, column, row):
        """기록된 값 또는 None (미할당)."""
        return self.advice.get((column.index, row))

    def is_assigned(self, cell):
        return (cell.column.index, cell.row) in self.advice

    def enable(self, selector, row):
        self.enabled[selector.index].add(row)

    def is_enabled(self, selector, row):
        return row in self.enabled[selector.index]

    def _check_equality(self, cell):
        if not self.cs.has_equality(cell.column):
            raise SynthesisError(f"{cell.column}에 equality가 활성화되지 않았습니다")
        if cell.column.kind == ADVICE and not self.is_assigned(cell):
            raise SynthesisError(f"존재하지 않는 셀에 대한 제약입니다: {cell!r}")

    def copy(self, left, right):
        self._check_equality(left)
        self._check_equality(right)
        self.copies.append((left, right))

    def bind_instance(self, cell, column, index):
        self._check_equality(cell)
        if not self.cs.has_equality(column):
            raise SynthesisError(f"{column}에 equality가 활성화되지 않았습니다")
        self.instance_value(column, index)
        self.bindings.append((cell, column, index))

    def region_of(self, row):
        for info in self.regions:
            if row in info.rows():
                return info
        return None


class Region:
    """영역 안의 상대 오프셋으로 셀을 다루는 핸들."""

    def __init__(self, assignment, info):
        self._assignment = assignment
        self.info = info

    def _row(self, offset):
        if offset < 0:
            raise SynthesisError(f"음수 오프셋은 허용되지 않습니다: {offset}")
        self.info.height = max(self.info.height, offset + 1)
        return self.info.start + offset

    def enable_selector(self, selector, offset):
        self._assignment.enable(selector, self._row(offset))

    def assign_advice(self, name, column, offset, value):
        """(column, offset)에 값을 기록한다.

        Args:
            name: 셀 이름 (오류 메시지용)
            column: advice 열
            offset: 영역 내 행 오프셋
            value: Value (known 또는 unknown)

        Returns:
            AssignedCell

        Raises:
            SynthesisError: 셀이 이미 할당된 경우
        """
        if column.kind != ADVICE:
            raise SynthesisError(f"advice 열이 아닙니다: {column}")
        if not isinstance(value, Value):
            raise TypeError(f"Value가 필요합니다: {value!r}")
        cell = Cell(column, self._row(offset), self.info.index)
        self._assignment.write_advice(name, cell, value)
        return AssignedCell(cell, value)

    def assign_advice_from_instance(self, name, instance_column, index, column, offset):
        """공개 입력 index번 값을 (column, offset)에 기록하고 바인딩한다."""
        value = self._assignment.instance_value(instance_column, index)
        assigned = self.assign_advice(name, column, offset, value)
        self._assignment.bind_instance(assigned.cell, instance_column, index)
        return assigned

    def constrain_equal(self, left, right):
        self._assignment.copy(left, right)


class Layouter:
    """영역 할당기. 각 assign_region 호출은 겹치지 않는 새 행들을 받는다."""

    def __init__(self, assignment, prefix=""):
        self.assignment = assignment
        self.prefix = prefix

    def namespace(self, name):
        prefix = f"{self.prefix}{name}/" if name else self.prefix
        return Layouter(self.assignment, prefix)

    def assign_region(self, name, assign):
        """영역을 열고 assign(region)의 반환값을 돌려준다."""
        asg = self.assignment
        info = RegionInfo(len(asg.regions), self.prefix + name, asg.next_row)
        asg.regions.append(info)
        result = assign(Region(asg, info))
        asg.next_row += info.height
        logger.debug("region %d '%s': rows %d..%d",
                     info.index, info.name, info.start, info.start + info.height)
        return result

    def constrain_instance(self, cell, instance_column, index):
        """기존 셀을 공개 입력 index번 항목에 바인딩한다."""
        self.assignment.bind_instance(cell, instance_column, index)


class Circuit:
    """릴레이션 회로의 기반 클래스.

    서브클래스는 configure(meta)로 열과 게이트를 선언하고,
    synthesize(config, layouter)로 행을 배치한다.

    속성:
        num_instance: 공개 입력 벡터 길이
    """

    num_instance = 0

    def configure(self, meta):
        raise NotImplementedError

    def synthesize(self, config, layouter):
        raise NotImplementedError

    def without_witnesses(self):
        """같은 구조를 갖되 witness가 없는 회로 (키 생성용)."""
        raise NotImplementedError

    def check_instance(self, instance):
        if len(instance) != self.num_instance:
            raise InstanceLengthError(self.num_instance, len(instance))


def synthesize(circuit, instance=None):
    """회로를 구성하고 합성한다.

    Args:
        circuit: Circuit 인스턴스
        instance: 공개 입력 벡터. None이면 witness 없는 합성 (모든 공개 값 unknown)

    Returns:
        tuple: (ConstraintSystem, config, Assignment)

    Raises:
        InstanceLengthError: 공개 입력 길이가 맞지 않을 때
        SynthesisError: 재할당 등 합성 오류
    """
    if instance is not None:
        circuit.check_instance(instance)
    meta = ConstraintSystem()
    config = circuit.configure(meta)
    assignment = Assignment(meta, circuit.num_instance, instance)
    circuit.synthesize(config, Layouter(assignment))
    logger.debug("synthesized %s: %d rows, %d copies, %d bindings",
                 type(circuit).__name__, assignment.num_rows,
                 len(assignment.copies), len(assignment.bindings))
    return meta, config, assignment
