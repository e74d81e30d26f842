"""
로컬 만족성 검사기 (MockProver)
================================

암호학 없이 제약 시스템과 witness를 재생하여 릴레이션이 만족되는지 확인한다.
증명 생성(비싼 연산)을 호출하기 전에 빠르게 실패하기 위한 사전 검사이다.

**검사 항목**:
  1. 게이트:     셀렉터가 켜진 모든 행에서 게이트 다항식 == 0
                 셀렉터를 쿼리하지 않는 게이트는 모든 행에 적용되고, 빈 칸은 0 으로 본다
  2. 복사 제약:  연결된 두 셀의 값이 같음
  3. instance:   바인딩된 셀의 값 == 공개 입력 벡터의 해당 항목

첫 위반에서 멈추지 않고 *모든* 위반을 모아서 보고한다.
verify()는 상태를 바꾸지 않으므로 몇 번을 호출해도 같은 결과를 돌려준다.

사용 예시:
    >>> prover = MockProver.run(FibonacciCircuit(), [1, 1, 55])
    >>> prover.verify()
    []
    >>> MockProver.run(FibonacciCircuit(), [1, 7, 55]).verify()
    [InstanceMismatch(Cell(advice[2], row=7), index=2, ...)]
"""

import logging

from zkrel.circuit.layouter import synthesize
from zkrel.field import FR

logger = logging.getLogger(__name__)


class VerifyFailure:
    """검사 실패 항목의 기반 클래스."""

    def _key(self):
        raise NotImplementedError

    def __eq__(self, other):
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self):
        return hash((type(self).__name__, self._key()))


class ConstraintNotSatisfied(VerifyFailure):
    """게이트 다항식이 셀렉터가 켜진 행에서 0이 아님."""

    def __init__(self, gate, poly_index, region, row):
        self.gate = gate
        self.poly_index = poly_index
        self.region = region
        self.row = row

    def _key(self):
        return (self.gate, self.poly_index, self.row)

    def __repr__(self):
        return (f"ConstraintNotSatisfied(gate={self.gate!r}, poly={self.poly_index}, "
                f"region={self.region!r}, row={self.row})")


class CellNotAssigned(VerifyFailure):
    """켜진 게이트가 값이 없는 셀을 참조함."""

    def __init__(self, gate, region, column, row):
        self.gate = gate
        self.region = region
        self.column = column
        self.row = row

    def _key(self):
        return (self.gate, self.column.index, self.row)

    def __repr__(self):
        return (f"CellNotAssigned(gate={self.gate!r}, region={self.region!r}, "
                f"column={self.column!r}, row={self.row})")


class CopyMismatch(VerifyFailure):
    """복사 제약으로 묶인 두 셀의 값이 다름."""

    def __init__(self, left, right, left_value, right_value):
        self.left = left
        self.right = right
        self.left_value = left_value
        self.right_value = right_value

    def _key(self):
        return (self.left.key(), self.right.key())

    def __repr__(self):
        return (f"CopyMismatch({self.left!r}={int(self.left_value)}, "
                f"{self.right!r}={int(self.right_value)})")


class InstanceMismatch(VerifyFailure):
    """instance 바인딩된 셀의 값이 공개 입력과 다름."""

    def __init__(self, cell, index, cell_value, expected):
        self.cell = cell
        self.index = index
        self.cell_value = cell_value
        self.expected = expected

    @property
    def row(self):
        return self.cell.row

    def _key(self):
        return (self.cell.key(), self.index)

    def __repr__(self):
        return (f"InstanceMismatch({self.cell!r}, index={self.index}, "
                f"cell={int(self.cell_value)}, expected={int(self.expected)})")


class UnsatisfiedError(ValueError):
    """assert_satisfied() 실패. failures 속성에 모든 위반이 담긴다."""

    def __init__(self, failures):
        lines = "\n".join(f"  - {f!r}" for f in failures)
        super().__init__(f"릴레이션이 만족되지 않습니다 ({len(failures)}건):\n{lines}")
        self.failures = failures


class MockProver:
    """제약 시스템 + witness의 로컬 재생기.

    속성:
        cs: ConstraintSystem
        assignment: Assignment (witness가 채워진 상태)
    """

    def __init__(self, cs, assignment):
        self.cs = cs
        self.assignment = assignment

    @classmethod
    def run(cls, circuit, instance):
        """회로를 witness와 함께 합성한다.

        Raises:
            InstanceLengthError: 공개 입력 길이가 다를 때
            SynthesisError: 합성 오류
        """
        cs, _, assignment = synthesize(circuit, instance)
        return cls(cs, assignment)

    def _region_name(self, row):
        info = self.assignment.region_of(row)
        return info.name if info is not None else None

    def _gate_rows(self, gate):
        selectors = gate.queried_selectors()
        if not selectors:
            return range(self.assignment.num_rows)
        rows = set()
        for sel in selectors:
            rows |= self.assignment.enabled[sel.index]
        return sorted(rows)

    def _check_gates(self):
        asg = self.assignment
        failures = []
        for gate in self.cs.gates:
            always_on = not gate.queried_selectors()
            for row in self._gate_rows(gate):
                missing = []

                def advice(query, row=row, missing=missing):
                    value = asg.query_advice(query.column, row + query.rotation.offset)
                    if value is None:
                        if always_on:
                            return FR(0)
                        missing.append((query.column, row + query.rotation.offset))
                        return FR(0)
                    return value.assign()

                def instance(query, row=row):
                    index = row + query.rotation.offset
                    if 0 <= index < len(asg.instance):
                        return asg.instance[index]
                    return FR(0)

                def selector(sel, row=row):
                    return FR(1) if asg.is_enabled(sel, row) else FR(0)

                for poly_index, poly in enumerate(gate.polys):
                    result = poly.evaluate(lambda c: c, selector, advice, instance)
                    if missing:
                        for column, at in missing:
                            failure = CellNotAssigned(gate.name, self._region_name(row), column, at)
                            if failure not in failures:
                                failures.append(failure)
                        missing.clear()
                    elif result != FR(0):
                        failures.append(ConstraintNotSatisfied(
                            gate.name, poly_index, self._region_name(row), row))
        return failures

    def _check_copies(self):
        asg = self.assignment
        failures = []
        for left, right in asg.copies:
            lv = asg.query_advice(left.column, left.row).assign()
            rv = asg.query_advice(right.column, right.row).assign()
            if lv != rv:
                failures.append(CopyMismatch(left, right, lv, rv))
        return failures

    def _check_instances(self):
        asg = self.assignment
        failures = []
        for cell, _column, index in asg.bindings:
            value = asg.query_advice(cell.column, cell.row).assign()
            expected = asg.instance[index]
            if value != expected:
                failures.append(InstanceMismatch(cell, index, value, expected))
        return failures

    def verify(self):
        """모든 위반을 리스트로 반환한다. 만족하면 빈 리스트."""
        failures = self._check_gates() + self._check_copies() + self._check_instances()
        if failures:
            logger.info("local check: %d violation(s)", len(failures))
        else:
            logger.info("local check passed (%d rows)", self.assignment.num_rows)
        return failures

    def assert_satisfied(self):
        failures = self.verify()
        if failures:
            raise UnsatisfiedError(failures)
