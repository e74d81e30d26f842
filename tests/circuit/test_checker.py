"""
MockProver 테스트
==================

테스트 범위:
  - 만족하는 witness → 빈 리스트
  - 게이트 위반, 복사 위반, instance 위반, 미할당 셀을 모두 보고
  - verify() 반복 호출 결과가 같다
  - assert_satisfied() → UnsatisfiedError
  - 셀렉터 없는 게이트는 모든 행에서 검사한다
"""

import pytest

from zkrel.field import FR
from zkrel.chips.arith import AddChip, configure_add
from zkrel.circuit.checker import (
    CellNotAssigned, ConstraintNotSatisfied, CopyMismatch, InstanceMismatch,
    MockProver, UnsatisfiedError,
)
from zkrel.circuit.layouter import Circuit
from zkrel.circuit.value import Value


class OneAddCircuit(Circuit):
    """x + y = z 한 행. 공개 입력 [z].

    lie: c 에 기록할 값을 바꾼다 (게이트 위반)
    skip_c: c 를 기록하지 않는다 (미할당 셀)
    """

    num_instance = 1

    def __init__(self, x, y, lie=None, skip_c=False):
        self.x, self.y = x, y
        self.lie = lie
        self.skip_c = skip_c

    def configure(self, meta):
        return configure_add(meta)

    def synthesize(self, config, layouter):
        chip = AddChip(config)
        x = chip.assign_free(layouter, "x", Value.known(FR(self.x)))
        y = chip.assign_free(layouter, "y", Value.known(FR(self.y)))
        col_a, col_b, col_c = config.advice

        def assign(region):
            region.enable_selector(config.selector, 0)
            a = x.copy_advice("a", region, col_a, 0)
            b = y.copy_advice("b", region, col_b, 0)
            if self.skip_c:
                return None
            total = self.lie if self.lie is not None else self.x + self.y
            return region.assign_advice("c", col_c, 0, Value.known(FR(total)))

        c = layouter.assign_region("sum", assign)
        if c is not None:
            chip.expose_public(layouter, c, 0)


class CopyLieCircuit(OneAddCircuit):
    """a 칸에 x 가 아닌 값을 쓰고 복사 제약만 건다."""

    def synthesize(self, config, layouter):
        chip = AddChip(config)
        x = chip.assign_free(layouter, "x", Value.known(FR(self.x)))
        col_a = config.advice[0]

        def assign(region):
            a = region.assign_advice("a", col_a, 0, Value.known(FR(self.x + 1)))
            region.constrain_equal(x.cell, a.cell)
            return a

        layouter.assign_region("copy", assign)


class EqualColumnsCircuit(Circuit):
    """셀렉터 없는 게이트 a - b = 0. 행마다 (a, b) 한 쌍, b 가 None 이면 비워 둔다."""

    num_instance = 0

    def __init__(self, pairs):
        self.pairs = pairs

    def configure(self, meta):
        a, b = meta.advice_column(), meta.advice_column()
        meta.create_gate("eq", lambda vc: [vc.query_advice(a) - vc.query_advice(b)])
        return a, b

    def synthesize(self, config, layouter):
        col_a, col_b = config

        def assign(region):
            for offset, (x, y) in enumerate(self.pairs):
                region.assign_advice("a", col_a, offset, Value.known(FR(x)))
                if y is not None:
                    region.assign_advice("b", col_b, offset, Value.known(FR(y)))

        layouter.assign_region("pairs", assign)


class TestSatisfied:
    def test_valid(self):
        assert MockProver.run(OneAddCircuit(2, 3), [5]).verify() == []

    def test_assert_satisfied_passes(self):
        MockProver.run(OneAddCircuit(2, 3), [5]).assert_satisfied()


class TestViolations:
    def test_instance_mismatch(self):
        failures = MockProver.run(OneAddCircuit(2, 3), [6]).verify()
        assert len(failures) == 1
        failure = failures[0]
        assert isinstance(failure, InstanceMismatch)
        assert failure.index == 0
        assert failure.row == 2
        assert failure.cell_value == FR(5)
        assert failure.expected == FR(6)

    def test_gate_violation_and_instance(self):
        failures = MockProver.run(OneAddCircuit(2, 3, lie=6), [6]).verify()
        assert failures == [ConstraintNotSatisfied("add", 0, "sum", 2)]
        assert failures[0].region == "sum"

    def test_all_failures_reported(self):
        failures = MockProver.run(OneAddCircuit(2, 3, lie=6), [7]).verify()
        kinds = sorted(type(f).__name__ for f in failures)
        assert kinds == ["ConstraintNotSatisfied", "InstanceMismatch"]

    def test_copy_mismatch(self):
        failures = MockProver.run(CopyLieCircuit(4, 0), [0]).verify()
        assert len(failures) == 1
        assert isinstance(failures[0], CopyMismatch)
        assert failures[0].left_value == FR(4)
        assert failures[0].right_value == FR(5)

    def test_cell_not_assigned(self):
        failures = MockProver.run(OneAddCircuit(2, 3, skip_c=True), [5]).verify()
        assert len(failures) == 1
        assert isinstance(failures[0], CellNotAssigned)
        assert failures[0].column.index == 2
        assert failures[0].row == 2

    def test_assert_satisfied_raises(self):
        with pytest.raises(UnsatisfiedError) as exc:
            MockProver.run(OneAddCircuit(2, 3), [9]).assert_satisfied()
        assert len(exc.value.failures) == 1


class TestIdempotence:
    def test_repeated_verify(self):
        prover = MockProver.run(OneAddCircuit(2, 3, lie=6), [7])
        first = prover.verify()
        second = prover.verify()
        assert first == second
        assert len(first) == 2


class TestSelectorlessGate:
    def test_satisfied(self):
        assert MockProver.run(EqualColumnsCircuit([(1, 1), (2, 2)]), []).verify() == []

    def test_every_row_checked(self):
        failures = MockProver.run(EqualColumnsCircuit([(1, 1), (2, 3), (4, 4)]), []).verify()
        assert failures == [ConstraintNotSatisfied("eq", 0, "pairs", 1)]

    def test_empty_cell_reads_as_zero(self):
        assert MockProver.run(EqualColumnsCircuit([(0, None)]), []).verify() == []
        failures = MockProver.run(EqualColumnsCircuit([(7, None)]), []).verify()
        assert failures == [ConstraintNotSatisfied("eq", 0, "pairs", 0)]
