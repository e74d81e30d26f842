"""
Value / FieldOps / Expression 테스트
=====================================

테스트 범위:
  - known/unknown 전파
  - unknown 값 assign → SynthesisError
  - FieldOps (FR_OPS) 기본 연산
  - Expression 차수와 evaluate 폴드
"""

import pytest

from zkrel.field import FR
from zkrel.circuit.value import FR_OPS, SynthesisError, Value
from zkrel.circuit.constraint_system import ConstraintSystem
from zkrel.circuit.expression import Constant, Rotation


class TestValue:
    def test_known_add(self):
        a = Value.known(FR(3))
        assert (a + a).assign() == FR(6)

    def test_known_sub_mul_neg(self):
        a, b = Value.known(FR(5)), Value.known(FR(2))
        assert (a - b).assign() == FR(3)
        assert (a * b).assign() == FR(10)
        assert (-b).assign() == FR(-2)

    def test_unknown_propagates(self):
        a = Value.known(FR(3))
        u = Value.unknown()
        assert not (a + u).is_known()
        assert not (u * a).is_known()
        assert not (-u).is_known()

    def test_unknown_assign_raises(self):
        with pytest.raises(SynthesisError):
            Value.unknown().assign()

    def test_synthesis_error_is_value_error(self):
        assert issubclass(SynthesisError, ValueError)

    def test_map_and_zip_with(self):
        a = Value.known(FR(4))
        assert a.map(lambda x: x * x).assign() == FR(16)
        assert a.zip_with(Value.known(FR(1)), FR_OPS.add).assign() == FR(5)
        assert not a.zip_with(Value.unknown(), FR_OPS.add).is_known()

    def test_equality(self):
        assert Value.known(FR(7)) == Value.known(FR(7))
        assert Value.known(FR(7)) != Value.known(FR(8))
        assert Value.unknown() == Value.unknown()

    def test_repr(self):
        assert repr(Value.known(FR(9))) == "Value(9)"
        assert repr(Value.unknown()) == "Value(unknown)"


class TestFieldOps:
    def test_zero(self):
        assert FR_OPS.zero() == FR(0)

    def test_from_int(self):
        assert FR_OPS.from_int(12) == FR(12)
        x = FR(12)
        assert FR_OPS.from_int(x) is x

    def test_add_wraps_modulus(self):
        top = FR_OPS.from_int(FR.field_modulus - 1)
        assert FR_OPS.add(top, FR_OPS.from_int(1)) == FR_OPS.zero()

    def test_equals(self):
        assert FR_OPS.equals(FR(3), FR(3))
        assert not FR_OPS.equals(FR(3), FR(4))


class TestExpression:
    @pytest.fixture
    def add_gate(self):
        meta = ConstraintSystem()
        a, b, c = meta.advice_column(), meta.advice_column(), meta.advice_column()
        s = meta.selector()

        def gate(vc):
            return [vc.query_selector(s) * (vc.query_advice(a) + vc.query_advice(b)
                                            - vc.query_advice(c))]

        meta.create_gate("add", gate)
        return meta, (a, b, c), s

    def test_degree(self, add_gate):
        meta, _, _ = add_gate
        assert meta.degree() == 2

    def test_evaluate_fold(self, add_gate):
        meta, (a, b, c), _ = add_gate
        values = {a.index: FR(2), b.index: FR(3), c.index: FR(5)}
        poly = meta.gates[0].polys[0]

        def run(cells, enabled):
            return poly.evaluate(lambda k: k,
                                 lambda sel: FR(1) if enabled else FR(0),
                                 lambda q: cells[q.column.index],
                                 lambda q: FR(0))

        assert run(values, True) == FR(0)
        assert run({a.index: FR(2), b.index: FR(3), c.index: FR(6)}, True) == FR(-1)
        assert run({a.index: FR(2), b.index: FR(3), c.index: FR(6)}, False) == FR(0)

    def test_constant_and_scaled(self):
        expr = 3 * Constant(4) + 1
        assert expr.degree() == 0
        assert expr.evaluate(lambda k: k, None, None, None) == FR(13)

    def test_queried_selectors(self, add_gate):
        meta, _, s = add_gate
        assert meta.gates[0].queried_selectors() == [s]

    def test_rotation(self):
        assert Rotation.cur() == Rotation(0)
        assert Rotation.next().offset == 1
        assert Rotation.prev().offset == -1


class TestConstraintSystem:
    def test_columns_are_indexed_in_order(self):
        meta = ConstraintSystem()
        cols = [meta.advice_column() for _ in range(3)]
        assert [c.index for c in cols] == [0, 1, 2]
        assert meta.instance_column().index == 0

    def test_enable_equality_idempotent(self):
        meta = ConstraintSystem()
        a = meta.advice_column()
        meta.enable_equality(a)
        meta.enable_equality(a)
        assert meta.equality == [a]

    def test_duplicate_gate_names_allowed(self):
        meta = ConstraintSystem()
        a = meta.advice_column()
        meta.create_gate("g", lambda vc: [vc.query_advice(a)])
        meta.create_gate("g", lambda vc: [vc.query_advice(a)])
        assert [g.name for g in meta.gates] == ["g", "g"]

    def test_empty_gate_rejected(self):
        meta = ConstraintSystem()
        with pytest.raises(ValueError):
            meta.create_gate("empty", lambda vc: [])

    def test_query_wrong_column_kind(self):
        meta = ConstraintSystem()
        inst = meta.instance_column()
        with pytest.raises(ValueError):
            meta.create_gate("bad", lambda vc: [vc.query_advice(inst)])
