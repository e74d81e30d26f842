"""
덧셈 게이트 구성과 덧셈 칩
===========================

두 릴레이션(피보나치, 스도쿠)이 공유하는 열/게이트 배치.

    | a (advice 0) | b (advice 1) | c (advice 2) | s (selector) | instance |
    |--------------|--------------|--------------|--------------|----------|
    |      a       |      b       |    a + b     |      1       |   x_i    |

게이트 "add":  s · (a + b - c) = 0

세 advice 열과 instance 열 모두 equality가 켜져 있어 복사 제약과
instance 바인딩에 쓸 수 있다.
"""

from zkrel.circuit.expression import Rotation
from zkrel.circuit.value import FR_OPS


class AddConfig:
    """덧셈 릴레이션의 열 핸들 묶음.

    속성:
        advice: (a, b, c) advice 열
        selector: 덧셈 게이트 셀렉터
        instance: 공개 입력 열
    """

    def __init__(self, advice, selector, instance):
        self.advice = advice
        self.selector = selector
        self.instance = instance

    def __repr__(self):
        return f"AddConfig(advice={self.advice}, selector={self.selector}, instance={self.instance})"


def configure_add(meta):
    """advice 3개, selector 1개, instance 1개와 덧셈 게이트를 선언한다."""
    advice = (meta.advice_column(), meta.advice_column(), meta.advice_column())
    selector = meta.selector()
    instance = meta.instance_column()

    for column in advice:
        meta.enable_equality(column)
    meta.enable_equality(instance)

    def add_gate(vc):
        s = vc.query_selector(selector)
        a = vc.query_advice(advice[0], Rotation.cur())
        b = vc.query_advice(advice[1], Rotation.cur())
        c = vc.query_advice(advice[2], Rotation.cur())
        return [s * (a + b - c)]

    meta.create_gate("add", add_gate)
    return AddConfig(advice, selector, instance)


class AddChip:
    """한 행짜리 덧셈 영역을 만드는 칩.

    Args:
        config: AddConfig
        field: FieldOps (기본값: bn128 FR)
    """

    def __init__(self, config, field=FR_OPS):
        self.config = config
        self.field = field

    def add(self, layouter, lhs, rhs, name="add"):
        """lhs, rhs 셀을 a, b로 복사하고 c = a + b 를 기록한다.

        Returns:
            AssignedCell: 합 c
        """
        col_a, col_b, col_c = self.config.advice

        def assign(region):
            region.enable_selector(self.config.selector, 0)
            a = lhs.copy_advice("lhs", region, col_a, 0)
            b = rhs.copy_advice("rhs", region, col_b, 0)
            return region.assign_advice("lhs + rhs", col_c, 0,
                                        a.value.zip_with(b.value, self.field.add))

        return layouter.assign_region(name, assign)

    def assign_free(self, layouter, name, value):
        """게이트 없이 값 하나를 a 열에 기록한다. 이 셀 자체에는 제약이 없다."""
        col_a = self.config.advice[0]
        return layouter.assign_region(
            name, lambda region: region.assign_advice(name, col_a, 0, value))

    def expose_public(self, layouter, cell, index):
        layouter.constrain_instance(cell.cell, self.config.instance, index)
