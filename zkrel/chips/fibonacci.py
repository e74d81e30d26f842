"""
피보나치 릴레이션
==================

공개 입력 (f0, f1, target)에 대해 "f0, f1 로 시작하는 피보나치 수열의
num_terms 번째 항(0부터 세어 num_terms - 1)이 target 이다" 를 증명한다.

**행 배치 (num_terms = 10, f0 = f1 = 1)**:

    | 행 | a  | b  | c  | s | 비고                                  |
    |----|----|----|----|---|---------------------------------------|
    | 0  | 1  | 1  | 2  | 1 | a ← instance[0], b ← instance[1]      |
    | 1  | 1  | 2  | 3  | 1 | a = 이전 b, b = 이전 c (복사 제약)    |
    | 2  | 2  | 3  | 5  | 1 |                                       |
    | .. |    |    |    |   |                                       |
    | 7  | 21 | 34 | 55 | 1 | c → instance[2]                       |

첫 행 1개 + 정상 행 (num_terms - 3)개. 마지막 c 가 F(num_terms - 1).

사용 예시:
    >>> circuit = FibonacciCircuit()
    >>> MockProver.run(circuit, fibonacci_instance(1, 1)).verify()
    []
"""

from zkrel.chips.arith import AddChip, configure_add
from zkrel.circuit.layouter import Circuit
from zkrel.circuit.value import FR_OPS

FIBONACCI_INSTANCE_LENGTH = 3


class FibonacciChip(AddChip):
    """피보나치 행을 배치하는 칩."""

    def assign_first_row(self, layouter):
        """첫 행: 공개 입력 0, 1번을 a, b 에 가져오고 c = a + b 를 계산한다.

        Returns:
            tuple: (a, b, c) AssignedCell
        """
        config = self.config
        col_a, col_b, col_c = config.advice

        def assign(region):
            region.enable_selector(config.selector, 0)
            a = region.assign_advice_from_instance("f(0)", config.instance, 0, col_a, 0)
            b = region.assign_advice_from_instance("f(1)", config.instance, 1, col_b, 0)
            c = region.assign_advice("a + b", col_c, 0, a.value.zip_with(b.value, self.field.add))
            return a, b, c

        return layouter.assign_region("first row", assign)

    def assign_row(self, layouter, prev_b, prev_c):
        """정상 행: 이전 행의 b, c 를 a, b 로 복사하고 새 c 를 계산한다."""
        return self.add(layouter, prev_b, prev_c, name="next row")


class FibonacciCircuit(Circuit):
    """f(i) = f(i-1) + f(i-2) 를 num_terms 항까지 펼친 회로.

    Args:
        num_terms: 수열 길이 (3 이상). 마지막 항 f(num_terms - 1) 이 공개된다.
        field: FieldOps
    """

    num_instance = FIBONACCI_INSTANCE_LENGTH

    def __init__(self, num_terms=10, field=FR_OPS):
        if num_terms < 3:
            raise ValueError(f"num_terms는 3 이상이어야 합니다: {num_terms}")
        self.num_terms = num_terms
        self.field = field

    def without_witnesses(self):
        # 모든 witness 가 공개 입력에서 유도되므로 구조만 같으면 된다
        return FibonacciCircuit(self.num_terms, self.field)

    def configure(self, meta):
        return configure_add(meta)

    def synthesize(self, config, layouter):
        chip = FibonacciChip(config, self.field)
        _, prev_b, prev_c = chip.assign_first_row(layouter)
        for _ in range(self.num_terms - 3):
            c = chip.assign_row(layouter, prev_b, prev_c)
            prev_b, prev_c = prev_c, c
        chip.expose_public(layouter, prev_c, 2)

    def __repr__(self):
        return f"FibonacciCircuit(num_terms={self.num_terms})"


def fibonacci_sequence(f0, f1, num_terms, field=FR_OPS):
    seq = [field.from_int(f0), field.from_int(f1)]
    while len(seq) < num_terms:
        seq.append(field.add(seq[-2], seq[-1]))
    return seq[:num_terms]


def fibonacci_instance(f0=1, f1=1, num_terms=10):
    """참이 되는 공개 입력 [f0, f1, f(num_terms - 1)]."""
    return [f0, f1, int(fibonacci_sequence(f0, f1, num_terms)[-1])]
