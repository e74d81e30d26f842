"""
(약한) 스도쿠 릴레이션
=======================

9×9 격자의 각 행(line), 열(column), 3×3 블록의 합이 공개 입력과 같음을 증명한다.
숫자의 범위나 중복은 검사하지 않는다. 합이 모두 45 이면 반복된 숫자가 있어도
통과한다 (예: 모든 칸이 5 인 격자).

**행 배치**:
  1. 숫자 영역 81개     (a 열, 게이트 없음)
  2. 그룹 27개마다:
       - 누산기 초기값 0  (a 열, 게이트 없음, 제약 없음)
       - 덧셈 행 9개      acc' = acc + member  (acc, member 는 복사 제약)
  3. 마지막 누산기 → instance[그룹 인덱스]

**공개 입력 순서**:

    | 인덱스    | 그룹       |
    |-----------|------------|
    | 0  .. 8   | 행 0..8    |
    | 9  .. 17  | 열 0..8    |
    | 18 .. 26  | 블록 0..8  |

    블록 i 의 j 번째 칸 = grid[(i // 3) * 3 + j // 3][(i % 3) * 3 + j % 3]

전체 81 + 27 × 10 = 351 행.
"""

from zkrel.chips.arith import AddChip, configure_add
from zkrel.circuit.layouter import Circuit
from zkrel.circuit.value import FR_OPS, Value

SUDOKU_SIZE = 9
SUDOKU_INSTANCE_LENGTH = 27
SUDOKU_TARGET = 45

LINE = "line"
COLUMN = "column"
BLOCK = "block"
GROUP_KINDS = (LINE, COLUMN, BLOCK)

# 정답 격자 예시
CANONICAL_GRID = [
    [7, 6, 9, 5, 3, 8, 1, 2, 4],
    [2, 4, 3, 7, 1, 9, 6, 5, 8],
    [8, 5, 1, 4, 6, 2, 9, 7, 3],
    [4, 8, 6, 9, 7, 5, 3, 1, 2],
    [5, 3, 7, 6, 2, 1, 4, 8, 9],
    [1, 9, 2, 8, 4, 3, 7, 6, 5],
    [6, 1, 8, 3, 5, 4, 2, 9, 7],
    [9, 7, 4, 2, 8, 6, 5, 3, 1],
    [3, 2, 5, 1, 9, 7, 8, 4, 6],
]


def group_members(kind, i):
    """그룹 (kind, i) 에 속한 9개 칸의 (행, 열) 좌표."""
    if kind == LINE:
        return [(i, j) for j in range(SUDOKU_SIZE)]
    if kind == COLUMN:
        return [(j, i) for j in range(SUDOKU_SIZE)]
    if kind == BLOCK:
        return [((i // 3) * 3 + j // 3, (i % 3) * 3 + j % 3) for j in range(SUDOKU_SIZE)]
    raise ValueError(f"알 수 없는 그룹 종류: {kind}")


def group_index(kind, i):
    """그룹의 공개 입력 인덱스."""
    return GROUP_KINDS.index(kind) * SUDOKU_SIZE + i


def sudoku_instance(target=SUDOKU_TARGET):
    return [target] * SUDOKU_INSTANCE_LENGTH


def group_sums(grid):
    """공개 입력 순서대로 27개 그룹 합."""
    return [sum(grid[r][c] for r, c in group_members(kind, i))
            for kind in GROUP_KINDS for i in range(SUDOKU_SIZE)]


class SudokuChip(AddChip):
    """숫자 영역과 그룹 누산 영역을 배치하는 칩."""

    def load_grid(self, layouter, values):
        """81개 숫자를 각각 한 행짜리 영역에 기록한다."""
        return [[self.assign_free(layouter, f"cell[{r}][{c}]", values[r][c])
                 for c in range(SUDOKU_SIZE)]
                for r in range(SUDOKU_SIZE)]

    def sum_group(self, layouter, cells, members, name):
        acc = self.assign_free(layouter, f"{name} init", Value.known(self.field.zero()))
        for r, c in members:
            acc = self.add(layouter, acc, cells[r][c], name=f"{name} + cell[{r}][{c}]")
        return acc


class SudokuCircuit(Circuit):
    """격자의 27개 그룹 합을 공개하는 회로.

    Args:
        grid: 9×9 정수 격자. None 이면 witness 없는 회로 (키 생성용)
        field: FieldOps
    """

    num_instance = SUDOKU_INSTANCE_LENGTH

    def __init__(self, grid=None, field=FR_OPS):
        if grid is not None:
            if len(grid) != SUDOKU_SIZE or any(len(row) != SUDOKU_SIZE for row in grid):
                raise ValueError("스도쿠 격자는 9×9 여야 합니다")
            grid = [list(row) for row in grid]
        self.grid = grid
        self.field = field

    def without_witnesses(self):
        return SudokuCircuit(None, self.field)

    def configure(self, meta):
        return configure_add(meta)

    def _values(self):
        if self.grid is None:
            return [[Value.unknown()] * SUDOKU_SIZE for _ in range(SUDOKU_SIZE)]
        return [[Value.known(self.field.from_int(x)) for x in row] for row in self.grid]

    def synthesize(self, config, layouter):
        chip = SudokuChip(config, self.field)
        cells = chip.load_grid(layouter.namespace("grid"), self._values())
        for kind in GROUP_KINDS:
            for i in range(SUDOKU_SIZE):
                name = f"{kind} {i}"
                total = chip.sum_group(layouter.namespace(name), cells,
                                       group_members(kind, i), name)
                chip.expose_public(layouter, total, group_index(kind, i))

    def __repr__(self):
        state = "witness" if self.grid is not None else "no witness"
        return f"SudokuCircuit({state})"
