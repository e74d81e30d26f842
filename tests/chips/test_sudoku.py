"""
스도쿠 릴레이션 테스트
=======================

테스트 범위:
  - 정답 격자 + [45]*27 만족
  - 합만 맞는 격자 (모든 칸 5) 도 만족 (약한 검사)
  - 한 칸이 틀리면 그 칸이 속한 행/열/블록 세 곳이 instance 위반
  - 공개 입력 길이 26 → InstanceLengthError
  - 그룹 좌표와 공개 입력 인덱스
"""

import pytest

from zkrel.chips.sudoku import (
    BLOCK, CANONICAL_GRID, COLUMN, LINE, SUDOKU_INSTANCE_LENGTH,
    SudokuCircuit, group_index, group_members, group_sums, sudoku_instance,
)
from zkrel.circuit.checker import InstanceMismatch, MockProver
from zkrel.circuit.layouter import InstanceLengthError, synthesize


@pytest.fixture(scope="module")
def canonical_prover():
    return MockProver.run(SudokuCircuit(CANONICAL_GRID), sudoku_instance())


class TestGroups:
    def test_line(self):
        assert group_members(LINE, 2) == [(2, j) for j in range(9)]

    def test_column(self):
        assert group_members(COLUMN, 4) == [(r, 4) for r in range(9)]

    def test_block(self):
        assert group_members(BLOCK, 0) == [(0, 0), (0, 1), (0, 2),
                                           (1, 0), (1, 1), (1, 2),
                                           (2, 0), (2, 1), (2, 2)]
        assert group_members(BLOCK, 5)[0] == (3, 6)
        assert group_members(BLOCK, 8)[-1] == (8, 8)

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            group_members("diagonal", 0)

    def test_public_order(self):
        assert group_index(LINE, 0) == 0
        assert group_index(COLUMN, 0) == 9
        assert group_index(BLOCK, 8) == 26

    def test_every_cell_in_three_groups(self):
        seen = {}
        for kind in (LINE, COLUMN, BLOCK):
            for i in range(9):
                for cell in group_members(kind, i):
                    seen[cell] = seen.get(cell, 0) + 1
        assert len(seen) == 81
        assert set(seen.values()) == {3}

    def test_canonical_sums(self):
        assert group_sums(CANONICAL_GRID) == [45] * 27


class TestCircuit:
    def test_canonical_passes(self, canonical_prover):
        assert canonical_prover.verify() == []

    def test_repeated_digits_pass(self):
        grid = [[5] * 9 for _ in range(9)]
        assert MockProver.run(SudokuCircuit(grid), sudoku_instance()).verify() == []

    def test_one_wrong_cell(self):
        grid = [list(row) for row in CANONICAL_GRID]
        grid[0][0] += 1
        failures = MockProver.run(SudokuCircuit(grid), sudoku_instance()).verify()
        assert all(isinstance(f, InstanceMismatch) for f in failures)
        assert sorted(f.index for f in failures) == [0, 9, 18]

    def test_instance_matching_sums(self):
        grid = [[r * 9 + c for c in range(9)] for r in range(9)]
        instance = group_sums(grid)
        assert MockProver.run(SudokuCircuit(grid), instance).verify() == []

    def test_instance_length(self):
        with pytest.raises(InstanceLengthError) as exc:
            MockProver.run(SudokuCircuit(CANONICAL_GRID), [45] * 26)
        assert exc.value.expected == SUDOKU_INSTANCE_LENGTH

    def test_bad_grid_shape(self):
        with pytest.raises(ValueError):
            SudokuCircuit([[1] * 9] * 8)
        with pytest.raises(ValueError):
            SudokuCircuit([[1] * 8] * 9)


class TestLayout:
    def test_rows(self, canonical_prover):
        assert canonical_prover.assignment.num_rows == 81 + 27 * 10

    def test_bindings_cover_all_indices(self, canonical_prover):
        indices = sorted(i for _, _, i in canonical_prover.assignment.bindings)
        assert indices == list(range(27))

    def test_copies(self, canonical_prover):
        # 덧셈 행마다 복사 2개
        assert len(canonical_prover.assignment.copies) == 27 * 9 * 2

    def test_structure_without_witness(self):
        _, _, blank = synthesize(SudokuCircuit())
        assert blank.num_rows == 351
