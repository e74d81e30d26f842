"""
릴레이션 E2E 데모: 피보나치와 스도쿠
=====================================

실행:
    python -m zkrel.example

흐름 (릴레이션마다):
    1. 로컬 검사 (MockProver)
    2. SRS 생성 + 키 생성
    3. 증명 생성 (5 라운드)
    4. 증명 검증

추가로 잘못된 공개 입력 (1, 7, 55) 이 로컬 검사에서 걸리는 것을 보여준다.
"""

import logging
import time

from zkrel.chips.fibonacci import FibonacciCircuit, fibonacci_instance
from zkrel.chips.sudoku import CANONICAL_GRID, SudokuCircuit, sudoku_instance
from zkrel.pipeline import default_params, run_relation

MARKS = {"passed": "✓", "failed": "✗", "skipped": "-"}


def run(title, circuit, instance, seed):
    print("\n" + "─" * 60)
    print(f"  {title}")
    print(f"  공개 입력: {instance}")
    print("─" * 60)

    started = time.time()
    params = default_params(circuit, seed=seed)
    print(f"  SRS 최대 차수: {params.max_degree}")

    report = run_relation(circuit, instance, params=params)
    for stage in report.stages:
        detail = f"  ({stage.detail})" if stage.detail else ""
        print(f"    [{MARKS[stage.status]}] {stage.name}{detail}")
    for failure in report.failures:
        print(f"        {failure!r}")
    print(f"  소요 시간: {time.time() - started:.1f}s")
    return report


def main():
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("  zkrel: 덧셈 게이트 회로 데모")
    print("=" * 60)

    fib = run("피보나치 (f0=1, f1=1, 10항)", FibonacciCircuit(), fibonacci_instance(1, 1), seed=1)
    bad = run("피보나치 (잘못된 공개 입력)", FibonacciCircuit(), [1, 7, 55], seed=1)
    sudoku = run("스도쿠 (정답 격자, 합 45)", SudokuCircuit(CANONICAL_GRID), sudoku_instance(), seed=2)

    print("\n" + "=" * 60)
    if fib.ok and sudoku.ok and not bad.ok:
        print("  데모 완료: 모든 결과가 예상과 같습니다")
    else:
        print("  데모 완료: 예상과 다른 결과가 있습니다")
    print("=" * 60)
    return fib.ok and sudoku.ok and not bad.ok


if __name__ == "__main__":
    main()
