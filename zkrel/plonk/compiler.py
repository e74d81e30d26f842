"""
회로 → PLONK 행 컴파일러
=========================

ConstraintSystem 과 Assignment (행 배치, 셀렉터, 복사 제약, 바인딩) 를
표준 PLONK 게이트 표와 순열 σ 로 옮긴다.

**행 배치**:

    | PLONK 행     | 내용                                         |
    |--------------|----------------------------------------------|
    | 0 .. k-1     | 공개 입력 게이트 (q_L = 1, PI(ωⁱ) = -xᵢ)     |
    | k .. k+r-1   | 회로 행 0 .. r-1                             |
    | k+r .. n-1   | 패딩 (모든 셀렉터 0)                         |

  advice 열 0, 1, 2 가 배선 a, b, c 이다.

**표준 형태**:
  켜진 게이트 다항식을 행마다 전개하여

      q_L·a + q_R·b + q_O·c + q_M·a·b + q_C

  로 줄인다. 예) s·(a + b - c), s = 1  →  (1, 1, -1, 0, 0)

  다음은 BackendError:
    - advice 열 4개 이상, instance 열 2개 이상
    - rotation ≠ 0, instance 쿼리, 위 다섯 항 밖의 단항식 (a², a·c 등)
    - 한 행에서 서로 다른 제약 두 개 이상이 켜짐
"""

from zkrel.circuit.constraint_system import ADVICE
from zkrel.field import FR
from zkrel.plonk.errors import BackendError
from zkrel.plonk.permutation import NUM_WIRES, build_sigma
from zkrel.plonk.utils import next_power_of_2

MIN_DOMAIN = 4

# 단항식 키 (정렬된 배선 번호 튜플) → 셀렉터 이름
STANDARD_TERMS = {
    (0,): "q_l",
    (1,): "q_r",
    (2,): "q_o",
    (0, 1): "q_m",
    (): "q_c",
}
SELECTOR_NAMES = ("q_l", "q_r", "q_o", "q_m", "q_c")


class _Terms:
    """배선 단항식의 선형 결합 {(wire, ...): 계수}."""

    __slots__ = ("terms",)

    def __init__(self, terms=None):
        self.terms = {k: v for k, v in (terms or {}).items() if v != 0}

    @classmethod
    def const(cls, value):
        return cls({(): value if isinstance(value, FR) else FR(value)})

    @classmethod
    def wire(cls, index):
        return cls({(index,): FR(1)})

    def __add__(self, other):
        out = dict(self.terms)
        for k, v in other.terms.items():
            out[k] = out.get(k, FR(0)) + v
        return _Terms(out)

    def __neg__(self):
        return _Terms({k: -v for k, v in self.terms.items()})

    def __mul__(self, other):
        out = {}
        for k1, v1 in self.terms.items():
            for k2, v2 in other.terms.items():
                key = tuple(sorted(k1 + k2))
                out[key] = out.get(key, FR(0)) + v1 * v2
        return _Terms(out)


def standard_form(poly, is_enabled):
    """게이트 다항식을 한 행에서 표준 게이트 계수로 줄인다.

    Args:
        poly: Expression
        is_enabled: selector → bool (이 행에서 켜졌는지)

    Returns:
        tuple | None: (q_L, q_R, q_O, q_M, q_C), 이 행에서 0 이면 None

    Raises:
        BackendError: 표준 형태로 표현할 수 없을 때
    """
    def advice(query):
        if query.rotation.offset != 0:
            raise BackendError(f"rotation {query.rotation.offset} 쿼리는 지원하지 않습니다")
        if query.column.index >= NUM_WIRES:
            raise BackendError(f"advice 열은 {NUM_WIRES}개까지 지원합니다: {query.column}")
        return _Terms.wire(query.column.index)

    def instance(query):
        raise BackendError("게이트 안의 instance 쿼리는 지원하지 않습니다")

    terms = poly.evaluate(
        _Terms.const,
        lambda sel: _Terms.const(1 if is_enabled(sel) else 0),
        advice,
        instance,
    ).terms
    if not terms:
        return None
    unknown = [k for k in terms if k not in STANDARD_TERMS]
    if unknown:
        raise BackendError(f"표준 게이트로 줄일 수 없는 항: {unknown}")
    coeffs = {STANDARD_TERMS[k]: v for k, v in terms.items()}
    return tuple(coeffs.get(name, FR(0)) for name in SELECTOR_NAMES)


class CompiledCircuit:
    """컴파일된 PLONK 회로 구조.

    속성:
        n: 도메인 크기 (2의 거듭제곱)
        num_public: 공개 입력 수 k
        num_rows: 회로 행 수
        selectors: {"q_l": [...], ...} 길이 n 평가값
        sigma: 순열 배열 (길이 3n)
    """

    def __init__(self, n, num_public, num_rows, selectors, sigma):
        self.n = n
        self.num_public = num_public
        self.num_rows = num_rows
        self.selectors = selectors
        self.sigma = sigma

    def position(self, cell):
        return cell.column.index * self.n + self.num_public + cell.row

    def same_structure(self, other):
        return (self.n == other.n and self.num_public == other.num_public
                and self.sigma == other.sigma
                and all(self.selectors[k] == other.selectors[k] for k in SELECTOR_NAMES))

    def wire_values(self, assignment):
        """witness 가 있는 Assignment 에서 배선 값 (a, b, c) 을 만든다.

        Raises:
            SynthesisError: unknown 값이 남아 있을 때
        """
        wires = [[FR(0)] * self.n for _ in range(NUM_WIRES)]
        for i, x in enumerate(assignment.instance):
            wires[0][i] = x
        for (column, row), value in assignment.advice.items():
            wires[column][self.num_public + row] = value.assign()
        return tuple(wires)

    def __repr__(self):
        return (f"CompiledCircuit(n={self.n}, public={self.num_public}, "
                f"rows={self.num_rows})")


def _check_shape(cs):
    if len(cs.advice_columns) > NUM_WIRES:
        raise BackendError(
            f"advice 열 {len(cs.advice_columns)}개: 이 백엔드는 {NUM_WIRES}개까지 지원합니다")
    if len(cs.instance_columns) > 1:
        raise BackendError("instance 열은 하나만 지원합니다")


def compile_circuit(cs, assignment):
    """ConstraintSystem + Assignment → CompiledCircuit.

    witness 없는 Assignment 로도 호출할 수 있다 (구조만 사용).
    """
    _check_shape(cs)
    k = assignment.num_instance
    rows = assignment.num_rows
    n = max(MIN_DOMAIN, next_power_of_2(k + rows))

    selectors = {name: [FR(0)] * n for name in SELECTOR_NAMES}
    for i in range(k):
        selectors["q_l"][i] = FR(1)

    for row in range(rows):
        forms = []
        for gate in cs.gates:
            for poly in gate.polys:
                form = standard_form(poly, lambda sel, row=row: assignment.is_enabled(sel, row))
                if form is not None and form not in forms:
                    forms.append(form)
        if len(forms) > 1:
            raise BackendError(f"행 {row}에서 제약 {len(forms)}개가 동시에 켜졌습니다")
        if forms:
            for name, coeff in zip(SELECTOR_NAMES, forms[0]):
                selectors[name][k + row] = coeff

    compiled = CompiledCircuit(n, k, rows, selectors, None)
    links = []
    for left, right in assignment.copies:
        for cell in (left, right):
            if cell.column.kind != ADVICE:
                raise BackendError(f"advice 셀만 복사 제약에 쓸 수 있습니다: {cell!r}")
        links.append((compiled.position(left), compiled.position(right)))
    for cell, _column, index in assignment.bindings:
        links.append((compiled.position(cell), index))
    compiled.sigma = build_sigma(links, n)
    return compiled
