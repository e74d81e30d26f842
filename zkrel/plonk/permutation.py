"""
순열 인자 (Permutation Argument)
=================================

복사 제약과 instance 바인딩을 하나의 순열 σ 로 인코딩한다.

**배선 위치**:
  3n 개의 위치 = 배선 w ∈ {a, b, c} × PLONK 행 p
      pos = w · n + p

  위치의 "이름" (id 값):
      a 배선: ωᵖ,  b 배선: K1 · ωᵖ,  c 배선: K2 · ωᵖ

**σ 구성 (union-find)**:
  같은 값이어야 하는 위치들을 같은 집합으로 합친 뒤, 각 집합을 순환
  (p₀ → p₁ → ... → p_m → p₀) 으로 만든다. 연결이 없는 위치는 자기 자신을
  가리킨다. 집합 단위로 순환을 만들므로 셀 하나가 여러 제약에 참여해도
  (스도쿠 숫자 셀은 행·열·블록 세 번 복사된다) 순열이 깨지지 않는다.

**누산기 z**:
  z(ω⁰) = 1
  z(ω^(i+1)) = z(ωⁱ) · ∏_w (w_i + β·id_w(ωⁱ) + γ) / ∏_w (w_i + β·σ_w(ωⁱ) + γ)

  모든 복사 제약이 성립하면 마지막 곱이 다시 1 로 돌아온다.
"""

from zkrel.field import FR

K1 = FR(2)
K2 = FR(3)

NUM_WIRES = 3


class UnionFind:

    def __init__(self, size):
        self.parent = list(range(size))

    def find(self, x):
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, x, y):
        rx, ry = self.find(x), self.find(y)
        if rx != ry:
            self.parent[max(rx, ry)] = min(rx, ry)


def build_sigma(links, n):
    """위치 쌍 목록에서 순열 배열 σ (길이 3n) 를 만든다.

    Args:
        links: [(pos, pos)] 같은 값이어야 하는 위치 쌍
        n: 도메인 크기

    Returns:
        list[int]: σ[pos] = 다음 위치
    """
    size = NUM_WIRES * n
    uf = UnionFind(size)
    for left, right in links:
        uf.union(left, right)

    classes = {}
    for pos in range(size):
        classes.setdefault(uf.find(pos), []).append(pos)

    sigma = list(range(size))
    for members in classes.values():
        for i, pos in enumerate(members):
            sigma[pos] = members[(i + 1) % len(members)]
    return sigma


def position_id(pos, n, domain):
    """위치의 id 값: 1·ωᵖ, K1·ωᵖ, K2·ωᵖ."""
    wire, row = divmod(pos, n)
    return (FR(1), K1, K2)[wire] * domain[row]


def sigma_evaluations(sigma, n, domain):
    """σ 를 세 배선의 평가값 리스트 (S_σ1, S_σ2, S_σ3) 로 바꾼다."""
    ids = [position_id(sigma[pos], n, domain) for pos in range(NUM_WIRES * n)]
    return ids[:n], ids[n:2 * n], ids[2 * n:]


def compute_accumulator(wires, sigma_evals, domain, beta, gamma):
    """누산기 z 의 평가값과 마지막 곱 (성립하면 1) 을 계산한다.

    Args:
        wires: (a_vals, b_vals, c_vals)
        sigma_evals: (S_σ1, S_σ2, S_σ3) 평가값
        domain: [ω⁰, ..., ω^(n-1)]
        beta, gamma: 챌린지

    Returns:
        tuple: (z_evals 길이 n, z(ω^n))
    """
    n = len(domain)
    a, b, c = wires
    s1, s2, s3 = sigma_evals
    z = [FR(1)]
    acc = FR(1)
    for i in range(n):
        w = domain[i]
        num = ((a[i] + beta * w + gamma)
               * (b[i] + beta * K1 * w + gamma)
               * (c[i] + beta * K2 * w + gamma))
        den = ((a[i] + beta * s1[i] + gamma)
               * (b[i] + beta * s2[i] + gamma)
               * (c[i] + beta * s3[i] + gamma))
        acc = acc * num / den
        if i < n - 1:
            z.append(acc)
    return z, acc
