"""
릴레이션 데이터 직렬화/역직렬화 헬퍼
======================================

TinyDB 와 JSON 응답에 넣을 수 있는 형태로 백엔드 객체를 변환한다.
FR, G1, Proof, VerifyingKey (요약), PipelineReport (요약).

  - FR      → str(int)
  - G1      → [str, str]             (무한원점은 None)
  - Proof   → {필드명: 위 형식}
"""

from py_ecc import optimized_bn128 as bn128

from zkrel.field import FR, ec_from_affine, ec_normalize
from zkrel.plonk.prover import Proof


# ─── FR ───

def serialize_fr(val):
    """FR → str(int)"""
    return str(int(val))


def deserialize_fr(s):
    """str(int) → FR"""
    return FR(int(s))


def serialize_fr_list(lst):
    return [serialize_fr(v) for v in lst]


# ─── G1 point ───

def serialize_g1(point):
    """G1 point → [str, str] or None"""
    affine = ec_normalize(point)
    if affine is None:
        return None
    return [str(int(affine[0])), str(int(affine[1]))]


def deserialize_g1(data):
    """[str, str] or None → G1 point

    Raises:
        ValueError: 곡선 위의 점이 아닐 때
    """
    if data is None:
        return ec_from_affine(None)
    return ec_from_affine((bn128.FQ(int(data[0])), bn128.FQ(int(data[1]))))


# ─── Proof ───

def serialize_proof(proof):
    """Proof → dict"""
    data = {name: serialize_g1(getattr(proof, name)) for name in Proof.COMMITMENTS}
    data.update({name: serialize_fr(getattr(proof, name)) for name in Proof.EVALUATIONS})
    return data


def deserialize_proof(data):
    """dict → Proof

    Raises:
        KeyError: 필드가 빠졌을 때
        ValueError: 점이 곡선 위에 있지 않거나 값이 정수가 아닐 때
    """
    fields = {name: deserialize_g1(data[name]) for name in Proof.COMMITMENTS}
    fields.update({name: deserialize_fr(data[name]) for name in Proof.EVALUATIONS})
    return Proof(**fields)


# ─── VerifyingKey (표시용 요약) ───

def summarize_vk(vk):
    return {
        "n": vk.n,
        "omega": serialize_fr(vk.omega),
        "num_public": vk.num_public,
        "commitments": {name: serialize_g1(point) for name, point in vk.commitments.items()},
    }


def g1_short(point):
    """G1 point → 짧은 표시 문자열"""
    affine = ec_normalize(point)
    if affine is None:
        return "O"
    x, y = str(int(affine[0])), str(int(affine[1]))
    return f"({x[:8]}..., {y[:8]}...)"


def fr_short(val):
    s = str(int(val))
    return s if len(s) <= 16 else f"{s[:8]}...{s[-4:]}"


def serialize_report(report):
    """PipelineReport → dict (산출물 제외)"""
    data = report.to_dict()
    if report.vk is not None:
        data["vk"] = summarize_vk(report.vk)
    return data
