"""
릴레이션 Flask Blueprint
=========================

피보나치·스도쿠 릴레이션을 HTTP 로 검사하고 증명/검증한다.

  GET  /relations                      등록된 릴레이션 목록
  POST /relations/<relation>/check     로컬 검사 (MockProver)
  POST /relations/<relation>/prove     증명 생성 → TinyDB 저장, id 반환
  POST /relations/<relation>/verify    저장된 증명(proof_id) 또는 전달된 증명 검증
  POST /relations/<relation>/run       파이프라인 전체 실행, 단계별 보고서 반환
  GET  /relations/<relation>/vk        검증 키 요약
  GET  /relations/proofs/<proof_id>    저장된 증명 조회

요청 본문 (JSON):
  fibonacci: {"instance": [f0, f1, target], "num_terms": 10}
             instance 대신 {"f0": 1, "f1": 1} 를 주면 참인 공개 입력을 계산한다.
  sudoku:    {"grid": 9×9 정수, "instance": [45, ...]}  (instance 생략 시 [45]*27)

SRS 와 키는 (릴레이션, 회로 구조) 마다 한 번 만들어 프로세스 안에 캐시한다
(최대 KEY_CACHE_SIZE 개). num_terms 는 MAX_NUM_TERMS 를 넘을 수 없다.
"""

import logging
import uuid
from collections import OrderedDict

from flask import Blueprint, current_app, jsonify, request
from tinydb import Query

from zkrel.chips.fibonacci import FibonacciCircuit, fibonacci_instance
from zkrel.chips.sudoku import SudokuCircuit, sudoku_instance
from zkrel.circuit.checker import MockProver
from zkrel.circuit.layouter import InstanceLengthError
from zkrel.plonk.errors import BackendError, ProofError
from zkrel.plonk.keygen import keygen_pk, keygen_vk
from zkrel.plonk.prover import create_proof
from zkrel.plonk.transcript import Transcript
from zkrel.plonk.verifier import verify_proof
from zkrel.pipeline import default_params, run_relation

from relation_serializers import (
    deserialize_proof, fr_short, g1_short, serialize_fr_list, serialize_proof, serialize_report,
    summarize_vk,
)

logger = logging.getLogger(__name__)

relations_bp = Blueprint('relations', __name__, url_prefix='/relations')

DATA = Query()

# DB는 app.py에서 주입
DB = None

# (relation, structure) → (params, vk, pk), 최근 사용 순
KEYS = OrderedDict()


class RequestError(ValueError):
    """요청 본문이 잘못되었을 때 (400)."""


def init_relations_bp(db):
    """app.py에서 DB를 주입받고 키 캐시를 비운다."""
    global DB
    DB = db
    KEYS.clear()


# ─── DB 헬퍼 ───

def db_get(key):
    """DB에서 키로 데이터를 조회한다."""
    result = DB.search(DATA.type == key)
    if not result:
        return None
    return result[0].get("data")


def db_set(key, data):
    """DB에 키로 데이터를 저장한다."""
    DB.upsert({"type": key, "data": data}, DATA.type == key)


# ─── 요청 → (회로, 공개 입력) ───

def _payload():
    """요청 본문. 비어 있으면 {}, 객체가 아니면 RequestError."""
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise RequestError("요청 본문은 JSON 객체여야 합니다")
    return payload


def _int(value, name):
    if isinstance(value, bool):
        raise RequestError(f"{name} 는 정수여야 합니다")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise RequestError(f"{name} 는 정수여야 합니다") from exc


def _int_list(values, name):
    if not isinstance(values, list):
        raise RequestError(f"{name} 는 리스트여야 합니다")
    return [_int(v, name) for v in values]


def _num_terms(value):
    """num_terms 는 정수이고 MAX_NUM_TERMS 이하여야 한다."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise RequestError("num_terms 는 정수여야 합니다")
    limit = current_app.config["MAX_NUM_TERMS"]
    if value > limit:
        raise RequestError(f"num_terms 는 {limit} 이하여야 합니다: {value}")
    return value


def _fibonacci(payload):
    num_terms = _num_terms(payload.get("num_terms", 10))
    circuit = FibonacciCircuit(num_terms)
    if "instance" in payload:
        instance = _int_list(payload["instance"], "instance")
    else:
        f0 = _int(payload.get("f0", 1), "f0")
        f1 = _int(payload.get("f1", 1), "f1")
        instance = fibonacci_instance(f0, f1, num_terms)
    return circuit, instance, num_terms


def _sudoku(payload):
    grid = payload.get("grid")
    if grid is None:
        raise RequestError("grid 가 필요합니다")
    if not isinstance(grid, list):
        raise RequestError("grid 는 9×9 리스트여야 합니다")
    circuit = SudokuCircuit([_int_list(row, "grid") for row in grid])
    if "instance" in payload:
        instance = _int_list(payload["instance"], "instance")
    else:
        instance = sudoku_instance()
    return circuit, instance, "grid"


RELATIONS = {
    "fibonacci": _fibonacci,
    "sudoku": _sudoku,
}


def _parse(relation):
    if relation not in RELATIONS:
        return None
    return RELATIONS[relation](_payload())


def _keys(relation, structure, circuit):
    """(params, vk, pk). 처음 요청될 때 만든다.

    KEY_CACHE_SIZE 개를 넘으면 가장 오래 쓰이지 않은 항목을 버린다.
    """
    cache_key = (relation, structure)
    if cache_key in KEYS:
        KEYS.move_to_end(cache_key)
    else:
        params = default_params(circuit, seed=current_app.config["SRS_SEED"])
        vk = keygen_vk(params, circuit)
        pk = keygen_pk(params, vk, circuit)
        KEYS[cache_key] = (params, vk, pk)
        logger.info("keys generated for %s (%s): %r", relation, structure, vk)
        while len(KEYS) > current_app.config["KEY_CACHE_SIZE"]:
            evicted, _ = KEYS.popitem(last=False)
            logger.debug("keys evicted for %s (%s)", *evicted)
    return KEYS[cache_key]


def _transcript():
    return Transcript.by_name(current_app.config["TRANSCRIPT_HASH"])


def _unknown(relation):
    return jsonify({"error": f"unknown relation: {relation}"}), 404


# ─── 오류 응답 ───

@relations_bp.errorhandler(InstanceLengthError)
def handle_instance_length(exc):
    return jsonify({"error": str(exc), "expected": exc.expected, "actual": exc.actual}), 400


@relations_bp.errorhandler(ProofError)
def handle_proof_error(exc):
    return jsonify({"error": str(exc)}), 422


@relations_bp.errorhandler(BackendError)
def handle_backend_error(exc):
    return jsonify({"error": str(exc)}), 500


@relations_bp.errorhandler(ValueError)
def handle_bad_request(exc):
    return jsonify({"error": str(exc)}), 400


# ──────────────────────────────────────────────────────────────
# 엔드포인트
# ──────────────────────────────────────────────────────────────

@relations_bp.route("", methods=["GET"])
def list_relations():
    return jsonify({"relations": sorted(RELATIONS)})


@relations_bp.route("/<relation>/check", methods=["POST"])
def check(relation):
    """로컬 검사. 모든 위반을 돌려준다."""
    parsed = _parse(relation)
    if parsed is None:
        return _unknown(relation)
    circuit, instance, _ = parsed
    failures = MockProver.run(circuit, instance).verify()
    return jsonify({"relation": relation,
                    "ok": not failures,
                    "failures": [repr(f) for f in failures]})


@relations_bp.route("/<relation>/prove", methods=["POST"])
def prove(relation):
    """증명을 만들어 저장한다."""
    parsed = _parse(relation)
    if parsed is None:
        return _unknown(relation)
    circuit, instance, structure = parsed
    params, vk, pk = _keys(relation, structure, circuit)

    proof = create_proof(params, pk, circuit, instance, transcript=_transcript())

    proof_id = uuid.uuid4().hex
    record = {
        "relation": relation,
        "structure": structure,
        "instance": serialize_fr_list(instance),
        "proof": serialize_proof(proof),
    }
    db_set(f"proof.{proof_id}", record)
    logger.info("stored proof %s for %s", proof_id, relation)

    return jsonify({
        "id": proof_id,
        "relation": relation,
        "a_comm": g1_short(proof.a_comm),
        "r_eval": fr_short(proof.r_eval),
    }), 201


@relations_bp.route("/<relation>/verify", methods=["POST"])
def verify(relation):
    """증명을 검증한다.

    본문: {"proof_id": "..."} 또는 {"proof": {...}, "instance": [...]}
    proof_id 와 함께 instance 를 주면 저장된 공개 입력 대신 그것으로 검증한다.
    """
    if relation not in RELATIONS:
        return _unknown(relation)
    payload = _payload()

    if "proof_id" in payload:
        record = db_get(f"proof.{payload['proof_id']}")
        if record is None or record["relation"] != relation:
            return jsonify({"error": "proof not found"}), 404
        proof_data = record["proof"]
        structure = record["structure"]
        instance = payload.get("instance", record["instance"])
    elif "proof" in payload and "instance" in payload:
        proof_data = payload["proof"]
        if relation == "fibonacci":
            structure = _num_terms(payload.get("num_terms", 10))
        else:
            structure = "grid"
        instance = payload["instance"]
    else:
        raise RequestError("proof_id 또는 proof + instance 가 필요합니다")

    instance = _int_list(instance, "instance")
    try:
        proof = deserialize_proof(proof_data)
    except (KeyError, TypeError) as exc:
        raise RequestError("증명 형식이 잘못되었습니다") from exc

    if relation == "fibonacci":
        circuit = FibonacciCircuit(structure)
    else:
        circuit = SudokuCircuit()
    params, vk, _ = _keys(relation, structure, circuit)

    valid = verify_proof(params, vk, proof, instance, transcript=_transcript())
    return jsonify({"relation": relation, "valid": valid})


@relations_bp.route("/<relation>/run", methods=["POST"])
def run(relation):
    """로컬 검사부터 검증까지 한 번에 돌리고 단계별 결과를 돌려준다. 저장하지 않는다."""
    parsed = _parse(relation)
    if parsed is None:
        return _unknown(relation)
    circuit, instance, structure = parsed
    params, _, _ = _keys(relation, structure, circuit)
    report = run_relation(circuit, instance, params=params, transcript_factory=_transcript)
    return jsonify(dict(serialize_report(report), relation=relation))


@relations_bp.route("/<relation>/vk", methods=["GET"])
def verifying_key(relation):
    """검증 키 요약 (기본 구조)."""
    if relation not in RELATIONS:
        return _unknown(relation)
    if relation == "fibonacci":
        structure = _num_terms(_int(request.args.get("num_terms", 10), "num_terms"))
        circuit = FibonacciCircuit(structure)
    else:
        structure, circuit = "grid", SudokuCircuit()
    _, vk, _ = _keys(relation, structure, circuit)
    return jsonify(summarize_vk(vk))


@relations_bp.route("/proofs/<proof_id>", methods=["GET"])
def get_proof(proof_id):
    record = db_get(f"proof.{proof_id}")
    if record is None:
        return jsonify({"error": "proof not found"}), 404
    return jsonify(dict(record, id=proof_id))
