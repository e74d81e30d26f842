import logging

from flask import Flask, jsonify

from tinydb import TinyDB
from tinydb.storages import MemoryStorage

from relation_routes import relations_bp, init_relations_bp

DEFAULT_CONFIG = {
    "SECRET_KEY": "key",
    "DB_PATH": "db.json",       # None 이면 메모리 DB
    "SRS_SEED": 12345,
    "TRANSCRIPT_HASH": "sha256",
    "MAX_NUM_TERMS": 64,        # 피보나치 num_terms 상한
    "KEY_CACHE_SIZE": 4,        # 프로세스에 보관할 (릴레이션, 구조) 키 수
}


def create_app(config=None):
    """Flask 앱을 만든다.

    설정 우선순위: DEFAULT_CONFIG < ZKREL_ 환경 변수 < config 인자
    """
    app = Flask(__name__)
    app.config.update(DEFAULT_CONFIG)
    app.config.from_prefixed_env("ZKREL")
    if config:
        app.config.update(config)

    if app.config["DB_PATH"]:
        db = TinyDB(app.config["DB_PATH"])     #Storage DB
    else:
        db = TinyDB(storage=MemoryStorage)     #Memory DB
    app.extensions["tinydb"] = db

    init_relations_bp(db.table("relations"))
    app.register_blueprint(relations_bp)

    @app.route("/")
    def index():
        return jsonify({"service": "zkrel", "relations": "/relations"})

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_app().run(debug=True)
