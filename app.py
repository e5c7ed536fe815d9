from __future__ import annotations

import logging
import os
import random
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, jsonify, request

from kulki_core.board import Coord
from kulki_core.config import GameConfig
from kulki_core.engine import TurnEngine
from kulki_core.errors import KulkiError, NoPathExists
from kulki_core.paths import find_path, reachable_from
from kulki_core.presenters import RecordingPresenter
from kulki_core.score import SqliteHighScoreStore
from kulki_core.state import GameSnapshot, Phase

logger = logging.getLogger(__name__)

DEFAULT_DB = os.getenv("KULKI_DB", "data/kulki.db")

app = Flask(__name__)


# ---------- JSON helpers ----------

def config_to_json(cfg: GameConfig) -> Dict[str, Any]:
    return {
        "width": cfg.width,
        "height": cfg.height,
        "colorsCount": cfg.colors_count,
        "marblesPerSpawn": cfg.marbles_per_spawn,
        "lineLength": cfg.line_length,
    }


def state_to_json(s: GameSnapshot) -> Dict[str, Any]:
    return {
        "config": config_to_json(s.config),
        "marbles": [{"at": [int(x), int(y)], "color": int(color)} for (x, y), color in s.marbles],
        "next": [int(c) for c in s.next_colors],
        "score": int(s.score),
        "phase": s.phase.value,
    }


def _coord(obj: Any) -> Coord:
    x, y = obj
    return int(x), int(y)


def json_to_state(obj: Dict[str, Any]) -> GameSnapshot:
    cfg = GameConfig.from_mapping(obj.get("config") or {})
    marbles = tuple(sorted((_coord(m["at"]), int(m["color"])) for m in obj.get("marbles", [])))
    return GameSnapshot(
        config=cfg,
        marbles=marbles,
        next_colors=tuple(int(c) for c in obj.get("next", [])),
        score=int(obj.get("score", 0)),
        phase=Phase(obj.get("phase", Phase.AWAIT_MOVE.value)),
    )


def _body() -> Dict[str, Any]:
    body = request.get_json(force=True, silent=True)
    return body if isinstance(body, dict) else {}


def _bad_request(message: str, **extra: Any) -> Tuple[Any, int]:
    payload: Dict[str, Any] = {"ok": False, "error": message}
    payload.update(extra)
    return jsonify(payload), 400


def _new_engine(cfg: GameConfig, seed: Optional[int]) -> Tuple[TurnEngine, RecordingPresenter]:
    presenter = RecordingPresenter()
    engine = TurnEngine(cfg, presenter, SqliteHighScoreStore(DEFAULT_DB), random.Random(seed))
    return engine, presenter


def _resume(body: Dict[str, Any]) -> Tuple[TurnEngine, RecordingPresenter]:
    s_in = body.get("state")
    if not isinstance(s_in, dict):
        raise ValueError("state required")
    snapshot = json_to_state(s_in)
    if snapshot.finished:
        raise ValueError("game is finished")
    engine, presenter = _new_engine(snapshot.config, body.get("seed"))
    engine.resume(snapshot)
    # Drop the board_ready and spawned events that replay the posted board.
    del presenter.events[:2]
    return engine, presenter


def _result(engine: TurnEngine, presenter: RecordingPresenter) -> Dict[str, Any]:
    return {
        "ok": True,
        "state": state_to_json(engine.snapshot()),
        "events": presenter.events,
        "finished": engine.phase == Phase.FINISHED,
    }


# ---------- Game API ----------

@app.post("/api/new")
def api_new() -> Any:
    body = _body()
    try:
        cfg = GameConfig.from_mapping(body.get("config") or {})
    except KulkiError as e:
        return _bad_request(str(e))
    engine, presenter = _new_engine(cfg, body.get("seed"))
    engine.start()
    return jsonify(_result(engine, presenter))


@app.post("/api/move")
def api_move() -> Any:
    body = _body()
    try:
        engine, presenter = _resume(body)
        start = _coord(body["from"])
        dest = _coord(body["to"])
    except (KeyError, TypeError, ValueError) as e:
        return _bad_request(f"bad request: {e}")
    engine.request_select(start)
    if not engine.request_move(start, dest):
        reachable: List[Coord] = []
        if engine.grid.in_bounds(start) and engine.grid.occupant(start) is not None:
            reachable = sorted(reachable_from(engine.grid, start))
        return _bad_request("Illegal move", reachable=[list(c) for c in reachable],
                            state=state_to_json(engine.snapshot()), events=presenter.events,
                            finished=engine.phase == Phase.FINISHED)
    return jsonify(_result(engine, presenter))


@app.post("/api/reachable")
def api_reachable() -> Any:
    body = _body()
    try:
        engine, _ = _resume(body)
        start = _coord(body["from"])
        cells = sorted(reachable_from(engine.grid, start))
    except (KeyError, TypeError, ValueError) as e:
        return _bad_request(f"bad request: {e}")
    return jsonify({"ok": True, "reachable": [list(c) for c in cells]})


@app.post("/api/path")
def api_path() -> Any:
    body = _body()
    try:
        engine, _ = _resume(body)
        path = find_path(engine.grid, _coord(body["from"]), _coord(body["to"]))
    except NoPathExists:
        return _bad_request("no path")
    except (KeyError, TypeError, ValueError) as e:
        return _bad_request(f"bad request: {e}")
    return jsonify({"ok": True, "path": [list(c) for c in path]})


@app.post("/api/highscore")
def api_highscore() -> Any:
    body = _body()
    try:
        cfg = GameConfig.from_mapping(body.get("config") or {})
    except KulkiError as e:
        return _bad_request(str(e))
    store = SqliteHighScoreStore(DEFAULT_DB)
    return jsonify({"ok": True, "config": config_to_json(cfg), "highScore": store.load(cfg.score_key())})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    logging.basicConfig(level=os.getenv("KULKI_LOG_LEVEL", "INFO"))
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug)
