from __future__ import annotations

import logging
import os
from typing import Any, Dict, Mapping, Tuple

from flask import Flask, jsonify, request

from assigner import (
    CHILDREN_IDS,
    CHILDREN_RECORDS,
    AssignmentState,
    AssignmentStore,
    InvalidMove,
    Item,
    PersistenceFailure,
    SnapshotGateway,
    UndoHistory,
    apply_move,
    attached_ids,
    catalog_problems,
    history_to_json,
    item_to_json,
    json_to_history,
    json_to_state,
    placeholder_catalog,
    state_to_json,
    toggle_expanded,
    undo,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_DB = os.getenv("ASSIGN_DB", "data/assignments.db")
CATALOG_SIZE = int(os.getenv("ASSIGN_CATALOG_SIZE", "8"))

app = Flask(__name__)


def load_catalog() -> Tuple[Item, ...]:
    return placeholder_catalog(CATALOG_SIZE)


def make_gateway() -> SnapshotGateway:
    return SnapshotGateway(DEFAULT_DB)


def _children_mode(value: Any) -> str:
    return CHILDREN_IDS if value == CHILDREN_IDS else CHILDREN_RECORDS


def _json_body() -> Dict[str, Any]:
    body = request.get_json(force=True, silent=True)
    return body if isinstance(body, dict) else {}


def _read_session(body: Mapping[str, Any]) -> Tuple[AssignmentState, UndoHistory]:
    """Decodes state and history, rejecting a state that does not partition the catalog."""
    s_in = body.get("state")
    if not isinstance(s_in, dict):
        raise ValueError("state required")
    catalog = load_catalog()
    state = json_to_state(s_in, {it.id: it for it in catalog})
    problems = catalog_problems(state, catalog)
    if problems:
        raise ValueError("; ".join(problems))
    return state, json_to_history(body.get("history"))


def _session_json(state: AssignmentState, history: UndoHistory, mode: str = CHILDREN_RECORDS) -> Dict[str, Any]:
    return {
        "state": state_to_json(state, mode),
        "history": history_to_json(history),
        "predecessors": attached_ids(state),
        "canUndo": bool(history),
    }


@app.get("/api/items")
def api_items() -> Any:
    mode = _children_mode(request.args.get("children"))
    try:
        store = AssignmentStore.load(make_gateway(), load_catalog())
    except ValueError as e:
        LOGGER.warning("saved snapshot unusable: %s", e)
        return jsonify({"ok": False, "error": f"bad snapshot: {e}"}), 500
    state, history = store.snapshot()
    out = {"ok": True, "catalog": [item_to_json(it) for it in load_catalog()]}
    out.update(_session_json(state, history, mode))
    return jsonify(out)


@app.post("/api/move")
def api_move() -> Any:
    body = _json_body()
    try:
        state, history = _read_session(body)
        mv = body["move"]
        item_id = int(mv["itemId"])
        source = str(mv.get("source", "pool"))
        source_index = int(mv["sourceIndex"])
        dest_index = int(mv["destIndex"])
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad request: {e}"}), 400
    try:
        next_state, next_history, step = apply_move(state, history, item_id, source, source_index, dest_index)
    except InvalidMove as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    out = {"ok": True, "step": history_to_json((step,))[0]}
    out.update(_session_json(next_state, next_history, _children_mode(body.get("children"))))
    return jsonify(out)


@app.post("/api/undo")
def api_undo() -> Any:
    body = _json_body()
    try:
        state, history = _read_session(body)
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad request: {e}"}), 400
    next_state, next_history = undo(state, history)
    out = {"ok": True, "undone": len(next_history) < len(history)}
    out.update(_session_json(next_state, next_history, _children_mode(body.get("children"))))
    return jsonify(out)


@app.post("/api/toggle")
def api_toggle() -> Any:
    body = _json_body()
    try:
        state, history = _read_session(body)
        group_id = int(body["groupId"])
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad request: {e}"}), 400
    try:
        next_state = toggle_expanded(state, group_id)
    except LookupError as e:
        return jsonify({"ok": False, "error": str(e)}), 404
    out = {"ok": True}
    out.update(_session_json(next_state, history, _children_mode(body.get("children"))))
    return jsonify(out)


@app.post("/api/save")
def api_save() -> Any:
    body = _json_body()
    try:
        state, history = _read_session(body)
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad request: {e}"}), 400
    store = AssignmentStore(state, history)
    try:
        store.save(make_gateway())
    except PersistenceFailure as e:
        out = {"ok": False, "error": f"save failed: {e}"}
        out.update(_session_json(state, history, _children_mode(body.get("children"))))
        return jsonify(out), 500
    out = {"ok": True}
    out.update(_session_json(*store.snapshot(), _children_mode(body.get("children"))))
    return jsonify(out)


# Entrypoint for "python app.py"
if __name__ == "__main__":
    debug = os.getenv("FLASK_DEBUG", os.getenv("ASSIGN_DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO)
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "3000"))
    app.run(host=host, port=port, debug=debug)
