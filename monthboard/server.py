#!/usr/bin/env python3
"""
Monthly Board Server
--------------------
JSON API over a MonthlyBoard, for a front end that renders the columns.

Usage:
    export MONTHBOARD_TOKEN=<bearer token>
    python -m monthboard.server --config monthboard.yaml

API:
    GET    /api/board                  → board snapshot
    POST   /api/month/previous         → switch to previous month
    POST   /api/month/next             → switch to next month
    POST   /api/month/refresh          → reload current month
    POST   /api/tasks                  → JSON body: { title }
    POST   /api/tasks/move             → { source, source_index, dest, dest_index }
    POST   /api/tasks/<id>/edit        → open edit session
    PUT    /api/edit/draft             → { title }
    DELETE /api/edit                   → cancel edit session
    POST   /api/tasks/<id>/save        → { column }
    DELETE /api/tasks/<id>?column=…    → delete task
    POST   /api/tasks/<id>/menu-move   → { source, dest }

Errors:
    401 when the task store needs a fresh login (body carries login_url)
    400 for unknown columns, missing fields or a body that is not a JSON object
    409 when another task is being edited and switching is disabled
    502 when the task store rejected the change (board unchanged)
"""

import logging
import sys

from flask import Flask, abort, jsonify, request

from .client import TaskStoreClient, env_token_source
from .config import Config
from .controller import MonthlyBoard
from .errors import AuthenticationRequired, EditInProgress
from .schema import UnknownColumn

logger = logging.getLogger(__name__)


def create_app(board: MonthlyBoard, config: Config = None) -> Flask:
    config = config or board.config
    app = Flask(__name__)

    def snapshot(status: int = 200):
        data = board.board.to_dict()
        data["new_title"] = board.new_title
        return jsonify(data), status

    def committed(ok: bool):
        # A failed store call leaves the board untouched; report that state
        return snapshot(200 if ok else 502)

    def json_body() -> dict:
        data = request.get_json(force=True, silent=True)
        if data is None:
            return {}
        if not isinstance(data, dict):
            abort(400, description="request body must be a JSON object")
        return data

    def text_field(data: dict, name: str) -> str:
        value = data.get(name, "")
        if not isinstance(value, str):
            abort(400, description=f"{name} must be a string")
        return value

    # ── Errors ───────────────────────────────────────────────────────────────

    @app.errorhandler(400)
    def bad_request(e):
        return jsonify({"error": e.description}), 400

    @app.errorhandler(AuthenticationRequired)
    def auth_required(e):
        logger.warning(f"Authentication required: {e}")
        return jsonify({"error": str(e), "login_url": config.login_url}), 401

    @app.errorhandler(UnknownColumn)
    def unknown_column(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(EditInProgress)
    def edit_in_progress(e):
        return jsonify({"error": str(e), "task_id": e.task_id}), 409

    # ── Month ────────────────────────────────────────────────────────────────

    @app.route("/api/board")
    def api_board():
        return snapshot()

    @app.route("/api/month/previous", methods=["POST"])
    def api_previous_month():
        return committed(board.previous_month())

    @app.route("/api/month/next", methods=["POST"])
    def api_next_month():
        return committed(board.next_month())

    @app.route("/api/month/refresh", methods=["POST"])
    def api_refresh():
        return committed(board.refresh())

    # ── Tasks ────────────────────────────────────────────────────────────────

    @app.route("/api/tasks", methods=["POST"])
    def api_add_task():
        data = json_body()
        title = text_field(data, "title")
        board.new_title = title
        if not title.strip():
            return jsonify({"error": "title is required"}), 400
        return committed(board.add())

    @app.route("/api/tasks/move", methods=["POST"])
    def api_move_task():
        data = json_body()
        if data.get("source") is None or data.get("source_index") is None:
            return jsonify({"error": "source and source_index are required"}), 400
        try:
            source_index = int(data["source_index"])
            dest_index = int(data["dest_index"]) if data.get("dest_index") is not None else None
        except (TypeError, ValueError):
            return jsonify({"error": "indexes must be integers"}), 400
        return committed(board.reorder_or_move(
            data["source"], source_index, data.get("dest"), dest_index,
        ))

    @app.route("/api/tasks/<task_id>", methods=["DELETE"])
    def api_delete_task(task_id):
        column = request.args.get("column")
        if not column:
            return jsonify({"error": "column is required"}), 400
        return committed(board.delete(task_id, column))

    @app.route("/api/tasks/<task_id>/menu-move", methods=["POST"])
    def api_menu_move(task_id):
        data = json_body()
        if not data.get("source") or not data.get("dest"):
            return jsonify({"error": "source and dest are required"}), 400
        return committed(board.move_via_menu(task_id, data["source"], data["dest"]))

    # ── Edit session ─────────────────────────────────────────────────────────

    @app.route("/api/tasks/<task_id>/edit", methods=["POST"])
    def api_start_edit(task_id):
        if not board.start_edit(task_id):
            return jsonify({"error": "Task not found"}), 404
        return snapshot()

    @app.route("/api/edit/draft", methods=["PUT"])
    def api_update_draft():
        data = json_body()
        if not board.update_draft(text_field(data, "title")):
            return jsonify({"error": "No task is being edited"}), 409
        return snapshot()

    @app.route("/api/edit", methods=["DELETE"])
    def api_cancel_edit():
        board.cancel_edit()
        return snapshot()

    @app.route("/api/tasks/<task_id>/save", methods=["POST"])
    def api_save_edit(task_id):
        data = json_body()
        if not data.get("column"):
            return jsonify({"error": "column is required"}), 400
        return committed(board.save_edit(task_id, data["column"]))

    @app.route("/health")
    def health():
        return jsonify({
            "status": "ok",
            "store": board.client.health(),
            "month": board.window.display(),
        })

    return app


# ── Main ─────────────────────────────────────────────────────────────────────

def main(argv=None):
    import argparse

    parser = argparse.ArgumentParser(description="Monthly Board Server")
    parser.add_argument("--config", help="Path to monthboard.yaml (overrides MONTHBOARD_CONFIG)")
    parser.add_argument("--host", help="Bind address (use 0.0.0.0 to expose on network)")
    parser.add_argument("--port", type=int)
    args = parser.parse_args(argv)

    config = Config.load(args.config)
    logging.basicConfig(
        level=getattr(logging, str(config.log_level).upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    client = TaskStoreClient(
        config.api_base_url,
        env_token_source(config.token_env),
        timeout=config.request_timeout,
    )
    board = MonthlyBoard(client, config)
    try:
        board.refresh()
    except AuthenticationRequired as e:
        logger.warning(f"Initial load skipped: {e}")

    host = args.host or config.host
    port = args.port or config.port
    logger.info(f"Serving {board.window.display()} on http://{host}:{port} (store: {config.api_base_url})")
    create_app(board, config).run(host=host, port=port, debug=False, threaded=True)


if __name__ == "__main__":
    main()
