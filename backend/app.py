"""
Flask introspection API for the affect engine.

Read-only views over persisted state: current affect, sensitivity weights,
adaptive thresholds and the learning report. Cycles themselves run elsewhere
(see run_cycle.py); this app never mutates state.
"""
from __future__ import annotations

import sys
from pathlib import Path
# Ensure project root is importable when running this file directly from the backend/ directory
_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
	sys.path.insert(0, str(_ROOT))

from typing import Optional
import logging
import os

from flask import Flask, jsonify
from flask_cors import CORS

from affect_engine.cycle.runner import AffectCycle
from affect_engine.emotion.formatter import format_state, to_byte_scale
from affect_engine.persistence.state_store import (
	JsonFileStore,
	StateStore,
	affect_state_to_dict,
	bank_to_dict,
)

logger = logging.getLogger(__name__)
if not logger.handlers:
	logger.addHandler(logging.NullHandler())


def create_app(store: Optional[StateStore] = None) -> Flask:
	if store is None:
		store = JsonFileStore(Path(os.environ.get("AFFECT_STATE_DIR", _ROOT / "state")))
	cycle = AffectCycle(store)

	app = Flask("affect-engine")
	CORS(app, resources={r"/api/*": {"origins": "*"}})

	@app.get("/")
	def root():
		return jsonify({
			"service": "affect-engine",
			"status": "ok",
			"message": "Read-only introspection. Use /api/* endpoints.",
			"examples": ["/api/health", "/api/state", "/api/weights", "/api/thresholds", "/api/learning"],
		})

	@app.get("/api/health")
	def api_health():
		return jsonify({"status": "ok", "cycles": cycle.cycle_count()})

	@app.get("/api/state")
	def api_state():
		state = cycle.load_state()
		return jsonify({
			"state": affect_state_to_dict(state),
			"summary": format_state(state, cycle.engine),
			"byte_scale": to_byte_scale(state),
		})

	@app.get("/api/weights")
	def api_weights():
		return jsonify(bank_to_dict(cycle.load_bank()))

	@app.get("/api/thresholds")
	def api_thresholds():
		return jsonify(cycle.thresholds().to_dict())

	@app.get("/api/learning")
	def api_learning():
		return jsonify(cycle.learning_stats().to_dict())

	return app


if __name__ == "__main__":
	logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
	create_app().run(host="127.0.0.1", port=8000, debug=False)
