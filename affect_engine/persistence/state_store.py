"""
State persistence
-----------------
The engine itself never touches storage. Callers inject a StateStore (a
key/value port holding JSON-compatible dicts) and use the codecs below to
convert engine records to and from payloads.

Stores:
- JsonFileStore: one JSON file per key under a root directory, written
  atomically (temp file + rename).
- InMemoryStore: dict-backed, for tests and embedding.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional
import copy
import json
import logging
import os
from pathlib import Path

from affect_engine.emotion.memory import DEFAULT_HISTORY_SIZE, EmotionHistory
from affect_engine.emotion.types import AffectState
from affect_engine.sensitivity.bank import BankConfig, SensitivityBank
from affect_engine.sensitivity.catalog import CATEGORY_KEYS
from affect_engine.thresholds.adaptive import METRICS, RollingAverages
from affect_engine.utils.numeric import clamp, is_finite

logger = logging.getLogger(__name__)
if not logger.handlers:
	logger.addHandler(logging.NullHandler())

EMOTION_STATE_KEY = "emotion-state"
STRATEGY_WEIGHTS_KEY = "strategy-weights"
ROLLING_AVERAGES_KEY = "rolling-averages"
EMOTION_HISTORY_KEY = "emotion-history"
CYCLE_COUNTER_KEY = "cycle-counter"


class StateStore:
	"""Key/value port; payloads are JSON-compatible values."""

	def load(self, key: str) -> Optional[Any]:
		raise NotImplementedError

	def save(self, key: str, payload: Any) -> None:
		raise NotImplementedError


class InMemoryStore(StateStore):
	def __init__(self, initial: Optional[Mapping[str, Any]] = None):
		self._data: Dict[str, Any] = copy.deepcopy(dict(initial or {}))

	def load(self, key: str) -> Optional[Any]:
		return copy.deepcopy(self._data.get(key))

	def save(self, key: str, payload: Any) -> None:
		self._data[key] = copy.deepcopy(payload)

	def keys(self) -> List[str]:
		return list(self._data.keys())


class JsonFileStore(StateStore):
	"""
	Persist each key as <root>/<key>.json.
	Missing or empty files load as None; corrupt files are logged and also
	load as None so callers fall back to defaults.
	"""

	def __init__(self, root: Path = Path("state")):
		self.root = Path(root)

	def path_for(self, key: str) -> Path:
		return self.root / f"{key}.json"

	def load(self, key: str) -> Optional[Any]:
		path = self.path_for(key)
		if not path.exists():
			logger.info("State file %s missing; using defaults", path)
			return None
		try:
			content = path.read_text(encoding="utf-8")
			if not content.strip():
				return None
			return json.loads(content)
		except Exception as exc:
			logger.exception("Failed to load %s: %s", path, exc)
			return None

	def save(self, key: str, payload: Any) -> None:
		self.root.mkdir(parents=True, exist_ok=True)
		path = self.path_for(key)
		tmp = path.with_name(path.name + ".tmp")
		try:
			tmp.write_text(json.dumps(payload, indent=2), encoding="utf-8")
			os.replace(tmp, path)
		except Exception:
			tmp.unlink(missing_ok=True)
			raise


# --- codecs -----------------------------------------------------------------

def affect_state_to_dict(state: AffectState) -> Dict[str, Any]:
	return {
		"emotions": dict(state.emotions),
		"dominant": state.dominant,
		"dominant_label": state.dominant_label,
		"compounds": list(state.compounds),
		"trigger": state.trigger,
		"mood_narrative": state.mood_narrative,
		"last_updated": state.last_updated,
		"temperament": dict(state.temperament),
	}


def _number(value: Any, default: float) -> float:
	return float(value) if is_finite(value) else default


def _finite_values(value: Any) -> Dict[str, float]:
	"""Numeric entries of a stored mapping; anything else is dropped."""
	if not isinstance(value, Mapping):
		return {}
	return {str(k): float(v) for k, v in value.items() if is_finite(v)}


def affect_state_from_dict(payload: Mapping[str, Any]) -> AffectState:
	"""Non-numeric emotion values fall back to the baseline; an unknown dominant raises ValueError."""
	emotions = _finite_values(payload.get("emotions"))
	compounds = payload.get("compounds")
	return AffectState(
		emotions=emotions,
		dominant=payload.get("dominant", "joy"),
		dominant_label=str(payload.get("dominant_label", "")),
		compounds=[str(c) for c in compounds] if isinstance(compounds, list) else [],
		trigger=str(payload.get("trigger", "")),
		mood_narrative=payload.get("mood_narrative"),
		last_updated=_number(payload.get("last_updated"), 0.0),
		temperament=_finite_values(payload.get("temperament")) or dict(emotions),
	)


def bank_to_dict(bank: SensitivityBank) -> Dict[str, Any]:
	return {"weights": dict(bank.weights), "last_updated": bank.last_updated}


def bank_from_dict(payload: Mapping[str, Any], config: BankConfig = BankConfig()) -> SensitivityBank:
	"""Missing categories come back neutral; stored values are re-clamped."""
	stored = _finite_values(payload.get("weights"))
	weights: Dict[str, float] = {}
	for key in CATEGORY_KEYS:
		weights[key] = clamp(stored.get(key, config.neutral), config.floor, config.ceiling)
	return SensitivityBank(weights=weights, last_updated=_number(payload.get("last_updated"), 0.0))


def rolling_averages_to_dict(avg: RollingAverages) -> Dict[str, Any]:
	return {"values": dict(avg.values), "cycles_tracked": avg.cycles_tracked, "last_updated": avg.last_updated}


def rolling_averages_from_dict(payload: Mapping[str, Any]) -> RollingAverages:
	"""Missing or non-numeric metrics restart from their seed."""
	stored = _finite_values(payload.get("values"))
	values = {m.key: stored.get(m.key, float(m.seed)) for m in METRICS}
	return RollingAverages(
		values=values,
		cycles_tracked=max(0, int(_number(payload.get("cycles_tracked"), 0))),
		last_updated=_number(payload.get("last_updated"), 0.0),
	)


def history_to_list(history: Iterable[AffectState]) -> List[Dict[str, Any]]:
	return [affect_state_to_dict(s) for s in history]


def history_from_list(payload: Optional[Iterable[Mapping[str, Any]]], max_entries: int = DEFAULT_HISTORY_SIZE) -> EmotionHistory:
	if payload is not None and not isinstance(payload, list):
		logger.warning("Ignoring emotion history of type %s; expected a list", type(payload).__name__)
		payload = None
	states: List[AffectState] = []
	for record in payload or []:
		try:
			states.append(affect_state_from_dict(record))
		except (AttributeError, TypeError, ValueError) as exc:
			logger.warning("Dropping malformed history entry: %s", exc)
	return EmotionHistory(states, max_entries=max_entries)
