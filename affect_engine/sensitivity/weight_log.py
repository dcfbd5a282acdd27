"""
Weight change log
-----------------
Append-only JSON Lines history of sensitivity weight changes. Each line holds
one event with the individual changes and a snapshot of all weights after
the event: passive decay, or an adjustment batch tagged with its source
(a reflection pass or a prophecy review, both supplied by the caller).
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional
import json
import logging
import os
import time
from pathlib import Path

from affect_engine.sensitivity.bank import AuditEntry

logger = logging.getLogger(__name__)
if not logger.handlers:
	logger.addHandler(logging.NullHandler())

# Adjustment batches are logged under the source that proposed them.
ADJUSTMENT_SOURCES = ("reflection", "prophecy")
ENTRY_TYPES = ("decay",) + ADJUSTMENT_SOURCES
MIN_DECAY_DELTA = 1e-4


@dataclass
class WeightChange:
	category: str
	before: float
	after: float
	delta: float
	reason: Optional[str] = None


@dataclass
class WeightChangeEntry:
	timestamp: float
	cycle: int
	type: str
	changes: List[WeightChange] = field(default_factory=list)
	weights_snapshot: Dict[str, float] = field(default_factory=dict)

	@classmethod
	def from_dict(cls, payload: Mapping[str, Any]) -> "WeightChangeEntry":
		return cls(
			timestamp=float(payload.get("timestamp", 0.0)),
			cycle=int(payload.get("cycle", 0)),
			type=str(payload.get("type", "")),
			changes=[WeightChange(**c) for c in payload.get("changes", [])],
			weights_snapshot={k: float(v) for k, v in (payload.get("weights_snapshot") or {}).items()},
		)


def diff_weights(before: Mapping[str, float], after: Mapping[str, float], min_delta: float = MIN_DECAY_DELTA) -> List[WeightChange]:
	changes: List[WeightChange] = []
	for key, old in before.items():
		new = float(after.get(key, old))
		if abs(new - old) > min_delta:
			changes.append(WeightChange(category=key, before=float(old), after=new, delta=new - float(old)))
	return changes


class WeightChangeLog:
	"""JSONL audit trail, trimmed to the most recent max_entries on load."""

	def __init__(self, path: Path = Path("state/weight-history.jsonl"), max_entries: int = 1000):
		self.path = Path(path)
		self.max_entries = int(max_entries)

	def record(
		self,
		cycle: int,
		entry_type: str,
		changes: List[WeightChange],
		weights: Mapping[str, float],
		now: Optional[float] = None,
	) -> Optional[WeightChangeEntry]:
		"""Append one entry; nothing is written when there are no changes."""
		if entry_type not in ENTRY_TYPES:
			raise ValueError(f"Unknown weight log entry type: {entry_type}")
		if not changes:
			return None
		entry = WeightChangeEntry(
			timestamp=time.time() if now is None else float(now),
			cycle=int(cycle),
			type=entry_type,
			changes=list(changes),
			weights_snapshot=dict(weights),
		)
		self.path.parent.mkdir(parents=True, exist_ok=True)
		with self.path.open("a", encoding="utf-8") as fh:
			fh.write(json.dumps(asdict(entry)) + "\n")
		return entry

	def record_decay(self, cycle: int, before: Mapping[str, float], after: Mapping[str, float], now: Optional[float] = None) -> Optional[WeightChangeEntry]:
		return self.record(cycle, "decay", diff_weights(before, after), after, now=now)

	def record_adjustments(
		self,
		cycle: int,
		entry_type: str,
		applied: Iterable[AuditEntry],
		weights: Mapping[str, float],
		now: Optional[float] = None,
	) -> Optional[WeightChangeEntry]:
		changes = [
			WeightChange(category=a.category, before=a.before, after=a.after, delta=a.delta, reason=a.reason)
			for a in applied
		]
		return self.record(cycle, entry_type, changes, weights, now=now)

	def load(self) -> List[WeightChangeEntry]:
		if not self.path.exists():
			return []
		entries: List[WeightChangeEntry] = []
		try:
			for line in self.path.read_text(encoding="utf-8").splitlines():
				if line.strip():
					entries.append(WeightChangeEntry.from_dict(json.loads(line)))
		except Exception as exc:
			logger.exception("Failed to read weight history %s: %s", self.path, exc)
			return []
		if len(entries) > self.max_entries:
			entries = entries[-self.max_entries:]
			self._rewrite(entries)
		return entries

	def _rewrite(self, entries: List[WeightChangeEntry]) -> None:
		tmp = self.path.with_name(self.path.name + ".tmp")
		try:
			tmp.write_text("".join(json.dumps(asdict(e)) + "\n" for e in entries), encoding="utf-8")
			os.replace(tmp, self.path)
		except Exception:
			tmp.unlink(missing_ok=True)
			raise
