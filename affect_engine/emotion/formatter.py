"""
Human-readable renderings of affect states for prompts and dashboards.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Sequence

from affect_engine.emotion.engine import EmotionEngine
from affect_engine.emotion.types import PRIMARY_EMOTIONS, AffectState

DORMANT_BELOW = 0.10

_BUCKETS = (
	(0.10, "barely there"),
	(0.25, "faint"),
	(0.40, "moderate"),
	(0.55, "strong"),
	(0.70, "intense"),
	(0.85, "overwhelming"),
)


def intensity_bucket(value: float) -> str:
	for upper, name in _BUCKETS:
		if value < upper:
			return name
	return "all-consuming"


def format_state(state: AffectState, engine: EmotionEngine = EmotionEngine()) -> str:
	lines: List[str] = ["Current emotional state:"]
	ranked = sorted(state.emotions.items(), key=lambda kv: kv[1], reverse=True)
	for emotion, value in ranked:
		if value >= DORMANT_BELOW:
			lines.append(f"  {emotion}: {intensity_bucket(value)} ({engine.intensity_label(emotion, value)})")
	dormant = [e for e, v in ranked if v < DORMANT_BELOW]
	if dormant:
		lines.append(f"  dormant: {', '.join(dormant)}")
	if state.compounds:
		lines.append(f"Compound emotions: {', '.join(state.compounds)}")
	lines.append(f"Dominant feeling: {state.dominant_label} ({state.dominant})")
	lines.append(f"What triggered it: {state.trigger or 'nothing in particular'}")
	return "\n".join(lines)


def format_history(history: Sequence[AffectState], limit: int = 5) -> str:
	if not history:
		return "No previous emotion history yet."
	lines: List[str] = []
	for state in list(history)[-limit:]:
		stamp = datetime.fromtimestamp(state.last_updated, tz=timezone.utc).isoformat()
		lines.append(f"[{stamp}] {state.dominant_label} ({state.dominant}) - trigger: {state.trigger}")
		if state.compounds:
			lines.append(f"  compounds: {', '.join(state.compounds)}")
	return "\n".join(lines)


def to_byte_scale(state: AffectState) -> List[int]:
	"""Affect vector as 0-255 integers in wheel order."""
	return [int(round(state.emotions[e] * 255)) for e in PRIMARY_EMOTIONS]
