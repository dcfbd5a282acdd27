"""
Emotion memory: streaks and volatility over a bounded history of states.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, List, Optional, Sequence

from affect_engine.emotion.types import RESTING_BASELINE, AffectState, EmotionInertia, EmotionMemory
from affect_engine.utils.numeric import safe_mean, safe_std

DEFAULT_HISTORY_SIZE = 500


class EmotionHistory:
	"""Ring buffer of recent affect states, oldest first."""

	def __init__(self, states: Iterable[AffectState] = (), max_entries: int = DEFAULT_HISTORY_SIZE):
		if max_entries < 1:
			raise ValueError("max_entries must be positive")
		self.max_entries = int(max_entries)
		self._states: Deque[AffectState] = deque(states, maxlen=self.max_entries)

	def append(self, state: AffectState) -> None:
		self._states.append(state)

	def recent(self, n: Optional[int] = None) -> List[AffectState]:
		states = list(self._states)
		if n is None:
			return states
		return states[-n:] if n > 0 else []

	def __len__(self) -> int:
		return len(self._states)

	def __iter__(self):
		return iter(list(self._states))


def analyze_emotion_memory(history: Sequence[AffectState]) -> EmotionMemory:
	"""Summarise streak, average dominant intensity and its volatility."""
	states = list(history)
	if len(states) < 2:
		return EmotionMemory(
			dominant_streak=0,
			streak_emotion="anticipation",
			average_intensity=RESTING_BASELINE,
			volatility=0.0,
			recent_states=states,
		)

	latest = states[-1].dominant
	streak = 1
	for state in reversed(states[:-1]):
		if state.dominant != latest:
			break
		streak += 1

	dominant_values = [s.emotions[s.dominant] for s in states]
	return EmotionMemory(
		dominant_streak=streak,
		streak_emotion=latest,
		average_intensity=safe_mean(dominant_values, default=RESTING_BASELINE),
		volatility=safe_std(dominant_values),
		recent_states=states,
	)


def inertia_from_memory(memory: EmotionMemory, min_streak: int = 3) -> Optional[EmotionInertia]:
	"""Inertia only exists once the same emotion has led for min_streak cycles."""
	if memory.dominant_streak < min_streak:
		return None
	return EmotionInertia(streak_emotion=memory.streak_emotion, streak_length=memory.dominant_streak)
