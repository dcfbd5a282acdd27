"""
Emotion Engine
--------------
Folds stimuli into the eight-dimensional affect vector and resolves the
resulting mood.

- decay: exponential pull toward the resting baseline over elapsed time.
- stimulate: diminishing-returns aggregation, damped by emotional inertia
  when one emotion has dominated for several cycles.
- update_mood: dominant emotion, intensity label and compound emotions.
- blend_temperament: slow moving average of the vector (long-term disposition).

All operations return a new AffectState and leave their inputs untouched.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import logging
import time

import numpy as np

from affect_engine.emotion.types import (
	COMPOUND_EMOTIONS,
	INTENSITY_LABELS,
	PRIMARY_EMOTIONS,
	RESTING_BASELINE,
	AffectState,
	EmotionInertia,
	Stimulus,
)
from affect_engine.utils.numeric import clamp01, half_life_factor, is_finite

logger = logging.getLogger(__name__)
if not logger.handlers:
	logger.addHandler(logging.NullHandler())


@dataclass
class EngineConfig:
	baseline: float = RESTING_BASELINE
	half_life_minutes: float = 180.0
	# Inertia: 1 / (1 + per_cycle * streak), never below the floor.
	inertia_min_streak: int = 3
	inertia_per_cycle: float = 0.15
	inertia_floor: float = 0.4
	compound_threshold: float = 0.45
	max_compounds: int = 3
	mild_below: float = 0.33
	moderate_below: float = 0.66
	temperament_alpha_min: float = 0.05
	temperament_alpha_max: float = 0.2


class EmotionEngine:
	"""Pure state transitions over AffectState."""

	def __init__(self, config: EngineConfig = EngineConfig()):
		self.config = config

	def decay(self, state: AffectState, minutes_elapsed: float) -> AffectState:
		"""
		Move every emotion toward the baseline:
		new = baseline + (old - baseline) * 2^(-minutes / half_life).
		Negative or non-finite elapsed time (clock skew) counts as zero.
		"""
		minutes = float(minutes_elapsed) if is_finite(minutes_elapsed) else 0.0
		if minutes < 0:
			logger.debug("decay received negative elapsed time %.2f; treating as 0", minutes)
			minutes = 0.0
		factor = half_life_factor(minutes, self.config.half_life_minutes)
		base = self.config.baseline
		emotions = {
			e: clamp01(base + (state.emotions[e] - base) * factor)
			for e in PRIMARY_EMOTIONS
		}
		return replace(state, emotions=emotions, compounds=list(state.compounds), temperament=dict(state.temperament))

	def inertia_factor(self, streak_length: int) -> float:
		"""Persistence scaling for stimuli that fight the streak emotion."""
		if streak_length < self.config.inertia_min_streak:
			return 1.0
		factor = 1.0 / (1.0 + self.config.inertia_per_cycle * streak_length)
		return max(self.config.inertia_floor, factor)

	def effective_intensity(self, stimulus: Stimulus, inertia: Optional[EmotionInertia] = None) -> float:
		intensity = stimulus.intensity
		if inertia is not None and stimulus.emotion != inertia.streak_emotion:
			intensity *= self.inertia_factor(inertia.streak_length)
		return intensity

	def stimulate(
		self,
		state: AffectState,
		stimuli: Iterable[Stimulus],
		inertia: Optional[EmotionInertia] = None,
		trigger: Optional[str] = None,
		now: Optional[float] = None,
	) -> AffectState:
		"""
		Apply each stimulus with e <- e + eff * (1 - e).
		The strongest effective stimulus becomes the trigger unless the caller
		supplies one; an empty batch keeps the previous trigger.
		"""
		emotions = dict(state.emotions)
		strongest: Optional[Tuple[float, Stimulus]] = None
		for stimulus in stimuli:
			eff = self.effective_intensity(stimulus, inertia)
			current = emotions[stimulus.emotion]
			emotions[stimulus.emotion] = clamp01(current + eff * (1.0 - current))
			if strongest is None or eff > strongest[0]:
				strongest = (eff, stimulus)

		if trigger is not None:
			new_trigger = trigger
		elif strongest is not None:
			new_trigger = strongest[1].source
		else:
			new_trigger = state.trigger

		return replace(
			state,
			emotions=emotions,
			compounds=list(state.compounds),
			temperament=dict(state.temperament),
			trigger=new_trigger,
			last_updated=time.time() if now is None else float(now),
		)

	def dominant_emotion(self, emotions: Dict[str, float]) -> str:
		# Strict comparison keeps the earliest wheel position on ties.
		best = PRIMARY_EMOTIONS[0]
		for emotion in PRIMARY_EMOTIONS[1:]:
			if emotions[emotion] > emotions[best]:
				best = emotion
		return best

	def intensity_label(self, emotion: str, value: float) -> str:
		mild, moderate, intense = INTENSITY_LABELS[emotion]
		if value < self.config.mild_below:
			return mild
		if value < self.config.moderate_below:
			return moderate
		return intense

	def detect_compounds(self, emotions: Dict[str, float]) -> List[str]:
		"""Named compounds for adjacent pairs that are both elevated, strongest first."""
		found: List[Tuple[float, int, str]] = []
		for index, (a, b, name) in enumerate(COMPOUND_EMOTIONS):
			strength = min(emotions[a], emotions[b])
			if emotions[a] >= self.config.compound_threshold and emotions[b] >= self.config.compound_threshold:
				found.append((strength, index, name))
		found.sort(key=lambda item: (-item[0], item[1]))
		return [name for _, _, name in found[: self.config.max_compounds]]

	def update_mood(self, state: AffectState) -> AffectState:
		dominant = self.dominant_emotion(state.emotions)
		return replace(
			state,
			emotions=dict(state.emotions),
			temperament=dict(state.temperament),
			dominant=dominant,
			dominant_label=self.intensity_label(dominant, state.emotions[dominant]),
			compounds=self.detect_compounds(state.emotions),
		)

	def blend_temperament(self, state: AffectState) -> AffectState:
		"""
		Shift the temperament toward the current vector. The blend rate grows
		with the gap between the two so volatile periods move it faster.
		"""
		current = np.array([state.emotions[e] for e in PRIMARY_EMOTIONS], dtype=np.float64)
		slow = np.array([state.temperament[e] for e in PRIMARY_EMOTIONS], dtype=np.float64)
		gap = float(np.mean(np.abs(current - slow)))
		lo, hi = self.config.temperament_alpha_min, self.config.temperament_alpha_max
		alpha = lo + (hi - lo) * min(gap * 3.0, 1.0)
		blended = np.clip(slow * (1.0 - alpha) + current * alpha, 0.0, 1.0)
		temperament = {e: float(v) for e, v in zip(PRIMARY_EMOTIONS, blended)}
		return replace(state, emotions=dict(state.emotions), compounds=list(state.compounds), temperament=temperament)

	def process(
		self,
		state: AffectState,
		minutes_elapsed: float,
		stimuli: Sequence[Stimulus],
		inertia: Optional[EmotionInertia] = None,
		trigger: Optional[str] = None,
		now: Optional[float] = None,
	) -> AffectState:
		"""Decay -> stimulate -> resolve mood, for already weighted stimuli."""
		decayed = self.decay(state, minutes_elapsed)
		stimulated = self.stimulate(decayed, stimuli, inertia=inertia, trigger=trigger, now=now)
		return self.update_mood(stimulated)
