"""
Affect Cycle
------------
One full pass of the engine over persisted state:

	load -> decay affect -> decay weights -> weight stimuli -> stimulate
	(with inertia from history) -> resolve mood -> blend temperament
	-> update rolling averages -> persist

Weight adjustments are a cycle-end operation (`apply_adjustments`), so the
stimuli of a cycle are always weighted with the bank as it stood after that
cycle's passive decay. Cycles against one store must not run concurrently;
callers serialize them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Union
import logging
import time

from affect_engine.emotion.engine import EmotionEngine
from affect_engine.emotion.memory import (
	DEFAULT_HISTORY_SIZE,
	EmotionHistory,
	analyze_emotion_memory,
	inertia_from_memory,
)
from affect_engine.emotion.types import AffectState, EmotionInertia, EmotionMemory, Stimulus
from affect_engine.introspection.learning_stats import LearningConfig, LearningStats, compute_learning_stats
from affect_engine.persistence.state_store import (
	CYCLE_COUNTER_KEY,
	EMOTION_HISTORY_KEY,
	EMOTION_STATE_KEY,
	ROLLING_AVERAGES_KEY,
	STRATEGY_WEIGHTS_KEY,
	StateStore,
	affect_state_from_dict,
	affect_state_to_dict,
	bank_from_dict,
	bank_to_dict,
	history_from_list,
	history_to_list,
	rolling_averages_from_dict,
	rolling_averages_to_dict,
)
from affect_engine.sensitivity.bank import (
	AdjustmentOutcome,
	BankConfig,
	SensitivityBank,
	WeightAdjustment,
	apply_adjustments,
	apply_strategy_weights,
	create_default_bank,
	decay_weights,
)
from affect_engine.sensitivity.weight_log import ADJUSTMENT_SOURCES, WeightChangeLog
from affect_engine.thresholds.adaptive import (
	AdaptiveThresholds,
	RollingAverages,
	ThresholdConfig,
	compute_adaptive_thresholds,
	create_default_rolling_averages,
	update_rolling_averages,
)

logger = logging.getLogger(__name__)
if not logger.handlers:
	logger.addHandler(logging.NullHandler())

StimulusLike = Union[Stimulus, Mapping[str, Any]]


@dataclass
class CycleResult:
	cycle: int
	state: AffectState
	bank: SensitivityBank
	weighted_stimuli: List[Stimulus] = field(default_factory=list)
	inertia: Optional[EmotionInertia] = None
	memory: Optional[EmotionMemory] = None
	thresholds: Optional[AdaptiveThresholds] = None


def coerce_stimuli(items: Iterable[StimulusLike]) -> List[Stimulus]:
	"""Accept Stimulus objects or plain dicts; malformed records are skipped."""
	stimuli: List[Stimulus] = []
	for item in items:
		if isinstance(item, Stimulus):
			stimuli.append(item)
			continue
		try:
			stimuli.append(Stimulus.from_dict(item))
		except (AttributeError, TypeError, ValueError) as exc:
			logger.warning("Skipping malformed stimulus %r: %s", item, exc)
	return stimuli


class AffectCycle:
	"""Orchestrates engine cycles against an injected StateStore."""

	def __init__(
		self,
		store: StateStore,
		engine: Optional[EmotionEngine] = None,
		bank_config: BankConfig = BankConfig(),
		threshold_config: ThresholdConfig = ThresholdConfig(),
		learning_config: LearningConfig = LearningConfig(),
		weight_log: Optional[WeightChangeLog] = None,
		history_size: int = DEFAULT_HISTORY_SIZE,
	):
		self.store = store
		self.engine = engine or EmotionEngine()
		self.bank_config = bank_config
		self.threshold_config = threshold_config
		self.learning_config = learning_config
		self.weight_log = weight_log
		self.history_size = history_size

	# --- loading ------------------------------------------------------------
	# Stored payloads that decode but do not fit their codec are logged and
	# replaced by defaults, same as unreadable files.

	def load_state(self, now: Optional[float] = None) -> AffectState:
		payload = self.store.load(EMOTION_STATE_KEY)
		if payload:
			try:
				return affect_state_from_dict(payload)
			except (AttributeError, TypeError, ValueError) as exc:
				logger.exception("Malformed %s payload, starting from rest: %s", EMOTION_STATE_KEY, exc)
		return AffectState.resting(now=now)

	def load_bank(self) -> SensitivityBank:
		payload = self.store.load(STRATEGY_WEIGHTS_KEY)
		if payload:
			try:
				return bank_from_dict(payload, self.bank_config)
			except (AttributeError, TypeError, ValueError) as exc:
				logger.exception("Malformed %s payload, using neutral weights: %s", STRATEGY_WEIGHTS_KEY, exc)
		return create_default_bank()

	def load_averages(self) -> RollingAverages:
		payload = self.store.load(ROLLING_AVERAGES_KEY)
		if payload:
			try:
				return rolling_averages_from_dict(payload)
			except (AttributeError, TypeError, ValueError) as exc:
				logger.exception("Malformed %s payload, using seed averages: %s", ROLLING_AVERAGES_KEY, exc)
		return create_default_rolling_averages()

	def load_history(self) -> EmotionHistory:
		return history_from_list(self.store.load(EMOTION_HISTORY_KEY), max_entries=self.history_size)

	def cycle_count(self) -> int:
		payload = self.store.load(CYCLE_COUNTER_KEY)
		if not payload:
			return 0
		try:
			return max(0, int(payload.get("cycles", 0)))
		except (AttributeError, TypeError, ValueError) as exc:
			logger.exception("Malformed %s payload, counting from 0: %s", CYCLE_COUNTER_KEY, exc)
			return 0

	def thresholds(self) -> AdaptiveThresholds:
		"""Thresholds for the external generators of the upcoming cycle."""
		return compute_adaptive_thresholds(self.load_averages(), self.threshold_config)

	# --- cycle --------------------------------------------------------------

	def run(
		self,
		stimuli: Iterable[StimulusLike] = (),
		metric_samples: Optional[Mapping[str, Any]] = None,
		trigger: Optional[str] = None,
		mood_narrative: Optional[str] = None,
		now: Optional[float] = None,
	) -> CycleResult:
		now = time.time() if now is None else float(now)
		cycle = self.cycle_count() + 1

		state = self.load_state(now=now)
		bank = self.load_bank()
		history = self.load_history()
		averages = self.load_averages()

		minutes_elapsed = (now - state.last_updated) / 60.0
		state = self.engine.decay(state, minutes_elapsed)

		decayed_bank = decay_weights(bank, self.bank_config)
		if self.weight_log is not None:
			self.weight_log.record_decay(cycle, bank.weights, decayed_bank.weights, now=now)

		weighted = apply_strategy_weights(coerce_stimuli(stimuli), decayed_bank)
		memory = analyze_emotion_memory(history.recent())
		inertia = inertia_from_memory(memory, self.engine.config.inertia_min_streak)

		state = self.engine.stimulate(state, weighted, inertia=inertia, trigger=trigger, now=now)
		state = self.engine.update_mood(state)
		state = self.engine.blend_temperament(state)
		if mood_narrative is not None:
			state.mood_narrative = mood_narrative

		history.append(state)
		if metric_samples:
			averages = update_rolling_averages(averages, metric_samples, self.threshold_config, now=now)

		self.store.save(EMOTION_STATE_KEY, affect_state_to_dict(state))
		self.store.save(STRATEGY_WEIGHTS_KEY, bank_to_dict(decayed_bank))
		self.store.save(EMOTION_HISTORY_KEY, history_to_list(history))
		self.store.save(ROLLING_AVERAGES_KEY, rolling_averages_to_dict(averages))
		self.store.save(CYCLE_COUNTER_KEY, {"cycles": cycle})

		logger.info(
			"Cycle %d: %s (%s) %.2f, %d stimuli, trigger: %s",
			cycle, state.dominant_label, state.dominant, state.dominant_value(), len(weighted), state.trigger,
		)
		return CycleResult(
			cycle=cycle,
			state=state,
			bank=decayed_bank,
			weighted_stimuli=weighted,
			inertia=inertia,
			memory=memory,
			thresholds=compute_adaptive_thresholds(averages, self.threshold_config),
		)

	def apply_adjustments(
		self,
		adjustments: Iterable[WeightAdjustment],
		source: str = "reflection",
		now: Optional[float] = None,
	) -> AdjustmentOutcome:
		"""
		Cycle-end reinforcement: apply, persist and audit log. `source` is the
		log entry type naming who proposed the batch ("reflection" or "prophecy").
		"""
		if source not in ADJUSTMENT_SOURCES:
			raise ValueError(f"Unknown adjustment source: {source}")
		outcome = apply_adjustments(self.load_bank(), adjustments, self.bank_config, now=now)
		if outcome.applied:
			self.store.save(STRATEGY_WEIGHTS_KEY, bank_to_dict(outcome.bank))
			if self.weight_log is not None:
				self.weight_log.record_adjustments(self.cycle_count(), source, outcome.applied, outcome.bank.weights, now=now)
		return outcome

	def learning_stats(self) -> LearningStats:
		return compute_learning_stats(self.load_bank(), self.cycle_count(), self.learning_config)
