"""
Sensitivity Bank (strategy weights)
-----------------------------------
Per-category multipliers applied to incoming stimuli.

Key responsibilities:
- Passive forgetting: every cycle each weight drifts a fixed fraction of the
  way back to neutral.
- Reinforcement: externally proposed adjustments nudge weights away from
  neutral; each adjustment is applied independently and audited.
- Weighting: scale stimulus intensities by their category weight.

Weights are kept inside [floor, ceiling] after every operation.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional
import logging
import time

from affect_engine.emotion.types import Stimulus
from affect_engine.sensitivity.catalog import CATEGORY_KEYS, is_known_category
from affect_engine.utils.numeric import clamp, is_finite

logger = logging.getLogger(__name__)
if not logger.handlers:
	logger.addHandler(logging.NullHandler())

NEUTRAL_WEIGHT = 1.0


@dataclass
class BankConfig:
	neutral: float = NEUTRAL_WEIGHT
	floor: float = 0.3
	ceiling: float = 2.0
	decay_rate: float = 0.02  # fraction of the distance to neutral removed per cycle
	magnitude_steps: Dict[str, float] = field(
		default_factory=lambda: {"nudge": 0.05, "moderate": 0.1, "strong": 0.2}
	)


@dataclass
class SensitivityBank:
	weights: Dict[str, float] = field(default_factory=dict)
	last_updated: float = field(default_factory=time.time)

	def get(self, category: Optional[str], default: float = NEUTRAL_WEIGHT) -> float:
		if category is None:
			return default
		return float(self.weights.get(category, default))

	def copy(self) -> "SensitivityBank":
		return SensitivityBank(weights=dict(self.weights), last_updated=self.last_updated)


@dataclass
class WeightAdjustment:
	"""Request to move one category by `delta` or to `target`."""
	category: str
	reason: str = ""
	delta: Optional[float] = None
	target: Optional[float] = None

	@classmethod
	def from_direction(
		cls,
		category: str,
		direction: str,
		reason: str = "",
		magnitude: str = "moderate",
		config: BankConfig = BankConfig(),
	) -> "WeightAdjustment":
		"""
		Translate reflection vocabulary into a delta/target request.
		direction: increase | decrease | reset; magnitude: nudge | moderate | strong.
		"""
		direction = str(direction).lower()
		if direction == "reset":
			return cls(category=category, reason=reason, target=config.neutral)
		if direction not in ("increase", "decrease"):
			raise ValueError(f"Unknown adjustment direction: {direction}")
		step = config.magnitude_steps.get(magnitude, config.magnitude_steps["moderate"])
		return cls(category=category, reason=reason, delta=step if direction == "increase" else -step)

	@classmethod
	def from_dict(cls, payload: Mapping[str, Any]) -> "WeightAdjustment":
		category = str(payload.get("category") or payload.get("key") or "")
		reason = str(payload.get("reason") or "")
		if "direction" in payload:
			return cls.from_direction(category, payload["direction"], reason, str(payload.get("magnitude") or "moderate"))
		return cls(category=category, reason=reason, delta=payload.get("delta"), target=payload.get("target"))


@dataclass
class AuditEntry:
	category: str
	before: float
	after: float
	reason: str

	@property
	def delta(self) -> float:
		return self.after - self.before


@dataclass
class RejectedAdjustment:
	adjustment: WeightAdjustment
	error: str


@dataclass
class AdjustmentOutcome:
	bank: SensitivityBank
	applied: List[AuditEntry] = field(default_factory=list)
	rejected: List[RejectedAdjustment] = field(default_factory=list)


def create_default_bank(now: Optional[float] = None) -> SensitivityBank:
	return SensitivityBank(
		weights={key: NEUTRAL_WEIGHT for key in CATEGORY_KEYS},
		last_updated=time.time() if now is None else float(now),
	)


def decay_weights(bank: SensitivityBank, config: BankConfig = BankConfig()) -> SensitivityBank:
	"""Move each weight decay_rate of its distance toward neutral, then clamp."""
	weights: Dict[str, float] = {}
	for key in CATEGORY_KEYS:
		w = bank.get(key, config.neutral)
		w = w + (config.neutral - w) * config.decay_rate
		weights[key] = clamp(w, config.floor, config.ceiling)
	return SensitivityBank(weights=weights, last_updated=bank.last_updated)


def _validate(adj: WeightAdjustment) -> Optional[str]:
	if not is_known_category(adj.category):
		return f"unknown category {adj.category!r}"
	if (adj.delta is None) == (adj.target is None):
		return "exactly one of delta or target must be given"
	value = adj.delta if adj.delta is not None else adj.target
	if not is_finite(value):
		return f"non-numeric value {value!r}"
	return None


def apply_adjustments(
	bank: SensitivityBank,
	adjustments: Iterable[WeightAdjustment],
	config: BankConfig = BankConfig(),
	now: Optional[float] = None,
) -> AdjustmentOutcome:
	"""
	Apply each adjustment independently and clamp into [floor, ceiling].
	Invalid adjustments are rejected without touching the bank or the rest of the batch.
	"""
	updated = bank.copy()
	outcome = AdjustmentOutcome(bank=updated)
	for adj in adjustments:
		error = _validate(adj)
		if error is not None:
			logger.warning("Rejected weight adjustment for %r: %s", adj.category, error)
			outcome.rejected.append(RejectedAdjustment(adjustment=adj, error=error))
			continue
		before = updated.get(adj.category, config.neutral)
		raw = before + float(adj.delta) if adj.delta is not None else float(adj.target)
		after = clamp(raw, config.floor, config.ceiling)
		updated.weights[adj.category] = after
		logger.info("[Weights] %s: %.2f -> %.2f (%s)", adj.category, before, after, adj.reason[:80])
		outcome.applied.append(AuditEntry(category=adj.category, before=before, after=after, reason=adj.reason))
	if outcome.applied:
		updated.last_updated = time.time() if now is None else float(now)
	return outcome


def apply_strategy_weights(stimuli: Iterable[Stimulus], bank: SensitivityBank) -> List[Stimulus]:
	"""
	Scale each categorised stimulus by its weight. Stimuli without a known
	category pass through unchanged; intensities are not re-clamped here.
	"""
	weighted: List[Stimulus] = []
	for stimulus in stimuli:
		if not is_known_category(stimulus.weight_category):
			weighted.append(stimulus)
			continue
		weighted.append(
			Stimulus(
				emotion=stimulus.emotion,
				intensity=stimulus.intensity * bank.get(stimulus.weight_category),
				source=stimulus.source,
				weight_category=stimulus.weight_category,
				metadata=dict(stimulus.metadata),
			)
		)
	return weighted
