"""
Learning Stats
--------------
Back-calculates how much the sensitivity bank has learned from the weights
alone. No adjustment history is needed: given the per-cycle decay that keeps
pulling weights back to neutral, the distance a weight still sits from 1.0
implies a minimum number of reinforcement events.

Estimation model (one reinforcement = one step of size `step`):
- k events are spread uniformly over N cycles, event i landing on cycle
  floor(i * N / k);
- after an event, every remaining cycle removes `decay_rate` of the deviation;
- the answer is the smallest k whose final deviation reaches the observed one.
Spreading events over more cycles leaves each of them more decay, so the
estimate never decreases as N grows.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List
import logging

from affect_engine.sensitivity.bank import NEUTRAL_WEIGHT, SensitivityBank
from affect_engine.sensitivity.catalog import CATEGORY_KEYS, category_label

logger = logging.getLogger(__name__)
if not logger.handlers:
	logger.addHandler(logging.NullHandler())

# Deviations are compared after rounding so 0.95 - 1.0 lands exactly on the band edge.
_PRECISION = 9


@dataclass
class LearningConfig:
	neutral: float = NEUTRAL_WEIGHT
	neutral_band: float = 0.05
	step: float = 0.10  # 10% of the neutral weight per reinforcement event
	decay_rate: float = 0.02
	floor: float = 0.3
	ceiling: float = 2.0
	max_adjustments: int = 200
	# Upper bounds of |deviation| for each intensity tier; anything above is "extreme".
	intensity_tiers: Dict[str, float] = field(
		default_factory=lambda: {"none": 0.05, "mild": 0.20, "moderate": 0.35, "strong": 0.55}
	)


@dataclass
class CategoryStats:
	category: str
	current_weight: float
	deviation: float
	direction: str  # dampened | amplified | neutral
	learning_intensity: str  # none | mild | moderate | strong | extreme
	estimated_adjustments: int
	narrative: str = ""


@dataclass
class LearningStats:
	categories: List[CategoryStats]
	total_deviation: float
	most_learned: str
	least_learned: str
	overall_narrative: str
	amplified_categories: List[str]
	dampened_categories: List[str]
	unchanged_categories: List[str]
	cycle_count: int = 0

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)


def _final_deviation(adjustments: int, cycles: int, config: LearningConfig, limit: float) -> float:
	"""Deviation left after `adjustments` uniformly spread events over `cycles` decay ticks."""
	retain = 1.0 - config.decay_rate
	positions = [i * cycles // adjustments for i in range(adjustments)]
	deviation = 0.0
	for i, pos in enumerate(positions):
		deviation = min(limit, deviation + config.step)
		following = positions[i + 1] if i + 1 < adjustments else cycles
		deviation *= retain ** (following - pos)
	return deviation


def estimate_min_adjustments(current_weight: float, cycle_count: int, config: LearningConfig = LearningConfig()) -> int:
	"""
	Minimum number of reinforcement events that explains the current distance
	from neutral after cycle_count decay cycles. 0 inside the neutral band;
	max_adjustments when no count within the cap can reach it.
	"""
	target = round(abs(float(current_weight) - config.neutral), _PRECISION)
	if target <= config.neutral_band:
		return 0
	cycles = max(0, int(cycle_count))
	if current_weight < config.neutral:
		limit = config.neutral - config.floor
	else:
		limit = config.ceiling - config.neutral
	for k in range(1, config.max_adjustments + 1):
		if round(_final_deviation(k, cycles, config, limit), _PRECISION) >= target:
			return k
	return config.max_adjustments


def _direction(deviation: float, config: LearningConfig) -> str:
	deviation = round(deviation, _PRECISION)
	if deviation < -config.neutral_band:
		return "dampened"
	if deviation > config.neutral_band:
		return "amplified"
	return "neutral"


def _intensity(deviation: float, config: LearningConfig) -> str:
	magnitude = round(abs(deviation), _PRECISION)
	for name, upper in config.intensity_tiers.items():
		if magnitude < upper:
			return name
	return "extreme"


def _category_narrative(stats: CategoryStats) -> str:
	label = category_label(stats.category)
	if stats.direction == "neutral":
		return f"{label.capitalize()} proved a reliable signal; the weight holds at {stats.current_weight:.2f}."
	pct = abs(stats.deviation) * 100
	if stats.direction == "dampened":
		return (
			f"Learned that {label} overreact to noise: sensitivity reduced by ~{pct:.0f}%, "
			f"which takes an estimated {stats.estimated_adjustments}+ decreases to hold against decay."
		)
	return (
		f"Learned that {label} are undervalued signals: sensitivity amplified by ~{pct:.0f}%, "
		f"which takes an estimated {stats.estimated_adjustments}+ increases to hold against decay."
	)


def _overall_narrative(stats: LearningStats, total_categories: int) -> str:
	changed = len(stats.dampened_categories) + len(stats.amplified_categories)
	parts = [f"Over {stats.cycle_count} cycles, the engine adjusted {changed} of {total_categories} stimulus categories on its own."]
	dampened = [category_label(c.category) for c in stats.categories if c.direction == "dampened"][:3]
	if dampened:
		parts.append(f"It learned to dampen sensitivity to {', '.join(dampened)}.")
	amplified = [category_label(c.category) for c in stats.categories if c.direction == "amplified"]
	if amplified:
		parts.append(f"It amplified {', '.join(amplified)}.")
	parts.append("No external targets were set; every shift came from its own reflection.")
	return " ".join(parts)


def compute_learning_stats(bank: SensitivityBank, cycle_count: int, config: LearningConfig = LearningConfig()) -> LearningStats:
	categories: List[CategoryStats] = []
	amplified: List[str] = []
	dampened: List[str] = []
	unchanged: List[str] = []
	total = 0.0
	most_key, most_dev = CATEGORY_KEYS[0], -1.0
	least_key, least_dev = CATEGORY_KEYS[0], float("inf")

	for key in CATEGORY_KEYS:
		weight = bank.get(key, config.neutral)
		deviation = weight - config.neutral
		magnitude = round(abs(deviation), _PRECISION)
		total += magnitude
		direction = _direction(deviation, config)
		estimated = 0
		if direction != "neutral":
			estimated = max(1, estimate_min_adjustments(weight, cycle_count, config))
		stats = CategoryStats(
			category=key,
			current_weight=weight,
			deviation=deviation,
			direction=direction,
			learning_intensity=_intensity(deviation, config),
			estimated_adjustments=estimated,
		)
		stats.narrative = _category_narrative(stats)
		categories.append(stats)

		if magnitude > most_dev:
			most_key, most_dev = key, magnitude
		if magnitude < least_dev:
			least_key, least_dev = key, magnitude
		{"amplified": amplified, "dampened": dampened, "neutral": unchanged}[direction].append(key)

	# sorted() is stable, so equal deviations keep catalog order.
	categories = sorted(categories, key=lambda c: abs(c.deviation), reverse=True)
	report = LearningStats(
		categories=categories,
		total_deviation=total,
		most_learned=most_key,
		least_learned=least_key,
		overall_narrative="",
		amplified_categories=amplified,
		dampened_categories=dampened,
		unchanged_categories=unchanged,
		cycle_count=max(0, int(cycle_count)),
	)
	report.overall_narrative = _overall_narrative(report, len(CATEGORY_KEYS))
	logger.debug("Learning stats: total deviation %.3f across %d categories", total, len(CATEGORY_KEYS))
	return report
