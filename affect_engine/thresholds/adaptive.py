"""
Adaptive thresholds
-------------------
Tracks an exponential moving average per context metric and derives "high"
and "low" thresholds from it, so what counts as unusual follows the current
regime instead of fixed constants.

Until enough cycles have been observed the computed thresholds are None and
the defaults table below applies. Both travel together in AdaptiveThresholds,
so generators only call `high_for` / `low_for`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple
import logging
import time

from affect_engine.utils.numeric import ema, is_finite

logger = logging.getLogger(__name__)
if not logger.handlers:
	logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class MetricSpec:
	key: str
	seed: float  # starting value of the moving average
	default_high: float
	default_low: float
	description: str = ""


METRICS: Tuple[MetricSpec, ...] = (
	MetricSpec("whale_transfer_size", 10000, 10000, 5000, "largest single transfer, native units"),
	MetricSpec("failed_tx_count", 5, 5, 1, "failed transactions per cycle"),
	MetricSpec("new_contracts", 1, 1, 0, "contracts deployed per cycle"),
	MetricSpec("tx_count_change", 50, 50, 30, "abs % change in transaction count (busy / quiet)"),
	MetricSpec("launch_creates", 10, 10, 2, "tokens launched per cycle"),
	MetricSpec("launch_graduations", 3, 3, 1, "launched tokens reaching liquidity target"),
	MetricSpec("token_price_change", 10, 10, 3, "abs % move of the agent's own token"),
	MetricSpec("token_buy_count", 5, 5, 1, "buys of the agent's token per cycle"),
	MetricSpec("token_sell_count", 5, 5, 1, "sells of the agent's token per cycle"),
	MetricSpec("token_net_flow", 10, 10, 2, "abs net flow into the agent's token"),
	MetricSpec("token_swap_count", 20, 20, 5, "swaps of the agent's token per cycle"),
	MetricSpec("price_change_24h", 10, 10, 3, "abs 24h % move of the native coin"),
	MetricSpec("price_cycle_change", 3, 3, 1, "abs % move of the native coin since last cycle"),
	MetricSpec("tvl_change_24h", 5, 5, 1, "abs 24h % change in total value locked"),
	MetricSpec("total_value_locked", 5e8, 1e9, 2.5e8, "total value locked, USD"),
	MetricSpec("volume_24h", 5e7, 5e7, 5e6, "24h traded volume, USD"),
	MetricSpec("gas_price", 50, 50, 10, "gas price, gwei"),
	MetricSpec("ecosystem_token_change", 20, 20, 5, "largest abs 24h % move among ecosystem tokens"),
)

METRIC_KEYS: Tuple[str, ...] = tuple(m.key for m in METRICS)
_SPECS: Dict[str, MetricSpec] = {m.key: m for m in METRICS}


@dataclass
class ThresholdConfig:
	alpha: float = 0.15
	min_cycles: int = 5
	high_multiplier: float = 1.5
	low_multiplier: float = 0.5


@dataclass
class RollingAverages:
	values: Dict[str, float] = field(default_factory=lambda: {m.key: float(m.seed) for m in METRICS})
	cycles_tracked: int = 0
	last_updated: float = field(default_factory=time.time)


def create_default_rolling_averages(now: Optional[float] = None) -> RollingAverages:
	return RollingAverages(
		values={m.key: float(m.seed) for m in METRICS},
		cycles_tracked=0,
		last_updated=time.time() if now is None else float(now),
	)


def update_rolling_averages(
	avg: RollingAverages,
	samples: Mapping[str, Any],
	config: ThresholdConfig = ThresholdConfig(),
	now: Optional[float] = None,
) -> RollingAverages:
	"""
	Fold the latest raw samples into the moving averages (magnitudes only).
	Metrics without a sample keep their value; unknown names are skipped.
	"""
	values = dict(avg.values)
	for key, raw in samples.items():
		if key not in _SPECS:
			logger.warning("Skipping sample for unknown metric %r", key)
			continue
		if not is_finite(raw):
			logger.warning("Skipping non-finite sample for %s: %r", key, raw)
			continue
		current = values.get(key, float(_SPECS[key].seed))
		values[key] = ema(current, abs(float(raw)), config.alpha)
	return RollingAverages(
		values=values,
		cycles_tracked=avg.cycles_tracked + 1,
		last_updated=time.time() if now is None else float(now),
	)


@dataclass
class AdaptiveThresholds:
	high: Dict[str, Optional[float]]
	low: Dict[str, Optional[float]]
	defaults_high: Dict[str, float]
	defaults_low: Dict[str, float]
	cycles_tracked: int = 0

	@property
	def active(self) -> bool:
		return any(v is not None for v in self.high.values())

	def high_for(self, metric: str) -> float:
		"""Computed high threshold, or the metric's default while warming up."""
		value = self.high[metric]
		return self.defaults_high[metric] if value is None else value

	def low_for(self, metric: str) -> float:
		value = self.low[metric]
		return self.defaults_low[metric] if value is None else value

	def to_dict(self) -> Dict[str, Any]:
		return {
			"active": self.active,
			"cycles_tracked": self.cycles_tracked,
			"metrics": {
				key: {
					"description": _SPECS[key].description,
					"high": self.high[key],
					"low": self.low[key],
					"default_high": self.defaults_high[key],
					"default_low": self.defaults_low[key],
					"effective_high": self.high_for(key),
					"effective_low": self.low_for(key),
				}
				for key in METRIC_KEYS
			},
		}


def compute_adaptive_thresholds(avg: RollingAverages, config: ThresholdConfig = ThresholdConfig()) -> AdaptiveThresholds:
	ready = avg.cycles_tracked >= config.min_cycles
	high: Dict[str, Optional[float]] = {}
	low: Dict[str, Optional[float]] = {}
	for spec in METRICS:
		value = avg.values.get(spec.key, float(spec.seed))
		high[spec.key] = value * config.high_multiplier if ready else None
		low[spec.key] = value * config.low_multiplier if ready else None
	return AdaptiveThresholds(
		high=high,
		low=low,
		defaults_high={m.key: float(m.default_high) for m in METRICS},
		defaults_low={m.key: float(m.default_low) for m in METRICS},
		cycles_tracked=avg.cycles_tracked,
	)
