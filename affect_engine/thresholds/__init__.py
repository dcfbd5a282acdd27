from .adaptive import (
	METRIC_KEYS,
	METRICS,
	AdaptiveThresholds,
	MetricSpec,
	RollingAverages,
	ThresholdConfig,
	compute_adaptive_thresholds,
	create_default_rolling_averages,
	update_rolling_averages,
)

__all__ = [
	"METRIC_KEYS",
	"METRICS",
	"AdaptiveThresholds",
	"MetricSpec",
	"RollingAverages",
	"ThresholdConfig",
	"compute_adaptive_thresholds",
	"create_default_rolling_averages",
	"update_rolling_averages",
]
