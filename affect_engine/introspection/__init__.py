from .learning_stats import (
	CategoryStats,
	LearningConfig,
	LearningStats,
	compute_learning_stats,
	estimate_min_adjustments,
)

__all__ = [
	"CategoryStats",
	"LearningConfig",
	"LearningStats",
	"compute_learning_stats",
	"estimate_min_adjustments",
]
