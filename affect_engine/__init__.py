"""
Affective state and adaptive sensitivity engine.

Converts batches of stimuli into a persistent, decaying eight-emotion affect
state and retunes per-category stimulus sensitivity through reinforcement
and passive forgetting.
"""

from .emotion import AffectState, EmotionEngine, EngineConfig, Stimulus
from .sensitivity import SensitivityBank, WeightAdjustment
from .thresholds import AdaptiveThresholds, RollingAverages
from .introspection import LearningStats, compute_learning_stats, estimate_min_adjustments
from .cycle import AffectCycle, CycleResult

__version__ = "0.1.0"

__all__ = [
	"AffectState",
	"EmotionEngine",
	"EngineConfig",
	"Stimulus",
	"SensitivityBank",
	"WeightAdjustment",
	"AdaptiveThresholds",
	"RollingAverages",
	"LearningStats",
	"compute_learning_stats",
	"estimate_min_adjustments",
	"AffectCycle",
	"CycleResult",
]
