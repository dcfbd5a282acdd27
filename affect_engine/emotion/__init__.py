"""
Emotion package.

Affect vector data model, the decay/stimulate/resolve engine, emotion memory
and formatting helpers.
"""

from .types import (
	COMPOUND_EMOTIONS,
	INTENSITY_LABELS,
	PRIMARY_EMOTIONS,
	RESTING_BASELINE,
	AffectState,
	EmotionInertia,
	EmotionMemory,
	Stimulus,
)
from .engine import EmotionEngine, EngineConfig
from .memory import EmotionHistory, analyze_emotion_memory, inertia_from_memory

__all__ = [
	"COMPOUND_EMOTIONS",
	"INTENSITY_LABELS",
	"PRIMARY_EMOTIONS",
	"RESTING_BASELINE",
	"AffectState",
	"EmotionInertia",
	"EmotionMemory",
	"Stimulus",
	"EmotionEngine",
	"EngineConfig",
	"EmotionHistory",
	"analyze_emotion_memory",
	"inertia_from_memory",
]
