"""
Emotion data model
------------------
The eight primary emotions of the emotion wheel, their intensity labels and
wheel-adjacent compound names, plus the records exchanged with the engine:

- AffectState: the persisted emotional state (affect vector + resolved mood).
- Stimulus: one ephemeral nudge produced by an external generator.
- EmotionInertia / EmotionMemory: streak summaries derived from history.

Every affect value lies in [0, 1].
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple
import time

from affect_engine.utils.numeric import clamp01, non_negative

# Wheel order doubles as the tie-break priority for the dominant emotion.
PRIMARY_EMOTIONS: Tuple[str, ...] = (
	"joy",
	"trust",
	"fear",
	"surprise",
	"sadness",
	"disgust",
	"anger",
	"anticipation",
)

RESTING_BASELINE = 0.15

# (mild, moderate, intense)
INTENSITY_LABELS: Dict[str, Tuple[str, str, str]] = {
	"joy": ("content", "happy", "euphoric"),
	"trust": ("acceptance", "trust", "admiration"),
	"fear": ("apprehension", "fear", "terror"),
	"surprise": ("distraction", "surprise", "amazement"),
	"sadness": ("pensiveness", "sadness", "grief"),
	"disgust": ("boredom", "disgust", "loathing"),
	"anger": ("annoyance", "anger", "rage"),
	"anticipation": ("interest", "anticipation", "vigilance"),
}

# Adjacent pairs on the wheel, including the wrap-around anticipation/joy.
COMPOUND_EMOTIONS: Tuple[Tuple[str, str, str], ...] = (
	("joy", "trust", "Love"),
	("trust", "fear", "Submission"),
	("fear", "surprise", "Alarm"),
	("surprise", "sadness", "Disapproval"),
	("sadness", "disgust", "Remorse"),
	("disgust", "anger", "Contempt"),
	("anger", "anticipation", "Aggressiveness"),
	("anticipation", "joy", "Optimism"),
)


def validate_emotion(name: Any) -> str:
	emotion = str(name).strip().lower()
	if emotion not in PRIMARY_EMOTIONS:
		raise ValueError(f"Unknown emotion {name!r}; expected one of {', '.join(PRIMARY_EMOTIONS)}")
	return emotion


def resting_vector(baseline: float = RESTING_BASELINE) -> Dict[str, float]:
	return {e: clamp01(baseline) for e in PRIMARY_EMOTIONS}


def normalize_vector(values: Optional[Mapping[str, Any]], baseline: float = RESTING_BASELINE) -> Dict[str, float]:
	"""Complete a partial affect vector with the baseline and clamp every value."""
	vector = resting_vector(baseline)
	for key, value in (values or {}).items():
		if key in vector:
			vector[key] = clamp01(value)
	return vector


@dataclass
class Stimulus:
	"""A single weighted event nudging one emotion."""
	emotion: str
	intensity: float
	source: str = ""
	weight_category: Optional[str] = None
	metadata: Dict[str, Any] = field(default_factory=dict)

	def __post_init__(self) -> None:
		self.emotion = validate_emotion(self.emotion)
		self.intensity = non_negative(self.intensity)
		self.source = str(self.source or "")
		if self.weight_category is not None and not isinstance(self.weight_category, str):
			# Malformed categories are treated as unweighted.
			self.weight_category = None

	@classmethod
	def from_dict(cls, payload: Mapping[str, Any]) -> "Stimulus":
		category = payload.get("weight_category", payload.get("weightCategory"))
		return cls(
			emotion=payload.get("emotion", ""),
			intensity=payload.get("intensity", 0.0),
			source=payload.get("source", ""),
			weight_category=category,
			metadata=dict(payload.get("metadata") or {}),
		)

	def to_dict(self) -> Dict[str, Any]:
		return {
			"emotion": self.emotion,
			"intensity": self.intensity,
			"source": self.source,
			"weight_category": self.weight_category,
			"metadata": dict(self.metadata),
		}


@dataclass
class EmotionInertia:
	streak_emotion: str
	streak_length: int

	def __post_init__(self) -> None:
		self.streak_emotion = validate_emotion(self.streak_emotion)
		self.streak_length = max(0, int(self.streak_length))


@dataclass
class AffectState:
	"""Persisted emotional state: affect vector plus the resolved mood."""
	emotions: Dict[str, float] = field(default_factory=resting_vector)
	dominant: str = "joy"
	dominant_label: str = INTENSITY_LABELS["joy"][0]
	compounds: List[str] = field(default_factory=list)
	trigger: str = ""
	mood_narrative: Optional[str] = None
	last_updated: float = field(default_factory=time.time)
	temperament: Dict[str, float] = field(default_factory=resting_vector)

	def __post_init__(self) -> None:
		self.emotions = normalize_vector(self.emotions)
		self.temperament = normalize_vector(self.temperament)
		self.dominant = validate_emotion(self.dominant)

	@classmethod
	def resting(cls, now: Optional[float] = None, trigger: str = "initial state - just woke up") -> "AffectState":
		"""Default state: every emotion at the resting baseline."""
		return cls(
			emotions=resting_vector(),
			dominant="joy",
			dominant_label=INTENSITY_LABELS["joy"][0],
			compounds=[],
			trigger=trigger,
			last_updated=time.time() if now is None else float(now),
			temperament=resting_vector(),
		)

	def dominant_value(self) -> float:
		return self.emotions[self.dominant]


@dataclass
class EmotionMemory:
	"""Pattern summary over recent affect states."""
	dominant_streak: int = 0
	streak_emotion: str = "anticipation"
	average_intensity: float = RESTING_BASELINE
	volatility: float = 0.0
	recent_states: List[AffectState] = field(default_factory=list)
