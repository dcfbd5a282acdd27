import pytest

from affect_engine.emotion.engine import EmotionEngine
from affect_engine.emotion.formatter import format_history, format_state, intensity_bucket, to_byte_scale
from affect_engine.emotion.memory import EmotionHistory, analyze_emotion_memory, inertia_from_memory
from affect_engine.emotion.types import AffectState


def _led_by(emotion, value=0.7, ts=0.0):
	return EmotionEngine().update_mood(AffectState(emotions={emotion: value}, last_updated=ts))


def test_history_is_bounded():
	history = EmotionHistory(max_entries=3)
	for i in range(5):
		history.append(_led_by("joy", ts=float(i)))
	assert len(history) == 3
	assert [s.last_updated for s in history] == [2.0, 3.0, 4.0]
	assert [s.last_updated for s in history.recent(2)] == [3.0, 4.0]
	assert history.recent(0) == []
	with pytest.raises(ValueError):
		EmotionHistory(max_entries=0)


def test_memory_defaults_for_short_history():
	memory = analyze_emotion_memory([_led_by("fear")])
	assert memory.dominant_streak == 0
	assert memory.streak_emotion == "anticipation"
	assert memory.average_intensity == pytest.approx(0.15)
	assert inertia_from_memory(memory) is None


def test_memory_streak_and_inertia():
	states = [_led_by("joy", 0.5), _led_by("fear", 0.6), _led_by("fear", 0.7), _led_by("fear", 0.8)]
	memory = analyze_emotion_memory(states)
	assert memory.dominant_streak == 3
	assert memory.streak_emotion == "fear"
	assert memory.average_intensity == pytest.approx(0.65)
	assert memory.volatility > 0
	inertia = inertia_from_memory(memory)
	assert inertia.streak_emotion == "fear"
	assert inertia.streak_length == 3
	assert inertia_from_memory(analyze_emotion_memory(states[:3])) is None


def test_format_state_resting():
	text = format_state(AffectState.resting(now=0.0))
	assert text.startswith("Current emotional state:")
	assert "joy: faint (content)" in text
	assert "Dominant feeling: content (joy)" in text
	assert "What triggered it: initial state - just woke up" in text


def test_format_state_lists_compounds_and_dormant():
	state = EmotionEngine().update_mood(AffectState(emotions={"joy": 0.6, "trust": 0.55, "anger": 0.02}))
	text = format_state(state)
	assert "Compound emotions: Love" in text
	assert "dormant: anger" in text


def test_format_history():
	assert format_history([]) == "No previous emotion history yet."
	states = [_led_by("anger", ts=float(i * 60)) for i in range(7)]
	lines = format_history(states, limit=5).splitlines()
	assert len(lines) == 5
	assert "(anger)" in lines[0]


def test_buckets_and_byte_scale():
	assert intensity_bucket(0.05) == "barely there"
	assert intensity_bucket(0.5) == "strong"
	assert intensity_bucket(0.99) == "all-consuming"
	assert to_byte_scale(AffectState.resting(now=0.0)) == [38] * 8
	assert to_byte_scale(AffectState(emotions={"joy": 1.0}))[0] == 255
