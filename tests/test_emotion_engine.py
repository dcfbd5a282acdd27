import numpy as np
import pytest

from affect_engine.emotion.engine import EmotionEngine, EngineConfig
from affect_engine.emotion.types import PRIMARY_EMOTIONS, AffectState, EmotionInertia, Stimulus
from affect_engine.sensitivity.bank import apply_strategy_weights, create_default_bank


def _state(**values):
	return AffectState(emotions=values, last_updated=0.0)


def test_resting_state_sits_at_baseline():
	state = AffectState.resting(now=0.0)
	assert set(state.emotions) == set(PRIMARY_EMOTIONS)
	assert all(v == pytest.approx(0.15) for v in state.emotions.values())


def test_decay_zero_elapsed_is_identity():
	engine = EmotionEngine()
	state = _state(joy=0.8, fear=0.05)
	out = engine.decay(state, 0)
	for e in PRIMARY_EMOTIONS:
		assert out.emotions[e] == pytest.approx(state.emotions[e])


def test_decay_half_life():
	out = EmotionEngine().decay(_state(joy=0.8), 180)
	assert out.emotions["joy"] == pytest.approx(0.15 + 0.65 * 0.5)


def test_decay_converges_to_baseline_from_both_sides():
	engine = EmotionEngine()
	state = _state(joy=1.0, fear=0.0, anger=0.7)
	for _ in range(50):
		state = engine.decay(state, 600)
	for v in state.emotions.values():
		assert v == pytest.approx(0.15, abs=1e-6)


def test_decay_negative_elapsed_treated_as_zero():
	state = _state(sadness=0.9)
	out = EmotionEngine().decay(state, -45)
	assert out.emotions["sadness"] == pytest.approx(0.9)


def test_decay_does_not_mutate_input():
	state = _state(joy=0.8)
	EmotionEngine().decay(state, 500)
	assert state.emotions["joy"] == pytest.approx(0.8)


def test_diminishing_returns():
	engine = EmotionEngine()
	stim = [Stimulus("joy", 0.3, "good news")]
	high = engine.stimulate(_state(joy=0.9), stim)
	low = engine.stimulate(_state(joy=0.1), stim)
	assert high.emotions["joy"] - 0.9 < low.emotions["joy"] - 0.1
	assert low.emotions["joy"] == pytest.approx(0.1 + 0.3 * 0.9)


def test_single_stimulus_end_to_end():
	engine = EmotionEngine()
	bank = create_default_bank(now=0.0)
	stimuli = apply_strategy_weights(
		[Stimulus("joy", 0.4, "chain activity surge", weight_category="chain_activity_joy")], bank
	)
	state = engine.update_mood(engine.stimulate(AffectState.resting(now=0.0), stimuli, now=1.0))
	assert state.emotions["joy"] == pytest.approx(0.15 + 0.4 * 0.85)
	assert state.dominant == "joy"
	assert state.dominant_label == "happy"
	assert state.compounds == []
	assert state.trigger == "chain activity surge"


def test_inertia_dampens_contrary_stimulus():
	engine = EmotionEngine()
	inertia = EmotionInertia(streak_emotion="fear", streak_length=5)
	stim = [Stimulus("joy", 0.4, "pump", weight_category="chain_activity_joy")]
	state = engine.stimulate(AffectState.resting(now=0.0), stim, inertia=inertia)
	assert engine.inertia_factor(5) == pytest.approx(1 / 1.75)
	assert state.emotions["joy"] == pytest.approx(0.15 + (0.4 / 1.75) * 0.85)


def test_inertia_spares_streak_emotion_and_short_streaks():
	engine = EmotionEngine()
	base = AffectState.resting(now=0.0)
	same = engine.stimulate(base, [Stimulus("fear", 0.4)], inertia=EmotionInertia("fear", 6))
	assert same.emotions["fear"] == pytest.approx(0.15 + 0.4 * 0.85)
	short = engine.stimulate(base, [Stimulus("joy", 0.4)], inertia=EmotionInertia("fear", 2))
	assert short.emotions["joy"] == pytest.approx(0.15 + 0.4 * 0.85)


def test_inertia_factor_floor():
	engine = EmotionEngine()
	assert engine.inertia_factor(20) == pytest.approx(0.4)
	assert engine.inertia_factor(100) == pytest.approx(0.4)


def test_trigger_selection():
	engine = EmotionEngine()
	base = AffectState.resting(now=0.0)
	stimuli = [Stimulus("joy", 0.1, "small"), Stimulus("fear", 0.3, "big"), Stimulus("anger", 0.3, "tie")]
	assert engine.stimulate(base, stimuli).trigger == "big"
	assert engine.stimulate(base, stimuli, trigger="caller says").trigger == "caller says"
	assert engine.stimulate(base, []).trigger == base.trigger


def test_boundedness_under_random_sequences():
	engine = EmotionEngine()
	rng = np.random.default_rng(7)
	state = AffectState.resting(now=0.0)
	for _ in range(300):
		if rng.random() < 0.3:
			state = engine.decay(state, float(rng.uniform(-60, 2000)))
		else:
			stimuli = [
				Stimulus(PRIMARY_EMOTIONS[int(rng.integers(0, 8))], float(rng.uniform(0, 5)))
				for _ in range(int(rng.integers(0, 6)))
			]
			state = engine.update_mood(engine.stimulate(state, stimuli))
		for v in state.emotions.values():
			assert 0.0 <= v <= 1.0


def test_dominant_and_compound_detection():
	engine = EmotionEngine()
	state = engine.update_mood(_state(joy=0.6, trust=0.3, fear=0.2))
	assert state.dominant == "joy"
	assert state.compounds == []
	both = engine.update_mood(_state(joy=0.6, trust=0.55))
	assert both.dominant == "joy"
	assert "Love" in both.compounds


def test_dominant_tie_uses_wheel_order():
	engine = EmotionEngine()
	assert engine.update_mood(_state()).dominant == "joy"
	assert engine.update_mood(_state(fear=0.5, anger=0.5)).dominant == "fear"


def test_compounds_capped_and_ranked():
	engine = EmotionEngine()
	state = engine.update_mood(_state(
		joy=0.9, trust=0.8, fear=0.7, surprise=0.6, sadness=0.5, disgust=0.5, anger=0.5, anticipation=0.5,
	))
	assert state.compounds == ["Love", "Submission", "Alarm"]


def test_fear_surprise_is_alarm():
	state = EmotionEngine().update_mood(_state(fear=0.5, surprise=0.46))
	assert state.compounds == ["Alarm"]


def test_intensity_labels():
	engine = EmotionEngine()
	assert engine.intensity_label("joy", 0.2) == "content"
	assert engine.intensity_label("joy", 0.5) == "happy"
	assert engine.intensity_label("joy", 0.7) == "euphoric"
	assert engine.intensity_label("anger", 0.66) == "rage"


def test_blend_temperament_moves_slowly():
	engine = EmotionEngine()
	state = _state(joy=0.9)
	blended = engine.blend_temperament(state)
	assert 0.15 < blended.temperament["joy"] < 0.9
	assert blended.temperament["fear"] == pytest.approx(0.15)
	assert blended.emotions == state.emotions


def test_custom_half_life():
	engine = EmotionEngine(EngineConfig(half_life_minutes=60))
	out = engine.decay(_state(joy=0.55), 60)
	assert out.emotions["joy"] == pytest.approx(0.35)


def test_stimulus_validation():
	with pytest.raises(ValueError):
		Stimulus("nostalgia", 0.2)
	assert Stimulus("joy", -1.0).intensity == 0.0
	assert Stimulus("Joy", float("nan")).intensity == 0.0
	assert Stimulus("joy", 0.2, weight_category=42).weight_category is None
	parsed = Stimulus.from_dict({"emotion": "fear", "intensity": 0.2, "weightCategory": "gas_pressure"})
	assert parsed.weight_category == "gas_pressure"


def test_process_runs_decay_stimulate_and_mood():
	engine = EmotionEngine()
	state = engine.process(_state(anger=0.8), 180, [Stimulus("trust", 0.5, "ally")], now=5.0)
	assert state.emotions["anger"] == pytest.approx(0.15 + 0.65 * 0.5)
	assert state.emotions["trust"] == pytest.approx(0.15 + 0.5 * 0.85)
	assert state.dominant == "trust"
	assert state.trigger == "ally"
	assert state.last_updated == 5.0
