import pytest

from affect_engine.thresholds.adaptive import (
	METRIC_KEYS,
	ThresholdConfig,
	compute_adaptive_thresholds,
	create_default_rolling_averages,
	update_rolling_averages,
)


def test_defaults_until_enough_cycles():
	avg = create_default_rolling_averages(now=0.0)
	for _ in range(4):
		avg = update_rolling_averages(avg, {"failed_tx_count": 20}, now=1.0)
	th = compute_adaptive_thresholds(avg)
	assert not th.active
	assert all(v is None for v in th.high.values())
	assert th.high_for("whale_transfer_size") == 10000
	assert th.low_for("whale_transfer_size") == 5000
	assert th.high_for("tx_count_change") == 50
	assert th.low_for("tx_count_change") == 30


def test_thresholds_follow_moving_average():
	avg = create_default_rolling_averages(now=0.0)
	for _ in range(5):
		avg = update_rolling_averages(avg, {"failed_tx_count": 20})
	assert avg.cycles_tracked == 5
	expected = 20 - 15 * 0.85 ** 5
	assert avg.values["failed_tx_count"] == pytest.approx(expected)
	th = compute_adaptive_thresholds(avg)
	assert th.active
	assert th.high_for("failed_tx_count") == pytest.approx(1.5 * expected)
	assert th.low_for("failed_tx_count") == pytest.approx(0.5 * expected)
	# unsampled metrics hold their seed
	assert th.high_for("whale_transfer_size") == pytest.approx(15000)
	assert th.low_for("whale_transfer_size") == pytest.approx(5000)


def test_samples_use_magnitude():
	avg = update_rolling_averages(create_default_rolling_averages(now=0.0), {"tx_count_change": -80})
	assert avg.values["tx_count_change"] == pytest.approx(50 * 0.85 + 80 * 0.15)


def test_unknown_and_bad_samples_skipped():
	start = create_default_rolling_averages(now=0.0)
	avg = update_rolling_averages(start, {"moon_phase": 3, "gas_price": float("nan"), "volume_24h": "x"})
	assert set(avg.values) == set(METRIC_KEYS)
	assert avg.values == start.values
	assert avg.cycles_tracked == 1


def test_unknown_metric_lookup_raises():
	th = compute_adaptive_thresholds(create_default_rolling_averages(now=0.0))
	with pytest.raises(KeyError):
		th.high_for("moon_phase")


def test_custom_config():
	config = ThresholdConfig(alpha=1.0, min_cycles=1, high_multiplier=2.0, low_multiplier=0.25)
	avg = update_rolling_averages(create_default_rolling_averages(now=0.0), {"gas_price": 40}, config)
	th = compute_adaptive_thresholds(avg, config)
	assert th.high_for("gas_price") == pytest.approx(80)
	assert th.low_for("gas_price") == pytest.approx(10)


def test_to_dict_reports_effective_values():
	data = compute_adaptive_thresholds(create_default_rolling_averages(now=0.0)).to_dict()
	assert data["active"] is False
	assert data["metrics"]["gas_price"]["effective_high"] == 50
	assert data["metrics"]["gas_price"]["high"] is None
	assert data["metrics"]["gas_price"]["description"] == "gas price, gwei"
