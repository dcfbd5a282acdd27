import json

from run_cycle import main


def test_cli_runs_cycle_and_applies_adjustments(tmp_path, capsys):
	payload = {
		"stimuli": [{"emotion": "joy", "intensity": 0.4, "source": "surge", "weight_category": "chain_activity_joy"}],
		"metrics": {"gas_price": 70},
		"adjustments": [
			{"category": "gas_pressure", "direction": "decrease", "magnitude": "nudge", "reason": "noise"},
			{"category": "gas_pressure", "direction": "sideways"},
			{"category": "moon_phase", "delta": 0.1},
		],
	}
	src = tmp_path / "cycle.json"
	src.write_text(json.dumps(payload), encoding="utf-8")
	state_dir = tmp_path / "state"

	assert main([str(src), "--state-dir", str(state_dir)]) == 0
	out, err = capsys.readouterr()
	assert "Cycle 1" in out
	assert "Dominant feeling: happy (joy)" in out
	assert "moon_phase" in err

	weights = json.loads((state_dir / "strategy-weights.json").read_text(encoding="utf-8"))["weights"]
	assert abs(weights["gas_pressure"] - 0.95) < 1e-9
	assert (state_dir / "weight-history.jsonl").exists()


def test_cli_learning_report(tmp_path, capsys):
	assert main(["--learning", "--state-dir", str(tmp_path)]) == 0
	out, _ = capsys.readouterr()
	assert out.startswith("Over 0 cycles")


def test_cli_logs_adjustments_under_given_source(tmp_path):
	src = tmp_path / "cycle.json"
	src.write_text(json.dumps({"adjustments": [{"category": "dex_market", "delta": 0.1, "reason": "called it"}]}), encoding="utf-8")
	state_dir = tmp_path / "state"
	assert main([str(src), "--state-dir", str(state_dir), "--source", "prophecy"]) == 0
	lines = (state_dir / "weight-history.jsonl").read_text(encoding="utf-8").splitlines()
	assert json.loads(lines[-1])["type"] == "prophecy"
