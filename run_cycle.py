"""
Run one affect cycle from the command line.

Reads a JSON document with stimuli (and optionally metric samples and weight
adjustments), runs the cycle against the state directory and prints the
resulting state.

	python run_cycle.py cycle.json
	python run_cycle.py --learning

Input shape:
	{
		"stimuli": [{"emotion": "joy", "intensity": 0.3, "source": "...", "weight_category": "chain_activity_joy"}],
		"metrics": {"tx_count_change": 62.0},
		"adjustments": [{"category": "gas_pressure", "direction": "decrease", "magnitude": "nudge", "reason": "..."}],
		"trigger": "optional override",
		"mood_narrative": "optional opaque text"
	}
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional
import argparse
import json
import logging
import os
import sys

from affect_engine.cycle.runner import AffectCycle
from affect_engine.emotion.formatter import format_state
from affect_engine.persistence.state_store import JsonFileStore
from affect_engine.sensitivity.bank import WeightAdjustment
from affect_engine.sensitivity.weight_log import ADJUSTMENT_SOURCES, WeightChangeLog

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger("run_cycle")


def _read_payload(path: Optional[str]) -> Dict[str, Any]:
	if path is None or path == "-":
		content = sys.stdin.read()
	else:
		content = Path(path).read_text(encoding="utf-8")
	return json.loads(content) if content.strip() else {}


def _parse_adjustments(records: List[Dict[str, Any]]) -> List[WeightAdjustment]:
	adjustments: List[WeightAdjustment] = []
	for record in records:
		try:
			adjustments.append(WeightAdjustment.from_dict(record))
		except ValueError as exc:
			logger.warning("Skipping adjustment %r: %s", record, exc)
	return adjustments


def main(argv: Optional[List[str]] = None) -> int:
	parser = argparse.ArgumentParser(description="Run one affect engine cycle")
	parser.add_argument("input", nargs="?", help="JSON cycle input (omit or '-' for stdin)")
	parser.add_argument("--state-dir", default=os.environ.get("AFFECT_STATE_DIR", "state"))
	parser.add_argument("--learning", action="store_true", help="print the learning report and exit")
	parser.add_argument("--source", choices=ADJUSTMENT_SOURCES, default="reflection", help="who proposed the adjustments")
	args = parser.parse_args(argv)

	state_dir = Path(args.state_dir)
	cycle = AffectCycle(JsonFileStore(state_dir), weight_log=WeightChangeLog(state_dir / "weight-history.jsonl"))

	if args.learning:
		report = cycle.learning_stats()
		print(report.overall_narrative)
		for cat in report.categories:
			print(f"  {cat.category}: {cat.current_weight:.2f} {cat.direction} ({cat.learning_intensity})")
		return 0

	payload = _read_payload(args.input)
	result = cycle.run(
		stimuli=payload.get("stimuli") or [],
		metric_samples=payload.get("metrics") or None,
		trigger=payload.get("trigger"),
		mood_narrative=payload.get("mood_narrative"),
	)
	adjustments = _parse_adjustments(payload.get("adjustments") or [])
	if adjustments:
		outcome = cycle.apply_adjustments(adjustments, source=args.source)
		for rejected in outcome.rejected:
			print(f"rejected {rejected.adjustment.category}: {rejected.error}", file=sys.stderr)

	print(f"Cycle {result.cycle}")
	print(format_state(result.state, cycle.engine))
	return 0


if __name__ == "__main__":
	sys.exit(main())
