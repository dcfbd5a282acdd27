"""
Scalar helpers with robust handling of NaN/Inf and out-of-range inputs.
"""
from __future__ import annotations

from typing import Iterable
import math

import numpy as np


def is_finite(value: float) -> bool:
	"""Return True if value is a real number without NaN/Inf."""
	try:
		return bool(np.isfinite(float(value)))
	except (TypeError, ValueError):
		return False


def clamp(value: float, low: float, high: float) -> float:
	"""Clip into [low, high] and return a plain float."""
	return float(np.clip(float(value), low, high))


def clamp01(value: float) -> float:
	"""Clip into [0, 1]; NaN collapses to 0."""
	v = float(value)
	if np.isnan(v):
		return 0.0
	return clamp(v, 0.0, 1.0)


def non_negative(value: float) -> float:
	"""Negative and non-finite inputs become 0."""
	if not is_finite(value):
		return 0.0
	return max(0.0, float(value))


def ema(current: float, observed: float, alpha: float) -> float:
	"""Exponential moving average step."""
	a = clamp(alpha, 0.0, 1.0)
	return float(current * (1.0 - a) + observed * a)


def half_life_factor(elapsed: float, half_life: float) -> float:
	"""Fraction of a deviation that survives `elapsed` units at the given half-life."""
	if half_life <= 0:
		return 0.0
	return float(math.pow(2.0, -non_negative(elapsed) / half_life))


def safe_mean(values: Iterable[float], default: float = 0.0) -> float:
	arr = np.asarray(list(values), dtype=np.float64)
	if arr.size == 0:
		return default
	return float(np.mean(arr))


def safe_std(values: Iterable[float]) -> float:
	"""Population standard deviation; 0 for empty input."""
	arr = np.asarray(list(values), dtype=np.float64)
	if arr.size == 0:
		return 0.0
	return float(np.std(arr))
