"""
Sensitivity package.

Learned per-category stimulus multipliers, the category catalog and the
weight change audit log.
"""

from .catalog import CATEGORIES, CATEGORY_KEYS, StimulusCategory, category_label, is_known_category
from .bank import (
	NEUTRAL_WEIGHT,
	AdjustmentOutcome,
	AuditEntry,
	BankConfig,
	RejectedAdjustment,
	SensitivityBank,
	WeightAdjustment,
	apply_adjustments,
	apply_strategy_weights,
	create_default_bank,
	decay_weights,
)
from .weight_log import WeightChange, WeightChangeEntry, WeightChangeLog

__all__ = [
	"CATEGORIES",
	"CATEGORY_KEYS",
	"StimulusCategory",
	"category_label",
	"is_known_category",
	"NEUTRAL_WEIGHT",
	"AdjustmentOutcome",
	"AuditEntry",
	"BankConfig",
	"RejectedAdjustment",
	"SensitivityBank",
	"WeightAdjustment",
	"apply_adjustments",
	"apply_strategy_weights",
	"create_default_bank",
	"decay_weights",
	"WeightChange",
	"WeightChangeEntry",
	"WeightChangeLog",
]
