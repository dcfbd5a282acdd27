from .state_store import (
	CYCLE_COUNTER_KEY,
	EMOTION_HISTORY_KEY,
	EMOTION_STATE_KEY,
	ROLLING_AVERAGES_KEY,
	STRATEGY_WEIGHTS_KEY,
	InMemoryStore,
	JsonFileStore,
	StateStore,
	affect_state_from_dict,
	affect_state_to_dict,
	bank_from_dict,
	bank_to_dict,
	history_from_list,
	history_to_list,
	rolling_averages_from_dict,
	rolling_averages_to_dict,
)

__all__ = [
	"CYCLE_COUNTER_KEY",
	"EMOTION_HISTORY_KEY",
	"EMOTION_STATE_KEY",
	"ROLLING_AVERAGES_KEY",
	"STRATEGY_WEIGHTS_KEY",
	"InMemoryStore",
	"JsonFileStore",
	"StateStore",
	"affect_state_from_dict",
	"affect_state_to_dict",
	"bank_from_dict",
	"bank_to_dict",
	"history_from_list",
	"history_to_list",
	"rolling_averages_from_dict",
	"rolling_averages_to_dict",
]
