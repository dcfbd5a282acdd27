"""
Stimulus category catalog.

Closed set of sensitivity categories shared with the external stimulus
generators. Each entry names the plain-language domain used in reports and
the emotions its stimuli usually drive.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class StimulusCategory:
	key: str
	label: str
	emotions: Tuple[str, ...]


CATEGORIES: Tuple[StimulusCategory, ...] = (
	StimulusCategory("whale_transfer_fear", "whale transfers", ("fear", "anticipation")),
	StimulusCategory("chain_activity_joy", "chain activity", ("joy", "anticipation", "trust", "surprise")),
	StimulusCategory("chain_quiet_sadness", "chain quiet periods", ("sadness", "fear")),
	StimulusCategory("failed_tx_anger", "failed transactions", ("anger", "disgust")),
	StimulusCategory("launchpad_excitement", "token launches", ("surprise", "anticipation", "joy", "trust")),
	StimulusCategory("token_price_sentiment", "own token price moves", ("joy", "fear", "trust")),
	StimulusCategory("native_price_sentiment", "native coin price moves", ("joy", "sadness", "fear", "surprise")),
	StimulusCategory("tvl_sentiment", "TVL changes", ("trust", "joy", "fear")),
	StimulusCategory("social_engagement", "social engagement", ("anticipation", "joy", "trust")),
	StimulusCategory("self_performance_reaction", "self performance", ("joy", "sadness")),
	StimulusCategory("ecosystem_volume", "ecosystem volume", ("anticipation", "surprise", "sadness")),
	StimulusCategory("gas_pressure", "gas pressure", ("anticipation",)),
	StimulusCategory("github_star_reaction", "GitHub stars", ("joy", "surprise")),
	StimulusCategory("feed_joy", "feed activity", ("joy",)),
	StimulusCategory("dex_market", "DEX market data", ("anticipation", "fear")),
	StimulusCategory("orderbook_depth", "orderbook depth", ("trust", "fear")),
)

CATEGORY_KEYS: Tuple[str, ...] = tuple(c.key for c in CATEGORIES)
_BY_KEY: Dict[str, StimulusCategory] = {c.key: c for c in CATEGORIES}


def is_known_category(name: Any) -> bool:
	return isinstance(name, str) and name in _BY_KEY


def get_category(name: str) -> StimulusCategory:
	try:
		return _BY_KEY[name]
	except KeyError:
		raise KeyError(f"Unknown stimulus category: {name}") from None


def category_label(name: str) -> str:
	"""Plain-language domain name; unknown keys echo back unchanged."""
	entry = _BY_KEY.get(name)
	return entry.label if entry is not None else name
