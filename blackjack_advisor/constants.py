"""Constants and configuration values for the blackjack advisor."""

from __future__ import annotations

# Shoe
CARDS_PER_DECK = 52
RANK_SUPPLY_PER_DECK = 4
TEN_SUPPLY_PER_DECK = 16
MIN_DECKS = 1
MAX_DECKS = 8
DECK_CHOICES = (1, 2, 4, 6, 8)
DEFAULT_DECKS = 1

# Table seats
MIN_PLAYERS = 1
MAX_PLAYERS = 7
DEFAULT_PLAYERS = 1

# Hard chart bounds; totals outside are clamped before lookup
HARD_TOTAL_MIN = 5
HARD_TOTAL_MAX = 21

# Bet ladder (true count thresholds, evaluated top-down)
BET_RAISE_4X_TC = 3.6
BET_RAISE_2X_TC = 2.0
BET_RAISE_SLIGHT_TC = 1.0
BET_LOWER_TC = -2.0

# Count deviation: split tens at or above this true count
TEN_SPLIT_TRUE_COUNT = 5.0

# Display tiers for the count readouts
RUNNING_COUNT_TIER_THRESHOLD = 0
TRUE_COUNT_TIER_THRESHOLD = 1

# File extensions
JSONL_EXTENSION = ".jsonl"

# CLI
DEALER_TARGET = "dealer"
CHART_KINDS = ("hard", "soft", "pair", "dealer")
