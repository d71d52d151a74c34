"""Static basic-strategy charts and the dealer outcome table.

Charts are written one row per player hand, one code per dealer up-card in
``DEALER_UPCARDS`` order:

    H = hit, S = stand, D = double (hit if doubling is not allowed)
    Y = split, N = don't split

Every row is checked when the module is imported, so a malformed chart fails
at startup rather than at lookup time.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple, Union

from .cards import CANONICAL_RANKS, normalize_rank
from .constants import HARD_TOTAL_MAX, HARD_TOTAL_MIN
from .types import ChartAction


DEALER_UPCARDS: Tuple[str, ...] = ("2", "3", "4", "5", "6", "7", "8", "9", "10", "A")

PLAY_CODES = frozenset({ChartAction.HIT, ChartAction.STAND, ChartAction.DOUBLE})
SPLIT_CODES = frozenset({ChartAction.SPLIT, ChartAction.NO_SPLIT})

RowKey = Union[int, str]
Chart = Mapping[RowKey, Mapping[str, ChartAction]]

#            dealer: 2 3 4 5 6 7 8 9 T A
_HARD_ROWS = {
    5:  "H H H H H H H H H H",
    6:  "H H H H H H H H H H",
    7:  "H H H H H H H H H H",
    8:  "H H H H H H H H H H",
    9:  "H D D D D H H H H H",
    10: "D D D D D D D D H H",
    11: "D D D D D D D D D D",
    12: "H H S S S H H H H H",
    13: "S S S S S H H H H H",
    14: "S S S S S H H H H H",
    15: "S S S S S H H H H H",
    16: "S S S S S H H H H H",
    17: "S S S S S S S S S S",
    18: "S S S S S S S S S S",
    19: "S S S S S S S S S S",
    20: "S S S S S S S S S S",
    21: "S S S S S S S S S S",
}

_SOFT_ROWS = {
    13: "H H H D D H H H H H",  # A,2
    14: "H H H D D H H H H H",  # A,3
    15: "H H D D D H H H H H",  # A,4
    16: "H H D D D H H H H H",  # A,5
    17: "H D D D D H H H H H",  # A,6
    18: "S D D D D S S H H H",  # A,7
    19: "S S S S S S S S S S",  # A,8
    20: "S S S S S S S S S S",  # A,9
    21: "S S S S S S S S S S",
}

_PAIR_ROWS = {
    "A":  "Y Y Y Y Y Y Y Y Y Y",
    "2":  "Y Y Y Y Y Y N N N N",
    "3":  "Y Y Y Y Y Y N N N N",
    "4":  "N N N Y Y N N N N N",
    "5":  "N N N N N N N N N N",
    "6":  "Y Y Y Y Y N N N N N",
    "7":  "Y Y Y Y Y Y N N N N",
    "8":  "Y Y Y Y Y Y Y Y Y Y",
    "9":  "Y Y Y Y Y N Y Y N N",
    "10": "N N N N N N N N N N",
}

# Probability of each final dealer result given the up-card. Empirical
# figures; rows are not normalised to exactly 1.
_DEALER_OUTCOMES = {
    "2":  {"17": 0.140, "18": 0.134, "19": 0.130, "20": 0.123, "21": 0.120, "bust": 0.353},
    "3":  {"17": 0.131, "18": 0.130, "19": 0.123, "20": 0.122, "21": 0.118, "bust": 0.376},
    "4":  {"17": 0.130, "18": 0.114, "19": 0.120, "20": 0.116, "21": 0.115, "bust": 0.405},
    "5":  {"17": 0.119, "18": 0.123, "19": 0.117, "20": 0.106, "21": 0.107, "bust": 0.428},
    "6":  {"17": 0.166, "18": 0.106, "19": 0.107, "20": 0.101, "21": 0.098, "bust": 0.422},
    "7":  {"17": 0.369, "18": 0.138, "19": 0.078, "20": 0.079, "21": 0.074, "bust": 0.262},
    "8":  {"17": 0.130, "18": 0.361, "19": 0.129, "20": 0.068, "21": 0.069, "bust": 0.243},
    "9":  {"17": 0.120, "18": 0.105, "19": 0.357, "20": 0.122, "21": 0.061, "bust": 0.235},
    "10": {"17": 0.112, "18": 0.112, "19": 0.112, "20": 0.340, "21": 0.035, "bust": 0.214, "blackjack": 0.075},
    "A":  {"17": 0.131, "18": 0.131, "19": 0.131, "20": 0.131, "21": 0.051, "bust": 0.117, "blackjack": 0.308},
}


def _build_chart(name: str, rows: Dict[RowKey, str], allowed: frozenset) -> Chart:
    chart: Dict[RowKey, Mapping[str, ChartAction]] = {}
    for key, row in rows.items():
        codes = row.split()
        if len(codes) != len(DEALER_UPCARDS):
            raise ValueError(f"{name} chart row {key!r}: expected {len(DEALER_UPCARDS)} cells, got {len(codes)}")
        cells: Dict[str, ChartAction] = {}
        for dealer, code in zip(DEALER_UPCARDS, codes):
            action = ChartAction(code)
            if action not in allowed:
                raise ValueError(f"{name} chart row {key!r}: {code!r} is not allowed vs {dealer}")
            cells[dealer] = action
        chart[key] = MappingProxyType(cells)
    return MappingProxyType(chart)


def _build_outcomes(rows: Dict[str, Dict[str, float]]) -> Mapping[str, Mapping[str, float]]:
    missing = set(DEALER_UPCARDS) - set(rows)
    if missing:
        raise ValueError(f"dealer outcome table missing up-cards: {sorted(missing)}")
    return MappingProxyType({up: MappingProxyType(dict(dist)) for up, dist in rows.items()})


HARD_STRATEGY: Chart = _build_chart("hard", _HARD_ROWS, PLAY_CODES)
SOFT_STRATEGY: Chart = _build_chart("soft", _SOFT_ROWS, PLAY_CODES)
PAIR_STRATEGY: Chart = _build_chart("pair", _PAIR_ROWS, SPLIT_CODES)
DEALER_OUTCOMES: Mapping[str, Mapping[str, float]] = _build_outcomes(_DEALER_OUTCOMES)

if set(HARD_STRATEGY) != set(range(HARD_TOTAL_MIN, HARD_TOTAL_MAX + 1)):
    raise ValueError(f"hard chart must cover totals {HARD_TOTAL_MIN}..{HARD_TOTAL_MAX}")
if set(SOFT_STRATEGY) != set(range(13, 22)):
    raise ValueError("soft chart must cover totals 13..21")
if set(PAIR_STRATEGY) != set(CANONICAL_RANKS):
    raise ValueError("pair chart must have one row per canonical rank")


def hard_action(total: int, dealer: str) -> Optional[ChartAction]:
    row = HARD_STRATEGY.get(total)
    return row.get(normalize_rank(dealer)) if row else None


def soft_action(total: int, dealer: str) -> Optional[ChartAction]:
    row = SOFT_STRATEGY.get(total)
    return row.get(normalize_rank(dealer)) if row else None


def pair_action(pair: str, dealer: str) -> Optional[ChartAction]:
    row = PAIR_STRATEGY.get(normalize_rank(pair))
    return row.get(normalize_rank(dealer)) if row else None


def dealer_outcomes(dealer: str) -> Optional[Mapping[str, float]]:
    return DEALER_OUTCOMES.get(normalize_rank(dealer))


def dealer_bust_probability(dealer: str) -> float:
    outcomes = dealer_outcomes(dealer)
    return outcomes.get("bust", 0.0) if outcomes else 0.0


# Rows shown on the printed reference charts
HARD_CHART_ROWS: Tuple[int, ...] = tuple(range(8, 18))
SOFT_CHART_ROWS: Tuple[Tuple[str, int], ...] = tuple((f"A,{n}", 11 + n) for n in range(2, 10))
PAIR_CHART_ROWS: Tuple[Tuple[str, str], ...] = tuple((f"{r},{r}", r) for r in CANONICAL_RANKS)

_PAIR_DISPLAY = {ChartAction.SPLIT: "P", ChartAction.NO_SPLIT: "-"}


def chart(kind: str) -> List[Tuple[str, List[str]]]:
    """Reference chart rows as ``(label, [code per dealer up-card])``."""
    if kind == "hard":
        return [(str(total), [HARD_STRATEGY[total][d].value for d in DEALER_UPCARDS]) for total in HARD_CHART_ROWS]
    if kind == "soft":
        return [(label, [SOFT_STRATEGY[total][d].value for d in DEALER_UPCARDS]) for label, total in SOFT_CHART_ROWS]
    if kind == "pair":
        return [(label, [_PAIR_DISPLAY[PAIR_STRATEGY[pair][d]] for d in DEALER_UPCARDS]) for label, pair in PAIR_CHART_ROWS]
    if kind == "dealer":
        columns = ("17", "18", "19", "20", "21", "bust", "blackjack")
        return [
            (up, [f"{DEALER_OUTCOMES[up][c] * 100:.1f}" if c in DEALER_OUTCOMES[up] else "-" for c in columns])
            for up in DEALER_UPCARDS
        ]
    raise ValueError(f"Unknown chart kind: {kind}")
