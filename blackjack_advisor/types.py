from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Action(Enum):
    HIT = auto()
    STAND = auto()
    DOUBLE = auto()
    SPLIT = auto()
    BLACKJACK = auto()
    BUST = auto()

    @property
    def category(self) -> str:
        return self.name.lower()


class ChartAction(Enum):
    """Cell codes used by the printed strategy charts."""

    HIT = "H"
    STAND = "S"
    DOUBLE = "D"
    SPLIT = "Y"
    NO_SPLIT = "N"


class Mode(Enum):
    PLAYER = "player"
    DEALER = "dealer"


@dataclass(frozen=True)
class HandTotal:
    total: int
    soft: bool
    bust: bool
    blackjack: bool


@dataclass(frozen=True)
class BetAdvice:
    label: str
    tier: str
    multiplier: int = 1


@dataclass(frozen=True)
class Recommendation:
    action: Action
    reason: str
    rule: str
    total: int
    soft: bool = False
    true_count: float = 0.0

    @property
    def category(self) -> str:
        return self.action.category

    def to_dict(self) -> dict:
        return {
            "action": self.action.name,
            "category": self.category,
            "rule": self.rule,
            "reason": self.reason,
            "total": self.total,
            "soft": self.soft,
            "true_count": self.true_count,
        }
