from .advisor import StrategyAdvisor, recommend, should_split_with_count
from .cards import hand_total, is_pair, normalize_rank
from .rules import Rules
from .session import Session
from .shoe import ShoeTracker
from .types import Action, BetAdvice, ChartAction, HandTotal, Mode, Recommendation

__all__ = [
    "StrategyAdvisor",
    "recommend",
    "should_split_with_count",
    "hand_total",
    "is_pair",
    "normalize_rank",
    "Rules",
    "Session",
    "ShoeTracker",
    "Action",
    "BetAdvice",
    "ChartAction",
    "HandTotal",
    "Mode",
    "Recommendation",
]
