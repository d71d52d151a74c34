"""Helper functions for CLI operations."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

from .constants import JSONL_EXTENSION
from .counting import format_count
from .strategy import DEALER_UPCARDS, chart


_RANK_ALIASES = {"T": "10", "1": "A", "11": "A"}


def parse_rank(token: str) -> str:
    """Parse a card token such as 'A', 'k', 'T', '10', '10S' or 'qh' into a rank."""
    cleaned = token.strip().upper().replace(" ", "")
    if not cleaned:
        raise ValueError("Empty card")
    # Strip suit if present
    if len(cleaned) > 1 and cleaned[-1] in "HDCS":
        cleaned = cleaned[:-1]
    rank = _RANK_ALIASES.get(cleaned, cleaned)
    if rank not in ("A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K"):
        raise ValueError(f"Unknown card: {token!r}")
    return rank


def parse_cards(text: Optional[str]) -> List[str]:
    """Parse a comma or space separated card list ('A,7', '10 K 5')."""
    if not text:
        return []
    tokens = text.replace(",", " ").split()
    return [parse_rank(t) for t in tokens]


class EventLog:
    """Append-only JSONL sink for session events."""

    def __init__(self, path: Optional[str] = None, echo: bool = False, stream: Optional[TextIO] = None):
        self.path = path
        self.echo = echo
        self.stream = stream
        self._fh = open(path, "a", encoding="utf-8") if path else None

    @classmethod
    def default_path(cls, directory: str = "logs") -> str:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        Path(directory).mkdir(parents=True, exist_ok=True)
        return str(Path(directory) / f"{ts}_session{JSONL_EXTENSION}")

    def __call__(self, event: Dict[str, Any]) -> None:
        event = dict(event)
        event["timestamp"] = datetime.now().isoformat()
        line = json.dumps(event)
        if self._fh:
            self._fh.write(line + "\n")
            self._fh.flush()
        if self.echo:
            print(f"[event] {line}", file=self.stream)

    def close(self) -> None:
        if self._fh:
            self._fh.close()
            self._fh = None


def format_chart(kind: str) -> str:
    if kind == "dealer":
        header = ["up", "17", "18", "19", "20", "21", "bust", "bj"]
        width = 6
    else:
        header = ["hand"] + list(DEALER_UPCARDS)
        width = 3
    rows = chart(kind)
    label_width = max(len(header[0]), max(len(label) for label, _ in rows))
    lines = [header[0].ljust(label_width) + " " + "".join(h.rjust(width) for h in header[1:])]
    for label, cells in rows:
        lines.append(label.ljust(label_width) + " " + "".join(c.rjust(width) for c in cells))
    return "\n".join(lines)


def format_snapshot(snap: Dict[str, Any]) -> str:
    lines = [
        f"decks={snap['num_decks']} remaining={snap['remaining_cards']} "
        f"RC={format_count(snap['running_count'])} TC={format_count(snap['true_count'], 2)} "
        f"bet={snap['bet_advice']['label']}",
    ]
    dealer = snap["dealer"]["card"] or "-"
    marker = "*" if snap["mode"] == "dealer" else " "
    lines.append(f"{marker} dealer: {dealer}")
    for p in snap["players"]:
        marker = "*" if p["active"] else " "
        cards = " ".join(p["cards"]) or "-"
        tags = []
        if p["blackjack"]:
            tags.append("blackjack")
        elif p["bust"]:
            tags.append("bust")
        elif p["soft"]:
            tags.append("soft")
        tag_txt = f" ({', '.join(tags)})" if tags else ""
        line = f"{marker} player {p['player']}: {cards} = {p['total']}{tag_txt}"
        rec = p["recommendation"]
        if rec:
            line += f" -> {rec['action']}: {rec['reason']}"
        lines.append(line)
    seen = " ".join(f"{r}:{v['count']}{'!' if v['depleted'] else ''}" for r, v in snap["seen"].items())
    lines.append(f"  seen: {seen}")
    return "\n".join(lines)
