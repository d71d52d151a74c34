from __future__ import annotations

import argparse
import json
import sys
from typing import Iterable, Optional, TextIO, Union

from .cli_helpers import EventLog, format_chart, format_snapshot, parse_cards, parse_rank
from .constants import CHART_KINDS, DEALER_TARGET, DECK_CHOICES, DEFAULT_DECKS, DEFAULT_PLAYERS, MAX_PLAYERS, MIN_PLAYERS
from .counting import format_count
from .rules import Rules
from .session import Session
from .types import Mode


PLAY_HELP = """commands:
  <card>              deal a card (to the active player, or the dealer in dealer mode)
  add <target> <card> add a card to player N or 'dealer'
  rm <target> <pos>   remove the card at position pos (1-based)
  clear <target>      clear a hand
  player <n>          make player n active
  players <n>         set the number of players (1-7)
  dealer              switch the card picker to the dealer
  decks <n>           change deck count (resets the shoe)
  reset               reset the shoe and clear all hands
  prob [card]         draw probabilities
  show                print the table
  quit                exit"""


class _Quit(Exception):
    pass


def parse_target(token: str) -> Union[int, str]:
    lowered = token.strip().lower()
    if lowered in (DEALER_TARGET, "d"):
        return DEALER_TARGET
    try:
        return int(lowered)
    except ValueError:
        raise ValueError(f"Unknown target: {token!r}") from None


def _int_arg(parts: list, idx: int, name: str) -> int:
    if len(parts) <= idx:
        raise ValueError(f"missing {name}")
    try:
        return int(parts[idx])
    except ValueError:
        raise ValueError(f"{name} must be a number, got {parts[idx]!r}") from None


def handle_command(session: Session, line: str, out: Optional[TextIO] = None) -> None:
    """Apply one interactive command to ``session``; raises ValueError on bad input."""
    parts = line.split()
    if not parts:
        return
    cmd = parts[0].lower()
    show = True
    if cmd in ("quit", "exit", "q"):
        raise _Quit()
    elif cmd in ("help", "?"):
        print(PLAY_HELP, file=out)
        show = False
    elif cmd == "add":
        if len(parts) < 3:
            raise ValueError("usage: add <target> <card>")
        if not session.add_card(parse_target(parts[1]), parse_rank(parts[2])):
            print("card not added (no such player or rank exhausted)", file=out)
    elif cmd == "rm":
        if len(parts) < 3:
            raise ValueError("usage: rm <target> <pos>")
        session.remove_card(parse_target(parts[1]), _int_arg(parts, 2, "position") - 1)
    elif cmd == "clear":
        if len(parts) < 2:
            raise ValueError("usage: clear <target>")
        session.clear_hand(parse_target(parts[1]))
    elif cmd == "player":
        if not session.set_active_player(_int_arg(parts, 1, "player")):
            print(f"no such player (1-{session.num_players})", file=out)
    elif cmd == "players":
        session.set_player_count(_int_arg(parts, 1, "player count"))
    elif cmd == "dealer":
        session.set_mode(Mode.DEALER)
    elif cmd == "decks":
        session.set_deck_count(_int_arg(parts, 1, "deck count"))
    elif cmd == "reset":
        session.reset_shoe()
    elif cmd == "prob":
        if len(parts) > 1:
            rank = parse_rank(parts[1])
            print(f"P({rank}) = {session.get_card_probability(rank):.4f}", file=out)
        else:
            probs = session.shoe.draw_probabilities()
            print(" ".join(f"{r}:{p:.3f}" for r, p in probs.items()), file=out)
        show = False
    elif cmd == "show":
        pass
    else:
        if not session.deal(parse_rank(parts[0])):
            print("card not added (rank exhausted)", file=out)
    if show:
        print(format_snapshot(session.snapshot()), file=out)


def run_session(session: Session, lines: Iterable[str], out: Optional[TextIO] = None) -> int:
    """Feed commands to a session until input ends or 'quit'. Returns the error count."""
    errors = 0
    try:
        for line in lines:
            try:
                handle_command(session, line.strip(), out)
            except _Quit:
                break
            except ValueError as e:
                errors += 1
                print(f"error: {e}", file=out)
    except KeyboardInterrupt:
        pass
    return errors


def cmd_advise(args: argparse.Namespace) -> None:
    hand = parse_cards(args.hand)
    dealer = parse_rank(args.dealer)
    session = Session(Rules(num_decks=args.decks))
    for rank in parse_cards(args.seen):
        if session.shoe.is_depleted(rank):
            raise ValueError(f"more {rank} cards seen than the shoe holds")
        session.shoe.track(rank)
    for rank in hand:
        if not session.add_card(1, rank):
            raise ValueError(f"more {rank} cards seen than the shoe holds")
    if not session.set_dealer_card(dealer):
        raise ValueError(f"more {dealer} cards seen than the shoe holds")

    rec = session.get_recommendation(1)
    advice = session.get_bet_advice()
    result = {
        "hand": hand,
        "dealer": dealer,
        "recommendation": rec.to_dict() if rec else None,
        "running_count": session.get_running_count(),
        "true_count": round(session.get_true_count(), 4),
        "remaining_cards": session.get_remaining_cards(),
        "bet_advice": {"label": advice.label, "tier": advice.tier, "multiplier": advice.multiplier},
    }
    print(json.dumps(result, indent=2))


def cmd_tables(args: argparse.Namespace) -> None:
    kinds = CHART_KINDS if args.kind == "all" else (args.kind,)
    for i, kind in enumerate(kinds):
        if i:
            print()
        print(f"[{kind}]")
        print(format_chart(kind))


def cmd_play(args: argparse.Namespace) -> None:
    log_file = args.log_jsonl
    if not log_file and args.log:
        log_file = EventLog.default_path()
    log = None
    try:
        log = EventLog(log_file, echo=args.debug) if (log_file or args.debug) else None
        session = Session(Rules(num_decks=args.decks, num_players=args.players), log_fn=log)
        print(f"blackjack advisor: {args.decks} deck(s), {args.players} player(s); 'help' for commands")
        print(format_snapshot(session.snapshot()))
        errors = run_session(session, sys.stdin)
    finally:
        if log:
            log.close()
    print(f"final RC={format_count(session.get_running_count())} TC={format_count(session.get_true_count(), 2)}")
    if errors:
        print(f"{errors} command(s) rejected")
    if log_file:
        print(f"session log written to {log_file}")


def main(argv: Optional[list] = None):
    parser = argparse.ArgumentParser(prog="blackjack-advisor", description="Blackjack strategy and card counting advisor")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_adv = sub.add_parser("advise", help="Recommend a play for one hand")
    p_adv.add_argument("--hand", type=str, required=True, help="Player cards, e.g. 'A,7' or '10 6'")
    p_adv.add_argument("--dealer", type=str, required=True, help="Dealer up-card")
    p_adv.add_argument("--decks", type=int, choices=DECK_CHOICES, default=DEFAULT_DECKS)
    p_adv.add_argument("--seen", type=str, default=None, help="Other cards already seen from this shoe")
    p_adv.set_defaults(func=cmd_advise)

    p_tab = sub.add_parser("tables", help="Print the reference strategy charts")
    p_tab.add_argument("--kind", choices=list(CHART_KINDS) + ["all"], default="all")
    p_tab.set_defaults(func=cmd_tables)

    p_play = sub.add_parser("play", help="Track a live table interactively")
    p_play.add_argument("--decks", type=int, choices=DECK_CHOICES, default=DEFAULT_DECKS)
    p_play.add_argument("--players", type=int, choices=range(MIN_PLAYERS, MAX_PLAYERS + 1), default=DEFAULT_PLAYERS)
    p_play.add_argument("--log", action="store_true", help="Write session events to logs/<timestamp>_session.jsonl")
    p_play.add_argument("--log-jsonl", type=str, default=None, help="Write session events to this JSONL file")
    p_play.add_argument("--debug", action="store_true", help="Echo session events to stdout")
    p_play.set_defaults(func=cmd_play)

    args = parser.parse_args(argv)
    try:
        args.func(args)
    except ValueError as e:
        parser.error(str(e))


if __name__ == "__main__":
    main()
