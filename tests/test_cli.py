import io
import json

import pytest

from blackjack_advisor.cli import handle_command, main, parse_target, run_session
from blackjack_advisor.cli_helpers import EventLog, format_chart, format_snapshot, parse_cards, parse_rank
from blackjack_advisor.rules import Rules
from blackjack_advisor.session import Session


@pytest.mark.parametrize(
    "token,rank",
    [("A", "A"), ("a", "A"), ("10S", "10"), ("kh", "K"), ("T", "10"), ("td", "10"), (" 7 ", "7"), ("1", "A")],
)
def test_parse_rank(token, rank):
    assert parse_rank(token) == rank


@pytest.mark.parametrize("token", ["", "X", "0", "12", "HH"])
def test_parse_rank_rejects(token):
    with pytest.raises(ValueError):
        parse_rank(token)


def test_parse_cards():
    assert parse_cards("A,7") == ["A", "7"]
    assert parse_cards("10 K, 5") == ["10", "K", "5"]
    assert parse_cards(None) == []


def test_parse_target():
    assert parse_target("dealer") == "dealer"
    assert parse_target("D") == "dealer"
    assert parse_target("2") == 2
    with pytest.raises(ValueError):
        parse_target("x")


def test_run_session_script():
    s = Session()
    out = io.StringIO()
    errors = run_session(s, ["2", "3", "dealer", "6", "show", "bogus", "rm 1 x", "quit", "5"], out)
    assert errors == 2
    assert s.hand(1) == ["2", "3"]
    assert s.dealer_card == "6"
    assert s.get_remaining_cards() == 49
    assert "player 1: 2 3 = 5" in out.getvalue()
    assert "error: Unknown card: 'bogus'" in out.getvalue()


def test_run_session_keeps_error_count_on_interrupt():
    def lines():
        yield "bogus"
        yield "2"
        raise KeyboardInterrupt

    s = Session()
    out = io.StringIO()
    assert run_session(s, lines(), out) == 1
    assert s.hand(1) == ["2"]


def test_handle_command_edits_hands():
    s = Session(Rules(num_players=2))
    out = io.StringIO()
    for line in ("add 2 K", "add 2 5", "rm 2 1", "add d 9", "player 2", "prob 10"):
        handle_command(s, line, out)
    assert s.hand(2) == ["5"]
    assert s.dealer_card == "9"
    assert s.active_player == 2
    assert "P(10) = " in out.getvalue()
    handle_command(s, "clear 2", out)
    assert s.hand(2) == []
    handle_command(s, "decks 2", out)
    assert s.get_remaining_cards() == 104


def test_handle_command_usage_errors():
    s = Session()
    with pytest.raises(ValueError):
        handle_command(s, "add 1")
    with pytest.raises(ValueError):
        handle_command(s, "decks")
    with pytest.raises(ValueError):
        handle_command(s, "players eight")


def test_advise_command(capsys):
    main(["advise", "--hand", "10,6", "--dealer", "10"])
    result = json.loads(capsys.readouterr().out)
    assert result["recommendation"]["action"] == "HIT"
    assert result["running_count"] == -1
    assert result["remaining_cards"] == 49


def test_advise_with_seen_cards(capsys):
    main(["advise", "--hand", "10,10", "--dealer", "6", "--seen", "2,2,2,2,3,3,3,3,4,4,4,4"])
    result = json.loads(capsys.readouterr().out)
    assert result["recommendation"]["action"] == "SPLIT"
    assert result["bet_advice"]["label"] == "raise-4x"


def test_advise_rejects_bad_input():
    with pytest.raises(SystemExit) as exc:
        main(["advise", "--hand", "X", "--dealer", "6"])
    assert exc.value.code == 2
    with pytest.raises(SystemExit):
        main(["advise", "--hand", "A,A", "--dealer", "6", "--seen", "A,A,A"])


def test_tables_command(capsys):
    main(["tables", "--kind", "hard"])
    out = capsys.readouterr().out
    assert out.startswith("[hard]")
    assert "16" in out


def test_format_chart():
    lines = format_chart("pair").splitlines()
    assert len(lines) == 11
    assert lines[0].split() == ["hand", "2", "3", "4", "5", "6", "7", "8", "9", "10", "A"]
    assert lines[-1].split()[0] == "10,10"


def test_format_snapshot_marks_active_player():
    s = Session()
    s.add_card(1, "A")
    s.add_card(1, "K")
    s.set_dealer_card("9")
    text = format_snapshot(s.snapshot())
    assert "* player 1: A K = 21 (blackjack) -> BLACKJACK" in text
    assert "dealer: 9" in text


def test_event_log_writes_jsonl(tmp_path):
    path = tmp_path / "events.jsonl"
    log = EventLog(str(path))
    log({"event": "add_card", "rank": "A"})
    log.close()
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    event = json.loads(lines[0])
    assert event["event"] == "add_card"
    assert "timestamp" in event


def test_play_command(monkeypatch, tmp_path, capsys):
    path = tmp_path / "play.jsonl"
    monkeypatch.setattr("sys.stdin", io.StringIO("A\nK\ndealer\n6\nquit\n"))
    main(["play", "--log-jsonl", str(path)])
    out = capsys.readouterr().out
    assert "final RC=-1" in out
    events = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert [e["event"] for e in events] == ["add_card", "add_card", "set_mode", "set_dealer_card"]
