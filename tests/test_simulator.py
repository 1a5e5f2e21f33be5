"""
Interactive Session Tests

Drives BankerSession with scripted console input and checks what it prints,
plus the command-line entry point.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from simulator import BankerSession, main, parse_index, parse_ints, resource_span
from utils.logger import SessionLogger


SCENARIOS_DIR = project_root / "tests" / "scenarios"

TEXTBOOK_INPUT = [
    "1",            # Enter claim graph
    "3",            # resources
    "10 5 7",
    "5",            # processes
    "7 5 3", "3 2 2", "9 0 2", "2 2 2", "4 3 3",
    "0 1 0", "2 0 0", "3 0 2", "2 1 1", "0 0 2",
]


def _scripted(lines):
    """input() replacement that replays lines, then signals end of input."""
    remaining = list(lines)

    def fake_input(prompt=""):
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return fake_input


def _run(lines, verbose=False):
    session = BankerSession(SessionLogger(verbose=verbose), input_fn=_scripted(lines))
    session.run()
    return session


def test_parse_index():
    assert parse_index("p2", "p") == 2
    assert parse_index("P10", "p") == 10
    assert parse_index(" r1 ", "r") == 1

    for token in ["2", "p", "r1", "px", "p-1", ""]:
        with pytest.raises(ValueError):
            parse_index(token, "p")


def test_parse_ints():
    assert parse_ints("10 5  7") == [10, 5, 7]
    assert parse_ints("") == []
    with pytest.raises(ValueError):
        parse_ints("1 two 3")


def test_enter_claim_graph(capsys):
    session = _run(TEXTBOOK_INPUT + ["5"])
    output = capsys.readouterr().out

    assert session.state is not None
    assert session.state.available.tolist() == [3, 3, 2]
    assert "Max Claim:" in output
    assert "Need:" in output
    assert "Quitting program..." in output


def test_request_granted_and_denied(capsys):
    session = _run(TEXTBOOK_INPUT + [
        "2", "p1", "r0", "1",      # granted
        "2", "p0", "r2", "2",      # unsafe
        "2", "p0", "r0", "8",      # exceeds claim
        "5",
    ])
    output = capsys.readouterr().out

    assert session.state.available.tolist() == [2, 3, 2]
    assert "p1 requests r0[1] - GRANTED" in output
    assert "[WARNING] p0 requests r2[2] - DENIED (Request would lead to UNSAFE state)" in output
    assert "Request exceeds need (requested: 8, need: 7)" in output


def test_release(capsys):
    session = _run(TEXTBOOK_INPUT + [
        "3", "p2", "r2", "5",      # more than held
        "3", "p2", "r2", "2",
        "5",
    ])
    output = capsys.readouterr().out

    assert "p2 releases r2[5] - REJECTED (Cannot release more than allocated" in output
    assert "p2 releases r2[2] - RELEASED" in output
    assert session.state.available.tolist() == [3, 3, 4]


def test_safe_sequence_shows_comparisons(capsys):
    _run(TEXTBOOK_INPUT + ["4", "5"])
    output = capsys.readouterr().out

    assert "Comparing: < 7 4 3 > <= < 3 3 2 > : Process p0 cannot be sequenced" in output
    assert "Comparing: < 1 2 2 > <= < 3 3 2 > : Process p1 can be sequenced" in output
    assert "Safe sequence of processes: p1 p3 p4 p0 p2" in output


def test_actions_require_claim_graph(capsys):
    session = _run(["2", "3", "4", "5"])
    output = capsys.readouterr().out

    assert session.state is None
    assert output.count("Please enter a claim graph first.") == 3


def test_invalid_input_keeps_running(capsys):
    session = _run(TEXTBOOK_INPUT + [
        "9",                        # invalid selection
        "abc",                      # invalid selection
        "2", "x1",                  # bad process token
        "2", "p7", "r0", "1",       # out of range
        "1", "1", "3", "1", "2", "3",        # allocation exceeds claim
        "5",
    ])
    output = capsys.readouterr().out

    assert output.count("Invalid selection.") == 2
    assert "[ERROR] Invalid input: Expected p<number>, got 'x1'" in output
    assert "Invalid process/resource (p7, r0)" in output
    assert "[ERROR] Invalid claim graph:" in output
    # the failed reload kept the previous claim graph
    assert session.state.num_processes == 5


def test_end_of_input_quits(capsys):
    session = _run(TEXTBOOK_INPUT + ["2", "p1"])
    output = capsys.readouterr().out

    assert "Quitting program..." in output
    assert session.state.available.tolist() == [3, 3, 2]


def test_verbose_logs_state_tables(capsys):
    _run(TEXTBOOK_INPUT + ["4", "5"], verbose=True)
    output = capsys.readouterr().out

    assert "[DEBUG] System State:" in output


def test_main_with_scenario(monkeypatch, capsys, tmp_path):
    monkeypatch.setattr("builtins.input", _scripted(["2", "p1", "r0", "1", "4", "5"]))
    log_path = tmp_path / "session.log"

    code = main(["--scenario", str(SCENARIOS_DIR / "textbook.json"), "--log-file", str(log_path)])
    output = capsys.readouterr().out

    assert code == 0
    assert "Scenario: Silberschatz textbook example" in output
    assert "p1 requests r0[1] - GRANTED" in output

    log_text = log_path.read_text(encoding="utf-8")
    assert log_text.startswith("Banker's Algorithm Session Log")
    assert "Safe sequence of processes: p1 p3 p4 p0 p2" in log_text


def test_main_with_invalid_scenario(capsys):
    code = main(["--scenario", str(SCENARIOS_DIR / "over_allocated.json")])
    output = capsys.readouterr().out

    assert code == 1
    assert "[ERROR] Failed to load scenario:" in output


def test_main_reports_unsafe_scenario(monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", _scripted(["4", "5"]))

    code = main(["--scenario", str(SCENARIOS_DIR / "unsafe_start.json")])
    output = capsys.readouterr().out

    assert code == 0
    assert "State is UNSAFE - no safe sequence exists (could finish: none)" in output


def test_main_with_unreadable_scenario(capsys, tmp_path):
    code = main(["--scenario", str(tmp_path)])
    output = capsys.readouterr().out

    assert code == 1
    assert "[ERROR] Failed to load scenario:" in output


def test_resource_span():
    assert resource_span(3) == "r0..r2"
    assert resource_span(1) == "r0"
    assert resource_span(0) == "no resources"


def test_prompts_without_resources(capsys):
    prompts = []
    replay = _scripted(["1", "0", "", "1", "", "", "4", "5"])

    def recording_input(prompt=""):
        prompts.append(prompt)
        return replay(prompt)

    session = BankerSession(SessionLogger(), input_fn=recording_input)
    session.run()
    output = capsys.readouterr().out

    assert session.state.num_resources == 0
    assert "Enter number of units for resources (no resources): " in prompts
    assert not any("r-1" in prompt for prompt in prompts)
    assert "Safe sequence of processes: p0" in output


def test_logger_context_manager_closes_file(tmp_path, capsys):
    log_path = tmp_path / "session.log"

    with SessionLogger(log_file=str(log_path)) as logger:
        logger.log("Claim graph loaded")
        logger.log("hidden", "debug")
        assert not logger.closed

    assert logger.closed
    logger.close()     # second close is harmless

    lines = log_path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("Banker's Algorithm Session Log - ")
    assert lines[1] == "=" * 60
    assert lines[-1] == "Claim graph loaded"
    assert "hidden" not in capsys.readouterr().out
