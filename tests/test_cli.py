import json
from pathlib import Path

import pytest

from schedsim import cli
from schedsim.workload_io import load_workload


@pytest.fixture(autouse=True)
def _plain_env(monkeypatch):
    for name in ("FORCE_COLOR", "SCHEDSIM_LOG_LEVEL", "SCHEDSIM_STEP_DELAY", "SCHEDSIM_MAX_STEPS",
                 "SCHEDSIM_TIME_QUANTUM", "SCHEDSIM_RANDOM_SEED"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def workload(tmp_path: Path) -> Path:
    p = tmp_path / "w.json"
    p.write_text(json.dumps([
        {"pid": "P1", "arrival_time": 0, "burst_time": 5},
        {"pid": "P2", "arrival_time": 2, "burst_time": 3},
        {"pid": "P3", "arrival_time": 4, "burst_time": 1},
        {"pid": "P4", "arrival_time": 6, "burst_time": 4},
    ]))
    return p


def _feed(monkeypatch, commands):
    answers = iter(commands)

    def fake_input(prompt=""):
        try:
            return next(answers)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr("builtins.input", fake_input)


def test_run_prints_tables(workload, capsys):
    assert cli.main(["run", "-a", "fcfs", "-w", str(workload)]) == 0
    out = capsys.readouterr().out
    assert "Algorithm: FCFS" in out
    assert "Gantt Chart" in out
    assert "System metrics" in out
    assert "Avg waiting" in out


def test_run_json(workload, capsys):
    assert cli.main(["run", "-a", "RR", "-q", "3", "-w", str(workload), "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["algorithm"] == "RR"
    assert data["time_quantum"] == 3
    assert data["total_time"] == 13
    assert len(data["results"]) == 4


def test_run_step_mode(workload, capsys):
    assert cli.main(["run", "-a", "srtf", "-w", str(workload), "--step", "--step-delay", "0"]) == 0
    out = capsys.readouterr().out
    assert "t=  0" in out
    assert "t= 13" in out
    assert "done: 4/4" in out


def test_run_unknown_algorithm(workload, capsys):
    assert cli.main(["run", "-a", "lottery", "-w", str(workload)]) == 2
    assert "Unknown scheduling algorithm" in capsys.readouterr().out


def test_run_missing_format(tmp_path: Path, capsys):
    p = tmp_path / "w.txt"
    p.write_text("")
    assert cli.main(["run", "-a", "fcfs", "-w", str(p)]) == 2
    assert "Unsupported workload format" in capsys.readouterr().out


def test_compare_lists_every_algorithm(workload, capsys):
    assert cli.main(["compare", "-w", str(workload), "--seed", "1"]) == 0
    out = capsys.readouterr().out
    for name in ("FCFS", "SJF", "SRTF", "RR", "RANDOM"):
        assert name in out


def test_generate_to_file(tmp_path: Path, capsys):
    out_file = tmp_path / "gen.json"
    assert cli.main(["generate", "-n", "7", "--seed", "5", "-o", str(out_file)]) == 0
    specs = load_workload(out_file)
    assert len(specs) == 7
    assert specs[0].name == "Process-1"
    assert "Wrote 7 processes" in capsys.readouterr().out


def test_generate_rejects_bad_count(capsys):
    assert cli.main(["generate", "-n", "0"]) == 2


def test_algorithms_table(capsys):
    assert cli.main(["algorithms"]) == 0
    out = capsys.readouterr().out
    assert "PRIORITY_P" in out
    assert "non-preemptive" in out


def test_bad_environment_is_reported(monkeypatch, capsys):
    monkeypatch.setenv("SCHEDSIM_MAX_STEPS", "zero")
    assert cli.main(["algorithms"]) == 2
    assert "Configuration error" in capsys.readouterr().out


def test_interactive_session(workload, monkeypatch, capsys):
    _feed(monkeypatch, ["s", "", "r 2", "state", "speed 0.05", "speed 99", "bogus", "r", "reset", "q"])
    assert cli.main(["interactive", "-a", "fcfs", "-w", str(workload), "--step-delay", "0"]) == 0
    out = capsys.readouterr().out
    assert "t=  1" in out
    assert "t=  4" in out
    assert "State at t=4" in out
    assert "Step delay set to 0.05s" in out
    assert "Invalid speed" in out
    assert "Invalid command" in out
    assert "Simulation finished" in out
    assert "State at t=0" in out


def test_interactive_ends_on_eof(workload, monkeypatch):
    _feed(monkeypatch, [])
    assert cli.main(["interactive", "-a", "sjf", "-w", str(workload)]) == 0


def test_run_rejects_negative_step_delay(workload, capsys):
    assert cli.main(["run", "-a", "fcfs", "-w", str(workload), "--step", "--step-delay", "-1"]) == 2
    assert "Invalid step delay" in capsys.readouterr().out


def test_names_with_markup_are_printed_literally(tmp_path: Path, capsys):
    p = tmp_path / "w.json"
    p.write_text(json.dumps([{"name": "[/bold]x", "arrival_time": 0, "burst_time": 2}]))
    assert cli.main(["run", "-a", "fcfs", "-w", str(p), "--step", "--step-delay", "0"]) == 0
    assert "[/bold]x" in capsys.readouterr().out
