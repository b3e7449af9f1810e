import json
from pathlib import Path

import pytest

from schedsim.errors import InvalidWorkloadError
from schedsim.models import ProcessSpec
from schedsim.workload_io import dump_workload, load_workload, parse_specs, spec_from_mapping, validate_spec


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":"A","arrival_time":0,"burst_time":3,"priority":1},'
                 '{"pid":"B","arrival_time":1,"burst_time":2}]')
    specs = load_workload(p)
    assert isinstance(specs[0], ProcessSpec)
    assert specs[0].name == "A"
    assert specs[1].priority is None
    assert specs[1].arrival_time == 1


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority\nA,0,3,1\nB,1,2,\n")
    specs = load_workload(p)
    assert specs[0].name == "A"
    assert specs[0].burst_time == 3
    assert specs[1].priority is None


def test_load_camel_case_keys(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text(json.dumps([{"name": "X", "arrivalTime": 2, "burstTime": 4, "ioBurstTime": 1}]))
    (spec,) = load_workload(p)
    assert spec == ProcessSpec(arrival_time=2, burst_time=4, priority=None, name="X", io_burst_time=1)


def test_unsupported_extension(tmp_path: Path):
    p = tmp_path / "w.yaml"
    p.write_text("[]")
    with pytest.raises(InvalidWorkloadError):
        load_workload(p)


def test_invalid_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text("[{")
    with pytest.raises(InvalidWorkloadError, match="Invalid JSON"):
        load_workload(p)


def test_workload_must_be_a_list():
    with pytest.raises(InvalidWorkloadError):
        parse_specs({"arrival_time": 0, "burst_time": 1})


@pytest.mark.parametrize(
    "entry",
    [
        {"burst_time": 3},
        {"arrival_time": 0},
        {"arrival_time": -1, "burst_time": 3},
        {"arrival_time": 0, "burst_time": -2},
        {"arrival_time": 0, "burst_time": 1.5},
        {"arrival_time": True, "burst_time": 1},
        {"arrival_time": "soon", "burst_time": 1},
        "not a mapping",
    ],
)
def test_rejects_bad_entries(entry):
    with pytest.raises(InvalidWorkloadError):
        spec_from_mapping(entry)


def test_negative_priority_is_allowed():
    spec = spec_from_mapping({"arrival_time": 0, "burst_time": 1, "priority": -3})
    assert spec.priority == -3


def test_whole_floats_are_accepted():
    spec = spec_from_mapping({"arrival_time": 2.0, "burst_time": 3.0})
    assert spec.arrival_time == 2
    assert spec.burst_time == 3


def test_validate_spec_rejects_negative_burst():
    with pytest.raises(InvalidWorkloadError):
        validate_spec(ProcessSpec(arrival_time=0, burst_time=-1))


def test_dump_then_load(tmp_path: Path):
    specs = [ProcessSpec(arrival_time=0, burst_time=3, priority=2, name="A"), ProcessSpec(1, 2)]
    p = tmp_path / "out.json"
    dump_workload(specs, p)

    raw = json.loads(p.read_text())
    assert raw[1] == {"arrival_time": 1, "burst_time": 2}
    assert load_workload(p) == specs
