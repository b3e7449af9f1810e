from __future__ import annotations

import csv
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from .errors import InvalidWorkloadError
from .models import ProcessSpec

# Accept both the snake_case file format and the camelCase request format.
_ALIASES = {
    "arrival_time": ("arrival_time", "arrivalTime"),
    "burst_time": ("burst_time", "burstTime"),
    "priority": ("priority",),
    "name": ("name", "pid"),
    "io_burst_time": ("io_burst_time", "ioBurstTime"),
}


def load_workload(path: str | Path) -> List[ProcessSpec]:
    """
    Load a workload from a JSON or CSV file into validated process specs.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)

    raise InvalidWorkloadError(f"Unsupported workload format: {suffix} (use .json or .csv)")


def dump_workload(specs: Iterable[ProcessSpec], path: str | Path) -> None:
    path = Path(path)
    rows = [{k: v for k, v in asdict(s).items() if v is not None} for s in specs]
    with path.open("w", encoding="utf-8") as f:
        json.dump(rows, f, indent=2)


def _load_json(path: Path) -> List[ProcessSpec]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise InvalidWorkloadError(f"Invalid JSON in {path}: {exc}") from exc

    return parse_specs(raw)


def _load_csv(path: Path) -> List[ProcessSpec]:
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        return parse_specs(list(reader))


def parse_specs(raw: Any) -> List[ProcessSpec]:
    if not isinstance(raw, list):
        raise InvalidWorkloadError("Workload must be a list of process objects")
    return [spec_from_mapping(entry) for entry in raw]


def spec_from_mapping(mapping: Any) -> ProcessSpec:
    if not isinstance(mapping, Mapping):
        raise InvalidWorkloadError(f"Invalid process entry: {mapping!r}")

    arrival = _lookup(mapping, "arrival_time")
    burst = _lookup(mapping, "burst_time")
    for field, value in (("arrival_time", arrival), ("burst_time", burst)):
        if value is None:
            raise InvalidWorkloadError(f"Process entry is missing {field}: {dict(mapping)!r}")

    name = _lookup(mapping, "name")
    priority = _lookup(mapping, "priority")
    io_burst = _lookup(mapping, "io_burst_time")

    return ProcessSpec(
        arrival_time=_as_int(arrival, "arrival_time", mapping),
        burst_time=_as_int(burst, "burst_time", mapping),
        priority=_as_int(priority, "priority", mapping, allow_negative=True) if priority is not None else None,
        name=str(name) if name is not None else None,
        io_burst_time=_as_int(io_burst, "io_burst_time", mapping) if io_burst is not None else None,
    )


def validate_spec(spec: ProcessSpec) -> ProcessSpec:
    """
    Check an already-built spec the same way mapping entries are checked.
    """
    return spec_from_mapping(asdict(spec))


def _lookup(mapping: Mapping, field: str) -> Optional[Any]:
    for key in _ALIASES[field]:
        value = mapping.get(key)
        if value not in (None, ""):
            return value
    return None


def _as_int(value: Any, field: str, mapping: Mapping, allow_negative: bool = False) -> int:
    if isinstance(value, bool):
        raise InvalidWorkloadError(f"{field} must be an integer in {dict(mapping)!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidWorkloadError(f"{field} must be an integer in {dict(mapping)!r}")
        value = int(value)
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidWorkloadError(f"{field} must be an integer in {dict(mapping)!r}") from exc

    if number < 0 and not allow_negative:
        raise InvalidWorkloadError(f"{field} must be >= 0 in {dict(mapping)!r}")
    return number
