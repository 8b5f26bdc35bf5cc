from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, List, Sequence

from .errors import InputUnreadable, MalformedRecord
from .models import Process

logger = logging.getLogger(__name__)


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a CSV or JSON file into a list of Process objects.

    CSV files have no header; each row is ``pid,burst,arrival[,priority]``.
    JSON files hold a list of objects keyed ``pid``, ``burst_time``,
    ``arrival_time`` and optionally ``priority``. Row order is kept.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    try:
        if suffix == ".json":
            processes = _load_json(path)
        else:
            processes = _load_csv(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise InputUnreadable(f"error opening scheduling file {path}: {exc}") from exc

    logger.info("loaded %d processes from %s", len(processes), path)
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise MalformedRecord(f"invalid JSON: {exc.msg}", line=exc.lineno) from exc

    if not isinstance(raw, list):
        raise MalformedRecord("JSON workload must be a list of process objects")

    processes: List[Process] = []
    for number, entry in enumerate(raw, start=1):
        processes.append(_process_from_mapping(entry, number))

    return processes


def _load_csv(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8", newline="") as f:
        return parse_rows(csv.reader(f))


def parse_rows(rows: Iterable[Sequence[str]]) -> List[Process]:
    """
    Turn ``pid,burst,arrival[,priority]`` rows into processes.

    Blank rows are skipped; line numbers in errors count them anyway.
    """
    processes: List[Process] = []
    for line, row in enumerate(rows, start=1):
        if not row or all(not field.strip() for field in row):
            continue
        if len(row) not in (3, 4):
            raise MalformedRecord(f"expected 3 or 4 fields, got {len(row)}", line=line)

        pid, burst, arrival = (_parse_int(v, line) for v in row[:3])
        priority = _parse_int(row[3], line) if len(row) == 4 else 0
        processes.append(_build(line, pid=pid, arrival_time=arrival, burst_time=burst, priority=priority))
    return processes


def _parse_int(value: str, line: int) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise MalformedRecord(f"not an integer: {value!r}", line=line) from exc


def _process_from_mapping(mapping, number: int) -> Process:
    try:
        pid = int(mapping["pid"])
        arrival_time = int(mapping["arrival_time"])
        burst_time = int(mapping["burst_time"])
        priority_val = mapping.get("priority")
        priority = int(priority_val) if priority_val not in (None, "") else 0
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise MalformedRecord(f"invalid process entry {number}: {mapping!r}") from exc

    return _build(number, pid=pid, arrival_time=arrival_time, burst_time=burst_time, priority=priority)


def _build(line: int, **fields) -> Process:
    try:
        return Process(**fields)
    except ValueError as exc:
        raise MalformedRecord(str(exc), line=line) from exc
