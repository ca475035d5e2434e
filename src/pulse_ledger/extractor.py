"""Counter extractor: raw capture -> normalized counter report."""

from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .config import SOURCE
from .errors import MissingPrecondition
from .locator import FIELDS, SECTIONS, TOTALS, UNPULSED, JSONValue, locate
from .utils import iso_timestamp, read_json, write_json

CounterSet = Dict[str, Optional[float]]


def empty_counters() -> CounterSet:
    return {f: None for f in FIELDS}


def load_capture(raw_path: Path) -> Any:
    try:
        return read_json(raw_path)
    except FileNotFoundError:
        raise MissingPrecondition(f"{raw_path} not found. Run fetch first.", stage="fetch") from None
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise MissingPrecondition(f"{raw_path} is not valid JSON. Run fetch again.", stage="fetch") from None


def unwrap(capture: Any) -> JSONValue:
    """The `data` payload, or the capture itself for bare (older) captures."""
    if isinstance(capture, dict) and capture.get("data") is not None:
        return capture["data"]
    return capture


def extract_section(data: JSONValue, section: str, verbose: bool=False) -> Tuple[CounterSet, Dict[str, Optional[str]]]:
    counters = empty_counters()
    paths: Dict[str, Optional[str]] = {}
    for field in FIELDS:
        best = locate(data, field, section, verbose=verbose)
        counters[field] = best.value if best else None
        paths[f"{section}.{field}"] = best.path if best else None
    return counters, paths


def build_report(data: JSONValue, updated_at: Optional[str]=None, verbose: bool=False) -> Dict[str, Any]:
    sections: Dict[str, CounterSet] = {}
    detected: Dict[str, Optional[str]] = {}
    for section in SECTIONS:
        counters, paths = extract_section(data, section, verbose=verbose)
        sections[section] = counters
        detected.update(paths)

    unpulsed: Optional[CounterSet] = sections[UNPULSED]
    if all(v is None for v in unpulsed.values()):
        # upstream has no pending/unsynced concept
        unpulsed = None

    return {
        "updatedAt": updated_at or iso_timestamp(),
        "source": SOURCE,
        "totals": sections[TOTALS],
        "unpulsed": unpulsed,
        "debug": {
            "topLevelKeys": list(data.keys()) if isinstance(data, dict) else [],
            "detectedPaths": detected,
        },
    }


def build(raw_path: Path, report_path: Path, verbose: bool=False) -> Dict[str, Any]:
    report = build_report(unwrap(load_capture(raw_path)), verbose=verbose)
    write_json(report_path, report)
    return report
