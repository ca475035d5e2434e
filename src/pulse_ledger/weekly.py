"""
Weekly delta engine.

Appends the current counters to the ledger and reports the difference between
the two most recent snapshots. Counters are cumulative, so each field is
floored at zero independently: a client reinstall that resets a counter
reports 0 for that field instead of a negative week.
"""

from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from .config import SOURCE, WINDOW
from .errors import MissingPrecondition, UnresolvableFields
from .extractor import CounterSet
from .ledger import Snapshot, SnapshotLedger
from .locator import FIELDS, TOTALS, UNPULSED, is_number
from .utils import iso_timestamp, read_json, write_json

NOT_ENOUGH_HISTORY = "Not enough history yet. Run again next week to compute deltas."


def _to_number(v: Any) -> Optional[float]:
    return v if is_number(v) else None


def _complete(section: Any) -> Optional[CounterSet]:
    if not isinstance(section, dict):
        return None
    counters = {f: _to_number(section.get(f)) for f in FIELDS}
    if any(v is None for v in counters.values()):
        return None
    return counters


def counters_from_report(report: Dict[str, Any]) -> CounterSet:
    """Fully-resolved counters: unpulsed when complete, else totals."""
    for section in (UNPULSED, TOTALS):
        counters = _complete(report.get(section))
        if counters is not None:
            return counters
    raise UnresolvableFields(
        "Counter report is missing counters. Prefer unpulsed; fallback totals. "
        "Need keys, clicks, scrolls, uptimeSeconds."
    )


def delta(prev: CounterSet, current: CounterSet) -> CounterSet:
    out: CounterSet = {}
    for f in FIELDS:
        a, b = _to_number(prev.get(f)), _to_number(current.get(f))
        # a hand-edited ledger entry can lack a field; report it as unknown
        out[f] = None if a is None or b is None else max(0, b - a)
    return out


def _counters_of(snapshot: Dict[str, Any]) -> Dict[str, Any]:
    counters = snapshot.get("counters")
    return counters if isinstance(counters, dict) else {}


def weekly_delta(snapshots: Sequence[Snapshot], updated_at: Optional[str]=None) -> Dict[str, Any]:
    output: Dict[str, Any] = {
        "updatedAt": updated_at or iso_timestamp(),
        "source": SOURCE,
        "window": WINDOW,
        "range": None,
        "counters": None,
        "note": None,
    }
    if len(snapshots) < 2:
        output["note"] = NOT_ENOUGH_HISTORY
        return output

    # hand-edited entries may not be objects at all
    prev, current = [s if isinstance(s, dict) else {} for s in snapshots[-2:]]
    output["range"] = f"{prev.get('capturedAt')}/{current.get('capturedAt')}"
    output["counters"] = delta(_counters_of(prev), _counters_of(current))
    return output


def load_report(report_path: Path) -> Dict[str, Any]:
    try:
        report = read_json(report_path)
    except FileNotFoundError:
        raise MissingPrecondition(f"{report_path} not found. Run build first.", stage="build") from None
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise MissingPrecondition(f"{report_path} is not valid JSON. Run build again.", stage="build") from None
    if not isinstance(report, dict):
        raise MissingPrecondition(f"{report_path} is not a counter report. Run build again.", stage="build")
    return report


def build_weekly(report_path: Path, ledger: SnapshotLedger, weekly_path: Path) -> Dict[str, Any]:
    # Resolve counters before touching the ledger so a failed run never
    # leaves a partial snapshot behind.
    counters = counters_from_report(load_report(report_path))
    captured_at = iso_timestamp()
    ledger.append({"capturedAt": captured_at, "source": SOURCE, "counters": counters})

    output = weekly_delta(ledger.last(2), updated_at=captured_at)
    write_json(weekly_path, output)
    return output
