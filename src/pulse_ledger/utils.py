"""Console output, timestamps and JSON file helpers shared by every stage."""

from __future__ import annotations
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

# ── Console ──────────────────────────────────────────────────────────────────
def eprint(msg: str, verbose: bool=False):
    if verbose:
        print(msg, file=sys.stderr)

def progress_print(msg: str, quiet: bool=False):
    if not quiet:
        print(msg, file=sys.stderr)

# ── Time ─────────────────────────────────────────────────────────────────────
def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def iso_timestamp(dt: Optional[datetime]=None) -> str:
    """UTC ISO-8601 with milliseconds and a trailing Z, e.g. 2026-10-19T08:00:00.000Z."""
    dt = (dt or utc_now()).astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"

# ── JSON files ───────────────────────────────────────────────────────────────
def dump_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, allow_nan=False) + "\n"

def write_json(path: Path, data: Any):
    """Full overwrite; parent directories are created on demand."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_json(data), encoding="utf-8")

def read_json(path: Path) -> Any:
    # Raises FileNotFoundError / json.JSONDecodeError / UnicodeDecodeError; callers decide what that means.
    return json.loads(path.read_text(encoding="utf-8"))
