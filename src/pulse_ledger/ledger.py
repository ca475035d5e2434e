"""
Snapshot ledger: the append-only history of counter readings.

Each run reads the whole file, appends one snapshot and rewrites the file.
That read-modify-write is not locked, so two overlapping runs against the
same path can lose an append; whatever schedules the runs must serialize them.
"""

from __future__ import annotations
import copy
import json
from pathlib import Path
from typing import Any, Dict, List

from .utils import progress_print, read_json, write_json

Snapshot = Dict[str, Any]


class SnapshotLedger:
    def __init__(self, path: Path, quiet: bool=False):
        self.path = path
        self.quiet = quiet

    def _load(self) -> List[Snapshot]:
        """Existing history; a missing, unparsable or non-array file counts as empty."""
        try:
            parsed = read_json(self.path)
        except FileNotFoundError:
            return []
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            progress_print(f"[Ledger] {self.path} is not valid JSON ({e}); starting from empty history.", self.quiet)
            return []
        if not isinstance(parsed, list):
            progress_print(f"[Ledger] {self.path} does not hold an array; starting from empty history.", self.quiet)
            return []
        return parsed

    def __len__(self) -> int:
        return len(self._load())

    def append(self, snapshot: Snapshot) -> int:
        """Append `snapshot` and rewrite the file. Returns the new length."""
        entries = self._load()
        entries.append(copy.deepcopy(snapshot))
        write_json(self.path, entries)
        return len(entries)

    def last(self, n: int) -> List[Snapshot]:
        if n <= 0:
            return []
        return copy.deepcopy(self._load()[-n:])
