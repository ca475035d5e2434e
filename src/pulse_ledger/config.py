"""Constants and environment-driven settings."""

from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

# ── Constants ────────────────────────────────────────────────────────────────
BASE_URL_ENV_VAR  = "WHATPULSE_BASE_URL"
DEFAULT_BASE_URL  = "http://localhost:3490"
SOURCE            = "whatpulse-client-api"
WINDOW            = "weekly"

RAW_PATH          = Path("raw-data") / "whatpulse-raw.json"
REPORT_PATH       = Path("api") / "whatpulse.json"
LEDGER_PATH       = Path("raw-data") / "whatpulse-weekly-snapshots.json"
WEEKLY_PATH       = Path("api") / "whatpulse-weekly.json"


def get_base_url() -> str:
    url = os.environ.get(BASE_URL_ENV_VAR) or DEFAULT_BASE_URL
    return url.rstrip("/")


@dataclass(frozen=True)
class Paths:
    """Output locations inside a data repository."""
    root: Path

    @classmethod
    def at(cls, root: Optional[str]=None) -> "Paths":
        return cls(Path(root or "."))

    @property
    def raw(self) -> Path:
        return self.root / RAW_PATH

    @property
    def report(self) -> Path:
        return self.root / REPORT_PATH

    @property
    def ledger(self) -> Path:
        return self.root / LEDGER_PATH

    @property
    def weekly(self) -> Path:
        return self.root / WEEKLY_PATH

    def outputs(self) -> Tuple[Path, ...]:
        return (self.raw, self.report, self.ledger, self.weekly)

    def display(self, path: Path) -> str:
        """Path relative to the root, as printed in confirmations."""
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return str(path)
