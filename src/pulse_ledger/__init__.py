"""Public API for pulse_ledger package."""

__version__ = "0.1.0"

from .ledger import SnapshotLedger
from .locator import collect_candidates, locate, pick_best
from .weekly import delta, weekly_delta
from .cli import main

__all__ = ["SnapshotLedger", "collect_candidates", "delta", "locate", "main", "pick_best", "weekly_delta"]
