"""
Numeric-field locator.

The WhatPulse client API does not document the shape of /v1/all-stats and it
has changed between client releases, so counters are found heuristically:

  1. Walk the whole document depth-first (arrays by index, objects in key
     order) and collect every finite numeric leaf whose own key fuzzily
     matches one of the field's name patterns.
  2. Tag each candidate with the section its path lives in: "unpulsed" when
     the path mentions unpulse/pending, "totals" when it mentions total,
     otherwise "none".
  3. Pick the candidate in the requested section with the most path hints.
     When the section is absent from the document, fall back to untagged
     candidates ranked by the other section's hints.

Nothing here does I/O; the scoring is kept separate from parsing so it can be
exercised on plain dicts.
"""

from __future__ import annotations
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .utils import eprint

JSONValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]

# ── Field classes & hints ────────────────────────────────────────────────────
FIELDS: Tuple[str, ...] = ("keys", "clicks", "scrolls", "uptimeSeconds")

FIELD_PATTERNS: Dict[str, Tuple[str, ...]] = {
    "keys":          ("keys", "keycount", "keystrokes"),
    "clicks":        ("clicks", "mouseclicks"),
    "scrolls":       ("scrolls", "scrollcount", "mousescrolls"),
    "uptimeSeconds": ("uptime", "uptimeseconds", "seconds"),
}

TOTALS = "totals"
UNPULSED = "unpulsed"
NONE = "none"
SECTIONS = (TOTALS, UNPULSED)

TOTALS_PATH_HINTS = ("totals", "total", "accounttotals")
UNPULSED_PATH_HINTS = ("unpulsed", "unpulse", "pending")

SECTION_HINTS = {TOTALS: TOTALS_PATH_HINTS, UNPULSED: UNPULSED_PATH_HINTS}
OTHER_SECTION = {TOTALS: UNPULSED, UNPULSED: TOTALS}

_WS = re.compile(r"\s+")


@dataclass(frozen=True)
class Candidate:
    value: Union[int, float]
    path: str         # slash-delimited, original key casing
    path_lower: str   # lower-cased object keys only, whitespace removed
    section: str


def _normalize_key(key: str) -> str:
    return _WS.sub("", key.lower())

def is_number(v: Any) -> bool:
    # bool is an int subclass; JSON true/false are not counters
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return False
    # ints too large for a float are still valid JSON counters
    return isinstance(v, int) or math.isfinite(v)

def key_matches(key: str, patterns: Sequence[str]) -> bool:
    k = _normalize_key(key)
    return any(k in p or p in k for p in patterns)

def section_of(path_lower: str) -> str:
    if "unpulse" in path_lower or "pending" in path_lower:
        return UNPULSED
    if "total" in path_lower:
        return TOTALS
    return NONE

def path_score(path_lower: str, hints: Sequence[str]) -> int:
    return sum(1 for h in hints if h in path_lower)


def _walk(node: JSONValue, key: Optional[str], path: str, path_lower: str,
          patterns: Sequence[str], acc: List[Candidate]):
    if node is None:
        return
    if is_number(node):
        # key is None only for the document root
        if key is not None and key_matches(key, patterns):
            acc.append(Candidate(node, path, path_lower, section_of(path_lower)))
        return
    if isinstance(node, list):
        for i, item in enumerate(node):
            _walk(item, str(i), f"{path}/{i}", path_lower, patterns, acc)
        return
    if isinstance(node, dict):
        for k, v in node.items():
            k = str(k)
            next_path = f"{path}/{k}" if path else k
            next_lower = _WS.sub("", f"{path_lower}/{k.lower()}")
            _walk(v, k, next_path, next_lower, patterns, acc)
    # strings, booleans and non-finite numbers stop here


def collect_candidates(document: JSONValue, patterns: Sequence[str]) -> List[Candidate]:
    """All numeric leaves whose key matches one of `patterns`, in traversal order."""
    acc: List[Candidate] = []
    _walk(document, None, "", "", patterns, acc)
    return acc


def pick_best(candidates: Sequence[Candidate], section: str, verbose: bool=False) -> Optional[Candidate]:
    """Best candidate for `section`; ties go to the first one encountered."""
    if section not in SECTION_HINTS:
        raise ValueError(f"Unknown section '{section}'")
    tagged = [c for c in candidates if c.section == section]
    if tagged:
        hints = SECTION_HINTS[section]
        return sorted(tagged, key=lambda c: -path_score(c.path_lower, hints))[0]

    untagged = [c for c in candidates if c.section == NONE]
    if not untagged:
        return None
    # Heuristic: the document has no "section" nesting at all. Rank by the
    # other section's hints so the caller can see in debug paths what won.
    hints = SECTION_HINTS[OTHER_SECTION[section]]
    best = sorted(untagged, key=lambda c: -path_score(c.path_lower, hints))[0]
    eprint(f"[Locator] No '{section}' section found; fell back to untagged '{best.path}'", verbose)
    return best


def locate(document: JSONValue, field: str, section: str, verbose: bool=False) -> Optional[Candidate]:
    if field not in FIELD_PATTERNS:
        raise ValueError(f"Unknown field '{field}'")
    return pick_best(collect_candidates(document, FIELD_PATTERNS[field]), section, verbose=verbose)
