"""Raw snapshot fetcher: one GET against the local WhatPulse client API."""

from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from .errors import MalformedUpstreamBody, UpstreamUnavailable
from .config import SOURCE
from .utils import eprint, iso_timestamp, write_json

STATS_ENDPOINT = "v1/all-stats"
SNIPPET_LEN    = 200


def _reject_constant(name: str):
    # NaN and Infinity are not JSON
    raise ValueError(f"Invalid JSON constant {name}")


def safe_snippet(text: str, max_len: int=SNIPPET_LEN) -> str:
    """Trimmed body excerpt for diagnostics; never includes request headers."""
    s = str(text).strip()
    if len(s) <= max_len:
        return s
    return s[:max_len] + "..."


class StatsClient:
    def __init__(self, base_url: str, verbose: bool=False, session: Optional[requests.Session]=None):
        self.base_url = base_url.rstrip("/")
        self.verbose = verbose
        self.session = session or requests.Session()

    def _log(self, msg: str):
        eprint(f"[API] {msg}", self.verbose)

    @property
    def stats_url(self) -> str:
        return f"{self.base_url}/{STATS_ENDPOINT}"

    def get_all_stats(self) -> Any:
        url = self.stats_url
        self._log(f"GET {url}")
        try:
            # No retry and no timeout: a failed run is retried by the next scheduled one.
            resp = self.session.get(url, headers={"Accept": "application/json"})
        except requests.RequestException as e:
            raise UpstreamUnavailable(f"WhatPulse request failed: {e}") from e

        # Read the whole body first so failures can quote it.
        text = resp.text
        if not 200 <= resp.status_code < 300:
            snippet = safe_snippet(text)
            raise UpstreamUnavailable(
                f"WhatPulse request failed: HTTP {resp.status_code} {resp.reason}. "
                f"Response snippet (no secrets): {snippet}",
                status=resp.status_code,
                snippet=snippet,
            )
        try:
            data = json.loads(text, parse_constant=_reject_constant)
        except ValueError:
            snippet = safe_snippet(text)
            raise MalformedUpstreamBody(
                f"WhatPulse response was not valid JSON. Response snippet: {snippet}",
                snippet=snippet,
            ) from None
        self._log(f"HTTP {resp.status_code}, {len(text)} chars")
        return data


def make_capture(data: Any, source: str=SOURCE, fetched_at: Optional[str]=None) -> Dict[str, Any]:
    return {
        "fetchedAt": fetched_at or iso_timestamp(),
        "source": source,
        "data": data,
    }


def fetch_raw(client: StatsClient, raw_path: Path, source: str=SOURCE) -> Dict[str, Any]:
    """Fetch /v1/all-stats and overwrite the raw capture file with it."""
    capture = make_capture(client.get_all_stats(), source)
    write_json(raw_path, capture)
    return capture
