"""Shared fixtures for the pulse_ledger tests."""

import pytest

from pulse_ledger.config import Paths


@pytest.fixture
def paths(tmp_path):
    """Output locations inside an empty data repository."""
    return Paths(tmp_path)


@pytest.fixture
def totals_only_stats():
    """Stats document with a totals section and no pending counters."""
    return {"stats": {"totals": {"keys": 500, "clicks": 300, "scrolls": 10, "uptime": 7200}}}


@pytest.fixture
def full_stats():
    """Stats document carrying both account totals and unpulsed counters."""
    return {
        "account": {
            "totals": {"keys": 500, "clicks": 300, "scrolls": 10, "uptime": 7200},
        },
        "unpulsed": {"keys": 5, "clicks": 3, "scrolls": 1, "uptimeSeconds": 60},
    }


def make_snapshot(captured_at, keys, clicks, scrolls, uptime):
    return {
        "capturedAt": captured_at,
        "source": "whatpulse-client-api",
        "counters": {"keys": keys, "clicks": clicks, "scrolls": scrolls, "uptimeSeconds": uptime},
    }
