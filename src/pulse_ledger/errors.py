"""Fatal conditions raised by the pipeline stages.

Stages raise these; only the CLI turns them into a message and exit status 1.
"""

from __future__ import annotations
from typing import Optional


class PulseError(Exception):
    pass


class UpstreamUnavailable(PulseError):
    """The stats endpoint could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, status: Optional[int]=None, snippet: str=""):
        super().__init__(message)
        self.status = status
        self.snippet = snippet


class MalformedUpstreamBody(PulseError):
    """The endpoint answered 2xx but the body is not JSON."""

    def __init__(self, message: str, snippet: str=""):
        super().__init__(message)
        self.snippet = snippet


class MissingPrecondition(PulseError):
    """An input file from an earlier stage is absent or unreadable."""

    def __init__(self, message: str, stage: str):
        super().__init__(message)
        self.stage = stage


class UnresolvableFields(PulseError):
    pass


class PublishFailed(PulseError):
    def __init__(self, message: str, returncode: Optional[int]=None):
        super().__init__(message)
        self.returncode = returncode
