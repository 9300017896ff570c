"""Lookup error taxonomy."""

from dataclasses import dataclass
from enum import StrEnum


class LookupFailureKind(StrEnum):
    """Reasons a source did not produce an accepted result."""

    DECLINED = "declined"
    TRANSIENT_FAILURE = "transient_failure"
    RATE_LIMITED = "rate_limited"
    INVALID_INPUT = "invalid_input"


@dataclass(frozen=True)
class LookupFailure:
    """Diagnostic context for a failed or declined lookup step."""

    kind: LookupFailureKind
    source_id: str | None
    raw_input: str


class SourceError(Exception):
    """Base error raised by nutrition sources."""

    def __init__(self, source_id: str, detail: str = "") -> None:
        super().__init__(f"{source_id}: {detail}" if detail else source_id)
        self.source_id = source_id
        self.detail = detail


class SourceRateLimitedError(SourceError):
    """Source signalled throttling; stop querying it for this call."""


class SourceUnavailableError(SourceError):
    """Network, HTTP or decoding failure in a source."""
