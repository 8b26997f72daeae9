"""Version tokens for the synchronized document.

A version is a UTC wall-clock timestamp truncated to whole seconds.
The wire form is RFC 1123 in GMT, e.g. ``Mon, 02 Jan 2006 15:04:05 GMT``.
Truncation is part of the wire format: two writes inside the same
second produce the same version.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime

from core.errors import VersionFormatError


@dataclass(frozen=True, order=True)
class VersionToken:
    """Totally ordered, whole-second revision stamp.

    Attributes:
        timestamp: Aware UTC datetime with microseconds cleared.
    """

    timestamp: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", _normalize_timestamp(self.timestamp))

    @classmethod
    def parse(cls, raw_value: str) -> "VersionToken":
        """Parse a wire-format version string.

        Args:
            raw_value: RFC 1123 / RFC 2822 date string.

        Returns:
            Parsed version token.

        Raises:
            VersionFormatError: If the value is not a valid date.
        """
        message = (
            f"Invalid version '{raw_value}': expected an RFC 1123 date "
            "such as 'Mon, 02 Jan 2006 15:04:05 GMT'."
        )
        try:
            parsed = parsedate_to_datetime(raw_value.strip())
            if parsed is None:
                raise VersionFormatError(message)
            # Offsets near year 1 or 9999 can leave the UTC range.
            return cls(parsed)
        except (TypeError, ValueError, IndexError, OverflowError) as error:
            raise VersionFormatError(message) from error

    @classmethod
    def now(cls) -> "VersionToken":
        """Return the version for the current wall-clock second."""
        return cls(datetime.now(timezone.utc))

    @classmethod
    def zero(cls) -> "VersionToken":
        """Return the version that precedes every real version."""
        return cls(datetime.min.replace(tzinfo=timezone.utc))

    @classmethod
    def from_epoch_seconds(cls, seconds: float) -> "VersionToken":
        """Build a version from a POSIX timestamp such as a file mtime."""
        return cls(datetime.fromtimestamp(seconds, timezone.utc))

    def format(self) -> str:
        """Render the version in its wire format."""
        return format_datetime(self.timestamp, usegmt=True)

    def epoch_seconds(self) -> float:
        return self.timestamp.timestamp()

    def __str__(self) -> str:
        return self.format()


def _normalize_timestamp(value: datetime) -> datetime:
    """Convert to aware UTC and drop sub-second precision.

    Naive datetimes are interpreted as UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.replace(microsecond=0)
