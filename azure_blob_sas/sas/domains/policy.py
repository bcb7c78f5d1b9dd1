"""Validity windows and permission presets offered for a SAS."""
import calendar
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from azure.storage.blob import BlobSasPermissions

from .prompts import QuickPickItem

VALIDITY_PLACEHOLDER = "Validity of the SAS URL token"
PERMISSION_PLACEHOLDER = "Permissions permitted on the shared resource"

_UNIT_SUFFIXES = {
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
    "mo": "months",
    "y": "years",
}
# "mo" must be tried before "m"
_DURATION_PATTERN = re.compile(r'^\s*(\d+)\s*(mo|m|h|d|w|y)\s*$', re.IGNORECASE)

_SINGULAR = {
    "minutes": "a minute",
    "hours": "an hour",
    "days": "a day",
    "weeks": "a week",
    "months": "a month",
    "years": "a year",
}


@dataclass(frozen=True)
class Duration:
    """Amount of time in one unit; months and years are calendar units."""
    amount: int
    unit: str

    def __post_init__(self):
        if self.unit not in _SINGULAR:
            raise ValueError(f"Unsupported duration unit: {self.unit}")
        if self.amount <= 0:
            raise ValueError(f"Duration must be positive, got {self.amount}")

    def add_to(self, moment: datetime) -> datetime:
        """Return moment shifted forward by this duration."""
        if self.unit == "months":
            return _add_months(moment, self.amount)
        if self.unit == "years":
            return _add_months(moment, self.amount * 12)
        return moment + timedelta(**{self.unit: self.amount})

    def humanize(self) -> str:
        if self.amount == 1:
            return _SINGULAR[self.unit]
        return f"{self.amount} {self.unit}"

    def __str__(self) -> str:
        suffix = next(key for key, unit in _UNIT_SUFFIXES.items() if unit == self.unit)
        return f"{self.amount}{suffix}"


def _add_months(moment: datetime, months: int) -> datetime:
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def parse_duration(value: str) -> Duration:
    """
    Parse a compact duration such as 15m, 2h, 1d, 1w, 3mo or 10y.

    Raises:
        ValueError: If the value is not a recognized duration
    """
    match = _DURATION_PATTERN.match(str(value))
    if not match:
        raise ValueError(
            f"Invalid duration '{value}'. Use a number followed by m, h, d, w, mo or y (e.g. 15m, 1mo)"
        )
    return Duration(int(match.group(1)), _UNIT_SUFFIXES[match.group(2).lower()])


DEFAULT_VALIDITY_CHOICES: List[Duration] = [
    Duration(15, "minutes"),
    Duration(30, "minutes"),
    Duration(1, "hours"),
    Duration(2, "hours"),
    Duration(1, "days"),
    Duration(1, "weeks"),
    Duration(1, "months"),
    Duration(3, "months"),
    Duration(1, "years"),
    Duration(10, "years"),
    Duration(100, "years"),
]


def format_expiry(moment: datetime) -> str:
    """Long local date and time without zero padding, e.g. Thursday, January 1, 2026 1:05 PM."""
    hour = moment.hour % 12 or 12
    return f"{moment:%A, %B} {moment.day}, {moment.year} {hour}:{moment:%M %p}"


def validity_items(now: datetime, choices: Optional[Iterable[Duration]] = None) -> List[QuickPickItem]:
    """Build the validity list, with each expiry shown in local time."""
    local_now = now.astimezone()
    items = []
    for duration in choices or DEFAULT_VALIDITY_CHOICES:
        until = duration.add_to(local_now)
        items.append(QuickPickItem(
            label=f"Valid for {duration.humanize()}",
            value=duration,
            detail=f"Until {format_expiry(until)}",
        ))
    return items


def permission_items() -> List[QuickPickItem]:
    """Read-only, Write and Full permission presets."""
    return [
        QuickPickItem(
            label="Read-only",
            value=BlobSasPermissions(read=True),
        ),
        QuickPickItem(
            label="Write",
            value=BlobSasPermissions(read=True, add=True, create=True, write=True),
        ),
        QuickPickItem(
            label="Full",
            value=BlobSasPermissions(read=True, add=True, create=True, write=True, delete=True),
        ),
    ]
