"""
Timestamp parsing and local wall-clock derivation for fare rules.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timezone, tzinfo
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from delivery_pricing.app.core.exceptions import InvalidArgumentError
from delivery_pricing.app.models.pricing_enums import DayOfWeek


@dataclass(frozen=True)
class LocalClock:
    """Fields of one instant that the rule tables are keyed on."""
    instant: datetime  # aware, UTC
    day: date
    day_of_week: DayOfWeek
    time_of_day: time  # second precision


def load_timezone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown pricing timezone: {name!r}") from exc


def parse_timestamp(value: Any, tz: tzinfo, now: Optional[datetime] = None) -> datetime:
    """
    Parse an ISO-8601 string or datetime into an aware datetime.

    ``None`` and the empty string mean "now". Naive values are taken to be
    wall-clock time in ``tz``.

    Raises:
        InvalidArgumentError: If the value is not a datetime or a parseable string.
    """
    if value is None or value == "":
        return now or datetime.now(timezone.utc)

    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str):
        try:
            moment = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise InvalidArgumentError("Invalid timestamp")
    else:
        raise InvalidArgumentError("Invalid timestamp")

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=tz)
    return moment


def local_clock(moment: datetime, tz: tzinfo) -> LocalClock:
    local = moment.astimezone(tz)
    return LocalClock(
        instant=moment.astimezone(timezone.utc),
        day=local.date(),
        day_of_week=DayOfWeek.from_weekday(local.weekday()),
        time_of_day=local.time().replace(microsecond=0, tzinfo=None),
    )
