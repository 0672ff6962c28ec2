"""Free appointment window computation.

Turns a provider's availability rules and existing bookings for one day into
the ordered list of bookable start times. Everything here is a pure function
of its inputs; callers fetch rules and bookings and pass them in.
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Iterable

from pydantic import BaseModel, field_validator

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60
DEFAULT_SLOT_GRANULARITY_MINUTES = 30
DEFAULT_MAX_RESULTS = 10


class InvalidArgument(ValueError):
    """Raised when the calculator is called with a malformed argument."""


def parse_time_of_day(value: str) -> int:
    """Convert an ``HH:MM`` string to minutes since midnight."""
    try:
        hours_text, minutes_text = value.strip().split(':')
        hours, minutes = int(hours_text), int(minutes_text)
    except (AttributeError, ValueError) as exc:
        raise ValueError(f'Invalid time of day: {value!r}') from exc

    if not (0 <= hours <= 24 and 0 <= minutes < 60) or (hours == 24 and minutes):
        raise ValueError(f'Invalid time of day: {value!r}')

    return hours * 60 + minutes


def sunday_based_weekday(day: date) -> int:
    return day.isoweekday() % 7


class AvailabilityRule(BaseModel):
    weekday: int | None = None
    start_time_of_day: int
    end_time_of_day: int
    is_recurring: bool = True
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool = True

    class Config:
        from_attributes = True

    @field_validator('start_time_of_day', 'end_time_of_day', mode='before')
    @classmethod
    def normalize_time_of_day(cls, value):
        if isinstance(value, time):
            return value.hour * 60 + value.minute
        if isinstance(value, str):
            return parse_time_of_day(value)
        return value


class BookedInterval(BaseModel):
    start_time: datetime
    end_time: datetime

    class Config:
        from_attributes = True


class FreeWindow(BaseModel):
    start_time: datetime
    end_time: datetime
    duration_minutes: int


def rule_applies_on(rule: AvailabilityRule, day: date) -> bool:
    """Whether an active rule opens the provider's calendar on ``day``."""
    if not rule.is_active:
        return False

    if rule.is_recurring:
        if rule.weekday is None or rule.weekday != sunday_based_weekday(day):
            return False
        if rule.start_date is not None and day < rule.start_date:
            return False
        if rule.end_date is not None and day > rule.end_date:
            return False
        return True

    if rule.start_date is None:
        return False
    return rule.start_date <= day <= (rule.end_date or rule.start_date)


def merge_working_intervals(ranges: Iterable[tuple[int, int]]) -> list[tuple[int, int]]:
    """Merge overlapping or touching minute ranges into disjoint working intervals.

    Ranges that are empty, inverted or outside a single day are dropped.
    """
    valid_ranges = []
    for start, end in ranges:
        if start < 0 or end > MINUTES_PER_DAY or start >= end:
            logger.warning('Skipping malformed availability range %s-%s', start, end)
            continue
        valid_ranges.append((start, end))

    merged: list[tuple[int, int]] = []
    for start, end in sorted(valid_ranges):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))

    return merged


def _require_positive_int(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgument(f'{name} must be a positive integer.')


def _to_local_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def _coerce_day(value) -> date:
    if isinstance(value, datetime):
        if value.time() != time.min:
            raise InvalidArgument('date must not carry a time of day.')
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as exc:
            raise InvalidArgument(f'Invalid calendar date: {value!r}') from exc
    raise InvalidArgument('date must be a calendar date.')


def compute_free_windows(
    day,
    rules: Iterable[AvailabilityRule],
    booked: Iterable[BookedInterval],
    duration_minutes: int,
    slot_granularity_minutes: int = DEFAULT_SLOT_GRANULARITY_MINUTES,
    max_results: int = DEFAULT_MAX_RESULTS,
    now: datetime | None = None,
    buffer_after_minutes: int = 0,
) -> list[FreeWindow]:
    """Return bookable windows for ``day`` in chronological order.

    Candidates start every ``slot_granularity_minutes`` from the beginning of
    each merged working interval and must end inside it. A candidate is
    dropped when it overlaps a booking (extended by ``buffer_after_minutes``)
    or, on the current day, when it starts before ``now``.
    """
    target_day = _coerce_day(day)
    _require_positive_int('duration_minutes', duration_minutes)
    _require_positive_int('slot_granularity_minutes', slot_granularity_minutes)
    _require_positive_int('max_results', max_results)
    if isinstance(buffer_after_minutes, bool) or not isinstance(buffer_after_minutes, int) or buffer_after_minutes < 0:
        raise InvalidArgument('buffer_after_minutes must be a non-negative integer.')

    now = _to_local_naive(now or datetime.now())
    earliest_start = now if now.date() == target_day else None

    working_intervals = merge_working_intervals(
        (rule.start_time_of_day, rule.end_time_of_day)
        for rule in rules
        if rule_applies_on(rule, target_day)
    )
    if not working_intervals:
        return []

    buffer = timedelta(minutes=buffer_after_minutes)
    busy = []
    for interval in booked:
        busy_start = _to_local_naive(interval.start_time)
        busy_end = _to_local_naive(interval.end_time)
        if busy_end > busy_start:
            busy.append((busy_start, busy_end + buffer))

    day_start = datetime.combine(target_day, time.min)
    duration = timedelta(minutes=duration_minutes)
    windows: list[FreeWindow] = []

    for interval_start, interval_end in working_intervals:
        offset = interval_start
        while offset + duration_minutes <= interval_end:
            start_time = day_start + timedelta(minutes=offset)
            end_time = start_time + duration
            offset += slot_granularity_minutes

            if earliest_start is not None and start_time < earliest_start:
                continue
            if any(start_time < busy_end and end_time > busy_start for busy_start, busy_end in busy):
                continue

            windows.append(FreeWindow(start_time=start_time, end_time=end_time, duration_minutes=duration_minutes))
            if len(windows) >= max_results:
                return windows

    return windows
