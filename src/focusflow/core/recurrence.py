"""Pure recurrence engine - no I/O dependencies.

Given the current occurrence date of a task and its recurrence rule, compute
the next scheduled date. All dates are local calendar dates.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from itertools import islice

from dateutil.relativedelta import relativedelta


class RecurrenceType(str, Enum):
    """Base unit of a recurrence rule."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"  # interval counted in days


RECURRENCE_TYPES = frozenset(t.value for t in RecurrenceType)


class RecurrenceError(ValueError):
    """Raised when a stored recurrence rule cannot be parsed."""

    pass


def parse_date(value) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.split("T")[0].strip())
        except ValueError as e:
            raise RecurrenceError(f"Invalid date: {value!r}") from e
    raise RecurrenceError(f"Invalid date: {value!r}")


@dataclass(frozen=True)
class Recurrence:
    """A recurrence rule attached to a task.

    ``type`` keeps the raw string so an unknown value read from storage is
    rejected by the engine instead of being coerced here.
    """

    type: str
    interval: int = 1
    days_of_week: tuple[int, ...] = ()  # 0=Sunday..6=Saturday, weekly only
    day_of_month: int | None = None  # 1-31, monthly and yearly
    month_of_year: int | None = None  # 1-12, yearly
    end_date: date | None = None
    end_after_occurrences: int | None = None

    def __post_init__(self):
        if isinstance(self.type, RecurrenceType):
            object.__setattr__(self, "type", self.type.value)
        if not isinstance(self.days_of_week, tuple):
            object.__setattr__(self, "days_of_week", tuple(self.days_of_week or ()))
        if self.end_date is not None:
            object.__setattr__(self, "end_date", parse_date(self.end_date))

    @classmethod
    def from_dict(cls, data: dict) -> "Recurrence":
        """Create Recurrence from its stored camelCase JSON form."""
        if not isinstance(data, dict):
            raise RecurrenceError(f"recurrence must be an object, got {data!r}")
        days = data.get("daysOfWeek") or []
        if not isinstance(days, list):
            raise RecurrenceError(f"daysOfWeek must be a list, got {days!r}")
        interval = data.get("interval")
        return cls(
            type=data.get("type", ""),
            interval=1 if interval is None else interval,
            days_of_week=tuple(days),
            day_of_month=data.get("dayOfMonth"),
            month_of_year=data.get("monthOfYear"),
            end_date=parse_date(data.get("endDate")),
            end_after_occurrences=data.get("endAfterOccurrences"),
        )

    def to_dict(self) -> dict:
        """Serialize to the stored camelCase JSON form, omitting unset fields."""
        data: dict = {"type": self.type, "interval": self.interval}
        if self.days_of_week:
            data["daysOfWeek"] = list(self.days_of_week)
        if self.day_of_month is not None:
            data["dayOfMonth"] = self.day_of_month
        if self.month_of_year is not None:
            data["monthOfYear"] = self.month_of_year
        if self.end_date is not None:
            data["endDate"] = self.end_date.isoformat()
        if self.end_after_occurrences is not None:
            data["endAfterOccurrences"] = self.end_after_occurrences
        return data


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_recurrence(rule: Recurrence) -> list[str]:
    """List every invariant the rule violates. Empty list means valid."""
    errors = []
    if not isinstance(rule.type, str) or rule.type not in RECURRENCE_TYPES:
        errors.append(f"Unrecognized recurrence type: {rule.type!r}")
    if not _is_int(rule.interval) or rule.interval < 1:
        errors.append(f"interval must be an integer >= 1, got {rule.interval!r}")
    if any(not _is_int(d) or not 0 <= d <= 6 for d in rule.days_of_week):
        errors.append(f"daysOfWeek entries must be in 0-6, got {list(rule.days_of_week)}")
    elif len(set(rule.days_of_week)) != len(rule.days_of_week):
        errors.append(f"daysOfWeek entries must be unique, got {list(rule.days_of_week)}")
    if rule.day_of_month is not None and (
        not _is_int(rule.day_of_month) or not 1 <= rule.day_of_month <= 31
    ):
        errors.append(f"dayOfMonth must be in 1-31, got {rule.day_of_month!r}")
    if rule.month_of_year is not None and (
        not _is_int(rule.month_of_year) or not 1 <= rule.month_of_year <= 12
    ):
        errors.append(f"monthOfYear must be in 1-12, got {rule.month_of_year!r}")
    if rule.end_after_occurrences is not None and (
        not _is_int(rule.end_after_occurrences) or rule.end_after_occurrences < 1
    ):
        errors.append(
            f"endAfterOccurrences must be >= 1, got {rule.end_after_occurrences!r}"
        )
    return errors


# ============== Results ==============


@dataclass(frozen=True)
class Next:
    """The series continues on ``date``."""

    date: date


@dataclass(frozen=True)
class SeriesEnded:
    """The next occurrence would fall after the rule's end date."""

    pass


@dataclass(frozen=True)
class Invalid:
    """The rule or the anchor date cannot produce an occurrence."""

    reason: str


NextResult = Next | SeriesEnded | Invalid


# ============== Engine ==============


def weekday_index(d: date) -> int:
    """Weekday with 0=Sunday..6=Saturday."""
    return d.isoweekday() % 7


def _coerce_anchor(value) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return parse_date(value)
        except RecurrenceError:
            return None
    return None


def _next_weekly(current: date, interval: int, days_of_week: tuple[int, ...]) -> date:
    """Next selected weekday, wrapping to the first one of the next cycle."""
    days = sorted(days_of_week)
    current_day = weekday_index(current)

    later = [d for d in days if d > current_day]
    if later:
        # Same week: not a week advance, so interval does not apply
        return current + timedelta(days=later[0] - current_day)

    days_until_next_cycle = 7 - current_day + days[0]
    return current + timedelta(weeks=interval - 1, days=days_until_next_cycle)


def next_occurrence(current_date, rule: Recurrence) -> NextResult:
    """
    Compute the occurrence immediately following ``current_date``.

    Pure function - no I/O. The occurrence cap is not checked here; callers
    consult should_continue() for that.

    Returns:
        Next(date), SeriesEnded() when the candidate is after rule.end_date,
        or Invalid(reason) for an unusable rule or anchor.
    """
    errors = validate_recurrence(rule)
    if errors:
        return Invalid(errors[0])

    current = _coerce_anchor(current_date)
    if current is None:
        return Invalid(f"Invalid anchor date: {current_date!r}")

    interval = rule.interval
    try:
        match rule.type:
            case RecurrenceType.DAILY | RecurrenceType.CUSTOM:
                candidate = current + timedelta(days=interval)
            case RecurrenceType.WEEKLY:
                if rule.days_of_week:
                    candidate = _next_weekly(current, interval, rule.days_of_week)
                else:
                    candidate = current + timedelta(weeks=interval)
            case RecurrenceType.MONTHLY:
                # relativedelta clamps an absolute day to the month's length
                if rule.day_of_month:
                    candidate = current + relativedelta(months=interval, day=rule.day_of_month)
                else:
                    candidate = current + relativedelta(months=interval)
            case RecurrenceType.YEARLY:
                if rule.month_of_year and rule.day_of_month:
                    candidate = current + relativedelta(
                        years=interval, month=rule.month_of_year, day=rule.day_of_month
                    )
                else:
                    candidate = current + relativedelta(years=interval)
            case _:
                return Invalid(f"Unrecognized recurrence type: {rule.type!r}")
    except (OverflowError, ValueError):
        return Invalid(f"Next occurrence after {current} is out of range")

    if rule.end_date is not None and candidate > rule.end_date:
        return SeriesEnded()

    return Next(candidate)


def next_date(current_date, rule: Recurrence) -> date | None:
    """next_occurrence() collapsed to a date, or None when there is none."""
    result = next_occurrence(current_date, rule)
    if isinstance(result, Next):
        return result.date
    return None


def should_continue(rule: Recurrence, completed_count: int) -> bool:
    """False once end_after_occurrences is set and has been reached."""
    if rule.end_after_occurrences and completed_count >= rule.end_after_occurrences:
        return False
    return True


def iter_occurrences(anchor, rule: Recurrence, completed_count: int = 0) -> Iterator[date]:
    """
    Yield successive occurrence dates after ``anchor``.

    Each yielded date counts toward end_after_occurrences. Infinite when the
    rule has no end condition.
    """
    current = anchor
    count = completed_count
    while should_continue(rule, count):
        result = next_occurrence(current, rule)
        if not isinstance(result, Next):
            return
        yield result.date
        current = result.date
        count += 1


def upcoming(anchor, rule: Recurrence, limit: int, completed_count: int = 0) -> list[date]:
    """The next ``limit`` occurrence dates after ``anchor``."""
    return list(islice(iter_occurrences(anchor, rule, completed_count), max(limit, 0)))


def describe(rule: Recurrence) -> str:
    """Short human-readable label, e.g. "Daily" or "Every 3 weeks"."""
    interval = rule.interval

    match rule.type:
        case RecurrenceType.DAILY:
            return "Daily" if interval == 1 else f"Every {interval} days"
        case RecurrenceType.WEEKLY:
            return "Weekly" if interval == 1 else f"Every {interval} weeks"
        case RecurrenceType.MONTHLY:
            return "Monthly" if interval == 1 else f"Every {interval} months"
        case RecurrenceType.YEARLY:
            # Interval is not rendered for yearly rules
            return "Yearly"
        case RecurrenceType.CUSTOM:
            return f"Every {interval} days"
    return "Custom"
