"""Long-form recurrence summaries for display next to a rule."""

from .recurrence import Recurrence, RecurrenceType

DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


def summarize(rule: Recurrence, date_format: str = "%b %d, %Y") -> str:
    """
    Summarize a rule as a sentence, e.g. "Repeats every 2 weeks on Mon, Wed".

    Pure function - no I/O. Unset day/month fields fall back to 1 / January
    the way the rule editor prefills them.
    """
    interval = rule.interval
    day = rule.day_of_month or 1

    match rule.type:
        case RecurrenceType.DAILY:
            summary = "daily" if interval == 1 else f"every {interval} days"
        case RecurrenceType.WEEKLY:
            summary = "weekly" if interval == 1 else f"every {interval} weeks"
            if rule.days_of_week:
                days = ", ".join(DAY_NAMES[d] for d in sorted(rule.days_of_week) if 0 <= d <= 6)
                summary += f" on {days}"
        case RecurrenceType.MONTHLY:
            if interval == 1:
                summary = f"monthly on day {day}"
            else:
                summary = f"every {interval} months on day {day}"
        case RecurrenceType.YEARLY:
            month = rule.month_of_year if rule.month_of_year in range(1, 13) else 1
            summary = f"yearly on {MONTH_NAMES[month - 1]} {day}"
        case RecurrenceType.CUSTOM:
            summary = f"every {interval} days"
        case _:
            return "Repeats on a custom schedule"

    if rule.end_date:
        summary += f" until {rule.end_date.strftime(date_format)}"
    elif rule.end_after_occurrences:
        summary += f" for {rule.end_after_occurrences} times"

    return f"Repeats {summary}"
