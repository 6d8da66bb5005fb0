"""Date and time helpers that phrase weather answers for speech output."""

from datetime import datetime, timedelta, timezone

from .schemas import DataGranularity, DateDescriptor, DateRangeError

DAYS_OF_WEEK = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

MONTHS = [
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

MAX_FORECAST_DAYS = 9
SHORT_FORECAST_DAYS = 3

FUTURE_LIMIT_MESSAGE = "I'm sorry, I cannot see more than 10 days into the future."
HISTORICAL_MESSAGE = "I'm sorry, I cannot yet look at historical conditions."


def ordinal(day: int) -> str:
    if 10 <= day % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def weekday_name(value: datetime) -> str:
    return DAYS_OF_WEEK[value.weekday()]


def format_date(target: datetime, now: datetime | None = None) -> str:
    """
    Speech formatted date without the time, read in UTC.

    The year is omitted when it matches the current one:
    'Friday June 12th', otherwise 'Sunday 6/5/2016'.
    """
    current = (now or datetime.now().astimezone()).astimezone(timezone.utc)
    target = target.astimezone(timezone.utc)
    if current.year == target.year:
        return f"{weekday_name(target)} {MONTHS[target.month - 1]} {ordinal(target.day)}"
    return f"{weekday_name(target)} {target.month}/{target.day}/{target.year}"


def _period_of_day(hours: int) -> str:
    if hours < 12:
        return " in the morning"
    if hours < 17:
        return " in the afternoon"
    if hours < 20:
        return " in the evening"
    return " at night"


def format_time(value: datetime) -> str:
    """Speech formatted time of day, e.g. '12:35 in the afternoon'."""
    hours = value.hour % 12 or 12
    return f"{hours}:{value.minute:02d}{_period_of_day(value.hour)}"


def format_time_am_pm(value: datetime) -> str:
    """Speech formatted time of day, e.g. '12:35 pm'."""
    suffix = "pm" if value.hour >= 12 else "am"
    hours = value.hour % 12 or 12
    return f"{hours}:{value.minute:02d} {suffix}"


def _parse_target(date_token: str, now: datetime) -> datetime | None:
    try:
        return datetime.strptime(date_token, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(date_token)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=now.tzinfo)
    return parsed


def classify_date(date_token: str, now: datetime | None = None) -> DateDescriptor | DateRangeError:
    """
    Map a date slot ('current', 'tomorrow', 'YYYY-MM-DD') to a date descriptor.

    The day offset is the target's UTC day of month minus today's local day of
    month; it does not account for month or year boundaries.
    """
    if date_token == "current":
        return DateDescriptor(
            is_today=True,
            data_granularity=DataGranularity.CURRENT_CONDITIONS,
            display_phrase=" is currently ",
        )

    now = now or datetime.now().astimezone()
    token = str(date_token or "").strip()
    target = _parse_target(token, now)
    if target is None:
        target = now
        if token.lower() == "tomorrow":
            target = now + timedelta(days=1)
    target = target.astimezone(timezone.utc)

    diff = target.day - now.day
    if diff > MAX_FORECAST_DAYS:
        return DateRangeError(error=FUTURE_LIMIT_MESSAGE)
    if diff > SHORT_FORECAST_DAYS:
        granularity = DataGranularity.EXTENDED_FORECAST
    elif diff >= 0:
        granularity = DataGranularity.SHORT_FORECAST
    else:
        return DateRangeError(error=HISTORICAL_MESSAGE)

    display_phrase = " today" if diff == 0 else " on " + format_date(target, now)
    return DateDescriptor(
        is_today=diff == 0,
        data_granularity=granularity,
        display_phrase=display_phrase,
        day=target.day,
        month=target.month,
        year=target.year,
        weekday=weekday_name(target),
        period=2 * diff,
    )
