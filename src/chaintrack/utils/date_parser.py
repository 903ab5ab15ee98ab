"""Date parsing utilities."""

from datetime import UTC, date, datetime, timedelta

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

EXPORT_DATE_FORMAT = "%m/%d/%Y %H:%M:%S"

# TAI64 labels are 2**62 + TAI seconds; Fuel nodes report TAI = UTC + 10s.
_TAI64_OFFSET = 2**62
_TAI64_UTC_SKEW = 10


def _period_start(period: str, today: date, back: int) -> date | None:
    """First day of the current (back=0) or previous (back=1) week/month/year."""
    if period == "week":
        return today - timedelta(days=today.weekday() + 7 * back)
    if period == "month":
        return today.replace(day=1) - relativedelta(months=back)
    if period == "year":
        return today.replace(month=1, day=1) - relativedelta(years=back)
    return None


def parse_date(date_str: str) -> date:
    """Parse a CLI date argument.

    Accepts anything dateutil understands ("2024-01-15", "January 15, 2024")
    plus "today", "yesterday" and "this|last week|month|year", which resolve
    to the first day of that period. "Today" is the current UTC date.

    Raises:
        ValueError: If the string cannot be parsed
    """
    text = date_str.strip().lower()
    today = datetime.now(UTC).date()

    if text == "today":
        return today
    if text == "yesterday":
        return today - timedelta(days=1)

    qualifier, _, period = text.partition(" ")
    if qualifier in ("this", "last"):
        start = _period_start(period, today, 0 if qualifier == "this" else 1)
        if start is not None:
            return start

    try:
        return date_parser.parse(text).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}") from e


def get_date_range(period: str) -> tuple[date, date]:
    """Inclusive (start, end) for this-month, this-year, last-month or last-year.

    Current periods end today; previous periods end on their last day.

    Raises:
        ValueError: If the period is not recognized
    """
    qualifier, _, unit = period.strip().lower().partition("-")
    today = datetime.now(UTC).date()

    if qualifier in ("this", "last") and unit in ("month", "year"):
        current = _period_start(unit, today, 0)
        if qualifier == "this":
            return (current, today)
        return (_period_start(unit, today, 1), current - timedelta(days=1))

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: this-month, this-year, last-month, last-year"
    )


def from_unix_seconds(value: str | int | None) -> datetime:
    """Convert an explorer ``timeStamp`` (unix seconds) to an aware UTC datetime.

    Malformed or out-of-range values map to the epoch rather than raising.
    """
    try:
        return datetime.fromtimestamp(int(str(value).strip()), UTC)
    except (TypeError, ValueError, OverflowError, OSError):
        return datetime.fromtimestamp(0, UTC)


def from_unix_millis(value: str | int | None) -> datetime:
    """Convert a millisecond epoch (Kaspa ``block_time``) to an aware UTC datetime."""
    try:
        return datetime.fromtimestamp(int(str(value).strip()) / 1000, UTC)
    except (TypeError, ValueError, OverflowError, OSError):
        return datetime.fromtimestamp(0, UTC)


def parse_chain_time(value: str | int | None) -> datetime | None:
    """Parse a Fuel status time: TAI64 decimal label, unix seconds or ISO 8601.

    Returns None when the value is absent or unparseable.
    """
    if value is None or value == "":
        return None

    text = str(value).strip()
    if text.isdigit():
        number = int(text)
        if number >= _TAI64_OFFSET:
            number = number - _TAI64_OFFSET - _TAI64_UTC_SKEW
        try:
            return datetime.fromtimestamp(number, UTC)
        except (OverflowError, OSError, ValueError):
            return None

    try:
        parsed = date_parser.isoparse(text)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_export_date(value: datetime) -> str:
    """Format a datetime as ``MM/DD/YYYY HH:MM:SS`` in UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime(EXPORT_DATE_FORMAT)
