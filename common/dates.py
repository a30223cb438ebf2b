"""
Local date helpers. Dates travel as YYYY-MM-DD and timestamps as
YYYY-MM-DD HH:MM:SS, both in the configured TIME_ZONE with no offset.
"""
from datetime import date, datetime, time, timedelta

from django.utils import timezone

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
DISPLAY_FORMAT = "%d/%m/%Y"

# Accepted by parse_local, most specific first
_PARSE_FORMATS = (DATETIME_FORMAT, "%Y-%m-%d %H:%M", DATE_FORMAT)


def local_now() -> datetime:
    """Current wall-clock time in the configured zone, without tzinfo."""
    now = timezone.now()
    if timezone.is_aware(now):
        now = timezone.localtime(now)
    return now.replace(tzinfo=None)


def local_datetime_string(value=None) -> str:
    return format_datetime(value or local_now())


def format_date(value) -> str:
    """date or datetime -> YYYY-MM-DD. Aware datetimes are converted to local time first."""
    if isinstance(value, datetime) and timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.strftime(DATE_FORMAT)


def format_datetime(value) -> str:
    if timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.strftime(DATETIME_FORMAT)


def parse_local(value):
    """
    Parse 'YYYY-MM-DD' or 'YYYY-MM-DD HH:MM[:SS]' as naive local time.
    Returns a datetime, or None when the value is empty or malformed.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    for fmt in _PARSE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def parse_date(value):
    """Calendar date from a date/timestamp string; None when unparsable."""
    parsed = parse_local(value)
    return parsed.date() if parsed else None


def format_for_display(value) -> str:
    """date, datetime or 'YYYY-MM-DD[ HH:MM:SS]' -> 'DD/MM/YYYY'; '-' when unparsable."""
    if isinstance(value, datetime) and timezone.is_aware(value):
        value = timezone.localtime(value)
    if isinstance(value, date):
        return value.strftime(DISPLAY_FORMAT)
    parsed = parse_local(value)
    if parsed is None:
        return "-"
    return parsed.strftime(DISPLAY_FORMAT)


def day_bounds(d: date):
    """Aware datetimes covering the local calendar day d, for DateTimeField filters."""
    start = timezone.make_aware(datetime.combine(d, time.min))
    end = timezone.make_aware(datetime.combine(d + timedelta(days=1), time.min))
    return start, end
