"""Timespan - Human-readable rendering of durations."""

from datetime import timedelta

ONE_SECOND_MS = 1000
ONE_MINUTE_MS = 60 * ONE_SECOND_MS
ONE_HOUR_MS = 60 * ONE_MINUTE_MS
ONE_DAY_MS = 24 * ONE_HOUR_MS
ONE_MONTH_MS = 30 * ONE_DAY_MS
ONE_YEAR_MS = 365 * ONE_DAY_MS


def _days(n: int) -> str:
    return f"{n} day" if n == 1 else f"{n} days"


def _pair(big: int, big_label: str, small_label: str) -> str:
    # The smaller unit only adds information while the big one is single-digit
    if big < 10:
        return f"{big_label} {small_label}"
    return big_label


def format_timespan(duration: timedelta) -> str:
    """
    Render a duration using its two most significant units.

    Examples:
        >>> format_timespan(timedelta(minutes=3, seconds=12))
        '3 min 12 sec'
        >>> format_timespan(timedelta(hours=26))
        '1 day 2 hr'
        >>> format_timespan(timedelta(seconds=4, milliseconds=560))
        '4.5 sec'
        >>> format_timespan(timedelta(milliseconds=40))
        '40 ms'

    Negative durations are clamped to zero.
    """
    remaining = max(duration // timedelta(milliseconds=1), 0)

    years, remaining = divmod(remaining, ONE_YEAR_MS)
    months, remaining = divmod(remaining, ONE_MONTH_MS)
    days, remaining = divmod(remaining, ONE_DAY_MS)
    hours, remaining = divmod(remaining, ONE_HOUR_MS)
    minutes, remaining = divmod(remaining, ONE_MINUTE_MS)
    seconds, millis = divmod(remaining, ONE_SECOND_MS)

    if years > 0:
        return _pair(years, f"{years} yr", f"{months} mo")
    if months > 0:
        return _pair(months, f"{months} mo", _days(days))
    if days > 0:
        return _pair(days, _days(days), f"{hours} hr")
    if hours > 0:
        return _pair(hours, f"{hours} hr", f"{minutes} min")
    if minutes > 0:
        return _pair(minutes, f"{minutes} min", f"{seconds} sec")
    if seconds >= 10:
        return f"{seconds} sec"
    if seconds >= 1:
        return f"{seconds + (millis // 100) / 10:g} sec"
    if millis >= 100:
        return f"{(millis // 10) / 100:g} sec"
    return f"{millis} ms"
