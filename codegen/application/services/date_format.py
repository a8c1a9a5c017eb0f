"""Date/time format strings used by DATE and TIME placeholder parameters.

Patterns carry compact letter formats such as ``ymd`` (250609), ``Ym``
(202506) or ``His`` (143000). Each letter maps to a date component; any other
character is copied literally and a backslash escapes the next character.

Two views of one format are provided: format_datetime renders a datetime, and
format_regex returns a regular expression (no capturing groups) matching
exactly what format_datetime can produce, for the code parser.
"""

import calendar
import re
from collections.abc import Callable
from datetime import datetime

_DAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
_MONTH_NAMES = (
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
)


def _hour12(dt: datetime) -> int:
    return dt.hour % 12 or 12


_RENDERERS: dict[str, Callable[[datetime], str]] = {
    # Day
    "d": lambda dt: f"{dt.day:02d}",
    "D": lambda dt: _DAY_NAMES[dt.weekday()][:3],
    "j": lambda dt: str(dt.day),
    "l": lambda dt: _DAY_NAMES[dt.weekday()],
    "N": lambda dt: str(dt.isoweekday()),
    "w": lambda dt: str(dt.isoweekday() % 7),
    "z": lambda dt: str(dt.timetuple().tm_yday - 1),
    # Week
    "W": lambda dt: f"{dt.isocalendar()[1]:02d}",
    # Month
    "F": lambda dt: _MONTH_NAMES[dt.month - 1],
    "m": lambda dt: f"{dt.month:02d}",
    "M": lambda dt: _MONTH_NAMES[dt.month - 1][:3],
    "n": lambda dt: str(dt.month),
    "t": lambda dt: str(calendar.monthrange(dt.year, dt.month)[1]),
    # Year
    "L": lambda dt: "1" if calendar.isleap(dt.year) else "0",
    "o": lambda dt: f"{dt.isocalendar()[0]:04d}",
    "Y": lambda dt: f"{dt.year:04d}",
    "y": lambda dt: f"{dt.year % 100:02d}",
    # Time
    "a": lambda dt: "am" if dt.hour < 12 else "pm",
    "A": lambda dt: "AM" if dt.hour < 12 else "PM",
    "g": lambda dt: str(_hour12(dt)),
    "G": lambda dt: str(dt.hour),
    "h": lambda dt: f"{_hour12(dt):02d}",
    "H": lambda dt: f"{dt.hour:02d}",
    "i": lambda dt: f"{dt.minute:02d}",
    "s": lambda dt: f"{dt.second:02d}",
    "u": lambda dt: f"{dt.microsecond:06d}",
    "v": lambda dt: f"{dt.microsecond // 1000:03d}",
    "U": lambda dt: str(int(dt.timestamp())),
}

_PATTERNS: dict[str, str] = {
    "d": r"\d{2}",
    "D": r"[A-Za-z]{3}",
    "j": r"\d{1,2}",
    "l": r"[A-Za-z]+",
    "N": r"\d",
    "w": r"\d",
    "z": r"\d{1,3}",
    "W": r"\d{2}",
    "F": r"[A-Za-z]+",
    "m": r"\d{2}",
    "M": r"[A-Za-z]{3}",
    "n": r"\d{1,2}",
    "t": r"\d{2}",
    "L": r"[01]",
    "o": r"\d{4}",
    "Y": r"\d{4}",
    "y": r"\d{2}",
    "a": r"(?:am|pm)",
    "A": r"(?:AM|PM)",
    "g": r"\d{1,2}",
    "G": r"\d{1,2}",
    "h": r"\d{2}",
    "H": r"\d{2}",
    "i": r"\d{2}",
    "s": r"\d{2}",
    "u": r"\d{6}",
    "v": r"\d{3}",
    "U": r"\d+",
}


def _tokens(fmt: str) -> list[tuple[bool, str]]:
    """Split fmt into (is_format_letter, char) tokens, resolving backslash escapes."""
    tokens: list[tuple[bool, str]] = []
    escaped = False
    for char in fmt:
        if escaped:
            tokens.append((False, char))
            escaped = False
        elif char == "\\":
            escaped = True
        else:
            tokens.append((char in _RENDERERS, char))
    if escaped:
        tokens.append((False, "\\"))
    return tokens


def format_datetime(dt: datetime, fmt: str) -> str:
    """Render dt using a letter format (e.g. 'ymd' -> '250609').

    Args:
        dt: Timestamp to render (rendered in its own timezone).
        fmt: Letter format; unknown characters are copied as-is.

    Returns:
        Rendered string.
    """
    return "".join(
        _RENDERERS[char](dt) if is_letter else char for is_letter, char in _tokens(fmt)
    )


def format_regex(fmt: str) -> str:
    """Return a non-capturing regex matching the output of format_datetime(_, fmt)."""
    return "".join(
        _PATTERNS[char] if is_letter else re.escape(char)
        for is_letter, char in _tokens(fmt)
    )
