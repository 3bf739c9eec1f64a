from __future__ import annotations

import re
from datetime import datetime

from settleup.core.errors import DateFormatError
from settleup.utils.parsing import ParsingUtils

DATE_PATTERN = "dd.MM.yy HH:mm"

_DATE_RE = re.compile(
    r"^(?P<day>\d{1,2})\.(?P<month>\d{1,2})\.(?P<year>\d{2})"
    r" (?P<hour>\d{1,2}):(?P<minute>\d{2})$"
)


def parse_date(text: object) -> datetime:
    """Parse a ``dd.MM.yy HH:mm`` stamp; two-digit years land in the 2000s."""
    t = ParsingUtils.normalize_text(text)
    m = _DATE_RE.match(t)
    if m is None:
        raise DateFormatError(f"Expected date as {DATE_PATTERN}, got {t!r}")
    try:
        return datetime(
            2000 + int(m["year"]),
            int(m["month"]),
            int(m["day"]),
            int(m["hour"]),
            int(m["minute"]),
        )
    except ValueError as e:
        raise DateFormatError(f"Invalid date {t!r}: {e}") from e
