from __future__ import annotations
from datetime import datetime, timezone
from email.utils import format_datetime

# Tried in this order; servers emit all three. The first two carry a zone
# token, which is checked separately because strptime's %Z also accepts
# the local zone names.
HTTP_DATE_FORMATS = (
    ("%a, %d %b %Y %H:%M:%S", True),    # RFC 1123: Sun, 06 Nov 1994 08:49:37 GMT
    ("%A, %d-%b-%y %H:%M:%S", True),    # RFC 850:  Sunday, 06-Nov-94 08:49:37 GMT
    ("%a %b %d %H:%M:%S %Y", False),    # asctime:  Sun Nov  6 08:49:37 1994
)

UTC_ZONES = ("GMT", "UTC")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_http_date(value: str) -> datetime | None:
    """Return the UTC datetime for an HTTP date header, or None if no format matches."""
    value = value.strip()
    for fmt, zoned in HTTP_DATE_FORMATS:
        text = value
        if zoned:
            text, _, zone = value.rpartition(" ")
            if zone not in UTC_ZONES:
                continue
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return parsed.replace(tzinfo=timezone.utc)
    return None


def format_http_date(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return format_datetime(dt.astimezone(timezone.utc), usegmt=True)
