"""Clock - the shell's source of "now".

Invariants:
    - utc_now() always returns an aware UTC datetime
    - ensure_utc() makes naive values (SQLite drops tzinfo) comparable with utc_now()
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
