"""UTC helpers. Every timestamp stored or compared by the gate is tz-aware UTC."""

from datetime import UTC, datetime, time


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Attach UTC to naive values and convert aware ones; None passes through."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def parse_timestamp(value: str | None) -> datetime | None:
    """Read a PostgREST timestamptz ("...+00:00" or "...Z") as UTC."""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(value))


def to_iso(dt: datetime | None) -> str | None:
    """Render for request bodies and gte./lt. filters."""
    if dt is None:
        return None
    return ensure_utc(dt).isoformat()


def start_of_day(dt: datetime) -> datetime:
    """Midnight UTC of the day containing dt; the "today" bucket starts here."""
    return datetime.combine(ensure_utc(dt).date(), time.min, tzinfo=UTC)
