"""Column conversion helpers shared by the SQLite stores."""

from datetime import UTC, date, datetime


def iso(value: datetime) -> str:
    """Serialize a timestamp as ISO-8601 in UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()


def parse_datetime(value: str | None) -> datetime:
    """
    Parse a stored timestamp.

    Values written by SQLite defaults (``datetime('now')``) carry no offset
    and are UTC.
    """
    if not value:
        return datetime.now(UTC)
    try:
        parsed = datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return datetime.now(UTC)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def date_filter(
    column: str, start: date | None, end: date | None
) -> tuple[str, list[str]]:
    """Inclusive calendar-day range on an ISO timestamp column."""
    clause = ""
    params: list[str] = []
    if start is not None:
        clause += f" AND substr({column}, 1, 10) >= ?"
        params.append(start.isoformat())
    if end is not None:
        clause += f" AND substr({column}, 1, 10) <= ?"
        params.append(end.isoformat())
    return clause, params
