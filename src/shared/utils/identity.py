"""
Identity and timestamp helpers shared by all entities.
"""
import uuid
from datetime import datetime, timezone


def generate_id() -> str:
    """Return a fresh unique entity id."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def parse_timestamp(value) -> datetime:
    """
    Parse an ISO-8601 timestamp from storage.

    Naive values are treated as UTC. Missing or malformed values
    fall back to the current time.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return utc_now()
    else:
        return utc_now()
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
