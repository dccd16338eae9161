"""Column helpers shared by the models."""
from datetime import UTC, datetime


def _utcnow():
    """Return current UTC time without timezone info (for SQLite compat)."""
    return datetime.now(UTC).replace(tzinfo=None)
