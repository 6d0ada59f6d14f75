"""
Server clock. Every chat timestamp goes through utcnow() so tests can pin time.
"""
from datetime import datetime, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
