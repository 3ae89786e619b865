"""Shared utility functions used across components."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Return datetime as timezone-aware UTC. Returns None if input is None."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def mask_email(email: str | None) -> str:
    """Mask the local part of an address for log lines: ``jdoe@acme.com`` -> ``j***@acme.com``."""
    value = str(email or "").strip()
    if "@" not in value:
        return "***"
    local, domain = value.rsplit("@", 1)
    return f"{local[:1]}***@{domain}"
