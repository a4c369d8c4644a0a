from datetime import datetime, timezone


def get_utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def get_unix_timestamp() -> int:
    """Whole seconds since the epoch, the unit of the `exp` claim and `expires_at` column."""
    return int(get_utc_now().timestamp())
