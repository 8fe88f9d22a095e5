from datetime import timezone

from sqlalchemy.types import DateTime, TypeDecorator

from portal.core.clock import as_utc


class UTCDateTime(TypeDecorator):
    """Stores naive UTC and hands back aware UTC.

    SQLite keeps no offset, so every value is converted on the way in and
    tagged with UTC on the way out.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return as_utc(value).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)
