from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

from tasky.core.clock import as_utc


class UTCDateTime(TypeDecorator):
    """
    timestamptz column that always binds and returns aware UTC values.
    SQLite keeps no offset, so values read back from it get UTC attached.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return as_utc(value)

    def process_result_value(self, value, dialect):
        return as_utc(value)
