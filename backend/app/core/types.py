"""Custom SQLAlchemy types for cross-database compatibility"""
from sqlalchemy import TypeDecorator, String
import uuid


def generate_uuid() -> str:
    return str(uuid.uuid4())


class GUID(TypeDecorator):
    """
    Identifier stored as VARCHAR(36) on SQLite and PostgreSQL alike.

    Values that parse as a UUID are written in canonical lowercase form, so
    an id taken from a URL matches regardless of case or braces. Anything
    else is passed through untouched and simply matches no row.
    """
    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        try:
            return str(uuid.UUID(str(value)))
        except ValueError:
            return str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else str(value)
