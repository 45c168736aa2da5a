from shared.database.engine import Base, get_async_engine, get_async_session_factory
from shared.database.types import UTCDateTime

__all__ = ["Base", "UTCDateTime", "get_async_engine", "get_async_session_factory"]
