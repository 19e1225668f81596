from gear_gauge.db.base import Base
from gear_gauge.db.session import async_session_maker, get_db, init_db, make_engine, make_session_maker

__all__ = ["Base", "async_session_maker", "get_db", "init_db", "make_engine", "make_session_maker"]
