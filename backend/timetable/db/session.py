from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from timetable.core.config import get_settings

settings = get_settings()

database_url = make_url(settings.database_url)
engine_options: dict = {"pool_pre_ping": True}
if database_url.get_backend_name() == "sqlite":
    engine_options["connect_args"] = {"check_same_thread": False}
    # An in-memory database lives only as long as its single connection.
    if database_url.database in (None, "", ":memory:"):
        engine_options["poolclass"] = StaticPool

engine = create_engine(database_url, **engine_options)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
