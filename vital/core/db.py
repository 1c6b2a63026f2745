from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()

SCHEMA_VERSION = 1


def build_engine(database_url: str) -> Engine:
    """
    Create an engine for the given URL.

    SQLite connections may be used from FastAPI's worker threads, and an
    in-memory database only exists for the lifetime of its one connection.
    """
    url = make_url(database_url)
    kwargs = {"future": True}

    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool

    return create_engine(url, **kwargs)


def build_sessionmaker(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
