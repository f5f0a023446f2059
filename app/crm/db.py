from __future__ import annotations

import atexit
from contextlib import contextmanager
from collections.abc import Generator

from flask import Flask, g
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

ENGINE_KEY = "sqlalchemy_engine"
SESSIONMAKER_KEY = "sqlalchemy_sessionmaker"


def _unicode_lower(value: str | None) -> str | None:
    return value.lower() if isinstance(value, str) else value


def build_engine(db_url: str) -> Engine:
    engine_kwargs: dict[str, object] = {"future": True, "pool_pre_ping": True}
    if db_url.startswith("postgres"):
        engine_kwargs.update(pool_recycle=1800, pool_size=5, max_overflow=10, pool_timeout=30)
    engine = create_engine(db_url, **engine_kwargs)

    if engine.dialect.name == "sqlite":
        # built-in lower() only folds ASCII; name search relies on it
        @event.listens_for(engine, "connect")
        def _register_unicode_lower(dbapi_connection, connection_record):  # type: ignore[no-redef]
            dbapi_connection.create_function("lower", 1, _unicode_lower)

    return engine


def init_db(app: Flask) -> None:
    """
    Open the store client once per process and tie its lifetime to the app.

    Collections (tables) are created if missing; there is no migration step.
    Request sessions are closed on app-context teardown and the engine is
    disposed at interpreter exit.
    """
    from app.crm.models import Base

    engine = build_engine(app.config["DATABASE_URL"])
    Base.metadata.create_all(bind=engine)
    app.extensions[ENGINE_KEY] = engine
    app.extensions[SESSIONMAKER_KEY] = sessionmaker(
        bind=engine,
        class_=Session,
        autoflush=False,
        expire_on_commit=False,
    )
    app.teardown_appcontext(teardown_db_session)
    atexit.register(close_db, app)


def close_db(app: Flask) -> None:
    engine = app.extensions.pop(ENGINE_KEY, None)
    app.extensions.pop(SESSIONMAKER_KEY, None)
    if engine is not None:
        engine.dispose()


def db_session(app: Flask | None = None) -> Session:
    """Session shared by everything handling the current request."""
    s: Session | None = getattr(g, "db_session", None)
    if s is not None:
        return s
    if app is None:
        from flask import current_app

        app = current_app
    g.db_session = app.extensions[SESSIONMAKER_KEY]()
    return g.db_session


def teardown_db_session(_exc: BaseException | None) -> None:
    s: Session | None = g.pop("db_session", None)
    if s is not None:
        s.close()


@contextmanager
def session_scope(app: Flask) -> Generator[Session, None, None]:
    """Session outside a request (fixtures, scripts); commits on success."""
    s: Session = app.extensions[SESSIONMAKER_KEY]()
    try:
        yield s
        s.commit()
    except Exception:
        s.rollback()
        raise
    finally:
        s.close()
