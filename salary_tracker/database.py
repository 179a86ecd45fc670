# salary_tracker/database.py
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from salary_tracker import config

logger = logging.getLogger(__name__)


def build_engine(url: str, **kwargs) -> Engine:
    """Create an engine; SQLite gets thread-sharing and enforced foreign keys."""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    new_engine = create_engine(url, echo=config.SQL_ECHO, **kwargs)

    if new_engine.dialect.name == "sqlite":
        # ON DELETE CASCADE on salaries is only honoured with this pragma
        @event.listens_for(new_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


engine = build_engine(config.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db(bind: Engine = None):
    # models must be imported so their tables are registered on Base.metadata
    from salary_tracker.auth import models as _auth_models  # noqa: F401
    from salary_tracker.employees import models as _employee_models  # noqa: F401
    from salary_tracker.salaries import models as _salary_models  # noqa: F401

    target = bind or engine
    Base.metadata.create_all(bind=target)
    logger.info("Database initialized (%s)", target.url.render_as_string(hide_password=True))
