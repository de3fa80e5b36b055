import os
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

logger = logging.getLogger(__name__)

# Local fallback, development only
DEFAULT_DATABASE_URL = "sqlite:///./key2rent.db"
DATABASE_URL = os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL
SQL_ECHO = os.getenv("SQL_ECHO", "").lower() in ("1", "true", "yes")


def build_engine(url: str, **kwargs):
    """Engine for ``url``; SQLite connections may be shared across threadpool workers."""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(url, echo=SQL_ECHO, **kwargs)


engine = build_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind=None):
    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    logger.info("Tables ready on %s", bind.url.render_as_string(hide_password=True))


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
