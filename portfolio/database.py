# portfolio/database.py
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from portfolio.config import DATABASE_URL, SQL_ECHO

IS_SQLITE = make_url(DATABASE_URL).drivername.startswith("sqlite")

engine = create_engine(
    DATABASE_URL,
    echo=SQL_ECHO,
    # sync routes and asyncio.to_thread both touch the connection off the creating thread
    connect_args={"check_same_thread": False} if IS_SQLITE else {},
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db(bind: Engine = engine) -> None:
    """Create the section table if it is missing."""
    from portfolio import models  # noqa: F401

    Base.metadata.create_all(bind=bind)


@contextmanager
def session_scope(factory: sessionmaker = SessionLocal) -> Iterator[Session]:
    """Session for code outside a request; rolled back if the block raises."""
    db = factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_db():
    with session_scope() as db:
        yield db
