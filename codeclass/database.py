from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from codeclass.core import config


def _connect_args(database_url: str) -> dict:
    # Route handlers run in the thread pool, so SQLite connections cross threads.
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    config.DATABASE_URL,
    connect_args=_connect_args(config.DATABASE_URL),
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
