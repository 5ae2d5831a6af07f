from sqlalchemy import create_engine, pool, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
import os
import sqlite3
from dotenv import load_dotenv
import logging

load_dotenv()
logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./filmoteka.db")

# Upper bound for a single store call (seconds)
QUERY_TIMEOUT = float(os.getenv("DB_QUERY_TIMEOUT", 3))


def engine_options(url: str) -> dict:
    """
    Build create_engine() keyword arguments for the given URL.

    Every backend gets a bounded wait: PostgreSQL cancels statements after
    QUERY_TIMEOUT via statement_timeout, SQLite gives up waiting on a locked
    database after the same number of seconds.
    """
    options = {
        "pool_pre_ping": True,
        "echo": os.getenv("DB_ECHO", "false").lower() == "true",
    }

    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False, "timeout": QUERY_TIMEOUT}
        return options

    options.update(
        poolclass=pool.QueuePool,
        pool_size=int(os.getenv("DB_POOL_SIZE", 5)),
        max_overflow=int(os.getenv("DB_MAX_OVERFLOW", 10)),
        pool_timeout=QUERY_TIMEOUT,
        pool_recycle=int(os.getenv("DB_POOL_RECYCLE", 3600)),
    )
    if url.startswith("postgresql"):
        options["connect_args"] = {"options": f"-c statement_timeout={int(QUERY_TIMEOUT * 1000)}"}
    return options


engine = create_engine(DATABASE_URL, **engine_options(DATABASE_URL))


@event.listens_for(Engine, "connect")
def receive_connect(dbapi_conn, connection_record):
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection"""
    if isinstance(dbapi_conn, sqlite3.Connection):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
    logger.debug("Database connection established")


SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
Base = declarative_base()
