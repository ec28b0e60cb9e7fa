from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from rps_dashboard.config import settings


def build_engine(database_url: str):
    """
    Create the SQLAlchemy engine for a database URL

    SQLite connections are shared across FastAPI worker threads, so the
    same-thread check is disabled and a busy timeout lets concurrent writers
    wait for the row lock instead of failing immediately.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": 30}

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Check connections before use
        connect_args=connect_args,
    )


# SQLAlchemy engine
engine = build_engine(settings.DATABASE_URL)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base for the models
Base = declarative_base()
