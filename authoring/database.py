"""
Database connection and session management.
"""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from authoring.config import settings

# Create SQLAlchemy engine
engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,  # Verify connections before using
    echo=settings.log_level == "DEBUG"
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for ORM models
Base = declarative_base()


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Create audit tables if they do not exist.

    Args:
        bind: Engine to create tables on (defaults to the configured engine)
    """
    # Register models with Base.metadata before create_all
    import authoring.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
