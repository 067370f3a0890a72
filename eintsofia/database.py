import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from eintsofia.infrastructure.config.settings import settings

logger = logging.getLogger(__name__)

# Create Base instance
Base = declarative_base()


def build_engine(database_url: str):
    """Create an engine; SQLite URLs get thread-sharing connect args."""
    if database_url.startswith("sqlite:"):
        kwargs = {"connect_args": {"check_same_thread": False}, "pool_pre_ping": True}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # In-memory databases exist per connection; share one
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, **kwargs)
        logger.info("Using SQLite database")
    else:
        engine = create_engine(database_url, pool_pre_ping=True)
        logger.info("Using configured database")
    return engine


DATABASE_URL = settings.database_url
engine = build_engine(DATABASE_URL)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Yield a database session and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None):
    """Create all tables registered on ``Base``."""
    # Register the models on Base.metadata
    from eintsofia import models  # noqa: F401

    target = bind if bind is not None else engine
    Base.metadata.create_all(bind=target)
    logger.info("Database tables created")
