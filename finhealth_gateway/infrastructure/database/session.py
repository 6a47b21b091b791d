"""Database session management"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from finhealth_gateway.config import settings
from finhealth_gateway.infrastructure.database.models import Base

# SQLite is used on-device; the thread check is relaxed for the asyncio loop
connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,  # Verify connections before using
    connect_args=connect_args,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """Create the key-value table if missing"""
    Base.metadata.create_all(bind=engine)
