"""SQLAlchemy ORM models backing the persisted key-value store"""

from sqlalchemy import Column, DateTime, Text, JSON
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class StoredItem(Base):
    """One JSON value addressed by a plain string key"""

    __tablename__ = "kv_item"

    key = Column(Text, primary_key=True)
    value = Column(JSON, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
