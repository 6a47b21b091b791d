"""Data access layer for persisted key-value items"""

from typing import Any, Optional
from sqlalchemy.orm import Session
from finhealth_gateway.infrastructure.database.models import StoredItem


class KeyValueRepository:
    """Repository for JSON values keyed by string"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[Any]:
        """Fetch the value stored under key"""
        item = self.db.get(StoredItem, key)
        return item.value if item is not None else None

    def set(self, key: str, value: Any) -> None:
        """Insert or replace; last writer wins"""
        item = self.db.get(StoredItem, key)
        if item is None:
            self.db.add(StoredItem(key=key, value=value))
        else:
            item.value = value
        self.db.flush()

    def remove(self, key: str) -> None:
        item = self.db.get(StoredItem, key)
        if item is not None:
            self.db.delete(item)
            self.db.flush()
