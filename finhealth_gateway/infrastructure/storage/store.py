"""Persisted key-value store implementations"""

import asyncio
import copy
from typing import Any, Callable, Dict, Optional, Protocol

from sqlalchemy.orm import Session

from finhealth_gateway.infrastructure.database import session as db_session
from finhealth_gateway.infrastructure.database.repositories import KeyValueRepository


class KeyValueStore(Protocol):
    """Generic get/set/remove store; values are JSON-serializable"""

    async def get_item(self, key: str) -> Optional[Any]: ...

    async def set_item(self, key: str, value: Any) -> None: ...

    async def remove_item(self, key: str) -> None: ...


class InMemoryStore:
    """Process-local store; values are deep-copied to mimic serialization"""

    def __init__(self, initial: Dict[str, Any] | None = None):
        self._items: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    async def get_item(self, key: str) -> Optional[Any]:
        value = self._items.get(key)
        return copy.deepcopy(value) if value is not None else None

    async def set_item(self, key: str, value: Any) -> None:
        self._items[key] = copy.deepcopy(value)

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class SqlKeyValueStore:
    """
    Store backed by the kv_item table.

    Sessions are synchronous, so each call runs in a worker thread with its own
    short session and the event loop is never blocked on the database.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    async def get_item(self, key: str) -> Optional[Any]:
        return await asyncio.to_thread(self._get, key)

    async def set_item(self, key: str, value: Any) -> None:
        await asyncio.to_thread(self._write, lambda repo: repo.set(key, value))

    async def remove_item(self, key: str) -> None:
        await asyncio.to_thread(self._write, lambda repo: repo.remove(key))

    def _get(self, key: str) -> Optional[Any]:
        with self.session_factory() as db:
            return KeyValueRepository(db).get(key)

    def _write(self, operation: Callable[[KeyValueRepository], None]) -> None:
        with self.session_factory() as db:
            try:
                operation(KeyValueRepository(db))
                db.commit()
            except Exception:
                db.rollback()
                raise


def default_store() -> SqlKeyValueStore:
    """SQL store on the configured database, creating the table on first use"""
    db_session.init_db()
    return SqlKeyValueStore(db_session.SessionLocal)
