"""Soft-delete policy shared by every soft-deletable repository.

Deleting sets ``deleted_at`` to the current time in a single UPDATE, and every
read composes ``deleted_at IS NULL``. Concrete repositories only add their
entity-specific queries on top of ``_live_query`` / ``_live``.
"""

from datetime import datetime, timezone
from typing import Callable, Dict, Iterator, List, Optional

from sqlalchemy.orm import Query, Session

from ..utils.logging_config import get_logger

logger = get_logger("database")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SQLAlchemySoftDeletePolicy:
    """Soft-delete reads and writes for one mapped model over a Session."""

    model = None  # set by subclasses
    _session: Session

    def _live_query(self) -> Query:
        """Query restricted to rows that have not been deleted."""
        return self._session.query(self.model).filter(self.model.deleted_at.is_(None))

    def _mark_deleted_where(self, *criteria) -> int:
        """Stamp deleted_at on live rows matching ``criteria``; returns the row count."""
        count = (
            self._session.query(self.model)
            .filter(self.model.deleted_at.is_(None), *criteria)
            .update({self.model.deleted_at: utcnow()}, synchronize_session="fetch")
        )
        if count:
            logger.info(f"Soft-deleted {count} {self.model.__tablename__} row(s)")
        return count

    async def get_by_id(self, entity_id: int):
        """Get a live entity by ID."""
        return self._live_query().filter(self.model.id == entity_id).first()

    async def list_all(self) -> list:
        """Get all live entities."""
        return self._live_query().order_by(self.model.id).all()

    async def mark_deleted(self, entity_id: int) -> bool:
        """Soft-delete an entity. Returns False if it was already gone."""
        return self._mark_deleted_where(self.model.id == entity_id) > 0


class MemorySoftDeletePolicy:
    """Soft-delete reads and writes for one entity type held in a dict."""

    def __init__(self):
        self._items: Dict[int, object] = {}
        self._next_id = 1

    def _store(self, entity):
        """Assign an ID and timestamps, then keep the entity."""
        entity.id = self._next_id
        self._next_id += 1
        now = utcnow()
        entity.created_at = now
        entity.updated_at = now
        entity.deleted_at = None
        self._items[entity.id] = entity
        return entity

    def _live(self) -> Iterator:
        """Iterate live entities in insertion order."""
        return (item for item in self._items.values() if item.deleted_at is None)

    def _mark_deleted_where(self, predicate: Callable[[object], bool]) -> int:
        now = utcnow()
        matched = [item for item in self._live() if predicate(item)]
        for item in matched:
            item.deleted_at = now
        return len(matched)

    async def get_by_id(self, entity_id: int) -> Optional[object]:
        """Get a live entity by ID."""
        item = self._items.get(entity_id)
        if item is None or item.deleted_at is not None:
            return None
        return item

    async def list_all(self) -> List[object]:
        """Get all live entities."""
        return list(self._live())

    async def mark_deleted(self, entity_id: int) -> bool:
        """Soft-delete an entity. Returns False if it was already gone."""
        return self._mark_deleted_where(lambda item: item.id == entity_id) > 0
