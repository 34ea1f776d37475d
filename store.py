"""
Whole-collection persistence over a key/value table.

Each collection (students, subjects, grades) is serialized to one JSON array
and stored under its collection name. Reads fall back to a caller-supplied
default when the entry is missing or cannot be parsed; writes replace the
entire entry and never raise to the caller.
"""

import copy
import json
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional, Protocol, Sequence, Type

from pydantic import BaseModel, TypeAdapter, ValidationError
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from models import StoreEntry

logger = logging.getLogger(__name__)


class CollectionStore(Protocol):
    """Storage port used by the repositories"""

    def load(self, key: str, default: Sequence[Any], record_type: Optional[Type[BaseModel]] = None) -> List[Any]:
        ...

    def save(self, key: str, collection: Sequence[Any]) -> None:
        ...


def serialize(collection: Sequence[Any]) -> str:
    """Render a collection as deterministic JSON text."""
    items = [
        item.model_dump(mode="json", by_alias=True) if isinstance(item, BaseModel) else item
        for item in collection
    ]
    return json.dumps(items, sort_keys=True, separators=(",", ":"))


class PersistentStore:
    """Load-with-default / best-effort save of collections keyed by name"""

    def __init__(self, engine: Engine):
        self._engine = engine

    def read(self, key: str) -> Optional[str]:
        """Return the raw stored text under ``key``, or None when absent."""
        with Session(self._engine) as session:
            entry = session.get(StoreEntry, key)
            return entry.value if entry else None

    def load(self, key: str, default: Sequence[Any], record_type: Optional[Type[BaseModel]] = None) -> List[Any]:
        try:
            raw = self.read(key)
        except SQLAlchemyError as e:
            logger.error(f"Error reading stored collection '{key}': {str(e)}", exc_info=True)
            return copy.deepcopy(list(default))

        if raw is None:
            logger.info(f"No stored collection under '{key}', using default")
            return copy.deepcopy(list(default))

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            if record_type is not None:
                return TypeAdapter(List[record_type]).validate_python(data)
            return data
        except (ValueError, ValidationError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(f"Stored collection '{key}' is unreadable, using default: {str(e)}")
            return copy.deepcopy(list(default))

    def save(self, key: str, collection: Sequence[Any]) -> None:
        try:
            payload = serialize(collection)
            with Session(self._engine) as session:
                entry = session.get(StoreEntry, key)
                if entry is None:
                    entry = StoreEntry(key=key, value=payload)
                else:
                    entry.value = payload
                    entry.updated_at = datetime.now(timezone.utc)
                session.add(entry)
                session.commit()
            logger.debug(f"Saved {len(collection)} records under '{key}'")
        except (TypeError, ValueError) as e:
            logger.error(f"Collection '{key}' is not JSON serializable: {str(e)}", exc_info=True)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to persist collection '{key}': {str(e)}", exc_info=True)
