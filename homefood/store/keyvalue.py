"""Small durable key-value port for state that lives outside the document store."""
import copy
import logging
from abc import ABC, abstractmethod
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from homefood.errors import PersistenceError
from homefood.models.core import SessionState
from homefood.store.tree import normalize

log = logging.getLogger(__name__)


class KeyValueStore(ABC):
    @abstractmethod
    def load(self, key: str, default: Any = None) -> Any:
        ...

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        ...


class MemoryKeyValueStore(KeyValueStore):
    def __init__(self):
        self._data: dict[str, Any] = {}

    def load(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return copy.deepcopy(default)
        return copy.deepcopy(self._data[key])

    def save(self, key: str, value: Any) -> None:
        self._data[key] = normalize(value)


class SqlKeyValueStore(KeyValueStore):
    def __init__(self, session_factory):
        self._session_factory = session_factory

    def load(self, key: str, default: Any = None) -> Any:
        try:
            with self._session_factory() as db:
                row = db.get(SessionState, key)
                value = row.value if row else None
        except SQLAlchemyError as exc:
            log.exception("state load failed for %s", key)
            raise PersistenceError("Could not load saved session state.") from exc
        if value is None:
            return copy.deepcopy(default)
        return value

    def save(self, key: str, value: Any) -> None:
        value = normalize(value)
        try:
            with self._session_factory() as db:
                row = db.get(SessionState, key)
                if row:
                    row.value = value
                else:
                    db.add(SessionState(key=key, value=value))
                db.commit()
        except SQLAlchemyError as exc:
            log.exception("state save failed for %s", key)
            raise PersistenceError("Could not save session state.") from exc
