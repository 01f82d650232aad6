import copy
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

from homefood.errors import ValidationError
from homefood.store.tree import (
    split_path, new_key, normalize, tree_set, tree_remove,
)

log = logging.getLogger(__name__)

Listener = Callable[[Any], None]


@dataclass
class _Watch:
    parts: list[str]
    callback: Listener


class Subscription:
    """Handle returned by ``DocumentStore.subscribe``; ends delivery when closed."""

    def __init__(self, store: "DocumentStore", sub_id: int, path: str):
        self._store = store
        self._id = sub_id
        self.path = path
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._store._drop_watch(self._id)
            self.active = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.unsubscribe()
        return False


class DocumentStore(ABC):
    """Hierarchical key-value store with live subscriptions.

    Backends implement two primitives:

    * ``_read(parts)``: value at a path (``[]`` means the whole tree).
    * ``_mutate(root, fn)``: run ``fn`` on a dict holding the current
      top-level document ``root`` and persist the result. ``fn`` may raise,
      in which case nothing is persisted.

    Everything else (paths, push keys, change notification) lives here.
    Writes are last-write-wins; there is no cross-key transaction.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._watches: dict[int, _Watch] = {}
        self._next_watch = 0

    # ---------- backend primitives ----------

    @abstractmethod
    def _read(self, parts: list[str]) -> Any:
        ...

    @abstractmethod
    def _mutate(self, root: str, fn: Callable[[dict], None]) -> None:
        ...

    # ---------- public API ----------

    def get(self, path: str = "") -> Any:
        parts = split_path(path)
        with self._lock:
            value = self._read(parts)
        if value == {} or value == []:
            return None
        return copy.deepcopy(value)

    def set(self, path: str, value: Any) -> None:
        parts = self._writable(path)
        value = normalize(value)
        self._commit(parts, lambda tree: tree_set(tree, parts, value))

    def update(self, path: str, fields: dict) -> None:
        parts = self._writable(path)
        if not isinstance(fields, dict):
            raise ValidationError("update expects a mapping of fields")
        changes = [(parts + split_path(k), normalize(v)) for k, v in fields.items()]
        for child_parts, _ in changes:
            if len(child_parts) == len(parts):
                raise ValidationError("update field names must not be empty")

        def apply(tree: dict) -> None:
            for child_parts, v in changes:
                tree_set(tree, child_parts, v)

        self._commit(parts, apply)

    def remove(self, path: str) -> None:
        parts = self._writable(path)
        self._commit(parts, lambda tree: tree_remove(tree, parts))

    def push(self, path: str, value: Any) -> str:
        parts = self._writable(path)
        value = normalize(value)
        if value is None:
            raise ValidationError("cannot push an empty value")
        with self._lock:
            existing = self._read(parts)
        key = new_key()
        while isinstance(existing, dict) and key in existing:
            key = new_key()
        child = parts + [key]
        self._commit(child, lambda tree: tree_set(tree, child, value))
        return key

    def subscribe(self, path: str, callback: Listener) -> Subscription:
        """Call ``callback`` now with the current value, then after every change."""
        parts = split_path(path)
        with self._lock:
            sub_id = self._next_watch
            self._next_watch += 1
            self._watches[sub_id] = _Watch(parts=parts, callback=callback)
            current = self.get(path)
        callback(current)
        return Subscription(self, sub_id, path)

    # ---------- internals ----------

    def _writable(self, path: str) -> list[str]:
        parts = split_path(path)
        if not parts:
            raise ValidationError("cannot write to the store root")
        return parts

    def _drop_watch(self, sub_id: int) -> None:
        with self._lock:
            self._watches.pop(sub_id, None)

    @staticmethod
    def _overlaps(a: list[str], b: list[str]) -> bool:
        n = min(len(a), len(b))
        return a[:n] == b[:n]

    def _commit(self, parts: list[str], fn: Callable[[dict], None]) -> None:
        with self._lock:
            watched = [
                (w, copy.deepcopy(self._read(w.parts)))
                for w in list(self._watches.values())
                if self._overlaps(w.parts, parts)
            ]
            self._mutate(parts[0], fn)
            pending = []
            for w, before in watched:
                after = self.get("/".join(w.parts))
                if after != (None if before in ({}, []) else before):
                    pending.append((w, after))
        for w, after in pending:
            try:
                w.callback(after)
            except Exception:
                log.exception("store subscriber for %r failed", "/".join(w.parts))
