import copy
import logging
from typing import Any, Callable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from homefood.errors import PersistenceError
from homefood.models.core import StoreDocument
from homefood.store.base import DocumentStore
from homefood.store.tree import tree_get

log = logging.getLogger(__name__)


class SqlDocumentStore(DocumentStore):
    """Keeps each top-level key as one JSON row in ``store_document``."""

    def __init__(self, session_factory):
        super().__init__()
        self._session_factory = session_factory

    def _read(self, parts: list[str]) -> Any:
        try:
            with self._session_factory() as db:
                if not parts:
                    rows = db.scalars(select(StoreDocument)).all()
                    return {r.root: r.body for r in rows if r.body is not None}
                doc = db.get(StoreDocument, parts[0])
                body = doc.body if doc else None
        except SQLAlchemyError as exc:
            log.exception("store read failed for %s", "/".join(parts))
            raise PersistenceError("Could not read from the store.") from exc
        if body is None:
            return None
        return tree_get({parts[0]: body}, parts)

    def _mutate(self, root: str, fn: Callable[[dict], None]) -> None:
        try:
            with self._session_factory() as db:
                doc = db.get(StoreDocument, root)
                work = {root: copy.deepcopy(doc.body)} if doc and doc.body is not None else {}
                fn(work)
                body = work.get(root)
                if body in (None, {}, []):
                    if doc:
                        db.delete(doc)
                elif doc:
                    doc.body = body
                else:
                    db.add(StoreDocument(root=root, body=body))
                db.commit()
        except SQLAlchemyError as exc:
            log.exception("store write failed for %s", root)
            raise PersistenceError("Could not write to the store.") from exc
