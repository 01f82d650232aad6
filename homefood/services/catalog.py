import logging
from typing import Optional

from pydantic import ValidationError as SchemaError

from homefood.errors import ValidationError, NotFoundError
from homefood.schemas.catalog import CatalogItem, SUBCATEGORY_MEALS, SUBCATEGORIES
from homefood.store.base import DocumentStore

log = logging.getLogger(__name__)


def _item(raw) -> Optional[CatalogItem]:
    try:
        return CatalogItem.model_validate(raw)
    except SchemaError:
        log.warning("skipping malformed catalog entry %r", raw)
        return None


class Catalog:
    """Priced item list, keyed by meal type and, for lunch/dinner, by subcategory."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def _path(self, meal_type: str, subcategory: Optional[str]) -> str:
        if not meal_type:
            raise ValidationError("meal type is required")
        if meal_type in SUBCATEGORY_MEALS:
            if subcategory not in SUBCATEGORIES:
                raise ValidationError(
                    f"{meal_type} items need a subcategory ({', '.join(SUBCATEGORIES)})")
            return f"inventory/{meal_type}/{subcategory}"
        if subcategory:
            raise ValidationError(f"{meal_type} items have no subcategories")
        return f"inventory/{meal_type}"

    def _load(self, path: str) -> list[CatalogItem]:
        raw = self.store.get(path) or []
        if isinstance(raw, dict):
            raw = list(raw.values())
        return [i for i in (_item(r) for r in raw) if i is not None]

    def get_items(self, meal_type: str, subcategory: Optional[str] = None) -> list[CatalogItem]:
        if meal_type in SUBCATEGORY_MEALS and subcategory is None:
            items = []
            for sub in SUBCATEGORIES:
                items.extend(self._load(f"inventory/{meal_type}/{sub}"))
        else:
            items = self._load(self._path(meal_type, subcategory))
        return sorted(items, key=lambda i: i.name)

    def find_item(self, meal_type: str, name: str, subcategory: Optional[str] = None) -> Optional[CatalogItem]:
        # duplicate names are tolerated; the first one in storage order wins
        if meal_type in SUBCATEGORY_MEALS and subcategory is None:
            scopes = [f"inventory/{meal_type}/{s}" for s in SUBCATEGORIES]
        else:
            scopes = [self._path(meal_type, subcategory)]
        for path in scopes:
            for it in self._load(path):
                if it.name == name:
                    return it
        return None

    def upsert_item(self, meal_type: str, item: CatalogItem, subcategory: Optional[str] = None) -> CatalogItem:
        path = self._path(meal_type, subcategory)
        items = self._load(path)
        for idx, existing in enumerate(items):
            if existing.name == item.name:
                items[idx] = item
                break
        else:
            items.append(item)
        self.store.set(path, [i.model_dump() for i in items])
        return item

    def delete_item(self, meal_type: str, name: str, subcategory: Optional[str] = None) -> None:
        path = self._path(meal_type, subcategory)
        items = self._load(path)
        kept = [i for i in items if i.name != name]
        if len(kept) == len(items):
            raise NotFoundError(f"{name} not found in {meal_type} catalog")
        self.store.set(path, [i.model_dump() for i in kept])
        log.info("catalog item %s removed from %s", name, path)
