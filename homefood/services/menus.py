import datetime as dt
import logging
import re
from typing import Optional

from pydantic import ValidationError as SchemaError

from homefood.errors import ValidationError, NotFoundError
from homefood.schemas.catalog import (
    MenuEntry, MenuSnapshot, MenuPick, MenuWindow, CustomMenu,
    SUBCATEGORY_MEALS, SUBCATEGORIES,
)
from homefood.services.catalog import Catalog
from homefood.store.base import DocumentStore

log = logging.getLogger(__name__)


def day_key(day) -> str:
    if isinstance(day, dt.date):
        return day.isoformat()
    try:
        return dt.date.fromisoformat(str(day)).isoformat()
    except ValueError as exc:
        raise ValidationError(f"invalid date {day!r}, expected YYYY-MM-DD") from exc


def custom_meal_key(title: str) -> str:
    """'Sankranti Special' -> 'sankranti_special'"""
    return re.sub(r"\s+", "_", title.strip().lower())


class MenuBook:
    """Per-date menu snapshots the order builder prices from."""

    def __init__(self, store: DocumentStore, catalog: Catalog):
        self.store = store
        self.catalog = catalog

    def _resolve(self, meal_type: str, pick: MenuPick) -> tuple[int, MenuEntry]:
        subs = [pick.subcategory] if pick.subcategory else list(SUBCATEGORIES)
        if meal_type in SUBCATEGORY_MEALS:
            for sub in subs:
                item = self.catalog.find_item(meal_type, pick.name, sub)
                if item:
                    rank = SUBCATEGORIES.index(sub) if sub in SUBCATEGORIES else len(SUBCATEGORIES)
                    return rank, MenuEntry(name=item.name, price=item.price,
                                           localized_name=item.localized_name or None)
        else:
            item = self.catalog.find_item(meal_type, pick.name, pick.subcategory)
            if item:
                return 0, MenuEntry(name=item.name, price=item.price,
                                    localized_name=item.localized_name or None)
        raise NotFoundError(f"{pick.name} is not in the {meal_type} catalog")

    def save_menu(self, day, picks: dict[str, list[MenuPick]],
                  custom_menu: Optional[CustomMenu] = None) -> dict[str, MenuSnapshot]:
        """Generate & save: copy prices out of the catalog into ``menus/{date}``."""
        key = day_key(day)
        snapshots: dict[str, MenuSnapshot] = {}
        for meal_type, meal_picks in picks.items():
            ranked = [self._resolve(meal_type, p) for p in meal_picks]
            # lunch/dinner are flattened in subcategory order; sort is stable
            ranked.sort(key=lambda r: r[0])
            snapshots[meal_type] = MenuSnapshot(date=key, meal_type=meal_type,
                                                items=[e for _, e in ranked])

        window = None
        if custom_menu is not None:
            entries = [
                MenuEntry(name=i.name.strip(), price=i.price, localized_name=i.localized_name)
                for i in custom_menu.items
                if i.name and i.name.strip() and i.price is not None
            ]
            if entries:
                meal_key = custom_meal_key(custom_menu.title)
                snapshots[meal_key] = MenuSnapshot(date=key, meal_type=meal_key, items=entries)
                window = MenuWindow(**custom_menu.model_dump(exclude={"items"}))
                self.store.set(f"menu_windows/{key}/{meal_key}", window.model_dump())

        if not snapshots:
            raise ValidationError("Select at least one item before saving the menu.")

        self.store.update(f"menus/{key}", {
            meal: [e.model_dump(exclude_none=True) for e in snap.items]
            for meal, snap in snapshots.items()
        })
        log.info("menu saved for %s: %s", key, ", ".join(sorted(snapshots)))
        return snapshots

    def get_snapshot(self, day, meal_type: str) -> MenuSnapshot:
        key = day_key(day)
        raw = self.store.get(f"menus/{key}/{meal_type}") if meal_type else None
        entries = []
        for r in raw if isinstance(raw, list) else []:
            try:
                entries.append(MenuEntry.model_validate(r))
            except SchemaError:
                log.warning("skipping malformed menu entry %r on %s/%s", r, key, meal_type)
        if not entries:
            raise NotFoundError("Menu not set for this date & meal.")
        return MenuSnapshot(date=key, meal_type=meal_type, items=entries)

    def meal_types_for(self, day) -> list[str]:
        raw = self.store.get(f"menus/{day_key(day)}") or {}
        return sorted(raw)

    def get_window(self, day, meal_type: str) -> Optional[MenuWindow]:
        raw = self.store.get(f"menu_windows/{day_key(day)}/{meal_type}")
        return MenuWindow.model_validate(raw) if raw else None
