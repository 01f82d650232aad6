# test_catalog.py
import pytest

from homefood.errors import ValidationError, NotFoundError
from homefood.schemas.catalog import CatalogItem, MenuPick, CustomMenu, CustomMenuItem
from homefood.services.menus import custom_meal_key


def _item(name, price, te=""):
    return CatalogItem(name=name, localized_name=te, price=price)


def test_items_sorted_by_name_case_sensitive(catalog):
    for n in ("idli", "Vada", "Dosa"):
        catalog.upsert_item("breakfast", _item(n, 40))
    assert [i.name for i in catalog.get_items("breakfast")] == ["Dosa", "Vada", "idli"]


def test_upsert_replaces_by_name(catalog):
    catalog.upsert_item("breakfast", _item("Dosa", 40))
    catalog.upsert_item("breakfast", _item("Dosa", 45, "దోశ"))
    items = catalog.get_items("breakfast")
    assert len(items) == 1
    assert items[0].price == 45 and items[0].localized_name == "దోశ"


def test_lunch_needs_subcategory_for_writes(catalog):
    with pytest.raises(ValidationError):
        catalog.upsert_item("lunch", _item("Paneer Curry", 80))
    with pytest.raises(ValidationError):
        catalog.upsert_item("lunch", _item("Paneer Curry", 80), subcategory="dessert")
    with pytest.raises(ValidationError):
        catalog.upsert_item("breakfast", _item("Dosa", 40), subcategory="curry")


def test_lunch_without_subcategory_lists_everything(catalog):
    catalog.upsert_item("lunch", _item("Paneer Curry", 80), subcategory="curry")
    catalog.upsert_item("lunch", _item("Dal Fry", 60), subcategory="daal")
    assert [i.name for i in catalog.get_items("lunch")] == ["Dal Fry", "Paneer Curry"]
    assert [i.name for i in catalog.get_items("lunch", "curry")] == ["Paneer Curry"]
    assert catalog.get_items("dinner") == []


def test_delete_and_missing_item(catalog):
    catalog.upsert_item("bakery", _item("Cake", 300))
    catalog.delete_item("bakery", "Cake")
    assert catalog.get_items("bakery") == []
    with pytest.raises(NotFoundError):
        catalog.delete_item("bakery", "Cake")


def test_find_item_first_match_wins(catalog, store):
    store.set("inventory/breakfast", [
        {"name": "Upma", "localized_name": "", "price": 30},
        {"name": "Upma", "localized_name": "", "price": 35},
    ])
    assert catalog.find_item("breakfast", "Upma").price == 30
    assert catalog.find_item("breakfast", "Poha") is None


def test_save_menu_copies_prices_in_subcategory_order(catalog, menus):
    catalog.upsert_item("lunch", _item("Paneer Curry", 80), subcategory="curry")
    catalog.upsert_item("lunch", _item("Dal Fry", 60, "పప్పు"), subcategory="daal")
    snaps = menus.save_menu("2024-05-01", {"lunch": [
        MenuPick(name="Paneer Curry", subcategory="curry"),
        MenuPick(name="Dal Fry"),
    ]})
    assert [e.name for e in snaps["lunch"].items] == ["Dal Fry", "Paneer Curry"]

    # later catalog price changes do not touch the saved menu
    catalog.upsert_item("lunch", _item("Paneer Curry", 95), subcategory="curry")
    snap = menus.get_snapshot("2024-05-01", "lunch")
    assert snap.price_of("Paneer Curry").price == 80
    assert snap.price_of("Dal Fry").localized_name == "పప్పు"


def test_save_menu_merges_meals_and_custom_menu(catalog, menus):
    catalog.upsert_item("breakfast", _item("Dosa", 40))
    menus.save_menu("2024-05-01", {"breakfast": [MenuPick(name="Dosa")]})
    menus.save_menu("2024-05-01", {}, CustomMenu(
        title="Festival  Special", order_by="10:00", delivery_from="18:00", delivery_to="19:00",
        items=[CustomMenuItem(name="Pulihora", price=120), CustomMenuItem(name="  ", price=10),
               CustomMenuItem(name="Payasam")],
    ))
    key = custom_meal_key("Festival  Special")
    assert key == "festival_special"
    assert menus.meal_types_for("2024-05-01") == ["breakfast", key]
    assert [e.name for e in menus.get_snapshot("2024-05-01", key).items] == ["Pulihora"]
    assert menus.get_window("2024-05-01", key).order_by == "10:00"


def test_menu_errors(catalog, menus):
    with pytest.raises(NotFoundError):
        menus.save_menu("2024-05-01", {"breakfast": [MenuPick(name="Nope")]})
    with pytest.raises(NotFoundError, match="Menu not set"):
        menus.get_snapshot("2024-05-01", "dinner")
    with pytest.raises(ValidationError):
        menus.get_snapshot("01-05-2024", "dinner")
