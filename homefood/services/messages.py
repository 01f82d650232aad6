"""Customer-facing menu announcements in English and Telugu.

Pure string templating over menu snapshots; nothing here reads the store.
"""
import datetime as dt
from typing import Optional

from homefood.schemas.catalog import MenuSnapshot, MenuWindow, MenuEntry
from homefood.services.menus import custom_meal_key

RULE = "━━━━━━━━━━━━━━━"

# meal -> (emoji, english title, telugu title, order-by time)
SECTIONS = {
    "breakfast": ("🌞", "Breakfast", "టిఫిన్", "08:30 AM"),
    "lunch": ("🍚", "Lunch", "మధ్యాహ్న భోజనం", "09:00 AM"),
    "dinner": ("🌙", "Dinner", "రాత్రి భోజనం", "05:00 PM"),
    "bakery": ("🍰", "Bakery", "బేకరీ", "04:00 PM"),
}

DELIVERY_TIMES_EN = (
    "🚚 *Delivery Timings:*\n"
    "🌞Breakfast: 07:30 - 08:30 AM\n"
    "🍚Lunch: 12:30 - 01:30 PM\n"
    "🌙Dinner: 08:00 - 09:00 PM"
)
DELIVERY_TIMES_TE = (
    "🚚 డెలివరీ సమయాలు:\n"
    "🌞 టిఫిన్: 07:30 - 08:30 AM\n"
    "🍚 మధ్యాహ్న భోజనం: 12:30 - 01:30 PM\n"
    "🌙 రాత్రి భోజనం: 08:00 - 09:00 PM"
)
CHARGES_EN = "📦 *Delivery Charges:*\n3 KM – ₹30\n3 KM - 6 KM – ₹60"
CHARGES_TE = "📦 డెలివరీ ఛార్జీలు:\n3 కి.మీ లోపు – ₹30\n3 కి.మీ - 6 కి.మీ – ₹60"


def _price(p: float) -> str:
    return f"{p:.2f}".rstrip("0").rstrip(".")


def _line(e: MenuEntry, telugu: bool) -> str:
    name = (e.localized_name or e.name) if telugu else e.name
    return f"- {name} - ₹{_price(e.price)}" if e.price else f"- {name}"


def _section(meal: str, snap: Optional[MenuSnapshot], day_label: str, telugu: bool) -> str:
    if snap is None or not snap.items:
        return ""
    emoji, en, te, deadline = SECTIONS[meal]
    lines = "\n".join(_line(e, telugu) for e in snap.items)
    if telugu:
        return f"\n{emoji} {te}\n{lines}\n\n🕒 ఆర్డర్ గడువు:\n {deadline} – {day_label}\n{RULE}"
    return f"\n{emoji} *{en}*\n{lines}\n\n🕒 *Order by:*\n {deadline} – {day_label}\n{RULE}"


def _to_12h(hhmm: Optional[str]) -> Optional[str]:
    if not hhmm:
        return None
    try:
        return dt.datetime.strptime(hhmm, "%H:%M").strftime("%I:%M %p")
    except ValueError:
        return hhmm


def compose_announcement(day: dt.date, snapshots: dict[str, MenuSnapshot], business_name: str,
                         window: Optional[MenuWindow] = None) -> dict[str, str]:
    """Returns ``english``, ``telugu``, ``bakery`` and ``custom`` message bodies.

    A body is empty when there is nothing to announce for it. The order-by
    deadline is printed against the delivery day.
    """
    label = day.strftime("%d/%B/%Y")
    meals = ("breakfast", "lunch", "dinner")
    out = {"english": "", "telugu": "", "bakery": "", "custom": ""}

    if any(snapshots.get(m) and snapshots[m].items for m in meals):
        out["english"] = (
            f"🍽️ *{business_name} - just for you*\n\n📅 *Delivery Date:*\n {label}"
            + "".join(_section(m, snapshots.get(m), label, False) for m in meals)
            + f"\n\n{DELIVERY_TIMES_EN}\n\n{CHARGES_EN}\n\nThank You!"
        )
        out["telugu"] = (
            f"🍲 మా ఇంటి వంట మీకు!\n\n📅 డెలివరీ తేదీ:\n {label}"
            + "".join(_section(m, snapshots.get(m), label, True) for m in meals)
            + f"\n\n{DELIVERY_TIMES_TE}\n\n{CHARGES_TE}\n\nధన్యవాదాలు!"
        )

    bakery = snapshots.get("bakery")
    if bakery and bakery.items:
        out["bakery"] = (
            f"🍽 {business_name} - just for you\n📅 Delivery Date: {label}"
            + _section("bakery", bakery, label, False)
            + _section("bakery", bakery, label, True)
            + "\n🚚 Delivery Timings/డెలివరీ సమయాలు:\n🍰Bakery: 06:30 PM\n🍰 బేకరీ: 06:30 PM"
        )

    snap = snapshots.get(custom_meal_key(window.title)) if window else None
    if window and snap and snap.items:
        start, end = _to_12h(window.delivery_from), _to_12h(window.delivery_to)
        times = f"{start} - {end}" if start and end else "Not specified"
        order_by = _to_12h(window.order_by) or "Not specified"
        en_lines = "\n".join(f"- {e.name} - ₹{_price(e.price)}" for e in snap.items)
        te_lines = "\n".join(f"- {e.localized_name or e.name} - ₹{_price(e.price)}" for e in snap.items)
        out["custom"] = (
            f"🍽 *{business_name} - just for you*\n📅 *Delivery Date: {label}*\n"
            f"✨ {window.title}\n{en_lines}\n\n🕒 *Order By:* {order_by}\n{RULE}\n"
            f"✨ {window.localized_title or window.title}\n{te_lines}\n\n*🕒 ఆర్డర్ గడువు:* {order_by}"
            f"\n\n🚚 Delivery Timings/డెలివరీ సమయాలు:\n{times}"
        )
    return out
