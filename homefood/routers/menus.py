import datetime as dt

from fastapi import APIRouter, Depends

from homefood.config import settings
from homefood.deps import require_auth, get_menus
from homefood.schemas.catalog import MenuSaveIn, MenuSnapshot
from homefood.services.menus import MenuBook, custom_meal_key
from homefood.services.messages import compose_announcement

router = APIRouter(prefix="/menus", tags=["menus"])

@router.post("/{date}")
def save_menu(date: dt.date, body: MenuSaveIn,
              menus: MenuBook = Depends(get_menus), sub: str = Depends(require_auth)):
    """Generate & save: store the day's menus and return the announcement texts."""
    snapshots = menus.save_menu(date, body.picks, body.custom_menu)
    window = None
    if body.custom_menu is not None:
        window = menus.get_window(date, custom_meal_key(body.custom_menu.title))
    return {
        "snapshots": snapshots,
        "messages": compose_announcement(date, snapshots, settings.BUSINESS_NAME, window),
    }

@router.get("/{date}")
def meal_types(date: dt.date, menus: MenuBook = Depends(get_menus), sub: str = Depends(require_auth)):
    return {"date": date, "meal_types": menus.meal_types_for(date)}

@router.get("/{date}/{meal_type}", response_model=MenuSnapshot)
def get_menu(date: dt.date, meal_type: str,
             menus: MenuBook = Depends(get_menus), sub: str = Depends(require_auth)):
    return menus.get_snapshot(date, meal_type)
