from fastapi import APIRouter, Depends

from homefood.deps import require_auth, get_catalog
from homefood.schemas.catalog import CatalogItem
from homefood.schemas.common import Msg
from homefood.services.catalog import Catalog

router = APIRouter(prefix="/catalog", tags=["catalog"])

@router.get("/{meal_type}", response_model=list[CatalogItem])
def list_items(meal_type: str, subcategory: str | None = None,
               catalog: Catalog = Depends(get_catalog), sub: str = Depends(require_auth)):
    return catalog.get_items(meal_type, subcategory)

@router.put("/{meal_type}", response_model=CatalogItem)
def upsert_item(meal_type: str, body: CatalogItem, subcategory: str | None = None,
                catalog: Catalog = Depends(get_catalog), sub: str = Depends(require_auth)):
    return catalog.upsert_item(meal_type, body, subcategory)

@router.delete("/{meal_type}/{name}", response_model=Msg)
def delete_item(meal_type: str, name: str, subcategory: str | None = None,
                catalog: Catalog = Depends(get_catalog), sub: str = Depends(require_auth)):
    catalog.delete_item(meal_type, name, subcategory)
    return Msg(message=f"{name} removed")
