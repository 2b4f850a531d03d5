# storefront/api/routers/catalog.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_catalog
from storefront.data.catalog import Catalog
from storefront.domain.schemas import CatalogItem

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/", response_model=List[CatalogItem])
def list_items(catalog: Catalog = Depends(get_catalog)):
    return catalog.all()


@router.get("/{item_id}", response_model=CatalogItem)
def get_item(item_id: str, catalog: Catalog = Depends(get_catalog)):
    item = catalog.get(item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Produkt nie istnieje")
    return item
