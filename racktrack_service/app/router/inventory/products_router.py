from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_editor, allow_manager, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import Lookup
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.inventory import products_crud as crud
from ...crud.production import boms_crud
from ...schemas.inventory.products_schemas import (
    ProductCreate, ProductListResponse, ProductOut, ProductRequest, ProductUpdate)
from ...schemas.production.boms_schemas import BOMOut

router = APIRouter(
    prefix="/api/products",
    tags=["products"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/all", response_model=ProductListResponse)
def get_products(
        params: ProductRequest = Depends(),
        db: Session = Depends(get_db)):
    return crud.get_products(db, params)


@router.get("/lookup", response_model=List[Lookup])
def product_lookup(product_type: Optional[str] = None, db: Session = Depends(get_db)):
    return crud.get_product_lookup(db, product_type)


@router.get("/low-stock", response_model=List[ProductOut])
def low_stock_products(db: Session = Depends(get_db)):
    return crud.get_low_stock_products(db)


@router.get("/categories", response_model=List[str])
def product_categories(db: Session = Depends(get_db)):
    return crud.get_categories(db)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: UUID, db: Session = Depends(get_db)):
    return crud.get_product_detail(db, product_id)


@router.get("/{product_id}/boms", response_model=List[BOMOut])
def get_product_boms(product_id: UUID, db: Session = Depends(get_db)):
    return boms_crud.get_product_boms(db, product_id)


@router.post("/", dependencies=[Depends(allow_editor)])
def create_product(product: ProductCreate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.create_product(db, product),
        message="Product created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/", dependencies=[Depends(allow_editor)])
def update_product(product: ProductUpdate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.update_product(db, product),
        message="Product updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/{product_id}", dependencies=[Depends(allow_manager)])
def delete_product(product_id: UUID, db: Session = Depends(get_db)):
    return crud.delete_product(db, product_id)
