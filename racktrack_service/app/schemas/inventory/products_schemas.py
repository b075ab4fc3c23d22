from pydantic import BaseModel, Field
from uuid import UUID
from typing import Any, Dict, List, Literal, Optional
from datetime import datetime

from shared.core.schemas import CommonQueryParams

ProductTypeName = Literal["raw_material", "finished_good"]


class ProductBase(BaseModel):
    sku: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    unit_of_measure: str = "Each"
    weight_per_unit: Optional[float] = None
    dimensions: Optional[Dict[str, Any]] = None
    cost_per_unit: Optional[float] = None
    sell_price: Optional[float] = None
    barcode: Optional[str] = None
    qb_item_id: Optional[str] = None
    min_stock_level: Optional[float] = None
    max_stock_level: Optional[float] = None
    product_type: ProductTypeName = "finished_good"
    units_per_case: int = Field(default=1, ge=1)
    is_active: bool = True


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    id: UUID
    sku: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    unit_of_measure: Optional[str] = None
    weight_per_unit: Optional[float] = None
    dimensions: Optional[Dict[str, Any]] = None
    cost_per_unit: Optional[float] = None
    sell_price: Optional[float] = None
    barcode: Optional[str] = None
    min_stock_level: Optional[float] = None
    max_stock_level: Optional[float] = None
    product_type: Optional[ProductTypeName] = None
    units_per_case: Optional[int] = None
    is_active: Optional[bool] = None


class ProductOut(ProductBase):
    id: UUID
    quantity_on_hand: float = 0
    active_bom_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductRequest(CommonQueryParams):
    category: Optional[str] = None
    product_type: Optional[str] = None
    is_active: Optional[bool] = None


class ProductListResponse(BaseModel):
    products: List[ProductOut]
    total: int
