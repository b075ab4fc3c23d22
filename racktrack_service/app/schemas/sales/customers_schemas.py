from pydantic import BaseModel, Field
from uuid import UUID
from typing import Any, Dict, List, Optional
from datetime import datetime

from shared.core.schemas import CommonQueryParams


class CustomerBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    display_name: Optional[str] = None
    company_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    mobile: Optional[str] = None
    billing_address: Optional[Dict[str, Any]] = None
    shipping_address: Optional[Dict[str, Any]] = None
    is_active: bool = True


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(BaseModel):
    id: UUID
    name: Optional[str] = None
    display_name: Optional[str] = None
    company_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    mobile: Optional[str] = None
    billing_address: Optional[Dict[str, Any]] = None
    shipping_address: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None


class CustomerOut(CustomerBase):
    id: UUID
    qb_customer_id: Optional[str] = None
    last_synced_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CustomerRequest(CommonQueryParams):
    is_active: Optional[bool] = None


class CustomerListResponse(BaseModel):
    customers: List[CustomerOut]
    total: int
