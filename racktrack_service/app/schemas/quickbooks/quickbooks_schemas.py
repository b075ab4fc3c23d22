from pydantic import BaseModel
from uuid import UUID
from typing import List, Optional
from datetime import datetime


class QBConnectionOut(BaseModel):
    id: UUID
    company_id: str
    company_name: Optional[str] = None
    realm_id: str
    base_url: Optional[str] = None
    token_expires_at: Optional[datetime] = None
    is_token_expired: bool = False
    sync_enabled: bool
    last_sync_at: Optional[datetime] = None
    sync_frequency_hours: Optional[int] = None
    last_error: Optional[str] = None
    error_count: int = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DisconnectRequest(BaseModel):
    connection_id: Optional[UUID] = None


class TokenRefreshResult(BaseModel):
    connection_id: UUID
    company_name: Optional[str] = None
    status: str
    message: str


class TokenRefreshResponse(BaseModel):
    results: List[TokenRefreshResult]


class CustomerSyncResult(BaseModel):
    synced: int
    total: int
    errors: List[str]


class ItemSyncResult(BaseModel):
    created: int
    updated: int
    skipped: int
    total: int
    errors: List[str]


class EstimateSyncResult(BaseModel):
    success: bool
    estimate_id: str
    estimate_number: Optional[str] = None


class InvoiceSyncResult(BaseModel):
    success: bool
    invoice_id: str
    doc_number: Optional[str] = None
