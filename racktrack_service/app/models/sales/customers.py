# customers.py
import uuid
from sqlalchemy import Boolean, Column, DateTime, JSON, String, func
from sqlalchemy.dialects.postgresql import UUID
from shared.core.database import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    display_name = Column(String(200))
    company_name = Column(String(200))
    email = Column(String(200))
    phone = Column(String(50))
    mobile = Column(String(50))
    billing_address = Column(JSON)
    shipping_address = Column(JSON)
    qb_customer_id = Column(String(64), unique=True, nullable=True, index=True)
    qb_sync_token = Column(String(32))
    is_active = Column(Boolean, default=True, nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)
    qb_created_time = Column(DateTime(timezone=True))
    qb_last_updated_time = Column(DateTime(timezone=True))
    last_synced_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())
