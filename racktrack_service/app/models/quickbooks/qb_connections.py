# qb_connections.py
import uuid
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from shared.core.database import Base


class QBConnection(Base):
    __tablename__ = "qb_connections"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    company_id = Column(String(64), nullable=False, unique=True)
    company_name = Column(String(255))
    access_token = Column(Text, nullable=False)
    refresh_token = Column(Text, nullable=False)
    token_expires_at = Column(DateTime(timezone=True), nullable=False)
    realm_id = Column(String(64), nullable=False)
    base_url = Column(String(255))
    sync_enabled = Column(Boolean, default=True, nullable=False)
    last_sync_at = Column(DateTime(timezone=True))
    sync_frequency_hours = Column(Integer, default=24)
    last_error = Column(Text)
    error_count = Column(Integer, nullable=False, default=0)
    connected_by = Column(UUID(as_uuid=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())
