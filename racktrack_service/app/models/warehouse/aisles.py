# aisles.py
import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Aisle(Base):
    __tablename__ = "aisles"
    __table_args__ = (
        UniqueConstraint("warehouse_id", "code", name="uq_aisle_warehouse_code"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    warehouse_id = Column(UUID(as_uuid=True), ForeignKey(
        "warehouses.id", ondelete="CASCADE"), nullable=False, index=True)
    code = Column(String(32), nullable=False)
    name = Column(String(200))
    description = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    warehouse = relationship("Warehouse", back_populates="aisles")
    shelves = relationship("Shelf", back_populates="aisle",
                           cascade="all, delete-orphan")
