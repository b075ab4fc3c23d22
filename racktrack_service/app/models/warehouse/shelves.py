# shelves.py
import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Shelf(Base):
    __tablename__ = "shelves"
    __table_args__ = (
        UniqueConstraint("aisle_id", "code", name="uq_shelf_aisle_code"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    aisle_id = Column(UUID(as_uuid=True), ForeignKey(
        "aisles.id", ondelete="CASCADE"), nullable=False, index=True)
    code = Column(String(32), nullable=False)
    level_number = Column(Integer, nullable=False, default=1)
    height_cm = Column(Numeric(10, 2, asdecimal=False))
    weight_capacity_kg = Column(Numeric(10, 2, asdecimal=False))
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    aisle = relationship("Aisle", back_populates="shelves")
    slots = relationship("StorageSlot", back_populates="shelf",
                         cascade="all, delete-orphan")
