# storage_slots.py
import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class StorageSlot(Base):
    __tablename__ = "storage_slots"
    __table_args__ = (
        UniqueConstraint("shelf_id", "code", name="uq_slot_shelf_code"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    shelf_id = Column(UUID(as_uuid=True), ForeignKey(
        "shelves.id", ondelete="CASCADE"), nullable=False, index=True)
    code = Column(String(64), nullable=False, index=True)
    position_number = Column(Integer, nullable=False, default=1)
    width_cm = Column(Numeric(10, 2, asdecimal=False))
    depth_cm = Column(Numeric(10, 2, asdecimal=False))
    height_cm = Column(Numeric(10, 2, asdecimal=False))
    weight_capacity_kg = Column(Numeric(10, 2, asdecimal=False))
    is_occupied = Column(Boolean, default=False, nullable=False)
    # mirror of pallets.current_location_id, kept without a FK
    current_pallet_id = Column(UUID(as_uuid=True), nullable=True)
    zone = Column(String(32), default="storage")
    temperature_controlled = Column(Boolean, default=False, nullable=False)
    hazmat_approved = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    shelf = relationship("Shelf", back_populates="slots")
