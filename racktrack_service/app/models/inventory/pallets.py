# pallets.py
import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Pallet(Base):
    __tablename__ = "pallets"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    pallet_number = Column(String(64), nullable=False, unique=True, index=True)
    current_location_id = Column(UUID(as_uuid=True), ForeignKey(
        "storage_slots.id", ondelete="SET NULL"), nullable=True)
    previous_location_id = Column(UUID(as_uuid=True), ForeignKey(
        "storage_slots.id", ondelete="SET NULL"), nullable=True)
    # receiving | in_transit | stored | picking | staged | shipped
    status = Column(String(16), nullable=False, default="receiving")
    pallet_type = Column(String(32), default="standard")
    max_weight_kg = Column(Numeric(10, 2, asdecimal=False))
    current_weight_kg = Column(Numeric(10, 2, asdecimal=False))
    max_height_cm = Column(Numeric(10, 2, asdecimal=False))
    qr_code = Column(String(255))
    received_date = Column(DateTime(timezone=True), server_default=func.now())
    last_moved = Column(DateTime(timezone=True))
    created_by = Column(UUID(as_uuid=True))
    notes = Column(Text)
    special_handling = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    current_location = relationship(
        "StorageSlot", foreign_keys=[current_location_id])
    previous_location = relationship(
        "StorageSlot", foreign_keys=[previous_location_id])
    contents = relationship("InventoryItem", back_populates="pallet")
