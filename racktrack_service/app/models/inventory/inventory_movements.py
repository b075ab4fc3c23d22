# inventory_movements.py
import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from shared.core.database import Base


class InventoryMovement(Base):
    __tablename__ = "inventory_movements"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # receive | move | pick | ship | adjust | transfer | return
    movement_type = Column(String(16), nullable=False, index=True)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id"), index=True)
    pallet_id = Column(UUID(as_uuid=True), ForeignKey(
        "pallets.id", ondelete="SET NULL"), index=True)
    inventory_id = Column(UUID(as_uuid=True), ForeignKey(
        "inventory.id", ondelete="SET NULL"))
    quantity_before = Column(Numeric(12, 3, asdecimal=False), default=0)
    quantity_change = Column(Numeric(12, 3, asdecimal=False), default=0)
    quantity_after = Column(Numeric(12, 3, asdecimal=False), default=0)
    from_location_id = Column(UUID(as_uuid=True), ForeignKey(
        "storage_slots.id", ondelete="SET NULL"))
    to_location_id = Column(UUID(as_uuid=True), ForeignKey(
        "storage_slots.id", ondelete="SET NULL"))
    reference_type = Column(String(32))
    reference_id = Column(String(64))
    performed_by = Column(UUID(as_uuid=True))
    reason = Column(String(255))
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
