# inventory_items.py
import uuid
from sqlalchemy import Column, Date, DateTime, ForeignKey, JSON, Numeric, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class InventoryItem(Base):
    __tablename__ = "inventory"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    product_id = Column(UUID(as_uuid=True), ForeignKey(
        "products.id"), nullable=False, index=True)
    pallet_id = Column(UUID(as_uuid=True), ForeignKey(
        "pallets.id", ondelete="SET NULL"), nullable=True, index=True)
    quantity = Column(Numeric(12, 3, asdecimal=False), nullable=False, default=0)
    reserved_quantity = Column(Numeric(12, 3, asdecimal=False), nullable=False, default=0)
    available_quantity = Column(Numeric(12, 3, asdecimal=False), nullable=False, default=0)
    lot_number = Column(String(64))
    batch_number = Column(String(64))
    serial_numbers = Column(JSON)
    manufacture_date = Column(Date)
    expiration_date = Column(Date)
    received_date = Column(DateTime(timezone=True), server_default=func.now())
    unit_cost = Column(Numeric(12, 2, asdecimal=False))
    total_cost = Column(Numeric(14, 2, asdecimal=False))
    # pending | approved | rejected | quarantine
    quality_status = Column(String(16), nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    product = relationship("Product")
    pallet = relationship("Pallet", back_populates="contents")

    def recalculate(self):
        quantity = self.quantity or 0
        self.available_quantity = quantity - (self.reserved_quantity or 0)
        self.total_cost = round(quantity * self.unit_cost, 2) if self.unit_cost is not None else None
