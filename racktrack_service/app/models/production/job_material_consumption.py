# job_material_consumption.py
import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class JobMaterialConsumption(Base):
    __tablename__ = "job_material_consumption"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    job_id = Column(UUID(as_uuid=True), ForeignKey(
        "jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    job_route_id = Column(UUID(as_uuid=True), ForeignKey(
        "job_routes.id", ondelete="SET NULL"))
    material_product_id = Column(UUID(as_uuid=True), ForeignKey(
        "products.id"), nullable=False)
    quantity_planned = Column(Numeric(12, 3, asdecimal=False), nullable=False, default=0)
    quantity_consumed = Column(Numeric(12, 3, asdecimal=False), nullable=False, default=0)
    unit_of_measure = Column(String(32))
    lot_number = Column(String(64))
    consumed_at = Column(DateTime(timezone=True))
    consumed_by = Column(UUID(as_uuid=True))
    inventory_id = Column(UUID(as_uuid=True), ForeignKey(
        "inventory.id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    material_product = relationship("Product")
