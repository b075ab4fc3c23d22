# boms.py
import uuid
from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class ProductBOM(Base):
    __tablename__ = "product_boms"
    __table_args__ = (
        UniqueConstraint("product_id", "version_number",
                         name="uq_bom_product_version"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    product_id = Column(UUID(as_uuid=True), ForeignKey(
        "products.id", ondelete="CASCADE"), nullable=False, index=True)
    version_number = Column(Integer, nullable=False, default=1)
    # draft | pending_approval | active | obsolete
    status = Column(String(20), nullable=False, default="draft")
    effective_date = Column(Date)
    obsolete_date = Column(Date)
    notes = Column(Text)
    created_by = Column(UUID(as_uuid=True))
    approved_by = Column(UUID(as_uuid=True))
    approved_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    product = relationship("Product")
    materials = relationship("BOMMaterial", back_populates="bom",
                             cascade="all, delete-orphan")
    activities = relationship("BOMActivity", back_populates="bom",
                              cascade="all, delete-orphan",
                              order_by="BOMActivity.sequence_number")
    history = relationship("BOMApprovalHistory", back_populates="bom",
                           cascade="all, delete-orphan",
                           order_by="BOMApprovalHistory.created_at")


class BOMMaterial(Base):
    __tablename__ = "bom_materials"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    bom_id = Column(UUID(as_uuid=True), ForeignKey(
        "product_boms.id", ondelete="CASCADE"), nullable=False, index=True)
    material_product_id = Column(UUID(as_uuid=True), ForeignKey(
        "products.id"), nullable=False)
    quantity_required = Column(Numeric(12, 4, asdecimal=False), nullable=False)
    unit_of_measure = Column(String(32), default="Each")
    waste_percentage = Column(Numeric(5, 2, asdecimal=False), nullable=False, default=0)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    bom = relationship("ProductBOM", back_populates="materials")
    material_product = relationship("Product")

    @property
    def material_name(self):
        return self.material_product.name if self.material_product else None

    @property
    def material_sku(self):
        return self.material_product.sku if self.material_product else None

    @property
    def line_cost(self) -> float:
        unit_cost = self.material_product.cost_per_unit if self.material_product else None
        if not unit_cost:
            return 0
        waste = (self.waste_percentage or 0) / 100
        return round(self.quantity_required * (1 + waste) * unit_cost, 2)


class BOMActivity(Base):
    __tablename__ = "bom_activities"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    bom_id = Column(UUID(as_uuid=True), ForeignKey(
        "product_boms.id", ondelete="CASCADE"), nullable=False, index=True)
    activity_id = Column(UUID(as_uuid=True), ForeignKey(
        "activities.id"), nullable=False)
    work_center_id = Column(UUID(as_uuid=True), ForeignKey(
        "work_centers.id"), nullable=False)
    sequence_number = Column(Integer, nullable=False, default=1)
    setup_time_minutes = Column(Integer, nullable=False, default=0)
    run_time_per_unit = Column(Numeric(10, 3, asdecimal=False))
    instructions = Column(Text)
    quality_check_required = Column(Boolean, default=False)
    quality_instructions = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    bom = relationship("ProductBOM", back_populates="activities")
    activity = relationship("Activity")
    work_center = relationship("WorkCenter")

    @property
    def activity_name(self):
        return self.activity.name if self.activity else None

    @property
    def work_center_name(self):
        return self.work_center.name if self.work_center else None


class BOMApprovalHistory(Base):
    __tablename__ = "bom_approval_history"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    bom_id = Column(UUID(as_uuid=True), ForeignKey(
        "product_boms.id", ondelete="CASCADE"), nullable=False, index=True)
    # submitted | approved | rejected | activated
    action = Column(String(16), nullable=False)
    performed_by = Column(UUID(as_uuid=True))
    comments = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    bom = relationship("ProductBOM", back_populates="history")
