# customer_pos.py
from datetime import date
import uuid
from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class CustomerPO(Base):
    __tablename__ = "customer_pos"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    po_number = Column(String(32), nullable=False, unique=True, index=True)
    customer_id = Column(UUID(as_uuid=True), ForeignKey(
        "customers.id"), nullable=True, index=True)
    description = Column(Text)
    po_date = Column(Date, nullable=False, default=date.today)
    due_date = Column(Date)
    production_status = Column(
        String(32), nullable=False, default="draft", index=True)
    hold_reason = Column(Text)
    production_notes = Column(Text)
    total_amount = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    qb_estimate_id = Column(String(64))
    qb_estimate_number = Column(String(64))
    qb_sync_token = Column(String(32))
    qb_customer_id = Column(String(64))
    created_by = Column(UUID(as_uuid=True))
    updated_by = Column(UUID(as_uuid=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    customer = relationship("Customer")
    items = relationship("CustomerPOItem", back_populates="po",
                         cascade="all, delete-orphan",
                         order_by="CustomerPOItem.line_number")
    status_history = relationship("CustomerPOStatusHistory", back_populates="po",
                                  cascade="all, delete-orphan",
                                  order_by="CustomerPOStatusHistory.created_at")

    @property
    def customer_name(self):
        return self.customer.name if self.customer else None

    @property
    def customer_company(self):
        return self.customer.company_name if self.customer else None


class CustomerPOItem(Base):
    __tablename__ = "customer_po_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    po_id = Column(UUID(as_uuid=True), ForeignKey(
        "customer_pos.id", ondelete="CASCADE"), nullable=False, index=True)
    line_number = Column(Integer, nullable=False)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id"))
    description = Column(Text)
    quantity = Column(Numeric(12, 3, asdecimal=False), nullable=False, default=1)
    unit_price = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    total_amount = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)

    po = relationship("CustomerPO", back_populates="items")
    product = relationship("Product")

    @property
    def product_name(self):
        return self.product.name if self.product else None

    @property
    def product_sku(self):
        return self.product.sku if self.product else None


class CustomerPOStatusHistory(Base):
    __tablename__ = "customer_po_status_history"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    po_id = Column(UUID(as_uuid=True), ForeignKey(
        "customer_pos.id", ondelete="CASCADE"), nullable=False, index=True)
    from_status = Column(String(32))
    to_status = Column(String(32), nullable=False)
    reason = Column(Text)
    notes = Column(Text)
    changed_by = Column(UUID(as_uuid=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    po = relationship("CustomerPO", back_populates="status_history")
