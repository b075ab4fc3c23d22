# invoices.py
from datetime import date
import uuid
from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    invoice_number = Column(String(32), nullable=False, unique=True, index=True)
    qb_invoice_id = Column(String(64))
    qb_sync_token = Column(String(32))
    job_id = Column(UUID(as_uuid=True), ForeignKey(
        "jobs.id", ondelete="SET NULL"))
    po_id = Column(UUID(as_uuid=True), ForeignKey(
        "customer_pos.id", ondelete="SET NULL"))
    customer_id = Column(UUID(as_uuid=True), ForeignKey("customers.id"))
    invoice_date = Column(Date, nullable=False, default=date.today)
    due_date = Column(Date)
    subtotal = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    tax_amount = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    total_amount = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    # draft | sent | viewed | paid | overdue | void
    status = Column(String(16), nullable=False, default="draft")
    amount_paid = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    balance_due = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    notes = Column(Text)
    created_by = Column(UUID(as_uuid=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    customer = relationship("Customer")
    lines = relationship("InvoiceLineItem", back_populates="invoice",
                         cascade="all, delete-orphan")

    @property
    def customer_name(self):
        return self.customer.name if self.customer else None


class InvoiceLineItem(Base):
    __tablename__ = "invoice_line_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    invoice_id = Column(UUID(as_uuid=True), ForeignKey(
        "invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id"))
    description = Column(Text)
    quantity = Column(Numeric(12, 3, asdecimal=False), nullable=False, default=1)
    unit_price = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    amount = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)

    invoice = relationship("Invoice", back_populates="lines")
    product = relationship("Product")
