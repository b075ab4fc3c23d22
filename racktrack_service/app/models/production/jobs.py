# jobs.py
import uuid
from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    job_number = Column(String(32), nullable=False, unique=True, index=True)
    po_id = Column(UUID(as_uuid=True), ForeignKey(
        "customer_pos.id", ondelete="SET NULL"), nullable=True)
    customer_id = Column(UUID(as_uuid=True), ForeignKey(
        "customers.id", ondelete="SET NULL"), nullable=True)
    product_id = Column(UUID(as_uuid=True), ForeignKey(
        "products.id"), nullable=True)
    job_name = Column(String(200), nullable=False)
    description = Column(Text)
    quantity = Column(Numeric(12, 3, asdecimal=False), nullable=False, default=1)
    # created | planned | in_progress | review | completed | shipped | cancelled
    status = Column(String(16), nullable=False, default="created")
    priority = Column(Integer, nullable=False, default=3)
    estimated_start_date = Column(DateTime(timezone=True))
    estimated_completion_date = Column(DateTime(timezone=True))
    actual_start_date = Column(DateTime(timezone=True))
    actual_completion_date = Column(DateTime(timezone=True))
    due_date = Column(Date)
    work_center = Column(String(100))
    estimated_hours = Column(Numeric(10, 2, asdecimal=False))
    actual_hours = Column(Numeric(10, 2, asdecimal=False))
    estimated_cost = Column(Numeric(12, 2, asdecimal=False))
    actual_cost = Column(Numeric(12, 2, asdecimal=False))
    progress_percentage = Column(Integer, nullable=False, default=0)
    notes = Column(Text)
    proof_required = Column(Boolean, default=False)
    proof_approved = Column(Boolean, default=False)
    created_by = Column(UUID(as_uuid=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    customer = relationship("Customer")
    product = relationship("Product")
    routes = relationship("JobRoute", back_populates="job",
                          cascade="all, delete-orphan",
                          order_by="JobRoute.sequence_number")

    @property
    def customer_name(self):
        return self.customer.name if self.customer else None
