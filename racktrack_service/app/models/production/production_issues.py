# production_issues.py
import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class ProductionIssue(Base):
    __tablename__ = "production_issues"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    issue_number = Column(String(32), nullable=False, unique=True, index=True)
    issue_type = Column(String(32), nullable=False)
    # low | medium | high | critical
    severity = Column(String(16), nullable=False, default="medium")
    title = Column(String(255), nullable=False)
    description = Column(Text)
    job_id = Column(UUID(as_uuid=True), ForeignKey(
        "jobs.id", ondelete="SET NULL"))
    job_route_id = Column(UUID(as_uuid=True), ForeignKey(
        "job_routes.id", ondelete="SET NULL"))
    work_center_id = Column(UUID(as_uuid=True), ForeignKey(
        "work_centers.id", ondelete="SET NULL"))
    activity_id = Column(UUID(as_uuid=True), ForeignKey(
        "activities.id", ondelete="SET NULL"))
    material_product_id = Column(UUID(as_uuid=True), ForeignKey(
        "products.id", ondelete="SET NULL"))
    quantity_affected = Column(Numeric(12, 3, asdecimal=False))
    downtime_minutes = Column(Integer)
    cost_impact = Column(Numeric(12, 2, asdecimal=False))
    # open | investigating | resolved | closed
    status = Column(String(16), nullable=False, default="open")
    reported_by = Column(UUID(as_uuid=True))
    assigned_to = Column(UUID(as_uuid=True))
    resolution = Column(Text)
    resolved_by = Column(UUID(as_uuid=True))
    resolved_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    work_center = relationship("WorkCenter")
    activity = relationship("Activity")
    material_product = relationship("Product")
    comments = relationship("ProductionIssueComment", back_populates="issue",
                            cascade="all, delete-orphan",
                            order_by="ProductionIssueComment.created_at")


class ProductionIssueComment(Base):
    __tablename__ = "production_issue_comments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    issue_id = Column(UUID(as_uuid=True), ForeignKey(
        "production_issues.id", ondelete="CASCADE"), nullable=False, index=True)
    comment = Column(Text, nullable=False)
    created_by = Column(UUID(as_uuid=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    issue = relationship("ProductionIssue", back_populates="comments")
