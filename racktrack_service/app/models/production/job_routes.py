# job_routes.py
import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class JobRoute(Base):
    __tablename__ = "job_routes"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    job_id = Column(UUID(as_uuid=True), ForeignKey(
        "jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    activity_id = Column(UUID(as_uuid=True), ForeignKey(
        "activities.id"), nullable=False, index=True)
    work_center_id = Column(UUID(as_uuid=True), ForeignKey(
        "work_centers.id"), nullable=False, index=True)
    sequence_number = Column(Integer, nullable=False, default=1)
    # pending | ready | setup | in_progress | paused | completed | skipped
    status = Column(String(16), nullable=False, default="pending")
    estimated_start = Column(DateTime(timezone=True), index=True)
    actual_start = Column(DateTime(timezone=True))
    estimated_complete = Column(DateTime(timezone=True))
    actual_complete = Column(DateTime(timezone=True))
    quantity_target = Column(Numeric(12, 3, asdecimal=False), nullable=False, default=0)
    quantity_completed = Column(Numeric(12, 3, asdecimal=False), nullable=False, default=0)
    quantity_scrapped = Column(Numeric(12, 3, asdecimal=False), nullable=False, default=0)
    operator_id = Column(UUID(as_uuid=True))
    setup_notes = Column(Text)
    production_notes = Column(Text)
    quality_notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    job = relationship("Job", back_populates="routes")
    activity = relationship("Activity")
    work_center = relationship("WorkCenter")

    @property
    def activity_name(self):
        return self.activity.name if self.activity else None

    @property
    def work_center_name(self):
        return self.work_center.name if self.work_center else None
