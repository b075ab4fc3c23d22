# work_center_activities.py
import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class WorkCenterActivity(Base):
    __tablename__ = "work_center_activities"
    __table_args__ = (
        UniqueConstraint("work_center_id", "activity_id",
                         name="uq_work_center_activity"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    work_center_id = Column(UUID(as_uuid=True), ForeignKey(
        "work_centers.id", ondelete="CASCADE"), nullable=False)
    activity_id = Column(UUID(as_uuid=True), ForeignKey(
        "activities.id", ondelete="CASCADE"), nullable=False)
    setup_time_minutes = Column(Integer, nullable=False, default=0)
    run_time_per_unit = Column(Numeric(10, 3, asdecimal=False))
    min_batch_size = Column(Integer, nullable=False, default=1)
    max_batch_size = Column(Integer)
    efficiency_factor = Column(Numeric(5, 2, asdecimal=False), nullable=False, default=1.0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    work_center = relationship("WorkCenter", back_populates="activity_links")
    activity = relationship("Activity")

    @property
    def activity_code(self):
        return self.activity.code if self.activity else None

    @property
    def activity_name(self):
        return self.activity.name if self.activity else None
