# work_centers.py
import uuid
from sqlalchemy import Boolean, Column, DateTime, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class WorkCenter(Base):
    __tablename__ = "work_centers"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    code = Column(String(32), nullable=False, unique=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    type = Column(String(32), nullable=False)
    capacity_per_hour = Column(Numeric(10, 2, asdecimal=False))
    cost_per_hour = Column(Numeric(10, 2, asdecimal=False))
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    activity_links = relationship(
        "WorkCenterActivity", back_populates="work_center", cascade="all, delete-orphan")
