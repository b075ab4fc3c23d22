# products.py
import uuid
from sqlalchemy import Boolean, Column, DateTime, Integer, JSON, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from shared.core.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    sku = Column(String(64), nullable=False, unique=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    category = Column(String(100))
    subcategory = Column(String(100))
    unit_of_measure = Column(String(32), default="Each")
    weight_per_unit = Column(Numeric(12, 3, asdecimal=False))
    dimensions = Column(JSON)
    cost_per_unit = Column(Numeric(12, 2, asdecimal=False))
    sell_price = Column(Numeric(12, 2, asdecimal=False))
    barcode = Column(String(64), index=True)
    qb_item_id = Column(String(64), unique=True, nullable=True)
    min_stock_level = Column(Numeric(12, 3, asdecimal=False))
    max_stock_level = Column(Numeric(12, 3, asdecimal=False))
    # raw_material | finished_good
    product_type = Column(String(32), nullable=False, default="finished_good")
    units_per_case = Column(Integer, default=1)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())
