from sqlalchemy import Column, DateTime, String, func

from core.database import Base, Serial
from records.enums import WarehouseType


class WarehouseModel(Base):
    """Warehouses: owned, supplier or courier sites"""
    __tablename__ = "warehouses"

    id = Column(Serial, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    address = Column(String(255))
    email = Column(String(255))
    type = Column(String(20), nullable=False, default=WarehouseType.OWNED.value)  # owned | supplier | currier
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
