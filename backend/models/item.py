from sqlalchemy import Column, DateTime, Numeric, String, func

from core.database import Base, Serial


class ItemModel(Base):
    """Catalogue items"""
    __tablename__ = "items"

    id = Column(Serial, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(String(1020), nullable=False)
    price = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    currency = Column(String(255))  # Free text, e.g. "EUR"
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
