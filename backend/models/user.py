from sqlalchemy import Column, DateTime, String, func

from core.database import Base, Serial


class UserModel(Base):
    """Application users. Only the bcrypt hash of the password is stored."""
    __tablename__ = "users"

    id = Column(Serial, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255))
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
