# suppliers_model.py
from sqlalchemy import Column, Integer, String, Text, Boolean, Numeric, DateTime, func
from config.database import Base


class Supplier(Base):
    __tablename__ = "suppliers"

    id                  = Column(Integer, primary_key=True, autoincrement=True)
    name                = Column(String(150), nullable=False)
    email               = Column(String(255), nullable=True)
    phone               = Column(String(30), nullable=True)
    website             = Column(String(255), nullable=True)
    notes               = Column(Text, nullable=True)
    active              = Column(Boolean, nullable=False, default=True)
    discount_percentage = Column(Numeric(5, 2), nullable=True)
    created_at          = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Supplier(id={self.id}, name='{self.name}')>"
