# products_model.py
import enum
from sqlalchemy import Column, Integer, String, Text, Boolean, Numeric, Enum, DateTime, func
from config.database import Base


class ProductType(enum.Enum):
    physical = "physical"
    digital = "digital"
    service = "service"


class PublicationStatus(enum.Enum):
    draft = "draft"
    published = "published"
    archived = "archived"


class Product(Base):
    __tablename__ = "products"

    id                 = Column(Integer, primary_key=True, autoincrement=True)
    name               = Column(String(255), nullable=False)
    sku                = Column(String(64), unique=True, nullable=False)
    brand              = Column(String(100), nullable=True)
    description        = Column(Text, nullable=True)
    type               = Column(Enum(ProductType), nullable=False, default=ProductType.physical)
    publication_status = Column(Enum(PublicationStatus), nullable=False, default=PublicationStatus.draft)
    active             = Column(Boolean, nullable=False, default=True)
    price              = Column(Numeric(10, 2), nullable=False, default=0)
    cost               = Column(Numeric(10, 2), nullable=True)
    stock_quantity     = Column(Integer, nullable=False, default=0)
    weight             = Column(Numeric(8, 3), nullable=True)
    created_at         = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at         = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Product(id={self.id}, sku='{self.sku}')>"
