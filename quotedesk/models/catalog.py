"""Product catalog — used to recommend RFQs in a supplier's categories."""

from sqlalchemy import Boolean, Column, ForeignKey, Index, String
from sqlalchemy.orm import relationship

from ..database import UTCDateTime, utcnow
from .base import Base, new_id


class Category(Base):
    __tablename__ = "categories"
    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)


class Product(Base):
    __tablename__ = "products"
    id = Column(String(36), primary_key=True, default=new_id)
    supplier_id = Column(String(36), ForeignKey("suppliers.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(String(36), ForeignKey("categories.id"))
    name = Column(String(255), nullable=False)
    is_published = Column(Boolean, default=True)
    created_at = Column(UTCDateTime, default=utcnow)

    supplier = relationship("Supplier", back_populates="products")
    category = relationship("Category")

    __table_args__ = (
        Index("ix_products_supplier", "supplier_id"),
        Index("ix_products_category", "category_id"),
    )
