"""RFQs (buyer-posted sourcing requirements) and direct inquiries."""

from sqlalchemy import Column, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from ..database import UTCDateTime, utcnow
from .base import Base, new_id


class Rfq(Base):
    """Request For Quotation posted by a buyer, open to all suppliers."""

    __tablename__ = "rfqs"
    id = Column(String(36), primary_key=True, default=new_id)
    buyer_id = Column(String(36), ForeignKey("buyers.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(String(36), ForeignKey("categories.id"))

    title = Column(String(255), nullable=False)
    description = Column(Text)
    quantity = Column(Integer, nullable=False)
    target_price = Column(Numeric(12, 2))

    status = Column(String(20), default="open")  # open | closed | expired
    expires_at = Column(UTCDateTime)
    created_at = Column(UTCDateTime, default=utcnow)

    buyer = relationship("Buyer")
    category = relationship("Category")
    quotations = relationship("Quotation", back_populates="rfq", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_rfqs_status", "status"),
        Index("ix_rfqs_buyer", "buyer_id"),
        Index("ix_rfqs_category", "category_id"),
    )


class Inquiry(Base):
    """Direct inquiry from a buyer to one supplier about a product."""

    __tablename__ = "inquiries"
    id = Column(String(36), primary_key=True, default=new_id)
    buyer_id = Column(String(36), ForeignKey("buyers.id", ondelete="CASCADE"), nullable=False)
    supplier_id = Column(String(36), ForeignKey("suppliers.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(String(36), ForeignKey("products.id"))

    subject = Column(String(255), nullable=False)
    message = Column(Text)
    quantity = Column(Integer)
    target_price = Column(Numeric(12, 2))

    status = Column(String(20), default="pending")  # pending | responded | closed
    created_at = Column(UTCDateTime, default=utcnow)

    buyer = relationship("Buyer")
    supplier = relationship("Supplier")
    product = relationship("Product")
    quotations = relationship(
        "InquiryQuotation", back_populates="inquiry", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_inquiries_supplier", "supplier_id"),
        Index("ix_inquiries_buyer", "buyer_id"),
    )
