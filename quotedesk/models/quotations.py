"""Quotation models — a supplier's priced response to an RFQ or inquiry.

Two tables mirror the two update endpoints: RFQ quotations are keyed by
supplier, inquiry quotations inherit the supplier from their inquiry.
"""

from sqlalchemy import JSON, Column, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from ..database import UTCDateTime, utcnow
from .base import Base, new_id


class Quotation(Base):
    """Supplier quotation against an RFQ."""

    __tablename__ = "quotations"
    id = Column(String(36), primary_key=True, default=new_id)
    rfq_id = Column(String(36), ForeignKey("rfqs.id", ondelete="CASCADE"), nullable=False)
    supplier_id = Column(
        String(36), ForeignKey("suppliers.id", ondelete="CASCADE"), nullable=False
    )

    unit_price = Column(Numeric(12, 2), nullable=False)
    total_price = Column(Numeric(14, 2), nullable=False)
    moq = Column(Integer, nullable=False, default=1)
    lead_time = Column(String(255))
    payment_terms = Column(String(255))
    validity_period = Column(Integer)  # days
    valid_until = Column(UTCDateTime)
    terms_conditions = Column(Text)
    message = Column(Text)
    attachments = Column(JSON, nullable=False, default=list)

    status = Column(String(20), default="sent")
    # pending | sent | accepted | rejected | expired

    created_at = Column(UTCDateTime, default=utcnow)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow)

    rfq = relationship("Rfq", back_populates="quotations")
    supplier = relationship("Supplier")

    __table_args__ = (
        Index("ix_quotations_supplier", "supplier_id"),
        Index("ix_quotations_rfq", "rfq_id"),
        Index("ix_quotations_status", "status"),
        Index("ix_quotations_rfq_supplier", "rfq_id", "supplier_id", unique=True),
    )


class InquiryQuotation(Base):
    """Supplier quotation answering a direct inquiry."""

    __tablename__ = "inquiry_quotations"
    id = Column(String(36), primary_key=True, default=new_id)
    inquiry_id = Column(
        String(36), ForeignKey("inquiries.id", ondelete="CASCADE"), nullable=False
    )

    price_per_unit = Column(Numeric(12, 2), nullable=False)
    total_price = Column(Numeric(14, 2), nullable=False)
    moq = Column(Integer, nullable=False, default=1)
    lead_time = Column(String(255))
    payment_terms = Column(String(255))
    valid_until = Column(UTCDateTime)
    message = Column(Text)
    attachments = Column(JSON, nullable=False, default=list)

    status = Column(String(20), default="pending")
    # pending | sent | accepted | rejected | expired

    created_at = Column(UTCDateTime, default=utcnow)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow)

    inquiry = relationship("Inquiry", back_populates="quotations")

    __table_args__ = (
        Index("ix_inquiry_quotations_inquiry", "inquiry_id"),
        Index("ix_inquiry_quotations_status", "status"),
    )
