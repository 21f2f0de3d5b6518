"""User accounts and the buyer/supplier profiles hanging off them."""

from sqlalchemy import Boolean, Column, ForeignKey, Index, String
from sqlalchemy.orm import relationship

from ..database import UTCDateTime, utcnow
from .base import Base, new_id


class User(Base):
    __tablename__ = "users"
    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False, unique=True)
    first_name = Column(String(100))
    last_name = Column(String(100))
    role = Column(String(20), nullable=False, default="buyer")  # buyer | supplier | admin
    password_hash = Column(String(255))
    is_active = Column(Boolean, default=True)
    last_login_at = Column(UTCDateTime)
    created_at = Column(UTCDateTime, default=utcnow)

    buyer = relationship("Buyer", back_populates="user", uselist=False)
    supplier = relationship("Supplier", back_populates="user", uselist=False)

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)


class Buyer(Base):
    __tablename__ = "buyers"
    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    company_name = Column(String(255))
    industry = Column(String(100))
    created_at = Column(UTCDateTime, default=utcnow)

    user = relationship("User", back_populates="buyer")

    __table_args__ = (Index("ix_buyers_user", "user_id"),)


class Supplier(Base):
    __tablename__ = "suppliers"
    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    business_name = Column(String(255), nullable=False)
    verification_status = Column(String(20), default="pending")  # pending | verified | rejected
    created_at = Column(UTCDateTime, default=utcnow)

    user = relationship("User", back_populates="supplier")
    products = relationship("Product", back_populates="supplier")

    __table_args__ = (Index("ix_suppliers_user", "user_id"),)
