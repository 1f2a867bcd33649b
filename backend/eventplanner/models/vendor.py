"""
Vendor profiles and the services they offer.

A user with the vendor role may own several profiles; bookings reference the
profile, not the user.
"""

from sqlalchemy import (
    Column, String, Text, Integer, Numeric, Boolean, ForeignKey, Enum, CheckConstraint,
)
from sqlalchemy.orm import relationship

from eventplanner.db.base import Base, TimestampMixin
from eventplanner.models.enums import PriceType, VendorType, enum_values
from eventplanner.models.user import new_id


class VendorProfile(Base, TimestampMixin):
    __tablename__ = "vendor_profiles"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    business_name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    vendor_type = Column(
        Enum(VendorType, name="vendor_type", native_enum=False, values_callable=enum_values, length=20),
        nullable=False,
    )
    contact_person = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    is_available = Column(Boolean, default=True, nullable=False)

    user = relationship("User", back_populates="vendor_profiles")
    services = relationship("VendorService", back_populates="vendor")

    def __repr__(self) -> str:
        return f"<VendorProfile(id={self.id}, name={self.business_name}, available={self.is_available})>"


class VendorService(Base, TimestampMixin):
    __tablename__ = "vendor_services"

    id = Column(String(36), primary_key=True, default=new_id)
    vendor_id = Column(String(36), ForeignKey("vendor_profiles.id"), nullable=False, index=True)
    service_name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    base_price = Column(Numeric(10, 2), nullable=False)
    price_type = Column(
        Enum(PriceType, name="price_type", native_enum=False, values_callable=enum_values, length=20),
        nullable=False,
    )
    capacity = Column(Integer, nullable=True)
    unit = Column(String(50), nullable=True)
    is_available = Column(Boolean, default=True, nullable=False)

    vendor = relationship("VendorProfile", back_populates="services")

    __table_args__ = (
        CheckConstraint("base_price >= 0", name="check_service_base_price_non_negative"),
        CheckConstraint("capacity IS NULL OR capacity > 0", name="check_service_capacity_positive"),
    )

    def __repr__(self) -> str:
        return f"<VendorService(id={self.id}, name={self.service_name}, price={self.base_price}/{self.price_type})>"
