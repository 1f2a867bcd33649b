"""
User account as seen by the booking subsystem.
Registration and credentials are owned by the identity service.
"""

import uuid

from sqlalchemy import Column, String, Boolean, Enum
from sqlalchemy.orm import relationship

from eventplanner.db.base import Base, TimestampMixin
from eventplanner.models.enums import Role, enum_values


def new_id() -> str:
    return str(uuid.uuid4())


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String(100), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(50), nullable=True)
    profile_type = Column(
        Enum(Role, name="profile_type", native_enum=False, values_callable=enum_values, length=20),
        nullable=False,
    )
    is_active = Column(Boolean, default=True, nullable=False)

    vendor_profiles = relationship("VendorProfile", back_populates="user")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username}, role={self.profile_type})>"
