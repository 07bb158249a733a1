from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import relationship

from travel_api.core.database import Base, utcnow


class Tourist(Base):
    __tablename__ = "tourists"

    id = Column(String(36), primary_key=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(20), nullable=True)
    date_of_birth = Column(Date, nullable=False)
    nationality = Column(String(100), nullable=False)
    passport_number = Column(String(50), nullable=True)
    # JSON text: {"name", "phone", "relationship"}
    emergency_contact = Column(Text, nullable=True)
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
        index=True,
    )

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )

    trips = relationship(
        "Trip",
        back_populates="tourist",
        cascade="all, delete-orphan",
    )
