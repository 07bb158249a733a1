from sqlalchemy import Column, DateTime, ForeignKey, Index, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from travel_api.core.database import Base, utcnow


class Trip(Base):
    __tablename__ = "trips"
    __table_args__ = (Index("ix_trips_dates", "start_date", "end_date"),)

    id = Column(String(36), primary_key=True)
    tourist_id = Column(
        String(36),
        ForeignKey("tourists.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    # JSON text: {"name", "country", "city", "address"?, "coordinates"?}
    destination = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="planned", server_default="planned", index=True)
    total_cost = Column(Numeric(10, 2), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )

    tourist = relationship("Tourist", back_populates="trips")
