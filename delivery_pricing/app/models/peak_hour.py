"""
Peak Hour database model.
"""

from sqlalchemy import Column, Integer, String, Float, Time, DateTime, Boolean, Enum
from sqlalchemy.sql import func
from delivery_pricing.app.db.session import Base
from delivery_pricing.app.models.pricing_enums import DayOfWeek


class PeakHour(Base):
    """
    Peak Hour model.

    A recurring weekly window ``[start_time, end_time]`` (both ends
    inclusive, local wall-clock time) with a fare multiplier.
    """
    __tablename__ = "peak_hours"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Window
    day_of_week = Column(
        Enum(DayOfWeek, name="day_of_week", values_callable=lambda members: [m.value for m in members]),
        nullable=False,
        index=True,
    )
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    multiplier = Column(Float, nullable=False, default=1.0)

    # Scope
    tenant_id = Column(String(64), nullable=True, index=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    def __repr__(self):
        return (
            f"<PeakHour(id={self.id}, day={self.day_of_week}, "
            f"window={self.start_time}-{self.end_time}, multiplier={self.multiplier})>"
        )
