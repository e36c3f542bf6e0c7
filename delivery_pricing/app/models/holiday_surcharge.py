"""
Holiday Surcharge database model.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.sql import func
from delivery_pricing.app.db.session import Base


class HolidaySurcharge(Base):
    """
    Holiday Surcharge model.

    ``extra_flat`` is added first, then the running total is multiplied by
    ``multiplier`` when it exceeds 1. A tenant-specific row takes precedence
    over the global row for the same holiday.
    """
    __tablename__ = "holiday_surcharges"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    holiday_id = Column(Integer, ForeignKey('holidays.id', ondelete="CASCADE"), nullable=False, index=True)

    # Modifiers
    extra_flat = Column(Float, nullable=True)
    multiplier = Column(Float, nullable=False, default=1.0)

    # Scope
    tenant_id = Column(String(64), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=True)

    def __repr__(self):
        return (
            f"<HolidaySurcharge(id={self.id}, holiday_id={self.holiday_id}, "
            f"extra_flat={self.extra_flat}, multiplier={self.multiplier})>"
        )
