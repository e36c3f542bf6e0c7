"""
Holiday database model.
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, Boolean
from sqlalchemy.sql import func
from delivery_pricing.app.db.session import Base


class Holiday(Base):
    """
    Holiday model.

    One row per calendar date per tenant scope. Surcharges hang off it
    through ``holiday_surcharges``.
    """
    __tablename__ = "holidays"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    holiday_name = Column(String(200), nullable=False, default="")
    date = Column(Date, nullable=False, index=True)

    # Scope
    tenant_id = Column(String(64), nullable=True, index=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    def __repr__(self):
        return f"<Holiday(id={self.id}, date={self.date}, tenant={self.tenant_id})>"
