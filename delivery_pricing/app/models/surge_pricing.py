"""
Surge Pricing database model.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean
from sqlalchemy.sql import func
from delivery_pricing.app.db.session import Base


class SurgePricing(Base):
    """
    Surge Pricing model.

    Adds ``extra_charge_amount`` to the fare while ``start_time <= now <=
    end_time``. May be linked to area zones through
    ``surge_pricing_area_zones``.
    """
    __tablename__ = "surge_pricing"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    reason = Column(String(255), nullable=False, default="")

    # Absolute window
    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time = Column(DateTime(timezone=True), nullable=False, index=True)

    extra_charge_amount = Column(Float, nullable=False)

    # Scope
    tenant_id = Column(String(64), nullable=True, index=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=True)

    def __repr__(self):
        return f"<SurgePricing(id={self.id}, extra={self.extra_charge_amount}, tenant={self.tenant_id})>"
