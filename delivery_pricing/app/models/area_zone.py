"""
Area Zone database models.

``AreaZone`` rows are centre points managed by the admin panel;
``SurgePricingAreaZone`` links surge rules to zones.
"""

from sqlalchemy import Column, Integer, String, Float, Text, DateTime, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from delivery_pricing.app.db.session import Base


class AreaZone(Base):
    """Geographic zone a surge rule can be restricted to."""
    __tablename__ = "area_zones"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    # Geolocation
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    price = Column(Float, nullable=False, default=0.0)

    tenant_id = Column(String(64), nullable=True, index=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=True)

    def __repr__(self):
        return f"<AreaZone(id={self.id}, name='{self.name}')>"


class SurgePricingAreaZone(Base):
    """Join row between a surge rule and an area zone."""
    __tablename__ = "surge_pricing_area_zones"
    __table_args__ = (
        UniqueConstraint('surge_pricing_id', 'area_zone_id', name='uq_surge_pricing_area_zone'),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    surge_pricing_id = Column(Integer, ForeignKey('surge_pricing.id', ondelete="CASCADE"), nullable=False, index=True)
    area_zone_id = Column(Integer, ForeignKey('area_zones.id', ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    def __repr__(self):
        return f"<SurgePricingAreaZone(surge={self.surge_pricing_id}, zone={self.area_zone_id})>"
