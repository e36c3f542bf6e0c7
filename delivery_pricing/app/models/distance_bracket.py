"""
Distance Bracket database model.

A flat base fare keyed by a distance range.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean
from sqlalchemy.sql import func
from delivery_pricing.app.db.session import Base


class DistanceBracket(Base):
    """
    Distance Bracket model.

    Matches distances in ``[min_km, max_km)``; ``max_km = NULL`` means the
    bracket is unbounded above. ``tenant_id = NULL`` marks a global bracket.
    """
    __tablename__ = "distance_brackets"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Range
    min_km = Column(Float, nullable=False, index=True)
    max_km = Column(Float, nullable=True)  # null = unbounded

    # Fare
    flat_fare = Column(Float, nullable=False)

    # Scope
    tenant_id = Column(String(64), nullable=True, index=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=True)

    def matches(self, distance_km: float) -> bool:
        """True when ``distance_km`` lies in ``[min_km, max_km)``."""
        return distance_km >= self.min_km and (self.max_km is None or distance_km < self.max_km)

    def __repr__(self):
        return f"<DistanceBracket(id={self.id}, range=[{self.min_km}, {self.max_km}), fare={self.flat_fare})>"
