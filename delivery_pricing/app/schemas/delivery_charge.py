"""
Delivery Charge Schemas.
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Any, List, Optional


class DeliveryChargeRequest(BaseModel):
    """
    Body of ``POST /calculate-delivery-charge``.

    ``distanceKm`` and ``timestamp`` are accepted as-is and validated by the
    fare calculator so malformed values map to 400 responses.
    """
    distance_km: Any = Field(None, alias="distanceKm")
    timestamp: Optional[Any] = None
    tenant_id: Optional[str] = Field(None, alias="tenantId")

    model_config = ConfigDict(populate_by_name=True)


class DeliveryChargeResponse(BaseModel):
    """Computed charge."""
    charge: float


class FareBreakdown(BaseModel):
    """Which rules contributed to a charge."""
    distance_km: float
    tenant_id: Optional[str]
    timestamp: datetime

    base_fare: float
    bracket_id: Optional[int]
    used_fallback_rate: bool

    holiday_id: Optional[int]
    holiday_surcharge_id: Optional[int]
    holiday_extra_flat: Optional[float]
    holiday_multiplier: Optional[float]

    peak_hour_id: Optional[int]
    peak_multiplier: Optional[float]

    surge_pricing_id: Optional[int]
    surge_extra_charge: Optional[float]
    surge_zone_count: Optional[int]

    failed_stages: List[str]

    model_config = ConfigDict(from_attributes=True)


class DeliveryChargeBreakdownResponse(BaseModel):
    """Charge plus its breakdown."""
    charge: float
    breakdown: FareBreakdown
