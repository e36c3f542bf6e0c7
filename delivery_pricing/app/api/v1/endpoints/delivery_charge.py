"""
Delivery Charge API Endpoints.

Prices a delivery from distance, time and tenant using the rule tables.
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from delivery_pricing.app.core.config import settings
from delivery_pricing.app.core.exceptions import AppException, DeliveryChargeError
from delivery_pricing.app.db.session import get_db
from delivery_pricing.app.db.sql_repositories import SqlPricingRuleRepository
from delivery_pricing.app.domain.pricing.fare_calculator import FareCalculator, FareQuote
from delivery_pricing.app.schemas.delivery_charge import (
    DeliveryChargeRequest, DeliveryChargeResponse,
    DeliveryChargeBreakdownResponse, FareBreakdown
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calculate-delivery-charge", tags=["Delivery Pricing"])


async def get_fare_calculator(db: AsyncSession = Depends(get_db)) -> FareCalculator:
    """FastAPI dependency building a calculator over the request's session."""
    return FareCalculator(
        SqlPricingRuleRepository(db),
        fallback_rate_per_km=settings.fallback_rate_per_km,
        timezone_name=settings.pricing_timezone,
    )


async def _quote(calculator: FareCalculator, payload: DeliveryChargeRequest) -> FareQuote:
    try:
        return await calculator.quote(payload.distance_km, payload.timestamp, payload.tenant_id)
    except AppException:
        raise
    except Exception as exc:
        logger.exception("Error calculating delivery charge")
        raise DeliveryChargeError(details=str(exc)) from exc


@router.post("", response_model=DeliveryChargeResponse)
async def calculate_delivery_charge(
    payload: DeliveryChargeRequest,
    calculator: FareCalculator = Depends(get_fare_calculator)
):
    """
    Calculate the delivery charge.

    Returns 400 for a non-positive or non-numeric distance or an
    unparseable timestamp, 500 for unexpected failures.
    """
    quote = await _quote(calculator, payload)
    return DeliveryChargeResponse(charge=quote.charge)


@router.post("/breakdown", response_model=DeliveryChargeBreakdownResponse)
async def calculate_delivery_charge_breakdown(
    payload: DeliveryChargeRequest,
    calculator: FareCalculator = Depends(get_fare_calculator)
):
    """
    Calculate the delivery charge and report which rules applied.
    """
    quote = await _quote(calculator, payload)
    return DeliveryChargeBreakdownResponse(
        charge=quote.charge,
        breakdown=FareBreakdown.model_validate(quote)
    )
