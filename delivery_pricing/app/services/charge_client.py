"""
Delivery Charge Client.

Calls ``POST /calculate-delivery-charge`` on the pricing service. Callers
at checkout must always get a price, so any transport or HTTP failure
degrades to the linear per-km fallback instead of raising.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Union

import httpx

from delivery_pricing.app.core.config import settings
from delivery_pricing.app.domain.pricing.fare_calculator import fallback_charge

logger = logging.getLogger(__name__)


class DeliveryChargeClient:

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        fallback_rate_per_km: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.pricing_service_url
        self.timeout = timeout if timeout is not None else settings.pricing_client_timeout_seconds
        self.fallback_rate_per_km = (
            settings.fallback_rate_per_km if fallback_rate_per_km is None else fallback_rate_per_km
        )
        self._transport = transport

    async def calculate(
        self,
        distance_km: float,
        timestamp: Optional[Union[datetime, str]] = None,
        tenant_id: Optional[str] = None,
    ) -> float:
        """
        Fetch the delivery charge, falling back to ``distance_km * rate``.

        Args:
            distance_km: Distance in kilometres
            timestamp: Pricing time; defaults to now
            tenant_id: Tenant whose rules apply

        Returns:
            Charge rounded to 2 decimals
        """
        if timestamp is None:
            timestamp = datetime.now(timezone.utc)
        if isinstance(timestamp, datetime):
            timestamp = timestamp.isoformat()

        payload = {"distanceKm": distance_km, "timestamp": timestamp, "tenantId": tenant_id}

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post("/calculate-delivery-charge", json=payload)
                response.raise_for_status()
                return float(response.json()["charge"])
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Failed to calculate delivery charge remotely, using fallback: %s", exc)
            return fallback_charge(distance_km, self.fallback_rate_per_km)
