"""
Delivery Fare Calculator.

Computes a delivery charge in four fixed stages sharing one running total:

1. Base fare from the matching distance bracket (or the per-km fallback)
2. Holiday surcharge (flat amount, then multiplier)
3. Peak-hour multiplier
4. Surge pricing extra charge

A failed rule lookup never aborts the calculation: the stage is skipped
and logged, so pricing degrades instead of blocking checkout.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional

from delivery_pricing.app.core.config import settings
from delivery_pricing.app.core.exceptions import InvalidArgumentError, RuleLookupError
from delivery_pricing.app.db.repositories import PricingRuleRepository
from delivery_pricing.app.domain.pricing.clock import LocalClock, load_timezone, local_clock, parse_timestamp

logger = logging.getLogger(__name__)


def round_charge(amount: float) -> float:
    """Round to 2 decimals, halves away from zero for positive amounts."""
    return math.floor(amount * 100 + 0.5) / 100


def fallback_charge(distance_km: float, rate_per_km: float) -> float:
    """Linear fare used when no distance bracket applies."""
    return round_charge(distance_km * rate_per_km)


def validate_distance(value: Any) -> float:
    """
    Raises:
        InvalidArgumentError: Unless ``value`` is a finite number greater than zero.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError("Invalid distance parameter")
    if not math.isfinite(value) or value <= 0:
        raise InvalidArgumentError("Invalid distance parameter")
    return float(value)


@dataclass
class FareQuote:
    """Running total plus a record of which rules fired."""
    distance_km: float
    tenant_id: Optional[str]
    timestamp: datetime
    total: float = 0.0
    charge: float = 0.0

    base_fare: float = 0.0
    bracket_id: Optional[int] = None
    used_fallback_rate: bool = False

    holiday_id: Optional[int] = None
    holiday_surcharge_id: Optional[int] = None
    holiday_extra_flat: Optional[float] = None
    holiday_multiplier: Optional[float] = None

    peak_hour_id: Optional[int] = None
    peak_multiplier: Optional[float] = None

    surge_pricing_id: Optional[int] = None
    surge_extra_charge: Optional[float] = None
    surge_zone_count: Optional[int] = None

    failed_stages: List[str] = field(default_factory=list)


class FareCalculator:
    """Delivery charge pipeline over a PricingRuleRepository."""

    def __init__(
        self,
        repository: PricingRuleRepository,
        fallback_rate_per_km: Optional[float] = None,
        timezone_name: Optional[str] = None,
    ):
        self.repository = repository
        self.fallback_rate_per_km = (
            settings.fallback_rate_per_km if fallback_rate_per_km is None else fallback_rate_per_km
        )
        self.tz = load_timezone(timezone_name or settings.pricing_timezone)

    async def compute_delivery_charge(
        self, distance_km: Any, timestamp: Any = None, tenant_id: Optional[str] = None
    ) -> float:
        quote = await self.quote(distance_km, timestamp, tenant_id)
        return quote.charge

    async def quote(
        self, distance_km: Any, timestamp: Any = None, tenant_id: Optional[str] = None
    ) -> FareQuote:
        """
        Price one delivery.

        Args:
            distance_km: Distance in kilometres, must be > 0
            timestamp: datetime or ISO-8601 string; defaults to now
            tenant_id: Tenant whose rules take precedence over global ones

        Returns:
            FareQuote with ``charge`` rounded to 2 decimals

        Raises:
            InvalidArgumentError: Before any lookup, for malformed input.
        """
        distance_km = validate_distance(distance_km)
        moment = parse_timestamp(timestamp, self.tz)
        clock = local_clock(moment, self.tz)
        tenant_id = tenant_id or None

        quote = FareQuote(distance_km=distance_km, tenant_id=tenant_id, timestamp=clock.instant)

        await self._apply_base_fare(quote)
        await self._apply_holiday_surcharge(quote, clock)
        await self._apply_peak_hour(quote, clock)
        await self._apply_surge(quote, clock)

        if not math.isfinite(quote.total):
            raise InvalidArgumentError("Invalid distance parameter")
        quote.charge = round_charge(quote.total)
        return quote

    async def _apply_base_fare(self, quote: FareQuote) -> None:
        try:
            brackets = await self.repository.find_distance_brackets(quote.distance_km, quote.tenant_id)
        except RuleLookupError as exc:
            logger.warning("Distance bracket lookup failed, using fallback rate: %s", exc)
            quote.failed_stages.append("base_fare")
            brackets = []

        matched = next((b for b in brackets if b.matches(quote.distance_km)), None)

        if matched is None:
            logger.info(
                "No distance bracket for %.3f km (tenant=%s), using %.2f per km",
                quote.distance_km, quote.tenant_id, self.fallback_rate_per_km,
            )
            quote.base_fare = quote.distance_km * self.fallback_rate_per_km
            quote.used_fallback_rate = True
        else:
            quote.base_fare = matched.flat_fare
            quote.bracket_id = matched.id

        quote.total = quote.base_fare

    async def _apply_holiday_surcharge(self, quote: FareQuote, clock: LocalClock) -> None:
        try:
            holiday = await self.repository.find_holiday(clock.day, quote.tenant_id)
            if holiday is None:
                return
            quote.holiday_id = holiday.id

            surcharge = await self.repository.find_holiday_surcharge(holiday.id, quote.tenant_id)
        except RuleLookupError as exc:
            logger.warning("Holiday surcharge lookup failed, skipping: %s", exc)
            quote.failed_stages.append("holiday")
            return

        if surcharge is None:
            return

        quote.holiday_surcharge_id = surcharge.id
        if surcharge.extra_flat is not None:
            quote.total += surcharge.extra_flat
            quote.holiday_extra_flat = surcharge.extra_flat
        if surcharge.multiplier is not None and surcharge.multiplier > 1:
            quote.total *= surcharge.multiplier
            quote.holiday_multiplier = surcharge.multiplier

    async def _apply_peak_hour(self, quote: FareQuote, clock: LocalClock) -> None:
        try:
            peak = await self.repository.find_peak_hour(clock.day_of_week, clock.time_of_day, quote.tenant_id)
        except RuleLookupError as exc:
            logger.warning("Peak hour lookup failed, skipping: %s", exc)
            quote.failed_stages.append("peak_hour")
            return

        if peak is None:
            return

        quote.peak_hour_id = peak.id
        if peak.multiplier is not None and peak.multiplier > 1:
            quote.total *= peak.multiplier
            quote.peak_multiplier = peak.multiplier

    async def _apply_surge(self, quote: FareQuote, clock: LocalClock) -> None:
        try:
            surge = await self.repository.find_active_surge(clock.instant, quote.tenant_id)
            if surge is None:
                return
            zone_count = await self.repository.count_surge_zones(surge.id)
        except RuleLookupError as exc:
            logger.warning("Surge pricing lookup failed, skipping: %s", exc)
            quote.failed_stages.append("surge")
            return

        # TODO: restrict zone-linked surges once requests carry a delivery location
        if zone_count:
            logger.debug("Surge %s is linked to %d zones, applying without location check", surge.id, zone_count)

        quote.total += surge.extra_charge_amount
        quote.surge_pricing_id = surge.id
        quote.surge_extra_charge = surge.extra_charge_amount
        quote.surge_zone_count = zone_count
