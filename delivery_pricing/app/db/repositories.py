"""Repository protocol for the pricing rule tables."""

from datetime import date, datetime, time
from typing import List, Optional, Protocol

from delivery_pricing.app.models.distance_bracket import DistanceBracket
from delivery_pricing.app.models.holiday import Holiday
from delivery_pricing.app.models.holiday_surcharge import HolidaySurcharge
from delivery_pricing.app.models.peak_hour import PeakHour
from delivery_pricing.app.models.pricing_enums import DayOfWeek
from delivery_pricing.app.models.surge_pricing import SurgePricing


class PricingRuleRepository(Protocol):
    """
    Read-through access to the rule tables used by the fare calculator.

    Implementations raise ``RuleLookupError`` when the backing store fails.
    Single-row lookups follow tenant precedence: rows scoped to
    ``tenant_id`` first, global rows (``tenant_id IS NULL``) only when the
    tenant has none. Within one scope the most recently created row wins.
    """

    async def find_distance_brackets(
        self, distance_km: float, tenant_id: Optional[str]
    ) -> List[DistanceBracket]:
        """Active brackets with ``min_km <= distance_km``, ordered by ``min_km`` then ``id``.

        Scoped to ``tenant_id`` when given, otherwise to global brackets.
        No cross-scope fallback.
        """
        ...

    async def find_holiday(self, day: date, tenant_id: Optional[str]) -> Optional[Holiday]:
        """Active holiday on ``day``."""
        ...

    async def find_holiday_surcharge(
        self, holiday_id: int, tenant_id: Optional[str]
    ) -> Optional[HolidaySurcharge]:
        """Surcharge attached to ``holiday_id``."""
        ...

    async def find_peak_hour(
        self, day_of_week: DayOfWeek, time_of_day: time, tenant_id: Optional[str]
    ) -> Optional[PeakHour]:
        """Active peak window on ``day_of_week`` containing ``time_of_day`` (inclusive)."""
        ...

    async def find_active_surge(
        self, at: datetime, tenant_id: Optional[str]
    ) -> Optional[SurgePricing]:
        """Active surge rule whose window contains ``at`` (inclusive)."""
        ...

    async def count_surge_zones(self, surge_pricing_id: int) -> int:
        """Number of area zones linked to a surge rule."""
        ...
