"""In-memory implementation of the pricing rule repository."""

from datetime import date, datetime, time, timezone
from typing import Callable, Iterable, List, Optional, TypeVar

from delivery_pricing.app.models.area_zone import SurgePricingAreaZone
from delivery_pricing.app.models.distance_bracket import DistanceBracket
from delivery_pricing.app.models.holiday import Holiday
from delivery_pricing.app.models.holiday_surcharge import HolidaySurcharge
from delivery_pricing.app.models.peak_hour import PeakHour
from delivery_pricing.app.models.pricing_enums import DayOfWeek
from delivery_pricing.app.models.surge_pricing import SurgePricing

Row = TypeVar("Row")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _newest_first_key(row) -> tuple:
    created_at = row.created_at
    stamp = _as_utc(created_at).timestamp() if created_at is not None else 0.0
    return (stamp, row.id or 0)


def resolve_tenant_scoped(
    rows: Iterable[Row],
    predicate: Callable[[Row], bool],
    tenant_id: Optional[str],
    tenant_predicate: Optional[Callable[[Row], bool]] = None,
) -> Optional[Row]:
    """
    Pick the newest row matching ``predicate``, tenant rows before global rows.

    Mirrors ``SqlPricingRuleRepository.resolve_tenant_scoped``.
    """
    candidates = [row for row in rows if predicate(row)]

    if tenant_id:
        scoped = [
            row for row in candidates
            if row.tenant_id == tenant_id and (tenant_predicate is None or tenant_predicate(row))
        ]
        if scoped:
            return max(scoped, key=_newest_first_key)

    global_rows = [row for row in candidates if row.tenant_id is None]
    if global_rows:
        return max(global_rows, key=_newest_first_key)
    return None


class InMemoryPricingRuleRepository:
    """In-memory implementation of PricingRuleRepository."""

    def __init__(self) -> None:
        self.distance_brackets: List[DistanceBracket] = []
        self.holidays: List[Holiday] = []
        self.holiday_surcharges: List[HolidaySurcharge] = []
        self.peak_hours: List[PeakHour] = []
        self.surge_pricing: List[SurgePricing] = []
        self.surge_zone_links: List[SurgePricingAreaZone] = []
        self._next_id = 1

    def add(self, *rows) -> None:
        """Store rule rows, filling ids and the defaults the database would apply."""
        for row in rows:
            if row.id is None:
                row.id = self._next_id
            self._next_id = max(self._next_id, row.id) + 1
            if hasattr(row, "is_active") and row.is_active is None:
                row.is_active = True
            if hasattr(row, "multiplier") and row.multiplier is None:
                row.multiplier = 1.0

            if isinstance(row, DistanceBracket):
                self.distance_brackets.append(row)
            elif isinstance(row, Holiday):
                self.holidays.append(row)
            elif isinstance(row, HolidaySurcharge):
                self.holiday_surcharges.append(row)
            elif isinstance(row, PeakHour):
                self.peak_hours.append(row)
            elif isinstance(row, SurgePricing):
                self.surge_pricing.append(row)
            elif isinstance(row, SurgePricingAreaZone):
                self.surge_zone_links.append(row)
            else:
                raise TypeError(f"Unsupported rule row: {row!r}")

    async def find_distance_brackets(
        self, distance_km: float, tenant_id: Optional[str]
    ) -> List[DistanceBracket]:
        scope = tenant_id or None
        rows = [
            b for b in self.distance_brackets
            if b.is_active and b.min_km <= distance_km and b.tenant_id == scope
        ]
        return sorted(rows, key=lambda b: (b.min_km, b.id))

    async def find_holiday(self, day: date, tenant_id: Optional[str]) -> Optional[Holiday]:
        return resolve_tenant_scoped(
            self.holidays,
            lambda h: h.is_active and h.date == day,
            tenant_id,
        )

    async def find_holiday_surcharge(
        self, holiday_id: int, tenant_id: Optional[str]
    ) -> Optional[HolidaySurcharge]:
        return resolve_tenant_scoped(
            self.holiday_surcharges,
            lambda s: s.holiday_id == holiday_id,
            tenant_id,
        )

    async def find_peak_hour(
        self, day_of_week: DayOfWeek, time_of_day: time, tenant_id: Optional[str]
    ) -> Optional[PeakHour]:
        return resolve_tenant_scoped(
            self.peak_hours,
            lambda p: (
                p.is_active
                and DayOfWeek(p.day_of_week) == day_of_week
                and p.start_time <= time_of_day <= p.end_time
            ),
            tenant_id,
            tenant_predicate=lambda p: p.multiplier is not None and p.multiplier > 1,
        )

    async def find_active_surge(
        self, at: datetime, tenant_id: Optional[str]
    ) -> Optional[SurgePricing]:
        at = _as_utc(at)
        return resolve_tenant_scoped(
            self.surge_pricing,
            lambda s: s.is_active and _as_utc(s.start_time) <= at <= _as_utc(s.end_time),
            tenant_id,
        )

    async def count_surge_zones(self, surge_pricing_id: int) -> int:
        return sum(1 for link in self.surge_zone_links if link.surge_pricing_id == surge_pricing_id)
