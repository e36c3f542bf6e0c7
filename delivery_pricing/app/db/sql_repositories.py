"""SQL implementation of the pricing rule repository."""

from datetime import date, datetime, time
from typing import Any, List, Optional, Sequence

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from delivery_pricing.app.core.exceptions import RuleLookupError
from delivery_pricing.app.models.area_zone import SurgePricingAreaZone
from delivery_pricing.app.models.distance_bracket import DistanceBracket
from delivery_pricing.app.models.holiday import Holiday
from delivery_pricing.app.models.holiday_surcharge import HolidaySurcharge
from delivery_pricing.app.models.peak_hour import PeakHour
from delivery_pricing.app.models.pricing_enums import DayOfWeek
from delivery_pricing.app.models.surge_pricing import SurgePricing


def newest_first(model) -> tuple:
    return (model.created_at.desc(), model.id.desc())


class SqlPricingRuleRepository:
    """SQL implementation of PricingRuleRepository."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def _execute(self, model, query: Select):
        try:
            return await self._db.execute(query)
        except SQLAlchemyError as exc:
            # A failed statement leaves the transaction aborted on Postgres
            await self._db.rollback()
            raise RuleLookupError(model.__tablename__, str(exc)) from exc

    async def resolve_tenant_scoped(
        self,
        model,
        filters: Sequence[Any],
        tenant_id: Optional[str],
        order_by: Sequence[Any],
        tenant_filters: Sequence[Any] = (),
    ):
        """
        Return the first row of ``model`` matching ``filters``, tenant rows first.

        When ``tenant_id`` is given and the tenant owns a row matching both
        ``filters`` and ``tenant_filters``, global rows are never consulted.
        Otherwise the global rows (``tenant_id IS NULL``) are searched.
        """
        if tenant_id:
            query = (
                select(model)
                .where(*filters, *tenant_filters, model.tenant_id == tenant_id)
                .order_by(*order_by)
                .limit(1)
            )
            result = await self._execute(model, query)
            row = result.scalars().first()
            if row is not None:
                return row

        query = select(model).where(*filters, model.tenant_id.is_(None)).order_by(*order_by).limit(1)
        result = await self._execute(model, query)
        return result.scalars().first()

    async def find_distance_brackets(
        self, distance_km: float, tenant_id: Optional[str]
    ) -> List[DistanceBracket]:
        scope = DistanceBracket.tenant_id == tenant_id if tenant_id else DistanceBracket.tenant_id.is_(None)
        query = select(DistanceBracket).where(
            DistanceBracket.is_active == True,
            DistanceBracket.min_km <= distance_km,
            scope,
        ).order_by(DistanceBracket.min_km.asc(), DistanceBracket.id.asc())

        result = await self._execute(DistanceBracket, query)
        return list(result.scalars().all())

    async def find_holiday(self, day: date, tenant_id: Optional[str]) -> Optional[Holiday]:
        return await self.resolve_tenant_scoped(
            Holiday,
            [Holiday.date == day, Holiday.is_active == True],
            tenant_id,
            newest_first(Holiday),
        )

    async def find_holiday_surcharge(
        self, holiday_id: int, tenant_id: Optional[str]
    ) -> Optional[HolidaySurcharge]:
        return await self.resolve_tenant_scoped(
            HolidaySurcharge,
            [HolidaySurcharge.holiday_id == holiday_id],
            tenant_id,
            newest_first(HolidaySurcharge),
        )

    async def find_peak_hour(
        self, day_of_week: DayOfWeek, time_of_day: time, tenant_id: Optional[str]
    ) -> Optional[PeakHour]:
        return await self.resolve_tenant_scoped(
            PeakHour,
            [
                PeakHour.day_of_week == day_of_week,
                PeakHour.is_active == True,
                PeakHour.start_time <= time_of_day,
                PeakHour.end_time >= time_of_day,
            ],
            tenant_id,
            newest_first(PeakHour),
            tenant_filters=[PeakHour.multiplier > 1],
        )

    async def find_active_surge(
        self, at: datetime, tenant_id: Optional[str]
    ) -> Optional[SurgePricing]:
        return await self.resolve_tenant_scoped(
            SurgePricing,
            [
                SurgePricing.is_active == True,
                SurgePricing.start_time <= at,
                SurgePricing.end_time >= at,
            ],
            tenant_id,
            newest_first(SurgePricing),
        )

    async def count_surge_zones(self, surge_pricing_id: int) -> int:
        query = select(func.count()).select_from(SurgePricingAreaZone).where(
            SurgePricingAreaZone.surge_pricing_id == surge_pricing_id
        )
        result = await self._execute(SurgePricingAreaZone, query)
        return result.scalar_one()
