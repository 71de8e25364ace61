"""Dashboard figures built on the achievement calculator: daily recap and overview."""

import calendar
from datetime import date
from typing import Optional

from fieldsales.achievement.calculator import build_msl_index, compute_achievement
from fieldsales.achievement.facts import collect_store_facts, fetch_visits
from fieldsales.models.achievement import OverviewStats, RecapStats
from fieldsales.models.records import MSLItem
from fieldsales.store.protocol import MSL_ITEMS, DataStore, Row
from fieldsales.utils.logger import get_logger

logger = get_logger("fieldsales.achievement.recap")


async def load_msl_index(store: DataStore) -> dict[str, frozenset[str]]:
    rows = await store.select(MSL_ITEMS)
    return build_msl_index(MSLItem(**r) for r in rows)


def _sales(orders: list[Row]) -> float:
    return float(sum(o.get("line_total") or 0 for o in orders))


def month_bounds(day: date) -> tuple[date, date]:
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


async def daily_recap(store: DataStore, day: date, salesman_id: Optional[str] = None) -> RecapStats:
    """Visits, effective calls, sales and MSL achievement of the stores visited on day."""
    visits, orders = await fetch_visits(store, day, day, salesman_id)
    msl_index = await load_msl_index(store)
    facts = await collect_store_facts(store, day, day, salesman_id=salesman_id)
    achievement = compute_achievement(msl_index, facts)

    stats = RecapStats(
        total_visits=len(visits),
        effective_calls=sum(1 for v in visits if v.get("has_order")),
        total_sales=_sales(orders),
        msl_achievement=achievement.overall,
    )
    logger.info("recap.daily", day=day.isoformat(), salesman_id=salesman_id, **stats.model_dump())
    return stats


async def overview_stats(
    store: DataStore,
    today: date,
    salesman_id: Optional[str] = None,
    owner_id: Optional[str] = None,
) -> OverviewStats:
    """Today's calls and achievement over every store in scope, plus month-to-date sales.

    A salesman's own view passes the same id as salesman_id and owner_id.
    """
    visits, _ = await fetch_visits(store, today, today, salesman_id)
    msl_index = await load_msl_index(store)
    achievement = 0.0
    if msl_index:
        facts = await collect_store_facts(
            store, today, today, salesman_id=salesman_id, include_unvisited=True, owner_id=owner_id
        )
        achievement = compute_achievement(msl_index, facts).overall

    month_start, month_end = month_bounds(today)
    _, month_orders = await fetch_visits(store, month_start, month_end, salesman_id)

    stats = OverviewStats(
        total_calls=len(visits),
        effective_calls=sum(1 for v in visits if v.get("has_order")),
        msl_achievement=achievement,
        monthly_sales=_sales(month_orders),
    )
    logger.info("recap.overview", today=today.isoformat(), salesman_id=salesman_id, **stats.model_dump())
    return stats
