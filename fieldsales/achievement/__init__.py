"""MSL achievement calculator and the dashboard figures built on it."""

from fieldsales.achievement.calculator import (
    build_msl_index,
    compute_achievement,
    sort_by_priority,
    store_achievement,
)
from fieldsales.achievement.facts import collect_store_facts, fetch_visits
from fieldsales.achievement.recap import daily_recap, load_msl_index, month_bounds, overview_stats

__all__ = [
    "build_msl_index",
    "compute_achievement",
    "sort_by_priority",
    "store_achievement",
    "collect_store_facts",
    "fetch_visits",
    "daily_recap",
    "overview_stats",
    "load_msl_index",
    "month_bounds",
]
