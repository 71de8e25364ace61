"""Inputs and results of the MSL achievement calculator and dashboard recaps."""

from typing import Optional

from pydantic import BaseModel


class StoreVisitFacts(BaseModel):
    """One store for the period with every SKU it bought, merged across its visits."""

    store_id: Optional[str] = None
    store_category: str
    bought_skus: frozenset[str] = frozenset()


class StoreAchievement(BaseModel):
    store_id: Optional[str] = None
    category: str
    matched: int
    msl_size: int
    achievement: float  # percentage in [0, 100]


class AchievementResult(BaseModel):
    """overall is the unweighted mean of included store percentages, 0 when none are included."""

    overall: float = 0.0
    stores: list[StoreAchievement] = []
    excluded_count: int = 0

    @property
    def included_count(self) -> int:
        return len(self.stores)


class RecapStats(BaseModel):
    """Daily recap for one day (optionally one salesman)."""

    total_visits: int = 0
    effective_calls: int = 0
    total_sales: float = 0.0
    msl_achievement: float = 0.0


class OverviewStats(BaseModel):
    """Dashboard overview: today's calls and achievement plus month-to-date sales."""

    total_calls: int = 0
    effective_calls: int = 0
    msl_achievement: float = 0.0
    monthly_sales: float = 0.0
