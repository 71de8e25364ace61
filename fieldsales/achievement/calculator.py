"""MSL achievement: share of a category's must-sell SKUs each store bought, averaged over stores."""

from collections.abc import Iterable, Mapping
from typing import Optional

from fieldsales.models.achievement import AchievementResult, StoreAchievement, StoreVisitFacts
from fieldsales.models.records import MSLItem
from fieldsales.utils.logger import get_logger

logger = get_logger("fieldsales.achievement")


def build_msl_index(items: Iterable[MSLItem]) -> dict[str, frozenset[str]]:
    """Group MSL items into {category: set of sku_code}."""
    index: dict[str, set[str]] = {}
    for item in items:
        index.setdefault(item.category, set()).add(item.sku_code)
    return {category: frozenset(skus) for category, skus in index.items()}


def sort_by_priority(items: Iterable[MSLItem]) -> list[MSLItem]:
    """Ascending priority (1 first); ties keep their input order."""
    return sorted(items, key=lambda i: i.priority)


def store_achievement(
    msl_by_category: Mapping[str, Iterable[str]], facts: StoreVisitFacts
) -> Optional[StoreAchievement]:
    """Score one store, or None when its category has no MSL."""
    category_msl = frozenset(msl_by_category.get(facts.store_category) or ())
    if not category_msl:
        return None
    matched = len(facts.bought_skus & category_msl)
    return StoreAchievement(
        store_id=facts.store_id,
        category=facts.store_category,
        matched=matched,
        msl_size=len(category_msl),
        achievement=matched / len(category_msl) * 100,
    )


def compute_achievement(
    msl_by_category: Mapping[str, Iterable[str]], store_visits: Iterable[StoreVisitFacts]
) -> AchievementResult:
    """Unweighted mean of per-store percentages.

    Stores whose category has no MSL (absent or empty) are excluded from the
    mean rather than scored 0. With no included store the overall is 0.
    """
    scored: list[StoreAchievement] = []
    excluded = 0
    for facts in store_visits:
        result = store_achievement(msl_by_category, facts)
        if result is None:
            excluded += 1
        else:
            scored.append(result)

    overall = sum(s.achievement for s in scored) / len(scored) if scored else 0.0
    logger.debug("achievement.computed", included=len(scored), excluded=excluded, overall=round(overall, 2))
    return AchievementResult(overall=overall, stores=scored, excluded_count=excluded)
