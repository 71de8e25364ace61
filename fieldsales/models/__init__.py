"""Pydantic models for the field sales engine."""

from fieldsales.models.achievement import (
    AchievementResult,
    OverviewStats,
    RecapStats,
    StoreAchievement,
    StoreVisitFacts,
)
from fieldsales.models.outcomes import (
    CommitMode,
    CommitResult,
    InvalidRow,
    ParseResult,
    Record,
    RowAction,
    RowOutcome,
    RowValidationError,
    UploadReport,
    ValidRow,
)
from fieldsales.models.records import MSLItem, Product, Store, Visit, VisitOrder

__all__ = [
    "MSLItem",
    "Product",
    "Store",
    "Visit",
    "VisitOrder",
    "Record",
    "RowAction",
    "RowOutcome",
    "RowValidationError",
    "ValidRow",
    "InvalidRow",
    "ParseResult",
    "CommitMode",
    "CommitResult",
    "UploadReport",
    "StoreVisitFacts",
    "StoreAchievement",
    "AchievementResult",
    "RecapStats",
    "OverviewStats",
]
