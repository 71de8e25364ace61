"""Filter values understood by every store: scalar = equality, list/tuple/set = membership, Range = bounds."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from fieldsales.store.protocol import Filters, Row


class Range(BaseModel):
    """Inclusive bounds; a None side is open."""

    model_config = ConfigDict(frozen=True)

    low: Any = None
    high: Any = None

    def contains(self, value: Any) -> bool:
        if value is None:
            return False
        if self.low is not None and value < self.low:
            return False
        if self.high is not None and value > self.high:
            return False
        return True


def matches_value(expected: Any, actual: Any) -> bool:
    if isinstance(expected, Range):
        return expected.contains(actual)
    if isinstance(expected, (list, tuple, set, frozenset)):
        return actual in expected
    return actual == expected


def matches(row: Row, filters: Optional[Filters]) -> bool:
    """True when row satisfies every filter entry."""
    if not filters:
        return True
    return all(matches_value(expected, row.get(field)) for field, expected in filters.items())
