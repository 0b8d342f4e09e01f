# lockbox/client/projection.py
"""
Filtered views over the canonical lockbox list.

Nothing here mutates its input. Results keep the canonical (name-sorted)
order; filtering never reorders.
"""
from typing import Dict, Iterable, List, Optional

from lockbox.app.core.constants import CATEGORIES
from lockbox.client.models import Lockbox, LockboxStatus
from lockbox.client.status import resolve_status

# Category filter value meaning "only lockboxes without a category".
# Distinct from None, which means "no category restriction".
UNCATEGORIZED = "__uncategorized__"


def matches_search(lockbox: Lockbox, search_text: str) -> bool:
    query = search_text.strip().lower()
    if not query:
        return True
    if query in lockbox.name.lower():
        return True
    return lockbox.category is not None and query in lockbox.category.lower()


def matches_category(lockbox: Lockbox, category: Optional[str]) -> bool:
    if category is None:
        return True
    if category == UNCATEGORIZED:
        return not lockbox.category
    return lockbox.category == category


def filter_lockboxes(
    lockboxes: Iterable[Lockbox],
    search_text: str = "",
    category: Optional[str] = None,
) -> List[Lockbox]:
    return [
        lb for lb in lockboxes
        if matches_search(lb, search_text) and matches_category(lb, category)
    ]


def category_counts(lockboxes: Iterable[Lockbox]) -> Dict[str, int]:
    """Number of lockboxes per known category, plus UNCATEGORIZED."""
    counts = {category: 0 for category in CATEGORIES}
    counts[UNCATEGORIZED] = 0
    for lb in lockboxes:
        if not lb.category:
            counts[UNCATEGORIZED] += 1
        elif lb.category in counts:
            counts[lb.category] += 1
    return counts


def lock_counts(lockboxes: Iterable[Lockbox], now: Optional[int] = None) -> Dict[str, int]:
    """Totals by derived status: total, locked (incl. unlocking) and unlocked."""
    counts = {"total": 0, "locked": 0, "unlocked": 0}
    for lb in lockboxes:
        counts["total"] += 1
        if resolve_status(lb, now) is LockboxStatus.UNLOCKED:
            counts["unlocked"] += 1
        else:
            counts["locked"] += 1
    return counts


class Projection:
    """
    Search and category state applied to an engine's snapshot.

    The view is recomputed on every read, so it always reflects the
    latest canonical list and the current filter inputs.
    """

    def __init__(self, engine, search_text: str = "", category: Optional[str] = None):
        self._engine = engine
        self.search_text = search_text
        self.category = category

    def set_search_text(self, search_text: str) -> None:
        self.search_text = search_text

    def set_category(self, category: Optional[str]) -> None:
        self.category = category

    @property
    def items(self) -> List[Lockbox]:
        return filter_lockboxes(self._engine.lockboxes, self.search_text, self.category)
