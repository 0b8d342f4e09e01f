"""Tests for filtering and counting over the canonical list."""
from lockbox.client.models import Lockbox
from lockbox.client.projection import (
    UNCATEGORIZED,
    Projection,
    category_counts,
    filter_lockboxes,
    lock_counts,
)

NOW = 1_700_000_000_000


def make(id, name, category=None, **fields):
    data = dict(
        id=id,
        name=name,
        content="enc",
        category=category,
        unlock_delay_seconds=60,
        relock_delay_seconds=3600,
        created_at=NOW,
        updated_at=NOW,
    )
    data.update(fields)
    return Lockbox(**data)


LOCKBOXES = (
    make(1, "Alpha", "Financial"),
    make(2, "bank pin", None),
    make(3, "Charlie", "Work"),
    make(4, "Define", "Personal"),
    make(5, "Zulu", None, is_locked=False, relock_timestamp=NOW + 1000),
)


def names(lockboxes):
    return [lb.name for lb in lockboxes]


def test_no_filters_pass_everything_in_order():
    assert names(filter_lockboxes(LOCKBOXES)) == names(LOCKBOXES)
    assert names(filter_lockboxes(LOCKBOXES, "   ", None)) == names(LOCKBOXES)


def test_search_matches_name_or_category_case_insensitively():
    # "fin" hits the Financial category and the name "Define"
    assert names(filter_lockboxes(LOCKBOXES, "fin")) == ["Alpha", "Define"]
    assert names(filter_lockboxes(LOCKBOXES, "  BANK ")) == ["bank pin"]


def test_category_filter_exact_match():
    assert names(filter_lockboxes(LOCKBOXES, category="Work")) == ["Charlie"]
    assert filter_lockboxes(LOCKBOXES, category="Gaming") == []


def test_uncategorized_sentinel_selects_missing_category():
    assert names(filter_lockboxes(LOCKBOXES, category=UNCATEGORIZED)) == ["bank pin", "Zulu"]


def test_none_category_is_no_restriction():
    assert len(filter_lockboxes(LOCKBOXES, category=None)) == len(LOCKBOXES)


def test_search_and_category_combine():
    assert names(filter_lockboxes(LOCKBOXES, "a", category=UNCATEGORIZED)) == ["bank pin"]


def test_filter_does_not_mutate_input():
    source = list(LOCKBOXES)
    filter_lockboxes(source, "zzz", "Work")
    assert source == list(LOCKBOXES)


def test_category_counts():
    counts = category_counts(LOCKBOXES)

    assert counts["Financial"] == 1
    assert counts["Work"] == 1
    assert counts["Gaming"] == 0
    assert counts[UNCATEGORIZED] == 2


def test_lock_counts_use_derived_status():
    assert lock_counts(LOCKBOXES, NOW) == {"total": 5, "locked": 4, "unlocked": 1}
    # Once the window elapses Zulu is relabelled as locked
    assert lock_counts(LOCKBOXES, NOW + 1000) == {"total": 5, "locked": 5, "unlocked": 0}


class _Engine:
    def __init__(self, lockboxes):
        self.lockboxes = tuple(lockboxes)


def test_projection_recomputes_on_read():
    engine = _Engine(LOCKBOXES[:2])
    projection = Projection(engine, search_text="a")

    assert names(projection.items) == ["Alpha", "bank pin"]

    engine.lockboxes = LOCKBOXES
    projection.set_category("Work")
    assert names(projection.items) == ["Charlie"]

    projection.set_search_text("")
    projection.set_category(UNCATEGORIZED)
    assert names(projection.items) == ["bank pin", "Zulu"]
