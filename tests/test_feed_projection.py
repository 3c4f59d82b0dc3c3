"""Tests for flattening analyst content into feed items."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from app.core.exceptions import BadRequestError
from app.domain import (
    AnalystRef,
    Category,
    ContentModule,
    Dashboard,
    FlatFeedRecord,
    Stock,
    StockRef,
)
from app.schemas.feed import UNRESOLVED_ID, CategoryIdentity, StockIdentity
from app.services.feed_projection import (
    flatten_dashboard,
    flatten_records,
    format_instant,
    project_item,
    resolve_timezone,
)
from app.services.feed_service import sort_feed


STOCKHOLM = ZoneInfo("Europe/Stockholm")


class TestFormatInstant:
    """Date rendering: day, English month name, hour:minute, year."""

    def test_winter_time_in_stockholm(self):
        instant = datetime(2024, 3, 5, 13, 30, tzinfo=UTC)
        assert format_instant(instant, STOCKHOLM) == "05 March 14:30 2024"

    def test_summer_time_in_stockholm(self):
        instant = datetime(2024, 7, 1, 10, 5, tzinfo=UTC)
        assert format_instant(instant, STOCKHOLM) == "01 July 12:05 2024"

    def test_zone_shift_crosses_year(self):
        instant = datetime(2023, 12, 31, 23, 30, tzinfo=UTC)
        assert format_instant(instant, STOCKHOLM) == "01 January 00:30 2024"
        assert format_instant(instant, ZoneInfo("UTC")) == "31 December 23:30 2023"

    def test_naive_instant_is_treated_as_utc(self):
        naive = datetime(2024, 3, 5, 13, 30)
        assert format_instant(naive, STOCKHOLM) == "05 March 14:30 2024"


class TestResolveTimezone:
    """Caller zone or configured default."""

    def test_none_uses_default(self):
        assert resolve_timezone(None) == STOCKHOLM

    def test_empty_string_uses_default(self):
        assert resolve_timezone("") == STOCKHOLM

    def test_explicit_zone(self):
        assert resolve_timezone("America/New_York") == ZoneInfo("America/New_York")

    def test_explicit_default_overrides_settings(self):
        assert resolve_timezone(None, default="UTC") == ZoneInfo("UTC")

    def test_unknown_zone_raises_bad_request(self):
        with pytest.raises(BadRequestError) as exc_info:
            resolve_timezone("Mars/Olympus_Mons")
        assert exc_info.value.error_code == "INVALID_TIMEZONE"

    @pytest.mark.parametrize("zone_id", ["Europe", "America"])
    def test_zone_region_directory_raises_bad_request(self, zone_id):
        with pytest.raises(BadRequestError) as exc_info:
            resolve_timezone(zone_id)
        assert exc_info.value.error_code == "INVALID_TIMEZONE"


class TestProjectItem:
    """Single item construction."""

    def test_defaults_to_stockholm_when_no_zone(self):
        item = project_item(
            AnalystRef(username="bob", id=2),
            StockIdentity(name="Apple", id=10),
            CategoryIdentity(name="News", id=21),
            {"body": "hi"},
            datetime(2024, 3, 5, 13, 30, tzinfo=UTC),
            datetime(2024, 3, 6, 8, 0, tzinfo=UTC),
        )
        assert item.post_date == "05 March 14:30 2024"
        assert item.updated_date == "06 March 09:00 2024"
        assert item.posted_at == datetime(2024, 3, 5, 13, 30, tzinfo=UTC)

    def test_sort_instant_is_not_serialized(self):
        item = project_item(
            AnalystRef(username="bob", id=2),
            StockIdentity(name="Apple", id=10),
            CategoryIdentity(name="News", id=21),
            None,
            datetime(2024, 3, 5, 13, 30, tzinfo=UTC),
            datetime(2024, 3, 5, 13, 30, tzinfo=UTC),
        )
        dumped = item.model_dump()
        assert "posted_at" not in dumped
        assert set(dumped) == {
            "analyst", "stock", "category", "content", "post_date", "updated_date",
        }

    def test_item_is_immutable(self):
        item = project_item(
            AnalystRef(username="bob", id=2),
            StockIdentity(name="Apple", id=10),
            CategoryIdentity(name="News", id=21),
            None,
            datetime(2024, 3, 5, 13, 30, tzinfo=UTC),
            datetime(2024, 3, 5, 13, 30, tzinfo=UTC),
        )
        with pytest.raises(Exception):
            item.post_date = "tampered"


def _dashboard() -> Dashboard:
    base = datetime(2024, 5, 1, 9, 0, tzinfo=UTC)
    return Dashboard(
        id=2,
        stocks=[
            Stock(
                id=10,
                name="Apple",
                stock_ref=StockRef(id=100, name="AAPL"),
                categories=[
                    Category(id=20, name="Valuation", modules=[
                        ContentModule(id=1, content={"n": 1}, post_date=base, updated_date=base),
                        ContentModule(
                            id=2,
                            content={"n": 2},
                            post_date=base + timedelta(days=2),
                            updated_date=base + timedelta(days=3),
                        ),
                    ]),
                ],
            ),
            Stock(
                id=11,
                name="Microsoft",
                stock_ref=StockRef(id=101, name="MSFT"),
                categories=[
                    Category(id=21, name="News", modules=[
                        ContentModule(
                            id=3,
                            content={"n": 3},
                            post_date=base + timedelta(days=1),
                            updated_date=base + timedelta(days=1),
                        ),
                    ]),
                ],
            ),
        ],
    )


def _records_from(dashboard: Dashboard, username: str) -> list[FlatFeedRecord]:
    return [
        FlatFeedRecord(
            module_id=module.id,
            analyst_username=username,
            stock_name=stock.name,
            category_name=category.name,
            category_id=category.id,
            content=module.content,
            post_date=module.post_date,
            updated_date=module.updated_date,
        )
        for stock in dashboard.stocks
        for category in stock.categories
        for module in category.modules
    ]


class TestFlattenDashboard:
    """Hierarchy walk."""

    def test_one_item_per_module_in_tree_order(self):
        items = flatten_dashboard(AnalystRef(username="bob", id=2), _dashboard(), STOCKHOLM)
        assert [item.content["n"] for item in items] == [1, 2, 3]

    def test_items_carry_real_ids(self):
        items = flatten_dashboard(AnalystRef(username="bob", id=2), _dashboard(), STOCKHOLM)
        assert items[0].analyst == AnalystRef(username="bob", id=2)
        assert items[0].stock == StockIdentity(name="Apple", id=10)
        assert items[0].category == CategoryIdentity(name="Valuation", id=20)
        assert items[2].stock == StockIdentity(name="Microsoft", id=11)

    def test_empty_dashboard_yields_nothing(self):
        assert flatten_dashboard(AnalystRef(username="erin", id=5), Dashboard(id=5)) == []


class TestFlattenRecords:
    """Flat-query path."""

    def test_stock_id_is_unresolved(self):
        records = _records_from(_dashboard(), "bob")
        items = flatten_records(records, {"bob": 2}, STOCKHOLM)
        assert all(item.stock.id == UNRESOLVED_ID for item in items)
        assert [item.stock.name for item in items] == ["Apple", "Apple", "Microsoft"]

    def test_category_identity_is_kept(self):
        items = flatten_records(_records_from(_dashboard(), "bob"), {"bob": 2}, STOCKHOLM)
        assert items[2].category == CategoryIdentity(name="News", id=21)

    def test_unknown_analyst_gets_sentinel_and_is_not_dropped(self):
        records = _records_from(_dashboard(), "ghost")
        items = flatten_records(records, {}, STOCKHOLM)
        assert len(items) == len(records)
        assert all(item.analyst == AnalystRef(username="ghost", id=UNRESOLVED_ID) for item in items)

    def test_both_paths_sort_identically(self):
        dashboard = _dashboard()
        analyst = AnalystRef(username="bob", id=2)

        walked = sort_feed(flatten_dashboard(analyst, dashboard, STOCKHOLM))
        flat = sort_feed(flatten_records(_records_from(dashboard, "bob"), {"bob": 2}, STOCKHOLM))

        def key(item):
            return (item.content["n"], item.post_date, item.updated_date, item.category, item.analyst)

        assert [key(i) for i in walked] == [key(i) for i in flat]
        assert [i.content["n"] for i in walked] == [2, 3, 1]
