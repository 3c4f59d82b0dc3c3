"""Pytest configuration and fixtures.

The repositories are replaced by ``InMemoryStore`` so services and routes
run without PostgreSQL.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from app.domain import (
    AnalystRef,
    Category,
    ContentModule,
    Dashboard,
    FlatFeedRecord,
    LayoutRecord,
    Stock,
    StockRef,
    Subscription,
)
from app.repositories import dashboards_orm, feed_cards_orm, subscriptions_orm, users_orm
from app.repositories.users_orm import UserRecord


# Users: alice follows bob and carol, frank follows nobody, gina follows dave
ALICE, BOB, CAROL, DAVE, ERIN, FRANK, GINA = 1, 2, 3, 4, 5, 6, 7

AAPL = StockRef(id=100, name="AAPL")
MSFT = StockRef(id=101, name="MSFT")


class InMemoryStore:
    """Users, subscriptions and dashboards held in memory."""

    def __init__(
        self,
        users: list[UserRecord],
        subscriptions: dict[int, list[int]],
        dashboards: dict[int, Dashboard],
        layouts: dict[int, list[LayoutRecord]] | None = None,
    ):
        self.users = {user.id: user for user in users}
        self.subscriptions = subscriptions
        self.dashboards = dashboards
        self.layouts = layouts or {}

    # users_orm
    async def get_user(self, username: str) -> UserRecord | None:
        return next((u for u in self.users.values() if u.username == username), None)

    async def get_user_by_id(self, user_id: int) -> UserRecord | None:
        return self.users.get(user_id)

    async def get_users_by_ids(self, user_ids) -> list[UserRecord]:
        ids = list(dict.fromkeys(user_ids))
        return [self.users[i] for i in ids if i in self.users]

    async def list_analysts(self) -> list[UserRecord]:
        return [u for u in sorted(self.users.values(), key=lambda u: u.id) if u.is_analyst]

    # subscriptions_orm
    async def find_by_subscriber(self, subscriber_id: int) -> list[Subscription]:
        return [
            Subscription(subscriber_id=subscriber_id, analyst=self.users[analyst_id].to_ref())
            for analyst_id in self.subscriptions.get(subscriber_id, [])
        ]

    # dashboards_orm
    async def find_dashboard(self, analyst_id: int) -> Dashboard | None:
        return self.dashboards.get(analyst_id)

    async def find_layouts(self, category_id: int) -> list[LayoutRecord]:
        return self.layouts.get(category_id, [])

    async def list_stock_refs(self) -> list[StockRef]:
        refs = {
            stock.stock_ref
            for dashboard in self.dashboards.values()
            for stock in dashboard.stocks
        }
        return sorted(refs, key=lambda ref: ref.name)

    # feed_cards_orm
    def feed_cards(self, username: str) -> list[FlatFeedRecord]:
        user = next((u for u in self.users.values() if u.username == username), None)
        dashboard = self.dashboards.get(user.id) if user else None
        if dashboard is None:
            return []
        records = [
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
        return sorted(records, key=lambda r: (r.post_date, r.module_id), reverse=True)

    async def find_feed_cards(self, username: str, after: datetime | None = None):
        records = self.feed_cards(username)
        if after is not None:
            records = [r for r in records if r.post_date > after]
        return records

    async def find_feed_page(self, username: str, offset: int, limit: int):
        return self.feed_cards(username)[offset:offset + limit]

    async def count_feed_cards(self, username: str) -> int:
        return len(self.feed_cards(username))

    def install(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(users_orm, "get_user", self.get_user)
        monkeypatch.setattr(users_orm, "get_user_by_id", self.get_user_by_id)
        monkeypatch.setattr(users_orm, "get_users_by_ids", self.get_users_by_ids)
        monkeypatch.setattr(users_orm, "list_analysts", self.list_analysts)
        monkeypatch.setattr(subscriptions_orm, "find_by_subscriber", self.find_by_subscriber)
        monkeypatch.setattr(dashboards_orm, "find_by_id", self.find_dashboard)
        monkeypatch.setattr(dashboards_orm, "find_layouts_by_category_id", self.find_layouts)
        monkeypatch.setattr(dashboards_orm, "list_stock_refs", self.list_stock_refs)
        monkeypatch.setattr(feed_cards_orm, "find_by_analyst_username", self.find_feed_cards)
        monkeypatch.setattr(feed_cards_orm, "find_page_by_analyst_username", self.find_feed_page)
        monkeypatch.setattr(feed_cards_orm, "count_by_analyst_username", self.count_feed_cards)


def make_module(module_id: int, posted: datetime, updated: datetime | None = None) -> ContentModule:
    return ContentModule(
        id=module_id,
        content={"type": "text", "body": f"module {module_id}"},
        post_date=posted,
        updated_date=updated or posted,
    )


@pytest.fixture
def now() -> datetime:
    return datetime.now(UTC).replace(microsecond=0)


@pytest.fixture
def dashboards(now: datetime) -> dict[int, Dashboard]:
    """bob covers AAPL and MSFT, carol covers AAPL, erin has an empty dashboard."""
    return {
        BOB: Dashboard(
            id=BOB,
            stocks=[
                Stock(
                    id=10,
                    name="Apple",
                    stock_ref=AAPL,
                    categories=[
                        Category(id=20, name="Valuation", modules=[
                            make_module(1, now - timedelta(days=10), now - timedelta(days=3)),
                        ]),
                        Category(id=21, name="News", modules=[
                            make_module(2, now - timedelta(days=12)),
                        ]),
                    ],
                ),
                Stock(
                    id=11,
                    name="Microsoft",
                    stock_ref=MSFT,
                    categories=[
                        Category(id=22, name="News", modules=[
                            make_module(3, now - timedelta(days=1)),
                        ]),
                    ],
                ),
            ],
        ),
        CAROL: Dashboard(
            id=CAROL,
            stocks=[
                Stock(
                    id=12,
                    name="Apple",
                    stock_ref=AAPL,
                    categories=[
                        Category(id=23, name="Valuation", modules=[
                            make_module(4, now - timedelta(days=2)),
                        ]),
                    ],
                ),
            ],
        ),
        ERIN: Dashboard(id=ERIN, stocks=[]),
    }


@pytest.fixture
def store(monkeypatch: pytest.MonkeyPatch, dashboards: dict[int, Dashboard]) -> InMemoryStore:
    """Install the in-memory store in place of every repository."""
    in_memory = InMemoryStore(
        users=[
            UserRecord(id=ALICE, username="alice"),
            UserRecord(id=BOB, username="bob", is_analyst=True),
            UserRecord(id=CAROL, username="carol", is_analyst=True),
            UserRecord(id=DAVE, username="dave", is_analyst=True),
            UserRecord(id=ERIN, username="erin", is_analyst=True),
            UserRecord(id=FRANK, username="frank"),
            UserRecord(id=GINA, username="gina"),
        ],
        subscriptions={ALICE: [BOB, CAROL], GINA: [DAVE]},
        dashboards=dashboards,
        layouts={20: [LayoutRecord(id=1, category_id=20, layout={"x": 0, "y": 0, "w": 4})]},
    )
    in_memory.install(monkeypatch)
    return in_memory


@pytest.fixture
def bob() -> AnalystRef:
    return AnalystRef(username="bob", id=BOB)


@pytest.fixture
def carol() -> AnalystRef:
    return AnalystRef(username="carol", id=CAROL)


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app."""
    from app.api.app import create_api_app

    app = create_api_app()
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict:
    """Authorization headers for alice."""
    from app.core.security import create_access_token

    return {"Authorization": f"Bearer {create_access_token(username='alice')}"}
