"""Tests for analyst recency."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from app.core.exceptions import NotFoundError
from app.domain import Dashboard
from app.services import recency
from app.services.dashboard_lookup import precomputed_lookup


class TestLatestActivity:
    """Dashboard walk."""

    def test_maxima_over_all_modules(self, dashboards, now):
        result = recency.latest_activity(dashboards[2])
        assert result.last_post == now - timedelta(days=1)
        # module 1 was posted ten days ago but edited three days ago
        assert result.last_update == now - timedelta(days=1)

    def test_update_can_lead_post(self, dashboards, now):
        dashboards[2].stocks = dashboards[2].stocks[:1]
        result = recency.latest_activity(dashboards[2])
        assert result.last_post == now - timedelta(days=10)
        assert result.last_update == now - timedelta(days=3)

    def test_missing_dashboard_is_min_instant(self):
        result = recency.latest_activity(None)
        assert result.last_post == recency.MIN_INSTANT
        assert result.last_update == recency.MIN_INSTANT

    def test_empty_dashboard_is_min_instant(self):
        result = recency.latest_activity(Dashboard(id=5))
        assert result == recency.Recency()

    def test_min_instant_compares_with_real_instants(self, now):
        assert recency.MIN_INSTANT < now
        assert recency.MIN_INSTANT.year == 1


class TestRecencyLookups:
    """Per-analyst accessors."""

    @pytest.mark.asyncio
    async def test_last_post_and_update(self, dashboards, now):
        lookup = precomputed_lookup(dashboards)
        assert await recency.last_post_time(3, lookup) == now - timedelta(days=2)
        assert await recency.last_update_time(3, lookup) == now - timedelta(days=2)

    @pytest.mark.asyncio
    async def test_legacy_names_agree(self, dashboards):
        lookup = precomputed_lookup(dashboards)
        for analyst_id in (2, 3, 4, 5):
            assert await recency.fetch_last_post_time(analyst_id, lookup) == \
                await recency.last_post_time(analyst_id, lookup)
            assert await recency.fetch_last_update_time(analyst_id, lookup) == \
                await recency.last_update_time(analyst_id, lookup)

    @pytest.mark.asyncio
    async def test_analyst_without_dashboard(self, dashboards):
        lookup = precomputed_lookup(dashboards)
        assert await recency.last_post_time(4, lookup) == recency.MIN_INSTANT

    @pytest.mark.asyncio
    async def test_default_lookup_reads_repository(self, store, now):
        assert await recency.last_post_time(2) == now - timedelta(days=1)


class TestGetAnalystRecency:
    """get_analyst_recency."""

    @pytest.mark.asyncio
    async def test_known_analyst(self, store, bob, now):
        response = await recency.get_analyst_recency("bob")
        assert response.analyst == bob
        assert response.last_post_time == now - timedelta(days=1)
        assert isinstance(response.last_update_time, datetime)

    @pytest.mark.asyncio
    async def test_quiet_analyst_reports_sentinel(self, store):
        response = await recency.get_analyst_recency("erin")
        assert response.last_post_time == recency.MIN_INSTANT
        assert response.last_update_time == recency.MIN_INSTANT

    @pytest.mark.asyncio
    async def test_unknown_analyst(self, store):
        with pytest.raises(NotFoundError):
            await recency.get_analyst_recency("nobody")
