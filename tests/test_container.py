"""Tests for container wiring."""

import asyncio

from life_dashboard.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.dashboard_service.user_id == settings.dashboard_user_id
    assert container.stats_service.window_days == settings.history_window_days
    assert container.catalog_service.ttl_seconds == settings.catalog_ttl_seconds
    asyncio.run(container.close_resources())
