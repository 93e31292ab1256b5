"""Tests for the transient refresh acknowledgment."""

from __future__ import annotations

from client_lifecycle.refresh_indicator import CLEAR_AFTER_MS, RefreshIndicator


def test_default_clear_delay_is_two_seconds():
    assert CLEAR_AFTER_MS == 2000


def test_flash_shows_then_clears(wait_until):
    indicator = RefreshIndicator(clear_after_ms=30)

    indicator.flash()
    assert indicator.visible is True

    assert wait_until(lambda: not indicator.visible)


def test_dismiss_hides_immediately():
    indicator = RefreshIndicator(clear_after_ms=5000)
    indicator.flash()

    indicator.dismiss()

    assert indicator.visible is False
