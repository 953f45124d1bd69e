"""Tests for the announcement service and cache."""

from conference_central.services.announcements import ANNOUNCEMENT_CACHE_KEY
from conference_central.services.cache import InMemoryCache
from tests.conftest import create_conference


def test_no_announcement_until_refreshed(container, organizer) -> None:
    create_conference(container, organizer, name="Tight", max_attendees=2)

    assert container.announcements.get() is None

    message = container.announcements.refresh()

    assert message == (
        "Last chance to attend! The following conferences are nearly sold out: Tight"
    )
    announcement = container.announcements.get()
    assert announcement is not None
    assert announcement.message == message


def test_refresh_lists_conferences_by_name(container, organizer) -> None:
    create_conference(container, organizer, name="Beta", max_attendees=4)
    create_conference(container, organizer, name="Alpha", max_attendees=1)
    create_conference(container, organizer, name="Huge", max_attendees=500)

    message = container.announcements.refresh()

    assert message is not None
    assert message.endswith("Alpha, Beta")


def test_refresh_without_candidates_clears_announcement(container, organizer) -> None:
    create_conference(container, organizer, name="Huge", max_attendees=500)
    container.announcements.cache.set(ANNOUNCEMENT_CACHE_KEY, "earlier")

    assert container.announcements.refresh() is None
    assert container.announcements.get() is None


def test_cache_entries_expire() -> None:
    cache = InMemoryCache()

    cache.set("fresh", "value", ttl_seconds=3600)
    cache.set("stale", "value", ttl_seconds=0)

    assert cache.get("fresh") == "value"
    assert cache.get("stale") is None


def test_cache_entries_without_ttl_persist() -> None:
    cache = InMemoryCache()

    cache.set("key", "value")
    cache.delete("missing")

    assert cache.get("key") == "value"
    cache.delete("key")
    assert cache.get("key") is None
