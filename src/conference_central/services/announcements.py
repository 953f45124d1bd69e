"""Read-through announcement cache."""

from dataclasses import dataclass

from conference_central.domain.models import Announcement
from conference_central.services.cache import Cache
from conference_central.services.conferences import ConferenceService

ANNOUNCEMENT_CACHE_KEY = "RECENT_ANNOUNCEMENTS"


@dataclass
class AnnouncementService:
    """Serves the current announcement and rebuilds it on demand."""

    cache: Cache
    conferences: ConferenceService
    nearly_sold_out_threshold: int = 5
    ttl_seconds: int | None = 3600

    def get(self) -> Announcement | None:
        """Return the cached announcement, if one is set."""
        message = self.cache.get(ANNOUNCEMENT_CACHE_KEY)
        if message is None:
            return None
        return Announcement(message=str(message))

    def refresh(self) -> str | None:
        """Announce nearly sold out conferences and return the message."""
        conferences = self.conferences.list_nearly_sold_out(
            self.nearly_sold_out_threshold
        )
        if not conferences:
            self.cache.delete(ANNOUNCEMENT_CACHE_KEY)
            return None
        names = ", ".join(conference.name for conference in conferences)
        message = (
            "Last chance to attend! The following conferences are nearly sold out: "
            f"{names}"
        )
        self.cache.set(ANNOUNCEMENT_CACHE_KEY, message, self.ttl_seconds)
        return message
