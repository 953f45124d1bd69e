"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from conference_central.adapters.memory_store import InMemoryStore
from conference_central.adapters.supabase_store import SupabaseStore
from conference_central.adapters.webhook_notification_sink import (
    HttpxWebhookNotificationSink,
)
from conference_central.config import Settings
from conference_central.services.announcements import AnnouncementService
from conference_central.services.cache import InMemoryCache
from conference_central.services.catalog import SessionCatalog
from conference_central.services.conferences import ConferenceService
from conference_central.services.ids import IdentifierAllocator
from conference_central.services.notifications import (
    LoggingNotificationSink,
    NotificationService,
    NotificationSink,
)
from conference_central.services.profiles import ProfileRepository
from conference_central.services.registration import RegistrationService
from conference_central.services.transactions import (
    TransactionalStore,
    TransactionRunner,
)
from conference_central.services.wishlist import WishlistService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: TransactionalStore
    runner: TransactionRunner
    allocator: IdentifierAllocator
    profiles: ProfileRepository
    conferences: ConferenceService
    registration: RegistrationService
    catalog: SessionCatalog
    wishlist: WishlistService
    announcements: AnnouncementService
    notifications: NotificationService
    close_resources: Callable[[], Awaitable[None]]


def _build_store(settings: Settings) -> TransactionalStore:
    if settings.store_backend == "supabase":
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseStore(client)
    return InMemoryStore()


def build_container(
    settings: Settings | None = None,
    store: TransactionalStore | None = None,
    sink: NotificationSink | None = None,
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    resolved_store = store or _build_store(resolved_settings)
    webhook_sink: HttpxWebhookNotificationSink | None = None
    if sink is None:
        if resolved_settings.notification_webhook_url:
            webhook_sink = HttpxWebhookNotificationSink.create(
                resolved_settings.notification_webhook_url
            )
            sink = webhook_sink
        else:
            sink = LoggingNotificationSink()

    runner = TransactionRunner(
        resolved_store, max_attempts=resolved_settings.transaction_max_attempts
    )
    allocator = IdentifierAllocator(resolved_store)
    profiles = ProfileRepository(resolved_store, runner)
    notifications = NotificationService(sink)
    conferences = ConferenceService(
        store=resolved_store,
        runner=runner,
        allocator=allocator,
        profiles=profiles,
        notifications=notifications,
    )
    registration = RegistrationService(resolved_store, runner, profiles)
    catalog = SessionCatalog(resolved_store, runner, allocator)
    wishlist = WishlistService(resolved_store, runner, profiles)
    announcements = AnnouncementService(
        cache=InMemoryCache(),
        conferences=conferences,
        nearly_sold_out_threshold=resolved_settings.nearly_sold_out_threshold,
        ttl_seconds=resolved_settings.announcement_ttl_seconds,
    )

    async def close_resources() -> None:
        if webhook_sink is not None:
            await webhook_sink.close()

    return AppContainer(
        settings=resolved_settings,
        store=resolved_store,
        runner=runner,
        allocator=allocator,
        profiles=profiles,
        conferences=conferences,
        registration=registration,
        catalog=catalog,
        wishlist=wishlist,
        announcements=announcements,
        notifications=notifications,
        close_resources=close_resources,
    )
