"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.responses import JSONResponse

from conference_central.api.auth import current_identity
from conference_central.api.schemas import (
    AnnouncementOut,
    ConferenceForm,
    ConferenceOut,
    ErrorOut,
    ProfileForm,
    ProfileOut,
    ResultOut,
    SessionForm,
    SessionOut,
)
from conference_central.api.tasks import router as tasks_router
from conference_central.app_logging import configure_logging
from conference_central.containers import AppContainer
from conference_central.domain.errors import (
    DomainError,
    FailureKind,
    ProfileNotFoundError,
)
from conference_central.domain.models import Identity, SessionType

STATUS_BY_KIND = {
    FailureKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    FailureKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FailureKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    FailureKind.CONFLICT: status.HTTP_409_CONFLICT,
    FailureKind.TRANSIENT: status.HTTP_503_SERVICE_UNAVAILABLE,
    FailureKind.DEFECT: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(tasks_router)

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        if exc.kind is FailureKind.DEFECT:
            logger.error("Internal failure on %s", request.url.path)
            detail = "Internal error"
        else:
            detail = exc.message
        return JSONResponse(
            status_code=STATUS_BY_KIND[exc.kind],
            content=ErrorOut(code=exc.code.label, detail=detail).model_dump(),
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/profile")
    def save_profile(
        form: ProfileForm,
        identity: Identity = Depends(current_identity),
        state: AppContainer = Depends(_container),
    ) -> ProfileOut:
        """Create or update the caller's profile."""
        profile = state.profiles.upsert(
            identity,
            display_name=form.display_name,
            tee_shirt_size=form.tee_shirt_size,
        )
        return ProfileOut.from_domain(profile)

    @app.get("/profile")
    def get_profile(
        identity: Identity = Depends(current_identity),
        state: AppContainer = Depends(_container),
    ) -> ProfileOut:
        """Return the caller's stored profile."""
        profile = state.profiles.fetch(identity.user_id)
        if profile is None:
            raise ProfileNotFoundError(identity.user_id)
        return ProfileOut.from_domain(profile)

    @app.post("/conferences", status_code=status.HTTP_201_CREATED)
    async def create_conference(
        form: ConferenceForm,
        identity: Identity = Depends(current_identity),
        state: AppContainer = Depends(_container),
    ) -> ConferenceOut:
        """Create a conference organized by the caller."""
        conference = await state.conferences.create(identity, form.to_spec())
        return ConferenceOut.from_domain(conference)

    @app.get("/conferences")
    def list_conferences(
        state: AppContainer = Depends(_container),
    ) -> list[ConferenceOut]:
        """Return all conferences ordered by name."""
        return [ConferenceOut.from_domain(c) for c in state.conferences.list_all()]

    @app.get("/conferences/created")
    def list_created(
        identity: Identity = Depends(current_identity),
        state: AppContainer = Depends(_container),
    ) -> list[ConferenceOut]:
        """Return conferences organized by the caller."""
        conferences = state.conferences.list_owned_by(identity.user_id)
        return [ConferenceOut.from_domain(c) for c in conferences]

    @app.get("/conferences/attending")
    def list_attending(
        identity: Identity = Depends(current_identity),
        state: AppContainer = Depends(_container),
    ) -> list[ConferenceOut]:
        """Return conferences the caller is registered for."""
        conferences = state.registration.list_attended(identity.user_id)
        return [ConferenceOut.from_domain(c) for c in conferences]

    @app.get("/conferences/{conference_key}")
    def get_conference(
        conference_key: str,
        state: AppContainer = Depends(_container),
    ) -> ConferenceOut:
        """Return a single conference."""
        return ConferenceOut.from_domain(state.conferences.get(conference_key))

    @app.post("/conferences/{conference_key}/registration")
    def register(
        conference_key: str,
        identity: Identity = Depends(current_identity),
        state: AppContainer = Depends(_container),
    ) -> ResultOut:
        """Reserve a seat for the caller."""
        state.registration.register(identity, conference_key)
        return ResultOut(result=True)

    @app.delete("/conferences/{conference_key}/registration")
    def unregister(
        conference_key: str,
        identity: Identity = Depends(current_identity),
        state: AppContainer = Depends(_container),
    ) -> ResultOut:
        """Release the caller's seat."""
        state.registration.unregister(identity, conference_key)
        return ResultOut(result=True)

    @app.post(
        "/conferences/{conference_key}/sessions",
        status_code=status.HTTP_201_CREATED,
    )
    def create_session(
        conference_key: str,
        form: SessionForm,
        identity: Identity = Depends(current_identity),
        state: AppContainer = Depends(_container),
    ) -> SessionOut:
        """Add a session to a conference the caller organizes."""
        session = state.catalog.create_session(
            identity, conference_key, form.to_spec()
        )
        return SessionOut.from_domain(session)

    @app.get("/conferences/{conference_key}/sessions")
    def list_sessions(
        conference_key: str,
        type: SessionType | None = None,  # noqa: A002
        state: AppContainer = Depends(_container),
    ) -> list[SessionOut]:
        """Return the sessions of a conference, optionally by type."""
        sessions = state.catalog.list_sessions(conference_key, session_type=type)
        return [SessionOut.from_domain(s) for s in sessions]

    @app.get("/sessions")
    def list_sessions_by_speaker(
        first_name: str,
        last_name: str,
        state: AppContainer = Depends(_container),
    ) -> list[SessionOut]:
        """Return every session given by a speaker."""
        sessions = state.catalog.list_by_speaker(first_name, last_name)
        return [SessionOut.from_domain(s) for s in sessions]

    @app.post("/wishlist/{session_key}")
    def add_to_wishlist(
        session_key: str,
        identity: Identity = Depends(current_identity),
        state: AppContainer = Depends(_container),
    ) -> ResultOut:
        """Add a session to the caller's wishlist."""
        state.wishlist.add(identity, session_key)
        return ResultOut(result=True)

    @app.delete("/wishlist/{session_key}")
    def remove_from_wishlist(
        session_key: str,
        identity: Identity = Depends(current_identity),
        state: AppContainer = Depends(_container),
    ) -> ResultOut:
        """Remove a session from the caller's wishlist."""
        state.wishlist.remove(identity, session_key)
        return ResultOut(result=True)

    @app.get("/wishlist")
    def list_wishlist(
        identity: Identity = Depends(current_identity),
        state: AppContainer = Depends(_container),
    ) -> list[SessionOut]:
        """Return the sessions in the caller's wishlist."""
        sessions = state.wishlist.list_wishlist(identity)
        return [SessionOut.from_domain(s) for s in sessions]

    @app.get("/announcement", response_model=None)
    def get_announcement(
        state: AppContainer = Depends(_container),
    ) -> AnnouncementOut | Response:
        """Return the current announcement, or no content."""
        announcement = state.announcements.get()
        if announcement is None:
            return Response(status_code=status.HTTP_204_NO_CONTENT)
        return AnnouncementOut(message=announcement.message)

    return app
