"""ASGI entrypoint for the conference central API."""

from conference_central.api.app import create_app
from conference_central.containers import build_container

app = create_app(build_container())
