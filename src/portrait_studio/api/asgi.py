"""ASGI entrypoint for the portrait studio API."""

from portrait_studio.api.app import create_app
from portrait_studio.containers import build_container

app = create_app(build_container())
