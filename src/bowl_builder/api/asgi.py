"""ASGI entrypoint for the bowl builder API."""

from bowl_builder.api.app import create_app
from bowl_builder.containers import build_container

app = create_app(build_container())
