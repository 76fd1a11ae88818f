"""ASGI entrypoint for the store tracker API."""

from store_tracker.api.app import create_app
from store_tracker.containers import build_container

app = create_app(build_container())
