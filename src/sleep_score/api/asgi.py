"""ASGI entrypoint for the sleep score API."""

from sleep_score.api.app import create_app
from sleep_score.containers import build_container

app = create_app(build_container())
