"""ASGI entrypoint for the riding school API."""

from riding_school.api.app import create_app
from riding_school.containers import build_container

app = create_app(build_container())
