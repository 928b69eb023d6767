"""ASGI entrypoint for the macro_prep API."""

from macro_prep.api.app import create_app
from macro_prep.containers import build_container

app = create_app(build_container())
