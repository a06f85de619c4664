"""The web server component holding a Flask application."""

from __future__ import annotations

from typing import Any

from flask import Flask

from ..flags import FlagSet
from ..logger import Logger

DEFAULT_PORT = 3000
DEFAULT_MODE = "debug"
RELEASE_MODE = "release"


class WebServer:
    """A component that creates the HTTP application and owns its port and mode flags."""

    def __init__(self, component_id: str) -> None:
        self._id = component_id
        self._flags: FlagSet | None = None
        self._app: Flask | None = None
        self._logger: Logger | None = None
        self.name = ""

    def id(self) -> str:
        return self._id

    def init_flags(self, flags: FlagSet) -> None:
        flags.integer("gin-port", DEFAULT_PORT, "gin server port. Default 3000")
        flags.string("gin-mode", DEFAULT_MODE, "gin mode (debug | release). Default debug")
        self._flags = flags

    def activate(self, ctx: Any) -> None:
        """Create the application; release mode turns debugging off."""
        self._logger = ctx.logger(self._id)
        self.name = ctx.name()
        mode = self._flags.get("gin-mode") if self._flags is not None else ""
        app = Flask(__name__)
        app.debug = mode != RELEASE_MODE
        self._logger.info("init engine...")
        self._app = app

    def stop(self) -> None:
        """Release the application."""
        self._app = None

    def port(self) -> int:
        """Return the configured port, or 0 before flags are registered."""
        return self._flags.get("gin-port") if self._flags is not None else 0

    def app(self) -> Flask | None:
        """Return the application, or None when not active."""
        return self._app