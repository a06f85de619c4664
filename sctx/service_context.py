"""The service context: owns components, their flags and their lifecycle."""

from __future__ import annotations

import os
import sys
from typing import Any, Iterable, MutableMapping, Protocol, Sequence

from dotenv import dotenv_values

from .flags import FlagSet
from .logger import AppLogger, Logger, global_logger

DEV_ENV = "dev"
PROD_ENV = "prod"
STAGING_ENV = "staging"


class Component(Protocol):
    """A part of a service with flags and a start/stop lifecycle."""

    def id(self) -> str: ...

    def init_flags(self, flags: FlagSet) -> None: ...

    def activate(self, ctx: ServiceContext) -> None: ...

    def stop(self) -> None: ...


def load_env_file(environ: MutableMapping[str, str] | None = None) -> str | None:
    """Load ``$ENV_FILE`` (or ``.env``) into ``environ`` without overriding keys.

    Returns the path loaded, or None when the default file is absent.
    """
    environ = os.environ if environ is None else environ
    path = environ.get("ENV_FILE") or ".env"
    if not os.path.exists(path):
        if path == ".env":
            return None
        raise FileNotFoundError(f"Loading env({path}): no such file or directory")
    for key, value in dotenv_values(path).items():
        if key not in environ and value is not None:
            environ[key] = value
    return path


class ServiceContext:
    """Registers components, parses their flags and drives their lifecycle."""

    def __init__(
        self,
        name: str = "",
        components: Iterable[Any] = (),
        args: Sequence[str] | None = None,
        environ: MutableMapping[str, str] | None = None,
        app_logger: AppLogger | None = None,
    ) -> None:
        self._name = name
        self._app_logger = app_logger or global_logger()
        self._store: dict[str, Any] = {}
        for component in components:
            self._store.setdefault(component.id(), component)
        self._components: list[Any] = [self._app_logger, *self._store.values()]

        self._flags = FlagSet(name)
        self._flags.string("app-env", DEV_ENV, "Env for service. Ex: dev | stg | prd")
        for component in self._components:
            component.init_flags(self._flags)

        environ = os.environ if environ is None else environ
        load_env_file(environ)
        self._flags.parse(args or [], environ)
        self._logger = self._app_logger.get_logger("serviceContext")

    def load(self) -> None:
        """Activate every component in registration order."""
        self._logger.info("Service context is loading ...")
        for component in self._components:
            component.activate(self)

    def get(self, component_id: str) -> Any | None:
        return self._store.get(component_id)

    def must_get(self, component_id: str) -> Any:
        if component_id not in self._store:
            raise KeyError(f"can not get: {component_id}")
        return self._store[component_id]

    def logger(self, prefix: str) -> Logger:
        return self._app_logger.get_logger(prefix)

    def env_name(self) -> str:
        return self._flags.get("app-env")

    def name(self) -> str:
        return self._name

    def stop(self) -> None:
        """Stop every component in registration order."""
        self._logger.info("Stopping service context")
        for component in self._components:
            component.stop()
        self._logger.info("service context stopped")

    def out_env(self) -> str:
        """Write a sample environment file for every flag to stdout and return it."""
        text = self._flags.sample_envs()
        sys.stdout.write(text)
        return text