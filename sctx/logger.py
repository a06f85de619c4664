"""Levelled, field-carrying loggers shared by the components of a service."""

from __future__ import annotations

import enum
import inspect
import json
import os
import re
import sys
from dataclasses import dataclass, replace
from datetime import datetime
from typing import TYPE_CHECKING, Any, Mapping, TextIO

if TYPE_CHECKING:
    from .flags import FlagSet

_PLAIN = re.compile(r"[A-Za-z0-9\-._/@^+]*")


class LogLevel(enum.IntEnum):
    """Severity levels; a larger value lets more messages through."""

    PANIC = 0
    FATAL = 1
    ERROR = 2
    WARN = 3
    INFO = 4
    DEBUG = 5
    TRACE = 6

    def __str__(self) -> str:
        return "warning" if self is LogLevel.WARN else self.name.lower()


_LEVEL_NAMES = {str(level): level for level in LogLevel} | {"warn": LogLevel.WARN}


def parse_level(level: str) -> LogLevel:
    """Turn a level name such as ``"debug"`` into a :class:`LogLevel`."""
    try:
        return _LEVEL_NAMES[level.lower()]
    except KeyError:
        raise ValueError(f"not a valid log level: {level!r}") from None


def _value(value: Any) -> str:
    text = str(value)
    return text if _PLAIN.fullmatch(text) else json.dumps(text, ensure_ascii=False)


@dataclass
class _Backend:
    level: LogLevel = LogLevel.INFO
    stream: TextIO | None = None

    def write(self, level: LogLevel, message: str, fields: Mapping[str, Any]) -> None:
        now = datetime.now().astimezone().isoformat(timespec="seconds")
        parts = [f"time={_value(now)}", f"level={level}", f"msg={_value(message)}"]
        parts.extend(f"{key}={_value(value)}" for key, value in sorted(fields.items()))
        stream = self.stream or sys.stderr
        stream.write(" ".join(parts) + "\n")
        stream.flush()


class Logger:
    """A logger bound to a backend and a set of structured fields."""

    def __init__(self, backend: _Backend, fields: Mapping[str, Any] | None = None) -> None:
        self._backend = backend
        self._fields = dict(fields or {})

    def with_field(self, key: str, value: Any) -> Logger:
        return Logger(self._backend, {**self._fields, key: value})

    def with_fields(self, fields: Mapping[str, Any]) -> Logger:
        return Logger(self._backend, {**self._fields, **fields})

    def with_src(self) -> Logger:
        """Return a logger that records the caller's file and line."""
        return self._sourced()

    def level(self) -> str:
        return str(self._backend.level)

    def _sourced(self) -> Logger:
        if "source" in self._fields:
            return self
        stack = inspect.stack(context=0)
        if len(stack) < 3:
            return self.with_field("source", "<???>:1")
        caller = stack[2]
        return self.with_field("source", f"{os.path.basename(caller.filename)}:{caller.lineno}")

    def _emit(self, level: LogLevel, msg: Any, args: tuple, sourced: bool = False) -> None:
        if self._backend.level >= level:
            target = self._sourced() if sourced else self
            self._backend.write(level, msg % args if args else str(msg), target._fields)

    def print(self, *args: Any) -> None:
        self._emit(LogLevel.DEBUG, "[" + " ".join(map(str, args)) + "]", (), True)

    def debug(self, msg: Any, *args: Any) -> None:
        self._emit(LogLevel.DEBUG, msg, args, True)

    def info(self, msg: Any, *args: Any) -> None:
        self._emit(LogLevel.INFO, msg, args)

    def warn(self, msg: Any, *args: Any) -> None:
        self._emit(LogLevel.WARN, msg, args)

    def error(self, msg: Any, *args: Any) -> None:
        self._emit(LogLevel.ERROR, msg, args)

    def fatal(self, msg: Any, *args: Any) -> None:
        """Log the message and exit the process with status 1."""
        self._emit(LogLevel.FATAL, msg, args)
        raise SystemExit(1)

    def panic(self, msg: Any, *args: Any) -> None:
        """Log the message and raise it as a :class:`RuntimeError`."""
        self._emit(LogLevel.PANIC, msg, args)
        raise RuntimeError(msg % args if args else str(msg))


@dataclass
class LoggerConfig:
    default_level: str = "info"
    base_prefix: str = ""


class AppLogger:
    """The logging component: hands out loggers and owns the log level flag."""

    def __init__(self, config: LoggerConfig | None = None) -> None:
        self.config = replace(config) if config is not None else LoggerConfig()
        self.config.default_level = self.config.default_level or "info"
        self._backend = _Backend()
        self._flags: FlagSet | None = None

    def id(self) -> str:
        return "logger"

    def get_logger(self, prefix: str = "") -> Logger:
        full = f"{self.config.base_prefix}.{prefix}".strip(".")
        return Logger(self._backend, {} if full else {"prefix": full})

    def init_flags(self, flags: FlagSet) -> None:
        flags.string(
            "log-level",
            self.config.default_level,
            "Log level: panic | fatal | error | warn | info | debug | trace",
        )
        self._flags = flags

    def activate(self, ctx: Any) -> None:
        """Apply the configured level; raises ValueError for an unknown name."""
        flags = self._flags
        text = flags.get("log-level") if flags is not None else self.config.default_level
        self._backend.level = parse_level(text)

    def stop(self) -> None:
        """Flush whatever has been written to the log stream."""
        (self._backend.stream or sys.stderr).flush()


_DEFAULT_LOGGER = AppLogger(LoggerConfig(default_level="trace", base_prefix="core"))


def global_logger() -> AppLogger:
    """Return the process-wide logging component."""
    return _DEFAULT_LOGGER