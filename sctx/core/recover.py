"""Swallow and log exceptions escaping a block of code."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from ..logger import Logger, global_logger


@contextmanager
def recovered(logger: Logger | None = None) -> Iterator[None]:
    """Log any exception raised in the block instead of propagating it."""
    try:
        yield
    except Exception as exc:
        (logger or global_logger().get_logger("recovered")).error("%s", exc)