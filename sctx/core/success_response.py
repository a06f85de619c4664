"""The envelope for successful API responses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def _plain(value: Any) -> Any:
    if callable(getattr(value, "to_dict", None)):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    return value


@dataclass
class SuccessResponse:
    """Response data with optional paging and extra information."""

    data: Any
    paging: Any = None
    extra: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body, leaving out paging and extra when unset."""
        body = {"data": self.data, "paging": self.paging, "extra": self.extra}
        return {
            key: _plain(value)
            for key, value in body.items()
            if key == "data" or value is not None
        }


def success_response(data: Any, paging: Any = None, extra: Any = None) -> SuccessResponse:
    return SuccessResponse(data, paging, extra)


def response_data(data: Any) -> SuccessResponse:
    return SuccessResponse(data)