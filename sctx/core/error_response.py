"""HTTP API errors carrying a status, a reason, details and a cause."""

from __future__ import annotations

import traceback
from http import HTTPStatus
from typing import Any, Iterator

_MISSING = object()


def _status_text(code: int) -> str:
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return ""


def _render(text: str, args: tuple) -> str:
    return text % args if args else text


def _format_details(details: dict[str, Any] | None) -> str:
    if not details:
        return "map[]"
    items = " ".join(f"{key}:{details[key]}" for key in sorted(details))
    return f"map[{items}]"


def _chain(err: BaseException | None) -> Iterator[BaseException]:
    """Yield ``err`` and every error it wraps, outermost first."""
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        yield err
        if isinstance(err, DefaultError):
            inner = err._err
            err = None if inner is err else inner
        else:
            err = err.__cause__


def _carried(err: BaseException, name: str) -> Any:
    """Return the value the first error in the chain carries under ``name``."""
    for item in _chain(err):
        value = getattr(item, name, _MISSING)
        if value is _MISSING:
            continue
        return value() if callable(value) else value
    return _MISSING


class DefaultError(Exception):
    """An error meant to be sent to API clients as a JSON body."""

    def __init__(
        self,
        message: str = "",
        code: int = 0,
        status: str = "",
        id: str = "",
        request_id: str = "",
        reason: str = "",
        debug: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status
        self.id = id
        self.request_id = request_id
        self.reason = reason
        self.debug = debug
        self.details = details
        self._err: BaseException | None = None
        self._stack: traceback.StackSummary | None = None

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, code={self.code!r})"

    @property
    def status_code(self) -> int:
        return self.code

    def _replace(self, **changes: Any) -> DefaultError:
        fields = {
            "message": self.message,
            "code": self.code,
            "status": self.status,
            "id": self.id,
            "request_id": self.request_id,
            "reason": self.reason,
            "debug": self.debug,
            "details": dict(self.details) if self.details is not None else None,
        }
        fields.update(changes)
        new = DefaultError(**fields)
        new._err = self if self._err is self else self._err
        if new._err is not None and new._err is not self:
            new.__cause__ = new._err
        new._stack = self._stack
        return new

    def wrap(self, err: BaseException | None) -> None:
        """Set the wrapped cause in place."""
        self._err = err
        self._stack = None
        if err is not None and err is not self:
            self.__cause__ = err

    def with_wrap(self, err: BaseException | None) -> DefaultError:
        """Return a copy wrapping ``err``."""
        new = self._replace()
        new.wrap(err)
        return new

    def with_trace(self, err: BaseException) -> DefaultError:
        """Wrap ``err`` in place, recording the current stack if none is known."""
        if not self.stack_trace():
            self.wrap(err)
            self._stack = traceback.StackSummary.from_list(traceback.extract_stack()[:-1])
        else:
            self.wrap(err)
        return self

    def stack_trace(self) -> list[traceback.FrameSummary]:
        """Return the stack recorded for the wrapped error, or an empty list."""
        err = self._err
        if err is None or err is self:
            return []
        if self._stack:
            return list(self._stack)
        for item in _chain(err):
            if isinstance(item, DefaultError):
                if item._stack:
                    return list(item._stack)
                continue
            if item.__traceback__ is not None:
                return list(traceback.extract_tb(item.__traceback__))
        return []

    def matches(self, other: Any) -> bool:
        """Tell whether ``other`` is the same kind of API error."""
        if not isinstance(other, DefaultError):
            return False
        return (
            self.message == other.message
            and self.status == other.status
            and self.id == other.id
            and self.code == other.code
        )

    def with_id(self, id: str) -> DefaultError:
        return self._replace(id=id)

    def with_reason(self, reason: str, *args: Any) -> DefaultError:
        return self._replace(reason=_render(reason, args))

    def with_error(self, message: str, *args: Any) -> DefaultError:
        return self._replace(message=_render(message, args))

    def with_debug(self, debug: str, *args: Any) -> DefaultError:
        return self._replace(debug=_render(debug, args))

    def with_detail(self, key: str, detail: Any) -> DefaultError:
        new = self._replace()
        if new.details is None:
            new.details = {}
        new.details[key] = detail
        return new

    def with_detailf(self, key: str, message: str, *args: Any) -> DefaultError:
        return self.with_detail(key, _render(message, args))

    def verbose(self) -> str:
        """Return every field on its own line, followed by the stack trace."""
        text = (
            f"id={self.id}\n"
            f"rid={self.request_id}\n"
            f"error={self.message}\n"
            f"reason={self.reason}\n"
            f"details={_format_details(self.details)}\n"
            f"debug={self.debug}\n"
        )
        return text + "".join(traceback.format_list(self.stack_trace()))

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body, leaving out empty optional fields."""
        body: dict[str, Any] = {}
        if self.id:
            body["id"] = self.id
        if self.code:
            body["code"] = self.code
        if self.status:
            body["status"] = self.status
        if self.request_id:
            body["request"] = self.request_id
        if self.reason:
            body["reason"] = self.reason
        if self.debug:
            body["debug"] = self.debug
        body["message"] = self.message
        if self.details:
            body["details"] = dict(self.details)
        return body


class RecordNotFoundError(Exception):
    """Raised by storage code when a record does not exist."""

    def __init__(self, message: str = "record not found") -> None:
        super().__init__(message)


def to_default_error(err: BaseException, request_id: str = "") -> DefaultError:
    """Describe any exception as a :class:`DefaultError`, taking what it carries."""
    de = DefaultError(
        message=str(err),
        code=HTTPStatus.INTERNAL_SERVER_ERROR.value,
        request_id=request_id,
        details={},
    )
    de.wrap(err)

    reason = _carried(err, "reason")
    if reason is not _MISSING:
        de.reason = reason
    rid = _carried(err, "request_id")
    if rid is not _MISSING and rid:
        de.request_id = rid
    details = _carried(err, "details")
    if details is not _MISSING and details is not None:
        de.details = details
    status = _carried(err, "status")
    if status is not _MISSING and status:
        de.status = status
    code = _carried(err, "status_code")
    if code is not _MISSING and code:
        de.code = code
    debug = _carried(err, "debug")
    if debug is not _MISSING:
        de.debug = debug
    error_id = _carried(err, "id")
    if error_id is not _MISSING:
        de.id = error_id

    if not de.status:
        de.status = _status_text(de.code)
    return de


def _predefined(code: HTTPStatus, message: str) -> DefaultError:
    return DefaultError(message=message, code=code.value, status=code.phrase)


ERR_NOT_FOUND = _predefined(HTTPStatus.NOT_FOUND, "The requested resource could not be found")
ERR_UNAUTHORIZED = _predefined(HTTPStatus.UNAUTHORIZED, "The request could not be authorized")
ERR_FORBIDDEN = _predefined(HTTPStatus.FORBIDDEN, "The requested action was forbidden")
ERR_INTERNAL_SERVER_ERROR = _predefined(
    HTTPStatus.INTERNAL_SERVER_ERROR,
    "An internal server error occurred, please contact the system administrator",
)
ERR_BAD_REQUEST = _predefined(
    HTTPStatus.BAD_REQUEST, "The request was malformed or contained invalid parameters"
)
ERR_UNSUPPORTED_MEDIA_TYPE = _predefined(
    HTTPStatus.UNSUPPORTED_MEDIA_TYPE, "The request is using an unknown content type"
)
ERR_CONFLICT = _predefined(
    HTTPStatus.CONFLICT, "The resource could not be created due to a conflict"
)