"""Turn exceptions raised by request handlers into JSON error responses."""

from __future__ import annotations

from typing import Any

from flask import Flask, jsonify

_GENERIC_BODY = {
    "code": 500,
    "status": "internal server error",
    "message": "something went wrong, please try again or contact supporters",
}


def install_recovery(app: Flask, ctx: Any) -> None:
    """Answer unhandled exceptions with JSON; errors with an integer
    ``status_code`` use that code and their ``to_dict()`` body, others a
    generic 500. In debug mode the exception is raised again after logging.
    """

    def _recover(err: Exception) -> Any:
        # The framework's own HTTP errors answer for themselves.
        if callable(getattr(err, "get_response", None)) and hasattr(err, "description"):
            return err
        code = getattr(err, "status_code", None)
        if isinstance(code, int) and not isinstance(code, bool) and code > 0:
            to_dict = getattr(err, "to_dict", None)
            response = jsonify(to_dict() if callable(to_dict) else {"code": code, "message": str(err)})
            response.status_code = code
        else:
            response = jsonify(_GENERIC_BODY)
            response.status_code = 500

        verbose = getattr(err, "verbose", None)
        ctx.logger("service").error("%s \n", verbose() if callable(verbose) else repr(err))
        if app.debug:
            raise err
        return response

    app.register_error_handler(Exception, _recover)