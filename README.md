# sctx

A small toolkit for building services around a shared **service context**:

- `sctx.service_context.ServiceContext` holds named components, reads
  configuration from flags, environment variables and an optional `.env`
  file, and activates and stops the components in order.
- `sctx.flags.FlagSet` defines string, integer and boolean flags that can also
  be set from environment variables, and renders a usage text
  (`usage()`) and a commented sample environment file (`sample_envs()`).
- `sctx.logger.AppLogger` is a component that hands out `Logger` objects
  carrying structured fields, with its level set by the `log-level` flag.
  `sctx.logger.global_logger()` returns the process-wide instance.
- `sctx.core` provides HTTP-style errors (`DefaultError`, `to_default_error`,
  `RecordNotFoundError` and predefined errors such as `ERR_NOT_FOUND`),
  response envelopes (`success_response`, `response_data`), a compact
  identifier type (`UID`), a timestamped `SQLModel` and a `recovered`
  context manager that logs exceptions instead of letting them propagate.
- `sctx.web` provides `WebServer`, a component holding a Flask application
  with `gin-port` and `gin-mode` flags, and `install_recovery`, which turns
  unhandled exceptions into JSON error responses.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from sctx.service_context import ServiceContext
from sctx.web.server import WebServer
from sctx.web.recovery import install_recovery
from sctx.core.error_response import DefaultError
from sctx.core.success_response import response_data

server = WebServer("web")
ctx = ServiceContext(
    name="demo",
    components=[server],
    args=["-gin-mode", "release"],
)
ctx.load()

app = server.app()
install_recovery(app, ctx)


@app.get("/items/<int:item_id>")
def get_item(item_id):
    if item_id != 1:
        raise DefaultError(
            "The requested resource could not be found", code=404, status="Not Found"
        ).with_reason("no item %d", item_id)
    return response_data({"id": item_id}).to_dict()


log = ctx.logger("demo")
log.info("listening on port %d", server.port())
app.run(port=server.port())
```

A `DefaultError` raised in a handler is answered with its status code and
`to_dict()` body; any other exception gets a generic 500 JSON body. In
`debug` mode (the default `gin-mode`) the exception is logged and then
raised again, so the example selects `release` mode.

## Configuration

`ServiceContext` parses the `args` it is given (it does not read
`sys.argv`); flags take the forms `-name value`, `-name=value` and, for
booleans, `-name`. Before the arguments are applied, each flag is looked up
in the environment under its name in upper case with `.` and `-` replaced by
`_`. Values from a `.env` file in the working directory are loaded into the
environment first without overriding variables already set; set `ENV_FILE`
to load a different file, which must then exist (`FileNotFoundError`
otherwise).

| Flag         | Environment    | Default                    |
|--------------|----------------|----------------------------|
| `-app-env`   | `APP_ENV`      | `dev`                      |
| `-log-level` | `LOG_LEVEL`    | `trace` (global logger)    |
| `-gin-port`  | `GIN_PORT`     | `3000`                     |
| `-gin-mode`  | `GIN_MODE`     | `debug`                    |

The log level is one of `panic`, `fatal`, `error`, `warn`, `info`, `debug`,
`trace`; an unknown name makes `ctx.load()` raise `ValueError`. Log lines are
written to standard error as `key=value` pairs with the time, level, message
and any fields.

`ServiceContext.out_env()` writes a commented sample of all these variables
to standard output and returns it, ready to save as a `.env` file.

## What it does not do

The package has no command-line program of its own. `WebServer` only creates
and holds the Flask application; serving it (for example with `app.run`) is
up to the caller, and `WebServer.stop()` merely releases the application.