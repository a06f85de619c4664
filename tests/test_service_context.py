import pytest

from sctx.flags import env_name
from sctx.logger import AppLogger, LoggerConfig
from sctx.service_context import (
    DEV_ENV,
    PROD_ENV,
    STAGING_ENV,
    ServiceContext,
    load_env_file,
)


class Recorder:
    def __init__(self, component_id, events, fail=False):
        self.component_id = component_id
        self.events = events
        self.fail = fail
        self.flags = None

    def id(self):
        return self.component_id

    def init_flags(self, flags):
        self.events.append(("init", self.component_id))
        flags.string(f"{self.component_id}-opt", "", "option")
        self.flags = flags

    def activate(self, ctx):
        if self.fail:
            raise RuntimeError("cannot start")
        self.events.append(("activate", self.component_id))

    def stop(self):
        self.events.append(("stop", self.component_id))


@pytest.fixture(autouse=True)
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def make_ctx(components=(), args=None, environ=None, name="svc"):
    return ServiceContext(
        name=name,
        components=components,
        args=args,
        environ={} if environ is None else environ,
        app_logger=AppLogger(LoggerConfig()),
    )


def test_components_registered_and_deduplicated():
    events = []
    first = Recorder("db", events)
    second = Recorder("db", events)
    cache = Recorder("cache", events)
    ctx = make_ctx([first, second, cache])
    assert ctx.get("db") is first
    assert ctx.must_get("cache") is cache
    assert events == [("init", "db"), ("init", "cache")]


def test_get_missing():
    ctx = make_ctx()
    assert ctx.get("nope") is None
    with pytest.raises(KeyError, match="can not get: nope"):
        ctx.must_get("nope")


def test_load_and_stop_in_order():
    events = []
    ctx = make_ctx([Recorder("a", events), Recorder("b", events)])
    events.clear()
    ctx.load()
    ctx.stop()
    assert events == [("activate", "a"), ("activate", "b"), ("stop", "a"), ("stop", "b")]


def test_load_propagates_component_error():
    events = []
    ctx = make_ctx([Recorder("bad", events, fail=True), Recorder("b", events)])
    with pytest.raises(RuntimeError):
        ctx.load()
    assert ("activate", "b") not in events


def test_load_rejects_bad_log_level():
    ctx = make_ctx(environ={env_name("log-level"): "loud"})
    with pytest.raises(ValueError):
        ctx.load()


def test_default_env_and_name():
    ctx = make_ctx(name="orders")
    assert ctx.env_name() == DEV_ENV
    assert ctx.name() == "orders"


def test_env_from_environment():
    ctx = make_ctx(environ={env_name("app-env"): PROD_ENV})
    assert ctx.env_name() == PROD_ENV


def test_env_from_args():
    ctx = make_ctx(args=["-app-env", STAGING_ENV], environ={env_name("app-env"): PROD_ENV})
    assert ctx.env_name() == STAGING_ENV


def test_component_flags_are_parsed():
    events = []
    recorder = Recorder("db", events)
    make_ctx([recorder], environ={env_name("db-opt"): "value"})
    assert recorder.flags.get("db-opt") == "value"


def test_dotenv_file_is_loaded(workdir):
    (workdir / ".env").write_text(f"{env_name('app-env')}={STAGING_ENV}\nEXTRA=1\n")
    environ = {}
    ctx = make_ctx(environ=environ)
    assert ctx.env_name() == STAGING_ENV
    assert environ["EXTRA"] == "1"


def test_dotenv_does_not_override(workdir):
    (workdir / ".env").write_text("EXTRA=file\n")
    environ = {"EXTRA": "process"}
    assert load_env_file(environ) == ".env"
    assert environ["EXTRA"] == "process"


def test_missing_default_env_file_is_fine():
    environ = {}
    assert load_env_file(environ) is None
    assert environ == {}


def test_custom_env_file(workdir):
    path = workdir / "custom.env"
    path.write_text("KEY=val\n")
    environ = {"ENV_FILE": str(path)}
    assert load_env_file(environ) == str(path)
    assert environ["KEY"] == "val"


def test_missing_custom_env_file_raises():
    with pytest.raises(FileNotFoundError):
        make_ctx(environ={"ENV_FILE": "absent.env"})


def test_logger_writes(capsys):
    ctx = make_ctx()
    ctx.logger("orders").error("failed %d", 2)
    assert 'msg="failed 2"' in capsys.readouterr().err


def test_out_env(capsys):
    make_ctx().out_env()
    out = capsys.readouterr().out
    assert "## Env for service. Ex: dev | stg | prd (-app-env)" in out
    assert f'#{env_name("app-env")}="dev"' in out
    assert "(-log-level)" in out