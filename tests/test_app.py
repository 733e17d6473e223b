from types import SimpleNamespace

import pytest
from prompt_toolkit.input import DummyInput
from prompt_toolkit.keys import Keys
from prompt_toolkit.output import DummyOutput

import cli.app
import lib.log
from cli.app import ConsoleApp
from cli.gonnectian_console import build_parser, main
from db.database import get_engine, unregister_database


class FakeFeature:
    def __init__(self, quit_at_startup=False, scrollable=False):
        self.quit_at_startup = quit_at_startup
        self.scrollable = scrollable
        self.calls = []

    def prepare(self, app):
        self.calls.append("prepare")

    def startup(self, display):
        self.calls.append("startup")
        if self.quit_at_startup:
            display.request_quit()

    def resized(self, width, height):
        self.calls.append(("resized", width, height))

    def scroll(self, lines):
        self.calls.append(("scroll", lines))
        return self.scrollable


@pytest.fixture
def app():
    return ConsoleApp(input=DummyInput(), output=DummyOutput())


def test_run_returns_when_startup_quits(app):
    feature = FakeFeature(quit_at_startup=True)
    assert app.run(feature) == 0
    assert feature.calls == ["prepare", "startup"]


def test_resize_is_forwarded_after_first_frame(app, monkeypatch):
    feature = FakeFeature()
    app._feature = feature
    sizes = iter([(80, 24), (80, 24), (100, 30)])
    monkeypatch.setattr(app.display, "screen_size", lambda: next(sizes))

    for _ in range(3):
        app._on_before_render(app.application)

    assert feature.calls == [("resized", 100, 30)]


class FocusRecorder:
    def __init__(self):
        self.moves = []

    def focus_next(self):
        self.moves.append("next")

    def focus_previous(self):
        self.moves.append("previous")


def fire(app, key):
    layout = FocusRecorder()
    event = SimpleNamespace(app=SimpleNamespace(layout=layout))
    for binding in app.application.key_bindings.get_bindings_for_keys((key,)):
        binding.handler(event)
    return layout.moves


def test_arrows_scroll_a_scrollable_panel(app):
    feature = FakeFeature(scrollable=True)
    app._feature = feature

    assert fire(app, Keys.Down) == []
    assert fire(app, Keys.Up) == []
    assert feature.calls == [("scroll", 1), ("scroll", -1)]


def test_arrows_move_focus_when_nothing_scrolls(app):
    app._feature = FakeFeature()

    assert fire(app, Keys.Down) == ["next"]
    assert fire(app, Keys.Up) == ["previous"]
    assert fire(app, Keys.Right) == ["next"]
    assert fire(app, Keys.BackTab) == ["previous"]


def test_page_keys_scroll_half_a_screen(app):
    feature = FakeFeature(scrollable=True)
    app._feature = feature

    fire(app, Keys.PageDown)
    fire(app, Keys.PageUp)

    # DummyOutput reports 80x40
    assert feature.calls == [("scroll", 20), ("scroll", -20)]


def test_startup_notice(app):
    assert not app.started
    app.notify_startup_complete()
    assert app.started


def test_parser_defaults(monkeypatch):
    monkeypatch.setenv("GONNECTIAN_TENANT_TABLE", "gonnectian_tenants")
    monkeypatch.delenv("GONNECTIAN_DB_TAG", raising=False)
    args = build_parser().parse_args(["--prefix", "prod"])
    assert args.prefix == "prod"
    assert args.table == "gonnectian_tenants"
    assert args.db_tag == "default"
    assert args.descriptor == []


def test_main_runs_console(tmp_path, monkeypatch):
    ran = []

    class StubConsoleApp:
        def run(self, feature):
            ran.append(feature)
            return 0

    monkeypatch.setattr(cli.app, "ConsoleApp", StubConsoleApp)
    monkeypatch.setattr(lib.log, "configure_logging", lambda *a: None)

    try:
        with pytest.raises(SystemExit) as exc:
            main([
                "--db-url", f"sqlite:///{tmp_path / 'main.db'}",
                "--db-tag", "main",
                "--table", "installs",
                "--prefix", "qa",
            ])
        assert exc.value.code == 0
        (feature,) = ran
        assert feature.table_name == "installs"
        assert feature.prefix == "qa"
        assert get_engine("main") is not None
    finally:
        unregister_database("main")


def test_main_rejects_bad_descriptor(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(lib.log, "configure_logging", lambda *a: None)
    try:
        with pytest.raises(SystemExit) as exc:
            main([
                "--db-url", f"sqlite:///{tmp_path / 'main.db'}",
                "--db-tag", "main",
                "--descriptor", str(tmp_path / "missing.json"),
            ])
        assert exc.value.code == 1
        assert "error loading add-on descriptor" in capsys.readouterr().err
    finally:
        unregister_database("main")
