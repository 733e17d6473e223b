import argparse

import pytest
from prompt_toolkit.application.current import set_app
from prompt_toolkit.data_structures import Size
from prompt_toolkit.input import DummyInput
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout.mouse_handlers import MouseHandlers
from prompt_toolkit.layout.screen import Screen, WritePosition
from prompt_toolkit.output import DummyOutput

from cli.app import ConsoleApp
from cli.console import ConsoleFeature

from conftest import TABLE, TAG, CREATED, press


class SizedOutput(DummyOutput):
    def __init__(self, columns, rows):
        super().__init__()
        self.size = Size(rows=rows, columns=columns)

    def get_size(self):
        return self.size


def start_console(host, monkeypatch, columns=120, rows=40):
    """Run the real app lifecycle up to the event loop."""
    app = ConsoleApp(input=DummyInput(), output=SizedOutput(columns, rows))
    monkeypatch.setattr(app.application, "run", lambda: 0)
    feature = ConsoleFeature().set_db_tag(TAG).set_table_name(TABLE).make()
    feature.setup(argparse.Namespace(prefix=""), host)
    assert app.run(feature) == 0
    return app, feature


def render(app):
    size = app.application.output.get_size()
    screen = Screen()
    # A real redraw bumps the render counter, invalidating per-render caches.
    app.application.render_counter += 1
    with set_app(app.application):
        app.application.layout.container.write_to_screen(
            screen,
            MouseHandlers(),
            WritePosition(xpos=0, ypos=0, width=size.columns, height=size.rows),
            "",
            False,
            None,
        )
        screen.draw_all_floats()
    lines = []
    for y in range(size.rows):
        row = screen.data_buffer[y]
        lines.append("".join(row[x].char for x in range(size.columns)).rstrip())
    return "\n".join(lines)


@pytest.mark.parametrize("columns, rows", [(120, 40), (100, 30)])
def test_tenant_row_renders_when_it_fits(db, host, add_tenant, monkeypatch, columns, rows):
    add_tenant("https://a.example")
    app, feature = start_console(host, monkeypatch, columns, rows)

    press(feature.window, Keys.F2)
    panel = feature.controller.panels[1]
    screen = render(app)

    assert not panel.overflowing
    assert "Window too small" not in screen
    assert "[1] https://a.example (lic=<nil>)" in screen
    assert "Enable Debug" in screen
    assert "Allow Unlicensed" in screen
    assert "Quit <F10>" in screen


def test_tenant_rows_render_with_scrollbar_when_they_overflow(db, host, add_tenant, monkeypatch):
    for n in range(10):
        add_tenant(f"https://t{n}.example", created_at=CREATED.replace(day=n + 1))
    app, feature = start_console(host, monkeypatch)

    press(feature.window, Keys.F2)
    panel = feature.controller.panels[1]
    screen = render(app)

    assert panel.overflowing
    assert "Window too small" not in screen
    assert "[1] https://t0.example (lic=<nil>)" in screen
    assert "Enable Debug" in screen
    assert "Quit <F10>" in screen


def test_rows_still_render_after_resize(db, host, add_tenant, monkeypatch):
    add_tenant("https://a.example")
    app, feature = start_console(host, monkeypatch)
    press(feature.window, Keys.F2)

    app.application.output.size = Size(rows=24, columns=80)
    feature.resized(80, 24)
    screen = render(app)

    assert "Window too small" not in screen
    assert "[1] https://a.example (lic=<nil>)" in screen


def test_focused_row_button_shows_its_tooltip(db, host, add_tenant, monkeypatch):
    add_tenant("https://a.example", context='{"debug":"true"}')
    app, feature = start_console(host, monkeypatch)
    press(feature.window, Keys.F2)
    panel = feature.controller.panels[1]

    assert "Click to" not in render(app)

    app.application.layout.focus(panel.rows[0].debug_button)
    with set_app(app.application):
        assert panel.focused_tooltip() == "Click to disable per-tenant UI debugging"
    assert "Click to disable per-tenant UI debugging" in render(app)

    app.application.layout.focus(panel.rows[0].unlicensed_button)
    assert "Click to allow unlicensed installations for this tenant" in render(app)


def test_app_info_renders(db, host, monkeypatch):
    app, _ = start_console(host, monkeypatch)
    screen = render(app)

    assert "Window too small" not in screen
    assert "2 applications, 3 total versions" in screen
    assert " - [1.1.0] https://addon.example/v1.1/atlassian-connect.json" in screen
