"""prompt_toolkit building blocks for the console window.

Everything here is built from plain Window/FormattedTextControl pieces, the
same way the full-screen scroll view is, so theming and activation stay under
the console's control.
"""

from enum import Enum
from typing import Callable, Optional

from prompt_toolkit.application.current import get_app
from prompt_toolkit.filters import Condition
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import ConditionalContainer, HSplit, Window, WindowAlign
from prompt_toolkit.layout.containers import to_container
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.mouse_events import MouseEventType
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Frame

BUTTON_THEME = "button"
BUTTON_ACTIVE_THEME = "toggle-button-active"
PANEL_FIRST_FRAME_THEME = "panel-frame-theme-first"
PANEL_DEFAULT_FRAME_THEME = "panel-frame-theme-default"

# Border line drawn above a row for each row theme.
FRAME_BORDERS = {
    PANEL_FIRST_FRAME_THEME: "─",
    PANEL_DEFAULT_FRAME_THEME: " ",
}

CONSOLE_STYLE = Style.from_dict({
    "frame.border": "#5f8787",
    "frame.label": "bold",
    BUTTON_THEME: "bg:#005f00 #ffffff",
    "button.focused": "reverse",
    BUTTON_ACTIVE_THEME: "bg:#228b22 #ffffff bold",
    PANEL_FIRST_FRAME_THEME: "#5f8787",
    PANEL_DEFAULT_FRAME_THEME: "",
    "status.error": "#ff5f5f bold",
    "status.hint": "italic #8a8a8a",
})


class EventFlag(Enum):
    """Verdict returned by event handlers."""

    PASS = "pass"
    STOP = "stop"


class Freezable:
    """Redraw suspension counter, see Display.frozen()."""

    _freeze_depth = 0

    def freeze(self) -> None:
        self._freeze_depth += 1

    def thaw(self) -> None:
        self._freeze_depth = max(0, self._freeze_depth - 1)

    @property
    def frozen(self) -> bool:
        return self._freeze_depth > 0


class VBox(Freezable, HSplit):
    """Vertical box whose children are rebuilt in place."""

    def pack_start(self, widget) -> None:
        self.children.append(to_container(widget))

    def clear(self) -> None:
        del self.children[:]


class Button:
    """Single-line themed button.

    Enter, Space or a mouse click call ``handler`` (no arguments), which
    returns an EventFlag.  ``tooltip`` is shown by the owning panel while
    the button has the focus.
    """

    def __init__(
        self,
        label: str,
        handler: Optional[Callable[[], EventFlag]] = None,
        width: Optional[int] = None,
        theme: str = BUTTON_THEME,
        tooltip: str = "",
    ):
        self.label = label
        self.handler = handler
        self.width = width
        self.theme = theme
        self.tooltip = tooltip

        kb = KeyBindings()

        @kb.add(" ")
        @kb.add("enter")
        def _activate(event):
            self.activate()

        self.control = FormattedTextControl(
            self._get_text_fragments,
            key_bindings=kb,
            focusable=True,
            show_cursor=False,
        )
        self.window = Window(
            self.control,
            align=WindowAlign.CENTER,
            width=self._get_width,
            height=1,
            style=self._get_style,
            dont_extend_width=True,
            dont_extend_height=True,
        )

    def activate(self) -> EventFlag:
        if self.handler is None:
            return EventFlag.PASS
        return self.handler()

    def set_theme(self, theme: str) -> None:
        self.theme = theme

    def _get_width(self) -> Dimension:
        return Dimension.exact(self.width or len(self.label) + 2)

    def _get_style(self) -> str:
        style = f"class:{self.theme}"
        if get_app().layout.has_focus(self.window):
            style += " class:button.focused"
        return style

    def _get_text_fragments(self):
        def mouse_handler(mouse_event):
            if mouse_event.event_type != MouseEventType.MOUSE_UP:
                return NotImplemented
            self.activate()

        return [("[SetCursorPosition]", ""), ("", self.label, mouse_handler)]

    def __pt_container__(self):
        return self.window

    def __repr__(self) -> str:
        return f"<Button {self.label!r} theme={self.theme}>"


class RowFrame:
    """Fixed-height row: one themed border line above ``body``."""

    def __init__(self, body, theme: str, height: int):
        self.theme = theme
        self.body = body
        self.container = HSplit(
            [
                Window(height=1, char=lambda: FRAME_BORDERS[self.theme], style=lambda: f"class:{self.theme}"),
                body,
            ],
            height=Dimension.exact(height),
        )

    def __pt_container__(self):
        return self.container


class ConsoleWindow(Freezable):
    """Titled top-level window holding the console's vertical box.

    Accelerators registered here are installed as application-wide key
    bindings by the console app.
    """

    def __init__(self, title: str):
        self.visible = False
        self.vbox = VBox([])
        self.key_bindings = KeyBindings()
        self.frame = Frame(self.vbox, title=title)
        self.container = ConditionalContainer(self.frame, filter=Condition(lambda: self.visible))

    @property
    def title(self) -> str:
        return self.frame.title

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    def add_accelerator(self, key: str, callback: Callable[[], None]) -> None:
        @self.key_bindings.add(key)
        def _accel(event):
            callback()

    def __pt_container__(self):
        return self.container
