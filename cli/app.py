"""Full-screen prompt_toolkit application hosting a console feature.

The app owns the terminal: it builds the Application, hands the feature a
Display, runs the event loop and reports terminal resizes back to the
feature before the next frame is drawn.
"""

import logging
from typing import Callable, Optional, Tuple

from prompt_toolkit.application import Application
from prompt_toolkit.key_binding import DynamicKeyBindings, KeyBindings, merge_key_bindings
from prompt_toolkit.key_binding.bindings.focus import focus_next, focus_previous
from prompt_toolkit.layout import DynamicContainer, Layout, Window

from cli.display import Display
from cli.widgets import CONSOLE_STYLE

logger = logging.getLogger(__name__)


def _navigation_bindings(scroll: Callable[[int], bool], page_size: Callable[[], int]) -> KeyBindings:
    """Focus navigation; up/down and paging scroll the active panel when it can."""
    kb = KeyBindings()
    for key in ("tab", "right"):
        kb.add(key)(focus_next)
    for key in ("s-tab", "left"):
        kb.add(key)(focus_previous)

    @kb.add("down")
    def _down(event):
        if not scroll(1):
            focus_next(event)

    @kb.add("up")
    def _up(event):
        if not scroll(-1):
            focus_previous(event)

    @kb.add("pagedown")
    def _page_down(event):
        scroll(page_size())

    @kb.add("pageup")
    def _page_up(event):
        scroll(-page_size())

    return kb


class ConsoleApp:
    def __init__(self, input=None, output=None):
        self.display = Display()
        self.started = False
        self._feature = None
        self._last_size: Optional[Tuple[int, int]] = None
        self._placeholder = Window()

        self.application = Application(
            layout=Layout(DynamicContainer(self._get_root)),
            key_bindings=merge_key_bindings([
                _navigation_bindings(self._scroll, self._page_size),
                DynamicKeyBindings(self._get_window_bindings),
            ]),
            style=CONSOLE_STYLE,
            full_screen=True,
            mouse_support=True,
            before_render=self._on_before_render,
            input=input,
            output=output,
        )
        self.display.application = self.application

    def run(self, feature) -> int:
        """Run *feature* until the operator quits; returns the exit status."""
        self._feature = feature
        feature.prepare(self)
        feature.startup(self.display)
        if self.display.quit_requested:
            return 0
        result = self.application.run()
        logger.info("console stopped")
        return result or 0

    def notify_startup_complete(self) -> None:
        self.started = True
        logger.info("startup complete")

    def _scroll(self, lines: int) -> bool:
        return self._feature is not None and self._feature.scroll(lines)

    def _page_size(self) -> int:
        return max(1, self.display.screen_size()[1] // 2)

    def _get_root(self):
        window = self.display.window
        return window if window is not None else self._placeholder

    def _get_window_bindings(self):
        window = self.display.window
        return window.key_bindings if window is not None else None

    def _on_before_render(self, _app) -> None:
        size = self.display.screen_size()
        previous, self._last_size = self._last_size, size
        if previous is not None and previous != size and self._feature is not None:
            self._feature.resized(*size)
