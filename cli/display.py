"""Display handle shared by the console's widgets.

Wraps the prompt_toolkit Application (absent in headless use) and owns the
redraw-suspension discipline: draw requests made while the window is frozen
are deferred and flushed once when the freeze scope exits.
"""

import logging
import shutil
from contextlib import contextmanager
from typing import Generator, Optional, Tuple

from prompt_toolkit.application import Application

from cli.widgets import ConsoleWindow, Freezable

logger = logging.getLogger(__name__)


class Display:
    def __init__(self, application: Optional[Application] = None):
        self.application = application
        self.window: Optional[ConsoleWindow] = None
        self.focused = None
        self.quit_requested = False
        self._draw_pending = False

    def screen_size(self) -> Tuple[int, int]:
        """Return (width, height) of the terminal in cells."""
        if self.application is not None:
            size = self.application.output.get_size()
            return size.columns, size.rows
        cols, rows = shutil.get_terminal_size()
        return cols, rows

    def request_draw(self) -> None:
        if self.window is not None and self.window.frozen:
            self._draw_pending = True
            return
        self._draw_pending = False
        self._invalidate()

    def request_show(self) -> None:
        if self.window is not None:
            self.window.show()
        if self.focused is not None:
            self._apply_focus()

    def request_quit(self) -> None:
        self.quit_requested = True
        if self.application is not None and self.application.is_running:
            self.application.exit(result=0)

    def focus(self, widget) -> None:
        self.focused = widget
        self._apply_focus()

    def destroy(self) -> None:
        if self.application is not None and self.application.is_running:
            self.application.exit(result=1)
        self.application = None
        self.window = None
        self.focused = None

    @contextmanager
    def frozen(self, *targets: Freezable) -> Generator[None, None, None]:
        """Suspend redraws of *targets* for the duration of the block.

        Targets thaw in reverse order; a draw and a show are always requested
        on the way out.
        """
        for target in targets:
            target.freeze()
        try:
            yield
        finally:
            for target in reversed(targets):
                target.thaw()
            self.request_draw()
            self.request_show()

    def _invalidate(self) -> None:
        if self.application is not None:
            self.application.invalidate()

    def _apply_focus(self) -> None:
        if self.application is None:
            return
        try:
            self.application.layout.focus(self.focused)
        except ValueError as e:
            # Not yet attached to the layout; focus is retried on the next show.
            logger.debug("cannot focus %r yet: %s", self.focused, e)
