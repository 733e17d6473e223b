"""Console controller: the panel stack plus the function-key action bar.

Layout of the console window, top to bottom:

    +-------------------------------------------------+
    | panel area (only the active panel is rendered)  |
    +-------------------------------------------------+
    | <App Info <F1>> <Tenants <F2>>      <Quit <F10>>|
    +-------------------------------------------------+

Panels are registered with ``add`` while the controller is constructed, in
order; the n-th panel gets the F<n> accelerator (n <= 9).
"""

import logging
import threading
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from prompt_toolkit.layout import VSplit, Window
from prompt_toolkit.layout.containers import to_container

from cli.panels import Panel
from cli.panels.app_info import AppInfoPanel
from cli.panels.tenants import TenantsPanel
from cli.widgets import BUTTON_ACTIVE_THEME, BUTTON_THEME, Button, EventFlag, VBox
from lib.errors import UIConstructionError

logger = logging.getLogger(__name__)


def default_panels() -> List[Panel]:
    return [AppInfoPanel(), TenantsPanel()]


class ConsoleController:
    def __init__(self, feature, panels: Optional[Iterable[Panel]] = None):
        self.feature = feature
        self.display = feature.display
        self.window = feature.window
        self.store = feature.store

        self.active = ""
        self.toggles: Dict[str, Button] = {}
        self._panels: Dict[str, Panel] = {}
        self._order: List[str] = []
        self._sealed = False
        self._lock = threading.RLock()

        self.panel_area = VBox([])
        self.toggle_box = VSplit([], padding=1)
        self.quit_button = self._make_toggle_button("Quit <F10>", "f10", self._quit)
        self.toggle_area = VSplit(
            [self.toggle_box, Window(height=1), self.quit_button],
            padding=1,
            height=1,
        )
        self.window.vbox.pack_start(self.panel_area)
        self.window.vbox.pack_start(self.toggle_area)

        for panel in (default_panels() if panels is None else panels):
            self.add(panel)
        if not self._order:
            raise UIConstructionError("no panels registered")
        self._sealed = True

    @property
    def panels(self) -> Tuple[Panel, ...]:
        return tuple(self._panels[key] for key in self._order)

    def add(self, panel: Panel) -> None:
        """Register *panel* as the next page; only allowed during construction."""
        if self._sealed:
            raise RuntimeError("panels can only be added while the controller is constructed")
        if panel.key in self._panels:
            raise UIConstructionError(f"duplicate panel key: {panel.key}")
        try:
            panel.init(self)
        except Exception as e:
            raise UIConstructionError(f"error init {panel.key} panel: {e}") from e

        ordinal = len(self._order) + 1
        self._panels[panel.key] = panel
        self._order.append(panel.key)
        toggle = self._make_panel_toggle(ordinal, panel)
        self.toggles[panel.key] = toggle
        self.panel_area.pack_start(panel.container)
        self.toggle_box.children.append(to_container(toggle))
        if ordinal == 1:
            self.active = panel.key
            toggle.set_theme(BUTTON_ACTIVE_THEME)
        else:
            toggle.set_theme(BUTTON_THEME)

    def features(self) -> list:
        internals = self.feature.internals
        return internals.features() if internals is not None else []

    def refresh(self) -> None:
        with self._lock, self.display.frozen(self.window, self.panel_area):
            active = self._panels[self.active]
            for key, panel in self._panels.items():
                if key != self.active:
                    panel.hide()
                    self.toggles[key].set_theme(BUTTON_THEME)
            toggle = self.toggles[self.active]
            toggle.set_theme(BUTTON_ACTIVE_THEME)
            self.display.focus(toggle)
            active.show()
            active.refresh()
        logger.info("refreshed %s panel", self.active)

    def scroll(self, lines: int) -> bool:
        """Scroll the active panel; False when it has nothing to scroll."""
        with self._lock:
            return self._panels[self.active].scroll(lines)

    def _make_panel_toggle(self, ordinal: int, panel: Panel) -> Button:
        accel = f"f{ordinal}" if 0 < ordinal < 10 else None
        return self._make_toggle_button(
            f"{panel.name} <F{ordinal}>",
            accel,
            lambda: self._toggle_panel(panel),
        )

    def _make_toggle_button(self, label: str, accel: Optional[str], handler: Callable[[], EventFlag]) -> Button:
        button = Button(label, handler=handler)
        if accel:
            def _accelerate():
                self.display.focus(button)
                button.activate()

            self.window.add_accelerator(accel, _accelerate)
        return button

    def _toggle_panel(self, panel: Panel) -> EventFlag:
        self.active = panel.key
        self.refresh()
        return EventFlag.PASS

    def _quit(self) -> EventFlag:
        self.display.request_quit()
        return EventFlag.STOP
