"""Read-only panel listing the add-ons the host serves."""

import logging
from typing import Dict, Iterable, List, Tuple

from prompt_toolkit.layout import HSplit, ScrollablePane
from prompt_toolkit.widgets import Frame, Label

from cli.panels import Panel
from lib.addons import AddonDescriptorProvider

logger = logging.getLogger(__name__)

# Window borders, the action bar and the panel frame borders.
CHROME_HEIGHT = 5


def render_app_info(features: Iterable) -> Tuple[str, str]:
    """Return (body text, frame title) for the given host features.

    Descriptors are grouped by add-on name, one " - [version] url" line per
    descriptor; groups are separated by a blank line.
    """
    groups: Dict[str, List[str]] = {}
    num_versions = 0
    for feature in features:
        if not isinstance(feature, AddonDescriptorProvider):
            continue
        descriptor = feature.plugin_descriptor()
        groups.setdefault(descriptor.name, []).append(
            f" - [{descriptor.version}] {feature.plugin_installation_url()}"
        )
        num_versions += 1
    text = "\n\n".join(name + "\n" + "\n".join(lines) for name, lines in groups.items())
    title = f"{len(groups)} applications, {num_versions} total versions"
    return text, title


class AppInfoPanel(Panel):
    key = "app-info"
    name = "App Info"

    def init(self, controller) -> None:
        self.controller = controller
        self.label = Label("")
        self.pane = ScrollablePane(HSplit([self.label]), show_scrollbar=True, keep_focused_window_visible=False)
        self.frame = Frame(self.pane, title="Application Info")
        self.root = self.frame

    def refresh(self) -> None:
        with self._lock:
            text, title = render_app_info(self.controller.features())
            self.pane.vertical_scroll = 0
            self.label.text = text
            self.frame.title = title
            logger.debug("app info refreshed: %s", title)

    def scroll(self, lines: int) -> bool:
        visible = self.controller.display.screen_size()[1] - CHROME_HEIGHT
        num_lines = len(self.label.text.splitlines())
        max_scroll = max(0, num_lines - visible)
        if max_scroll == 0:
            return False
        self.pane.vertical_scroll = min(max_scroll, max(0, self.pane.vertical_scroll + lines))
        self.controller.display.request_draw()
        return True
