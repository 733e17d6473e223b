"""Atlas-Gonnect console feature.

The object the host instantiates for the ``gonnectian-console`` command.  It
must be told which database handle and which table hold the tenants before
``make()``; everything else happens in the host lifecycle:

    setup(args, internals) -> prepare(app) -> startup(display) -> resized(w, h)
"""

import logging
import time
from typing import Iterable, List, Optional

from cli.controller import ConsoleController
from cli.panels import Panel
from cli.widgets import ConsoleWindow
from db.database import get_engine
from lib.errors import ConfigError, DBUnavailable, UIConstructionError
from lib.log import fatal
from services.tenant_store import TenantStore

logger = logging.getLogger(__name__)

TAG = "AtlasGonnect"
NAME = "atlas-gonnect"
VERSION = "0.1.0"


class ConsoleFeature:
    tag = TAG
    name = NAME
    version = VERSION

    def __init__(self, panels: Optional[Iterable[Panel]] = None):
        self.prefix = ""
        self.db_tag = ""
        self.table_name = ""
        self.internals = None
        self.app = None
        self.engine = None
        self.store: Optional[TenantStore] = None
        self.display = None
        self.window: Optional[ConsoleWindow] = None
        self.controller: Optional[ConsoleController] = None
        self._panels = panels

    def set_db_tag(self, tag: str) -> "ConsoleFeature":
        self.db_tag = tag
        return self

    def set_table_name(self, table_name: str) -> "ConsoleFeature":
        self.table_name = table_name
        return self

    def make(self) -> "ConsoleFeature":
        """Finish configuration; exits the process if the DB tag or table is missing."""
        try:
            self.store = TenantStore(self.db_tag, self.table_name)
        except ConfigError as e:
            fatal(f"{NAME} console: {e}")
        return self

    def depends(self) -> List[str]:
        return ["database"]

    def title(self) -> str:
        bin_name = getattr(self.internals, "bin_name", NAME)
        host_version = getattr(self.internals, "version", VERSION)
        title = f"Atlas-Gonnect v{VERSION} ({bin_name} {host_version})"
        if self.prefix:
            title += f" [{self.prefix}]"
        return title

    def setup(self, args, internals) -> None:
        self.prefix = getattr(args, "prefix", "") or ""
        self.internals = internals

    def prepare(self, app) -> None:
        self.app = app
        try:
            self.engine = get_engine(self.db_tag)
        except DBUnavailable as e:
            fatal(f"error getting database connection: {e}")
        logger.info("%s (v%s) using database %r, table %r", TAG, VERSION, self.db_tag, self.table_name)

    def startup(self, display) -> None:
        self.display = display
        self.window = ConsoleWindow(self.title())
        display.window = self.window

        try:
            self.controller = ConsoleController(self, self._panels)
        except UIConstructionError as e:
            self.app.notify_startup_complete()
            display.request_quit()
            time.sleep(0.1)  # let the display settle before tearing it down
            display.destroy()
            fatal(f"error constructing curses user interface: {e}")

        self.controller.refresh()
        self.window.show()
        self.app.notify_startup_complete()

    def resized(self, width: int, height: int) -> None:
        logger.info("refreshing on resized: %s, %s", width, height)
        self.refresh()

    def refresh(self) -> None:
        if self.controller is not None:
            self.controller.refresh()

    def scroll(self, lines: int) -> bool:
        return self.controller is not None and self.controller.scroll(lines)
