"""Panel contract shared by every page of the console."""

import threading
from abc import ABC, abstractmethod

from prompt_toolkit.filters import Condition
from prompt_toolkit.layout import ConditionalContainer


class Panel(ABC):
    """One switchable page of the console window.

    Subclasses build their widget tree in ``init`` and assign it to
    ``self.root``; the controller mounts ``container``, which only renders
    while the panel is shown.
    """

    key: str = ""
    name: str = ""

    def __init__(self):
        self.controller = None
        self.root = None
        self.visible = False
        self._lock = threading.RLock()
        self._container = None

    @abstractmethod
    def init(self, controller) -> None:
        """Build the widget tree; raise on failure."""

    @abstractmethod
    def refresh(self) -> None:
        """Rebuild contents from current external state."""

    def scroll(self, lines: int) -> bool:
        """Scroll the panel body by *lines*; False when it has nothing to scroll."""
        return False

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    @property
    def container(self) -> ConditionalContainer:
        if self._container is None:
            self._container = ConditionalContainer(self.root, filter=Condition(lambda: self.visible))
        return self._container

    def __repr__(self) -> str:
        return f"<{type(self).__name__} key={self.key!r} visible={self.visible}>"
