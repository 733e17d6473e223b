"""Minimal add-on host: the ordered feature registry the console runs in."""

from typing import Any, List, Optional

BIN_NAME = "gonnectian-console"
HOST_VERSION = "0.1.0"


class Host:
    """Ordered collection of features registered with the add-on host.

    The console only iterates it (the App Info panel looks for features that
    publish add-on descriptors); it never mutates it after startup.
    """

    def __init__(self, features: Optional[List[Any]] = None, bin_name: str = BIN_NAME, version: str = HOST_VERSION):
        self._features: List[Any] = list(features or [])
        self.bin_name = bin_name
        self.version = version

    def add(self, feature: Any) -> "Host":
        self._features.append(feature)
        return self

    def features(self) -> List[Any]:
        return list(self._features)

    def __repr__(self) -> str:
        return f"<Host {self.bin_name} v{self.version} features={len(self._features)}>"
