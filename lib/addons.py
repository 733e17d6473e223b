"""Add-on descriptors published by host features.

An Atlassian Connect add-on is described by a JSON descriptor served from
``<baseUrl>/atlassian-connect.json``; that URL is what a site administrator
pastes into "Upload app".
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Union

DESCRIPTOR_ROUTE = "/atlassian-connect.json"


@dataclass(frozen=True)
class AddonDescriptor:
    name: str
    version: str
    key: str = ""
    base_url: str = ""


class AddonDescriptorProvider(ABC):
    """Contract for host features that publish an add-on descriptor."""

    @abstractmethod
    def plugin_descriptor(self) -> AddonDescriptor:
        ...

    @abstractmethod
    def plugin_installation_url(self) -> str:
        ...


class AddonFeature(AddonDescriptorProvider):
    """A host feature serving one version of one add-on."""

    def __init__(self, descriptor: AddonDescriptor, installation_url: str = ""):
        self.descriptor = descriptor
        self.installation_url = installation_url or (descriptor.base_url.rstrip("/") + DESCRIPTOR_ROUTE)

    def plugin_descriptor(self) -> AddonDescriptor:
        return self.descriptor

    def plugin_installation_url(self) -> str:
        return self.installation_url

    def __repr__(self) -> str:
        return f"<AddonFeature {self.descriptor.name!r} v{self.descriptor.version}>"


def load_addon_feature(path: Union[str, Path]) -> AddonFeature:
    """Build an AddonFeature from an atlassian-connect.json file.

    Raises ValueError when the file lacks a name or a baseUrl.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    name = data.get("name") or data.get("key")
    base_url = data.get("baseUrl")
    if not name or not base_url:
        raise ValueError(f"{path}: descriptor needs a name (or key) and a baseUrl")
    descriptor = AddonDescriptor(
        name=name,
        version=str(data.get("version", "")),
        key=data.get("key", ""),
        base_url=base_url,
    )
    return AddonFeature(descriptor)
