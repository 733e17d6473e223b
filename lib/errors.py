"""Exceptions raised by the console.

Fatal ones (ConfigError, DBUnavailable, UIConstructionError) end the
process; the rest are logged where they are caught and leave the tenant
model unchanged.
"""


class ConsoleError(Exception):
    """Base class for every console error."""


class ConfigError(ConsoleError):
    """A required setting (DB tag, table name) was not provided."""


class DBUnavailable(ConsoleError):
    """No database handle is registered under the requested tag."""


class UIConstructionError(ConsoleError):
    """A panel failed to build its widgets."""


class DecodeError(ConsoleError):
    """A tenant context blob is not a JSON object."""


class EncodeError(ConsoleError):
    """A tenant context could not be serialized back to JSON."""


class StoreError(ConsoleError):
    """Reading or writing the tenants table failed."""
