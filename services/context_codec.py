"""Per-tenant context blob codec.

The context column holds a JSON object written by several parties (the
add-on itself, this console, other tooling).  Only a handful of keys mean
anything here; every other key is carried through decode/encode untouched.

Recognised keys:
  debug               "true" / "false" (a string, not a boolean)
  allowed-unlicensed  boolean
  reject              opaque, dropped when unlicensed use is allowed
  license             opaque, shown in the tenant row header
"""

import json
import logging
from typing import Any, Dict

from lib.errors import DecodeError, EncodeError

logger = logging.getLogger(__name__)

DEBUG_KEY = "debug"
ALLOWED_UNLICENSED_KEY = "allowed-unlicensed"
REJECT_KEY = "reject"
LICENSE_KEY = "license"

# Substituted for an empty context column.
EMPTY_CONTEXT = '{"debug":"false"}'


def parse_context(raw: str) -> Dict[str, Any]:
    """Parse *raw* as a JSON object, raising DecodeError otherwise."""
    if not raw:
        raw = EMPTY_CONTEXT
    try:
        value = json.loads(raw)
    except ValueError as e:
        raise DecodeError(str(e)) from e
    if not isinstance(value, dict):
        raise DecodeError(f"expected a JSON object, got {type(value).__name__}")
    return value


def decode_context(raw: str) -> Dict[str, Any]:
    """Lenient decode: malformed blobs are logged and read as ``{}``."""
    try:
        return parse_context(raw)
    except DecodeError as e:
        logger.error("error parsing tenant context: %s", e)
        return {}


def encode_context(ctx: Dict[str, Any]) -> bytes:
    try:
        text = json.dumps(ctx, separators=(",", ":"), sort_keys=True, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise EncodeError(str(e)) from e
    return text.encode("utf-8")


def format_license(value: Any) -> str:
    """Render the opaque license value for the row header."""
    if value is None:
        return "<nil>"
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, separators=(",", ":"), sort_keys=True)


class TenantContext:
    """Typed view over a decoded context dict.

    The wrapped dict is mutated in place so unknown keys survive.
    """

    def __init__(self, data: Dict[str, Any]):
        self.data = data

    @classmethod
    def decode(cls, raw: str) -> "TenantContext":
        return cls(decode_context(raw))

    def encode(self) -> bytes:
        return encode_context(self.data)

    @property
    def debug(self) -> bool:
        value = self.data.get(DEBUG_KEY)
        return isinstance(value, str) and value == "true"

    @property
    def allowed_unlicensed(self) -> bool:
        value = self.data.get(ALLOWED_UNLICENSED_KEY)
        return isinstance(value, bool) and value

    @property
    def license(self) -> Any:
        return self.data.get(LICENSE_KEY)

    def toggle_debug(self) -> None:
        self.data[DEBUG_KEY] = "false" if self.data.get(DEBUG_KEY) == "true" else "true"

    def toggle_unlicensed(self) -> None:
        if self.allowed_unlicensed:
            self.data[ALLOWED_UNLICENSED_KEY] = False
        else:
            self.data[ALLOWED_UNLICENSED_KEY] = True
            self.data.pop(REJECT_KEY, None)

    def __repr__(self) -> str:
        return f"<TenantContext {self.data!r}>"
