"""Tenants panel: one row per installed tenant with per-row flag toggles.

Each row shows the tenant summary on the left and two buttons on the right:
  - Enable/Disable Debug        flips the "debug" context key
  - Allow/Reject Unlicensed     flips "allowed-unlicensed" (allowing also
                                drops any "reject" marker)

A click works on a copy of the context decoded when the row was built,
writes the tenant back and asks the controller for a refresh.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from prompt_toolkit.application.current import get_app
from prompt_toolkit.filters import Condition
from prompt_toolkit.layout import ConditionalContainer, HSplit, ScrollablePane, VSplit, WindowAlign
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.widgets import Frame, Label

from cli.panels import Panel
from cli.widgets import (
    PANEL_DEFAULT_FRAME_THEME,
    PANEL_FIRST_FRAME_THEME,
    Button,
    EventFlag,
    RowFrame,
    VBox,
)
from db.models import Tenant
from lib.errors import EncodeError, StoreError
from services.context_codec import TenantContext, format_license

logger = logging.getLogger(__name__)

ROW_HEIGHT = 5
BUTTON_WIDTH = 23
TIME_FORMAT = "%Y-%m-%d %H:%M %Z"
EMPTY_TEXT = "(no gonnectian installations present"


def format_timestamp(value: Optional[datetime]) -> str:
    """Format a stored timestamp; naive values are UTC."""
    if value is None:
        return "never"
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.strftime(TIME_FORMAT)


def tenant_row_text(index: int, tenant: Tenant, ctx: TenantContext) -> str:
    text = f"[{index}] {tenant.base_url} (lic={format_license(ctx.license)})"
    text += f"\n (c={format_timestamp(tenant.created_at)} / u={format_timestamp(tenant.updated_at)})"
    if tenant.addon_installed:
        text += "\n  (installed, "
    else:
        text += "\n  (not installed, "
    if ctx.allowed_unlicensed:
        text += " allowed unlicensed, "
    if ctx.debug:
        text += " debugging enabled)"
    else:
        text += " debugging disabled)"
    return text


def list_overflows(num_tenants: int, screen_height: int) -> bool:
    """True when the rows do not fit on screen and the list shows a scrollbar."""
    return num_tenants * ROW_HEIGHT >= screen_height - 7


def list_geometry(num_tenants: int, screen_width: int, screen_height: int) -> Tuple[int, int]:
    """Return the (width, height) requested for the tenant list."""
    width = screen_width - 2 - 2 - 1  # window borders, frame borders, scrollbar
    height = num_tenants * ROW_HEIGHT
    if not list_overflows(num_tenants, screen_height):
        width += 1  # no scrollbar
    else:
        width -= 1
    return max(0, width), height


@dataclass
class TenantRow:
    index: int
    tenant: Tenant
    context: TenantContext
    label: Label
    debug_button: Button
    unlicensed_button: Button
    frame: RowFrame


class TenantsPanel(Panel):
    key = "tenants"
    name = "Tenants"

    def init(self, controller) -> None:
        self.controller = controller
        self.rows: List[TenantRow] = []
        self.empty_label: Optional[Label] = None
        self.overflowing = False

        self.list = VBox([])
        self.pane = ScrollablePane(self.list, show_scrollbar=Condition(lambda: self.overflowing))
        self.status = Label("", style="class:status.error")
        self.hint = Label(self.focused_tooltip, style="class:status.hint")
        self.frame = Frame(
            HSplit([
                self.pane,
                ConditionalContainer(self.status, filter=Condition(lambda: bool(self.status.text))),
                ConditionalContainer(self.hint, filter=Condition(lambda: bool(self.focused_tooltip()))),
            ]),
            title="tenants",
        )
        self.root = self.frame

    def refresh(self) -> None:
        with self._lock:
            self.list.clear()
            self.rows = []
            self.empty_label = None
            self.overflowing = False

            try:
                tenants = self.controller.store.list()
            except StoreError as e:
                logger.error("error listing tenants: %s", e)
                self.frame.title = "tenants"
                self.status.text = str(e)
                return
            self.status.text = ""

            num_tenants = len(tenants)
            self.frame.title = f"{num_tenants} tenants found:"

            if num_tenants == 0:
                self.list.width = None
                self.list.height = None
                self.empty_label = Label(EMPTY_TEXT, align=WindowAlign.CENTER)
                self.list.pack_start(self.empty_label)
                return

            screen_width, screen_height = self.controller.display.screen_size()
            self.overflowing = list_overflows(num_tenants, screen_height)
            width, height = list_geometry(num_tenants, screen_width, screen_height)
            self.list.width = Dimension.exact(width)
            self.list.height = Dimension.exact(height)

            for idx, tenant in enumerate(tenants):
                row = self._make_row(idx, tenant)
                self.rows.append(row)
                self.list.pack_start(row.frame)

    def focused_tooltip(self) -> str:
        """Tooltip of the row button holding the keyboard focus, if any."""
        current = get_app().layout.current_window
        for row in self.rows:
            for button in (row.debug_button, row.unlicensed_button):
                if button.window is current:
                    return button.tooltip
        return ""

    def _make_row(self, idx: int, tenant: Tenant) -> TenantRow:
        ctx = TenantContext.decode(tenant.context)
        label = Label(tenant_row_text(idx + 1, tenant, ctx))

        if ctx.debug:
            debug_label, debug_tooltip = "Disable Debug", "Click to disable per-tenant UI debugging"
        else:
            debug_label, debug_tooltip = "Enable Debug", "Click to enable per-tenant UI debugging"
        debug_button = Button(
            debug_label,
            handler=lambda: self._update(tenant, ctx, TenantContext.toggle_debug),
            width=BUTTON_WIDTH,
            tooltip=debug_tooltip,
        )

        if ctx.allowed_unlicensed:
            unlicensed_label = "Reject Unlicensed"
            unlicensed_tooltip = "Click to reject unlicensed installations for this tenant"
        else:
            unlicensed_label = "Allow Unlicensed"
            unlicensed_tooltip = "Click to allow unlicensed installations for this tenant"
        unlicensed_button = Button(
            unlicensed_label,
            handler=lambda: self._update(tenant, ctx, TenantContext.toggle_unlicensed),
            width=BUTTON_WIDTH,
            tooltip=unlicensed_tooltip,
        )

        body = VSplit(
            [label, HSplit([debug_button, unlicensed_button], width=Dimension.exact(BUTTON_WIDTH))],
            padding=1,
            height=Dimension.exact(ROW_HEIGHT - 1),
        )
        theme = PANEL_FIRST_FRAME_THEME if idx == 0 else PANEL_DEFAULT_FRAME_THEME
        return TenantRow(
            index=idx + 1,
            tenant=tenant,
            context=ctx,
            label=label,
            debug_button=debug_button,
            unlicensed_button=unlicensed_button,
            frame=RowFrame(body, theme, ROW_HEIGHT),
        )

    def _update(self, tenant: Tenant, ctx: TenantContext, mutate: Callable[[TenantContext], None]) -> EventFlag:
        updated = TenantContext(dict(ctx.data))
        mutate(updated)
        try:
            encoded = updated.encode()
        except EncodeError as e:
            logger.error("error encoding tenant context change: %s", e)
            return EventFlag.STOP

        previous = tenant.context
        tenant.context = encoded.decode("utf-8")
        try:
            self.controller.store.save(tenant)
        except StoreError as e:
            tenant.context = previous
            logger.error("error saving tenant database change: %s", e)
            self.status.text = f"error saving tenant database change: {e}"
            self.controller.display.request_draw()
            return EventFlag.STOP

        self.controller.refresh()
        return EventFlag.STOP
