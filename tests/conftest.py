import argparse
import json
from datetime import datetime

import pytest
from sqlalchemy import insert, select

from cli.console import ConsoleFeature
from cli.display import Display
from db.database import register_database, unregister_database
from db.models import tenant_table
from lib.addons import AddonDescriptor, AddonFeature
from lib.host import Host

TAG = "test"
TABLE = "tenants"
CREATED = datetime(2023, 1, 2, 3, 4)


class RecordingDisplay(Display):
    """Headless display with a fixed screen size that counts real redraws."""

    def __init__(self, width=120, height=40):
        super().__init__()
        self.size = (width, height)
        self.draws = 0

    def screen_size(self):
        return self.size

    def _invalidate(self):
        self.draws += 1


class StubApp:
    def __init__(self):
        self.startup_notices = 0

    def notify_startup_complete(self):
        self.startup_notices += 1


def press(window, key):
    """Fire the accelerator bound to *key* on the console window."""
    bindings = window.key_bindings.get_bindings_for_keys((key,))
    for binding in bindings:
        binding.handler(None)
    return len(bindings)


def read_context(engine, client_key):
    table = tenant_table(TABLE)
    with engine.connect() as conn:
        raw = conn.execute(select(table.c.context).where(table.c.client_key == client_key)).scalar_one()
    return json.loads(raw)


@pytest.fixture
def db(tmp_path):
    engine = register_database(TAG, f"sqlite:///{tmp_path / 'gonnectian.db'}")
    tenant_table(TABLE).create(engine)
    yield engine
    unregister_database(TAG)


@pytest.fixture
def add_tenant(db):
    table = tenant_table(TABLE)

    def _add(base_url, context="", installed=True, created_at=CREATED, client_key=None):
        key = client_key or base_url
        with db.begin() as conn:
            conn.execute(insert(table).values(
                client_key=key,
                base_url=base_url,
                addon_installed=installed,
                context=context,
                created_at=created_at,
                updated_at=created_at,
            ))
        return key

    return _add


@pytest.fixture
def host():
    return Host([
        AddonFeature(AddonDescriptor("Gonnectian", "1.0.0", base_url="https://addon.example/v1")),
        object(),
        AddonFeature(AddonDescriptor("Gonnectian", "1.1.0", base_url="https://addon.example/v1.1")),
        AddonFeature(AddonDescriptor("Macro Pack", "0.3.2", base_url="https://macros.example")),
    ])


@pytest.fixture
def make_console(db, host):
    def _make(panels=None, prefix="", size=(120, 40)):
        feature = ConsoleFeature(panels=panels).set_db_tag(TAG).set_table_name(TABLE).make()
        feature.setup(argparse.Namespace(prefix=prefix), host)
        feature.prepare(StubApp())
        feature.startup(RecordingDisplay(*size))
        return feature

    return _make
