"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import os

import pytest

from tests.helpers.fake_os import FakeProcessTable, make_handle

# Keep a developer's environment from leaking into configuration tests
for _name in [name for name in os.environ if name.startswith("KILL_DEV_")]:
    os.environ.pop(_name)


@pytest.fixture
def fake_table() -> FakeProcessTable:
    return FakeProcessTable()


@pytest.fixture
def handle():
    return make_handle()
