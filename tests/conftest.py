from __future__ import annotations

import asyncio

import pytest

from tests.helpers import FakePageDriver, el, page

pytest_plugins = ["attr_audit.pytest_plugin"]


@pytest.fixture()
def run():
    return asyncio.run


@pytest.fixture()
def mixed_page() -> FakePageDriver:
    root = page(
        el("button", "Click me"),
        el("button", "Submit", data_testID="btn-submit"),
        el("a", "Link without attribute", href="#"),
        el("a", "Home", href="#", data_testID="link-home"),
    )
    return FakePageDriver(root)
