"""Pytest fixtures that bind the audit helpers to the page under test.

The suite provides an async Playwright ``page`` fixture; the helpers return
coroutines, so await them from an async test or drive them with ``asyncio.run``::

    async def test_checkout_is_covered(page, audit_test_attributes):
        await page.goto("https://shop.test/checkout")
        result = await audit_test_attributes()
        assert result.missing_attribute_count == 0
"""

from __future__ import annotations

from pathlib import Path
from typing import Awaitable, Callable

import pytest

from attr_audit.config.loader import ConfigLoader
from attr_audit.config.schema import AuditOptions, ProjectSettings
from attr_audit.core import audit, multi_page
from attr_audit.core.driver import PageDriver
from attr_audit.core.metadata import AuditResult
from attr_audit.core.playwright_driver import PlaywrightPageDriver


@pytest.fixture()
def audit_driver(page) -> PageDriver:
    return PlaywrightPageDriver(page)


@pytest.fixture()
def audit_options() -> AuditOptions:
    return AuditOptions()


@pytest.fixture()
def audit_project_settings(pytestconfig) -> ProjectSettings:
    return ConfigLoader.read_project_settings(pytestconfig.rootpath)


@pytest.fixture()
def audit_test_attributes(
    audit_driver: PageDriver,
    audit_options: AuditOptions,
    audit_project_settings: ProjectSettings,
) -> Callable[..., Awaitable[AuditResult]]:
    def bound(options: AuditOptions | None = None) -> Awaitable[AuditResult]:
        return audit.audit_test_attributes(audit_driver, options or audit_options, audit_project_settings)

    return bound


@pytest.fixture()
def audit_current_page(
    audit_driver: PageDriver,
    audit_options: AuditOptions,
    audit_project_settings: ProjectSettings,
) -> Callable[..., Awaitable[AuditResult]]:
    def bound(
        report_title: str,
        options: AuditOptions | None = None,
        output_path: str | Path | None = None,
    ) -> Awaitable[AuditResult]:
        return multi_page.audit_current_page(
            audit_driver,
            report_title,
            options or audit_options,
            output_path=output_path,
            settings=audit_project_settings,
        )

    return bound
