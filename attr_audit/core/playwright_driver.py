from __future__ import annotations

from typing import Any

from playwright.async_api import ElementHandle, Error as PlaywrightError, Page

from attr_audit.core.exceptions import DriverError
from attr_audit.core.scripts import page_script


class PlaywrightPageDriver:
    """Runs audit operations against an async Playwright page."""

    def __init__(self, page: Page) -> None:
        self.page = page

    async def query(self, selector: str) -> list[ElementHandle]:
        try:
            return await self.page.query_selector_all(selector)
        except PlaywrightError as exc:
            raise DriverError(f"Query failed for selector {selector!r}: {exc.message}") from exc

    async def evaluate(self, handle: ElementHandle, script_name: str, *args: Any) -> Any:
        try:
            return await handle.evaluate(page_script(script_name), list(args))
        except PlaywrightError as exc:
            raise DriverError(f"Script {script_name} failed: {exc.message}") from exc

    async def bounding_box(self, handle: ElementHandle) -> dict[str, float] | None:
        try:
            return await handle.bounding_box()
        except PlaywrightError as exc:
            raise DriverError(f"Bounding box unavailable: {exc.message}") from exc

    async def screenshot(self, handle: ElementHandle, timeout_ms: int) -> bytes:
        try:
            return await handle.screenshot(timeout=timeout_ms)
        except PlaywrightError as exc:
            raise DriverError(f"Screenshot failed: {exc.message}") from exc

    def current_url(self) -> str:
        return self.page.url
