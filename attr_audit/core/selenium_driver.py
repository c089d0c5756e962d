from __future__ import annotations

from typing import Any

from selenium.common.exceptions import WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webelement import WebElement

from attr_audit.core.exceptions import DriverError
from attr_audit.core.scripts import page_script


class SeleniumPageDriver:
    """Runs audit operations against a Selenium WebDriver.

    Selenium calls block, so operations complete one at a time even though the
    audit schedules them concurrently. Results and ordering are unaffected.
    Selenium has no per-call screenshot timeout; ``timeout_ms`` is ignored.
    """

    def __init__(self, driver) -> None:
        self.driver = driver

    async def query(self, selector: str) -> list[WebElement]:
        try:
            return self.driver.find_elements(By.CSS_SELECTOR, selector)
        except WebDriverException as exc:
            raise DriverError(f"Query failed for selector {selector!r}: {exc.msg}") from exc

    async def evaluate(self, handle: WebElement, script_name: str, *args: Any) -> Any:
        script = f"return ({page_script(script_name)})(arguments[0], arguments[1]);"
        try:
            return self.driver.execute_script(script, handle, list(args))
        except WebDriverException as exc:
            raise DriverError(f"Script {script_name} failed: {exc.msg}") from exc

    async def bounding_box(self, handle: WebElement) -> dict[str, float] | None:
        try:
            rect = handle.rect
        except WebDriverException as exc:
            raise DriverError(f"Bounding box unavailable: {exc.msg}") from exc
        if not rect or not rect.get("width") or not rect.get("height"):
            return None
        return rect

    async def screenshot(self, handle: WebElement, timeout_ms: int) -> bytes:
        try:
            return handle.screenshot_as_png
        except WebDriverException as exc:
            raise DriverError(f"Screenshot failed: {exc.msg}") from exc

    def current_url(self) -> str:
        return self.driver.current_url
