from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from playwright.async_api import Page, async_playwright
from selenium import webdriver
from selenium.webdriver import ChromeOptions, FirefoxOptions

from attr_audit.config.schema import BrowserConfig


class BrowserSession:
    """Opens the Selenium browser the CLI audits through when the engine is ``selenium``.

    Selenium Manager resolves the driver binary. Implicit waits are disabled,
    so a selector with no matches returns immediately.
    """

    def __init__(self, config: BrowserConfig) -> None:
        self.config = config

    def start(self):
        normalized = self.config.browser
        if normalized in {"chrome", "chromium"}:
            options = ChromeOptions()
            if self.config.headless:
                options.add_argument("--headless=new")
            options.add_argument("--window-size=1440,1200")
            driver = webdriver.Chrome(options=options)
        elif normalized == "firefox":
            options = FirefoxOptions()
            if self.config.headless:
                options.add_argument("-headless")
            driver = webdriver.Firefox(options=options)
        else:
            raise ValueError(f"Unsupported browser: {self.config.browser}")
        driver.set_page_load_timeout(self.config.default_timeout_seconds)
        driver.implicitly_wait(0)
        return driver


@asynccontextmanager
async def playwright_page(config: BrowserConfig) -> AsyncIterator[Page]:
    """Launches a Playwright browser and yields a fresh page, closing everything on exit."""

    async with async_playwright() as playwright:
        browser_type = playwright.firefox if config.browser == "firefox" else playwright.chromium
        browser = await browser_type.launch(headless=config.headless)
        try:
            context = await browser.new_context()
            page = await context.new_page()
            page.set_default_timeout(config.default_timeout_seconds * 1000)
            yield page
        finally:
            await browser.close()
