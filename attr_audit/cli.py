from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from playwright.async_api import Error as PlaywrightError
from pydantic import ValidationError
from selenium.common.exceptions import WebDriverException
from tqdm.auto import tqdm

from attr_audit.config.loader import ConfigLoader
from attr_audit.config.schema import AuditOptions, BrowserConfig, ProjectSettings
from attr_audit.core.audit import audit_test_attributes
from attr_audit.core.browser import BrowserSession, playwright_page
from attr_audit.core.exceptions import AuditError, ConfigError, ThresholdExceededError
from attr_audit.core.metadata import AuditProgress, AuditResult
from attr_audit.core.playwright_driver import PlaywrightPageDriver
from attr_audit.core.selenium_driver import SeleniumPageDriver
from attr_audit.reporting.html_report import write_html_report
from attr_audit.reporting.json_report import append_history, write_json_report

logger = logging.getLogger("attr_audit")

DEFAULT_HTML_REPORT = "audit-report.html"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="attr-audit",
        description="Audit web pages for missing test attributes on interactive elements",
    )
    parser.add_argument("--base-url", help="URL to audit")
    parser.add_argument("--attr", dest="attribute_name", help="Attribute name to check")
    parser.add_argument("--include", help="Comma-separated selectors to scan")
    parser.add_argument("--exclude", help="Comma-separated selectors to exclude")
    parser.add_argument("--output", help="Path to save the JSON report")
    parser.add_argument("--html", help=f"Path to save the HTML report (default: {DEFAULT_HTML_REPORT})")
    parser.add_argument("--history", help="Append a coverage summary line to this JSONL file")
    parser.add_argument("--config", help="Path to an attr-audit JSON config file")
    parser.add_argument("--engine", choices=["playwright", "selenium"], help="Browser automation engine")
    parser.add_argument("--browser", choices=["chromium", "chrome", "firefox"], help="Browser to launch")
    parser.add_argument("--headless", dest="headless", action="store_true", default=None)
    parser.add_argument("--no-headless", dest="headless", action="store_false", help="Run with browser visible")
    parser.add_argument("--warning-threshold", type=float, help="Warning threshold percentage (0-100)")
    parser.add_argument("--failure-threshold", type=float, help="Failure threshold percentage (0-100)")
    parser.add_argument("--min-text-length", type=int, help="Minimum text length for elements")
    parser.add_argument("--screenshots", action="store_true", default=None, help="Capture element screenshots")
    parser.add_argument(
        "--include-with-attribute",
        action="store_true",
        default=None,
        help="Also report elements that already carry the attribute",
    )
    parser.add_argument("--no-progress", action="store_true", help="Disable progress indicators")
    return parser


def _split(value: str | None) -> list[str] | None:
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def resolve_options(args: argparse.Namespace, file_options: AuditOptions | None) -> AuditOptions:
    thresholds: dict[str, Any] = {}
    if file_options is not None and file_options.thresholds is not None:
        thresholds = file_options.thresholds.model_dump(exclude_none=True)
    if args.warning_threshold is not None:
        thresholds["warning_threshold"] = args.warning_threshold
    if args.failure_threshold is not None:
        thresholds["failure_threshold"] = args.failure_threshold
    return ConfigLoader.merge(
        file_options,
        {
            "attribute_name": args.attribute_name,
            "include_selectors": _split(args.include),
            "exclude_selectors": _split(args.exclude),
            "min_text_length": args.min_text_length,
            "capture_screenshots": args.screenshots,
            "include_elements_with_attribute": args.include_with_attribute,
            "thresholds": thresholds or None,
            "log_to_console": True,
        },
    )


def resolve_browser(args: argparse.Namespace, file_browser: BrowserConfig | None) -> BrowserConfig:
    payload = file_browser.model_dump() if file_browser is not None else {}
    overrides = {
        "base_url": args.base_url,
        "engine": args.engine,
        "browser": args.browser,
        "headless": args.headless,
    }
    payload.update({key: value for key, value in overrides.items() if value is not None})
    return BrowserConfig.model_validate(payload)


class ProgressBar:
    """Renders audit progress callbacks as a tqdm bar."""

    def __init__(self) -> None:
        self.bar: tqdm | None = None

    def __call__(self, progress: AuditProgress) -> None:
        if self.bar is None:
            if progress.total <= 0:
                return
            self.bar = tqdm(total=progress.total, desc="Auditing", unit="el", leave=False)
        if self.bar.total != progress.total:
            self.bar.total = progress.total
        self.bar.n = progress.scanned
        self.bar.set_postfix(missing=progress.missing)
        self.bar.refresh()

    def close(self) -> None:
        if self.bar is not None:
            self.bar.close()
            self.bar = None


async def run_audit(browser: BrowserConfig, options: AuditOptions, settings: ProjectSettings) -> AuditResult:
    if browser.engine == "selenium":
        driver = BrowserSession(browser).start()
        try:
            driver.get(browser.base_url)
            return await audit_test_attributes(SeleniumPageDriver(driver), options, settings)
        finally:
            driver.quit()
    async with playwright_page(browser) as page:
        await page.goto(browser.base_url, wait_until="networkidle")
        return await audit_test_attributes(PlaywrightPageDriver(page), options, settings)


def write_reports(args: argparse.Namespace, result: AuditResult) -> None:
    if args.output:
        path = write_json_report(result, Path(args.output).resolve())
        logger.info("JSON report saved to: %s", path)
    if args.html or not args.output:
        path = write_html_report(result, Path(args.html or DEFAULT_HTML_REPORT).resolve())
        logger.info("HTML report saved to: %s", path)
    if args.history:
        append_history(result, args.history)


def main(argv: Sequence[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    args = build_parser().parse_args(argv)
    progress_bar = None
    try:
        config = ConfigLoader.load(args.config) if args.config else ConfigLoader.discover()
        options = resolve_options(args, config.audit if config else None)
        browser = resolve_browser(args, config.browser if config else None)
        if not browser.base_url:
            logger.error("A base URL is required (--base-url or browser.base_url in the config file)")
            return 2
        if not args.no_progress:
            progress_bar = ProgressBar()
            options = options.model_copy(update={"on_progress": progress_bar})
        settings = ConfigLoader.read_project_settings()
        result = asyncio.run(run_audit(browser, options, settings))
    except ThresholdExceededError as exc:
        logger.error("%s", exc)
        return 1
    except (ConfigError, ValidationError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2
    except (AuditError, PlaywrightError, WebDriverException) as exc:
        logger.error("Error running audit: %s", exc)
        return 1
    finally:
        if progress_bar is not None:
            progress_bar.close()

    write_reports(args, result)
    return 1 if result.missing_attribute_count > 0 else 0


if __name__ == "__main__":
    sys.exit(main())
