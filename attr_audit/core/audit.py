from __future__ import annotations

import logging
from datetime import UTC, datetime

from attr_audit.config.schema import AuditOptions, ProjectSettings
from attr_audit.core.attributes import AttributeTarget, resolve_attribute
from attr_audit.core.classifier import classify_elements
from attr_audit.core.discovery import discover_candidates
from attr_audit.core.driver import PageDriver
from attr_audit.core.enrichment import EnrichmentPipeline
from attr_audit.core.extraction import extract_properties, filter_valid, is_valid
from attr_audit.core.metadata import AuditResult, ElementProperties
from attr_audit.core.progress import ProgressReporter
from attr_audit.core.thresholds import evaluate_thresholds

logger = logging.getLogger(__name__)

EXTRACTION_PROGRESS_INTERVAL = 10
SUMMARY_TOP_N = 10


class AttributeAuditor:
    """Audits the page behind a driver for interactive elements missing a test attribute."""

    def __init__(
        self,
        driver: PageDriver,
        options: AuditOptions | None = None,
        settings: ProjectSettings | None = None,
    ) -> None:
        self.driver = driver
        self.options = options or AuditOptions()
        self.target: AttributeTarget = resolve_attribute(self.options.attribute_name, settings)

    async def run(self) -> AuditResult:
        options = self.options
        page_url = self.driver.current_url()
        timestamp = datetime.now(UTC).isoformat()
        progress = ProgressReporter(options.on_progress)

        candidates = await discover_candidates(self.driver, options.include_selectors)
        progress.report(0, len(candidates))

        completed = 0
        validated = 0

        def on_extracted(properties: ElementProperties | None) -> None:
            nonlocal completed, validated
            completed += 1
            if is_valid(properties, options.min_text_length):
                validated += 1
            if completed % EXTRACTION_PROGRESS_INTERVAL == 0:
                progress.report(validated, len(candidates))

        properties = await extract_properties(
            self.driver,
            candidates,
            options.exclude_selectors,
            batch_size=options.batch_size,
            on_extracted=on_extracted,
        )
        valid = filter_valid(candidates, properties, options.min_text_length)
        total = len(valid)

        classified = await classify_elements(self.driver, valid, self.target, batch_size=options.batch_size)
        missing_elements = [item.element for item in classified if not item.has_attribute]
        present_elements = [item.element for item in classified if item.has_attribute]

        pipeline = EnrichmentPipeline(
            self.driver,
            self.target,
            page_url,
            capture_screenshots=options.capture_screenshots,
            screenshot_timeout_ms=options.screenshot_timeout_ms,
            batch_size=options.batch_size,
        )
        missing = await pipeline.enrich_missing(
            missing_elements,
            on_batch=lambda done: progress.report(done, total, done),
        )
        present = None
        if options.include_elements_with_attribute:
            present = await pipeline.enrich_present(
                present_elements,
                on_batch=lambda done: progress.report(done, total, len(missing)),
            )
        progress.complete(total, len(missing))

        result = AuditResult(
            attribute_name=self.target.label,
            total_elements_scanned=total,
            missing_attribute_count=len(missing),
            elements_missing_attribute=tuple(missing),
            timestamp=timestamp,
            page_url=page_url,
            has_attribute_count=len(present) if present is not None else None,
            elements_with_attribute=tuple(present) if present is not None else None,
        )

        evaluate_thresholds(total, len(missing), options.thresholds)
        if options.log_to_console:
            log_summary(result)
        return result


async def audit_test_attributes(
    driver: PageDriver,
    options: AuditOptions | None = None,
    settings: ProjectSettings | None = None,
) -> AuditResult:
    return await AttributeAuditor(driver, options, settings).run()


def log_summary(result: AuditResult) -> None:
    logger.info("=== Test Attribute Audit Summary ===")
    logger.info("Attribute: %s", result.attribute_name)
    logger.info("Page URL: %s", result.page_url)
    logger.info("Total elements scanned: %d", result.total_elements_scanned)
    logger.info("Missing attribute count: %d", result.missing_attribute_count)
    if result.has_attribute_count is not None:
        logger.info("Elements with attribute: %d", result.has_attribute_count)
    if not result.missing_attribute_count:
        logger.info("All scanned elements have the required attribute")
        return
    logger.info("Top missing elements:")
    for index, element in enumerate(result.elements_missing_attribute[:SUMMARY_TOP_N], start=1):
        logger.info('  %d. <%s> "%s"', index, element.tag_name, element.text_snippet)
        logger.info("     Selector: %s", element.selector)
        if element.role:
            logger.info("     Role: %s", element.role)
        if element.suggested_value:
            logger.info("     Suggested: %s", element.suggested_value)
    remaining = result.missing_attribute_count - SUMMARY_TOP_N
    if remaining > 0:
        logger.info("  ... and %d more", remaining)
