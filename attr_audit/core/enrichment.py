from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any, Callable, Sequence

from attr_audit.core.attributes import AttributeTarget
from attr_audit.core.batching import gather_in_batches
from attr_audit.core.driver import PageDriver
from attr_audit.core.exceptions import DriverError
from attr_audit.core.metadata import (
    BoundingBox,
    HasAttributeElement,
    MissingAttributeElement,
    ValidElement,
)
from attr_audit.core.scripts import ATTRIBUTE_NAMES, ATTRIBUTE_VALUE, ELEMENT_PATH, SUGGESTION_SOURCES
from attr_audit.core.suggestions import suggest_value

logger = logging.getLogger(__name__)


class EnrichmentPipeline:
    """Builds the reported shape of classified elements, one bounded batch at a time.

    Every optional field is computed independently; a field whose browser call
    fails is left empty. An element whose enrichment raises anything else is
    left out of the output.
    """

    def __init__(
        self,
        driver: PageDriver,
        target: AttributeTarget,
        page_url: str,
        capture_screenshots: bool = False,
        screenshot_timeout_ms: int = 2000,
        batch_size: int = 50,
    ) -> None:
        self.driver = driver
        self.target = target
        self.page_url = page_url
        self.capture_screenshots = capture_screenshots
        self.screenshot_timeout_ms = screenshot_timeout_ms
        self.batch_size = batch_size

    async def enrich_missing(
        self,
        elements: Sequence[ValidElement],
        on_batch: Callable[[int], None] | None = None,
    ) -> list[MissingAttributeElement]:
        outcomes = await gather_in_batches(
            elements, self._enrich_missing_one, self.batch_size, on_batch, on_batch
        )
        return self._settled(elements, outcomes)

    async def enrich_present(
        self,
        elements: Sequence[ValidElement],
        on_batch: Callable[[int], None] | None = None,
    ) -> list[HasAttributeElement]:
        outcomes = await gather_in_batches(
            elements, self._enrich_present_one, self.batch_size, on_batch, on_batch
        )
        return [item for item in self._settled(elements, outcomes) if item is not None]

    async def _enrich_missing_one(self, element: ValidElement) -> MissingAttributeElement:
        box, suggestion, xpath, screenshot = await asyncio.gather(
            self.bounding_box(element.handle),
            self.suggested_value(element.handle),
            self.element_path(element.handle),
            self.screenshot(element.handle),
        )
        properties = element.properties
        return MissingAttributeElement(
            selector=properties.selector,
            tag_name=properties.tag_name,
            text_snippet=properties.text_snippet,
            page_url=self.page_url,
            xpath=xpath,
            role=properties.role,
            bounding_box=box,
            suggested_value=suggestion,
            screenshot=screenshot,
        )

    async def _enrich_present_one(self, element: ValidElement) -> HasAttributeElement | None:
        # Paths are only generated for elements that still need an attribute.
        box, value, screenshot = await asyncio.gather(
            self.bounding_box(element.handle),
            self.attribute_value(element.handle),
            self.screenshot(element.handle),
        )
        if not value:
            return None
        properties = element.properties
        return HasAttributeElement(
            selector=properties.selector,
            tag_name=properties.tag_name,
            text_snippet=properties.text_snippet,
            attribute_value=value,
            page_url=self.page_url,
            role=properties.role,
            bounding_box=box,
            screenshot=screenshot,
        )

    async def bounding_box(self, handle: Any) -> BoundingBox | None:
        try:
            raw = await self.driver.bounding_box(handle)
            return BoundingBox.from_raw(raw) if raw else None
        except (DriverError, KeyError, TypeError, ValueError) as exc:
            logger.debug("Bounding box not available: %r", exc)
            return None

    async def suggested_value(self, handle: Any) -> str | None:
        try:
            sources = await self.driver.evaluate(handle, SUGGESTION_SOURCES)
        except DriverError as exc:
            logger.warning("Failed to build suggested value: %s", exc)
            return None
        return suggest_value(sources or {})

    async def element_path(self, handle: Any) -> str | None:
        try:
            path = await self.driver.evaluate(handle, ELEMENT_PATH)
        except DriverError as exc:
            logger.warning("Failed to generate element path: %s", exc)
            return None
        return path or None

    async def attribute_value(self, handle: Any) -> str | None:
        try:
            name = self.target.name
            if not self.target.is_exact:
                name = self.target.first_match(await self.driver.evaluate(handle, ATTRIBUTE_NAMES) or [])
                if name is None:
                    return None
            value = await self.driver.evaluate(handle, ATTRIBUTE_VALUE, name)
        except DriverError as exc:
            logger.warning("Failed to read attribute value: %s", exc)
            return None
        return value or None

    async def screenshot(self, handle: Any) -> str | None:
        if not self.capture_screenshots:
            return None
        try:
            image = await self.driver.screenshot(handle, self.screenshot_timeout_ms)
        except DriverError as exc:
            logger.debug("Screenshot skipped: %s", exc)
            return None
        return base64.b64encode(image).decode("ascii") if image else None

    @staticmethod
    def _settled(elements: Sequence[ValidElement], outcomes: list) -> list:
        enriched = []
        for element, outcome in zip(elements, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning("Skipping %s after enrichment failure: %r", element.properties.selector, outcome)
                continue
            enriched.append(outcome)
        return enriched
