from __future__ import annotations

import logging
from typing import Callable, Sequence

from attr_audit.core.batching import gather_in_batches
from attr_audit.core.driver import PageDriver
from attr_audit.core.exceptions import DriverError
from attr_audit.core.metadata import Candidate, ElementProperties, ValidElement
from attr_audit.core.scripts import ELEMENT_PROPERTIES

logger = logging.getLogger(__name__)


async def extract_properties(
    driver: PageDriver,
    candidates: Sequence[Candidate],
    exclude_selectors: Sequence[str],
    batch_size: int = 50,
    on_extracted: Callable[[ElementProperties | None], None] | None = None,
) -> list[ElementProperties | None]:
    """Reads tag, text, role, selector and exclusion for each candidate in one page call.

    Candidates whose evaluation fails come back as ``None``.
    """

    exclude = list(exclude_selectors)

    async def extract(candidate: Candidate) -> ElementProperties | None:
        properties = await _extract_one(driver, candidate, exclude)
        if on_extracted is not None:
            on_extracted(properties)
        return properties

    outcomes = await gather_in_batches(candidates, extract, batch_size)
    extracted: list[ElementProperties | None] = []
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            logger.warning("Discarding element with unreadable properties: %r", outcome)
            outcome = None
        extracted.append(outcome)
    return extracted


async def _extract_one(
    driver: PageDriver,
    candidate: Candidate,
    exclude_selectors: list[str],
) -> ElementProperties | None:
    try:
        raw = await driver.evaluate(candidate.handle, ELEMENT_PROPERTIES, exclude_selectors)
    except DriverError as exc:
        logger.warning(
            "Failed to get properties for element matched by %r: %s",
            candidate.originating_selector,
            exc,
        )
        return None
    return ElementProperties(
        tag_name=str(raw.get("tagName", "")).lower(),
        text_snippet=(raw.get("textSnippet") or "").strip()[:100],
        role=raw.get("role") or None,
        selector=raw.get("selector", ""),
        excluded=bool(raw.get("excluded", False)),
    )


def is_valid(properties: ElementProperties | None, min_text_length: int) -> bool:
    return (
        properties is not None
        and not properties.excluded
        and len(properties.text_snippet) >= min_text_length
    )


def filter_valid(
    candidates: Sequence[Candidate],
    properties: Sequence[ElementProperties | None],
    min_text_length: int,
) -> list[ValidElement]:
    valid: list[ValidElement] = []
    for candidate, item in zip(candidates, properties):
        if is_valid(item, min_text_length):
            valid.append(
                ValidElement(
                    handle=candidate.handle,
                    properties=item,
                    originating_selector=candidate.originating_selector,
                )
            )
    return valid
