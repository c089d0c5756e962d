from __future__ import annotations

import logging
from typing import Sequence

from attr_audit.core.attributes import AttributeTarget
from attr_audit.core.batching import gather_in_batches
from attr_audit.core.driver import PageDriver
from attr_audit.core.exceptions import DriverError
from attr_audit.core.metadata import ClassifiedElement, ValidElement
from attr_audit.core.scripts import ATTRIBUTE_NAMES, HAS_ATTRIBUTE

logger = logging.getLogger(__name__)


async def classify_elements(
    driver: PageDriver,
    elements: Sequence[ValidElement],
    target: AttributeTarget,
    batch_size: int = 50,
) -> list[ClassifiedElement]:
    """Marks each element as carrying the audited attribute or not.

    An element whose check fails is treated as carrying the attribute.
    """

    async def classify(element: ValidElement) -> ClassifiedElement:
        return ClassifiedElement(element=element, has_attribute=await has_attribute(driver, element, target))

    outcomes = await gather_in_batches(elements, classify, batch_size)
    classified: list[ClassifiedElement] = []
    for element, outcome in zip(elements, outcomes):
        if isinstance(outcome, BaseException):
            logger.warning("Failed to check attribute on %s: %r", element.properties.selector, outcome)
            outcome = ClassifiedElement(element=element, has_attribute=True)
        classified.append(outcome)
    return classified


async def has_attribute(driver: PageDriver, element: ValidElement, target: AttributeTarget) -> bool:
    try:
        if target.is_exact:
            return bool(await driver.evaluate(element.handle, HAS_ATTRIBUTE, target.name))
        names = await driver.evaluate(element.handle, ATTRIBUTE_NAMES)
    except DriverError as exc:
        logger.warning("Failed to check attribute on %s: %s", element.properties.selector, exc)
        return True
    return target.matches_any(names or [])
