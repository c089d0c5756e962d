from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from attr_audit.core.driver import PageDriver
from attr_audit.core.exceptions import DriverError
from attr_audit.core.metadata import Candidate

logger = logging.getLogger(__name__)


async def discover_candidates(driver: PageDriver, selectors: Sequence[str]) -> list[Candidate]:
    """Queries every selector concurrently and flattens the matches in selector order."""

    groups = await asyncio.gather(*(_query(driver, selector) for selector in selectors))
    candidates: list[Candidate] = []
    for group in groups:
        candidates.extend(group)
    return candidates


async def _query(driver: PageDriver, selector: str) -> list[Candidate]:
    try:
        handles = await driver.query(selector)
    except DriverError as exc:
        logger.warning("Failed to query selector %r: %s", selector, exc)
        return []
    return [Candidate(handle=handle, originating_selector=selector) for handle in handles]
