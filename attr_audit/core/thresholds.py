from __future__ import annotations

import logging

from attr_audit.config.schema import Thresholds
from attr_audit.core.exceptions import ThresholdExceededError

logger = logging.getLogger(__name__)


def missing_percentage(total: int, missing_count: int) -> float:
    if total == 0:
        return 0.0
    return 100 - (100 * (total - missing_count) / total)


def evaluate_thresholds(total: int, missing_count: int, thresholds: Thresholds | None) -> float:
    """Returns the missing percentage, raising once it exceeds the failure threshold."""

    percentage = missing_percentage(total, missing_count)
    if thresholds is None:
        return percentage
    if thresholds.warning_threshold is not None and percentage > thresholds.warning_threshold:
        logger.warning(
            "%.1f%% of elements missing attributes (threshold: %g%%)",
            percentage,
            thresholds.warning_threshold,
        )
    if thresholds.failure_threshold is not None and percentage > thresholds.failure_threshold:
        raise ThresholdExceededError(percentage, thresholds.failure_threshold)
    return percentage
