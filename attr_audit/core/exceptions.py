class AuditError(RuntimeError):
    """Base class for attribute audit failures."""


class DriverError(AuditError):
    """Raised by a page driver when a browser operation fails."""


class ConfigError(AuditError):
    """Raised when an audit configuration file cannot be used."""


class ThresholdExceededError(AuditError):
    """Raised when the share of elements missing the attribute breaches the failure threshold."""

    def __init__(self, missing_percentage: float, threshold: float) -> None:
        self.missing_percentage = missing_percentage
        self.threshold = threshold
        super().__init__(
            f"Audit failed: {missing_percentage:.1f}% missing (threshold: {threshold:g}%)"
        )
