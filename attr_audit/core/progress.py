from __future__ import annotations

from typing import Callable

from attr_audit.core.metadata import AuditProgress


class ProgressReporter:
    """Forwards audit milestones to a callback, never letting ``scanned`` go backwards."""

    def __init__(self, callback: Callable[[AuditProgress], None] | None = None) -> None:
        self.callback = callback
        self.scanned = 0

    def report(self, scanned: int, total: int, missing: int = 0) -> None:
        self.scanned = max(self.scanned, scanned)
        if self.callback is not None:
            self.callback(AuditProgress(scanned=self.scanned, total=total, missing=missing))

    def complete(self, total: int, missing: int) -> None:
        self.scanned = total
        if self.callback is not None:
            self.callback(AuditProgress(scanned=total, total=total, missing=missing))
