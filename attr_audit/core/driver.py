from __future__ import annotations

from typing import Any, Protocol, Sequence


class PageDriver(Protocol):
    """Browser operations the audit needs from an automation library.

    Handles returned by ``query`` belong to the underlying browser session; the
    audit only borrows them for the duration of a single run. Every method
    raises ``DriverError`` when the browser rejects the operation.
    """

    async def query(self, selector: str) -> Sequence[Any]:
        ...

    async def evaluate(self, handle: Any, script_name: str, *args: Any) -> Any:
        ...

    async def bounding_box(self, handle: Any) -> dict[str, float] | None:
        ...

    async def screenshot(self, handle: Any, timeout_ms: int) -> bytes:
        ...

    def current_url(self) -> str:
        ...
