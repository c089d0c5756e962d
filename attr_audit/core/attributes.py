from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from attr_audit.config.schema import ProjectSettings

DEFAULT_ATTRIBUTE_PATTERN = re.compile(r"^data-", re.IGNORECASE)


@dataclass(slots=True, frozen=True)
class AttributeTarget:
    """The attribute identity an audit checks: an exact name or a name pattern."""

    name: str | None = None
    pattern: re.Pattern[str] | None = None

    @property
    def is_exact(self) -> bool:
        return self.name is not None

    @property
    def label(self) -> str:
        if self.name is not None:
            return self.name
        return f"/{self.pattern.pattern}/i"

    def matches_any(self, attribute_names: Iterable[str]) -> bool:
        if self.name is not None:
            wanted = self.name.lower()
            return any(name.lower() == wanted for name in attribute_names)
        return any(self.pattern.search(name) for name in attribute_names)

    def first_match(self, attribute_names: Iterable[str]) -> str | None:
        for name in attribute_names:
            if self.matches_any([name]):
                return name
        return None


def resolve_attribute(
    explicit_name: str | None = None,
    settings: ProjectSettings | None = None,
) -> AttributeTarget:
    """Project settings win over the per-call name; both fall back to any ``data-*`` attribute."""

    if settings is not None and settings.attribute_name:
        return AttributeTarget(name=settings.attribute_name)
    if explicit_name:
        return AttributeTarget(name=explicit_name)
    return AttributeTarget(pattern=DEFAULT_ATTRIBUTE_PATTERN)
