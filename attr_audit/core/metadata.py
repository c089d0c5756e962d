from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, frozen=True)
class AuditProgress:
    scanned: int
    total: int
    missing: int


@dataclass(slots=True, frozen=True)
class Candidate:
    handle: Any
    originating_selector: str


@dataclass(slots=True, frozen=True)
class ElementProperties:
    tag_name: str
    text_snippet: str
    role: str | None
    selector: str
    excluded: bool


@dataclass(slots=True, frozen=True)
class ValidElement:
    handle: Any
    properties: ElementProperties
    originating_selector: str


@dataclass(slots=True, frozen=True)
class ClassifiedElement:
    element: ValidElement
    has_attribute: bool


@dataclass(slots=True, frozen=True)
class BoundingBox:
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_raw(cls, raw: dict[str, float]) -> BoundingBox:
        return cls(
            x=round(raw["x"]),
            y=round(raw["y"]),
            width=round(raw["width"]),
            height=round(raw["height"]),
        )

    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(slots=True, frozen=True)
class MissingAttributeElement:
    selector: str
    tag_name: str
    text_snippet: str
    page_url: str
    xpath: str | None = None
    role: str | None = None
    bounding_box: BoundingBox | None = None
    suggested_value: str | None = None
    screenshot: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "selector": self.selector,
            "tagName": self.tag_name,
            "textSnippet": self.text_snippet,
            "role": self.role,
            "pageUrl": self.page_url,
        }
        _put_optional(payload, "xpath", self.xpath)
        _put_optional(payload, "boundingBox", self.bounding_box.to_dict() if self.bounding_box else None)
        _put_optional(payload, "suggestedValue", self.suggested_value)
        _put_optional(payload, "screenshot", self.screenshot)
        return payload


@dataclass(slots=True, frozen=True)
class HasAttributeElement:
    selector: str
    tag_name: str
    text_snippet: str
    attribute_value: str
    page_url: str
    xpath: str | None = None
    role: str | None = None
    bounding_box: BoundingBox | None = None
    screenshot: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "selector": self.selector,
            "tagName": self.tag_name,
            "textSnippet": self.text_snippet,
            "role": self.role,
            "pageUrl": self.page_url,
            "attributeValue": self.attribute_value,
        }
        _put_optional(payload, "xpath", self.xpath)
        _put_optional(payload, "boundingBox", self.bounding_box.to_dict() if self.bounding_box else None)
        _put_optional(payload, "screenshot", self.screenshot)
        return payload


@dataclass(slots=True, frozen=True)
class AuditResult:
    attribute_name: str
    total_elements_scanned: int
    missing_attribute_count: int
    elements_missing_attribute: tuple[MissingAttributeElement, ...]
    timestamp: str
    page_url: str
    has_attribute_count: int | None = None
    elements_with_attribute: tuple[HasAttributeElement, ...] | None = None

    @property
    def coverage_percentage(self) -> float:
        if self.total_elements_scanned == 0:
            return 100.0
        covered = self.total_elements_scanned - self.missing_attribute_count
        return covered / self.total_elements_scanned * 100

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "attributeName": self.attribute_name,
            "totalElementsScanned": self.total_elements_scanned,
            "missingAttributeCount": self.missing_attribute_count,
            "elementsMissingAttribute": [item.to_dict() for item in self.elements_missing_attribute],
            "timestamp": self.timestamp,
            "pageUrl": self.page_url,
        }
        if self.elements_with_attribute is not None:
            payload["hasAttributeCount"] = self.has_attribute_count
            payload["elementsWithAttribute"] = [item.to_dict() for item in self.elements_with_attribute]
        return payload


def _put_optional(payload: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        payload[key] = value
