from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from typing import Any, Iterator

from attr_audit.core.exceptions import DriverError

SIMPLE_SELECTOR = re.compile(
    r"^(?P<tag>[a-zA-Z][\w-]*|\*)?(?P<rest>(?:[.#][\w-]+|\[[\w-]+(?:=(?:'[^']*'|\"[^\"]*\"|[\w-]+))?\])*)$"
)
SELECTOR_PART = re.compile(r"([.#])([\w-]+)|\[([\w-]+)(?:=(?:'([^']*)'|\"([^\"]*)\"|([\w-]+)))?\]")


@dataclass(eq=False)
class FakeElement:
    """Minimal DOM node that answers the audit's page scripts from Python."""

    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    text: str = ""
    children: list[FakeElement] = field(default_factory=list)
    box: dict[str, float] | None = None
    fail_on: set[str] = field(default_factory=set)
    crash_on: set[str] = field(default_factory=set)
    parent: FakeElement | None = None

    def __post_init__(self) -> None:
        self.tag = self.tag.lower()
        self.attrs = {key.lower(): value for key, value in self.attrs.items()}
        for child in self.children:
            child.parent = self

    def iter(self) -> Iterator[FakeElement]:
        yield self
        for child in self.children:
            yield from child.iter()

    def ancestors_and_self(self) -> Iterator[FakeElement]:
        node: FakeElement | None = self
        while node is not None:
            yield node
            node = node.parent

    @property
    def text_content(self) -> str:
        return self.text + "".join(child.text_content for child in self.children)

    @property
    def classes(self) -> list[str]:
        return [name for name in self.attrs.get("class", "").split(" ") if name]


def el(tag: str, text: str = "", *children: FakeElement, **attrs: str) -> FakeElement:
    return FakeElement(
        tag=tag,
        text=text,
        children=list(children),
        attrs={k.rstrip("_").replace("_", "-"): v for k, v in attrs.items()},
    )


def parse_selector(selector: str) -> tuple[str | None, list[tuple]] | None:
    match = SIMPLE_SELECTOR.match(selector.strip())
    if not match or not selector.strip():
        return None
    tag = match.group("tag")
    parts = []
    for part in SELECTOR_PART.finditer(match.group("rest") or ""):
        kind, name, attr, single, double, bare = part.groups()
        if kind == "#":
            parts.append(("id", name))
        elif kind == ".":
            parts.append(("class", name))
        else:
            value = next((item for item in (single, double, bare) if item is not None), None)
            parts.append(("attr", attr.lower(), value))
    return (None if tag in (None, "*") else tag.lower()), parts


def matches(element: FakeElement, selector: str) -> bool:
    parsed = parse_selector(selector)
    if parsed is None:
        raise ValueError(f"Invalid selector: {selector}")
    tag, parts = parsed
    if tag and element.tag != tag:
        return False
    for part in parts:
        if part[0] == "id" and element.attrs.get("id") != part[1]:
            return False
        if part[0] == "class" and part[1] not in element.classes:
            return False
        if part[0] == "attr":
            if part[1] not in element.attrs:
                return False
            if part[2] is not None and element.attrs[part[1]] != part[2]:
                return False
    return True


def element_path(node: FakeElement | None) -> str:
    if node is None:
        return ""
    if node.attrs.get("id"):
        return f'//*[@id="{node.attrs["id"]}"]'
    siblings = [item for item in node.parent.children if item.tag == node.tag] if node.parent else [node]
    if len(siblings) == 1:
        return f"{element_path(node.parent)}/{node.tag}"
    return f"{element_path(node.parent)}/{node.tag}[{siblings.index(node) + 1}]"


class FakePageDriver:
    """In-memory stand-in for a browser page, implementing the named page scripts."""

    def __init__(self, root: FakeElement, url: str = "https://example.test/page") -> None:
        self.root = root
        self.url = url
        self.in_flight: dict[int, int] = {}
        self.peak_elements_in_flight = 0
        self.calls: list[tuple[str, Any]] = []

    async def _track(self, handle: FakeElement) -> None:
        key = id(handle)
        self.in_flight[key] = self.in_flight.get(key, 0) + 1
        self.peak_elements_in_flight = max(self.peak_elements_in_flight, len(self.in_flight))
        await asyncio.sleep(0)
        self.in_flight[key] -= 1
        if not self.in_flight[key]:
            del self.in_flight[key]

    async def query(self, selector: str) -> list[FakeElement]:
        if parse_selector(selector) is None:
            raise DriverError(f"Invalid selector: {selector}")
        await asyncio.sleep(0)
        return [node for node in self.root.iter() if matches(node, selector)]

    async def evaluate(self, handle: FakeElement, script_name: str, *args: Any) -> Any:
        self.calls.append((script_name, handle))
        await self._track(handle)
        if script_name in handle.fail_on:
            raise DriverError(f"{script_name} failed")
        if script_name in handle.crash_on:
            raise RuntimeError(f"{script_name} crashed")
        return getattr(self, f"_{script_name}")(handle, *args)

    async def bounding_box(self, handle: FakeElement) -> dict[str, float] | None:
        await self._track(handle)
        if "bounding_box" in handle.fail_on:
            raise DriverError("bounding box failed")
        return handle.box

    async def screenshot(self, handle: FakeElement, timeout_ms: int) -> bytes:
        await self._track(handle)
        if "screenshot" in handle.fail_on:
            raise DriverError(f"Timeout {timeout_ms}ms exceeded")
        return b"\x89PNG-fake"

    def current_url(self) -> str:
        return self.url

    def _element_properties(self, node: FakeElement, exclude_selectors: list[str]) -> dict[str, Any]:
        selector = node.tag
        if node.attrs.get("id"):
            selector = f"#{node.attrs['id']}"
        elif node.classes:
            selector = f"{node.tag}.{'.'.join(node.classes)}"
        excluded = False
        for ancestor in node.ancestors_and_self():
            for pattern in exclude_selectors:
                try:
                    excluded = excluded or matches(ancestor, pattern)
                except ValueError:
                    continue
        return {
            "tagName": node.tag,
            "textSnippet": node.text_content.strip()[:100],
            "role": node.attrs.get("role"),
            "selector": selector,
            "excluded": excluded,
        }

    def _has_attribute(self, node: FakeElement, name: str) -> bool:
        return name.lower() in node.attrs

    def _attribute_names(self, node: FakeElement) -> list[str]:
        return list(node.attrs)

    def _attribute_value(self, node: FakeElement, name: str) -> str | None:
        return node.attrs.get(name.lower())

    def _suggestion_sources(self, node: FakeElement) -> dict[str, Any]:
        return {
            "tagName": node.tag,
            "id": node.attrs.get("id"),
            "ariaLabel": node.attrs.get("aria-label"),
            "parentAriaLabel": node.parent.attrs.get("aria-label") if node.parent else None,
            "name": node.attrs.get("name"),
            "text": node.text_content.strip(),
            "placeholder": node.attrs.get("placeholder"),
            "classes": node.classes,
        }

    def _element_path(self, node: FakeElement) -> str:
        return element_path(node)


def page(*children: FakeElement) -> FakeElement:
    return el("html", "", el("body", "", *children))
