from __future__ import annotations

import random
import re
import string
from typing import Any

MAX_TEXT_LENGTH = 50

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]+")
_GENERATED_CLASS = re.compile(
    r"^(css|sc|jsx|svelte|emotion|styled)-|^_?[A-Za-z]+_[A-Za-z0-9]+__[A-Za-z0-9]{5}$|^[A-Za-z]+-[0-9a-f]{6,}$"
)


def kebab_case(value: str) -> str:
    value = _CAMEL_BOUNDARY.sub(r"\1-\2", value)
    value = _NON_ALPHANUMERIC.sub("-", value)
    return value.strip("-").lower()


def is_generated_class(name: str) -> bool:
    """CSS-in-JS and CSS module class names change between builds."""

    return bool(_GENERATED_CLASS.search(name))


def random_suffix(length: int = 6) -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(random.choices(alphabet, k=length))


def suggest_value(sources: dict[str, Any]) -> str:
    """Picks a test attribute value from what the element already says about itself.

    Priority: id, aria-label, parent aria-label, name, short visible text,
    placeholder, first hand-written class, then ``<tag>-<random>``.
    """

    text = (sources.get("text") or "").strip()
    ordered = [
        sources.get("id"),
        sources.get("ariaLabel"),
        sources.get("parentAriaLabel"),
        sources.get("name"),
        text if len(text) < MAX_TEXT_LENGTH else None,
        sources.get("placeholder"),
        next((name for name in sources.get("classes") or [] if not is_generated_class(name)), None),
    ]
    for raw in ordered:
        if not raw:
            continue
        value = kebab_case(str(raw))
        if value:
            return value
    tag_name = kebab_case(str(sources.get("tagName") or "element")) or "element"
    return f"{tag_name}-{random_suffix()}"
