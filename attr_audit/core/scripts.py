"""Page-side scripts the audit runs against a single element.

Every script is a function expression taking ``(el, args)`` where ``args`` is a
JSON-serializable list. Drivers look scripts up by name in ``PAGE_SCRIPTS`` so
the same computation runs identically under Playwright and Selenium.
"""

from __future__ import annotations

ELEMENT_PROPERTIES = "element_properties"
HAS_ATTRIBUTE = "has_attribute"
ATTRIBUTE_NAMES = "attribute_names"
ATTRIBUTE_VALUE = "attribute_value"
SUGGESTION_SOURCES = "suggestion_sources"
ELEMENT_PATH = "element_path"

ELEMENT_PROPERTIES_SCRIPT = r"""
(el, args) => {
  const excludeSelectors = args[0] || [];
  const tagName = el.tagName.toLowerCase();
  const textSnippet = (el.textContent || "").trim().substring(0, 100);
  const role = el.getAttribute("role");

  let selector = tagName;
  if (el.id) {
    selector = `#${el.id}`;
  } else if (typeof el.className === "string") {
    const classes = el.className.split(" ").filter((name) => name).join(".");
    if (classes) selector = `${tagName}.${classes}`;
  }

  const matches = (node, pattern) => {
    try {
      return node.matches(pattern);
    } catch (error) {
      return false;
    }
  };

  let excluded = false;
  for (let node = el; node && !excluded; node = node.parentElement) {
    excluded = excludeSelectors.some((pattern) => matches(node, pattern));
  }

  return { tagName, textSnippet, role, selector, excluded };
}
"""

HAS_ATTRIBUTE_SCRIPT = r"""
(el, args) => el.hasAttribute(args[0])
"""

ATTRIBUTE_NAMES_SCRIPT = r"""
(el, args) => el.getAttributeNames()
"""

ATTRIBUTE_VALUE_SCRIPT = r"""
(el, args) => el.getAttribute(args[0])
"""

SUGGESTION_SOURCES_SCRIPT = r"""
(el, args) => {
  const parent = el.parentElement;
  return {
    tagName: el.tagName.toLowerCase(),
    id: el.id || null,
    ariaLabel: el.getAttribute("aria-label"),
    parentAriaLabel: parent ? parent.getAttribute("aria-label") : null,
    name: el.getAttribute("name"),
    text: (el.innerText || el.textContent || "").trim(),
    placeholder: el.getAttribute("placeholder"),
    classes: typeof el.className === "string" ? el.className.split(" ").filter((name) => name) : [],
  };
}
"""

ELEMENT_PATH_SCRIPT = r"""
(el, args) => {
  const pathOf = (node) => {
    if (!node || node.nodeType !== 1) return "";
    if (node.id) return `//*[@id="${node.id}"]`;
    const tag = node.tagName.toLowerCase();
    const parent = node.parentNode;
    const siblings = parent && parent.children
      ? Array.from(parent.children).filter((sibling) => sibling.tagName === node.tagName)
      : [node];
    if (siblings.length === 1) return `${pathOf(parent)}/${tag}`;
    return `${pathOf(parent)}/${tag}[${siblings.indexOf(node) + 1}]`;
  };
  return pathOf(el);
}
"""

PAGE_SCRIPTS: dict[str, str] = {
    ELEMENT_PROPERTIES: ELEMENT_PROPERTIES_SCRIPT,
    HAS_ATTRIBUTE: HAS_ATTRIBUTE_SCRIPT,
    ATTRIBUTE_NAMES: ATTRIBUTE_NAMES_SCRIPT,
    ATTRIBUTE_VALUE: ATTRIBUTE_VALUE_SCRIPT,
    SUGGESTION_SOURCES: SUGGESTION_SOURCES_SCRIPT,
    ELEMENT_PATH: ELEMENT_PATH_SCRIPT,
}


def page_script(name: str) -> str:
    try:
        return PAGE_SCRIPTS[name]
    except KeyError:
        raise KeyError(f"Unknown page script: {name}") from None
