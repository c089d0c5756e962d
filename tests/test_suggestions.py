from __future__ import annotations

import re

from attr_audit.core.suggestions import is_generated_class, kebab_case, suggest_value


def test_kebab_case_normalizes_mixed_input():
    assert kebab_case("submit-btn") == "submit-btn"
    assert kebab_case("submitButton") == "submit-button"
    assert kebab_case("  Sign In!! ") == "sign-in"
    assert kebab_case("user__email--field") == "user-email-field"
    assert kebab_case("***") == ""


def test_generated_classes_are_recognized():
    assert is_generated_class("css-1x2y3z")
    assert is_generated_class("sc-bdVaJa")
    assert is_generated_class("Button_primary__a1B2c")
    assert not is_generated_class("primary-action")
    assert not is_generated_class("btn")


def test_suggestion_follows_priority_order():
    sources = {
        "tagName": "button",
        "id": None,
        "ariaLabel": "Close Dialog",
        "parentAriaLabel": "Settings",
        "name": "close",
        "text": "X",
        "placeholder": None,
        "classes": ["btn"],
    }
    assert suggest_value(sources) == "close-dialog"

    sources["ariaLabel"] = None
    assert suggest_value(sources) == "settings"

    sources["parentAriaLabel"] = None
    assert suggest_value(sources) == "close"

    sources["name"] = None
    assert suggest_value(sources) == "x"


def test_long_text_falls_through_to_placeholder_and_classes():
    sources = {"tagName": "input", "text": "y" * 60, "placeholder": "Search products", "classes": ["field"]}
    assert suggest_value(sources) == "search-products"

    sources["placeholder"] = None
    assert suggest_value(sources) == "field"


def test_generated_classes_are_skipped():
    assert suggest_value({"tagName": "div", "classes": ["css-1abc", "menuToggle"]}) == "menu-toggle"


def test_fallback_uses_tag_and_random_suffix():
    value = suggest_value({"tagName": "button", "classes": ["css-abc123"]})
    assert re.fullmatch(r"button-[a-z0-9]{6}", value)
