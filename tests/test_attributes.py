from __future__ import annotations

from attr_audit.config.schema import ProjectSettings
from attr_audit.core.attributes import DEFAULT_ATTRIBUTE_PATTERN, resolve_attribute


def test_resolution_prefers_project_settings():
    target = resolve_attribute("data-testid", ProjectSettings(attribute_name="data-qa"))
    assert target.is_exact
    assert target.name == "data-qa"


def test_resolution_uses_explicit_name_without_settings():
    assert resolve_attribute("data-cy").name == "data-cy"
    assert resolve_attribute("data-cy", ProjectSettings()).name == "data-cy"


def test_resolution_defaults_to_data_pattern():
    target = resolve_attribute()
    assert not target.is_exact
    assert target.pattern is DEFAULT_ATTRIBUTE_PATTERN
    assert target.label == "/^data-/i"


def test_pattern_matches_any_data_attribute_case_insensitively():
    target = resolve_attribute()
    assert target.matches_any(["class", "DATA-QA"])
    assert not target.matches_any(["class", "aria-label", "metadata-x"])
    assert target.first_match(["id", "data-cy", "data-qa"]) == "data-cy"


def test_exact_name_ignores_case():
    target = resolve_attribute("data-testID")
    assert target.matches_any(["data-testid"])
    assert not target.matches_any(["data-test"])
