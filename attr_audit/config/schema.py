from __future__ import annotations

from typing import Callable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from attr_audit.core.metadata import AuditProgress

DEFAULT_INCLUDE_SELECTORS = [
    "button",
    "a",
    "input",
    "select",
    "textarea",
    "[role='button']",
    "div[role]",
]


class Thresholds(BaseModel):
    warning_threshold: float | None = None
    failure_threshold: float | None = None

    @field_validator("warning_threshold", "failure_threshold")
    @classmethod
    def validate_percentage(cls, value: float | None) -> float | None:
        if value is not None and not 0 <= value <= 100:
            raise ValueError("thresholds must be percentages between 0 and 100")
        return value


class AuditOptions(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    attribute_name: str | None = None
    include_selectors: list[str] = Field(default_factory=lambda: list(DEFAULT_INCLUDE_SELECTORS))
    exclude_selectors: list[str] = Field(default_factory=list)
    min_text_length: int = Field(default=0, ge=0)
    log_to_console: bool = False
    thresholds: Thresholds | None = None
    capture_screenshots: bool = False
    include_elements_with_attribute: bool = False
    batch_size: int = Field(default=50, ge=1)
    screenshot_timeout_ms: int = Field(default=2000, ge=0)
    on_progress: Callable[[AuditProgress], None] | None = Field(default=None, exclude=True)

    @field_validator("include_selectors", "exclude_selectors")
    @classmethod
    def strip_selectors(cls, value: list[str]) -> list[str]:
        return [item.strip() for item in value if item and item.strip()]


class BrowserConfig(BaseModel):
    base_url: str | None = None
    engine: str = "playwright"
    browser: str = "chromium"
    headless: bool = True
    default_timeout_seconds: int = 30

    @field_validator("engine")
    @classmethod
    def validate_engine(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in {"playwright", "selenium"}:
            raise ValueError("engine must be 'playwright' or 'selenium'")
        return normalized

    @field_validator("browser")
    @classmethod
    def validate_browser(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in {"chromium", "chrome", "firefox"}:
            raise ValueError(f"Unsupported browser: {value}")
        return normalized


class AuditConfig(BaseModel):
    """Document stored in an ``attr-audit.config.json`` file."""

    audit: AuditOptions = Field(default_factory=AuditOptions)
    browser: BrowserConfig | None = None


class ProjectSettings(BaseModel):
    """Attribute settings a project pins in ``[tool.attr-audit]`` of its pyproject.toml."""

    attribute_name: str | None = None
