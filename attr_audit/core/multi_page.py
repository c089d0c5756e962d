from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from attr_audit.config.schema import AuditOptions, ProjectSettings
from attr_audit.core.audit import audit_test_attributes
from attr_audit.core.driver import PageDriver
from attr_audit.core.metadata import AuditResult
from attr_audit.reporting.html_report import render_template, write_html_report

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class PageAuditResult:
    page_id: str
    result: AuditResult
    audited_at: str


@dataclass(slots=True, frozen=True)
class MultiPageAuditResult:
    total_pages_audited: int
    total_elements_scanned: int
    total_missing_attributes: int
    overall_coverage: float
    page_results: tuple[PageAuditResult, ...]
    started_at: str
    completed_at: str


@dataclass(slots=True)
class PageAuditor:
    """Audits successive states of a page while a test navigates through a flow."""

    options: AuditOptions = field(default_factory=AuditOptions)
    settings: ProjectSettings | None = None
    page_results: list[PageAuditResult] = field(default_factory=list)
    started_at: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    async def audit_current_page(
        self,
        driver: PageDriver,
        page_id: str | None = None,
        options: AuditOptions | None = None,
    ) -> AuditResult:
        page_options = (options or self.options).model_copy(update={"log_to_console": False})
        current_id = page_id or driver.current_url() or f"page-{len(self.page_results) + 1}"
        result = await audit_test_attributes(driver, page_options, self.settings)
        self.page_results.append(
            PageAuditResult(
                page_id=current_id,
                result=result,
                audited_at=datetime.now(UTC).isoformat(),
            )
        )
        return result

    def summary(self) -> MultiPageAuditResult:
        total_scanned = sum(item.result.total_elements_scanned for item in self.page_results)
        total_missing = sum(item.result.missing_attribute_count for item in self.page_results)
        coverage = (total_scanned - total_missing) / total_scanned * 100 if total_scanned else 100.0
        return MultiPageAuditResult(
            total_pages_audited=len(self.page_results),
            total_elements_scanned=total_scanned,
            total_missing_attributes=total_missing,
            overall_coverage=round(coverage, 2),
            page_results=tuple(self.page_results),
            started_at=self.started_at,
            completed_at=datetime.now(UTC).isoformat(),
        )

    def write_report(self, path: str | Path) -> Path:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(render_combined_report(self.summary()), encoding="utf-8")
        return output_path


COMBINED_REPORT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>Multi-Page Audit Report</title>
  <style>{{ style|safe }}</style>
</head>
<body>
  <div class="container">
    <header>
      <h1>Multi-Page Audit Report</h1>
      <div class="meta">Started: {{ summary.started_at }} &middot; Completed: {{ summary.completed_at }}</div>
    </header>
    <div class="stats">
      <div class="stat-card"><div class="value">{{ summary.total_pages_audited }}</div><div class="label">Pages Audited</div></div>
      <div class="stat-card"><div class="value">{{ summary.total_elements_scanned }}</div><div class="label">Total Elements</div></div>
      <div class="stat-card"><div class="value">{{ summary.total_missing_attributes }}</div><div class="label">Missing Attributes</div></div>
      <div class="stat-card">
        <div class="value">{{ "%.1f"|format(summary.overall_coverage) }}%</div>
        <div class="label">Overall Coverage</div>
        <div class="coverage-bar"><div class="coverage-fill" style="width: {{ summary.overall_coverage }}%"></div></div>
      </div>
    </div>
    <section>
      <h2>Page Results</h2>
{% for page in summary.page_results %}
      <div class="element">
        <h3>{{ loop.index }}. {{ page.page_id }}</h3>
        <div><strong>URL:</strong> {{ page.result.page_url }}</div>
        <div><strong>Scanned:</strong> {{ page.result.total_elements_scanned }} elements</div>
        <div><strong>Missing:</strong> {{ page.result.missing_attribute_count }} attributes</div>
        <div><strong>Coverage:</strong> {{ "%.1f"|format(page.result.coverage_percentage) }}%</div>
        <div><strong>Audited:</strong> {{ page.audited_at }}</div>
      </div>
{% endfor %}
    </section>
  </div>
</body>
</html>
"""


def render_combined_report(summary: MultiPageAuditResult) -> str:
    return render_template(COMBINED_REPORT_TEMPLATE, summary=summary)


def sanitize_filename(name: str) -> str:
    cleaned = re.sub(r"[^a-z0-9]", "-", name, flags=re.IGNORECASE)
    cleaned = re.sub(r"-+", "-", cleaned).strip("-")
    return cleaned.lower() or "report"


async def audit_current_page(
    driver: PageDriver,
    report_title: str,
    options: AuditOptions | None = None,
    output_path: str | Path | None = None,
    settings: ProjectSettings | None = None,
) -> AuditResult:
    """Audits the current page and writes an HTML report named after ``report_title``."""

    result = await audit_test_attributes(driver, options, settings)
    path = write_html_report(result, output_path or f"{sanitize_filename(report_title)}.html")
    logger.info("HTML report generated: %s", path)
    return result
