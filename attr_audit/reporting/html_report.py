from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable

from jinja2 import Environment

from attr_audit.core.metadata import AuditResult

STYLE = """
* { margin: 0; padding: 0; box-sizing: border-box; }
body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; background: #f5f5f5; padding: 20px; }
.container { max-width: 1200px; margin: 0 auto; background: white; border-radius: 8px; box-shadow: 0 2px 8px rgba(0,0,0,0.1); overflow: hidden; }
header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 30px; }
header h1 { font-size: 28px; margin-bottom: 10px; }
header .meta { opacity: 0.9; font-size: 14px; }
.stats { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 20px; padding: 30px; background: #f9f9f9; border-bottom: 1px solid #eee; }
.stat-card { text-align: center; padding: 20px; background: white; border-radius: 6px; box-shadow: 0 1px 3px rgba(0,0,0,0.1); }
.stat-card .value { font-size: 36px; font-weight: bold; margin-bottom: 5px; }
.stat-card .label { color: #666; font-size: 14px; }
.stat-card.success .value { color: #10b981; }
.stat-card.warning .value { color: #f59e0b; }
.stat-card.error .value { color: #ef4444; }
.coverage-bar { width: 100%; height: 20px; background: #e5e7eb; border-radius: 10px; overflow: hidden; margin-top: 10px; }
.coverage-fill { height: 100%; background: linear-gradient(90deg, #10b981 0%, #34d399 100%); color: white; font-size: 12px; font-weight: bold; }
.filter-controls { display: flex; gap: 24px; align-items: center; padding: 16px 30px; border-bottom: 1px solid #eee; }
.filter-toggle { display: flex; gap: 8px; align-items: center; }
.filter-label { font-size: 14px; color: #555; }
.filter-badge { font-size: 12px; font-weight: bold; padding: 2px 8px; border-radius: 10px; color: white; }
.filter-badge.missing { background: #ef4444; }
.filter-badge.has-attr { background: #10b981; }
section { padding: 30px; }
.partition-header { font-weight: bold; padding: 8px 12px; border-radius: 4px; margin-bottom: 10px; }
.partition-header.missing { background: #fee2e2; color: #991b1b; }
.partition-header.present { background: #d1fae5; color: #065f46; }
.group-header { font-weight: bold; color: #667eea; margin: 20px 0 10px; }
.element { border: 1px solid #eee; border-radius: 6px; padding: 12px 16px; margin-bottom: 10px; }
.element.present { border-left: 4px solid #10b981; }
.element.missing { border-left: 4px solid #ef4444; }
.element code { background: #f3f4f6; padding: 1px 4px; border-radius: 3px; }
.element img { max-width: 320px; margin-top: 8px; border: 1px solid #ddd; }
.empty-state { text-align: center; padding: 60px 30px; color: #10b981; font-size: 20px; }
"""

REPORT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Test Attribute Audit Report</title>
  <style>{{ style|safe }}</style>
</head>
<body>
  <div class="container">
    <header>
      <h1>Test Attribute Audit Report</h1>
      <div class="meta">
        <div>Page: <strong>{{ result.page_url }}</strong></div>
        <div>Audited: <strong>{{ audited }}</strong></div>
        <div>Attribute: <strong>{{ result.attribute_name }}</strong></div>
      </div>
    </header>
    <div class="stats">
      <div class="stat-card {{ 'success' if result.missing_attribute_count == 0 else 'error' }}">
        <div class="value">{{ result.missing_attribute_count }}</div>
        <div class="label">Missing Attributes</div>
      </div>
      <div class="stat-card">
        <div class="value">{{ result.total_elements_scanned }}</div>
        <div class="label">Elements Scanned</div>
      </div>
      <div class="stat-card {{ coverage_class(coverage) }}">
        <div class="value">{{ coverage }}%</div>
        <div class="label">Coverage</div>
        <div class="coverage-bar"><div class="coverage-fill" style="width: {{ coverage }}%">{{ coverage }}%</div></div>
      </div>
    </div>
{% macro screenshot(encoded) %}
{% if encoded %}<img alt="element screenshot" src="data:image/png;base64,{{ encoded }}">{% endif %}
{% endmacro %}
{% macro missing_card(element) %}
<div class="element missing" data-type="missing">
  <div><strong>Selector:</strong> <code>{{ element.selector }}</code></div>
  <div><strong>Text:</strong> {% if element.text_snippet %}{{ element.text_snippet }}{% else %}<em>(none)</em>{% endif %}</div>
  {% if element.role %}<div><strong>Role:</strong> {{ element.role }}</div>{% endif %}
  {% if element.xpath %}<div><strong>XPath:</strong> <code>{{ element.xpath }}</code></div>{% endif %}
  {% if element.suggested_value %}<div><strong>Suggested:</strong> <code>{{ element.suggested_value }}</code></div>{% endif %}
  {% if element.bounding_box %}{% set box = element.bounding_box %}<div><strong>Position:</strong> {{ box.x }},{{ box.y }} ({{ box.width }}&times;{{ box.height }})</div>{% endif %}
  {{ screenshot(element.screenshot) }}
</div>
{% endmacro %}
{% macro present_card(element) %}
<div class="element present" data-type="has-attribute">
  <div><strong>Selector:</strong> <code>{{ element.selector }}</code></div>
  <div><strong>Value:</strong> <code>{{ element.attribute_value }}</code></div>
  <div><strong>Text:</strong> {% if element.text_snippet %}{{ element.text_snippet }}{% else %}<em>(none)</em>{% endif %}</div>
  {{ screenshot(element.screenshot) }}
</div>
{% endmacro %}
{% macro grouped(groups, card) %}
{% for tag_name, elements in groups.items() %}
<div class="group-header">&lt;{{ tag_name }}&gt; ({{ elements|length }})</div>
{% for element in elements %}{{ card(element) }}{% endfor %}
{% endfor %}
{% endmacro %}
{% if result.missing_attribute_count == 0 and not result.elements_with_attribute %}
    <div class="empty-state">All scanned elements have the required attribute.</div>
{% elif result.elements_with_attribute %}
    <div class="filter-controls">
      <div class="filter-toggle">
        <span class="filter-label">Show:</span>
        <input type="checkbox" id="toggleMissing" data-filter="missing-section" checked>
        <label class="filter-label" for="toggleMissing">Missing Attributes</label>
        <span class="filter-badge missing" id="missingCount">{{ result.missing_attribute_count }}</span>
      </div>
      <div class="filter-toggle">
        <input type="checkbox" id="toggleHasAttribute" data-filter="has-attribute-section" checked>
        <label class="filter-label" for="toggleHasAttribute">Has Attributes</label>
        <span class="filter-badge has-attr" id="hasAttributeCount">{{ result.has_attribute_count }}</span>
      </div>
    </div>
    <section>
      <h2>All Elements</h2>
      {% if result.missing_attribute_count %}
      <div id="missing-section">
        <div class="partition-header missing">Missing {{ result.attribute_name }} ({{ result.missing_attribute_count }} {{ noun(result.missing_attribute_count) }})</div>
        {{ grouped(missing_groups, missing_card) }}
      </div>
      {% endif %}
      <div id="has-attribute-section">
        <div class="partition-header present">Has {{ result.attribute_name }} ({{ result.has_attribute_count }} {{ noun(result.has_attribute_count) }})</div>
        {{ grouped(present_groups, present_card) }}
      </div>
    </section>
    <script>
      document.querySelectorAll("[data-filter]").forEach(function (toggle) {
        toggle.addEventListener("change", function () {
          var section = document.getElementById(toggle.dataset.filter);
          if (section) section.style.display = toggle.checked ? "" : "none";
        });
      });
    </script>
{% else %}
    <section>
      <h2>Missing {{ result.attribute_name }} ({{ result.missing_attribute_count }} {{ noun(result.missing_attribute_count) }})</h2>
      {{ grouped(missing_groups, missing_card) }}
    </section>
{% endif %}
  </div>
</body>
</html>
"""

environment = Environment(autoescape=True, trim_blocks=True, lstrip_blocks=True)


def coverage_class(coverage: float) -> str:
    if coverage >= 90:
        return "success"
    if coverage >= 70:
        return "warning"
    return "error"


def noun(count: int | None) -> str:
    return "element" if count == 1 else "elements"


def render_template(source: str, **context: Any) -> str:
    """Renders an HTML template with every interpolated value escaped."""

    return environment.from_string(source).render(style=STYLE, **context)


def render_html_report(result: AuditResult) -> str:
    audited = datetime.fromisoformat(result.timestamp).strftime("%Y-%m-%d %H:%M:%S %Z")
    return render_template(
        REPORT_TEMPLATE,
        result=result,
        audited=audited,
        coverage=round(result.coverage_percentage),
        coverage_class=coverage_class,
        noun=noun,
        missing_groups=group_by_tag(result.elements_missing_attribute),
        present_groups=group_by_tag(result.elements_with_attribute or ()),
    )


def write_html_report(result: AuditResult, path: str | Path) -> Path:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_html_report(result), encoding="utf-8")
    return output_path


def group_by_tag(elements: Iterable) -> dict[str, list]:
    grouped: dict[str, list] = defaultdict(list)
    for element in elements:
        grouped[element.tag_name].append(element)
    return dict(grouped)
