from __future__ import annotations

import json

from attr_audit.config.schema import AuditOptions
from attr_audit.core.metadata import AuditResult, HasAttributeElement, MissingAttributeElement
from attr_audit.core.multi_page import PageAuditor, audit_current_page, sanitize_filename
from attr_audit.reporting.html_report import render_html_report, write_html_report
from attr_audit.reporting.json_report import append_history, write_json_report
from tests.helpers import FakePageDriver, el, page


def make_result(missing=()):
    return AuditResult(
        attribute_name="data-testid",
        total_elements_scanned=4,
        missing_attribute_count=len(missing),
        elements_missing_attribute=tuple(missing),
        timestamp="2026-01-02T03:04:05+00:00",
        page_url="https://example.test/?a=1&b=2",
    )


def test_json_report_round_trips_result_document(tmp_path):
    result = make_result(
        [MissingAttributeElement("button", "button", "Buy", "https://example.test/", suggested_value="buy")]
    )

    path = write_json_report(result, tmp_path / "reports" / "audit.json")

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["missingAttributeCount"] == 1
    assert payload["elementsMissingAttribute"][0]["suggestedValue"] == "buy"


def test_history_appends_one_line_per_run(tmp_path):
    history = tmp_path / "history.jsonl"

    append_history(make_result(), history)
    append_history(make_result(), history)

    lines = history.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert json.loads(lines[0])["coverage"] == 100.0


def test_html_report_escapes_and_groups_missing_elements(tmp_path):
    result = make_result(
        [
            MissingAttributeElement("a.nav", "a", "<script>alert(1)</script>", "https://example.test/"),
            MissingAttributeElement("button", "button", "Pay", "https://example.test/", screenshot="QUJD"),
        ]
    )

    html = render_html_report(result)

    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
    assert "<script>alert(1)" not in html
    assert "https://example.test/?a=1&amp;b=2" in html
    assert "Missing data-testid (2 elements)" in html
    assert "&lt;button&gt; (1)" in html
    assert "data:image/png;base64,QUJD" in html
    assert "50%" in html

    path = write_html_report(result, tmp_path / "report.html")
    assert path.read_text(encoding="utf-8") == html


def test_html_report_shows_empty_state():
    html = render_html_report(make_result())

    assert "All scanned elements have the required attribute." in html
    assert "100%" in html


def test_sanitize_filename():
    assert sanitize_filename("Checkout / Step 2!") == "checkout-step-2"
    assert sanitize_filename("***") == "report"


def test_page_auditor_aggregates_pages(run, tmp_path):
    auditor = PageAuditor(options=AuditOptions(include_selectors=["button"], log_to_console=True))
    first = FakePageDriver(page(el("button", "One"), el("button", "Two", data_testid="two")), url="https://a.test/")
    second = FakePageDriver(page(el("button", "Three")), url="https://b.test/")

    run(auditor.audit_current_page(first))
    run(auditor.audit_current_page(second, page_id="Step B"))
    summary = auditor.summary()

    assert summary.total_pages_audited == 2
    assert summary.total_elements_scanned == 3
    assert summary.total_missing_attributes == 2
    assert summary.overall_coverage == 33.33
    assert [item.page_id for item in summary.page_results] == ["https://a.test/", "Step B"]

    report = auditor.write_report(tmp_path / "multi.html").read_text(encoding="utf-8")
    assert "Multi-Page Audit Report" in report
    assert "Step B" in report


def test_audit_current_page_writes_named_report(run, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    driver = FakePageDriver(page(el("button", "Checkout")))

    result = run(audit_current_page(driver, "Checkout Page", AuditOptions(include_selectors=["button"])))

    assert result.missing_attribute_count == 1
    assert (tmp_path / "checkout-page.html").exists()


def test_html_report_adds_filter_controls_when_present_elements_are_tracked():
    result = AuditResult(
        attribute_name="data-testid",
        total_elements_scanned=2,
        missing_attribute_count=1,
        elements_missing_attribute=(MissingAttributeElement("a", "a", "Docs", "https://example.test/"),),
        timestamp="2026-01-02T03:04:05+00:00",
        page_url="https://example.test/",
        has_attribute_count=1,
        elements_with_attribute=(
            HasAttributeElement(
                selector="#save",
                tag_name="button",
                text_snippet="Save",
                attribute_value="save-<draft>",
                page_url="https://example.test/",
            ),
        ),
    )

    html = render_html_report(result)

    assert 'id="toggleMissing"' in html
    assert 'id="toggleHasAttribute"' in html
    assert '<span class="filter-badge missing" id="missingCount">1</span>' in html
    assert '<span class="filter-badge has-attr" id="hasAttributeCount">1</span>' in html
    assert "All Elements" in html
    assert 'id="missing-section"' in html
    assert 'id="has-attribute-section"' in html
    assert "save-&lt;draft&gt;" in html


def test_html_report_omits_filter_controls_without_present_elements():
    result = make_result([MissingAttributeElement("a", "a", "Docs", "https://example.test/")])

    html = render_html_report(result)

    assert "toggleMissing" not in html
    assert "All Elements" not in html


def test_combined_report_escapes_page_ids(run, tmp_path):
    auditor = PageAuditor(options=AuditOptions(include_selectors=["button"]))
    run(auditor.audit_current_page(FakePageDriver(page(el("button", "One"))), page_id="<b>Cart</b>"))

    report = auditor.write_report(tmp_path / "multi.html").read_text(encoding="utf-8")

    assert "&lt;b&gt;Cart&lt;/b&gt;" in report
    assert "<b>Cart</b>" not in report
    assert "0.0%" in report
