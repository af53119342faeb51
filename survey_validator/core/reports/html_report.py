"""HTML report generation.

Produces standalone HTML documents for a
:class:`~survey_validator.core.results.validation_report.ValidationReport`
and for a reduced level run.
"""

from __future__ import annotations

import html

from ..results.leveling_result import LevelingResult
from ..results.traverse_result import TraverseResult
from ..results.validation_report import Severity, ValidationReport, ValidationStatus

_CSS = """
body { font-family: Arial, sans-serif; margin: 24px; }
h1 { margin-bottom: 4px; }
.meta { color: #555; margin-bottom: 16px; }
table { border-collapse: collapse; width: 100%; margin: 12px 0 24px 0; }
th, td { border: 1px solid #ddd; padding: 6px 8px; font-size: 13px; }
th { background: #f5f5f5; text-align: left; }
.ok { color: #067d00; font-weight: bold; }
.warn { color: #a15c00; font-weight: bold; }
.bad { color: #b00020; font-weight: bold; }
.error { background: #fde7ea; }
.warning { background: #fff3cd; }
.small { font-size: 12px; color: #666; }
"""

_STATUS_CLASS = {
    ValidationStatus.PASS: "ok",
    ValidationStatus.WARNING: "warn",
    ValidationStatus.FAIL: "bad",
}


def esc(s: object) -> str:
    return html.escape(str(s))


def _document_head(title: str) -> list[str]:
    return [
        "<!doctype html>",
        "<html><head><meta charset='utf-8'>",
        f"<title>{esc(title)}</title>",
        f"<style>{_CSS}</style>",
        "</head><body>",
        f"<h1>{esc(title)}</h1>",
    ]


def _traverse_section(result: TraverseResult) -> list[str]:
    parts: list[str] = ["<h2>Traverse Adjustment</h2>"]
    cls = "ok" if result.passed else "bad"
    parts.append(
        f"<div class='meta'>Status: <span class='{cls}'>{esc(result.status.value)}</span> | "
        f"{esc(result.traverse_type_desc or '-')} | "
        f"Closure: {esc(result.closure_ratio or '-')} | "
        f"Required: 1:{result.required_precision:.0f}</div>"
    )
    parts.append(f"<p>{esc(result.message)}</p>")

    if result.legs:
        parts.append(
            "<table><thead><tr><th>From</th><th>To</th><th>Distance (m)</th><th>Bearing (deg)</th>"
            "<th>ΔE</th><th>ΔN</th><th>Corr E</th><th>Corr N</th></tr></thead><tbody>"
        )
        for leg in result.legs:
            parts.append(
                "<tr>"
                f"<td>{esc(leg.from_point)}</td><td>{esc(leg.to_point)}</td>"
                f"<td>{leg.distance:.3f}</td><td>{leg.bearing:.4f}</td>"
                f"<td>{leg.delta_e:.4f}</td><td>{leg.delta_n:.4f}</td>"
                f"<td>{leg.correction_e:.4f}</td><td>{leg.correction_n:.4f}</td>"
                "</tr>"
            )
        parts.append("</tbody></table>")

    if result.adjusted_points:
        parts.append(
            "<table><thead><tr><th>Point</th><th>E raw</th><th>N raw</th>"
            "<th>E adj</th><th>N adj</th><th>Shift (m)</th></tr></thead><tbody>"
        )
        for p in result.adjusted_points:
            parts.append(
                "<tr>"
                f"<td>{esc(p.point_id)}</td>"
                f"<td>{p.raw_easting:.3f}</td><td>{p.raw_northing:.3f}</td>"
                f"<td>{p.adjusted_easting:.3f}</td><td>{p.adjusted_northing:.3f}</td>"
                f"<td>{p.residual_distance:.4f}</td>"
                "</tr>"
            )
        parts.append("</tbody></table>")

    if result.suggested_fixes:
        parts.append("<h3>Suggested Fixes</h3><ul>")
        for fix in result.suggested_fixes:
            parts.append(f"<li>{esc(fix)}</li>")
        parts.append("</ul>")
    return parts


def render_html_report(report: ValidationReport, title: str | None = None) -> str:
    """Render a :class:`ValidationReport` as a standalone HTML document."""
    if title is None:
        title = f"Survey Validation Report - {report.project_id}" if report.project_id else "Survey Validation Report"

    parts = _document_head(title)
    parts.append(
        f"<div class='meta'>Status: <span class='{_STATUS_CLASS[report.status]}'>{esc(report.status.value)}</span> | "
        f"Confidence: {report.confidence_score:.0f} | "
        f"Errors: {report.error_count} | Warnings: {report.warning_count} | Info: {report.info_count} | "
        f"Time: {report.processing_time_ms:.1f} ms</div>"
    )

    s = report.summary
    bb = s.bounding_box
    parts.append("<h2>Summary</h2>")
    parts.append(
        "<table><thead><tr><th>Points</th><th>Traverse</th><th>Control</th><th>Detail</th>"
        "<th>With height</th><th>Centroid E</th><th>Centroid N</th><th>Extent (m)</th></tr></thead><tbody>"
    )
    parts.append(
        "<tr>"
        f"<td>{s.total_points}</td><td>{s.traverse_points}</td>"
        f"<td>{s.control_points}</td><td>{s.detail_points}</td>"
        f"<td>{s.points_with_height}</td>"
        f"<td>{s.centroid_easting:.3f}</td><td>{s.centroid_northing:.3f}</td>"
        f"<td>{bb.width:.3f} x {bb.height:.3f}</td>"
        "</tr>"
    )
    parts.append("</tbody></table>")

    parts.append("<h2>Issues</h2>")
    if report.issues:
        parts.append("<table><thead><tr><th>Check</th><th>Severity</th><th>Description</th><th>Points</th></tr></thead><tbody>")
        for issue in report.issues:
            cls = issue.severity.value if issue.severity is not Severity.INFO else ""
            parts.append(
                f"<tr class='{cls}'>"
                f"<td>{esc(issue.check_name)}</td><td>{esc(issue.severity.value)}</td>"
                f"<td>{esc(issue.description)}</td><td>{esc(', '.join(issue.point_ids))}</td>"
                "</tr>"
            )
        parts.append("</tbody></table>")
    else:
        parts.append("<p>No issues found.</p>")

    if report.traverse_result is not None:
        parts.extend(_traverse_section(report.traverse_result))

    parts.append("<h2>Checks Performed</h2><ul>")
    for name in report.checks_performed:
        parts.append(f"<li>{esc(name)}</li>")
    parts.append("</ul>")

    parts.append(f"<div class='small'>Generated {esc(report.timestamp)} by Survey Validator</div>")
    parts.append("</body></html>")
    return "\n".join(parts)


def render_leveling_html(result: LevelingResult, title: str | None = None) -> str:
    """Render a reduced level run as a standalone HTML document."""
    if title is None:
        title = "Leveling Reduction Report"

    parts = _document_head(title)
    cls = "ok" if result.passed else "bad"
    parts.append(
        f"<div class='meta'>Status: <span class='{cls}'>{esc(result.status.value)}</span> | "
        f"{esc(result.start_bm or '-')} → {esc(result.end_bm or '-')} | "
        f"Class: {esc(result.tolerance_class.value)} | "
        f"Distance: {result.total_distance_km:.3f} km</div>"
    )
    parts.append(f"<p>{esc(result.message)}</p>")

    parts.append("<h2>Closure</h2>")
    parts.append("<table><thead><tr><th>Misclosure (mm)</th><th>Allowable (mm)</th><th>ΣRise</th><th>ΣFall</th><th>Arithmetic check</th></tr></thead><tbody>")
    parts.append(
        "<tr>"
        f"<td class='{cls}'>{result.height_misclosure * 1000:.1f}</td>"
        f"<td>{result.allowable_misclosure * 1000:.1f}</td>"
        f"<td>{result.sum_rise:.4f}</td><td>{result.sum_fall:.4f}</td>"
        f"<td>{result.arithmetic_check:.4f}</td>"
        "</tr>"
    )
    parts.append("</tbody></table>")

    if result.points:
        parts.append("<h2>Reduced Levels</h2>")
        parts.append("<table><thead><tr><th>Point</th><th>Rise</th><th>Fall</th><th>Raw RL</th><th>Correction (mm)</th><th>Adjusted RL</th></tr></thead><tbody>")
        for p in result.points:
            rise = f"{p.rise:.4f}" if p.rise is not None else ""
            fall = f"{p.fall:.4f}" if p.fall is not None else ""
            parts.append(
                "<tr>"
                f"<td>{esc(p.point_id)}</td><td>{rise}</td><td>{fall}</td>"
                f"<td>{p.raw_rl:.4f}</td><td>{p.correction * 1000:.2f}</td>"
                f"<td>{p.adjusted_rl:.4f}</td>"
                "</tr>"
            )
        parts.append("</tbody></table>")

    parts.append("<div class='small'>Generated by Survey Validator</div>")
    parts.append("</body></html>")
    return "\n".join(parts)


def save_html_report(path: str, report: ValidationReport, title: str | None = None) -> None:
    """Write an HTML report to disk."""
    html_str = render_html_report(report, title=title)
    with open(path, "w", encoding="utf-8") as f:
        f.write(html_str)
