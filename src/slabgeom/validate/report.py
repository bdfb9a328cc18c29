"""
Validation report generation for slabgeom.

Creates JSON and text reports of piece validation results.
"""

import os

from slabgeom.io.save_artifacts import ensure_dir, save_json
from slabgeom.tracer import get_tracer, trace


@trace(label="generate_report")
def generate_report(report, out_dir, piece_name=None):
    """
    Generate validation report files.

    Creates:
    - validation_report.json: Full check results
    - validation_summary.txt: Human-readable summary
    """
    tracer = get_tracer()

    report_path = os.path.join(out_dir, "validation_report.json")
    save_json(report, report_path)

    summary_text = format_summary(report, piece_name)

    summary_path = os.path.join(out_dir, "validation_summary.txt")
    ensure_dir(os.path.dirname(summary_path))
    with open(summary_path, "w", encoding="utf-8") as f:
        f.write(summary_text)

    tracer.event(f"Report saved: {len(report.checks)} checks, {report.error_count} errors")

    return report_path, summary_path


def format_summary(report, piece_name=None):
    """Human-readable summary: counts, failed checks, then every check."""
    title = "Piece Validation Report"
    if piece_name:
        title = f"{title}: {piece_name}"
    lines = [title, "=" * 40, ""]

    failed = report.issues
    lines.append(f"Total checks: {len(report.checks)}")
    lines.append(f"Passed: {len(report.checks) - len(failed)}")
    lines.append(f"Failed: {len(failed)}")
    lines.append("")

    if failed:
        lines.append("ISSUES:")
        lines.append("-" * 40)
        for check in failed:
            severity_mark = "[ERROR]" if check.severity.value == "error" else "[WARN]"
            lines.append(f"{severity_mark} {check.rule_id}: {check.message}")
        lines.append("")

    lines.append("ALL CHECKS:")
    lines.append("-" * 40)
    for check in report.checks:
        lines.append(format_check_result(check))

    return "\n".join(lines)


def format_check_result(check):
    """Format a single check result for display."""
    status = "PASS" if check.passed else "FAIL"
    severity = check.severity.value.upper()
    return f"[{status}][{severity}] {check.rule_id}: {check.message}"
