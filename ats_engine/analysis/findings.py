from __future__ import annotations

import re
from collections.abc import Iterable

from ats_engine.schemas.findings import Finding, FindingCategory, FindingSeverity

SEVERITY_ORDER: tuple[FindingSeverity, ...] = ("critical", "high", "medium", "low", "info")

_SEVERITY_RANK: dict[str, int] = {severity: index for index, severity in enumerate(SEVERITY_ORDER)}

_SEVERITY_LABELS: dict[str, str] = {
    "critical": "Critical",
    "high": "High",
    "medium": "Medium",
    "low": "Low",
    "info": "Info",
}

_CATEGORY_LABELS: dict[str, str] = {
    "extraction": "Text Extraction",
    "layout": "Layout & Formatting",
    "contact": "Contact Information",
    "structure": "Resume Structure",
    "keyword": "Keywords",
    "formatting": "Formatting",
    "knockout": "Knockout Requirements",
}

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def severity_label(severity: FindingSeverity) -> str:
    return _SEVERITY_LABELS[severity]


def category_label(category: FindingCategory) -> str:
    return _CATEGORY_LABELS[category]


def severity_rank(severity: FindingSeverity) -> int:
    """0 for critical up to 4 for info."""
    return _SEVERITY_RANK[severity]


def is_issue(finding: Finding) -> bool:
    return finding.severity != "info"


def sort_findings(findings: Iterable[Finding]) -> list[Finding]:
    # sorted() is stable, so equal severities keep emission order.
    return sorted(findings, key=lambda finding: _SEVERITY_RANK[finding.severity])


def filter_findings_by_severity(
    findings: Iterable[Finding],
    severities: Iterable[FindingSeverity],
) -> list[Finding]:
    wanted = set(severities)
    return [finding for finding in findings if finding.severity in wanted]


def group_findings_by_category(findings: Iterable[Finding]) -> dict[FindingCategory, list[Finding]]:
    grouped: dict[FindingCategory, list[Finding]] = {}
    for finding in findings:
        grouped.setdefault(finding.category, []).append(finding)
    return grouped


def count_findings_by_severity(findings: Iterable[Finding]) -> dict[FindingSeverity, int]:
    counts: dict[FindingSeverity, int] = {severity: 0 for severity in SEVERITY_ORDER}
    for finding in findings:
        counts[finding.severity] += 1
    return counts


def count_issues(findings: Iterable[Finding]) -> int:
    return sum(1 for finding in findings if is_issue(finding))


def slugify(value: str) -> str:
    value = value.lower().replace("+", " plus ").replace("#", " sharp ")
    return _SLUG_RE.sub("-", value).strip("-")
