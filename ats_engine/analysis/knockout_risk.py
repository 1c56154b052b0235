from __future__ import annotations

import logging
from collections.abc import Iterable

from ats_engine.schemas.findings import Finding
from ats_engine.schemas.knockouts import KnockoutItem, KnockoutRisk, KnockoutRiskResult

logger = logging.getLogger(__name__)

_RISK_LABELS: dict[str, str] = {
    "low": "Low Risk",
    "medium": "Review Needed",
    "high": "High Risk",
}


def risk_label(risk: KnockoutRisk) -> str:
    return _RISK_LABELS[risk]


def _join_labels(items: list[KnockoutItem], limit: int = 3) -> str:
    labels = [item.label for item in items[:limit]]
    if len(items) > limit:
        labels.append(f"{len(items) - limit} more")
    return "; ".join(labels)


def calculate_knockout_risk(items: Iterable[KnockoutItem]) -> KnockoutRiskResult:
    """Reduce knockout items to one risk level from their confirmation states alone.

    Any item confirmed False makes the risk high, any unconfirmed item makes it
    medium, and a list that is empty or fully confirmed True is low.
    """
    items = list(items)
    blockers = [item for item in items if item.user_confirmed is False]
    unclear = [item for item in items if item.user_confirmed is None]
    confirmed = [item for item in items if item.user_confirmed is True]
    findings: list[Finding] = []

    for item in blockers:
        findings.append(
            Finding(
                id=f"knockout-blocker-{item.id}",
                severity="critical",
                category="knockout",
                title=f"Requirement Not Met: {item.label}",
                description=f'The job states: "{item.evidence}"',
                impact="Applications that fail a knockout question are usually rejected automatically.",
                suggestion="Confirm whether this requirement truly applies to you before applying.",
            )
        )

    if blockers:
        risk: KnockoutRisk = "high"
        explanation = f"{len(blockers)} requirement(s) you do not meet: {_join_labels(blockers)}."
        if unclear:
            explanation += f" {len(unclear)} more still need review."
    elif unclear:
        risk = "medium"
        explanation = f"{len(unclear)} requirement(s) still need your confirmation: {_join_labels(unclear)}."
    else:
        risk = "low"
        explanation = (
            f"You meet all {len(confirmed)} detected requirement(s)."
            if confirmed
            else "No knockout requirements were detected."
        )

    if unclear:
        findings.append(
            Finding(
                id="knockout-unconfirmed",
                severity="medium",
                category="knockout",
                title="Unconfirmed Requirements",
                description=f"Review these requirements: {_join_labels(unclear)}.",
                impact="Unconfirmed knockout requirements may disqualify the application.",
                suggestion="Mark each requirement as met or not met.",
            )
        )
    if risk == "low":
        findings.append(
            Finding(
                id="knockout-clear",
                severity="info",
                category="knockout",
                title="No Knockout Blockers",
                description=explanation,
                impact="Automated knockout questions should not screen out this application.",
            )
        )

    logger.debug(
        "knockout_risk_calculated risk=%s blockers=%s unclear=%s confirmed=%s",
        risk,
        len(blockers),
        len(unclear),
        len(confirmed),
    )
    return KnockoutRiskResult(
        risk=risk,
        explanation=explanation,
        blockers=blockers,
        unclear=unclear,
        confirmed=confirmed,
        findings=findings,
    )
