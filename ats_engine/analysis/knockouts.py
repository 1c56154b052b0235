from __future__ import annotations

import logging
import re
from collections.abc import Callable

from ats_engine.core.config import get_scoring_value
from ats_engine.core.errors import PatternEngineError
from ats_engine.normalize.utils import require_text, sentence_spans, strip_bullet_prefix
from ats_engine.schemas.knockouts import (
    KNOCKOUT_CATEGORY_ORDER,
    KnockoutCategory,
    KnockoutItem,
    make_knockout_id,
)

from .experience import extract_experience_requirements

logger = logging.getLogger(__name__)

_CERT_NAMES = (
    r"(?:cpa|pmp|cissp|cism|cisa|ccna|ccnp|itil|cfa|comptia(?:\s+[a-z]+\+?)?|security\+"
    r"|six\s+sigma|scrum\s+master|csm)"
)
_CERT_DISPLAY: dict[str, str] = {
    "security+": "Security+",
    "six sigma": "Six Sigma",
    "scrum master": "Scrum Master",
    "comptia": "CompTIA",
}

_RULE_SOURCES: dict[str, tuple[str, ...]] = {
    "authorization": (
        r"\bmust\s+be\s+(?:legally\s+)?authori[sz]ed\s+to\s+work\b",
        r"\bauthori[sz]ed\s+to\s+work\s+in\s+the\s+(?:u\.?s\.?|united\s+states)",
        r"\bu\.?s\.?\s+citizen(?:ship)?\b[^.\n]{0,25}\b(?:required|only)\b",
        r"\bmust\s+be\s+an?\s+(?:u\.?s\.?\s+)?citizen\b",
        r"\b(?:green\s+card|permanent\s+resident)s?\b[^.\n]{0,25}\b(?:required|only)\b",
        r"\bno\s+(?:visa\s+)?sponsorship\b",
        r"\bsponsorship\s+(?:is\s+)?not\s+(?:available|offered|provided)\b",
        r"\bunable\s+to\s+(?:provide|offer)\s+(?:visa\s+)?sponsorship\b",
        r"\b(?:cannot|can't|will\s+not|won't|do\s+not|does\s+not)\s+(?:provide\s+|offer\s+)?sponsor",
    ),
    "clearance": (
        r"\b(?:top\s+secret|ts/sci|secret)(?:/sci)?\s+(?:security\s+)?clearance\b",
        r"\bsecurity\s+clearance\b",
        r"\bclearance\s+(?:is\s+)?required\b",
        r"\bmust\s+(?:have|hold|possess|obtain|be\s+able\s+to\s+obtain)\b[^.\n]{0,40}\bclearance\b",
        r"\bts/sci\b",
        r"\bpolygraph\b",
    ),
    "certification": (
        rf"\b{_CERT_NAMES}(?![\w+])[^.\n]{{0,40}}\b(?:required|mandatory)\b",
        rf"\b(?:required|must\s+(?:have|hold|possess))\b[^.\n]{{0,40}}\b{_CERT_NAMES}(?![\w+])",
        r"\baws\s+certified\b",
        r"\b(?:certification|certified|license|licensure)\s+(?:is\s+)?required\b",
        r"\bmust\s+be\s+(?:certified|licensed)\b",
        r"\b(?:rn|registered\s+nurse|nursing)\s+licen[cs]e\b",
        r"\bbar\s+admission\b",
        r"\bstate\s+licen[cs]e\s+required\b",
    ),
    "degree": (
        r"\b(?:bachelor|master|associate)(?:'s|’s|s)?\s+degree\s+(?:is\s+)?(?:required|in\b)",
        r"\b(?:bachelor|master|associate)(?:'s|’s)\s+(?:is\s+)?(?:required|in\b)",
        r"\bbachelors?\s+(?:is\s+)?(?:required|in\b)",
        r"\b(?:bachelor|master|associate)s?\s+of\s+(?:science|arts|applied\s+science|business|engineering|fine\s+arts)\b",
        r"\b(?:bs/ba|ba/bs|ms/ma|b\.s\.|m\.s\.)\s+(?:degree\s+)?(?:required|minimum|in\b)",
        r"\b(?:undergraduate|graduate|4[- ]year|four[- ]year|college|university)\s+degree\b",
        r"\bmba\s+(?:is\s+)?required\b",
        r"\b(?:ph\.?d\.?|doctorate)(?:\s+degree)?\s+(?:is\s+)?(?:required|in\b)",
        r"\bhigh\s+school\s+(?:diploma|ged|education)\b",
        r"\bminimum\b[^.\n]{0,25}\b(?:bachelor|ph\.?d|doctorate|(?:master|associate)(?:'s|’s|s?\s+degree))",
        r"\bdegree\s+(?:is\s+)?required\b",
    ),
    "location": (
        r"\bmust\s+(?:be\s+able\s+to\s+)?(?:work|come|be)\s+on[- ]?site\b",
        r"\bon[- ]?site\s+(?:only|required|position|role)\b",
        r"\b100%\s+(?:on[- ]?site|in[- ]?office)\b",
        r"\bin[- ]?(?:office|person)\s+(?:only|required)\b",
        r"\bmust\s+be\s+local\s+to\b",
        r"\bmust\s+(?:reside|live|be\s+located|be\s+based)\s+in\b",
        r"\blocal\s+candidates\s+only\b",
        r"\brelocation\s+(?:is\s+)?(?:not\s+(?:provided|available|offered)|required)\b",
        r"\bno\s+relocation\s+(?:assistance|package)\b",
        r"\bwilling(?:ness)?\s+to\s+relocate\b",
        r"\b\d\s+days?\s+(?:per\s+week\s+|a\s+week\s+)?(?:in[- ]?office|on[- ]?site|in\s+the\s+office)\b",
        r"\bhybrid\b[^.\n]{0,30}\b(?:days?|in[- ]?office|on[- ]?site)\b",
    ),
    "schedule": (
        r"\bup\s+to\s+\d{1,3}\s*%\s+travel\b",
        r"\btravel\b[^.\n]{0,20}\d{1,3}\s*%",
        r"\b(?:extensive|frequent|overnight)\s+travel\b",
        r"\bwilling(?:ness)?\s+to\s+travel\b",
        r"\b(?:available|availability|willing|able)\s+to\s+work\s+(?:nights|weekends|evenings|overtime|holidays|shifts)\b",
        r"\bmust\s+be\s+available\s+(?:to\s+work\s+)?(?:on\s+)?(?:nights|weekends|evenings|holidays)\b",
        r"\bon[- ]?call\b",
        r"\brotating\s+shifts?\b",
        r"\b(?:night|weekend)\s+shifts?\b",
        r"\bstart\s+immediately\b",
    ),
    "physical": (
        r"\blift\w*\b[^.\n]{0,25}?\d{2,3}\s*(?:lbs?|pounds)\b",
        r"\bable\s+to\s+lift\b",
        r"\bstand(?:ing)?\s+for\s+(?:extended|long|prolonged)\s+periods\b",
        r"\bvalid\s+driver(?:'s|s|’s)?\s+licen[cs]e\b",
        r"\bclean\s+driving\s+record\b",
    ),
}


def _compile_rules() -> list[tuple[str, str, re.Pattern[str]]]:
    rules: list[tuple[str, str, re.Pattern[str]]] = []
    for category, sources in _RULE_SOURCES.items():
        for index, source in enumerate(sources):
            rule_id = f"{category}.{index}"
            try:
                rules.append((rule_id, category, re.compile(source, re.IGNORECASE)))
            except re.error as exc:
                raise PatternEngineError(f"knockout rule {rule_id} does not compile: {exc}", rule=rule_id) from exc
    return rules


_RULES = _compile_rules()


def _authorization_label(text: str) -> str:
    if "sponsor" in text:
        return "No visa sponsorship available"
    if "citizen" in text:
        return "U.S. citizenship required"
    if "green card" in text or "permanent resident" in text:
        return "Permanent residency required"
    return "Work authorization required"


def _clearance_label(text: str) -> str:
    if "top secret" in text or "ts/sci" in text:
        label = "Top Secret clearance required"
    elif re.search(r"\bsecret\s+(?:security\s+)?clearance", text):
        label = "Secret clearance required"
    else:
        label = "Security clearance required"
    if "polygraph" in text:
        label += " (polygraph)"
    return label


def _certification_label(text: str) -> str:
    match = re.search(rf"\b({_CERT_NAMES})(?![\w+])", text)
    if match:
        name = " ".join(match.group(1).split())
        display = _CERT_DISPLAY.get(name) or (name.upper() if " " not in name else name.title())
        return f"{display} certification required"
    if "aws certified" in text:
        return "AWS certification required"
    if re.search(r"\b(?:rn|registered nurse|nursing)\b", text):
        return "Nursing license required"
    if "bar admission" in text:
        return "Bar admission required"
    if "licen" in text:
        return "Professional license required"
    return "Professional certification required"


def _degree_label(text: str) -> str:
    if re.search(r"\b(?:ph\.?d|doctorate)", text):
        return "PhD/Doctorate required"
    if re.search(r"\bmba\b", text):
        return "MBA required"
    if re.search(r"\bmaster(?:'s|’s)|\bmasters?\s+(?:degree|of)\b|\bms/ma\b|\bm\.s\.|(?<!under)graduate\s+degree", text):
        return "Master's degree required"
    if re.search(r"\bbachelor|\bbs/ba\b|\bba/bs\b|\bb\.s\.|undergraduate|4[- ]year|four[- ]year", text):
        return "Bachelor's degree required"
    if re.search(r"\bassociate(?:'s|’s)|\bassociates?\s+(?:degree|of)\b", text):
        return "Associate's degree required"
    if "high school" in text:
        return "High school diploma required"
    return "Degree required"


def _location_label(text: str) -> str:
    if "relocat" in text:
        if re.search(r"\bno\s+relocation|relocation\s+(?:is\s+)?not\b", text):
            return "Relocation not provided"
        return "Relocation required"
    if "hybrid" in text or re.search(r"\b\d\s+days?\b", text):
        return "Hybrid: in-office days required"
    if re.search(r"\blocal\b|\breside\b|\blive\b|\blocated\b|\bbased\b", text):
        return "Must be local to area"
    return "On-site work required"


def _schedule_label(text: str) -> str:
    if "travel" in text:
        percent = re.search(r"(\d{1,3})\s*%", text)
        return f"Travel required ({percent.group(1)}%)" if percent else "Travel required"
    if re.search(r"\bon[- ]?call\b", text):
        return "On-call availability required"
    if "immediately" in text:
        return "Immediate start required"
    return "Non-standard hours required"


def _physical_label(text: str) -> str:
    if "driv" in text:
        return "Valid driver's license required"
    if "lift" in text:
        weight = re.search(r"(\d{2,3})\s*(?:lbs?|pounds)", text)
        return f"Physical requirement: lift {weight.group(1)} lbs" if weight else "Lifting required"
    if "stand" in text:
        return "Extended standing required"
    return "Physical requirements apply"


_LABELERS: dict[str, Callable[[str], str]] = {
    "authorization": _authorization_label,
    "clearance": _clearance_label,
    "certification": _certification_label,
    "degree": _degree_label,
    "location": _location_label,
    "schedule": _schedule_label,
    "physical": _physical_label,
}

_CATEGORY_LABELS: dict[str, str] = {
    "authorization": "Work Authorization",
    "clearance": "Security Clearance",
    "certification": "License/Certification",
    "degree": "Education",
    "location": "Location/Commute",
    "schedule": "Schedule/Availability",
    "physical": "Physical Requirements",
    "experience": "Experience",
}


def category_label(category: KnockoutCategory) -> str:
    return _CATEGORY_LABELS[category]


def _evidence(sentence: str) -> str:
    evidence = strip_bullet_prefix(sentence)
    limit = int(get_scoring_value("knockouts.evidence_max_chars", 280))
    if len(evidence) <= limit:
        return evidence
    cut = evidence[:limit]
    return cut[: cut.rfind(" ")] if " " in cut else cut


def _sentence_at(spans: list[tuple[int, int]], position: int) -> tuple[int, int] | None:
    for start, end in spans:
        if start <= position < end:
            return start, end
    return None


def detect_knockouts(job_text: str) -> list[KnockoutItem]:
    """Scan a job description for disqualifying requirements.

    Items come back ordered by category, then by position in the text. The
    detector never sets ``user_confirmed``.
    """
    job_text = require_text(job_text, "job_text")
    if not job_text.strip():
        return []

    spans = sentence_spans(job_text)
    # (category, sentence start) -> sentence end
    hits: dict[tuple[str, int], int] = {}
    for rule_id, category, pattern in _RULES:
        try:
            for match in pattern.finditer(job_text):
                span = _sentence_at(spans, match.start())
                if span is not None:
                    hits.setdefault((category, span[0]), span[1])
        except (re.error, IndexError) as exc:
            raise PatternEngineError(f"knockout rule {rule_id} failed: {exc}", rule=rule_id) from exc

    candidates: list[tuple[int, int, KnockoutItem]] = []
    for (category, start), end in hits.items():
        evidence = _evidence(job_text[start:end])
        candidates.append(
            (
                KNOCKOUT_CATEGORY_ORDER.index(category),
                start,
                KnockoutItem(
                    id=make_knockout_id(category, evidence),
                    category=category,
                    label=_LABELERS[category](evidence.lower()),
                    evidence=evidence,
                ),
            )
        )

    experience_rank = KNOCKOUT_CATEGORY_ORDER.index("experience")
    for requirement in extract_experience_requirements(job_text):
        candidates.append(
            (
                experience_rank,
                requirement.position,
                KnockoutItem(
                    id=make_knockout_id("experience", requirement.evidence),
                    category="experience",
                    label=requirement.label,
                    evidence=requirement.evidence,
                ),
            )
        )

    items: list[KnockoutItem] = []
    seen: set[str] = set()
    for _, _, item in sorted(candidates, key=lambda candidate: (candidate[0], candidate[1])):
        if item.id in seen:
            continue
        seen.add(item.id)
        items.append(item)

    logger.debug("knockouts_detected count=%s", len(items))
    return items
