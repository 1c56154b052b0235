from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import date
from pathlib import Path

from ats_engine.core.config import settings
from ats_engine.pipeline import run_analysis
from ats_engine.semantic import SemanticMatchConfig, run_semantic_match


def _parse_confirmation(raw: str) -> tuple[str, bool | None]:
    knockout_id, sep, value = raw.partition("=")
    choices = {"yes": True, "true": True, "no": False, "false": False, "unset": None}
    if not sep or value.strip().lower() not in choices:
        raise argparse.ArgumentTypeError(f"expected ID=yes|no|unset, got '{raw}'")
    return knockout_id.strip(), choices[value.strip().lower()]


def _build_artifact(path: Path) -> dict:
    text = path.read_text(encoding="utf-8", errors="replace")
    return {
        "file_name": path.name,
        "file_type": "txt",
        "file_size_bytes": path.stat().st_size,
        "extracted_text": text,
        "extraction_meta": {"char_count": len(text)},
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Score a plain-text resume for ATS parsing and job fit.")
    parser.add_argument("resume", type=Path, help="Plain-text resume file")
    parser.add_argument("--job", type=Path, default=None, help="Plain-text job description file")
    parser.add_argument(
        "--confirm",
        type=_parse_confirmation,
        action="append",
        default=[],
        metavar="ID=yes|no|unset",
        help="Record your answer for a knockout requirement (repeatable).",
    )
    parser.add_argument("--job-url", default=None, help="Job posting URL, used to detect the employer's ATS")
    parser.add_argument("--as-of", type=date.fromisoformat, default=None, help="Date used for 'Present' (YYYY-MM-DD)")
    parser.add_argument(
        "--semantic",
        action="store_true",
        help="Send resume and job text to the configured AI provider for a semantic match score.",
    )
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level, format="%(message)s")

    artifact = _build_artifact(args.resume)
    job_text = args.job.read_text(encoding="utf-8", errors="replace") if args.job else None

    semantic = None
    if args.semantic and job_text:
        config = SemanticMatchConfig(
            provider=settings.semantic_provider,
            api_key=settings.semantic_api_key,
            has_consented=True,
        )
        semantic = asyncio.run(run_semantic_match(artifact["extracted_text"], job_text, config))

    report = run_analysis(
        artifact,
        job_text,
        dict(args.confirm),
        as_of=args.as_of,
        semantic=semantic,
        has_api_key=bool(settings.semantic_api_key),
        job_url=args.job_url,
    )
    print(report.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
