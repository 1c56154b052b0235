import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_engine.analysis.parse_health import analyze_resume, compute_parse_health, detect_sections  # noqa: E402
from ats_engine.core.errors import InvalidInputError  # noqa: E402
from ats_engine.schemas.artifact import ExtractionMeta, PdfLayoutSignals, ResumeArtifact  # noqa: E402


def _artifact(text: str, *, file_type: str = "txt", signals: PdfLayoutSignals | None = None) -> ResumeArtifact:
    return ResumeArtifact(
        file_name=f"resume.{file_type}",
        file_type=file_type,
        file_size_bytes=len(text.encode("utf-8")),
        extracted_text=text,
        extraction_meta=ExtractionMeta(char_count=len(text), pdf_signals=signals),
    )


class ResumeAnalyzerTests(unittest.TestCase):
    RESUME_TEXT = (
        "Jane Doe\n"
        "Senior Software Engineer\n"
        "Austin, TX | jane.doe@example.com | (512) 555-0199 | linkedin.com/in/janedoe\n"
        "\n"
        "Summary\n"
        "Software engineer with a focus on backend services, APIs and cloud infrastructure for SaaS products.\n"
        "\n"
        "Experience\n"
        "Senior Software Engineer, Acme Corp\n"
        "Jan 2019 - Present\n"
        "- Developed Python microservices on AWS that process 2 million events per day.\n"
        "- Led the migration from a monolith to Docker and Kubernetes, reducing deploy time by 60%.\n"
        "- Mentored four engineers and improved code review practices across the team.\n"
        "\n"
        "Software Engineer, Beta Labs\n"
        "Jun 2015 - Dec 2018\n"
        "- Built REST APIs with Django and PostgreSQL for a B2B analytics platform.\n"
        "- Implemented CI/CD pipelines with Jenkins and automated integration testing.\n"
        "\n"
        "Education\n"
        "Bachelor of Science in Computer Science, University of Texas, 2015\n"
        "\n"
        "Skills\n"
        "Python, Django, PostgreSQL, AWS, Docker, Kubernetes, Git, SQL, communication, teamwork\n"
    )

    def test_clean_text_resume_scores_full_health(self):
        result = analyze_resume(_artifact(self.RESUME_TEXT))
        self.assertEqual(result.scores.parse_health, 100)
        self.assertEqual([f.severity for f in result.findings], ["info", "info", "info"])
        self.assertEqual({f.id for f in result.findings}, {"layout-ok", "contact-ok", "sections-ok"})

    def test_empty_text_scores_zero_with_critical_finding(self):
        result = analyze_resume(_artifact(""))
        self.assertEqual(result.scores.parse_health, 0)
        self.assertEqual(result.scores.layout_score, 0)
        self.assertEqual(result.findings[0].severity, "critical")
        self.assertEqual(result.findings[0].id, "no-text-extracted")

    def test_very_short_text_is_critical(self):
        result = analyze_resume(_artifact("Jane Doe\njane@example.com\n"))
        ids = [f.id for f in result.findings]
        self.assertIn("very-short-content", ids)
        self.assertEqual(result.findings[0].severity, "critical")

    def test_missing_email_lowers_contact_score(self):
        text = self.RESUME_TEXT.replace("jane.doe@example.com | ", "")
        result = analyze_resume(_artifact(text))
        self.assertEqual(result.scores.contact_score, 60)
        missing = next(f for f in result.findings if f.id == "missing-email")
        self.assertEqual(missing.severity, "high")
        self.assertEqual(missing.category, "contact")

    def test_pdf_columns_penalize_layout(self):
        result = analyze_resume(_artifact(self.RESUME_TEXT, file_type="pdf", signals=PdfLayoutSignals(estimated_columns=2)))
        self.assertEqual(result.scores.layout_score, 85)
        finding = next(f for f in result.findings if f.id == "multi-column-layout")
        self.assertEqual(finding.severity, "medium")

    def test_contact_only_in_risky_header_is_high(self):
        signals = PdfLayoutSignals(header_contact_risk="high")
        result = analyze_resume(_artifact(self.RESUME_TEXT, file_type="pdf", signals=signals))
        ids = [f.id for f in result.findings]
        self.assertIn("contact-in-header", ids)
        self.assertNotIn("header-footer-content", ids)
        self.assertEqual(result.scores.contact_score, 80)

    def test_non_pdf_input_skips_layout_signals(self):
        result = analyze_resume(_artifact(self.RESUME_TEXT, file_type="docx"))
        self.assertEqual(result.scores.layout_score, 100)

    def test_missing_headings_are_reported(self):
        text = self.RESUME_TEXT.replace("Education\n", "Schooling\n").replace("Skills\n", "Toolbox\n")
        result = analyze_resume(_artifact(text))
        finding = next(f for f in result.findings if f.id == "missing-sections")
        self.assertEqual(finding.severity, "medium")
        self.assertIn("Education", finding.description)
        self.assertIn("Skills", finding.description)

    def test_section_synonyms_are_recognized(self):
        text = "WORK HISTORY\nAcme\nEDUCATIONAL BACKGROUND\nState University\nCore Competencies:\nPython\n"
        self.assertEqual(detect_sections(text), ["experience", "education", "skills"])

    def test_parse_health_is_weighted_function_of_sub_scores(self):
        text = self.RESUME_TEXT.replace("Jan 2019", "2019").replace("Jun 2015", "2015").replace("Dec 2018", "2018")
        signals = PdfLayoutSignals(estimated_columns=3, column_merge_risk="high", text_density="low")
        scores = analyze_resume(_artifact(text, file_type="pdf", signals=signals)).scores
        self.assertEqual(scores.parse_health, compute_parse_health(scores.layout_score, scores.contact_score, scores.section_score))
        for value in (scores.parse_health, scores.layout_score, scores.contact_score, scores.section_score):
            self.assertGreaterEqual(value, 0)
            self.assertLessEqual(value, 100)

    def test_analysis_is_deterministic(self):
        artifact = _artifact(self.RESUME_TEXT.replace("Skills\n", ""))
        self.assertEqual(analyze_resume(artifact).model_dump(), analyze_resume(artifact).model_dump())

    def test_mapping_artifact_is_validated(self):
        result = analyze_resume(
            {
                "file_type": "TXT",
                "file_size_bytes": 10,
                "extracted_text": self.RESUME_TEXT,
                "extraction_meta": {"char_count": 10},
            }
        )
        self.assertEqual(result.scores.parse_health, 100)

    def test_malformed_artifact_names_the_field(self):
        with self.assertRaises(InvalidInputError) as ctx:
            analyze_resume({"file_type": "txt", "file_size_bytes": 10, "extraction_meta": {}})
        self.assertEqual(ctx.exception.field, "extracted_text")


if __name__ == "__main__":
    unittest.main()
