import sys
import unittest
from pathlib import Path

from pydantic import ValidationError

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_engine.analysis.coverage import calculate_coverage, find_keyword, keyword_variants  # noqa: E402
from ats_engine.analysis.keywords import extract_keywords  # noqa: E402
from ats_engine.core.errors import InvalidInputError  # noqa: E402
from ats_engine.schemas.keywords import KeywordSet  # noqa: E402

JOB_TEXT = (
    "Senior Backend Engineer\n"
    "Acme Cloud is hiring a senior backend engineer to build SaaS APIs.\n"
    "\n"
    "Requirements:\n"
    "- 5+ years of experience building backend services.\n"
    "- Strong proficiency in Python and PostgreSQL.\n"
    "- Experience with AWS and Docker is required.\n"
    "- Must be authorized to work in the United States.\n"
    "\n"
    "Nice to have:\n"
    "- Kubernetes or Terraform experience.\n"
    "- Familiarity with GraphQL.\n"
)

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


class KeywordCoverageTests(unittest.TestCase):
    def test_full_job_against_resume(self):
        result = calculate_coverage(RESUME_TEXT, extract_keywords(JOB_TEXT))
        self.assertEqual(result.score, 83)
        self.assertEqual(
            result.found_keywords,
            ["APIs", "Python", "PostgreSQL", "AWS", "Docker", "Kubernetes"],
        )
        self.assertEqual(result.missing_keywords, ["Terraform", "GraphQL"])
        self.assertEqual(result.bonus_keywords, ["Communication", "Teamwork"])
        self.assertEqual([f.id for f in result.findings], ["strong-keyword-coverage"])

    def test_all_critical_found_scores_full(self):
        keywords = KeywordSet(critical=["Python", "AWS"], all=["Python", "AWS"])
        result = calculate_coverage("Built services in Python on AWS.", keywords)
        self.assertEqual(result.score, 100)
        self.assertEqual(result.found_keywords, ["Python", "AWS"])
        self.assertEqual(result.missing_keywords, [])

    def test_low_coverage_reports_missing_critical_keywords(self):
        keywords = KeywordSet.from_lists(["Python", "Java", "Go", "Rust"])
        result = calculate_coverage("Built services in Python.", keywords)
        self.assertEqual(result.score, 25)
        ids = [f.id for f in result.findings]
        self.assertEqual(ids[0], "low-keyword-coverage")
        self.assertEqual(result.findings[0].severity, "high")
        self.assertEqual(
            ids[1:],
            ["missing-keyword-java", "missing-keyword-go", "missing-keyword-rust"],
        )

    def test_synonym_matches_count_as_found(self):
        keywords = KeywordSet.from_lists(["Kubernetes"])
        result = calculate_coverage("Deployed services on k8s clusters.", keywords)
        self.assertEqual(result.found_keywords, ["Kubernetes"])

    def test_plural_and_hyphen_variants(self):
        self.assertEqual(find_keyword("Wrote several microservices.", "Microservice"), "microservices")
        self.assertIsNotNone(find_keyword("Worked with cross functional teams.", "cross-functional"))

    def test_variants_start_with_the_keyword_itself(self):
        variants = keyword_variants("Kubernetes")
        self.assertEqual(variants[0], "kubernetes")
        self.assertIn("k8s", variants)

    def test_match_respects_word_boundaries(self):
        self.assertIsNone(find_keyword("Experienced in JavaScript.", "Java"))

    def test_empty_resume_scores_zero(self):
        keywords = KeywordSet.from_lists(["Python"], ["Docker"])
        result = calculate_coverage("", keywords)
        self.assertEqual(result.score, 0)
        self.assertEqual(result.missing_keywords, ["Python", "Docker"])
        self.assertEqual(result.findings[0].id, "empty-resume")
        self.assertEqual(result.findings[0].severity, "critical")

    def test_empty_keyword_set_scores_full(self):
        result = calculate_coverage(RESUME_TEXT, KeywordSet())
        self.assertEqual(result.score, 100)
        self.assertEqual([f.id for f in result.findings], ["no-keywords"])

    def test_mapping_keywords_are_accepted(self):
        result = calculate_coverage("Python and AWS", {"critical": ["Python"], "all": ["Python"]})
        self.assertEqual(result.score, 100)

    def test_malformed_keywords_name_the_field(self):
        with self.assertRaises(InvalidInputError) as ctx:
            calculate_coverage(RESUME_TEXT, {"critical": "Python"})
        self.assertEqual(ctx.exception.field, "critical")

    def test_duplicate_keywords_are_rejected(self):
        with self.assertRaises(InvalidInputError) as ctx:
            calculate_coverage(RESUME_TEXT, {"critical": ["Python", "python"]})
        self.assertEqual(ctx.exception.field, "keywords")

    def test_overlapping_critical_and_optional_are_rejected(self):
        with self.assertRaises(InvalidInputError) as ctx:
            calculate_coverage(RESUME_TEXT, {"critical": ["Python"], "optional": ["python"]})
        self.assertEqual(ctx.exception.field, "keywords")

    def test_all_must_match_critical_and_optional(self):
        with self.assertRaises(InvalidInputError) as ctx:
            calculate_coverage("I write Go.", {"all": ["Python", "Java"]})
        self.assertEqual(ctx.exception.field, "keywords")
        with self.assertRaises(ValidationError):
            KeywordSet(critical=["Python"], all=["Python", "Java"])

    def test_all_defaults_to_critical_then_optional(self):
        keywords = KeywordSet(critical=["Python"], optional=["Docker"])
        self.assertEqual(keywords.all, ["Python", "Docker"])

    def test_extracted_keywords_are_all_found_in_their_own_text(self):
        job = (
            "Platform Engineer\n"
            "Requirements:\n"
            "- Strong C++ and .NET skills.\n"
            "- Node.js services with CI/CD pipelines.\n"
            "- Security+ certification required.\n"
            "Nice to have:\n"
            "- Kubernetes, Terraform and GraphQL.\n"
        )
        for text in (job, JOB_TEXT):
            keywords = extract_keywords(text)
            result = calculate_coverage("\n".join(keywords.all), keywords)
            self.assertEqual(result.score, 100)
            self.assertEqual(result.missing_keywords, [])
        self.assertTrue({"C++", ".NET", "Node.js", "CI/CD", "Security+"} <= set(extract_keywords(job).all))

    def test_non_string_resume_is_rejected(self):
        with self.assertRaises(InvalidInputError):
            calculate_coverage(None, KeywordSet())


if __name__ == "__main__":
    unittest.main()
