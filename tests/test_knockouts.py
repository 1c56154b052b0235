import sys
import unittest
from pathlib import Path
from unittest import mock

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_engine.analysis import knockouts  # noqa: E402
from ats_engine.analysis.knockouts import category_label, detect_knockouts  # noqa: E402
from ats_engine.core.errors import InvalidInputError  # noqa: E402
from ats_engine.schemas.knockouts import make_knockout_id  # noqa: E402


class KnockoutDetectorTests(unittest.TestCase):
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

    def test_detects_authorization_and_experience(self):
        items = detect_knockouts(self.JOB_TEXT)
        self.assertEqual([item.category for item in items], ["authorization", "experience"])
        self.assertEqual(items[0].label, "Work authorization required")
        self.assertEqual(items[0].evidence, "Must be authorized to work in the United States.")
        self.assertEqual(items[1].label, "5+ years of experience required")
        self.assertEqual(items[1].evidence, "5+ years of experience building backend services.")

    def test_detector_never_sets_confirmation(self):
        items = detect_knockouts(self.JOB_TEXT)
        self.assertTrue(all(item.user_confirmed is None for item in items))

    def test_ids_are_stable_across_runs(self):
        first = [item.id for item in detect_knockouts(self.JOB_TEXT)]
        second = [item.id for item in detect_knockouts(self.JOB_TEXT)]
        self.assertEqual(first, second)
        self.assertEqual(
            first[0],
            make_knockout_id("authorization", "Must be authorized to work in the United States."),
        )
        self.assertTrue(first[0].startswith("ko_"))

    def test_id_ignores_bullets_case_and_trailing_punctuation(self):
        self.assertEqual(
            make_knockout_id("degree", "- Bachelor's degree required."),
            make_knockout_id("degree", "bachelor's  degree REQUIRED"),
        )
        self.assertNotEqual(
            make_knockout_id("degree", "Bachelor's degree required"),
            make_knockout_id("certification", "Bachelor's degree required"),
        )

    def test_items_follow_category_order(self):
        job = "Must be able to lift 50 lbs. A bachelor's degree is required. No visa sponsorship is available."
        items = detect_knockouts(job)
        self.assertEqual([item.category for item in items], ["authorization", "degree", "physical"])
        self.assertEqual(
            [item.label for item in items],
            [
                "No visa sponsorship available",
                "Bachelor's degree required",
                "Physical requirement: lift 50 lbs",
            ],
        )

    def test_several_rules_on_one_sentence_yield_one_item(self):
        items = detect_knockouts("Must be authorized to work in the United States.")
        self.assertEqual(len(items), 1)

    def test_clearance_label(self):
        items = detect_knockouts("Must have active Top Secret clearance.")
        self.assertEqual([item.category for item in items], ["clearance"])
        self.assertEqual(items[0].label, "Top Secret clearance required")

    def test_long_evidence_is_truncated_on_a_word_boundary(self):
        job = "Candidates must be authorized to work in the United States " + "and meet every listed need " * 20 + "."
        items = detect_knockouts(job)
        self.assertEqual(len(items), 1)
        self.assertLessEqual(len(items[0].evidence), 280)
        self.assertTrue(job.startswith(items[0].evidence))
        self.assertFalse(items[0].evidence.endswith(" "))

    def test_job_titles_are_not_degree_requirements(self):
        self.assertEqual(detect_knockouts("We are hiring a Scrum Master in our Chicago office."), [])
        self.assertEqual(detect_knockouts("Retail Sales Associate in Boston, great benefits."), [])
        self.assertEqual(detect_knockouts("Minimum two years as a Scrum Master."), [])

    def test_possessive_degree_forms_are_detected(self):
        items = detect_knockouts("Master's in Computer Science required.")
        self.assertEqual([item.category for item in items], ["degree"])
        self.assertEqual(items[0].label, "Master's degree required")

        items = detect_knockouts("Associate's degree in nursing.")
        self.assertEqual([item.category for item in items], ["degree"])
        self.assertEqual(items[0].label, "Associate's degree required")

        items = detect_knockouts("Bachelor of Science in Accounting.")
        self.assertEqual(items[0].label, "Bachelor's degree required")

    def test_ids_do_not_depend_on_rule_order(self):
        job = (
            "Must be able to lift 50 lbs. A bachelor's degree is required. "
            "No visa sponsorship is available. Must have active Top Secret clearance. "
            "PMP certification required. Must be local to Denver. 3+ years of Python experience."
        )
        expected = detect_knockouts(job)
        self.assertEqual(len(expected), 7)
        with mock.patch.object(knockouts, "_RULES", list(reversed(knockouts._RULES))):
            reordered = detect_knockouts(job)
        self.assertEqual([item.id for item in reordered], [item.id for item in expected])
        self.assertEqual([item.label for item in reordered], [item.label for item in expected])

    def test_plain_job_has_no_knockouts(self):
        self.assertEqual(detect_knockouts("We build friendly tools for small teams."), [])

    def test_empty_job_text(self):
        self.assertEqual(detect_knockouts(""), [])

    def test_non_string_job_text_is_rejected(self):
        with self.assertRaises(InvalidInputError) as ctx:
            detect_knockouts(42)
        self.assertEqual(ctx.exception.field, "job_text")

    def test_category_labels(self):
        self.assertEqual(category_label("authorization"), "Work Authorization")
        self.assertEqual(category_label("experience"), "Experience")


if __name__ == "__main__":
    unittest.main()
