import sys
import unittest
from datetime import date
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_engine.analysis.experience import (  # noqa: E402
    detect_experience_knockout,
    estimate_resume_experience,
    extract_experience_requirement,
    extract_experience_requirements,
    resume_date_spans,
)

AS_OF = date(2024, 6, 1)
JOB_TEXT = "Requirements:\n- 5+ years of experience building backend services.\n"


class ExperienceRequirementTests(unittest.TestCase):
    def test_plus_requirement(self):
        requirement = extract_experience_requirement(JOB_TEXT)
        self.assertIsNotNone(requirement)
        self.assertEqual(requirement.years, 5)
        self.assertIsNone(requirement.max_years)
        self.assertEqual(requirement.label, "5+ years of experience required")
        self.assertEqual(requirement.evidence, "5+ years of experience building backend services.")

    def test_range_requirement(self):
        requirements = extract_experience_requirements("Requires 3-5 years of experience with Python.")
        self.assertEqual(len(requirements), 1)
        self.assertEqual((requirements[0].years, requirements[0].max_years), (3, 5))
        self.assertEqual(requirements[0].label, "3-5 years of experience required")
        self.assertEqual(requirements[0].field, "Python")

    def test_minimum_prefix_counts_as_requirement(self):
        requirement = extract_experience_requirement("Minimum of 3 years in sales.")
        self.assertEqual(requirement.years, 3)

    def test_year_counts_without_requirement_language_are_ignored(self):
        self.assertEqual(extract_experience_requirements("Founded 10 years ago, we ship software."), [])

    def test_one_requirement_per_sentence(self):
        job = "3+ years of Python experience. 7+ years of leadership experience required."
        requirements = extract_experience_requirements(job)
        self.assertEqual([r.years for r in requirements], [3, 7])
        self.assertEqual(extract_experience_requirement(job).years, 7)

    def test_tie_goes_to_earliest(self):
        requirement = extract_experience_requirement("5+ years of Go. 5+ years of Rust.")
        self.assertEqual(requirement.evidence, "5+ years of Go.")

    def test_no_requirement(self):
        self.assertIsNone(extract_experience_requirement("We value curiosity."))


class ResumeExperienceTests(unittest.TestCase):
    def test_adjacent_spans_merge_and_present_uses_as_of(self):
        resume = "Acme Corp\nJan 2019 - Present\n\nBeta Labs\nJun 2015 - Dec 2018\n"
        spans = resume_date_spans(resume, as_of=AS_OF)
        self.assertEqual(len(spans), 1)
        self.assertEqual(estimate_resume_experience(resume, as_of=AS_OF), 9.1)

    def test_overlapping_roles_are_counted_once(self):
        resume = "Jan 2020 - Dec 2021\nJan 2021 - Dec 2022\n"
        self.assertEqual(estimate_resume_experience(resume, as_of=AS_OF), 3.0)

    def test_year_only_ranges(self):
        self.assertEqual(estimate_resume_experience("Analyst, 2018 - 2020", as_of=AS_OF), 2.0)

    def test_stated_years_fallback(self):
        resume = "Engineer with 6 years of experience in data platforms."
        self.assertEqual(estimate_resume_experience(resume, as_of=AS_OF), 6.0)

    def test_no_basis_returns_none(self):
        self.assertIsNone(estimate_resume_experience("Enthusiastic engineer.", as_of=AS_OF))


class ExperienceKnockoutTests(unittest.TestCase):
    def test_meets_requirement(self):
        resume = "Jan 2019 - Present\nJun 2015 - Dec 2018\n"
        item = detect_experience_knockout(resume, JOB_TEXT, as_of=AS_OF)
        self.assertEqual(item.category, "experience")
        self.assertIs(item.user_confirmed, True)

    def test_material_gap_fails(self):
        item = detect_experience_knockout("Jan 2022 - Dec 2023\n", JOB_TEXT, as_of=AS_OF)
        self.assertIs(item.user_confirmed, False)

    def test_small_gap_stays_unconfirmed(self):
        item = detect_experience_knockout("Jan 2020 - Dec 2023\n", JOB_TEXT, as_of=AS_OF)
        self.assertIsNone(item.user_confirmed)

    def test_no_dates_stays_unconfirmed(self):
        item = detect_experience_knockout("Backend engineer.", JOB_TEXT, as_of=AS_OF)
        self.assertIsNone(item.user_confirmed)

    def test_no_requirement_returns_none(self):
        self.assertIsNone(detect_experience_knockout("Jan 2019 - Present", "Python developer", as_of=AS_OF))


if __name__ == "__main__":
    unittest.main()
