import sys
import unittest
from datetime import date
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_engine.analysis.experience import detect_experience_knockout  # noqa: E402
from ats_engine.analysis.knockout_enhancer import (  # noqa: E402
    apply_user_confirmations,
    build_resume_profile,
    enhance_knockouts_with_resume,
)
from ats_engine.analysis.knockouts import detect_knockouts  # noqa: E402
from ats_engine.pipeline import merge_knockout_items  # noqa: E402

AS_OF = date(2024, 6, 1)

JOB_TEXT = (
    "Senior Backend Engineer\n"
    "Requirements:\n"
    "- 5+ years of experience building backend services.\n"
    "- Must be authorized to work in the United States.\n"
)

RESUME_TEXT = (
    "Jane Doe\n"
    "Austin, TX | jane.doe@example.com\n"
    "\n"
    "Experience\n"
    "Senior Software Engineer, Acme Corp\n"
    "Jan 2019 - Present\n"
    "Software Engineer, Beta Labs\n"
    "Jun 2015 - Dec 2018\n"
    "\n"
    "Education\n"
    "Bachelor of Science in Computer Science, University of Texas, 2015\n"
)


def _detected(job_text: str, resume_text: str) -> list:
    return merge_knockout_items(
        detect_knockouts(job_text),
        detect_experience_knockout(resume_text, job_text, as_of=AS_OF),
    )


class ResumeProfileTests(unittest.TestCase):
    def test_profile_fields(self):
        profile = build_resume_profile(RESUME_TEXT, as_of=AS_OF)
        self.assertEqual(profile.years_of_experience, 9.1)
        self.assertEqual(profile.education_level, "bachelor")
        self.assertEqual(profile.location, "Austin, TX")
        self.assertIsNone(profile.has_work_authorization)

    def test_job_title_is_not_an_education_level(self):
        resume = "Served as Scrum Master in agile teams.\nEducation\nBachelor of Arts in History, 2012\n"
        self.assertEqual(build_resume_profile(resume, as_of=AS_OF).education_level, "bachelor")

    def test_sponsorship_statement(self):
        profile = build_resume_profile("I will need visa sponsorship to start.")
        self.assertTrue(profile.needs_sponsorship)
        self.assertIs(profile.has_work_authorization, False)


class KnockoutEnhancerTests(unittest.TestCase):
    def test_high_confidence_assessment_prefills(self):
        items = enhance_knockouts_with_resume(_detected(JOB_TEXT, RESUME_TEXT), RESUME_TEXT, JOB_TEXT, as_of=AS_OF)
        by_category = {item.category: item for item in items}

        experience = by_category["experience"]
        self.assertIs(experience.user_confirmed, True)
        self.assertEqual(experience.confirmation_source, "auto")
        self.assertEqual(experience.auto_assessment.confidence, "high")
        self.assertEqual(experience.resume_evidence, "~9.1 years of experience detected")

        authorization = by_category["authorization"]
        self.assertIsNone(authorization.user_confirmed)
        self.assertIsNone(authorization.confirmation_source)
        self.assertEqual(authorization.auto_assessment.confidence, "low")

    def test_order_and_ids_are_preserved(self):
        detected = _detected(JOB_TEXT, RESUME_TEXT)
        enhanced = enhance_knockouts_with_resume(detected, RESUME_TEXT, JOB_TEXT, as_of=AS_OF)
        self.assertEqual([item.id for item in enhanced], [item.id for item in detected])

    def test_material_experience_gap_prefills_false(self):
        resume = "Jan 2022 - Dec 2023\n"
        items = enhance_knockouts_with_resume(_detected(JOB_TEXT, resume), resume, JOB_TEXT, as_of=AS_OF)
        experience = next(item for item in items if item.category == "experience")
        self.assertIs(experience.user_confirmed, False)
        self.assertEqual(experience.confirmation_source, "auto")

    def test_user_choice_survives_reenhancement(self):
        items = enhance_knockouts_with_resume(_detected(JOB_TEXT, RESUME_TEXT), RESUME_TEXT, JOB_TEXT, as_of=AS_OF)
        authorization_id = next(item.id for item in items if item.category == "authorization")
        confirmed = apply_user_confirmations(items, {authorization_id: False})

        again = enhance_knockouts_with_resume(confirmed, RESUME_TEXT, JOB_TEXT, as_of=AS_OF)
        authorization = next(item for item in again if item.id == authorization_id)
        self.assertIs(authorization.user_confirmed, False)
        self.assertEqual(authorization.confirmation_source, "user")
        self.assertIsNotNone(authorization.auto_assessment)

    def test_user_choice_can_override_auto_fill(self):
        items = enhance_knockouts_with_resume(_detected(JOB_TEXT, RESUME_TEXT), RESUME_TEXT, JOB_TEXT, as_of=AS_OF)
        experience_id = next(item.id for item in items if item.category == "experience")
        merged = apply_user_confirmations(items, {experience_id: False, "ko_unknown": True})
        experience = next(item for item in merged if item.id == experience_id)
        self.assertIs(experience.user_confirmed, False)
        self.assertEqual(experience.confirmation_source, "user")
        self.assertEqual(len(merged), len(items))

    def test_none_clears_a_user_choice(self):
        items = enhance_knockouts_with_resume(_detected(JOB_TEXT, RESUME_TEXT), RESUME_TEXT, JOB_TEXT, as_of=AS_OF)
        authorization_id = next(item.id for item in items if item.category == "authorization")
        cleared = apply_user_confirmations(
            apply_user_confirmations(items, {authorization_id: True}),
            {authorization_id: None},
        )
        authorization = next(item for item in cleared if item.id == authorization_id)
        self.assertIsNone(authorization.user_confirmed)
        self.assertIsNone(authorization.confirmation_source)

    def test_sponsorship_need_fails_authorization(self):
        resume = "Software engineer. I will need visa sponsorship."
        items = enhance_knockouts_with_resume(detect_knockouts(JOB_TEXT), resume, JOB_TEXT, as_of=AS_OF)
        authorization = next(item for item in items if item.category == "authorization")
        self.assertIs(authorization.user_confirmed, False)
        self.assertEqual(authorization.auto_assessment.confidence, "high")

    def test_clearance_assessment(self):
        job = "Must have active Top Secret clearance."
        held = enhance_knockouts_with_resume(detect_knockouts(job), "Holds an active Top Secret clearance.", job)
        self.assertIs(held[0].user_confirmed, True)
        self.assertEqual(held[0].resume_evidence, "active Top Secret clearance")

        denied = enhance_knockouts_with_resume(detect_knockouts(job), "I have no security clearance.", job)
        self.assertIs(denied[0].user_confirmed, False)

        silent = enhance_knockouts_with_resume(detect_knockouts(job), "Backend engineer.", job)
        self.assertIsNone(silent[0].user_confirmed)
        self.assertEqual(silent[0].auto_assessment.confidence, "medium")

    def test_degree_assessment(self):
        job = "A bachelor's degree is required."
        items = enhance_knockouts_with_resume(detect_knockouts(job), RESUME_TEXT, job, as_of=AS_OF)
        self.assertEqual(items[0].category, "degree")
        self.assertIs(items[0].user_confirmed, True)
        self.assertEqual(items[0].resume_evidence, "Bachelor's")

    def test_job_title_in_degree_sentence_does_not_raise_the_level(self):
        job = "Bachelor's degree required, and time as a Scrum Master in an agile team is a plus."
        items = enhance_knockouts_with_resume(detect_knockouts(job), RESUME_TEXT, job, as_of=AS_OF)
        degree = next(item for item in items if item.category == "degree")
        self.assertEqual(degree.label, "Bachelor's degree required")
        self.assertIs(degree.user_confirmed, True)


if __name__ == "__main__":
    unittest.main()
