import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_engine.analysis.knockout_risk import calculate_knockout_risk, risk_label  # noqa: E402
from ats_engine.schemas.knockouts import KnockoutItem, make_knockout_id  # noqa: E402

_RISK_ORDER = {"low": 0, "medium": 1, "high": 2}


def _item(category: str, evidence: str, confirmed: bool | None = None) -> KnockoutItem:
    return KnockoutItem(
        id=make_knockout_id(category, evidence),
        category=category,
        label=f"{category} requirement",
        evidence=evidence,
        user_confirmed=confirmed,
    )


class KnockoutRiskTests(unittest.TestCase):
    def test_no_items_is_low(self):
        result = calculate_knockout_risk([])
        self.assertEqual(result.risk, "low")
        self.assertEqual(result.explanation, "No knockout requirements were detected.")
        self.assertEqual([f.id for f in result.findings], ["knockout-clear"])

    def test_all_confirmed_is_low(self):
        result = calculate_knockout_risk([_item("degree", "Degree required", True)])
        self.assertEqual(result.risk, "low")
        self.assertEqual(len(result.confirmed), 1)

    def test_unconfirmed_item_is_medium(self):
        result = calculate_knockout_risk(
            [_item("degree", "Degree required", True), _item("authorization", "Must be authorized to work")]
        )
        self.assertEqual(result.risk, "medium")
        self.assertEqual(len(result.unclear), 1)
        self.assertEqual([f.id for f in result.findings], ["knockout-unconfirmed"])

    def test_any_failed_item_is_high(self):
        failed = _item("clearance", "Top Secret clearance", False)
        result = calculate_knockout_risk([_item("degree", "Degree required", True), failed])
        self.assertEqual(result.risk, "high")
        self.assertEqual(result.blockers, [failed])
        self.assertEqual(result.findings[0].id, f"knockout-blocker-{failed.id}")
        self.assertEqual(result.findings[0].severity, "critical")

    def test_blockers_and_unclear_together(self):
        result = calculate_knockout_risk(
            [_item("clearance", "Top Secret clearance", False), _item("experience", "5+ years")]
        )
        self.assertEqual(result.risk, "high")
        self.assertIn("1 more still need review", result.explanation)

    def test_risk_never_decreases_when_an_item_flips_to_false(self):
        base = [
            _item("authorization", "Must be authorized", True),
            _item("degree", "Degree required"),
            _item("location", "On-site only", True),
        ]
        before = calculate_knockout_risk(base).risk
        for index in range(len(base)):
            flipped = list(base)
            flipped[index] = base[index].model_copy(update={"user_confirmed": False})
            after = calculate_knockout_risk(flipped).risk
            self.assertGreaterEqual(_RISK_ORDER[after], _RISK_ORDER[before])
            self.assertEqual(after, "high")

    def test_only_confirmation_state_matters(self):
        first = calculate_knockout_risk([_item("degree", "Degree required")])
        second = calculate_knockout_risk([_item("physical", "Lift 50 lbs")])
        self.assertEqual(first.risk, second.risk)

    def test_risk_labels(self):
        self.assertEqual(risk_label("low"), "Low Risk")
        self.assertEqual(risk_label("medium"), "Review Needed")
        self.assertEqual(risk_label("high"), "High Risk")


if __name__ == "__main__":
    unittest.main()
