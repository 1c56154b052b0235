import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_engine.core.errors import InvalidInputError  # noqa: E402
from ats_engine.normalize.utils import (  # noqa: E402
    contains_term,
    heading_key,
    looks_like_heading,
    normalize_text,
    require_text,
    sentence_spans,
    strip_bullet_prefix,
)


class NormalizationTests(unittest.TestCase):
    def test_require_text_accepts_empty_string(self):
        self.assertEqual(require_text("", "resume_text"), "")

    def test_require_text_names_the_field(self):
        with self.assertRaises(InvalidInputError) as ctx:
            require_text(None, "job_text")
        self.assertEqual(ctx.exception.field, "job_text")
        with self.assertRaises(InvalidInputError):
            require_text(42, "job_text")

    def test_bullet_prefixes_are_stripped(self):
        self.assertEqual(strip_bullet_prefix("• Built APIs for payments"), "Built APIs for payments")
        self.assertEqual(strip_bullet_prefix("3. Led migration to cloud"), "Led migration to cloud")
        self.assertEqual(strip_bullet_prefix("- Reduced latency"), "Reduced latency")

    def test_sentences_split_on_punctuation_and_lines(self):
        text = "First one. Second one.\nThird line"
        sentences = [text[start:end] for start, end in sentence_spans(text)]
        self.assertEqual(sentences, ["First one.", "Second one.", "Third line"])

    def test_term_matching_respects_token_boundaries(self):
        self.assertTrue(contains_term("Experience with C++ and Go", "c++"))
        self.assertFalse(contains_term("JavaScript developer", "java"))
        self.assertTrue(contains_term("machine\nlearning pipelines", "machine learning"))

    def test_headings(self):
        self.assertEqual(heading_key("• Skills:"), "skills")
        self.assertTrue(looks_like_heading("EXPERIENCE"))
        self.assertTrue(looks_like_heading("Nice to have:"))
        self.assertFalse(looks_like_heading("AWS"))
        self.assertFalse(looks_like_heading("This line is a full sentence, not a heading:"))

    def test_normalize_text_folds_quotes_and_case(self):
        self.assertEqual(normalize_text("  What You’ll   Need "), "what you'll need")


if __name__ == "__main__":
    unittest.main()
