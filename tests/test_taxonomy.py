import json
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import ats_engine.taxonomy as taxonomy_module  # noqa: E402
from ats_engine.core.config import Settings  # noqa: E402
from ats_engine.taxonomy import get_default_taxonomy_provider, load_taxonomy, skill_equivalents  # noqa: E402
from ats_engine.taxonomy.local_taxonomy import LocalTaxonomy  # noqa: E402


class TaxonomyTests(unittest.TestCase):
    def test_synonym_normalization_resolves_canonical_id(self):
        taxonomy = LocalTaxonomy()
        normalized, canonical_id = taxonomy.normalize_skill("  Amazon   Web Services ")
        self.assertEqual(normalized, "amazon web services")
        self.assertEqual(canonical_id, "aws")

    def test_unknown_skill_has_no_canonical_id(self):
        taxonomy = LocalTaxonomy()
        self.assertEqual(taxonomy.normalize_skill("Underwater Basket Weaving"), ("underwater basket weaving", None))
        self.assertEqual(taxonomy.equivalents("Underwater Basket Weaving"), ("underwater basket weaving",))

    def test_equivalents_start_with_the_requested_spelling(self):
        taxonomy = LocalTaxonomy()
        equivalents = taxonomy.equivalents("K8s")
        self.assertEqual(equivalents[0], "k8s")
        self.assertIn("kubernetes", equivalents)

    def test_default_provider_is_cached(self):
        self.assertIs(get_default_taxonomy_provider(), get_default_taxonomy_provider())
        self.assertIs(get_default_taxonomy_provider(), load_taxonomy(None))

    def test_skill_equivalents_uses_the_given_provider(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "synonyms.json"
            path.write_text(json.dumps({"golang": "go", "go": "go"}), encoding="utf-8")
            custom = LocalTaxonomy(path)
        self.assertEqual(skill_equivalents("Golang", custom), ("golang", "go"))
        self.assertIn("kubernetes", skill_equivalents("k8s"))

    def test_synonyms_path_setting_selects_the_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "synonyms.json"
            path.write_text(json.dumps({"py": "python", "python": "python"}), encoding="utf-8")
            custom_settings = Settings(
                log_level="INFO",
                semantic_provider="openai",
                semantic_model="gpt-4o-mini",
                semantic_base_url=None,
                semantic_timeout_s=30.0,
                semantic_max_retries=2,
                scoring_config_path=None,
                taxonomy_synonyms_path=str(path),
            )
            with mock.patch.object(taxonomy_module, "settings", custom_settings):
                provider = get_default_taxonomy_provider()
        self.assertEqual(provider.equivalents("py"), ("py", "python"))
        self.assertIsNot(provider, load_taxonomy(None))


if __name__ == "__main__":
    unittest.main()
