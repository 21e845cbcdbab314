"""
Unit tests for DataManager class.
"""
import os
import shutil
import tempfile
import unittest
from pathlib import Path

from composer_quiz.catalog import DEFAULT_CATALOG, DEFAULT_CATALOG_NAME
from composer_quiz.data_manager import MAX_CATALOG_COMPOSERS, DataManager
from tests.test_fixtures import TestFixtures


class TestDataManager(unittest.TestCase):
    """Test cases for DataManager functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.data_manager = DataManager(self.temp_dir)

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_validate_catalog_structure_valid_data(self):
        """Test validation with valid catalog structure."""
        self.assertTrue(self.data_manager.validate_catalog_structure(TestFixtures.create_valid_catalog_json()))

    def test_validate_catalog_structure_invalid_data(self):
        """Test that every malformed structure is rejected."""
        for invalid in TestFixtures.create_invalid_catalog_json_structures():
            with self.subTest(data=invalid):
                self.assertFalse(self.data_manager.validate_catalog_structure(invalid))

    def test_validate_catalog_composer_limit(self):
        """Test that the composer limit counts distinct composers only."""
        item = TestFixtures.create_valid_catalog_json()["catalog"][0]
        at_limit = [dict(item, composer=f"Composer {i}") for i in range(MAX_CATALOG_COMPOSERS)]
        repeated = at_limit + [dict(at_limit[0], title="Another piece")]
        over_limit = at_limit + [dict(item, composer="One too many")]

        self.assertTrue(self.data_manager.validate_catalog_structure({"catalog": repeated}))
        self.assertFalse(self.data_manager.validate_catalog_structure({"catalog": over_limit}))

    def test_validate_catalog_structure_not_object(self):
        """Test validation fails for a top-level array."""
        self.assertFalse(self.data_manager.validate_catalog_structure([{"composer": "Bach"}]))

    def test_load_valid_catalog_file(self):
        """Test loading one valid file."""
        TestFixtures.write_catalog_file(self.temp_dir, "romantic", TestFixtures.create_valid_catalog_json())

        catalogs = self.data_manager.load_catalog_files()

        self.assertEqual(list(catalogs), ["romantic"])
        catalog = self.data_manager.get_catalog("romantic")
        self.assertEqual(len(catalog), 2)
        self.assertEqual(catalog[0].composer, "Pyotr Ilyich Tchaikovsky")
        self.assertEqual(catalog[0].audio_ref, "https://example.com/swan.mp3")
        self.assertEqual(catalog[0].image_ref, "https://example.com/tchaikovsky.jpg")
        self.assertEqual(catalog[0].trivia, "Swan Lake flopped at its premiere.")
        self.assertFalse(self.data_manager.has_load_errors())
        self.assertFalse(self.data_manager.is_default_catalog_active())

    def test_load_skips_invalid_files(self):
        """Test that a bad file is recorded and the good ones still load."""
        TestFixtures.write_catalog_file(self.temp_dir, "good", TestFixtures.create_valid_catalog_json())
        TestFixtures.write_catalog_file(self.temp_dir, "broken", "{ invalid json }")
        TestFixtures.write_catalog_file(self.temp_dir, "empty", {"catalog": []})

        catalogs = self.data_manager.load_catalog_files()

        self.assertEqual(list(catalogs), ["good"])
        errors = self.data_manager.get_load_errors()
        self.assertEqual(len(errors), 2)
        self.assertTrue(any(error.startswith("broken.json") for error in errors))
        self.assertTrue(any(error.startswith("empty.json") for error in errors))

    def test_load_empty_directory_uses_default(self):
        """Test the built-in catalog when no files exist."""
        catalogs = self.data_manager.load_catalog_files()

        self.assertEqual(list(catalogs), [DEFAULT_CATALOG_NAME])
        self.assertIs(self.data_manager.get_catalog(), DEFAULT_CATALOG)
        self.assertTrue(self.data_manager.is_default_catalog_active())
        self.assertTrue(self.data_manager.has_load_errors())

    def test_load_missing_directory_uses_default(self):
        """Test the built-in catalog when the directory does not exist."""
        dm = DataManager(os.path.join(self.temp_dir, "missing"))

        catalogs = dm.load_catalog_files()

        self.assertIn(DEFAULT_CATALOG_NAME, catalogs)
        self.assertTrue(dm.is_default_catalog_active())
        self.assertFalse(Path(self.temp_dir, "missing").exists())

    def test_load_all_invalid_uses_default(self):
        """Test the built-in catalog when every file fails."""
        TestFixtures.write_catalog_file(self.temp_dir, "broken", "not json")

        catalogs = self.data_manager.load_catalog_files()

        self.assertEqual(list(catalogs), [DEFAULT_CATALOG_NAME])
        self.assertIn("All catalog files failed to load", self.data_manager.get_load_errors())

    def test_reload_clears_previous_state(self):
        """Test that loading again starts from scratch."""
        self.data_manager.load_catalog_files()
        self.assertTrue(self.data_manager.is_default_catalog_active())

        TestFixtures.write_catalog_file(self.temp_dir, "romantic", TestFixtures.create_valid_catalog_json())
        catalogs = self.data_manager.load_catalog_files()

        self.assertEqual(list(catalogs), ["romantic"])
        self.assertFalse(self.data_manager.is_default_catalog_active())
        self.assertFalse(self.data_manager.has_load_errors())

    def test_get_catalog(self):
        """Test catalog lookup by name and by default."""
        TestFixtures.write_catalog_file(self.temp_dir, "romantic", TestFixtures.create_valid_catalog_json())
        self.data_manager.load_catalog_files()

        self.assertIsNotNone(self.data_manager.get_catalog())
        self.assertIsNone(self.data_manager.get_catalog("baroque"))
        self.assertTrue(self.data_manager.catalog_exists("romantic"))
        self.assertFalse(self.data_manager.catalog_exists("baroque"))

    def test_get_catalog_before_loading(self):
        """Test that nothing is available before loading."""
        self.assertIsNone(self.data_manager.get_catalog())
        self.assertEqual(self.data_manager.get_available_catalogs(), [])

    def test_loading_summary(self):
        """Test the loading summary contents."""
        TestFixtures.write_catalog_file(self.temp_dir, "romantic", TestFixtures.create_valid_catalog_json())
        TestFixtures.write_catalog_file(self.temp_dir, "broken", "{")
        self.data_manager.load_catalog_files()

        summary = self.data_manager.get_loading_summary()

        self.assertEqual(summary['total_catalogs'], 1)
        self.assertTrue(summary['has_errors'])
        self.assertEqual(summary['error_count'], 1)
        self.assertFalse(summary['default_active'])
        self.assertEqual(summary['available_catalogs'], ["romantic"])
        self.assertEqual(summary['catalog_directory'], str(Path(self.temp_dir)))

    def test_bundled_catalog_matches_builtin(self):
        """Test that the shipped JSON catalog loads the same five items."""
        catalogs_dir = Path(__file__).resolve().parent.parent / "catalogs"
        dm = DataManager(str(catalogs_dir))
        dm.load_catalog_files()

        catalog = dm.get_catalog(DEFAULT_CATALOG_NAME)
        self.assertFalse(dm.is_default_catalog_active())
        self.assertEqual(
            [(item.composer, item.title, item.audio_ref) for item in catalog],
            [(item.composer, item.title, item.audio_ref) for item in DEFAULT_CATALOG]
        )


if __name__ == '__main__':
    unittest.main()
