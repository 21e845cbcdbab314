"""
Data manager for JSON catalog files and catalog validation.
"""
import json
import os
import logging
from typing import Dict, List, Optional, Any
from pathlib import Path

from .catalog import DEFAULT_CATALOG, DEFAULT_CATALOG_NAME
from .models import Catalog, QuizItem

REQUIRED_ITEM_FIELDS = ("composer", "title", "music_link", "image_link", "fun_fact")
# Every composer must fit one select menu
MAX_CATALOG_COMPOSERS = 25


class DataManager:
    """Manages loading and validation of JSON catalog files."""

    MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB

    def __init__(self, catalog_directory: str = "./catalogs/"):
        """
        Initialize DataManager with catalog directory path.

        Args:
            catalog_directory: Path to directory containing JSON catalog files
        """
        self.catalog_directory = Path(catalog_directory)
        self.loaded_catalogs: Dict[str, Catalog] = {}
        self.logger = logging.getLogger(__name__)
        self.load_errors: List[str] = []
        self.default_catalog_used = False

    def load_catalog_files(self) -> Dict[str, Catalog]:
        """
        Load all JSON files from the catalog directory.

        Files that fail to load are recorded in load_errors. If nothing loads,
        the built-in classical music catalog is used instead.

        Returns:
            Dictionary mapping catalog names to catalogs
        """
        self.loaded_catalogs.clear()
        self.load_errors.clear()
        self.default_catalog_used = False

        if not self.catalog_directory.is_dir():
            self.logger.warning(f"Catalog directory not found: {self.catalog_directory}")
            self.load_errors.append(f"Catalog directory not found: {self.catalog_directory}")
            return self._use_default_catalog()

        scan_result = self._scan_catalog_files()
        if not scan_result['success']:
            self.load_errors.append(scan_result['error'])
            return self._use_default_catalog()

        json_files = scan_result['files']
        if not json_files:
            self.logger.warning(f"No JSON files found in {self.catalog_directory}")
            self.load_errors.append(f"No catalog files found in {self.catalog_directory}")
            return self._use_default_catalog()

        successful_loads = 0
        for json_file in json_files:
            load_result = self._load_catalog_file_safely(json_file)
            if load_result['success']:
                successful_loads += 1
            else:
                self.load_errors.append(f"{json_file.name}: {load_result['error']}")

        if successful_loads == 0:
            self.logger.error("No catalog files could be loaded successfully")
            self.load_errors.append("All catalog files failed to load")
            return self._use_default_catalog()

        self.logger.info(f"Successfully loaded {successful_loads} catalog files")
        if self.load_errors:
            self.logger.warning(f"Encountered {len(self.load_errors)} loading errors")

        return self.loaded_catalogs

    def _load_single_file(self, file_path: Path) -> Optional[dict]:
        """
        Load and parse a single JSON file.

        Args:
            file_path: Path to the JSON file

        Returns:
            Parsed JSON data or None if loading failed
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            self.logger.error(f"Invalid JSON in {file_path}: {e}")
            return None
        except OSError as e:
            self.logger.error(f"Failed to read catalog file {file_path}: {e}")
            return None

        if not self.validate_catalog_structure(data):
            self.logger.error(f"Invalid catalog structure in {file_path}")
            return None
        return data

    def validate_catalog_structure(self, data: Any) -> bool:
        """
        Validate that JSON data has the correct catalog structure.

        Expected structure:
        {
            "catalog": [
                {
                    "composer": str,
                    "title": str,
                    "music_link": str,
                    "image_link": str,
                    "fun_fact": str
                }
            ]
        }

        Args:
            data: Parsed JSON data to validate

        Returns:
            True if structure is valid, False otherwise
        """
        if not isinstance(data, dict):
            self.logger.error("Catalog data must be a JSON object")
            return False

        if "catalog" not in data:
            self.logger.error("Catalog data must contain a 'catalog' key")
            return False

        items = data["catalog"]
        if not isinstance(items, list):
            self.logger.error("'catalog' value must be an array")
            return False

        if not items:
            self.logger.error("Catalog array cannot be empty")
            return False

        for i, item_data in enumerate(items):
            if not isinstance(item_data, dict):
                self.logger.error(f"Item {i} must be an object")
                return False

            for field_name in REQUIRED_ITEM_FIELDS:
                if field_name not in item_data:
                    self.logger.error(f"Item {i} missing '{field_name}' field")
                    return False
                if not isinstance(item_data[field_name], str):
                    self.logger.error(f"Item {i} '{field_name}' field must be a string")
                    return False

            if not item_data["composer"].strip():
                self.logger.error(f"Item {i} 'composer' field cannot be blank")
                return False

        composers = {item_data["composer"] for item_data in items}
        if len(composers) > MAX_CATALOG_COMPOSERS:
            self.logger.error(
                f"Catalog has {len(composers)} composers, at most {MAX_CATALOG_COMPOSERS} are supported"
            )
            return False

        return True

    def _parse_items(self, catalog_data: dict) -> Catalog:
        """Parse validated catalog data into QuizItem objects."""
        return tuple(
            QuizItem(
                composer=item_data["composer"],
                title=item_data["title"],
                audio_ref=item_data["music_link"],
                image_ref=item_data["image_link"],
                trivia=item_data["fun_fact"]
            )
            for item_data in catalog_data["catalog"]
        )

    def get_available_catalogs(self) -> List[str]:
        """
        Get list of available catalog names.

        Returns:
            List of catalog names (without file extensions)
        """
        return list(self.loaded_catalogs.keys())

    def get_catalog(self, catalog_name: Optional[str] = None) -> Optional[Catalog]:
        """
        Retrieve a loaded catalog.

        Args:
            catalog_name: Name of the catalog, or None for the first one loaded

        Returns:
            The catalog, or None if it is not loaded
        """
        if catalog_name is None:
            return next(iter(self.loaded_catalogs.values()), None)
        return self.loaded_catalogs.get(catalog_name)

    def catalog_exists(self, catalog_name: str) -> bool:
        """Check if a catalog with the given name is loaded."""
        return catalog_name in self.loaded_catalogs

    def _scan_catalog_files(self) -> Dict[str, Any]:
        """
        Scan catalog directory for JSON files.

        Returns:
            Dictionary with success status, files list, and error message if applicable
        """
        try:
            json_files = sorted(self.catalog_directory.glob("*.json"))
            return {
                'success': True,
                'files': json_files
            }
        except PermissionError:
            return {
                'success': False,
                'error': f"Permission denied: Cannot read directory {self.catalog_directory}",
                'files': []
            }
        except OSError as e:
            return {
                'success': False,
                'error': f"System error scanning {self.catalog_directory}: {e}",
                'files': []
            }

    def _load_catalog_file_safely(self, json_file: Path) -> Dict[str, Any]:
        """
        Load a single catalog file with error handling.

        Args:
            json_file: Path to the JSON file to load

        Returns:
            Dictionary with success status and error message if applicable
        """
        try:
            if not os.access(json_file, os.R_OK):
                return {
                    'success': False,
                    'error': "Permission denied: Cannot read file"
                }

            file_size = json_file.stat().st_size
            if file_size > self.MAX_FILE_SIZE:
                return {
                    'success': False,
                    'error': f"File too large ({file_size / 1024 / 1024:.1f}MB). "
                             f"Maximum size is {self.MAX_FILE_SIZE / 1024 / 1024}MB"
                }

            catalog_data = self._load_single_file(json_file)
            if catalog_data is None:
                return {
                    'success': False,
                    'error': "Invalid JSON structure or validation failed"
                }

            items = self._parse_items(catalog_data)
            catalog_name = json_file.stem
            self.loaded_catalogs[catalog_name] = items
            self.logger.info(f"Loaded catalog '{catalog_name}' with {len(items)} items")

            return {'success': True}

        except OSError as e:
            return {
                'success': False,
                'error': f"System error: {e}"
            }

    def _use_default_catalog(self) -> Dict[str, Catalog]:
        """Fall back to the built-in classical music catalog."""
        self.loaded_catalogs[DEFAULT_CATALOG_NAME] = DEFAULT_CATALOG
        self.default_catalog_used = True
        self.logger.warning(
            f"Using built-in catalog '{DEFAULT_CATALOG_NAME}' with {len(DEFAULT_CATALOG)} items"
        )
        return self.loaded_catalogs

    def get_load_errors(self) -> List[str]:
        """Get list of errors encountered during the last load operation."""
        return self.load_errors.copy()

    def has_load_errors(self) -> bool:
        """Check if there were any errors during the last load operation."""
        return len(self.load_errors) > 0

    def is_default_catalog_active(self) -> bool:
        """Check if the built-in catalog was used because nothing loaded."""
        return self.default_catalog_used

    def get_loading_summary(self) -> Dict[str, Any]:
        """
        Get a summary of the loading operation.

        Returns:
            Dictionary with loading statistics and status
        """
        return {
            'total_catalogs': len(self.loaded_catalogs),
            'has_errors': self.has_load_errors(),
            'error_count': len(self.load_errors),
            'errors': self.get_load_errors(),
            'default_active': self.is_default_catalog_active(),
            'catalog_directory': str(self.catalog_directory),
            'available_catalogs': self.get_available_catalogs()
        }
