"""
Configuration manager for Composer Quiz settings.
"""
import logging
from typing import Optional, Dict, Any, List
from pathlib import Path

from .models import QuizSettings


class ConfigManager:
    """Manages quiz configuration settings."""

    # Default configuration values
    DEFAULT_CATALOG_DIRECTORY = "./catalogs/"
    DEFAULT_CATALOG_NAME = None  # First catalog loaded
    DEFAULT_RANDOM_SEED = None
    DEFAULT_VIEW_TIMEOUT = 900

    # Validation limits
    MIN_VIEW_TIMEOUT = 30
    MAX_VIEW_TIMEOUT = 3600  # 1 hour

    def __init__(self):
        """Initialize ConfigManager with default settings."""
        self.logger = logging.getLogger(__name__)
        self._settings = QuizSettings(
            catalog_directory=self.DEFAULT_CATALOG_DIRECTORY,
            catalog_name=self.DEFAULT_CATALOG_NAME,
            random_seed=self.DEFAULT_RANDOM_SEED,
            view_timeout=self.DEFAULT_VIEW_TIMEOUT
        )

    def get_quiz_settings(self) -> QuizSettings:
        """
        Get current quiz settings.

        Returns:
            Copy of the current QuizSettings
        """
        return QuizSettings(
            catalog_directory=self._settings.catalog_directory,
            catalog_name=self._settings.catalog_name,
            random_seed=self._settings.random_seed,
            view_timeout=self._settings.view_timeout
        )

    def apply_config(self, config: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Apply the 'quiz' section of a parsed config.json.

        Invalid values are logged and the defaults kept.

        Returns:
            List of failed setter results
        """
        quiz_config = config.get('quiz', {}) or {}
        results = []

        if 'catalog_directory' in quiz_config:
            results.append(self.set_catalog_directory(quiz_config['catalog_directory']))
        if 'catalog_name' in quiz_config:
            results.append(self.set_catalog_name(quiz_config['catalog_name']))
        if 'random_seed' in quiz_config:
            results.append(self.set_random_seed(quiz_config['random_seed']))
        if 'view_timeout' in quiz_config:
            results.append(self.set_view_timeout(quiz_config['view_timeout']))

        failures = [result for result in results if not result['success']]
        if failures:
            self.logger.warning(f"Ignored {len(failures)} invalid quiz settings")
        return failures

    def set_catalog_directory(self, directory: str) -> Dict[str, Any]:
        """
        Set the directory path for catalog files.

        Args:
            directory: Path to catalog files directory

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        if not isinstance(directory, str):
            error_msg = f"Catalog directory must be a string, got {type(directory).__name__}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Invalid input: Expected a path string, got {type(directory).__name__}"
            }

        if not directory.strip():
            error_msg = "Catalog directory cannot be empty"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': "❌ Directory path cannot be empty"
            }

        try:
            normalized_path = str(Path(directory).resolve())
        except (OSError, ValueError) as e:
            error_msg = f"Invalid directory path format: {e}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Invalid path format: {directory}"
            }

        self._settings.catalog_directory = normalized_path
        self.logger.info(f"Catalog directory set to {normalized_path}")
        return {
            'success': True,
            'message': f"Catalog directory set to {normalized_path}",
            'user_message': f"✅ Catalog directory set to {normalized_path}"
        }

    def get_catalog_directory(self) -> str:
        """Get current catalog directory setting."""
        return self._settings.catalog_directory

    def set_catalog_name(self, name: Optional[str]) -> Dict[str, Any]:
        """
        Choose which loaded catalog games are played from.

        Args:
            name: Catalog file stem, or None for the first catalog loaded

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        if name is None:
            self._settings.catalog_name = None
            self.logger.info("Catalog set to the first catalog loaded")
            return {
                'success': True,
                'message': "Catalog set to the first catalog loaded",
                'user_message': "✅ Games will use the first catalog available"
            }

        if not isinstance(name, str) or not name.strip():
            error_msg = f"Catalog name must be a non-empty string, got {name!r}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': "❌ Invalid catalog name"
            }

        self._settings.catalog_name = name.strip()
        self.logger.info(f"Catalog set to '{self._settings.catalog_name}'")
        return {
            'success': True,
            'message': f"Catalog set to '{self._settings.catalog_name}'",
            'user_message': f"✅ Games will use the '{self._settings.catalog_name}' catalog"
        }

    def get_catalog_name(self) -> Optional[str]:
        """Get current catalog name setting."""
        return self._settings.catalog_name

    def set_random_seed(self, seed: Optional[int]) -> Dict[str, Any]:
        """
        Set the seed used for drawing items, or None for unseeded draws.

        Args:
            seed: Integer seed or None

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        # bool is an int subclass but never a meaningful seed
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            error_msg = f"Random seed must be an integer, got {type(seed).__name__}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Invalid input: Expected a number, got {type(seed).__name__}"
            }

        self._settings.random_seed = seed
        description = "unseeded" if seed is None else f"seeded with {seed}"
        self.logger.info(f"Item draws are {description}")
        return {
            'success': True,
            'message': f"Item draws are {description}",
            'user_message': f"✅ Item draws are {description}"
        }

    def get_random_seed(self) -> Optional[int]:
        """Get current random seed setting."""
        return self._settings.random_seed

    def set_view_timeout(self, seconds: int) -> Dict[str, Any]:
        """
        Set how long quiz buttons stay active without interaction.

        Args:
            seconds: Timeout in seconds

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        if isinstance(seconds, bool) or not isinstance(seconds, int):
            error_msg = f"View timeout must be an integer, got {type(seconds).__name__}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Invalid input: Expected a number, got {type(seconds).__name__}"
            }

        if seconds < self.MIN_VIEW_TIMEOUT:
            error_msg = f"View timeout must be at least {self.MIN_VIEW_TIMEOUT} seconds"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Timeout too short: Minimum is {self.MIN_VIEW_TIMEOUT} seconds"
            }

        if seconds > self.MAX_VIEW_TIMEOUT:
            error_msg = f"View timeout cannot exceed {self.MAX_VIEW_TIMEOUT} seconds"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Timeout too long: Maximum is {self.MAX_VIEW_TIMEOUT} seconds "
                                f"({self.MAX_VIEW_TIMEOUT // 60} minutes)"
            }

        self._settings.view_timeout = seconds
        self.logger.info(f"View timeout set to {seconds} seconds")
        return {
            'success': True,
            'message': f"View timeout set to {seconds} seconds",
            'user_message': f"✅ Quiz buttons stay active for {seconds} seconds"
        }

    def get_view_timeout(self) -> int:
        """Get current view timeout setting."""
        return self._settings.view_timeout

    def reset_to_defaults(self) -> None:
        """Reset all settings to their default values."""
        self._settings = QuizSettings(
            catalog_directory=self.DEFAULT_CATALOG_DIRECTORY,
            catalog_name=self.DEFAULT_CATALOG_NAME,
            random_seed=self.DEFAULT_RANDOM_SEED,
            view_timeout=self.DEFAULT_VIEW_TIMEOUT
        )
        self.logger.info("All settings reset to default values")

    def validate_settings(self) -> Dict[str, Any]:
        """
        Validate current settings and return validation results.

        Returns:
            Dictionary with validation results and any issues found
        """
        validation_result = {
            "valid": True,
            "issues": []
        }

        if (not isinstance(self._settings.view_timeout, int) or
                self._settings.view_timeout < self.MIN_VIEW_TIMEOUT or
                self._settings.view_timeout > self.MAX_VIEW_TIMEOUT):
            validation_result["valid"] = False
            validation_result["issues"].append(
                f"Invalid view timeout: {self._settings.view_timeout}"
            )

        if self._settings.random_seed is not None and not isinstance(self._settings.random_seed, int):
            validation_result["valid"] = False
            validation_result["issues"].append(
                f"Invalid random seed: {self._settings.random_seed}"
            )

        if (not isinstance(self._settings.catalog_directory, str) or
                not self._settings.catalog_directory.strip()):
            validation_result["valid"] = False
            validation_result["issues"].append(
                f"Invalid catalog directory: {self._settings.catalog_directory}"
            )

        return validation_result

    def get_settings_summary(self) -> str:
        """
        Get a formatted summary of current settings.

        Returns:
            Human-readable string describing current settings
        """
        catalog_str = self._settings.catalog_name or "first available"
        seed_str = "none" if self._settings.random_seed is None else str(self._settings.random_seed)

        return (
            f"Quiz Settings:\n"
            f"• Catalog: {catalog_str}\n"
            f"• Catalog Directory: {self._settings.catalog_directory}\n"
            f"• Random Seed: {seed_str}\n"
            f"• Button Timeout: {self._settings.view_timeout} seconds"
        )
