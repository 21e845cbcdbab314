"""
Unit tests for the launcher in main.py.
"""
import json
import logging
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import main
from main import LauncherError, get_bot_token, load_config, resolve_config_path


class TestLauncher(unittest.TestCase):
    """Test config discovery, loading and token lookup."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = Path(self.temp_dir) / "config.json"

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def write_config(self, text):
        self.config_path.write_text(text, encoding='utf-8')
        return self.config_path

    def test_resolve_config_path_precedence(self):
        with patch.dict(os.environ, {'COMPOSER_QUIZ_CONFIG': 'from_env.json'}):
            self.assertEqual(resolve_config_path(['cli.json']), Path('cli.json'))
            self.assertEqual(resolve_config_path([]), Path('from_env.json'))

        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(resolve_config_path([]), Path('config.json'))

    def test_load_config(self):
        path = self.write_config(json.dumps({"quiz": {"random_seed": 4}}))
        self.assertEqual(load_config(path), {"quiz": {"random_seed": 4}})

    def test_load_config_failures(self):
        with self.assertRaises(LauncherError):
            load_config(Path(self.temp_dir) / "missing.json")

        for text in ("{not json", "[1, 2]"):
            with self.subTest(text=text):
                with self.assertRaises(LauncherError):
                    load_config(self.write_config(text))

    def test_environment_token_wins(self):
        config = {"bot": {"token": "from-config"}}
        with patch.dict(os.environ, {'DISCORD_BOT_TOKEN': 'from-env'}):
            self.assertEqual(get_bot_token(config), "from-env")

        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(get_bot_token(config), "from-config")

    def test_missing_or_placeholder_token(self):
        with patch.dict(os.environ, {}, clear=True):
            for config in ({}, {"bot": {"token": main.TOKEN_PLACEHOLDER}}):
                with self.subTest(config=config):
                    with self.assertRaises(LauncherError):
                        get_bot_token(config)

    def test_main_reports_bad_config(self):
        with patch('builtins.print') as mock_print:
            exit_code = main.main([str(Path(self.temp_dir) / "missing.json")])

        self.assertEqual(exit_code, 1)
        self.assertIn("not found", mock_print.call_args.args[0])

    def test_main_runs_bot(self):
        path = self.write_config(json.dumps({"bot": {"token": "abc"}, "logging": {"log_directory": self.temp_dir}}))

        with patch.dict(os.environ, {}, clear=True), \
                patch('main.setup_logging_from_config') as setup_logging, \
                patch('main.asyncio.run') as mock_run, \
                patch('composer_quiz.bot.run_bot') as run_bot, \
                patch('builtins.print'):
            exit_code = main.main([str(path)])

        self.assertEqual(exit_code, 0)
        setup_logging.assert_called_once()
        run_bot.assert_called_once_with("abc", {"bot": {"token": "abc"}, "logging": {"log_directory": self.temp_dir}})
        mock_run.assert_called_once()

    def test_setup_logging_creates_directory(self):
        log_directory = Path(self.temp_dir) / "nested" / "logs"
        root = logging.getLogger()
        saved_handlers = root.handlers[:]
        saved_level = root.level
        discord_logger = logging.getLogger('discord')
        saved_discord_level = discord_logger.level
        root.handlers = []
        try:
            result = main.setup_logging_from_config({"logging": {"log_directory": str(log_directory), "level": "debug"}})
            self.assertEqual(result, log_directory)
            self.assertTrue(log_directory.is_dir())
            self.assertEqual(root.level, logging.DEBUG)
            self.assertEqual(logging.getLogger('discord').level, logging.WARNING)
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers = saved_handlers
            root.setLevel(saved_level)
            discord_logger.setLevel(saved_discord_level)


if __name__ == '__main__':
    unittest.main()
