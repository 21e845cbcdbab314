#!/usr/bin/env python3
"""
Composer Quiz Bot - Main Entry Point

Usage:
    python main.py [path/to/config.json]

The config path defaults to $COMPOSER_QUIZ_CONFIG, then ./config.json.
DISCORD_BOT_TOKEN overrides the token stored in the config. Catalogs are
read from quiz.catalog_directory; the built-in classical music catalog is
played when none load.
"""

import asyncio
import sys
import os
import json
import logging
from pathlib import Path

DEFAULT_CONFIG_PATH = "config.json"
TOKEN_PLACEHOLDER = "YOUR_DISCORD_BOT_TOKEN_HERE"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class LauncherError(Exception):
    """Raised when the bot cannot be started from the given configuration."""
    pass


def resolve_config_path(argv=None):
    """Pick the config file from the command line, the environment, or the default."""
    argv = sys.argv[1:] if argv is None else argv
    if argv:
        return Path(argv[0])
    return Path(os.getenv('COMPOSER_QUIZ_CONFIG', DEFAULT_CONFIG_PATH))


def load_config(config_path):
    """Read the JSON config, which must be an object."""
    config_path = Path(config_path)
    if not config_path.is_file():
        raise LauncherError(f"{config_path} not found. Copy config.json and set your bot token.")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise LauncherError(f"Invalid JSON in {config_path}: {e}") from e
    except OSError as e:
        raise LauncherError(f"Could not read {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise LauncherError(f"{config_path} must contain a JSON object")
    return config


def get_bot_token(config):
    """DISCORD_BOT_TOKEN wins over bot.token in the config."""
    token = os.getenv('DISCORD_BOT_TOKEN') or config.get('bot', {}).get('token')
    if not token or token == TOKEN_PLACEHOLDER:
        raise LauncherError(
            "Discord bot token not configured. Set DISCORD_BOT_TOKEN "
            "or the 'token' field of the bot section."
        )
    return token


def setup_logging_from_config(config):
    """
    Log to the console and bot.log, with errors copied to errors.log.

    Returns:
        The log directory in use
    """
    log_config = config.get('logging', {})
    log_level = getattr(logging, str(log_config.get('level', 'INFO')).upper(), logging.INFO)
    log_directory = Path(log_config.get('log_directory', './logs/'))
    log_directory.mkdir(parents=True, exist_ok=True)

    error_handler = logging.FileHandler(log_directory / "errors.log", encoding='utf-8')
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_directory / "bot.log", encoding='utf-8'),
            error_handler
        ]
    )

    # Gateway chatter drowns out game events
    logging.getLogger('discord').setLevel(logging.WARNING)
    logging.getLogger('discord.http').setLevel(logging.WARNING)
    return log_directory


def main(argv=None):
    """Start the bot, returning the process exit code."""
    try:
        config = load_config(resolve_config_path(argv))
        token = get_bot_token(config)
    except LauncherError as e:
        print(f"❌ {e}")
        return 1

    setup_logging_from_config(config)

    from composer_quiz.bot import run_bot

    print("🎵 Starting Composer Quiz Bot...")
    try:
        asyncio.run(run_bot(token, config))
    except KeyboardInterrupt:
        print("\n👋 Bot stopped by user")
    return 0


if __name__ == "__main__":
    sys.exit(main())
