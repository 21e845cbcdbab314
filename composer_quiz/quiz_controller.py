"""
Quiz session controller for the Composer Quiz.
Holds one game per Discord channel and applies player actions to it.
"""
import logging
import random
import time
from typing import Any, Callable, Dict, Optional

from .catalog import option_image
from .config_manager import ConfigManager
from .data_manager import DataManager
from .models import GameSession
from .quiz_engine import QuizEngine, SessionState, get_session_state


class QuizControllerError(Exception):
    """Base exception for quiz controller errors."""
    pass


class SessionNotFoundError(QuizControllerError):
    """Raised when attempting to operate on a channel with no game."""
    pass


class CatalogUnavailableError(QuizControllerError):
    """Raised when the configured catalog is not loaded."""
    pass


class QuizController:
    """
    Hosts quiz games across Discord channels.

    Each channel owns an isolated GameSession. Every action replaces the
    channel's session with the value returned by the engine.
    """

    def __init__(self, data_manager: DataManager, config_manager: ConfigManager):
        """
        Initialize the quiz controller.

        Args:
            data_manager: Instance for loading catalogs
            config_manager: Instance for managing configuration
        """
        self.logger = logging.getLogger(__name__)
        self.data_manager = data_manager
        self.config_manager = config_manager
        self._engine: Optional[QuizEngine] = None

        # Active sessions mapped by channel ID
        self._active_sessions: Dict[int, GameSession] = {}

        self.logger.info("QuizController initialized")

    @property
    def quiz_engine(self) -> QuizEngine:
        """The engine for the configured catalog, built on first use."""
        if self._engine is None:
            self._engine = self._build_engine()
        return self._engine

    def _build_engine(self) -> QuizEngine:
        settings = self.config_manager.get_quiz_settings()
        catalog = self.data_manager.get_catalog(settings.catalog_name)
        if catalog is None:
            raise CatalogUnavailableError(
                f"Catalog '{settings.catalog_name or 'default'}' is not loaded"
            )

        rng = random.Random(settings.random_seed)
        self.logger.info(
            f"Quiz engine ready with {len(catalog)} items",
            extra={
                'event_type': 'engine_ready',
                'catalog_name': settings.catalog_name,
                'item_count': len(catalog),
                'seeded': settings.random_seed is not None,
                'timestamp': time.time()
            }
        )
        return QuizEngine(catalog, rng)

    def get_session(self, channel_id: int) -> Optional[GameSession]:
        """
        Get the game for a channel.

        Args:
            channel_id: Discord channel identifier

        Returns:
            GameSession if one exists, None otherwise
        """
        return self._active_sessions.get(channel_id)

    def _require_session(self, channel_id: int) -> GameSession:
        session = self._active_sessions.get(channel_id)
        if session is None:
            raise SessionNotFoundError(f"No quiz game in channel {channel_id}")
        return session

    def has_active_session(self, channel_id: int) -> bool:
        """Check if a channel has a game that is not over."""
        session = self._active_sessions.get(channel_id)
        return session is not None and not session.game_over

    def get_session_state(self, channel_id: int) -> SessionState:
        """
        Get the current state of a channel's game.

        Args:
            channel_id: Discord channel identifier

        Returns:
            Current session state, NOT_STARTED when there is no game
        """
        session = self._active_sessions.get(channel_id)
        if session is None:
            return SessionState.NOT_STARTED
        return get_session_state(session)

    def start_game(self, channel_id: int) -> Dict[str, Any]:
        """
        Start or restart the game in a channel.

        Args:
            channel_id: Discord channel identifier

        Returns:
            Dictionary with success status, session and user-friendly message
        """
        try:
            engine = self.quiz_engine
        except QuizControllerError as e:
            self.logger.error(f"Cannot start game in channel {channel_id}: {e}")
            return {
                'success': False,
                'changed': False,
                'error': str(e),
                'user_message': "❌ No music catalog is available. Check the catalog directory."
            }

        restarted = channel_id in self._active_sessions
        session = engine.start_new_game()
        self._active_sessions[channel_id] = session

        self.logger.info(
            f"{'Restarted' if restarted else 'Started'} game in channel {channel_id}",
            extra={
                'event_type': 'session_started',
                'channel_id': channel_id,
                'restarted': restarted,
                'timestamp': time.time()
            }
        )

        if session.game_over:
            return {
                'success': True,
                'changed': True,
                'session': session,
                'user_message': "⚠️ The catalog has no items, so the game is already over."
            }

        return {
            'success': True,
            'changed': True,
            'session': session,
            'user_message': "🎵 New game started! Who composed this music?"
        }

    def _apply(self, channel_id: int, operation: str,
               transition: Callable[[GameSession], GameSession]) -> Dict[str, Any]:
        """Run one engine transition on a channel's game and store the result."""
        try:
            session = self._require_session(channel_id)
        except SessionNotFoundError as e:
            self.logger.warning(
                f"Cannot {operation} in channel {channel_id}: no game",
                extra={
                    'event_type': 'session_not_found',
                    'channel_id': channel_id,
                    'operation': operation,
                    'timestamp': time.time()
                }
            )
            return {
                'success': False,
                'changed': False,
                'error': str(e),
                'user_message': "❌ No quiz is running here. Use `/quiz` to start one."
            }

        updated = transition(session)
        self._active_sessions[channel_id] = updated
        return {
            'success': True,
            'changed': updated is not session,
            'session': updated
        }

    def select_option(self, channel_id: int, composer: str) -> Dict[str, Any]:
        """Select a composer for the channel's current question."""
        return self._apply(
            channel_id, "select option",
            lambda session: self.quiz_engine.select_option(session, composer)
        )

    def check_answer(self, channel_id: int) -> Dict[str, Any]:
        """Lock in and score the channel's current selection."""
        return self._apply(
            channel_id, "check answer",
            lambda session: self.quiz_engine.check_answer(session)
        )

    def next_question(self, channel_id: int) -> Dict[str, Any]:
        """Advance the channel's game to the next item."""
        return self._apply(
            channel_id, "advance question",
            lambda session: self.quiz_engine.next_question(session)
        )

    def report_media_failure(self, channel_id: int) -> Dict[str, Any]:
        """Record that the channel's current clip could not be played."""
        return self._apply(
            channel_id, "report media failure",
            lambda session: self.quiz_engine.report_media_failure(session)
        )

    def stop_game(self, channel_id: int) -> Dict[str, Any]:
        """
        Discard the game in a channel.

        Returns:
            Dictionary with success status, final progress and user-friendly message
        """
        session = self._active_sessions.pop(channel_id, None)
        if session is None:
            return {
                'success': False,
                'error': f"No quiz game in channel {channel_id}",
                'user_message': "❌ No quiz is running here."
            }

        self.logger.info(
            f"Stopped game in channel {channel_id}",
            extra={
                'event_type': 'session_stopped',
                'channel_id': channel_id,
                'score': session.score,
                'questions_answered': session.questions_answered,
                'timestamp': time.time()
            }
        )
        return {
            'success': True,
            'progress': self._progress(session),
            'user_message': f"🛑 Quiz stopped. Final score: {session.score}/{session.questions_answered}"
        }

    @staticmethod
    def _progress(session: GameSession) -> Dict[str, Any]:
        return {
            'score': session.score,
            'questions_answered': session.questions_answered,
            'question_number': session.question_number,
            'items_used': len(session.used_items),
            'state': get_session_state(session).value,
            'media_unavailable': session.media_unavailable,
            'game_over': session.game_over
        }

    def get_session_progress(self, channel_id: int) -> Optional[Dict[str, Any]]:
        """
        Get progress information for a channel's game.

        Args:
            channel_id: Discord channel identifier

        Returns:
            Dictionary with progress info, or None if there is no game
        """
        session = self._active_sessions.get(channel_id)
        if session is None:
            return None

        progress = self._progress(session)
        progress['total_items'] = len(self.quiz_engine.catalog)
        return progress

    def get_feedback(self, channel_id: int) -> Optional[Dict[str, Any]]:
        """
        Get the answer reveal for a checked question.

        Returns:
            Title, correctness, true composer and trivia, or None before the
            answer is checked
        """
        session = self._active_sessions.get(channel_id)
        if session is None or not session.answer_checked or session.current_item is None:
            return None

        item = session.current_item
        return {
            'title': item.title,
            'correct': session.is_correct,
            'selected': session.selected_option,
            'composer': item.composer,
            'trivia': item.trivia,
            'image': option_image(self.quiz_engine.catalog, item.composer)
        }

    def get_all_active_sessions(self) -> Dict[int, Dict[str, Any]]:
        """Get progress for every channel with a game."""
        return {
            channel_id: self._progress(session)
            for channel_id, session in self._active_sessions.items()
        }
