"""
Quiz engine core logic for the Composer Quiz.
Handles drawing items from the pool and the game state transitions.
"""
import dataclasses
import logging
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, List, Optional, Sequence, Union

from .catalog import option_set
from .models import Catalog, GameSession, QuizItem

# Set up logger for game operations
logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Enumeration of the conceptual game states."""
    NOT_STARTED = "not_started"
    AWAITING_SELECTION = "awaiting_selection"
    SELECTION_MADE = "selection_made"
    ANSWER_CHECKED = "answer_checked"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class Drawn:
    """A successful draw from the pool."""
    item: QuizItem


class PoolExhausted:
    """Signal that every catalog item has already been presented."""

    def __repr__(self) -> str:
        return "PoolExhausted()"


POOL_EXHAUSTED = PoolExhausted()

DrawResult = Union[Drawn, PoolExhausted]


class GameLifecycleLogger:
    """Structured logging for game lifecycle events."""

    @staticmethod
    def log_game_started(item_count: int, first_item: Optional[QuizItem]) -> None:
        """Log a new game."""
        logger.info(
            f"Game lifecycle: STARTED - {item_count} items in catalog",
            extra={
                'event_type': 'game_started',
                'item_count': item_count,
                'first_title': first_item.title if first_item else None,
                'timestamp': time.time()
            }
        )

    @staticmethod
    def log_empty_catalog() -> None:
        """Log an attempt to play with no items at all."""
        logger.warning(
            "Game lifecycle: EMPTY_CATALOG - game ends before the first question",
            extra={
                'event_type': 'empty_catalog',
                'timestamp': time.time()
            }
        )

    @staticmethod
    def log_answer_checked(session: GameSession) -> None:
        """Log a scored answer."""
        logger.info(
            f"Game lifecycle: ANSWER_CHECKED - Question {session.question_number}, "
            f"Correct {session.is_correct}, Score {session.score}/{session.questions_answered}",
            extra={
                'event_type': 'answer_checked',
                'question_number': session.question_number,
                'correct': session.is_correct,
                'score': session.score,
                'questions_answered': session.questions_answered,
                'timestamp': time.time()
            }
        )

    @staticmethod
    def log_game_over(session: GameSession) -> None:
        """Log pool exhaustion."""
        logger.info(
            f"Game lifecycle: GAME_OVER - Final score {session.score}/{session.questions_answered}",
            extra={
                'event_type': 'game_over',
                'score': session.score,
                'questions_answered': session.questions_answered,
                'timestamp': time.time()
            }
        )

    @staticmethod
    def log_media_failure(item: QuizItem) -> None:
        """Log an audio clip that could not be played."""
        logger.warning(
            f"Game lifecycle: MEDIA_FAILURE - '{item.title}' ({item.audio_ref})",
            extra={
                'event_type': 'media_failure',
                'title': item.title,
                'audio_ref': item.audio_ref,
                'timestamp': time.time()
            }
        )

    @staticmethod
    def log_invalid_action(action: str, reason: str) -> None:
        """Log an action rejected by a guard."""
        logger.debug(
            f"Game lifecycle: INVALID_ACTION - {action} ignored ({reason})",
            extra={
                'event_type': 'invalid_action',
                'action': action,
                'reason': reason,
                'timestamp': time.time()
            }
        )


def available_items(catalog: Sequence[QuizItem], used_items: AbstractSet[QuizItem]) -> List[QuizItem]:
    """
    Get the items that can still be drawn.

    Args:
        catalog: Full catalog in its original order
        used_items: Items already presented this game

    Returns:
        Unused items in catalog order
    """
    return [item for item in catalog if item not in used_items]


def draw(
    catalog: Sequence[QuizItem],
    used_items: AbstractSet[QuizItem],
    rng: Optional[random.Random] = None
) -> DrawResult:
    """
    Pick one unused item uniformly at random.

    Neither argument is modified; the caller records the drawn item.

    Args:
        catalog: Full catalog
        used_items: Items already presented this game
        rng: Random source, the module-level generator if None

    Returns:
        Drawn(item), or POOL_EXHAUSTED when nothing is left
    """
    candidates = available_items(catalog, used_items)
    if not candidates:
        return POOL_EXHAUSTED
    chooser = rng if rng is not None else random
    return Drawn(chooser.choice(candidates))


def get_session_state(session: GameSession) -> SessionState:
    """Derive the conceptual state from the session fields."""
    if session.game_over:
        return SessionState.GAME_OVER
    if session.current_item is None:
        return SessionState.NOT_STARTED
    if session.answer_checked:
        return SessionState.ANSWER_CHECKED
    if session.selected_option is not None:
        return SessionState.SELECTION_MADE
    return SessionState.AWAITING_SELECTION


class QuizEngine:
    """
    Quiz state machine over one catalog.

    Every transition takes a GameSession and returns the resulting one. A
    rejected action returns the very same session object and never raises.
    """

    def __init__(self, catalog: Sequence[QuizItem], rng: Optional[random.Random] = None):
        """
        Initialize the quiz engine.

        Args:
            catalog: Items to quiz on, fixed for the engine's lifetime
            rng: Random source for draws, seeded in tests
        """
        self.catalog: Catalog = tuple(catalog)
        self.options: List[str] = option_set(self.catalog)
        self._rng = rng if rng is not None else random.Random()

    def draw(self, used_items: AbstractSet[QuizItem]) -> DrawResult:
        """Draw the next item for a game that has used the given items."""
        return draw(self.catalog, used_items, self._rng)

    def start_new_game(self) -> GameSession:
        """
        Start a clean game and present its first item.

        Returns:
            A session awaiting selection, or a finished 0/0 session when the
            catalog is empty
        """
        result = self.draw(frozenset())
        if isinstance(result, PoolExhausted):
            GameLifecycleLogger.log_empty_catalog()
            return GameSession(question_number=1, game_over=True)

        session = GameSession(
            used_items=frozenset([result.item]),
            current_item=result.item,
            question_number=1
        )
        GameLifecycleLogger.log_game_started(len(self.catalog), result.item)
        return session

    def select_option(self, session: GameSession, composer: str) -> GameSession:
        """
        Choose a composer for the current item.

        Args:
            session: Current game
            composer: One of the engine's options

        Returns:
            Session with the new selection, or the same session if the choice
            is not allowed right now
        """
        if session.game_over or session.current_item is None:
            GameLifecycleLogger.log_invalid_action("select_option", "no question in progress")
            return session
        if session.answer_checked:
            GameLifecycleLogger.log_invalid_action("select_option", "answer already checked")
            return session
        if composer not in self.options:
            GameLifecycleLogger.log_invalid_action("select_option", f"unknown option '{composer}'")
            return session

        return dataclasses.replace(session, selected_option=composer)

    def check_answer(self, session: GameSession) -> GameSession:
        """Lock in and score the current selection."""
        if session.answer_checked:
            GameLifecycleLogger.log_invalid_action("check_answer", "answer already checked")
            return session
        if session.selected_option is None or session.current_item is None:
            GameLifecycleLogger.log_invalid_action("check_answer", "no option selected")
            return session

        correct = session.selected_option == session.current_item.composer
        checked = dataclasses.replace(
            session,
            answer_checked=True,
            questions_answered=session.questions_answered + 1,
            score=session.score + 1 if correct else session.score
        )
        GameLifecycleLogger.log_answer_checked(checked)
        return checked

    def next_question(self, session: GameSession) -> GameSession:
        """
        Advance to a new item once the current answer is checked.

        When the pool is exhausted the game ends and the last item and the
        final score stay on the session.
        """
        if session.game_over:
            GameLifecycleLogger.log_invalid_action("next_question", "game is over")
            return session
        if not session.answer_checked:
            GameLifecycleLogger.log_invalid_action("next_question", "answer not checked yet")
            return session

        result = self.draw(session.used_items)
        if isinstance(result, PoolExhausted):
            finished = dataclasses.replace(session, game_over=True)
            GameLifecycleLogger.log_game_over(finished)
            return finished

        return dataclasses.replace(
            session,
            used_items=session.used_items | {result.item},
            current_item=result.item,
            question_number=session.question_number + 1,
            selected_option=None,
            answer_checked=False,
            media_unavailable=False
        )

    def report_media_failure(self, session: GameSession) -> GameSession:
        """Mark the current item's audio as unplayable."""
        if session.current_item is None:
            GameLifecycleLogger.log_invalid_action("report_media_failure", "no current item")
            return session
        if session.media_unavailable:
            return session

        GameLifecycleLogger.log_media_failure(session.current_item)
        return dataclasses.replace(session, media_unavailable=True)
