"""
Core data models for the Composer Quiz.
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple


@dataclass(frozen=True, eq=False)
class QuizItem:
    """One playable quiz question: a clip, its composer and some trivia.

    Equality and hashing are by identity so that two items with the same
    content are still separate members of the pool.
    """
    composer: str
    title: str
    audio_ref: str
    image_ref: str
    trivia: str


Catalog = Tuple[QuizItem, ...]


@dataclass
class QuizSettings:
    """Configuration settings for quiz games."""
    catalog_directory: str = "./catalogs/"
    catalog_name: Optional[str] = None
    random_seed: Optional[int] = None
    view_timeout: int = 900


@dataclass(frozen=True)
class GameSession:
    """State of one play-through. Transitions return a new instance."""
    used_items: FrozenSet[QuizItem] = field(default_factory=frozenset)
    current_item: Optional[QuizItem] = None
    score: int = 0
    questions_answered: int = 0
    question_number: int = 0
    selected_option: Optional[str] = None
    answer_checked: bool = False
    media_unavailable: bool = False
    game_over: bool = False

    @property
    def is_correct(self) -> Optional[bool]:
        """Whether the checked answer was right, None until checked."""
        if not self.answer_checked or self.current_item is None:
            return None
        return self.selected_option == self.current_item.composer
