"""
Built-in classical music catalog and option helpers.
"""
from typing import List, Optional, Sequence

from .models import Catalog, QuizItem

DEFAULT_CATALOG_NAME = "classical_music"

_MUSIC_BASE = "https://raw.githubusercontent.com/mariolambe/classical-music-quiz/main/src/music"

DEFAULT_CATALOG: Catalog = (
    QuizItem(
        composer="Wolfgang Amadeus Mozart",
        title="Die Zauberflöte",
        audio_ref=f"{_MUSIC_BASE}/mozart.mp3",
        image_ref="https://upload.wikimedia.org/wikipedia/commons/1/1e/Wolfgang-amadeus-mozart_1.jpg",
        trivia="Mozart began composing at the age of 5 and wrote over 600 pieces of music!",
    ),
    QuizItem(
        composer="Antonio Vivaldi",
        title="The Four Seasons - Summer",
        audio_ref=f"{_MUSIC_BASE}/vivaldi.mp3",
        image_ref="https://upload.wikimedia.org/wikipedia/commons/b/bd/Vivaldi.jpg",
        trivia="Vivaldi wrote over 500 concertos, with about 230 of them for violin!",
    ),
    QuizItem(
        composer="Johann Sebastian Bach",
        title="Cello Suite No. 1 in G",
        audio_ref=f"{_MUSIC_BASE}/bach.mp3",
        image_ref="https://upload.wikimedia.org/wikipedia/commons/6/6a/Johann_Sebastian_Bach.jpg",
        trivia="Bach had 20 children and many of them became musicians too!",
    ),
    QuizItem(
        composer="Giuseppe Verdi",
        title="Requiem",
        audio_ref=f"{_MUSIC_BASE}/verdi.mp3",
        image_ref="https://upload.wikimedia.org/wikipedia/commons/1/19/Verdi_by_Giovanni_Boldini.jpg",
        trivia=(
            "Giuseppe Verdi was so passionate about gardening that he once said "
            "if he hadn't been a composer, he would have been a farmer!"
        ),
    ),
    QuizItem(
        composer="Frédéric Chopin",
        title="Nocturne in E-flat major, Op. 9, No. 2",
        audio_ref=f"{_MUSIC_BASE}/chopin.mp3",
        image_ref="https://upload.wikimedia.org/wikipedia/commons/e/e8/Frederic_Chopin_photo.jpeg",
        trivia="Chopin's heart is buried in Warsaw, while the rest of him is buried in Paris!",
    ),
)


def option_set(catalog: Sequence[QuizItem]) -> List[str]:
    """
    Get the multiple-choice options for a catalog.

    Args:
        catalog: The full catalog, regardless of which items were used

    Returns:
        Distinct composer names in order of first appearance
    """
    seen = set()
    options = []
    for item in catalog:
        if item.composer not in seen:
            seen.add(item.composer)
            options.append(item.composer)
    return options


def option_image(catalog: Sequence[QuizItem], composer: str) -> Optional[str]:
    """Image of the first catalog item credited to the composer."""
    for item in catalog:
        if item.composer == composer:
            return item.image_ref
    return None
