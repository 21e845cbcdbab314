"""
Embed builders that render a GameSession for Discord.
"""
from typing import List, Optional, Sequence

import discord

from .catalog import option_image
from .models import GameSession, QuizItem

QUESTION_COLOR = 0x6699ff
CORRECT_COLOR = 0x00ff00
WRONG_COLOR = 0xff0000
WARNING_COLOR = 0xffaa00
OPTION_COLOR = 0x2f3136
GAME_OVER_COLOR = 0x9b59b6

AUDIO_ERROR_TEXT = "Error loading audio. Please try again."

# Discord allows 10 embeds per message, question, feedback and game over take 3
MAX_PORTRAIT_EMBEDS = 7
MAX_FIELD_LENGTH = 1024


def score_line(session: GameSession) -> str:
    return f"Score: {session.score}/{session.questions_answered}"


def option_lines(options: Sequence[str], selected: Optional[str],
                 catalog: Optional[Sequence[QuizItem]] = None) -> List[str]:
    """
    One line per composer, the current selection marked.

    With a catalog, each name links to the composer's portrait.
    """
    lines = []
    for composer in options:
        marker = "🔘" if composer == selected else "⚪"
        portrait = option_image(catalog, composer) if catalog else None
        name = f"[{composer}]({portrait})" if portrait else composer
        lines.append(f"{marker} {name}")
    return lines


def chunk_lines(lines: Sequence[str], limit: int = MAX_FIELD_LENGTH) -> List[str]:
    """Join lines into blocks that each fit one embed field."""
    chunks = []
    current = ""
    for line in lines:
        line = line[:limit]
        candidate = f"{current}\n{line}" if current else line
        if current and len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


def build_question_embed(session: GameSession, options: Sequence[str],
                         catalog: Sequence[QuizItem]) -> discord.Embed:
    """
    Render the current question.

    Args:
        session: Game to render, with a current item
        options: The multiple-choice composers
        catalog: Full catalog, used for composer portraits

    Returns:
        Embed with the audio link, score line and option list. When the
        portraits do not fit as separate embeds, each listed name links to one.
    """
    item = session.current_item
    embed = discord.Embed(
        title="🎵 Who composed this music?",
        description=f"Question {session.question_number} • {score_line(session)}",
        color=WARNING_COLOR if session.media_unavailable else QUESTION_COLOR
    )

    if session.media_unavailable:
        embed.add_field(name="🔇 Audio", value=AUDIO_ERROR_TEXT, inline=False)
    elif item is not None:
        embed.add_field(name="🎧 Listen", value=f"[Play the clip]({item.audio_ref})", inline=False)

    if len(options) > MAX_PORTRAIT_EMBEDS:
        lines = option_lines(options, session.selected_option, catalog)
    else:
        lines = option_lines(options, session.selected_option)
    chunks = chunk_lines(lines) or ["No options available"]
    for index, chunk in enumerate(chunks):
        embed.add_field(name="🎼 Composers" if index == 0 else "\u200b", value=chunk, inline=False)

    if session.selected_option is not None:
        portrait = option_image(catalog, session.selected_option)
        if portrait:
            embed.set_thumbnail(url=portrait)

    embed.set_footer(text="Pick a composer, then press Check Answer")
    return embed


def build_portrait_embeds(options: Sequence[str], selected: Optional[str],
                           catalog: Sequence[QuizItem]) -> List[discord.Embed]:
    """One compact embed per composer option, showing their portrait."""
    embeds = []
    for composer in options:
        embed = discord.Embed(color=QUESTION_COLOR if composer == selected else OPTION_COLOR)
        embed.set_author(name=composer[:256])
        portrait = option_image(catalog, composer)
        if portrait:
            embed.set_thumbnail(url=portrait)
        embeds.append(embed)
    return embeds


def build_feedback_embed(session: GameSession) -> Optional[discord.Embed]:
    """Render the answer reveal, or None while the answer is unchecked."""
    item = session.current_item
    if not session.answer_checked or item is None:
        return None

    if session.is_correct:
        embed = discord.Embed(title="Correct! 🎉", color=CORRECT_COLOR)
    else:
        embed = discord.Embed(
            title=f"Oops! The correct answer was {item.composer}.",
            color=WRONG_COLOR
        )
    embed.add_field(name="Title", value=item.title, inline=False)
    embed.add_field(name="Fun Fact", value=item.trivia, inline=False)
    embed.set_thumbnail(url=item.image_ref)
    return embed


def build_game_over_embed(session: GameSession) -> discord.Embed:
    embed = discord.Embed(
        title="Game Over!",
        description=f"Your final score: {session.score}/{session.questions_answered}",
        color=GAME_OVER_COLOR
    )
    embed.set_footer(text="Press Play Again to start a new game")
    return embed


def render_session(session: GameSession, options: Sequence[str],
                   catalog: Sequence[QuizItem]) -> List[discord.Embed]:
    """
    Render everything the player should see for a session.

    Order is question, composer portraits, feedback, game over. The last
    question and its feedback stay visible under the game-over panel.
    """
    embeds = []
    if session.current_item is not None:
        embeds.append(build_question_embed(session, options, catalog))
        if len(options) <= MAX_PORTRAIT_EMBEDS:
            embeds.extend(build_portrait_embeds(options, session.selected_option, catalog))
        feedback = build_feedback_embed(session)
        if feedback is not None:
            embeds.append(feedback)
    if session.game_over:
        embeds.append(build_game_over_embed(session))
    return embeds
