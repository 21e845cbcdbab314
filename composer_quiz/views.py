"""
Discord message components for playing the quiz.
"""
import logging
from typing import Any, Awaitable, Optional, Protocol, Sequence

import discord

from .models import GameSession

logger = logging.getLogger(__name__)

# Discord limits
MAX_SELECT_OPTIONS = 25
MAX_LABEL_LENGTH = 100

ACTION_SELECT = "select"
ACTION_CHECK = "check"
ACTION_NEXT = "next"
ACTION_START = "start"
ACTION_MEDIA_FAILURE = "media_failure"


class ComponentHandler(Protocol):
    def handle_component(self, interaction: discord.Interaction, action: str,
                         value: Optional[str] = None) -> Awaitable[Any]:
        ...


class ComposerSelect(discord.ui.Select):
    """Drop-down of composers for the current question."""

    def __init__(self, options: Sequence[str], selected: Optional[str], disabled: bool):
        if len(options) > MAX_SELECT_OPTIONS:
            raise ValueError(
                f"{len(options)} composers do not fit a select menu of {MAX_SELECT_OPTIONS}"
            )
        # Values are option indexes, labels may be cut to the Discord limit
        choices = [
            discord.SelectOption(
                label=composer[:MAX_LABEL_LENGTH],
                value=str(index),
                default=composer == selected
            )
            for index, composer in enumerate(options)
        ]
        super().__init__(
            placeholder="Choose a composer...",
            min_values=1,
            max_values=1,
            options=choices,
            disabled=disabled
        )

    async def callback(self, interaction: discord.Interaction):
        await self.view.handler.handle_component(interaction, ACTION_SELECT, self.values[0])


class ActionButton(discord.ui.Button):
    """Button that relays one quiz action."""

    def __init__(self, action: str, label: str, style: discord.ButtonStyle, disabled: bool = False):
        super().__init__(label=label, style=style, disabled=disabled)
        self.action = action

    async def callback(self, interaction: discord.Interaction):
        await self.view.handler.handle_component(interaction, self.action)


class QuizView(discord.ui.View):
    """
    Controls for one channel's game.

    Enabled state mirrors the session: Check Answer needs an unchecked
    selection and Next Question needs a checked answer. The engine enforces
    the same rules on its own.
    """

    def __init__(self, handler: ComponentHandler, session: GameSession,
                 options: Sequence[str], timeout: Optional[float] = 900):
        super().__init__(timeout=timeout)
        self.handler = handler

        if session.game_over or session.current_item is None:
            self.add_item(ActionButton(ACTION_START, "Play Again", discord.ButtonStyle.success))
            return

        self.add_item(ComposerSelect(options, session.selected_option, disabled=session.answer_checked))
        self.add_item(ActionButton(
            ACTION_CHECK, "Check Answer", discord.ButtonStyle.primary,
            disabled=session.selected_option is None or session.answer_checked
        ))
        self.add_item(ActionButton(
            ACTION_NEXT, "Next Question", discord.ButtonStyle.secondary,
            disabled=not session.answer_checked
        ))
        self.add_item(ActionButton(ACTION_START, "Start New Game", discord.ButtonStyle.success))
        self.add_item(ActionButton(
            ACTION_MEDIA_FAILURE, "Audio won't play", discord.ButtonStyle.danger,
            disabled=session.media_unavailable
        ))


def option_from_value(options: Sequence[str], value: Optional[str]) -> Optional[str]:
    """Map a relayed select value back to its composer, or None if it is stale."""
    if value is None or not value.isdecimal() or int(value) >= len(options):
        logger.debug(f"Ignoring stale select value {value!r}")
        return None
    return options[int(value)]
