import discord
from discord.ext import commands
import logging
import os
from typing import Optional

from .config_manager import ConfigManager
from .data_manager import DataManager
from .presentation import render_session
from .quiz_controller import QuizController
from .views import (
    ACTION_CHECK,
    ACTION_MEDIA_FAILURE,
    ACTION_NEXT,
    ACTION_SELECT,
    ACTION_START,
    QuizView,
    option_from_value,
)

logger = logging.getLogger(__name__)


class QuizBot(commands.Bot):
    """Discord bot that hosts the composer quiz"""

    def __init__(self, config=None):
        # Slash commands and components only need guild events
        intents = discord.Intents.none()
        intents.guilds = True

        command_prefix = '!'
        if config and 'bot' in config:
            command_prefix = config['bot'].get('command_prefix', '!')

        super().__init__(
            command_prefix=command_prefix,
            intents=intents,
            help_command=None
        )

        self.app_config = config or {}

        self.data_manager: Optional[DataManager] = None
        self.config_manager: Optional[ConfigManager] = None
        self.quiz_controller: Optional[QuizController] = None

    async def setup_hook(self):
        """Called when the bot is starting up"""
        logger.info("Setting up bot components...")

        self.config_manager = ConfigManager()
        if self.app_config:
            self.config_manager.apply_config(self.app_config)

        self.data_manager = DataManager(self.config_manager.get_catalog_directory())
        self.load_catalog_data()

        self.quiz_controller = QuizController(self.data_manager, self.config_manager)

        self.setup_commands()
        logger.info("Bot setup completed successfully")

    def load_catalog_data(self):
        """Load catalog files from the configured directory"""
        catalogs = self.data_manager.load_catalog_files()
        summary = self.data_manager.get_loading_summary()
        logger.info(f"Loaded {len(catalogs)} catalogs from {summary['catalog_directory']}")
        for error in summary['errors']:
            logger.warning(f"Catalog load issue: {error}")

    def setup_commands(self):
        """Register all slash commands"""

        @self.tree.command(name="help", description="Display available commands and how to play")
        async def help_command(interaction: discord.Interaction):
            await self.handle_help(interaction)

        @self.tree.command(name="quiz", description="Start a new composer quiz in this channel")
        async def quiz_command(interaction: discord.Interaction):
            await self.handle_quiz(interaction)

        @self.tree.command(name="stop", description="Stop the quiz in this channel")
        async def stop_command(interaction: discord.Interaction):
            await self.handle_stop(interaction)

        @self.tree.command(name="status", description="Show the score and progress of this channel's quiz")
        async def status_command(interaction: discord.Interaction):
            await self.handle_status(interaction)

        logger.info("Slash commands registered successfully")

    async def on_ready(self):
        """Called when the bot has successfully connected to Discord"""
        logger.info(f"Bot is ready! Logged in as {self.user}")
        logger.info(f"Bot is in {len(self.guilds)} guilds")

        try:
            synced = await self.tree.sync()
            logger.info(f"Synced {len(synced)} slash commands")
        except discord.HTTPException as e:
            logger.error(f"Failed to sync slash commands: {e}")

    async def on_error(self, event, *args, **kwargs):
        """Handle general bot errors"""
        logger.error(f"An error occurred in event {event}", exc_info=True)

    def build_view(self, channel_id: int) -> Optional[QuizView]:
        session = self.quiz_controller.get_session(channel_id)
        if session is None:
            return None
        return QuizView(
            self,
            session,
            self.quiz_controller.quiz_engine.options,
            timeout=self.config_manager.get_view_timeout()
        )

    def build_embeds(self, channel_id: int):
        session = self.quiz_controller.get_session(channel_id)
        engine = self.quiz_controller.quiz_engine
        return render_session(session, engine.options, engine.catalog)

    async def handle_help(self, interaction: discord.Interaction):
        """Handle /help command"""
        help_embed = discord.Embed(
            title="🎹 Composer Quiz Commands",
            description="Listen to a clip and guess who composed it",
            color=0x00ff00
        )
        help_embed.add_field(
            name="🎮 Commands",
            value=(
                "`/quiz` - Start a new game in this channel\n"
                "`/status` - Show the current score and progress\n"
                "`/stop` - End the game in this channel\n"
                "`/help` - Show this message"
            ),
            inline=False
        )
        help_embed.add_field(
            name="🎵 How to Play",
            value=(
                "1. Open the clip link and listen\n"
                "2. Pick a composer from the menu\n"
                "3. Press **Check Answer** to see if you were right\n"
                "4. Press **Next Question** until every clip has been played\n"
                "If a clip won't play, press **Audio won't play** and answer anyway."
            ),
            inline=False
        )
        help_embed.add_field(
            name="⚙️ Current Settings",
            value=f"```\n{self.config_manager.get_settings_summary()}\n```",
            inline=False
        )
        await interaction.response.send_message(embed=help_embed, ephemeral=True)

    async def handle_quiz(self, interaction: discord.Interaction):
        """Handle /quiz command"""
        channel_id = interaction.channel_id
        result = self.quiz_controller.start_game(channel_id)
        if not result['success']:
            await self.send_error_response(interaction, result['user_message'], "❌ Cannot Start Quiz")
            return

        await interaction.response.send_message(
            content=result['user_message'],
            embeds=self.build_embeds(channel_id),
            view=self.build_view(channel_id)
        )

    async def handle_stop(self, interaction: discord.Interaction):
        """Handle /stop command"""
        result = self.quiz_controller.stop_game(interaction.channel_id)
        if not result['success']:
            await self.send_error_response(interaction, result['user_message'], "❌ No Quiz")
            return
        await interaction.response.send_message(result['user_message'])

    async def handle_status(self, interaction: discord.Interaction):
        """Handle /status command"""
        progress = self.quiz_controller.get_session_progress(interaction.channel_id)
        if progress is None:
            await self.send_info_response(
                interaction,
                "No quiz is running in this channel. Use `/quiz` to start one.",
                "📊 Quiz Status"
            )
            return

        embed = discord.Embed(title="📊 Quiz Status", color=0x6699ff)
        embed.add_field(
            name="Score",
            value=f"{progress['score']}/{progress['questions_answered']}",
            inline=True
        )
        embed.add_field(
            name="Progress",
            value=f"Question {progress['question_number']} of {progress['total_items']}",
            inline=True
        )
        embed.add_field(
            name="State",
            value=progress['state'].replace('_', ' ').title(),
            inline=True
        )
        if progress['media_unavailable']:
            embed.add_field(name="🔇 Audio", value="The current clip failed to load", inline=False)
        await interaction.response.send_message(embed=embed, ephemeral=True)

    async def handle_component(self, interaction: discord.Interaction, action: str,
                               value: Optional[str] = None):
        """Relay a button or menu press to the controller and redraw the game"""
        channel_id = interaction.channel_id

        if action == ACTION_START:
            result = self.quiz_controller.start_game(channel_id)
        elif action == ACTION_SELECT:
            composer = None
            if self.quiz_controller.get_session(channel_id) is not None:
                composer = option_from_value(self.quiz_controller.quiz_engine.options, value)
                if composer is None:
                    await self.send_error_response(interaction, "That composer is no longer on the menu.")
                    return
            result = self.quiz_controller.select_option(channel_id, composer)
        elif action == ACTION_CHECK:
            result = self.quiz_controller.check_answer(channel_id)
        elif action == ACTION_NEXT:
            result = self.quiz_controller.next_question(channel_id)
        elif action == ACTION_MEDIA_FAILURE:
            result = self.quiz_controller.report_media_failure(channel_id)
        else:
            logger.error(f"Unknown quiz action '{action}' in channel {channel_id}")
            await self.send_error_response(interaction, "That control is no longer supported.")
            return

        if not result['success']:
            await self.send_error_response(interaction, result['user_message'])
            return

        await self.update_game_message(interaction)

    async def update_game_message(self, interaction: discord.Interaction):
        channel_id = interaction.channel_id
        try:
            await interaction.response.edit_message(
                embeds=self.build_embeds(channel_id),
                view=self.build_view(channel_id)
            )
        except discord.HTTPException as e:
            logger.error(f"Failed to update quiz message in channel {channel_id}: {e}")
            await self.send_error_response(interaction, "Could not update the quiz. Please try again.")

    async def send_error_response(self, interaction: discord.Interaction, message: str, title: str = "❌ Error"):
        """Send formatted error response to user"""
        try:
            embed = discord.Embed(
                title=title,
                description=message,
                color=0xff0000
            )
            embed.set_footer(text="If this error persists, try using /help for available commands")

            if interaction.response.is_done():
                await interaction.followup.send(embed=embed, ephemeral=True)
            else:
                await interaction.response.send_message(embed=embed, ephemeral=True)
        except discord.HTTPException:
            logger.error("Failed to send error response to user")

    async def send_info_response(self, interaction: discord.Interaction, message: str, title: str = "ℹ️ Information"):
        """Send formatted info response to user"""
        try:
            embed = discord.Embed(
                title=title,
                description=message,
                color=0x6699ff
            )

            if interaction.response.is_done():
                await interaction.followup.send(embed=embed, ephemeral=True)
            else:
                await interaction.response.send_message(embed=embed, ephemeral=True)
        except discord.HTTPException:
            logger.error("Failed to send info response to user")


async def run_bot(token=None, config=None):
    """Run the bot with proper error handling"""
    if not token:
        token = os.getenv('DISCORD_BOT_TOKEN')

    if not token:
        logger.error("No Discord bot token provided")
        return

    bot = QuizBot(config)

    try:
        logger.info("Starting Composer Quiz Bot...")
        await bot.start(token)
    except discord.LoginFailure:
        logger.error("Invalid bot token provided")
    except discord.HTTPException as e:
        logger.error(f"HTTP error occurred: {e}")
    finally:
        if not bot.is_closed():
            await bot.close()
