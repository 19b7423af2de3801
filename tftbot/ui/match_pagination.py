"""
Match Pagination View

Previous/Next buttons for the /tft match browser. Button custom ids carry the
navigation token and are routed by prefix through one dynamic item, so a
click still reaches the session manager after the message's view is gone or
the bot has restarted. Every click is resolved against the server-side
session; an expired session or a malformed token answers with an ephemeral
notice instead of stale data.
"""

import io
import re

import discord
from discord.ui import Button, DynamicItem, View

from tftbot.constants import UIConstants
from tftbot.data_models.history import MatchFrame
from tftbot.services.session import SESSION_PREFIX, TOKEN_SEPARATOR, Direction, NavigationAction
from tftbot.utils.embeds import MATCH_IMAGE_NAME, build_match_embed
from tftbot.utils.exceptions import ClimbBotError
from tftbot.utils.logger import setup_logger

logger = setup_logger(__name__)

NAVIGATION_TEMPLATE = re.compile(rf"(?P<token>{SESSION_PREFIX}{TOKEN_SEPARATOR}.*)")

BUTTON_LABELS = {
    Direction.PREVIOUS: UIConstants.PREVIOUS_LABEL,
    Direction.NEXT: UIConstants.NEXT_LABEL,
}


def build_frame_file(frame: MatchFrame) -> discord.File:
    return discord.File(io.BytesIO(frame.image), filename=MATCH_IMAGE_NAME)


class MatchNavigationButton(DynamicItem[Button], template=NAVIGATION_TEMPLATE):
    """A Previous or Next button; any custom id with the session prefix lands here."""

    def __init__(self, token: str, *, label: str = None, disabled: bool = False):
        super().__init__(Button(
            label=label or UIConstants.NEXT_LABEL,
            style=discord.ButtonStyle.primary,
            custom_id=token,
            disabled=disabled,
        ))
        self.token = token

    @classmethod
    def for_action(cls, action: NavigationAction, disabled: bool = False) -> "MatchNavigationButton":
        return cls(action.encode(), label=BUTTON_LABELS[action.direction], disabled=disabled)

    @classmethod
    async def from_custom_id(cls, interaction: discord.Interaction, item: Button, match: re.Match):
        # Decoding happens in the callback so a bad token still gets a reply
        return cls(match['token'], label=item.label, disabled=item.disabled)

    async def callback(self, interaction: discord.Interaction):
        """Resolve the click against its session and show the new frame."""
        await interaction.response.defer()

        tft_cog = interaction.client.get_cog('TFTCog')
        if tft_cog is None:
            logger.error(f"Navigation {self.token} received while TFTCog is not loaded")
            await interaction.followup.send("❌ Match browsing is unavailable right now.", ephemeral=True)
            return

        try:
            action = NavigationAction.decode(self.token)
            frame = await tft_cog.history_service.navigate(action)
        except ClimbBotError as e:
            logger.info(f"Navigation {self.token} by {interaction.user.id} rejected: {e}")
            await interaction.followup.send(e.user_message, ephemeral=True)
            return
        except Exception as e:
            logger.error(f"Error navigating {self.token}: {e}", exc_info=True)
            await interaction.followup.send("❌ An error occurred while loading the match.", ephemeral=True)
            return

        await interaction.edit_original_response(
            embed=build_match_embed(frame),
            attachments=[build_frame_file(frame)],
            view=MatchPaginationView(frame)
        )


class MatchPaginationView(View):
    """Navigation buttons for one frame of a browse session."""

    def __init__(self, frame: MatchFrame):
        # Sessions expire server-side; the buttons stay clickable and report it
        super().__init__(timeout=None)

        self.previous_button = MatchNavigationButton.for_action(
            NavigationAction(frame.session_key, Direction.PREVIOUS),
            disabled=not frame.has_previous
        )
        self.add_item(self.previous_button)

        self.next_button = MatchNavigationButton.for_action(
            NavigationAction(frame.session_key, Direction.NEXT),
            disabled=not frame.has_next
        )
        self.add_item(self.next_button)
