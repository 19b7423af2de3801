"""
Match history service for the paginated /tft command.

Starting a browse fetches the match list and every detail once, pins them in a
session and renders the first board. Navigation only re-renders from the
session's details; rendered boards are cached in the ``frames`` tier.
"""

import asyncio
from typing import List

from tftbot.config import Config
from tftbot.data_models.climb import PlayerHeader
from tftbot.data_models.history import MatchFrame
from tftbot.data_models.riot import MatchParticipant
from tftbot.rendering.images import ImageLoader
from tftbot.rendering.match_board import board_image_urls, render_match_board
from tftbot.services.base import BaseService
from tftbot.services.cache import TieredCacheManager
from tftbot.services.riot_client import RiotClient
from tftbot.services.session import NavigationAction, Session, SessionManager
from tftbot.utils.exceptions import NoQualifyingMatchesError
from tftbot.utils.logger import setup_logger
from tftbot.utils.riot_id import parse_riot_id

logger = setup_logger(__name__)


class MatchHistoryService(BaseService):
    """Creates browse sessions and renders their pages."""

    def __init__(self, riot_client: RiotClient, caches: TieredCacheManager,
                 sessions: SessionManager, image_loader: ImageLoader):
        super().__init__(riot_client, caches)
        self.sessions = sessions
        self.image_loader = image_loader

    async def start(self, owner_id: int, riot_id: str, count: int) -> MatchFrame:
        """
        Open a session on a player's most recent matches.

        Args:
            owner_id: Discord user who ran the command
            riot_id: Raw ``Name#TAG`` input
            count: Matches to page through

        Returns:
            The frame for the newest match

        Raises:
            InvalidRiotIdError: Malformed Riot ID, nothing fetched
            UpstreamUnavailableError: Identity or match list fetch failed
            NoQualifyingMatchesError: No match could be loaded
        """
        parsed = parse_riot_id(riot_id)
        account, summoner = await self.get_player(parsed)
        ranked_display = await self.get_ranked_display(account.puuid, Config.RANKED_QUEUE_TYPE)
        player = self.build_header(account, summoner, ranked_display)

        match_ids = await self.get_match_ids(account.puuid, count)
        details, _ = await self.get_match_details(match_ids)

        # Keep list order, drop matches that failed or do not include the player
        playable: List[str] = [
            match_id for match_id in match_ids
            if match_id in details and details[match_id].participant(account.puuid) is not None
        ]
        if not playable:
            raise NoQualifyingMatchesError(
                f"{account.riot_id} has no loadable matches",
                "❌ No recent matches found."
            )

        session_key = self.sessions.create(owner_id, playable, details, player)
        logger.info(f"User {owner_id} browsing {len(playable)} matches of {account.riot_id}")
        return await self.render_frame(self.sessions.get(session_key))

    async def navigate(self, action: NavigationAction) -> MatchFrame:
        """
        Move a session one match and render the new page.

        Raises:
            SessionExpiredError: Unknown or expired session
            OutOfRangeError: Already at the first or last match
        """
        session = self.sessions.handle(action)
        return await self.render_frame(session)

    async def render_frame(self, session: Session) -> MatchFrame:
        detail = session.current_detail
        participant = detail.participant(session.player.puuid)

        image = await self.cached(
            self.caches.frames, (detail.match_id, session.player.puuid),
            lambda: self.render_board(participant)
        )

        return MatchFrame(
            session_key=session.session_key,
            cursor=session.cursor,
            total=session.size,
            player=session.player,
            detail=detail,
            participant=participant,
            image=image,
        )

    async def render_board(self, participant: MatchParticipant) -> bytes:
        images = await self.image_loader.load_many(board_image_urls(participant))
        return await asyncio.to_thread(render_match_board, participant, images)
