"""
Riot ID parsing utilities.

Handles the Name#TAG identity format accepted by every command.
"""

from typing import NamedTuple

from tftbot.utils.exceptions import InvalidRiotIdError


class RiotId(NamedTuple):
    game_name: str
    tag_line: str

    def __str__(self) -> str:
        return f"{self.game_name}#{self.tag_line}"

    @property
    def cache_key(self) -> str:
        """Riot IDs are case-insensitive."""
        return str(self).lower()


def parse_riot_id(riot_id: str) -> RiotId:
    """
    Parse a Riot ID string into its name and tag.

    Supported formats:
    - Name#TAG (e.g., Kuromi#NA1)
    - Names may contain spaces; the tag is everything after the last '#'

    Raises:
        InvalidRiotIdError: If either part is empty or '#' is missing
    """
    if riot_id is None:
        raise InvalidRiotIdError("")

    cleaned = riot_id.strip()
    game_name, separator, tag_line = cleaned.rpartition('#')
    game_name = game_name.strip()
    tag_line = tag_line.strip()

    if not separator or not game_name or not tag_line:
        raise InvalidRiotIdError(riot_id)

    return RiotId(game_name, tag_line)
