"""
Bot-wide constants for the TFT Climb Discord Bot.

Display tables, placement colors and asset URLs used by embeds and renderers.
"""

class PlacementConstants:
    """Constants related to match placements."""

    # Embed colors keyed by raw lobby placement (1-8)
    PLACEMENT_COLORS = {
        1: 0xFFD700, 2: 0xFFD700,
        3: 0xD4D4D4, 4: 0xD4D4D4,
        5: 0x945E1C, 6: 0x945E1C,
        7: 0x000000, 8: 0x000000,
    }

    PLACEMENT_SUFFIX = {
        1: 'st', 2: 'nd', 3: 'rd', 4: 'th',
        5: 'th', 6: 'th', 7: 'th', 8: 'th',
    }

    # Graph point colors keyed by Double Up team placement (1-4)
    TEAM_PLACEMENT_COLORS = {
        1: '#FFD700',
        2: '#00FF00',
        3: '#FFFF00',
        4: '#FF0000',
    }

    # Top 4 in a standard lobby, top 2 teams in Double Up
    STANDARD_TOP_CUTOFF = 4
    DOUBLE_UP_TOP_CUTOFF = 2

class AssetConstants:
    """Remote image locations used by the renderers."""

    BACKGROUND_URL = 'https://i.imgur.com/aRoCXLa.png'
    PROFILE_ICON_URL = 'https://ddragon.leagueoflegends.com/cdn/{version}/img/profileicon/{icon_id}.png'
    CHAMPION_SQUARE_URL = (
        'https://raw.communitydragon.org/pbe/game/assets/ux/tft/championsplashes/patching/'
        '{champion}_square.tft_set16.png'
    )
    STAR_URLS = {
        2: 'https://raw.communitydragon.org/pbe/game/assets/ux/tft/notificationicons/silverstar.png',
        3: 'https://raw.communitydragon.org/pbe/game/assets/ux/tft/notificationicons/goldstar.png',
    }

class UIConstants:
    """Constants for Discord UI elements."""

    # Embed colors
    DEFAULT_EMBED_COLOR = 0x3498db  # Blue
    GAIN_COLOR = 0x00FF00
    LOSS_COLOR = 0xFF0000

    # Navigation button markers
    PREVIOUS_LABEL = "◀ Previous"
    NEXT_LABEL = "Next ▶"

    # Partners listed in the climb summary
    TOP_PARTNER_COUNT = 3
