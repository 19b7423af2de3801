import os
from datetime import datetime, timezone
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Bot configuration settings"""

    # Discord settings
    DISCORD_TOKEN = os.getenv('DISCORD_TOKEN')
    DISCORD_GUILD_ID = int(os.getenv('DISCORD_GUILD_ID', 0))
    DISCORD_GUILD_IDS = os.getenv('DISCORD_GUILD_IDS', '')  # Comma-separated for multi-guild support
    OWNER_DISCORD_ID = int(os.getenv('OWNER_DISCORD_ID', 0))

    # Bot settings
    COMMAND_PREFIX = os.getenv('COMMAND_PREFIX', '!')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'

    # Riot API settings
    RIOT_API_KEY = os.getenv('RIOT_API_KEY')
    RIOT_REGIONAL_HOST = os.getenv('RIOT_REGIONAL_HOST', 'americas.api.riotgames.com')
    RIOT_PLATFORM_HOST = os.getenv('RIOT_PLATFORM_HOST', 'na1.api.riotgames.com')
    RIOT_MAX_CONCURRENCY = int(os.getenv('RIOT_MAX_CONCURRENCY', 5))
    RIOT_REQUEST_DELAY = float(os.getenv('RIOT_REQUEST_DELAY', 0.05))  # Pause between upstream calls
    RIOT_TIMEOUT = float(os.getenv('RIOT_TIMEOUT', 10))
    DDRAGON_VERSION = os.getenv('DDRAGON_VERSION', '15.24.1')

    # Ranked season settings
    SEASON_START = os.getenv('SEASON_START', '2025-12-03')  # Rank reset, earlier games are ignored
    RANKED_QUEUE_TYPE = 'RANKED_TFT'
    DOUBLE_UP_QUEUE_TYPE = 'RANKED_TFT_DOUBLE_UP'
    DOUBLE_UP_GAME_TYPE = 'pairs'

    # Cache settings (seconds)
    CACHE_TTL_IDENTITY = int(os.getenv('CACHE_TTL_IDENTITY', 5 * 60))
    CACHE_TTL_MATCH_LIST = int(os.getenv('CACHE_TTL_MATCH_LIST', 30 * 60))
    CACHE_TTL_MATCH_DETAIL = int(os.getenv('CACHE_TTL_MATCH_DETAIL', 15 * 60))
    CACHE_TTL_FRAME = int(os.getenv('CACHE_TTL_FRAME', 30 * 60))
    CACHE_TTL_IMAGE = int(os.getenv('CACHE_TTL_IMAGE', 60 * 60))
    SESSION_TTL = int(os.getenv('SESSION_TTL', 30 * 60))
    CACHE_SWEEP_INTERVAL = int(os.getenv('CACHE_SWEEP_INTERVAL', 5 * 60))

    # Command limits
    COMMAND_TIMEOUT = float(os.getenv('COMMAND_TIMEOUT', 60))  # Seconds per command before giving up
    TFT_DEFAULT_MATCHES = 5
    TFT_MAX_MATCHES = 20
    CLIMB_DEFAULT_MATCHES = 50
    CLIMB_MIN_MATCHES = 10
    CLIMB_MAX_MATCHES = 100
    STATS_DEFAULT_MATCHES = 20
    STATS_MIN_MATCHES = 5
    STATS_MAX_MATCHES = 50

    @classmethod
    def get_guild_ids(cls):
        """Get list of guild IDs for command syncing"""
        if cls.DISCORD_GUILD_IDS:
            try:
                return [int(guild_id.strip()) for guild_id in cls.DISCORD_GUILD_IDS.split(',') if guild_id.strip()]
            except ValueError:
                raise ValueError("DISCORD_GUILD_IDS must be comma-separated integers")
        elif cls.DISCORD_GUILD_ID:
            return [cls.DISCORD_GUILD_ID]
        else:
            # Global sync
            return []

    @classmethod
    def season_cutoff_ms(cls) -> int:
        """Epoch milliseconds of SEASON_START (UTC midnight)"""
        start = datetime.fromisoformat(cls.SEASON_START)
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        return int(start.timestamp() * 1000)

    @classmethod
    def validate(cls):
        """Validate that required configuration is present"""
        if not cls.DISCORD_TOKEN:
            raise ValueError("DISCORD_TOKEN is required")
        if not cls.RIOT_API_KEY:
            raise ValueError("RIOT_API_KEY is required")
        if not cls.OWNER_DISCORD_ID:
            raise ValueError("OWNER_DISCORD_ID is required")
        # Fails early on a malformed date instead of on the first /tft-climb
        cls.season_cutoff_ms()
