import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Bot configuration settings"""

    # Discord settings
    DISCORD_TOKEN = os.getenv('DISCORD_TOKEN')
    DISCORD_GUILD_ID = int(os.getenv('DISCORD_GUILD_ID', 0))
    DISCORD_GUILD_IDS = os.getenv('DISCORD_GUILD_IDS', '')  # Comma-separated for multi-guild support

    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///divtracker.db')

    # Bot settings
    COMMAND_PREFIX = os.getenv('COMMAND_PREFIX', '!')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'

    # Ubisoft account used for the stats API
    UBI_USERNAME = os.getenv('UBI_USERNAME', '')
    UBI_PASSWORD = os.getenv('UBI_PASSWORD', '')

    # Browser used for tracker pages; empty launches a local headless Chromium
    BROWSER_CDP_URL = os.getenv('BROWSER_CDP_URL', '')
    BROWSER_HEADLESS = os.getenv('BROWSER_HEADLESS', 'True').lower() == 'true'

    # Timeouts (seconds)
    HTTP_TIMEOUT = float(os.getenv('HTTP_TIMEOUT', 15))
    BROWSER_TIMEOUT = float(os.getenv('BROWSER_TIMEOUT', 30))
    FETCH_TIMEOUT = float(os.getenv('FETCH_TIMEOUT', 45))
    COMMAND_TIMEOUT = float(os.getenv('COMMAND_TIMEOUT', 90))

    # Fetch pipeline settings
    FETCH_CONCURRENCY = int(os.getenv('FETCH_CONCURRENCY', 5))
    TICKET_RENEWAL_MARGIN_MINUTES = int(os.getenv('TICKET_RENEWAL_MARGIN_MINUTES', 5))
    MAX_LOGIN_ATTEMPTS = int(os.getenv('MAX_LOGIN_ATTEMPTS', 5))

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
    def validate(cls):
        """Validate that required configuration is present"""
        if not cls.DISCORD_TOKEN:
            raise ValueError("DISCORD_TOKEN is required")
        if not cls.UBI_USERNAME or not cls.UBI_PASSWORD:
            raise ValueError("UBI_USERNAME and UBI_PASSWORD are required")
        if cls.FETCH_CONCURRENCY <= 0:
            raise ValueError("FETCH_CONCURRENCY must be a positive integer")
        if cls.MAX_LOGIN_ATTEMPTS <= 0:
            raise ValueError("MAX_LOGIN_ATTEMPTS must be a positive integer")
