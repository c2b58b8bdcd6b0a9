"""
Bot-wide constants for the Division Tracker bot.

Endpoint URLs, fixed request header values and dataset identifiers used by
the stats pipeline live here so that the services only carry behaviour.
"""

class UbiConstants:
    """Constants for the Ubisoft services API."""

    HOST = "public-ubiservices.ubi.com"
    LOGIN_URL = "https://public-ubiservices.ubi.com/v3/profiles/sessions"
    PROFILES_URL = "https://public-ubiservices.ubi.com/v2/profiles"
    STATS_CARD_URL = "https://public-ubiservices.ubi.com/v1/profiles/{profile_id}/statscard"

    PLATFORM_TYPE = "uplay"
    AUTH_SCHEME = "Ubi_v1"

    # Fixed header values sent with every request
    USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/113.0.0.0 Safari/537.36"
    CONTENT_TYPE = "application/json; charset=utf-8"
    ACCEPT = "application/json, text/plain, */*"
    REQUESTED_WITH = "XMLHttpRequest"
    CACHE_CONTROL = "no-cache"
    LOCALE = "en-US"
    REFERER = "https://connect.ubisoft.com"
    ENCODING = "gzip, deflate"
    APP_ID = "314d4fef-e568-454a-ae06-43e3bece12a6"

    # Ticket that is already expired, used until the first login
    EXPIRED_TICKET_EXPIRATION = "2015-11-12T00:00:00.0000000Z"

class SpaceIds:
    """Stats card dataset identifiers per game."""

    DIVISION_1 = "6edd234a-abff-4e90-9aab-b9b9c6e49ff7"

class TrackerConstants:
    """Constants for the tracker.gg profile pages."""

    DIVISION_2_PROFILE_URL = "https://api.tracker.gg/api/v2/division-2/standard/profile/uplay/"

    BROWSER_ARGS = [
        "--ssl-protocol=any",
        "--ignore-ssl-errors=true",
        "--disable-extensions",
        "--disable-infobars",
    ]
    VIEWPORT = {"width": 1280, "height": 720}

class Games:
    """Game selectors accepted by the tracker command."""

    DIVISION_1 = 1
    DIVISION_2 = 2

    NAMES = {
        DIVISION_1: "The Division",
        DIVISION_2: "The Division 2",
    }

class UIConstants:
    """Constants for Discord UI elements."""

    DIVISION_1_COLOR = 0xf39c12  # Orange
    DIVISION_2_COLOR = 0xe67e22  # Dark orange

    # Discord allows at most 10 embeds per message
    MAX_EMBEDS_PER_MESSAGE = 10
