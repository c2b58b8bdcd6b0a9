"""
Ubisoft services HTTP client.

Thin aiohttp wrapper around the sessions, profile directory and stats card
endpoints. It knows the fixed header set and the response shapes; ticket
lifetime is handled by ``SessionManager``.
"""

import base64
from typing import Any, Dict, List, Optional

import aiohttp

from divbot.constants import UbiConstants
from divbot.data_models.stats import ProfileRef, Ticket
from divbot.utils.exceptions import LoginFailedError, PayloadParseError, UbiApiError
from divbot.utils.time_parser import parse_ubi_timestamp
from divbot.utils.logger import setup_logger

logger = setup_logger(__name__)


def get_common_headers() -> Dict[str, str]:
    """Headers sent with every Ubisoft services request."""
    return {
        "Content-Type": UbiConstants.CONTENT_TYPE,
        "User-Agent": UbiConstants.USER_AGENT,
        "Accept": UbiConstants.ACCEPT,
        "Host": UbiConstants.HOST,
        "Cache-Control": UbiConstants.CACHE_CONTROL,
        "Accept-Language": UbiConstants.LOCALE,
        "Accept-Encoding": UbiConstants.ENCODING,
        "Referer": UbiConstants.REFERER,
        "Origin": UbiConstants.REFERER,
        "Ubi-AppId": UbiConstants.APP_ID,
        "Ubi-RequestedPlatformType": UbiConstants.PLATFORM_TYPE,
        "Ubi-LocaleCode": UbiConstants.LOCALE,
        "X-Requested-With": UbiConstants.REQUESTED_WITH,
    }


def get_auth_headers(ticket: Ticket) -> Dict[str, str]:
    """Common headers plus the ticket and session id."""
    headers = get_common_headers()
    headers["Authorization"] = f"{UbiConstants.AUTH_SCHEME} t={ticket.ticket}"
    headers["Ubi-SessionId"] = ticket.session_id
    return headers


class UbiClient:
    """Client for the Ubisoft profile and stats endpoints."""

    def __init__(self, http: aiohttp.ClientSession, username: str, password: str):
        self.http = http
        self._username = username
        self._password = password

    async def login(self) -> Ticket:
        """
        Open a new Ubisoft session with Basic credentials.

        Raises:
            LoginFailedError: If the endpoint answers with an errorCode or an incomplete body
        """
        credentials = base64.b64encode(f"{self._username}:{self._password}".encode()).decode()
        headers = get_common_headers()
        headers["Authorization"] = f"Basic {credentials}"

        async with self.http.post(UbiConstants.LOGIN_URL, headers=headers) as resp:
            try:
                body = await resp.json(content_type=None)
            except ValueError as e:
                raise LoginFailedError(details=f"invalid JSON (HTTP {resp.status})") from e

        if not isinstance(body, dict):
            raise LoginFailedError(details="unexpected response body")
        if body.get("errorCode") is not None:
            logger.error(f"Ubisoft login failed: {body}")
            raise LoginFailedError(body.get("errorCode"), body.get("message"))

        try:
            return Ticket(
                ticket=body["ticket"],
                session_id=body["sessionId"],
                expires_at=parse_ubi_timestamp(body["expiration"]),
            )
        except (KeyError, ValueError) as e:
            raise LoginFailedError(details=f"malformed session response: {e}") from e

    async def find_profiles(
        self,
        ticket: Ticket,
        name: Optional[str] = None,
        profile_id: Optional[str] = None,
    ) -> List[ProfileRef]:
        """
        Look up uplay profiles by display name or by profile id.

        Returns:
            Matching profiles with their current names (may be empty)

        Raises:
            ValueError: If neither name nor profile_id is given
            UbiApiError: If the directory answers with an errorCode
        """
        if name is None and profile_id is None:
            raise ValueError("Both name and profile_id are None")

        params = {"platformType": UbiConstants.PLATFORM_TYPE}
        if name is not None:
            params["nameOnPlatform"] = name
        else:
            params["idOnPlatform"] = profile_id

        body = await self._get_json(UbiConstants.PROFILES_URL, ticket, params)
        if body.get("errorCode") is not None:
            raise UbiApiError(UbiConstants.PROFILES_URL, body.get("errorCode"), body.get("message"))

        profiles = []
        for entry in body.get("profiles") or []:
            if not isinstance(entry, dict) or not entry.get("profileId"):
                continue
            profiles.append(ProfileRef(id=entry["profileId"], name=entry.get("nameOnPlatform")))
        return profiles

    async def fetch_stats_card(self, ticket: Ticket, profile_id: str, space_id: str) -> Dict[str, Any]:
        """Fetch the raw stats card response for one profile; errorCode checks are left to the caller."""
        url = UbiConstants.STATS_CARD_URL.format(profile_id=profile_id)
        return await self._get_json(url, ticket, {"spaceId": space_id})

    async def _get_json(self, url: str, ticket: Ticket, params: Dict[str, str]) -> Dict[str, Any]:
        async with self.http.get(url, headers=get_auth_headers(ticket), params=params) as resp:
            try:
                body = await resp.json(content_type=None)
            except ValueError as e:
                raise PayloadParseError(url, f"invalid JSON (HTTP {resp.status})") from e
        if not isinstance(body, dict):
            raise PayloadParseError(url, "expected a JSON object")
        return body
