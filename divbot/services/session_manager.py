"""
Ubisoft session management.

One ticket is shared by the whole process. Every authenticated call goes
through ``SessionManager.ensure_valid()``, which renews the ticket when it
is expired or about to expire.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Optional

import aiohttp

from divbot.constants import UbiConstants
from divbot.data_models.stats import Ticket
from divbot.utils.exceptions import LoginFailedError, RenewalExhaustedError
from divbot.utils.time_parser import parse_ubi_timestamp, format_timestamp
from divbot.utils.logger import setup_logger

logger = setup_logger(__name__)

EXPIRED_TICKET = Ticket(
    ticket="",
    session_id="",
    expires_at=parse_ubi_timestamp(UbiConstants.EXPIRED_TICKET_EXPIRATION),
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TicketStore:
    """Holds the current ticket; renewals are serialized by ``lock``."""

    def __init__(self, initial: Optional[Ticket] = None):
        self._ticket = initial or EXPIRED_TICKET
        self.lock = asyncio.Lock()

    @property
    def current(self) -> Ticket:
        return self._ticket

    def replace(self, ticket: Ticket):
        self._ticket = ticket


class SessionManager:
    """Keeps the shared ticket valid, renewing it with bounded retries."""

    def __init__(
        self,
        store: TicketStore,
        authenticator: Callable[[], Awaitable[Ticket]],
        clock: Callable[[], datetime] = utc_now,
        margin: timedelta = timedelta(minutes=5),
        max_attempts: int = 5,
    ):
        """
        Args:
            store: Shared ticket store
            authenticator: Coroutine function performing one login and returning a new ticket
            clock: Source of the current aware UTC time
            margin: Tickets expiring within this margin are renewed early
            max_attempts: Login attempts before giving up
        """
        self.store = store
        self.authenticator = authenticator
        self.clock = clock
        self.margin = margin
        self.max_attempts = max_attempts

    def is_expiring(self, ticket: Ticket) -> bool:
        return ticket.expires_at < self.clock() + self.margin

    async def ensure_valid(self) -> Ticket:
        """
        Return a ticket valid for at least ``margin``, renewing it if needed.

        Raises:
            RenewalExhaustedError: If the ticket is still expiring after ``max_attempts`` logins
        """
        ticket = self.store.current
        if not self.is_expiring(ticket):
            return ticket

        async with self.store.lock:
            # Another task may have renewed while we waited for the lock
            ticket = self.store.current
            attempts = 0
            while self.is_expiring(ticket):
                if attempts >= self.max_attempts:
                    logger.error(f"Ubisoft ticket still expired after {attempts} login attempts")
                    raise RenewalExhaustedError(attempts)
                attempts += 1
                try:
                    ticket = await self.authenticator()
                except (LoginFailedError, aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                    logger.warning(f"Login attempt {attempts}/{self.max_attempts} failed: {e}")
                    continue

                self.store.replace(ticket)
                logger.info(
                    f"Renewed Ubi ticket at {format_timestamp(self.clock())}, "
                    f"expires at {format_timestamp(ticket.expires_at)}"
                )
            return ticket
