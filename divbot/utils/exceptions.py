"""
Custom exceptions for the stats pipeline with user-friendly error messages.

Every exception carries a log message and a ``user_message`` that the
command layer can send back to the channel as-is.
"""

from typing import Optional


class TrackerException(Exception):
    """Base exception for tracker-related errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message


class UnsupportedGameError(TrackerException):
    """Raised when the game selector is neither 1 nor 2."""
    def __init__(self, game):
        super().__init__(
            f"Unsupported game selector: {game}",
            "❌ Game must be 1 (The Division) or 2 (The Division 2)."
        )


# Authentication

class AuthError(TrackerException):
    """Base class for Ubisoft session errors."""


class LoginFailedError(AuthError):
    """Raised when a single login attempt is rejected by the sessions endpoint."""
    def __init__(self, error_code=None, details: str = None):
        self.error_code = error_code
        super().__init__(
            f"Ubisoft login rejected (errorCode={error_code}): {details}",
            "❌ Could not log in to Ubisoft services. Please try again later."
        )


class RenewalExhaustedError(AuthError):
    """Raised when the ticket is still expired after every login attempt."""
    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Failed to renew Ubisoft ticket after {attempts} attempts",
            "❌ Could not log in to Ubisoft services. Please try again later."
        )


# Resolution

class ResolveError(TrackerException):
    """Base class for name to profile resolution errors."""


class PlayerNotFoundError(ResolveError):
    """Raised when neither the API nor the local cache knows the name."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Failed to find player {name} by either api or db",
            f"❌ Player '{name}' not found."
        )


class UbiApiError(TrackerException):
    """Raised when a profile directory lookup answers with an errorCode."""
    def __init__(self, url: str, error_code=None, details: str = None):
        self.url = url
        self.error_code = error_code
        super().__init__(
            f"Ubisoft API error {error_code} for {url}: {details}",
            "❌ Ubisoft services returned an error. Please try again later."
        )


# Fetching

class FetchError(TrackerException):
    """Base class for stats retrieval errors."""


class UpstreamError(FetchError):
    """Raised when the stats API reports an error for a profile; fatal to the batch."""
    def __init__(self, profile_id: str, error_code=None):
        self.profile_id = profile_id
        self.error_code = error_code
        super().__init__(
            f"Failed to get stats for user {profile_id} (errorCode={error_code})",
            "❌ Ubisoft services refused the stats request. Please try again later."
        )


class NoProfileForGameError(FetchError):
    """Raised when a player exists but has no data for the requested game."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"player {name} exists but no profile for this game",
            f"❌ Player '{name}' exists but has no profile for this game."
        )


class FetchFailedError(FetchError):
    """Raised when every fetch task of a batch failed."""
    def __init__(self, name: str, attempted: int):
        self.name = name
        self.attempted = attempted
        super().__init__(
            f"All {attempted} stats fetches failed for player {name}",
            f"❌ Could not fetch stats for '{name}'. Please try again later."
        )


class TransientFetchError(FetchError):
    """Per-profile failure that is dropped from the batch instead of aborting it."""


class PayloadParseError(TransientFetchError):
    """Raised when a stats payload cannot be decoded."""
    def __init__(self, source: str, details: str = None):
        super().__init__(f"Could not parse stats payload from {source}: {details}")


class BrowserFetchError(TransientFetchError):
    """Raised when the browser session fails to render a page."""
    def __init__(self, url: str, details: str = None):
        self.url = url
        super().__init__(f"Browser failed to render {url}: {details}")


class FetchTimeoutError(TransientFetchError):
    """Raised when a single profile fetch exceeds its deadline."""
    def __init__(self, profile_id: str, timeout: Optional[float]):
        self.profile_id = profile_id
        self.timeout = timeout
        super().__init__(f"Stats fetch for user {profile_id} timed out after {timeout}s")
