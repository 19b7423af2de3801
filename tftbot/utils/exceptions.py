"""
Custom exceptions for the TFT climb bot with user-friendly error messages.

Every exception carries a log-oriented message and a ``user_message`` that
cogs can show directly in an ephemeral reply.
"""

from typing import Optional


class ClimbBotError(Exception):
    """Base exception for bot errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message


class InvalidRiotIdError(ClimbBotError):
    """Raised when a Riot ID is not in Name#TAG form. Nothing is fetched."""
    def __init__(self, riot_id: str):
        super().__init__(
            f"Malformed Riot ID '{riot_id}'",
            "❌ Invalid Riot ID format. Use: Name#TAG (e.g., Doublelift#NA1)"
        )
        self.riot_id = riot_id


class UpstreamUnavailableError(ClimbBotError):
    """Raised when a Riot API call fails (non-success status or network error)."""
    def __init__(self, operation: str, identifier: str, status: Optional[int] = None):
        detail = f"status {status}" if status is not None else "network failure"
        super().__init__(
            f"Riot API {operation} failed for {identifier}: {detail}",
            self._user_message_for(operation, status)
        )
        self.operation = operation
        self.identifier = identifier
        self.status = status

    @staticmethod
    def _user_message_for(operation: str, status: Optional[int]) -> str:
        if status == 404 and operation == "account":
            return "❌ Riot ID not found. Check the format: Name#TAG (e.g., Doublelift#NA1)"
        if status == 404 and operation == "summoner":
            return "❌ Summoner not found for this region."
        if status == 429:
            return "⏰ The Riot API is rate limiting us. Please try again in a minute."
        return "❌ Could not reach the Riot API. Please try again later."


class NoRankedDataError(ClimbBotError):
    """Raised when the player has no ranked entry to anchor the climb on."""
    def __init__(self, puuid: str):
        super().__init__(
            f"No ranked data for {puuid}",
            "❌ No ranked data found for this summoner."
        )


class NoQualifyingMatchesError(ClimbBotError):
    """Raised when the upstream call succeeded but no match survived filtering."""
    def __init__(self, reason: str = "no matches survived filtering", user_message: str = None):
        super().__init__(
            f"No qualifying matches: {reason}",
            user_message or "❌ No qualifying matches found."
        )


class RecordParseError(ClimbBotError):
    """Raised when an upstream JSON record is missing or mistypes a required field."""
    def __init__(self, record: str, field: str, detail: str = "missing"):
        super().__init__(
            f"Malformed {record} record: field '{field}' {detail}",
            "❌ The Riot API returned data we could not read."
        )
        self.record = record
        self.field = field


class SessionExpiredError(ClimbBotError):
    """Raised when a navigation session is unknown or has expired."""
    def __init__(self, session_key: str):
        super().__init__(
            f"Session {session_key} not found or expired",
            "❌ Session expired. Please run /tft again."
        )
        self.session_key = session_key


class OutOfRangeError(ClimbBotError):
    """Raised when navigation would move the cursor outside the match list."""
    def __init__(self, session_key: str, cursor: int, size: int):
        super().__init__(
            f"Session {session_key}: cursor {cursor} outside [0, {size - 1}]",
            "❌ No more matches in that direction."
        )
        self.cursor = cursor


class InvalidTokenError(ClimbBotError):
    """Raised when a navigation token cannot be decoded."""
    def __init__(self, token: str):
        super().__init__(
            f"Malformed navigation token '{token}'",
            "❌ Invalid button data."
        )
        self.token = token
