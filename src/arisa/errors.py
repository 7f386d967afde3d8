"""
Exception hierarchy shared by the cooldown, cache and command layers.

Every error a command can surface to a user derives from :class:`BotError`.
The events cog converts these into ephemeral error embeds; anything else is
treated as an unexpected bug and logged with a traceback.
"""

from __future__ import annotations


class BotError(Exception):
    """Base class for user-facing command errors."""

    def user_message(self) -> str:
        """Return the text shown to the user in the error embed."""
        return f"❌ Error: {self}"


class Throttled(BotError):
    """Raised when a (command, user) pair is still inside its cooldown window."""

    def __init__(self, remaining_seconds: int) -> None:
        self.remaining_seconds = remaining_seconds
        super().__init__(f"Command on cooldown for {remaining_seconds} seconds")

    def user_message(self) -> str:
        return f"⏰ Command on cooldown for {self.remaining_seconds} seconds"


class InputTooLarge(BotError):
    """Raised when user supplied input exceeds ``limits.max_input_size``."""

    def __init__(self, size: int) -> None:
        self.size = size
        super().__init__(f"Input too large: {size} characters")

    def user_message(self) -> str:
        return f"📏 Input too large: {self.size} characters"


class FetchError(BotError):
    """Failure of an external lookup: network, HTTP status, timeout or parse.

    Fetch errors are never cached.
    """


class InvalidFormat(BotError):
    """User input that could not be parsed (CVE id, hex string, colour...)."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Invalid format: {message}")


class ConfigError(BotError):
    """Configuration file could not be read or is malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Configuration error: {message}")
