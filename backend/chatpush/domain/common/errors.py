"""Domain error types."""
from typing import Optional


class ChatPushError(Exception):
    """Base error for the push dispatch core."""
    pass


class ProfileLookupError(ChatPushError):
    """Profile store unreachable or a profile record is malformed."""
    def __init__(self, message: str, user_id: Optional[str] = None):
        self.message = message
        self.user_id = user_id
        super().__init__(message)


class GatewayError(ChatPushError):
    """Push gateway rejected a send (single target or a whole multicast batch)."""
    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidChangeEventError(ChatPushError):
    """A trigger body could not be turned into a change event."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
