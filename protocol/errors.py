class ChatError(Exception):
    """Base class for errors raised by the chat client."""


class ConfigError(ChatError):
    """Configuration could not be resolved (unrecoverable at startup)."""


class SendError(ChatError):
    """An outbound message could not be delivered to the peer."""

    def __init__(self, endpoint, reason):
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(str(reason))


class ListenerError(ChatError):
    """The inbound listener could not bind its port."""
