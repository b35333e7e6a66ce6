# sheetchat/core/errors.py


class SheetChatError(Exception):
    """Base class for every error raised by the chat client."""


class ConfigurationError(SheetChatError):
    """Bad user input or configuration. Raised before any network call."""


class MessageTooLong(ConfigurationError):
    pass


class TransportError(SheetChatError):
    """Token, read or append request against the backing store failed."""


class ConnectError(SheetChatError):
    pass


class NotConnectedError(SheetChatError):
    pass
