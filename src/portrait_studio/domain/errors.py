"""Domain exceptions surfaced to chat users or operators."""


class PortraitStudioError(Exception):
    """Base class for expected, user-reportable failures."""


class AuthorizationDeniedError(PortraitStudioError):
    """The user has not been approved by the admin."""


class PreconditionUnmetError(PortraitStudioError):
    """A generation request is missing required session state.

    The message is a corrective instruction meant for the user.
    """


class QuotaExceededError(PortraitStudioError):
    """A generation batch would push the user over the daily limit."""

    def __init__(self, used: int, limit: int, requested: int) -> None:
        self.used = used
        self.limit = limit
        self.requested = requested
        super().__init__(
            f"Daily limit exceeded: used {used}/{limit}, requested {requested}"
        )


class SourceUnavailableError(PortraitStudioError):
    """The image source could not be reached or returned an unusable shape."""


class ConfigurationMissingError(PortraitStudioError):
    """Required startup configuration is absent."""


class StorageUnreadableError(PortraitStudioError):
    """A persisted JSON document could not be read as a mapping."""
