"""Exception types raised while handling a notification."""


class AgentError(Exception):
    """Base class for errors that terminate a notification workflow."""


class MalformedNotificationError(AgentError, ValueError):
    """A recognized notification is missing fields its variant requires."""


class MissingCredentialError(AgentError):
    """No Linear access token is available."""

    def __init__(self, message: str = "No access token found. Please complete the OAuth flow first."):
        super().__init__(message)


class LinearAPIError(AgentError):
    """The Linear GraphQL API returned errors or an unsuccessful mutation."""


class CompletionError(AgentError):
    """The completion backend returned no usable reply."""
