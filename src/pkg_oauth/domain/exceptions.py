class OAuthError(Exception):
    """Base class for all errors raised by the token core."""
    pass


class InvalidClientError(OAuthError):
    """Raised when a client cannot be authenticated.

    The message is always the bare OAuth error code, so callers cannot tell
    an unknown client id from a wrong secret.
    """

    def __init__(self) -> None:
        super().__init__("invalid_client")


class InvalidTokenError(OAuthError):
    """Raised when a token value cannot be trusted."""
    pass


class MalformedTokenError(InvalidTokenError):
    """Raised when a value is not a signed token structure at all."""
    pass


class InvalidSignatureError(InvalidTokenError):
    """Raised when a signed token structure fails verification."""
    pass


class MissingTokenError(OAuthError):
    """Raised when a protocol endpoint requires a token and none was presented."""
    pass
