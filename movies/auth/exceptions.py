"""Exceptions raised while authenticating and authorizing requests."""


class AuthenticationFailed(RuntimeError):
    """The request does not carry a usable credential."""


class MissingToken(AuthenticationFailed):
    """No credential was found on the request."""


class InvalidToken(AuthenticationFailed):
    """The credential is malformed or lacks required claims."""


class InvalidSignature(InvalidToken):
    """The credential was not signed by a trusted key."""


class InvalidIssuer(InvalidToken):
    """The credential was issued by someone we don't trust."""


class InvalidAudience(InvalidToken):
    """The credential was issued for some other audience."""


class ExpiredToken(InvalidToken):
    """The credential has expired."""


class InsufficientPermission(RuntimeError):
    """The caller is authenticated, but may not perform the action."""


class KeyUnavailable(RuntimeError):
    """Signing keys could not be retrieved from the issuer."""


class ConfigurationError(RuntimeError):
    """The application is not configured correctly."""
