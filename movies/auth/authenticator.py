"""Verifies bearer tokens against the configured issuer and audience."""

from typing import Any, Dict, List, Optional

import jwt
from flask import Flask, current_app
from retry import retry

from . import exceptions, tokens
from .. import domain, logging
from ..context import get_application_config

logger = logging.getLogger(__name__)

EXTENSION = 'movies_auth'
READ_POLICIES = ('authenticated', 'public')


def get_issuers(config: Any) -> List[str]:
    """
    Get the ``iss`` values that we trust.

    ``AUTH_ISSUER``, when set, is matched exactly. Otherwise the issuer is
    ``AUTH_ISSUER_BASE_URL``, with or without a trailing slash: Auth0 adds
    one, most other OpenID providers don't.
    """
    if config.get('AUTH_ISSUER'):
        return [config['AUTH_ISSUER']]
    base_url = (config.get('AUTH_ISSUER_BASE_URL') or '').rstrip('/')
    return [f'{base_url}/', base_url]


def get_jwks_url(config: Any) -> str:
    """Get the URL of the issuer's signing key set."""
    if config.get('AUTH_JWKS_URL'):
        return config['AUTH_JWKS_URL']
    base_url = (config.get('AUTH_ISSUER_BASE_URL') or '').rstrip('/')
    return f'{base_url}/.well-known/jwks.json'


def get_algorithms(config: Any) -> List[str]:
    """Get the signing algorithms that we accept."""
    if config.get('JWT_SECRET'):
        return ['HS256']
    return str(config.get('AUTH_ALGORITHMS') or 'RS256').split()


def parse_authorization(header: Optional[str]) -> str:
    """
    Get the token from an ``Authorization: Bearer <token>`` header.

    Raises
    ------
    :class:`.exceptions.MissingToken`
    :class:`.exceptions.InvalidToken`

    """
    if not header:
        raise exceptions.MissingToken('No Authorization header')
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != 'bearer':
        raise exceptions.InvalidToken('Authorization header is malformed')
    return parts[1]


class Auth(object):
    """Verifies bearer tokens on behalf of a Flask application."""

    def __init__(self, app: Optional[Flask] = None) -> None:
        """
        Initialize ``app`` with token verification.

        Parameters
        ----------
        app : :class:`Flask`

        """
        self._jwks_clients: Dict[str, jwt.PyJWKClient] = {}
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """
        Set configuration defaults, and register the extension on ``app``.

        Raises
        ------
        :class:`.exceptions.ConfigurationError`
            If the issuer or audience is missing, or the read policy is not
            one that we know about.

        """
        config = get_application_config(app)
        config.setdefault('AUTH_ALGORITHMS', 'RS256')
        config.setdefault('AUTH_LEEWAY', 0)
        config.setdefault('AUTH_PERMISSIONS_CLAIM', 'permissions')
        config.setdefault('READ_POLICY', 'authenticated')
        if not config.get('AUTH_ISSUER_BASE_URL') \
                or not config.get('AUTH_AUDIENCE'):
            raise exceptions.ConfigurationError('Issuer and audience must '
                                                'both be set')
        if config['READ_POLICY'] not in READ_POLICIES:
            raise exceptions.ConfigurationError(
                f'Unknown READ_POLICY: {config["READ_POLICY"]}'
            )
        if config.get('JWT_SECRET'):
            logger.warning('JWT_SECRET is set; verifying tokens with a '
                           'shared secret. Do not do this in production.')
        app.extensions[EXTENSION] = self

    def _jwks_client(self, url: str) -> jwt.PyJWKClient:
        if url not in self._jwks_clients:
            self._jwks_clients[url] = jwt.PyJWKClient(url)
        return self._jwks_clients[url]

    @retry(jwt.exceptions.PyJWKClientConnectionError, tries=3, delay=0.5,
           backoff=2)
    def _fetch_signing_key(self, url: str, token: str) -> Any:
        return self._jwks_client(url).get_signing_key_from_jwt(token).key

    def get_signing_key(self, token: str) -> Any:
        """
        Get the key that ``token`` should have been signed with.

        Raises
        ------
        :class:`.exceptions.InvalidToken`
            If the token header can't be read.
        :class:`.exceptions.InvalidSignature`
            If the issuer has no key matching the token.
        :class:`.exceptions.KeyUnavailable`
            If the issuer's key set can't be retrieved.

        """
        config = get_application_config()
        secret = config.get('JWT_SECRET')
        if secret:
            return secret
        url = get_jwks_url(config)
        try:
            return self._fetch_signing_key(url, token)
        except jwt.exceptions.PyJWKClientConnectionError as e:
            logger.error('Could not retrieve signing keys from %s: %s', url, e)
            raise exceptions.KeyUnavailable('Signing keys unavailable') from e
        except jwt.exceptions.PyJWKClientError as e:
            raise exceptions.InvalidSignature('No matching signing key') from e
        except jwt.exceptions.InvalidTokenError as e:
            raise exceptions.InvalidToken('Token header is malformed') from e

    def authenticate(self, header: Optional[str]) -> domain.Identity:
        """
        Verify the credential in an ``Authorization`` header.

        Parameters
        ----------
        header : str or None
            Value of the ``Authorization`` request header.

        Returns
        -------
        :class:`.domain.Identity`

        Raises
        ------
        :class:`.exceptions.AuthenticationFailed`
            Or one of its more specific subclasses.

        """
        token = parse_authorization(header)
        config = get_application_config()
        return tokens.decode(
            token,
            self.get_signing_key(token),
            issuer=get_issuers(config),
            audience=config['AUTH_AUDIENCE'],
            algorithms=get_algorithms(config),
            leeway=int(config.get('AUTH_LEEWAY') or 0),
            permissions_claim=config.get('AUTH_PERMISSIONS_CLAIM',
                                         'permissions')
        )


def current_auth() -> Auth:
    """Get the :class:`.Auth` extension of the current application."""
    try:
        return current_app.extensions[EXTENSION]    # type: ignore
    except KeyError as e:
        raise exceptions.ConfigurationError('Auth is not initialized') from e


def authenticate(header: Optional[str]) -> domain.Identity:
    """Verify the credential in ``header`` using the current application."""
    return current_auth().authenticate(header)
