"""Functions for working with bearer tokens on user/client requests."""

from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, Optional, Sequence, \
    Union

import jwt
from pytz import UTC

from . import exceptions
from .. import domain

REQUIRED_CLAIMS = ['exp', 'iss', 'aud']


def encode(claims: Dict[str, Any], key: Any, algorithm: str = 'HS256',
           headers: Optional[Dict[str, Any]] = None) -> str:
    """Encode ``claims`` as a signed JWT."""
    return jwt.encode(claims, key, algorithm=algorithm, headers=headers)


def get_permissions(claims: Dict[str, Any],
                    claim: str = 'permissions') -> FrozenSet[str]:
    """
    Get the permissions granted by a set of token claims.

    Only the array in ``claim`` counts. The OAuth2 ``scope`` claim is not
    consulted: a client can ask for any scope it likes.
    """
    granted = claims.get(claim) or []
    if not isinstance(granted, (list, tuple)):
        return frozenset()
    return frozenset(p for p in granted if isinstance(p, str))


def to_identity(claims: Dict[str, Any],
                permissions_claim: str = 'permissions') -> domain.Identity:
    """Build an :class:`.domain.Identity` from verified claims."""
    audience = claims['aud']
    if isinstance(audience, str):
        audience = [audience]
    return domain.Identity(
        issuer=claims['iss'],
        audience=tuple(audience),
        expires=datetime.fromtimestamp(int(claims['exp']), tz=UTC),
        permissions=get_permissions(claims, permissions_claim),
        subject=claims.get('sub')
    )


def decode(token: str, key: Any, issuer: Union[str, Sequence[str]],
           audience: str, algorithms: Iterable[str] = ('RS256',),
           leeway: int = 0,
           permissions_claim: str = 'permissions') -> domain.Identity:
    """
    Verify a bearer token and get the identity that it declares.

    Parameters
    ----------
    token : str
        The encoded JWT.
    key
        The key that the token must be signed with.
    issuer : str or sequence
        Expected ``iss`` claim, or several that are all acceptable.
    audience : str
        Expected ``aud`` claim (or one of them).
    algorithms : iterable
        Signing algorithms to accept.
    leeway : int
        Seconds of clock skew tolerated when checking expiry.

    Returns
    -------
    :class:`.domain.Identity`

    Raises
    ------
    :class:`.exceptions.InvalidSignature`
    :class:`.exceptions.InvalidIssuer`
    :class:`.exceptions.InvalidAudience`
    :class:`.exceptions.ExpiredToken`
    :class:`.exceptions.InvalidToken`
        If the token is malformed or lacks a required claim.

    """
    if not isinstance(issuer, str):
        issuer = list(issuer)
    try:
        claims: dict = jwt.decode(token, key, algorithms=list(algorithms),
                                  audience=audience, issuer=issuer,
                                  leeway=leeway,
                                  options={'require': REQUIRED_CLAIMS})
    except jwt.exceptions.InvalidSignatureError as e:
        raise exceptions.InvalidSignature('Signature does not match') from e
    except jwt.exceptions.ExpiredSignatureError as e:
        raise exceptions.ExpiredToken('Token has expired') from e
    except jwt.exceptions.InvalidIssuerError as e:
        raise exceptions.InvalidIssuer('Token issuer is not trusted') from e
    except jwt.exceptions.InvalidAudienceError as e:
        raise exceptions.InvalidAudience('Token audience is wrong') from e
    except jwt.exceptions.InvalidTokenError as e:
        raise exceptions.InvalidToken(f'Not a valid token: {e}') from e
    return to_identity(claims, permissions_claim)
