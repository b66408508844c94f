"""
Permissions that a caller's credential may declare.

Rather than refer to permissions by writing new str objects, these constants
should be imported and used (see :mod:`movies.auth.decorators`).
"""

from typing import Optional

from .exceptions import InsufficientPermission
from .. import domain

MANAGE_MOVIES = 'manage:movies'
"""Authorizes adding, updating and removing movies."""


def authorize(identity: domain.Identity, required: Optional[str]) -> None:
    """
    Check that ``identity`` holds the ``required`` permission.

    Raises
    ------
    :class:`.InsufficientPermission`

    """
    if required is None:
        return
    if required not in identity.permissions:
        raise InsufficientPermission(f'{required} is required')
