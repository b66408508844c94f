"""
Authentication and permission checks for Flask routes.

This module provides :func:`scoped`, a decorator factory used to protect Flask
routes. Each request to a decorated route passes through these steps, stopping
at the first one that fails:

- If the route allows public access and ``READ_POLICY`` is ``public``, the
  route is called without looking at any credential.
- The bearer token in the ``Authorization`` header is verified. If it is
  missing or not valid, :class:`Unauthorized` is raised.
- If a permission is required, the verified identity is checked for it. If it
  is absent, :class:`Forbidden` is raised.
- The identity is attached to the request as ``request.auth``, and the route
  is called with its original parameters.

For example:

.. code-block:: python

   from movies.auth import permissions
   from movies.auth.decorators import scoped


   @blueprint.route('/movies', methods=['POST'])
   @scoped(permissions.MANAGE_MOVIES)
   def create_movie() -> tuple:
       ...

"""

from functools import wraps
from typing import Any, Callable, Optional

from flask import request
from werkzeug.exceptions import Forbidden, Unauthorized

from .. import logging
from ..context import get_application_config
from .authenticator import authenticate
from .exceptions import AuthenticationFailed, InsufficientPermission
from .permissions import authorize

logger = logging.getLogger(__name__)


def reads_are_public() -> bool:
    """Whether the application lets anyone read without a credential."""
    return get_application_config().get('READ_POLICY') == 'public'


def scoped(required: Optional[str] = None,
           allow_public: bool = False) -> Callable:
    """
    Generate a decorator to enforce authentication and permissions.

    Parameters
    ----------
    required : str
        The permission required to use the decorated route. See
        :mod:`movies.auth.permissions`. If not provided, any authenticated
        caller may use the route.
    allow_public : bool
        If ``True``, the route skips authentication entirely when the
        application's ``READ_POLICY`` is ``public``.

    Returns
    -------
    function
        A decorator that enforces the read policy and the required permission.

    """
    def protector(func: Callable) -> Callable:
        """Decorator that provides permission enforcement."""
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            """
            Check the authorization token before executing the route.

            Raises
            ------
            :class:`.Unauthorized`
                Raised when the credential is missing or not valid.
            :class:`.Forbidden`
                Raised when the caller lacks the required permission.

            """
            if allow_public and reads_are_public():
                logger.debug('Route is public; skipping authentication')
                request.auth = None
                return func(*args, **kwargs)

            try:
                identity = authenticate(request.headers.get('Authorization'))
            except AuthenticationFailed as e:
                logger.debug('Authentication failed: %s', e)
                raise Unauthorized('Invalid or missing credentials') from e

            try:
                authorize(identity, required)
            except InsufficientPermission as e:
                logger.debug('Caller %s is not authorized for %s',
                             identity.subject, required)
                raise Forbidden('Insufficient scope for this resource') from e

            logger.debug('Request is authorized, proceeding')
            request.auth = identity
            return func(*args, **kwargs)
        return wrapper
    return protector
