"""
Helper script for generating a development bearer token.

The token is signed with the shared ``JWT_SECRET``, so it will only be
accepted by an instance of the app that is running with the same secret (and
the same issuer and audience).

.. code-block:: bash

   $ JWT_SECRET=foosecret movies-token
   Subject [dev-user]:
   Permissions (space delim) [manage:movies]:

   eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.eyJzdWIiOiJkZXYtdXNlciIsImlz...


Start the dev server with:

.. code-block:: bash

   $ JWT_SECRET=foosecret python app.py


Use the token in your requests to protected endpoints, with the header
``Authorization: Bearer [token]``.
"""

import os
from datetime import datetime, timedelta

import click
from pytz import UTC

from . import config
from .auth import permissions, tokens
from .auth.authenticator import get_issuers


@click.command()
@click.option('--subject', prompt='Subject', default='dev-user')
@click.option('--permission', 'granted', prompt='Permissions (space delim)',
              default=permissions.MANAGE_MOVIES)
@click.option('--lifetime', default=36000, help='Validity in seconds.')
def generate_token(subject: str, granted: str, lifetime: int) -> None:
    """Generate a bearer token for dev/testing purposes."""
    secret = os.environ.get('JWT_SECRET')
    if not secret:
        raise click.UsageError('Set JWT_SECRET in the environment')
    now = datetime.now(tz=UTC)
    claims = {
        'sub': subject,
        'iss': get_issuers(vars(config))[0],
        'aud': config.AUTH_AUDIENCE,
        'iat': int(now.timestamp()),
        'exp': int((now + timedelta(seconds=lifetime)).timestamp()),
        'permissions': granted.split()
    }
    click.echo(tokens.encode(claims, secret))


if __name__ == '__main__':
    generate_token()
